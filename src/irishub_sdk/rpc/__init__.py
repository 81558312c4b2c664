"""
Node transport for the IRIS Hub Python SDK.
"""

from .client import TendermintRPC

__all__ = ["TendermintRPC"]
