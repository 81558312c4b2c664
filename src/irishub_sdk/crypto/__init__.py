"""
Cryptographic primitives for the IRIS Hub Python SDK.
"""

from .ed25519 import Ed25519Error, Ed25519PrivateKey, Ed25519PublicKey, PUBKEY_AMINO_TYPE

__all__ = [
    "Ed25519Error",
    "Ed25519PrivateKey",
    "Ed25519PublicKey",
    "PUBKEY_AMINO_TYPE",
]
