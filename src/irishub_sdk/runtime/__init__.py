"""Runtime helpers for the IRIS Hub Python SDK"""

from .address import AccAddress, parse_address
from .errors import SdkError
from .codec import Codec, dumps_canonical

__all__ = [
    "AccAddress",
    "parse_address",
    "SdkError",
    "Codec",
    "dumps_canonical",
]
