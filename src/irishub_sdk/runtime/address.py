"""
AccAddress Pydantic custom type for bech32 account addresses.
"""

from typing import Any, Union
from pydantic import GetCoreSchemaHandler
from pydantic_core import CoreSchema, core_schema
import bech32

ADDRESS_LENGTH = 20

# Bech32 human-readable prefixes per network
MAINNET_PREFIX = "iaa"
TESTNET_PREFIX = "faa"


class AccAddress:
    """Custom Pydantic type for bech32 account addresses."""

    def __init__(self, raw: bytes, prefix: str = MAINNET_PREFIX):
        if not isinstance(raw, (bytes, bytearray)):
            raise ValueError("AccAddress must be built from bytes")
        if len(raw) != ADDRESS_LENGTH:
            raise ValueError(f"AccAddress must be {ADDRESS_LENGTH} bytes, got {len(raw)}")
        self.raw = bytes(raw)
        self.prefix = prefix

    @classmethod
    def from_bech32(cls, address: str) -> "AccAddress":
        """Parse a bech32 address string."""
        if not isinstance(address, str) or not address.strip():
            raise ValueError("empty address string is not allowed")
        hrp, data = bech32.bech32_decode(address)
        if hrp is None or data is None:
            raise ValueError(f"invalid bech32 address: {address}")
        raw = bech32.convertbits(data, 5, 8, False)
        if raw is None:
            raise ValueError(f"invalid bech32 payload: {address}")
        return cls(bytes(raw), hrp)

    def __str__(self) -> str:
        return bech32.bech32_encode(self.prefix, bech32.convertbits(self.raw, 8, 5))

    def __repr__(self) -> str:
        return f"AccAddress('{self}')"

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, AccAddress):
            return self.raw == other.raw
        elif isinstance(other, str):
            return str(self) == other
        return False

    def __hash__(self) -> int:
        return hash(self.raw)

    @classmethod
    def __get_pydantic_core_schema__(
        cls,
        source_type: Any,
        handler: GetCoreSchemaHandler,
    ) -> CoreSchema:
        """Return a Pydantic CoreSchema that validates the AccAddress."""
        return core_schema.no_info_before_validator_function(
            cls._validate,
            core_schema.is_instance_schema(cls),
            serialization=core_schema.plain_serializer_function_ser_schema(str),
        )

    @classmethod
    def _validate(cls, value: Any, _info=None) -> "AccAddress":
        """Validate and convert the input to an AccAddress."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            return cls.from_bech32(value)
        raise ValueError(f"Invalid AccAddress: {value}")


def parse_address(value: Union[str, AccAddress]) -> AccAddress:
    """Accept either a bech32 string or an AccAddress."""
    return AccAddress._validate(value)
