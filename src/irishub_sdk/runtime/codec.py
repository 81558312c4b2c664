"""
Encoding and decoding for chain payloads.

Provides canonical JSON (sorted keys, no whitespace) used for query payloads
and sign bytes, and the binary length-prefixed framing used for transactions
on the wire: ``uvarint(len(body)) || body``.
"""

from __future__ import annotations
import json
from decimal import Decimal
from typing import Any, Optional, Type

from pydantic import BaseModel

from .errors import EncodingError, ErrorCode


def write_uvarint(value: int) -> bytes:
    """
    Write an unsigned variable-length integer.

    Args:
        value: Integer value to encode

    Returns:
        Encoded bytes
    """
    if value < 0:
        raise ValueError("uvarint cannot be negative")

    result = bytearray()
    while value >= 0x80:
        result.append((value & 0x7F) | 0x80)
        value >>= 7
    result.append(value & 0x7F)
    return bytes(result)


def read_uvarint(data: bytes, offset: int = 0) -> tuple[int, int]:
    """
    Read an unsigned variable-length integer.

    Args:
        data: Bytes to read from
        offset: Starting offset

    Returns:
        Tuple of (value, new_offset)
    """
    value = 0
    shift = 0
    pos = offset

    while pos < len(data):
        byte = data[pos]
        pos += 1

        value |= (byte & 0x7F) << shift
        if (byte & 0x80) == 0:
            return value, pos

        shift += 7
        if shift >= 64:
            raise ValueError("uvarint too large")

    raise ValueError("unexpected end of uvarint")


def to_jsonable(obj: Any) -> Any:
    """Convert SDK objects into plain JSON-compatible structures."""
    if hasattr(obj, "to_dict"):
        return to_jsonable(obj.to_dict())
    if isinstance(obj, BaseModel):
        return obj.model_dump(mode="json", by_alias=True)
    if isinstance(obj, dict):
        return {str(k): to_jsonable(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [to_jsonable(v) for v in obj]
    if isinstance(obj, Decimal):
        return str(obj)
    if isinstance(obj, bytes):
        return obj.hex()
    if obj is None or isinstance(obj, (str, int, float, bool)):
        return obj
    return str(obj)


def dumps_canonical(obj: Any) -> str:
    """
    Encode object as canonical JSON string.

    Keys are sorted lexicographically and no extra whitespace is emitted so
    that sign bytes are stable.
    """
    return json.dumps(to_jsonable(obj), separators=(',', ':'), ensure_ascii=False, sort_keys=True)


class Codec:
    """
    Codec for query payloads and transactions.

    JSON encoding is canonical. Binary encoding wraps the canonical JSON body
    in a uvarint length prefix.
    """

    def marshal_json(self, obj: Any) -> bytes:
        try:
            return dumps_canonical(obj).encode("utf-8")
        except (TypeError, ValueError) as e:
            raise EncodingError(f"marshal json failed: {e}", cause=e)

    def unmarshal_json(self, data: bytes, model: Optional[Type[Any]] = None) -> Any:
        """
        Decode JSON bytes, optionally into a model.

        Args:
            data: JSON bytes
            model: Class with ``from_dict`` or a pydantic model

        Returns:
            Decoded value
        """
        try:
            raw = json.loads(data.decode("utf-8") if isinstance(data, (bytes, bytearray)) else data)
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise EncodingError(f"unmarshal json failed: {e}", ErrorCode.INVALID_JSON, cause=e)
        return self._into(raw, model)

    def marshal_binary_length_prefixed(self, obj: Any) -> bytes:
        body = self.marshal_json(obj)
        return write_uvarint(len(body)) + body

    def unmarshal_binary_length_prefixed(self, data: bytes, model: Optional[Type[Any]] = None) -> Any:
        try:
            length, offset = read_uvarint(data)
        except ValueError as e:
            raise EncodingError(f"invalid length prefix: {e}", ErrorCode.INVALID_BINARY, cause=e)
        body = data[offset:]
        if len(body) != length:
            raise EncodingError(
                f"length prefix mismatch: expected {length} bytes, got {len(body)}",
                ErrorCode.INVALID_BINARY,
            )
        return self.unmarshal_json(body, model)

    @staticmethod
    def _into(raw: Any, model: Optional[Type[Any]]) -> Any:
        if model is None:
            return raw
        try:
            if hasattr(model, "from_dict"):
                return model.from_dict(raw)
            if issubclass(model, BaseModel):
                return model.model_validate(raw)
        except EncodingError:
            raise
        except Exception as e:
            raise EncodingError(f"cannot decode into {model.__name__}: {e}", cause=e)
        raise EncodingError(f"unsupported decode target {model!r}")


__all__ = [
    "write_uvarint",
    "read_uvarint",
    "to_jsonable",
    "dumps_canonical",
    "Codec",
]
