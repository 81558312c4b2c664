"""
Message registry.

Maps amino type names to message classes so that stored transactions can be
decoded back into typed messages. The set of kinds is closed per chain
version; new kinds register through ``register_msg``.
"""

from typing import Any, Dict, List, Type

from .base import Msg
from ...runtime.errors import EncodingError

MSG_REGISTRY: Dict[str, Type[Msg]] = {}


def register_msg(msg_cls: Type[Msg]) -> Type[Msg]:
    """Class decorator registering a message kind under its amino type."""
    if not msg_cls.amino_type:
        raise ValueError(f"{msg_cls.__name__} does not declare an amino type")
    MSG_REGISTRY[msg_cls.amino_type] = msg_cls
    return msg_cls


def msg_from_dict(data: Dict[str, Any]) -> Msg:
    """Decode an amino JSON ``{"type", "value"}`` object into a message."""
    if not isinstance(data, dict) or "type" not in data:
        raise EncodingError(f"malformed message: {data!r}")
    msg_cls = MSG_REGISTRY.get(data["type"])
    if msg_cls is None:
        raise EncodingError(f"unknown message type: {data['type']}")
    return msg_cls.model_validate(data.get("value") or {})


def list_msg_types() -> List[str]:
    return sorted(MSG_REGISTRY)
