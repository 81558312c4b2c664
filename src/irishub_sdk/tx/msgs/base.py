"""
Message base class.

A message is a self-validating domain action. Each concrete kind declares its
amino type name, its route and the addresses that must sign it.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Any, ClassVar, Dict, List, Sequence

from pydantic import BaseModel

from ...runtime.address import AccAddress
from ...runtime.codec import dumps_canonical, to_jsonable
from ...runtime.errors import ValidationError
from ...types.coins import Coin, coins_valid


class Msg(BaseModel, ABC):
    """
    Base class for all transaction messages.

    Subclasses set ``amino_type`` (the wire type name) and ``route_name`` and
    implement ``validate_basic`` and ``get_signers``.
    """

    amino_type: ClassVar[str] = ""
    route_name: ClassVar[str] = ""

    model_config = {"frozen": True, "arbitrary_types_allowed": True}

    def route(self) -> str:
        return self.route_name

    def type(self) -> str:
        return self.amino_type.rsplit("/", 1)[-1]

    @abstractmethod
    def validate_basic(self) -> None:
        """
        Check the message is well formed.

        Raises:
            ValidationError: If the message is invalid
        """

    @abstractmethod
    def get_signers(self) -> List[AccAddress]:
        """Addresses whose signatures are required."""

    def value_dict(self) -> Dict[str, Any]:
        return {name: to_jsonable(getattr(self, name)) for name in type(self).model_fields}

    def to_dict(self) -> Dict[str, Any]:
        """Amino JSON representation ``{"type": ..., "value": ...}``."""
        return {"type": self.amino_type, "value": self.value_dict()}

    def get_sign_bytes(self) -> bytes:
        return dumps_canonical(self.to_dict()).encode("utf-8")


def require_coins(coins: Sequence[Coin], what: str) -> None:
    """Shared amount check: non-empty, positive, unique denominations."""
    if not coins:
        raise ValidationError(f"{what} cannot be empty")
    if not coins_valid(coins):
        raise ValidationError(f"invalid {what}: {', '.join(str(c) for c in coins)}")
