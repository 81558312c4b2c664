"""
Bank messages.
"""

from __future__ import annotations
from typing import List

from .base import Msg, require_coins
from .registry import register_msg
from ...runtime.address import AccAddress
from ...runtime.errors import ValidationError
from ...types.coins import Coin


@register_msg
class MsgSend(Msg):
    """Transfer coins from one account to another."""

    amino_type = "irishub/bank/Send"
    route_name = "bank"

    from_address: AccAddress
    to_address: AccAddress
    amount: List[Coin]

    def validate_basic(self) -> None:
        if self.from_address == self.to_address:
            raise ValidationError("sender and recipient must differ")
        require_coins(self.amount, "send amount")

    def get_signers(self) -> List[AccAddress]:
        return [self.from_address]
