"""
Governance messages.
"""

from __future__ import annotations
from enum import Enum
from typing import List

from .base import Msg, require_coins
from .registry import register_msg
from ...runtime.address import AccAddress
from ...runtime.errors import ValidationError
from ...types.coins import Coin


class VoteOption(str, Enum):
    YES = "Yes"
    ABSTAIN = "Abstain"
    NO = "No"
    NO_WITH_VETO = "NoWithVeto"


@register_msg
class MsgDeposit(Msg):
    """Add a deposit to an open proposal."""

    amino_type = "irishub/gov/MsgDeposit"
    route_name = "gov"

    proposal_id: int
    depositor: AccAddress
    amount: List[Coin]

    def validate_basic(self) -> None:
        if self.proposal_id <= 0:
            raise ValidationError(f"invalid proposal id: {self.proposal_id}")
        require_coins(self.amount, "deposit amount")

    def get_signers(self) -> List[AccAddress]:
        return [self.depositor]


@register_msg
class MsgVote(Msg):
    """Cast a vote on a proposal."""

    amino_type = "irishub/gov/MsgVote"
    route_name = "gov"

    proposal_id: int
    voter: AccAddress
    option: VoteOption

    def validate_basic(self) -> None:
        if self.proposal_id <= 0:
            raise ValidationError(f"invalid proposal id: {self.proposal_id}")

    def get_signers(self) -> List[AccAddress]:
        return [self.voter]
