"""
Module wrappers over the client core.
"""

from .bank import BankModule
from .gov import GovModule, Proposal, ProposalRequest, Deposit, Vote, TallyResult
from .keys import KeysModule, KeysError
from .record import RecordModule
from .token import TokenModule

__all__ = [
    "BankModule",
    "GovModule",
    "Proposal",
    "ProposalRequest",
    "Deposit",
    "Vote",
    "TallyResult",
    "KeysModule",
    "KeysError",
    "RecordModule",
    "TokenModule",
]
