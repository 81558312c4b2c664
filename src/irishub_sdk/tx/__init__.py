"""
Transaction building for the IRIS Hub Python SDK.
"""

from .builder import StdSignMsg, TxBuilder
from .context import TxContext
from .msgs import (
    Msg,
    MsgSend,
    MsgDeposit,
    MsgVote,
    VoteOption,
    Content,
    Record,
    MsgCreateRecord,
    msg_from_dict,
)

__all__ = [
    "StdSignMsg",
    "TxBuilder",
    "TxContext",
    "Msg",
    "MsgSend",
    "MsgDeposit",
    "MsgVote",
    "VoteOption",
    "Content",
    "Record",
    "MsgCreateRecord",
    "msg_from_dict",
]
