"""
Transaction messages.

Provides the closed set of message kinds the SDK can build and decode.
"""

from .base import Msg
from .bank import MsgSend
from .gov import MsgDeposit, MsgVote, VoteOption
from .record import Content, MsgCreateRecord, Record
from .registry import MSG_REGISTRY, list_msg_types, msg_from_dict, register_msg

__all__ = [
    "Msg",
    "MsgSend",
    "MsgDeposit",
    "MsgVote",
    "VoteOption",
    "Content",
    "Record",
    "MsgCreateRecord",
    "MSG_REGISTRY",
    "register_msg",
    "msg_from_dict",
    "list_msg_types",
]
