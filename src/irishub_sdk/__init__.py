"""
IRIS Hub Python SDK

Builds, signs and broadcasts transactions to an IRIS Hub node and queries
chain state: accounts, tokens, governance proposals and records.
"""

# Configuration
from .config import SDKConfig

# Client core
from .client import (
    AbstractClient,
    IrisClient,
    CoinConverter,
    TokenCache,
    EventQueryBuilder,
)

# Types
from .types import (
    Coin,
    DecCoin,
    Token,
    BroadcastMode,
    BaseTx,
    StdTx,
    ResultTx,
    TxDetail,
    TxSearch,
    BaseAccount,
)
from .tx import TxContext, TxBuilder, MsgSend, MsgDeposit, MsgVote, MsgCreateRecord, Content

# Keys and transport
from .keys import KeyManager, MemoryKeyManager
from .rpc import TendermintRPC

# Errors
from .runtime.errors import (
    ErrorCode,
    SdkError,
    ValidationError,
    PreparationError,
    AddressNotFoundError,
    AccountNotFoundError,
    TokenNotFoundError,
    ConversionError,
    SigningError,
    NodeError,
    TransportError,
    NotFoundError,
    InvalidQueryError,
    InternalError,
)

__version__ = "0.1.0"
__all__ = [
    "SDKConfig",
    "AbstractClient",
    "IrisClient",
    "CoinConverter",
    "TokenCache",
    "EventQueryBuilder",
    "Coin",
    "DecCoin",
    "Token",
    "BroadcastMode",
    "BaseTx",
    "StdTx",
    "ResultTx",
    "TxDetail",
    "TxSearch",
    "BaseAccount",
    "TxContext",
    "TxBuilder",
    "MsgSend",
    "MsgDeposit",
    "MsgVote",
    "MsgCreateRecord",
    "Content",
    "KeyManager",
    "MemoryKeyManager",
    "TendermintRPC",
    "ErrorCode",
    "SdkError",
    "ValidationError",
    "PreparationError",
    "AddressNotFoundError",
    "AccountNotFoundError",
    "TokenNotFoundError",
    "ConversionError",
    "SigningError",
    "NodeError",
    "TransportError",
    "NotFoundError",
    "InvalidQueryError",
    "InternalError",
]
