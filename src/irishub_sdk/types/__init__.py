"""
Core SDK types: coins, tokens, transactions and results.
"""

from .coins import (
    Coin,
    DecCoin,
    Coins,
    DecCoins,
    parse_coin,
    parse_dec_coin,
    parse_dec_coins,
    sort_coins,
    truncate_dec_coins,
    coins_to_dec_coins,
)
from .token import Token
from .tx import (
    BroadcastMode,
    BaseTx,
    StdFee,
    StdSignature,
    StdTx,
    Tag,
    Tags,
    parse_tags,
    ResultTx,
    TxResult,
    TxDetail,
    TxSearch,
    BaseAccount,
)

__all__ = [
    "Coin",
    "DecCoin",
    "Coins",
    "DecCoins",
    "parse_coin",
    "parse_dec_coin",
    "parse_dec_coins",
    "sort_coins",
    "truncate_dec_coins",
    "coins_to_dec_coins",
    "Token",
    "BroadcastMode",
    "BaseTx",
    "StdFee",
    "StdSignature",
    "StdTx",
    "Tag",
    "Tags",
    "parse_tags",
    "ResultTx",
    "TxResult",
    "TxDetail",
    "TxSearch",
    "BaseAccount",
]
