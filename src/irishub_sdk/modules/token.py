"""
Token module: token metadata and unit conversion.
"""

from __future__ import annotations
from typing import Union

from ..types.coins import Coin, Coins, DecCoin, DecCoins
from ..types.token import Token
from .base import Module


class TokenModule(Module):
    name = "token"

    def query_token(self, denom: str) -> Token:
        """Token metadata by symbol or minimal-unit name; cached after the first lookup."""
        return self.client.query_token(denom)

    def to_min_coin(self, *coins: Union[DecCoin, Coin]) -> Coins:
        return self.client.to_min_coin(*coins)

    def to_main_coin(self, *coins: Union[Coin, DecCoin]) -> DecCoins:
        return self.client.to_main_coin(*coins)
