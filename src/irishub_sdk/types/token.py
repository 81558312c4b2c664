"""
Token metadata and the fixed-point rule relating main and minimal units.
"""

from __future__ import annotations
from decimal import Decimal
from typing import Union

from pydantic import BaseModel, Field, field_validator, model_validator

from .coins import Coin, DecCoin
from ..runtime.errors import ConversionError


class Token(BaseModel):
    """
    Token metadata as registered on chain.

    ``symbol`` names the main unit, ``min_unit`` the minimal unit, and
    ``scale`` is the number of decimal places between them.
    """

    symbol: str
    name: str = ""
    scale: int = Field(default=0, ge=0, le=18)
    min_unit: str = ""
    initial_supply: int = 0
    max_supply: int = 0
    mintable: bool = False
    owner: str = ""

    model_config = {"frozen": True, "extra": "ignore"}

    @field_validator("symbol", "min_unit", mode="before")
    @classmethod
    def lower_denoms(cls, v):
        return v.lower() if isinstance(v, str) else v

    @field_validator("initial_supply", "max_supply", mode="before")
    @classmethod
    def parse_supply(cls, v):
        return int(v) if isinstance(v, str) and v else (v or 0)

    @model_validator(mode="before")
    @classmethod
    def default_min_unit(cls, data):
        if isinstance(data, dict) and not data.get("min_unit"):
            data = {**data, "min_unit": data.get("symbol", "")}
        return data

    @property
    def precision(self) -> Decimal:
        return Decimal(10) ** self.scale

    def matches(self, denom: str) -> bool:
        denom = denom.lower()
        return denom in (self.symbol, self.min_unit)

    def convert_to_min_coin(self, coin: Union[DecCoin, Coin]) -> Coin:
        """
        Rescale a coin to the minimal unit.

        A coin already expressed in the minimal unit is returned unchanged.

        Raises:
            ConversionError: denomination mismatch or sub-minimal precision
        """
        denom = coin.denom.lower()
        amount = Decimal(coin.amount)
        if denom == self.min_unit:
            scaled = amount
        elif denom == self.symbol:
            scaled = amount * self.precision
        else:
            raise ConversionError(f"denom {coin.denom} does not belong to token {self.symbol}")

        if scaled != scaled.to_integral_value():
            raise ConversionError(
                f"{coin} exceeds the precision of {self.symbol} (scale {self.scale})"
            )
        return Coin(self.min_unit, int(scaled))

    def convert_to_main_coin(self, coin: Union[Coin, DecCoin]) -> DecCoin:
        """
        Rescale a coin to the main unit.

        Raises:
            ConversionError: denomination mismatch
        """
        denom = coin.denom.lower()
        amount = Decimal(coin.amount)
        if denom == self.symbol and self.symbol != self.min_unit:
            return DecCoin(self.symbol, amount)
        if denom == self.min_unit:
            return DecCoin(self.symbol, amount / self.precision)
        raise ConversionError(f"denom {coin.denom} does not belong to token {self.symbol}")
