"""
Coin amounts in minimal units (integers) and main units (decimals).
"""

from __future__ import annotations
import re
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation, ROUND_DOWN
from typing import Any, Dict, Iterable, List, Sequence, Tuple, Union

DENOM_PATTERN = r"[a-zA-Z][a-zA-Z0-9\-_.:/]{1,63}"
_DENOM_RE = re.compile(f"^{DENOM_PATTERN}$")
_COIN_RE = re.compile(rf"^([0-9]+)\s*({DENOM_PATTERN})$")
_DEC_COIN_RE = re.compile(rf"^([0-9]+(?:\.[0-9]+)?|\.[0-9]+)\s*({DENOM_PATTERN})$")


def validate_denom(denom: str) -> None:
    if not isinstance(denom, str) or not _DENOM_RE.match(denom):
        raise ValueError(f"invalid denom: {denom!r}")


@dataclass(frozen=True)
class Coin:
    """An integer amount of a token in its minimal unit."""

    denom: str
    amount: int

    def __post_init__(self):
        validate_denom(self.denom)
        if not isinstance(self.amount, int) or isinstance(self.amount, bool):
            raise ValueError(f"coin amount must be an integer, got {self.amount!r}")
        if self.amount < 0:
            raise ValueError(f"negative coin amount: {self.amount}")

    def is_positive(self) -> bool:
        return self.amount > 0

    def to_dict(self) -> Dict[str, Any]:
        return {"denom": self.denom, "amount": str(self.amount)}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Coin:
        return cls(denom=data["denom"], amount=int(data["amount"]))

    def __str__(self) -> str:
        return f"{self.amount}{self.denom}"


@dataclass(frozen=True)
class DecCoin:
    """A decimal amount of a token in its main (human) unit."""

    denom: str
    amount: Decimal

    def __post_init__(self):
        validate_denom(self.denom)
        if not isinstance(self.amount, Decimal):
            try:
                object.__setattr__(self, "amount", Decimal(str(self.amount)))
            except InvalidOperation:
                raise ValueError(f"invalid decimal amount: {self.amount!r}")
        if not self.amount.is_finite() or self.amount < 0:
            raise ValueError(f"invalid decimal amount: {self.amount}")

    def is_positive(self) -> bool:
        return self.amount > 0

    def truncate_decimal(self) -> Tuple[Coin, DecCoin]:
        """Split into the integer part and the remaining fractional change."""
        whole = self.amount.to_integral_value(rounding=ROUND_DOWN)
        return Coin(self.denom, int(whole)), DecCoin(self.denom, self.amount - whole)

    @classmethod
    def from_coin(cls, coin: Coin) -> DecCoin:
        return cls(coin.denom, Decimal(coin.amount))

    def to_dict(self) -> Dict[str, Any]:
        return {"denom": self.denom, "amount": format(self.amount.normalize(), "f")}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> DecCoin:
        return cls(denom=data["denom"], amount=Decimal(str(data["amount"])))

    def __str__(self) -> str:
        return f"{format(self.amount.normalize(), 'f')}{self.denom}"


Coins = List[Coin]
DecCoins = List[DecCoin]


def parse_coin(text: str) -> Coin:
    match = _COIN_RE.match(text.strip())
    if not match:
        raise ValueError(f"invalid coin expression: {text!r}")
    return Coin(match.group(2), int(match.group(1)))


def parse_dec_coin(text: str) -> DecCoin:
    match = _DEC_COIN_RE.match(text.strip())
    if not match:
        raise ValueError(f"invalid decimal coin expression: {text!r}")
    return DecCoin(match.group(2), Decimal(match.group(1)))


def parse_dec_coins(text: str) -> DecCoins:
    """
    Parse a comma separated list of decimal coins, e.g. ``"1.5iris,10abc"``.

    An empty string yields an empty list.
    """
    text = (text or "").strip()
    if not text:
        return []
    return sort_coins(parse_dec_coin(part) for part in text.split(","))


def sort_coins(coins: Iterable[Union[Coin, DecCoin]]) -> List:
    """Return coins ordered by denomination."""
    return sorted(coins, key=lambda c: c.denom)


def coins_to_dec_coins(coins: Sequence[Coin]) -> DecCoins:
    return sort_coins(DecCoin.from_coin(c) for c in coins)


def truncate_dec_coins(coins: Sequence[DecCoin]) -> Tuple[Coins, DecCoins]:
    """Truncate every coin; returns (integer coins, fractional change)."""
    truncated: Coins = []
    change: DecCoins = []
    for coin in coins:
        whole, rest = coin.truncate_decimal()
        truncated.append(whole)
        if rest.is_positive():
            change.append(rest)
    return sort_coins(truncated), sort_coins(change)


def coins_valid(coins: Sequence[Union[Coin, DecCoin]]) -> bool:
    """Coins are valid when all are positive and denominations are unique."""
    denoms = [c.denom for c in coins]
    return all(c.is_positive() for c in coins) and len(set(denoms)) == len(denoms)


def coins_string(coins: Sequence[Union[Coin, DecCoin]]) -> str:
    return ",".join(str(c) for c in coins)
