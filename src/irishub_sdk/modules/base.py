"""
Shared plumbing for module wrappers.
"""

from __future__ import annotations
from typing import TYPE_CHECKING, Sequence

from ..runtime.address import AccAddress
from ..runtime.errors import AddressNotFoundError, SdkError
from ..types.coins import Coins, DecCoin
from ..types.tx import BaseTx

if TYPE_CHECKING:
    from ..client.abstract_client import AbstractClient


class Module:
    """A module wrapper bound to a client."""

    name = ""

    def __init__(self, client: AbstractClient):
        self.client = client

    def sender(self, base_tx: BaseTx) -> AccAddress:
        """Resolve the address of ``base_tx``'s sender through the key manager."""
        try:
            return self.client.query_address(base_tx.from_)
        except SdkError as e:
            raise AddressNotFoundError(f"address of {base_tx.from_!r} not found: {e.log}",
                                       details={"from": base_tx.from_}, cause=e)

    def min_coins(self, amount: Sequence[DecCoin]) -> Coins:
        return self.client.to_min_coin(*amount)
