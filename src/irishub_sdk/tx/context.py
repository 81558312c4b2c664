"""
Transaction context.

``TxContext`` holds the parameters one submission is signed and broadcast
with: chain id, account number, sequence, fee, gas, memo, broadcast mode and
the simulate flag. It is immutable; ``defaults`` and the ``with_*`` helpers
return new contexts, so the value in force at signing time is exactly the
one that was passed to the builder.

Account number and sequence are only meaningful for online contexts; offline
contexts keep them at zero unless explicitly set.
"""

from __future__ import annotations
from typing import List, Sequence

from pydantic import BaseModel, Field

from ..types.coins import Coin, sort_coins
from ..types.tx import BroadcastMode


class TxContext(BaseModel):
    """
    Parameters for building, signing and broadcasting one transaction.

    Example usage:
        ```python
        ctx = TxContext.defaults(chain_id="irishub", fee=fee, gas=200000,
                                 mode=BroadcastMode.SYNC)
        ctx = ctx.with_account_number(7).with_sequence(12).with_memo("hi")
        ```
    """

    chain_id: str
    account_number: int = Field(default=0, ge=0)
    sequence: int = Field(default=0, ge=0)
    fee: List[Coin] = Field(default_factory=list)
    gas: int = Field(default=0, ge=0)
    memo: str = ""
    mode: BroadcastMode = BroadcastMode.SYNC
    simulate: bool = False
    password: str = Field(default="", repr=False)
    online: bool = True

    model_config = {"frozen": True}

    # =========================================================================
    # Factory Methods
    # =========================================================================

    @classmethod
    def defaults(
        cls,
        chain_id: str,
        fee: Sequence[Coin],
        gas: int,
        mode: BroadcastMode,
        online: bool = True,
    ) -> TxContext:
        """
        Create a context holding only the configured defaults.

        Args:
            chain_id: Chain the transaction targets
            fee: Default fee, already in minimal units
            gas: Default gas limit
            mode: Default broadcast mode
            online: Whether account state is looked up on chain

        Returns:
            TxContext in its reset state
        """
        return cls(
            chain_id=chain_id,
            fee=sort_coins(fee),
            gas=gas,
            mode=mode,
            online=online,
        )

    # =========================================================================
    # Builders
    # =========================================================================

    def with_account_number(self, account_number: int) -> TxContext:
        return self.model_copy(update={"account_number": account_number})

    def with_sequence(self, sequence: int) -> TxContext:
        return self.model_copy(update={"sequence": sequence})

    def with_fee(self, fee: Sequence[Coin]) -> TxContext:
        return self.model_copy(update={"fee": sort_coins(fee)})

    def with_gas(self, gas: int) -> TxContext:
        return self.model_copy(update={"gas": gas})

    def with_memo(self, memo: str) -> TxContext:
        return self.model_copy(update={"memo": memo})

    def with_mode(self, mode: BroadcastMode) -> TxContext:
        return self.model_copy(update={"mode": BroadcastMode(mode)})

    def with_simulate(self, simulate: bool) -> TxContext:
        return self.model_copy(update={"simulate": simulate})

    def with_password(self, password: str) -> TxContext:
        return self.model_copy(update={"password": password})
