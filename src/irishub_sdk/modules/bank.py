"""
Bank module: transfers and account queries.
"""

from __future__ import annotations
from typing import List, Sequence, Union

from ..runtime.address import AccAddress, parse_address
from ..runtime.errors import ValidationError
from ..tx.msgs.bank import MsgSend
from ..types.coins import DecCoin, parse_dec_coins
from ..types.tx import BaseAccount, BaseTx, ResultTx
from .base import Module


class BankModule(Module):
    """
    Example:
        ```python
        result = client.bank.send("iaa1...", "1.5iris", BaseTx(from_="alice", password="pw"))
        account = client.bank.query_account("iaa1...")
        ```
    """

    name = "bank"

    def send(self, to: Union[str, AccAddress], amount: Union[str, Sequence[DecCoin]],
             base_tx: BaseTx) -> ResultTx:
        """
        Send coins to ``to``.

        ``amount`` is in main units (e.g. ``"1.5iris"``) and is converted to
        minimal units before signing.
        """
        try:
            recipient = parse_address(to)
        except ValueError as e:
            raise ValidationError(f"invalid recipient {to!r}: {e}", cause=e)
        if isinstance(amount, str):
            try:
                amount = parse_dec_coins(amount)
            except ValueError as e:
                raise ValidationError(f"invalid amount {amount!r}: {e}", cause=e)

        msg = MsgSend(
            from_address=self.sender(base_tx),
            to_address=recipient,
            amount=self.min_coins(amount),
        )
        return self.client.build_and_send([msg], base_tx)

    def query_account(self, address: Union[str, AccAddress]) -> BaseAccount:
        return self.client.query_account(address)

    def query_balance(self, address: Union[str, AccAddress]) -> List[DecCoin]:
        """Account coins converted to main units."""
        account = self.client.query_account(address)
        return self.client.to_main_coin(*account.coins)
