"""
Transaction builder and signer.

Assembles the sign document from a transaction context and a list of
messages, has the key manager sign its canonical bytes and returns the
signed ``StdTx``.

The signature covers exactly the chain id, account number, sequence, fee,
messages and memo of the context passed in.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Sequence

from ..crypto.ed25519 import Ed25519Error
from ..keys.keymanager import KeyManager
from ..runtime.codec import dumps_canonical
from ..runtime.errors import SdkError, SigningError
from ..types.tx import StdFee, StdSignature, StdTx
from .context import TxContext
from .msgs.base import Msg

logger = logging.getLogger(__name__)


@dataclass
class StdSignMsg:
    """The document a transaction signature is computed over."""

    chain_id: str
    account_number: int
    sequence: int
    fee: StdFee
    msgs: List[Msg] = field(default_factory=list)
    memo: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "account_number": str(self.account_number),
            "chain_id": self.chain_id,
            "fee": self.fee.to_dict(),
            "memo": self.memo,
            "msgs": [m.to_dict() for m in self.msgs],
            "sequence": str(self.sequence),
        }

    def get_sign_bytes(self) -> bytes:
        """Canonical JSON of the sign document (sorted keys, compact)."""
        return dumps_canonical(self.to_dict()).encode("utf-8")


class TxBuilder:
    """
    Builds and signs transactions with a key manager.

    Example:
        ```python
        builder = TxBuilder(key_manager)
        signed = builder.build_and_sign(ctx, "alice", [msg])
        ```
    """

    def __init__(self, key_manager: KeyManager):
        self.key_manager = key_manager

    def build(self, ctx: TxContext, msgs: Sequence[Msg]) -> StdSignMsg:
        """Assemble the sign document for ``msgs`` under ``ctx``."""
        return StdSignMsg(
            chain_id=ctx.chain_id,
            account_number=ctx.account_number,
            sequence=ctx.sequence,
            fee=StdFee(amount=list(ctx.fee), gas=ctx.gas),
            msgs=list(msgs),
            memo=ctx.memo,
        )

    def sign(self, ctx: TxContext, name: str, sign_msg: StdSignMsg) -> StdTx:
        """
        Sign a prepared document with the named key.

        Args:
            ctx: Context supplying the signing password
            name: Key name of the sender
            sign_msg: Document to sign

        Returns:
            Signed transaction

        Raises:
            SigningError: If the password is missing or the key manager fails
        """
        if not ctx.password:
            raise SigningError("password is required to sign", details={"name": name})

        sign_bytes = sign_msg.get_sign_bytes()
        try:
            signature = self.key_manager.sign(name, ctx.password, sign_bytes)
        except SigningError:
            raise
        except (SdkError, Ed25519Error, ValueError) as e:
            raise SigningError(f"sign with key {name!r} failed: {getattr(e, 'log', e)}",
                               details={"name": name}, cause=e)

        signature = StdSignature(
            pub_key=signature.pub_key,
            signature=signature.signature,
            account_number=sign_msg.account_number,
            sequence=sign_msg.sequence,
        )
        logger.debug("sign success, sign bytes: %s", sign_bytes.decode("utf-8"))
        return StdTx(
            msgs=sign_msg.msgs,
            fee=sign_msg.fee,
            signatures=[signature],
            memo=sign_msg.memo,
        )

    def build_and_sign(self, ctx: TxContext, name: str, msgs: Sequence[Msg]) -> StdTx:
        return self.sign(ctx, name, self.build(ctx, msgs))
