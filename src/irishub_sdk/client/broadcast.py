"""
Broadcast dispatcher.

Sends signed transaction bytes under one of three delivery modes and
normalises the three response shapes into ``ResultTx``:

- commit: waits for the check and deliver phases; everything is populated
- sync: waits for the check phase only; only the hash is populated
- async: returns once the node accepted the bytes; only the hash is populated
"""

from __future__ import annotations
import logging
from typing import Any, Dict, Optional

from ..rpc.client import TendermintRPC, response_value
from ..runtime.codec import Codec
from ..runtime.errors import ROOT_CODESPACE, ErrorCode, SdkError, get_error
from ..types.tx import BroadcastMode, ResultTx, parse_tags

logger = logging.getLogger(__name__)

SIMULATE_PATH = "/app/simulate"


def _int(value: Any) -> int:
    return int(value) if value not in (None, "") else 0


def _is_ok(result: Dict[str, Any]) -> bool:
    return _int(result.get("code")) == 0


class BroadcastDispatcher:
    """Dispatches serialized transactions to the node by broadcast mode."""

    def __init__(self, rpc: TendermintRPC, codec: Optional[Codec] = None):
        self.rpc = rpc
        self.codec = codec or Codec()

    def broadcast_tx(self, tx_bytes: bytes, mode: BroadcastMode) -> ResultTx:
        """
        Broadcast under ``mode``.

        Raises:
            NodeError: If the node rejected the transaction
            TransportError: If the call did not complete
            SdkError: If the mode is not supported
        """
        logger.debug("broadcasting %d bytes, mode %s", len(tx_bytes), mode)
        if mode == BroadcastMode.COMMIT:
            return self.broadcast_tx_commit(tx_bytes)
        if mode == BroadcastMode.SYNC:
            return self.broadcast_tx_sync(tx_bytes)
        if mode == BroadcastMode.ASYNC:
            return self.broadcast_tx_async(tx_bytes)
        raise SdkError(f"broadcast mode ({mode}) not supported", ErrorCode.UNSUPPORTED_MODE)

    def broadcast_tx_commit(self, tx_bytes: bytes) -> ResultTx:
        """Broadcast and wait for the transaction to be committed in a block."""
        res = self.rpc.broadcast_tx_commit(tx_bytes)

        check_tx = res.get("check_tx") or {}
        if not _is_ok(check_tx):
            raise get_error(check_tx.get("codespace", ""), _int(check_tx.get("code")),
                            check_tx.get("log", ""))

        deliver_tx = res.get("deliver_tx") or {}
        if not _is_ok(deliver_tx):
            raise get_error(deliver_tx.get("codespace", ""), _int(deliver_tx.get("code")),
                            deliver_tx.get("log", ""))

        return ResultTx(
            hash=res.get("hash", ""),
            height=_int(res.get("height")),
            gas_wanted=_int(deliver_tx.get("gas_wanted")),
            gas_used=_int(deliver_tx.get("gas_used")),
            tags=parse_tags(deliver_tx.get("tags"), deliver_tx.get("events")),
        )

    def broadcast_tx_sync(self, tx_bytes: bytes) -> ResultTx:
        """Broadcast and wait for the check phase only."""
        res = self.rpc.broadcast_tx_sync(tx_bytes)
        if not _is_ok(res):
            raise get_error(ROOT_CODESPACE, _int(res.get("code")), res.get("log", ""))
        return ResultTx(hash=res.get("hash", ""))

    def broadcast_tx_async(self, tx_bytes: bytes) -> ResultTx:
        """Broadcast without waiting for any check."""
        res = self.rpc.broadcast_tx_async(tx_bytes)
        return ResultTx(hash=res.get("hash", ""))

    def simulate(self, tx_bytes: bytes) -> ResultTx:
        """
        Run the transaction against the current state without broadcasting.

        Returns:
            ResultTx with only gas wanted/used populated
        """
        response = self.rpc.abci_query(SIMULATE_PATH, tx_bytes)
        if not _is_ok(response):
            raise get_error(response.get("codespace", ""), _int(response.get("code")),
                            response.get("log", ""))

        data = self.codec.unmarshal_json(response_value(response) or b"null") or {}
        gas_info = data.get("gas_info", data)
        return ResultTx(
            gas_wanted=_int(gas_info.get("gas_wanted")),
            gas_used=_int(gas_info.get("gas_used")),
        )
