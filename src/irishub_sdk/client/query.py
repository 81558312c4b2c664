"""
Transaction lookup and search.

Looks up transactions by hash or by event query, joins every result with the
timestamp of its block and decodes the embedded transaction. Block lookups
are deduplicated per call: each distinct height is fetched once.
"""

from __future__ import annotations
import base64
import binascii
import logging
import re
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional, Sequence

from ..rpc.client import TendermintRPC
from ..runtime.codec import Codec
from ..runtime.errors import EncodingError, InvalidQueryError, NotFoundError, ValidationError
from ..types.tx import StdTx, TxDetail, TxResult, TxSearch, parse_tags

logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%SZ"

_TIMESTAMP_RE = re.compile(
    r"^(\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2})(?:\.\d+)?(Z|[+-]\d{2}:\d{2})?$"
)


def format_timestamp(raw: Optional[str]) -> str:
    """
    Format a node timestamp as RFC 3339 in UTC, without fractional seconds.

    ``"2020-05-12T08:30:45.123456789Z"`` becomes ``"2020-05-12T08:30:45Z"``.
    """
    if not raw:
        return ""
    match = _TIMESTAMP_RE.match(raw.strip())
    if not match:
        raise EncodingError(f"invalid block time: {raw!r}")
    moment = datetime.strptime(match.group(1), "%Y-%m-%dT%H:%M:%S")
    offset = match.group(2)
    if offset and offset != "Z":
        sign = 1 if offset[0] == "+" else -1
        hours, minutes = offset[1:].split(":")
        moment -= sign * timedelta(hours=int(hours), minutes=int(minutes))
    return moment.replace(tzinfo=timezone.utc).strftime(TIMESTAMP_FORMAT)


class EventQueryBuilder:
    """
    Builds Tendermint event queries.

    Example:
        ```python
        builder = EventQueryBuilder().add_condition("message.sender", "iaa1...")
        builder.add_condition("message.action", "send")
        builder.build()  # "message.sender='iaa1...' AND message.action='send'"
        ```
    """

    def __init__(self):
        self._conditions: List[str] = []

    def add_condition(self, key: str, value: Any) -> EventQueryBuilder:
        if not key:
            raise ValidationError("event key cannot be empty")
        self._conditions.append(f"{key}='{value}'")
        return self

    def add_range(self, key: str, lower: Optional[int] = None,
                  upper: Optional[int] = None) -> EventQueryBuilder:
        """Add an inclusive numeric range condition; either bound may be omitted."""
        if not key:
            raise ValidationError("event key cannot be empty")
        if lower is not None:
            self._conditions.append(f"{key}>={lower}")
        if upper is not None:
            self._conditions.append(f"{key}<={upper}")
        return self

    def is_empty(self) -> bool:
        return not self._conditions

    def build(self) -> str:
        return " AND ".join(self._conditions)

    def __str__(self) -> str:
        return self.build()


class TxQuerier:
    """Looks up and formats transactions."""

    def __init__(self, rpc: TendermintRPC, codec: Optional[Codec] = None):
        self.rpc = rpc
        self.codec = codec or Codec()

    def query_tx(self, tx_hash: str) -> TxDetail:
        """
        Look up one transaction by its hex hash.

        Raises:
            ValidationError: If the hash is not valid hex
            NotFoundError: If the node has no record of the transaction
        """
        try:
            raw_hash = bytes.fromhex(tx_hash)
        except ValueError as e:
            raise ValidationError(f"invalid transaction hash {tx_hash!r}", cause=e)

        res = self.rpc.tx(raw_hash, prove=True)
        if not res:
            raise NotFoundError(f"tx ({tx_hash}) not found")

        blocks = self._blocks_for([res])
        return self._format(res, blocks[_height(res)])

    def query_txs(self, builder: EventQueryBuilder, page: int = 1, size: int = 30) -> TxSearch:
        """
        Search transactions by event query.

        Args:
            builder: Query conditions; at least one is required
            page: 1-based page number
            size: Page size

        Raises:
            InvalidQueryError: If the builder holds no condition
        """
        query = builder.build()
        if not query:
            raise InvalidQueryError()

        res = self.rpc.tx_search(query, prove=True, page=page, per_page=size)
        txs = res.get("txs") or []
        blocks = self._blocks_for(txs)
        logger.debug("tx search %r: %d txs across %d blocks", query, len(txs), len(blocks))

        return TxSearch(
            total=int(res.get("total_count") or 0),
            page=page,
            size=size,
            txs=[self._format(tx, blocks[_height(tx)]) for tx in txs],
        )

    def _blocks_for(self, txs: Sequence[Dict[str, Any]]) -> Dict[int, Dict[str, Any]]:
        blocks: Dict[int, Dict[str, Any]] = {}
        for tx in txs:
            height = _height(tx)
            if height not in blocks:
                blocks[height] = self.rpc.block(height)
        return blocks

    def _format(self, res: Dict[str, Any], block: Dict[str, Any]) -> TxDetail:
        try:
            tx_bytes = base64.b64decode(res.get("tx") or "")
        except (binascii.Error, ValueError) as e:
            raise EncodingError(f"invalid transaction bytes: {e}", cause=e)
        tx = self.codec.unmarshal_binary_length_prefixed(tx_bytes, StdTx)

        tx_result = res.get("tx_result") or {}
        header = (block.get("block") or {}).get("header") or {}
        return TxDetail(
            hash=res.get("hash", ""),
            height=_height(res),
            tx=tx,
            result=TxResult(
                code=int(tx_result.get("code") or 0),
                log=tx_result.get("log", ""),
                gas_wanted=int(tx_result.get("gas_wanted") or 0),
                gas_used=int(tx_result.get("gas_used") or 0),
                tags=parse_tags(tx_result.get("tags"), tx_result.get("events")),
            ),
            timestamp=format_timestamp(header.get("time")),
        )


def _height(res: Dict[str, Any]) -> int:
    return int(res.get("height") or 0)
