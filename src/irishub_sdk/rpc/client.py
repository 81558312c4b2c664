"""
Tendermint JSON-RPC client.

Thin transport over the node's JSON-RPC 2.0 endpoint: ABCI queries, the three
broadcast methods, transaction lookup and search, blocks and status. Results
are returned as decoded JSON; interpreting them is left to the caller.
"""

from __future__ import annotations
import base64
import json
import logging
import random
from typing import Any, Dict, Optional

import requests

from ..runtime.errors import TransportError, error_from_response

logger = logging.getLogger(__name__)


def response_value(response: Dict[str, Any]) -> bytes:
    """Decode the base64 ``value`` of an ABCI query response."""
    value = response.get("value")
    return base64.b64decode(value) if value else b""


class TendermintRPC:
    """
    JSON-RPC client for a Tendermint node.

    Example:
        ```python
        rpc = TendermintRPC("http://localhost:26657")
        status = rpc.status()
        response = rpc.abci_query("custom/acc/account", b'{"address":"iaa1..."}')
        ```
    """

    def __init__(
        self,
        endpoint: str,
        timeout: float = 30.0,
        session: Optional[requests.Session] = None,
        user_agent: Optional[str] = None,
    ):
        """
        Initialize the RPC client.

        Args:
            endpoint: Node RPC URL, e.g. ``http://localhost:26657``
            timeout: Request timeout in seconds (default: 30)
            session: Optional requests.Session for connection pooling
            user_agent: Optional User-Agent header value
        """
        self._endpoint = endpoint.rstrip("/")
        self._timeout = timeout
        self._session = session or requests.Session()
        self._owns_session = session is None
        self._headers = {"Content-Type": "application/json"}
        if user_agent:
            self._headers["User-Agent"] = user_agent

    @property
    def endpoint(self) -> str:
        return self._endpoint

    def close(self) -> None:
        """Close the HTTP session if owned by this client."""
        if self._owns_session:
            self._session.close()

    def __enter__(self) -> TendermintRPC:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    # =========================================================================
    # Low-level RPC
    # =========================================================================

    def _call(self, method: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """
        Make a JSON-RPC 2.0 call.

        Args:
            method: RPC method name
            params: Method parameters

        Returns:
            The ``result`` member of the response

        Raises:
            TransportError: If the request does not complete
            NodeError: If the node answers with a JSON-RPC error
            NotFoundError: If the node reports the requested item is missing
        """
        request_data: Dict[str, Any] = {
            "jsonrpc": "2.0",
            "method": method,
            "id": random.randint(1, 1_000_000),
            "params": params or {},
        }
        logger.debug("rpc request %s %s", method, request_data["params"])

        try:
            response = self._session.post(
                self._endpoint,
                json=request_data,
                headers=self._headers,
                timeout=self._timeout,
            )
        except requests.exceptions.RequestException as e:
            raise TransportError(f"HTTP request failed: {e}", details={"method": method}, cause=e)

        try:
            response_data = response.json()
        except (json.JSONDecodeError, ValueError) as e:
            if response.status_code != 200:
                raise TransportError(
                    f"HTTP {response.status_code}: {response.reason}",
                    details={"method": method, "status": response.status_code},
                )
            raise TransportError(f"Invalid JSON response: {e}", details={"method": method}, cause=e)

        error = error_from_response(response_data)
        if error is not None:
            raise error
        if response.status_code != 200:
            raise TransportError(
                f"HTTP {response.status_code}: {response.reason}",
                details={"method": method, "status": response.status_code},
            )

        return response_data.get("result")

    def call(self, method: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """Make a raw JSON-RPC call."""
        return self._call(method, params)

    # =========================================================================
    # ABCI
    # =========================================================================

    def abci_query(self, path: str, data: bytes = b"", height: int = 0,
                   prove: bool = False) -> Dict[str, Any]:
        """
        Query the application.

        Args:
            path: Query path, e.g. ``custom/acc/account``
            data: Raw query payload
            height: Block height to query at (0 for latest)
            prove: Whether to request a merkle proof

        Returns:
            The ABCI ``response`` object (code, log, codespace, value...)
        """
        result = self._call("abci_query", {
            "path": path,
            "data": data.hex(),
            "height": str(height),
            "prove": prove,
        })
        return (result or {}).get("response") or {}

    # =========================================================================
    # Broadcast
    # =========================================================================

    @staticmethod
    def _tx_param(tx: bytes) -> Dict[str, str]:
        return {"tx": base64.b64encode(tx).decode("ascii")}

    def broadcast_tx_commit(self, tx: bytes) -> Dict[str, Any]:
        """Broadcast and wait for the check and deliver results."""
        return self._call("broadcast_tx_commit", self._tx_param(tx)) or {}

    def broadcast_tx_sync(self, tx: bytes) -> Dict[str, Any]:
        """Broadcast and wait for the check result only."""
        return self._call("broadcast_tx_sync", self._tx_param(tx)) or {}

    def broadcast_tx_async(self, tx: bytes) -> Dict[str, Any]:
        """Broadcast without waiting for any check."""
        return self._call("broadcast_tx_async", self._tx_param(tx)) or {}

    # =========================================================================
    # Transactions and blocks
    # =========================================================================

    def tx(self, tx_hash: bytes, prove: bool = False) -> Dict[str, Any]:
        return self._call("tx", {
            "hash": base64.b64encode(tx_hash).decode("ascii"),
            "prove": prove,
        }) or {}

    def tx_search(self, query: str, prove: bool = False, page: int = 1,
                  per_page: int = 30) -> Dict[str, Any]:
        """
        Search transactions by event query.

        Args:
            query: Event query, e.g. ``"message.sender='iaa1...'"``
            prove: Whether to include proofs
            page: 1-based page number
            per_page: Page size

        Returns:
            ``{"txs": [...], "total_count": "..."}``
        """
        return self._call("tx_search", {
            "query": query,
            "prove": prove,
            "page": str(page),
            "per_page": str(per_page),
        }) or {}

    def block(self, height: Optional[int] = None) -> Dict[str, Any]:
        params = {"height": str(height)} if height is not None else {}
        return self._call("block", params) or {}

    def status(self) -> Dict[str, Any]:
        return self._call("status") or {}
