"""
Unit tests for the broadcast dispatcher: result shape per mode and error
mapping for rejected transactions.
"""

import base64

import pytest

from helpers import FakeNode, error_response, ok_response
from irishub_sdk.client.broadcast import SIMULATE_PATH, BroadcastDispatcher
from irishub_sdk.runtime.errors import ROOT_CODESPACE, ErrorCode, NodeError, SdkError
from irishub_sdk.types.tx import BroadcastMode

TX_BYTES = b"\x05hello"


def b64(text):
    return base64.b64encode(text.encode()).decode()


@pytest.fixture
def node():
    return FakeNode()


@pytest.fixture
def dispatcher(node):
    return BroadcastDispatcher(node)


class TestResultShape:

    def test_commit_populates_everything(self, dispatcher, node):
        result = dispatcher.broadcast_tx(TX_BYTES, BroadcastMode.COMMIT)
        assert result.hash == "A1B2C3D4"
        assert result.height == 42
        assert result.gas_wanted == 200000
        assert result.gas_used == 51234
        assert result.tags.get("action") == "send"
        assert node.broadcasts == [TX_BYTES]

    @pytest.mark.parametrize("mode", [BroadcastMode.SYNC, BroadcastMode.ASYNC])
    def test_hash_only(self, dispatcher, node, mode):
        result = dispatcher.broadcast_tx(TX_BYTES, mode)
        assert result.hash == "A1B2C3D4"
        assert (result.height, result.gas_wanted, result.gas_used) == (0, 0, 0)
        assert len(result.tags) == 0
        assert node.count(f"broadcast_tx_{mode.value}") == 1

    def test_commit_events(self, dispatcher, node):
        node.commit_response["deliver_tx"]["tags"] = None
        node.commit_response["deliver_tx"]["events"] = [{
            "type": "message",
            "attributes": [{"key": b64("sender"), "value": b64("iaa1xyz")}],
        }]
        result = dispatcher.broadcast_tx_commit(TX_BYTES)
        assert result.tags.get("message.sender") == "iaa1xyz"

    def test_unsupported_mode(self, dispatcher, node):
        with pytest.raises(SdkError) as exc_info:
            dispatcher.broadcast_tx(TX_BYTES, "block")
        assert exc_info.value.code == ErrorCode.UNSUPPORTED_MODE
        assert node.broadcasts == []


class TestRejections:

    def test_check_tx_failure(self, dispatcher, node):
        node.commit_response = {
            "check_tx": {"code": 5, "codespace": "bank", "log": "insufficient funds"},
            "deliver_tx": {"code": 0, "gas_used": "99"},
            "hash": "A1B2C3D4",
            "height": "0",
        }
        with pytest.raises(NodeError) as exc_info:
            dispatcher.broadcast_tx_commit(TX_BYTES)
        err = exc_info.value
        assert (err.codespace, err.code, err.log) == ("bank", 5, "insufficient funds")
        assert err.results == []

    def test_deliver_tx_failure(self, dispatcher, node):
        node.commit_response["deliver_tx"] = {"code": 12, "codespace": "sdk", "log": "out of gas"}
        with pytest.raises(NodeError) as exc_info:
            dispatcher.broadcast_tx_commit(TX_BYTES)
        assert exc_info.value.code == 12

    def test_check_tx_empty_codespace(self, dispatcher, node):
        node.commit_response["check_tx"] = {"code": 4, "log": "unauthorized"}
        with pytest.raises(NodeError) as exc_info:
            dispatcher.broadcast_tx_commit(TX_BYTES)
        assert exc_info.value.codespace == ROOT_CODESPACE

    def test_sync_failure_uses_root_codespace(self, dispatcher, node):
        node.sync_response = {"code": 3, "codespace": "bank", "log": "invalid sequence", "hash": "AB"}
        with pytest.raises(NodeError) as exc_info:
            dispatcher.broadcast_tx_sync(TX_BYTES)
        assert exc_info.value.codespace == ROOT_CODESPACE
        assert exc_info.value.code == 3

    def test_async_ignores_code(self, dispatcher, node):
        node.async_response = {"code": 3, "log": "ignored", "hash": "AB"}
        assert dispatcher.broadcast_tx_async(TX_BYTES).hash == "AB"


class TestSimulate:

    def test_gas_only(self, dispatcher, node):
        result = dispatcher.simulate(TX_BYTES)
        assert (result.gas_wanted, result.gas_used) == (200000, 48000)
        assert result.hash == ""
        assert node.broadcasts == []
        assert node.calls == [("abci_query", (SIMULATE_PATH, TX_BYTES))]

    def test_flat_gas_fields(self, dispatcher, node):
        node.simulate_response = ok_response({"gas_wanted": "10", "gas_used": "7"})
        result = dispatcher.simulate(TX_BYTES)
        assert (result.gas_wanted, result.gas_used) == (10, 7)

    def test_rejected(self, dispatcher, node):
        node.simulate_response = error_response(5, "insufficient funds", "bank")
        with pytest.raises(NodeError) as exc_info:
            dispatcher.simulate(TX_BYTES)
        assert exc_info.value.codespace == "bank"
