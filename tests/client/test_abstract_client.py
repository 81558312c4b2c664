"""
Unit tests for the client pipeline: context preparation, submission,
batching, failure mapping and chain queries.
"""

import logging
import threading
from decimal import Decimal
from unittest.mock import Mock

import pytest

from helpers import (
    PASSWORD,
    alice_and_bob,
    error_response,
    mk_client,
    mk_config,
    mk_node,
    mk_send,
    mk_sends,
    ok_response,
)
from irishub_sdk.client import AbstractClient, TokenCache, split_msgs
from irishub_sdk.client.abstract_client import ACCOUNT_QUERY_PATH
from irishub_sdk.runtime.errors import (
    AccountNotFoundError,
    AddressNotFoundError,
    EncodingError,
    InternalError,
    NodeError,
    SigningError,
    TokenNotFoundError,
    TransportError,
    ValidationError,
)
from irishub_sdk.tx.msgs import MsgSend
from irishub_sdk.types.coins import Coin, DecCoin
from irishub_sdk.types.tx import BaseTx, BroadcastMode

DEFAULT_FEE = [Coin("iris-atto", 600000000000000000)]


def alice_tx(**overrides):
    return BaseTx(from_="alice", password=PASSWORD, **overrides)


class TestSplitMsgs:

    def test_remainder_in_last(self):
        assert [len(s) for s in split_msgs(3, range(10))] == [3, 3, 4]

    def test_order_preserved(self):
        segments = split_msgs(3, range(10))
        assert [m for s in segments for m in s] == list(range(10))

    def test_fewer_than_batch(self):
        assert split_msgs(5, [1, 2]) == [[1, 2]]

    def test_exact(self):
        assert split_msgs(2, [1, 2, 3, 4]) == [[1, 2], [3, 4]]


class TestCreate:

    def test_default_fee_resolved(self, client, node):
        assert client.default_fee == DEFAULT_FEE
        assert node.count("abci_query") == 1

    def test_unknown_fee_token(self, node, key_manager):
        with pytest.raises(TokenNotFoundError):
            mk_client(node, key_manager, fee="1abc")

    def test_default_fee_truncated_on_reset(self, node, key_manager):
        client = mk_client(node, key_manager, fee="0.6iris")
        assert client._default_fee == [DecCoin("iris-atto", Decimal(600000000000000000))]
        assert client.reset().fee == DEFAULT_FEE

    def test_reset_defaults(self, client):
        ctx = client.reset()
        assert ctx.chain_id == "irishub-test"
        assert ctx.gas == 20000
        assert ctx.fee == DEFAULT_FEE
        assert ctx.mode == BroadcastMode.SYNC
        assert (ctx.account_number, ctx.sequence, ctx.memo, ctx.password) == (0, 0, "", "")


class TestPrepare:

    def test_account_state_loaded(self, client):
        ctx = client.prepare(alice_tx())
        assert (ctx.account_number, ctx.sequence) == (7, 12)
        assert ctx.password == PASSWORD

    def test_overrides(self, client):
        ctx = client.prepare(alice_tx(gas=30000, memo="hi", fee="1iris", mode="commit",
                                      simulate=True))
        assert ctx.gas == 30000
        assert ctx.memo == "hi"
        assert ctx.fee == [Coin("iris-atto", 10 ** 18)]
        assert ctx.mode == BroadcastMode.COMMIT
        assert ctx.simulate

    def test_empty_fields_keep_defaults(self, client):
        ctx = client.prepare(alice_tx())
        assert (ctx.gas, ctx.fee, ctx.mode, ctx.simulate) == (20000, DEFAULT_FEE,
                                                               BroadcastMode.SYNC, False)

    def test_unknown_sender(self, client):
        with pytest.raises(AddressNotFoundError):
            client.prepare(BaseTx(from_="nobody", password=PASSWORD))

    def test_unknown_account(self, client, node, key_manager):
        _, bob = alice_and_bob(key_manager)
        del node.accounts[str(bob)]
        with pytest.raises(AccountNotFoundError) as exc_info:
            client.prepare(BaseTx(from_="bob", password=PASSWORD))
        assert isinstance(exc_info.value.cause, NodeError)

    def test_malformed_account(self, client, node, key_manager):
        node.abci_overrides[ACCOUNT_QUERY_PATH] = ok_response({"address": "x", "sequence": "abc"})
        with pytest.raises(AccountNotFoundError) as exc_info:
            client.build_and_send([mk_send(key_manager)], alice_tx())
        assert isinstance(exc_info.value.cause, EncodingError)
        assert node.broadcasts == []

    def test_transport_failure_passes_through(self, client, node, key_manager):
        node.abci_query = Mock(side_effect=TransportError("connection refused"))
        with pytest.raises(TransportError, match="connection refused"):
            client.build_and_send([mk_send(key_manager)], alice_tx())
        assert node.broadcasts == []

    def test_offline_skips_account_lookup(self, node, key_manager):
        client = mk_client(node, key_manager, online=False)
        ctx = client.prepare(alice_tx())
        assert (ctx.account_number, ctx.sequence) == (0, 0)
        assert node.count("abci_query") == 1

    def test_unknown_fee_override(self, client):
        with pytest.raises(TokenNotFoundError):
            client.prepare(alice_tx(fee="1abc"))


class TestBuildAndSend:

    def test_sync(self, client, node, key_manager):
        msg = mk_send(key_manager)
        result = client.build_and_send([msg], alice_tx(memo="note"))
        assert result.hash == "A1B2C3D4"
        assert result.height == 0

        tx = node.decoded_broadcasts()[0]
        assert tx.msgs == [msg]
        assert tx.memo == "note"
        assert tx.fee.amount == DEFAULT_FEE
        assert tx.fee.gas == 20000
        sig = tx.signatures[0]
        assert (sig.account_number, sig.sequence) == (7, 12)

    def test_gas_override_does_not_leak(self, client, node, key_manager):
        client.build_and_send([mk_send(key_manager)], alice_tx(gas=30000, memo="first"))
        client.build_and_send([mk_send(key_manager)], alice_tx())

        first, second = node.decoded_broadcasts()
        assert first.fee.gas == 30000
        assert first.memo == "first"
        assert second.fee.gas == 20000
        assert second.memo == ""
        assert client.reset().gas == 20000

    def test_commit_mode(self, client, node, key_manager):
        result = client.build_and_send([mk_send(key_manager)], alice_tx(mode="commit"))
        assert node.count("broadcast_tx_commit") == 1
        assert result.height == 42
        assert result.tags.get("action") == "send"

    def test_simulate(self, client, node, key_manager):
        result = client.build_and_send([mk_send(key_manager)], alice_tx(simulate=True))
        assert (result.gas_wanted, result.gas_used) == (200000, 48000)
        assert node.broadcasts == []

    def test_invalid_msg_makes_no_call(self, client, node, key_manager):
        alice, _ = alice_and_bob(key_manager)
        calls = len(node.calls)
        msg = MsgSend(from_address=alice, to_address=alice, amount=[Coin("iris-atto", 1)])
        with pytest.raises(ValidationError):
            client.build_and_send([msg], alice_tx())
        assert len(node.calls) == calls

    def test_no_msgs(self, client):
        with pytest.raises(ValidationError):
            client.build_and_send([], alice_tx())

    def test_missing_password(self, client, node, key_manager):
        with pytest.raises(SigningError):
            client.build_and_send([mk_send(key_manager)], BaseTx(from_="alice"))
        assert node.broadcasts == []

    def test_node_rejection_propagates(self, client, node, key_manager):
        node.sync_response = {"code": 5, "log": "insufficient funds", "hash": ""}
        with pytest.raises(NodeError) as exc_info:
            client.build_and_send([mk_send(key_manager)], alice_tx())
        assert exc_info.value.code == 5

    def test_unexpected_fault_becomes_internal(self, client, key_manager, caplog):
        client.dispatcher.broadcast_tx = Mock(side_effect=RuntimeError("boom"))
        with caplog.at_level(logging.ERROR, logger="irishub_sdk"):
            with pytest.raises(InternalError) as exc_info:
                client.build_and_send([mk_send(key_manager)], alice_tx())
        assert isinstance(exc_info.value.cause, RuntimeError)
        assert "broadcast msg failed" in caplog.text

    def test_submission_holds_lock(self, client, key_manager):
        seen = []
        original = client.dispatcher.broadcast_tx

        def dispatch(tx_bytes, mode):
            seen.append(client._lock.locked())
            return original(tx_bytes, mode)

        client.dispatcher.broadcast_tx = dispatch
        threads = [threading.Thread(target=client.build_and_send,
                                    args=([mk_send(key_manager)], alice_tx()))
                   for _ in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
        assert seen == [True] * 4


class TestSendMsgBatch:

    def test_segments_committed_in_order(self, client, node, key_manager):
        msgs = mk_sends(key_manager, 10)
        results = client.send_msg_batch(3, msgs, alice_tx(mode="sync"))

        assert len(results) == 3
        assert node.count("broadcast_tx_commit") == 3
        txs = node.decoded_broadcasts()
        assert [len(tx.msgs) for tx in txs] == [3, 3, 4]
        assert [m.amount[0].amount for tx in txs for m in tx.msgs] == list(range(1, 11))

    def test_partial_failure_keeps_results(self, client, node, key_manager):
        failing = {
            "check_tx": {"code": 3, "codespace": "sdk", "log": "invalid sequence"},
            "hash": "",
            "height": "0",
        }
        responses = iter([node.commit_response, failing])
        original = node.broadcast_tx_commit

        def flaky(tx):
            original(tx)
            return next(responses)

        node.broadcast_tx_commit = flaky
        with pytest.raises(NodeError) as exc_info:
            client.send_msg_batch(3, mk_sends(key_manager, 9), alice_tx())

        err = exc_info.value
        assert err.code == 3
        assert [r.hash for r in err.results] == ["A1B2C3D4"]
        assert len(node.broadcasts) == 2

    def test_non_positive_batch(self, client, key_manager):
        with pytest.raises(ValidationError):
            client.send_msg_batch(0, mk_sends(key_manager, 2), alice_tx())


class TestQueries:

    def test_query_account(self, client, key_manager):
        alice, _ = alice_and_bob(key_manager)
        account = client.query_account(alice)
        assert account.address == str(alice)
        assert (account.account_number, account.sequence) == (7, 12)

    def test_query_account_invalid_address(self, client, node):
        calls = len(node.calls)
        with pytest.raises(ValidationError):
            client.query_account("not-an-address")
        assert len(node.calls) == calls

    def test_query_account_malformed(self, client, node, key_manager):
        alice, _ = alice_and_bob(key_manager)
        node.abci_overrides[ACCOUNT_QUERY_PATH] = ok_response({"address": "x", "sequence": "abc"})
        with pytest.raises(EncodingError):
            client.query_account(alice)

    def test_min_unit_after_cache_clear(self, client, node):
        client.converter.cache.clear()
        assert client.to_main_coin(Coin("iris-atto", 10 ** 18)) == [DecCoin("iris", Decimal(1))]
        assert node.count("abci_query") == 2

    def test_query_account_empty(self, client, node, key_manager):
        alice, _ = alice_and_bob(key_manager)
        node.abci_overrides[ACCOUNT_QUERY_PATH] = {"code": 0, "value": None}
        with pytest.raises(AccountNotFoundError):
            client.query_account(alice)

    def test_query_error_carries_node_log(self, client, node):
        node.abci_overrides["custom/gov/params"] = error_response(6, "unknown request", "gov")
        with pytest.raises(NodeError) as exc_info:
            client.query("custom/gov/params", {})
        err = exc_info.value
        assert (err.codespace, err.code, err.log) == ("gov", 6, "unknown request")

    def test_query_with_response(self, client, node):
        node.abci_overrides["custom/gov/params"] = ok_response({"limit": 3})
        assert client.query_with_response("custom/gov/params", {}) == {"limit": 3}

    def test_query_store(self, client, node):
        node.abci_overrides["/store/record/subspace"] = ok_response([{"key": "01"}])
        assert client.query_store("01ff", "record") == b'[{"key": "01"}]'
        assert node.calls[-1] == ("abci_query", ("/store/record/subspace", b"\x01\xff"))

    def test_query_store_bad_key(self, client):
        with pytest.raises(ValidationError):
            client.query_store("zz", "record")

    def test_shared_token_cache(self, key_manager):
        node = mk_node(key_manager)
        cache = TokenCache()
        AbstractClient.create(mk_config(), rpc=node, key_manager=key_manager, token_cache=cache)
        AbstractClient.create(mk_config(), rpc=node, key_manager=key_manager, token_cache=cache)
        assert node.count("abci_query") == 1
        assert cache.get("iris-atto").symbol == "iris"

    def test_token_cached_after_create(self, client, node):
        client.query_token("iris")
        client.to_main_coin(*DEFAULT_FEE)
        assert node.count("abci_query") == 1

    def test_query_tx(self, client, node, key_manager):
        client.build_and_send([mk_send(key_manager)], alice_tx())
        node.add_tx("A1B2C3D4", 42, node.decoded_broadcasts()[0])
        detail = client.query_tx("a1b2c3d4")
        assert detail.height == 42
        assert detail.timestamp == "2020-05-12T08:30:45Z"

