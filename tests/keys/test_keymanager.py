"""
Unit tests for the in-memory key manager.
"""

import base64
import json

import pytest

from helpers import ALICE_SEED, PASSWORD, TEST_ITERATIONS
from irishub_sdk.crypto.ed25519 import Ed25519PrivateKey, Ed25519PublicKey
from irishub_sdk.keys import (
    KEYS_CODESPACE,
    KeyManagerError,
    KeyNotFoundError,
    MemoryKeyManager,
    WrongPasswordError,
)
from irishub_sdk.runtime.address import TESTNET_PREFIX


@pytest.fixture
def km():
    return MemoryKeyManager(iterations=TEST_ITERATIONS)


class TestLifecycle:

    def test_insert_and_query(self, km):
        address, seed = km.insert("carol", PASSWORD)
        assert str(km.query("carol")) == address
        expected = Ed25519PrivateKey.from_hex(seed).public_key().address()
        assert str(expected) == address

    def test_recover_is_deterministic(self, km):
        address = km.recover("alice", PASSWORD, ALICE_SEED)
        other = MemoryKeyManager(iterations=TEST_ITERATIONS)
        assert other.recover("alice2", "another-password", ALICE_SEED) == address

    def test_prefix(self):
        km = MemoryKeyManager(prefix=TESTNET_PREFIX, iterations=TEST_ITERATIONS)
        address, _ = km.insert("carol", PASSWORD)
        assert address.startswith("faa1")

    def test_duplicate_name(self, km):
        km.insert("carol", PASSWORD)
        with pytest.raises(KeyManagerError, match="already exists"):
            km.insert("carol", PASSWORD)

    def test_empty_password(self, km):
        with pytest.raises(KeyManagerError):
            km.insert("carol", "")

    def test_invalid_seed(self, km):
        with pytest.raises(KeyManagerError, match="invalid seed"):
            km.recover("carol", PASSWORD, "not-hex")

    def test_unknown_key(self, km):
        with pytest.raises(KeyNotFoundError) as exc_info:
            km.query("nobody")
        assert exc_info.value.codespace == KEYS_CODESPACE

    def test_delete(self, km):
        km.insert("carol", PASSWORD)
        km.delete("carol", PASSWORD)
        assert km.list_keys() == []

    def test_delete_wrong_password(self, km):
        km.insert("carol", PASSWORD)
        with pytest.raises(WrongPasswordError):
            km.delete("carol", "wrong")
        assert km.list_keys() == ["carol"]


class TestSigning:

    def test_sign_verifies(self, km):
        km.recover("alice", PASSWORD, ALICE_SEED)
        sig = km.sign("alice", PASSWORD, b"payload")
        assert sig.pub_key["type"] == "tendermint/PubKeyEd25519"
        pub_key = Ed25519PublicKey(base64.b64decode(sig.pub_key["value"]))
        assert pub_key.verify(base64.b64decode(sig.signature), b"payload")

    def test_sign_wrong_password(self, km):
        km.recover("alice", PASSWORD, ALICE_SEED)
        with pytest.raises(WrongPasswordError):
            km.sign("alice", "wrong", b"payload")

    def test_find(self, km):
        address = km.recover("alice", PASSWORD, ALICE_SEED)
        pub_key, addr = km.find("alice", PASSWORD)
        assert str(addr) == address
        assert pub_key.address() == addr


class TestExportImport:

    def test_roundtrip(self, km):
        address = km.recover("alice", PASSWORD, ALICE_SEED)
        armor = km.export("alice", PASSWORD)
        data = json.loads(armor)
        assert data["address"] == address
        assert "ciphertext" in data and "salt" in data

        other = MemoryKeyManager(iterations=TEST_ITERATIONS)
        assert other.import_key("alice", PASSWORD, armor) == address

    def test_import_wrong_password(self, km):
        km.recover("alice", PASSWORD, ALICE_SEED)
        armor = km.export("alice", PASSWORD)
        with pytest.raises(WrongPasswordError):
            MemoryKeyManager(iterations=TEST_ITERATIONS).import_key("alice", "wrong", armor)

    def test_import_malformed(self, km):
        with pytest.raises(KeyManagerError, match="malformed keystore"):
            km.import_key("alice", PASSWORD, "{}")
