"""
Key manager interface and in-memory implementation.

The key manager is the signer capability consumed by the transaction
builder: it resolves a key name to an address and signs bytes with the named
key once the right password is supplied.

Private keys are held encrypted at rest with Fernet, using a key derived from
the key's password with PBKDF2-HMAC-SHA256.
"""

from __future__ import annotations
import base64
import json
import logging
import os
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from cryptography.fernet import Fernet, InvalidToken
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from ..crypto.ed25519 import Ed25519Error, Ed25519PrivateKey, Ed25519PublicKey, PUBKEY_AMINO_TYPE
from ..runtime.address import AccAddress, MAINNET_PREFIX
from ..runtime.errors import SdkError
from ..types.tx import StdSignature

logger = logging.getLogger(__name__)

KEYS_CODESPACE = "keys"


class KeyManagerError(SdkError):
    """Key manager failures, namespaced under the ``keys`` codespace."""

    def __init__(self, log: str, code: int = 2, cause: Optional[Exception] = None):
        super().__init__(log, code, KEYS_CODESPACE, cause=cause)


class KeyNotFoundError(KeyManagerError):
    def __init__(self, name: str):
        super().__init__(f"key {name!r} not found", code=3)


class WrongPasswordError(KeyManagerError):
    def __init__(self, name: str, cause: Optional[Exception] = None):
        super().__init__(f"incorrect password for key {name!r}", code=4, cause=cause)


class KeyManager(ABC):
    """
    Abstract key manager.

    Defines the interface the client needs for address resolution and
    signing, plus the key lifecycle used by the keys module.
    """

    @abstractmethod
    def query(self, name: str) -> AccAddress:
        """
        Resolve a key name to its address.

        Raises:
            KeyNotFoundError: If no key has that name
        """

    @abstractmethod
    def sign(self, name: str, password: str, data: bytes) -> StdSignature:
        """
        Sign ``data`` with the named key.

        Returns:
            Signature carrying the public key; account number and sequence
            are left for the caller to fill in.
        """

    @abstractmethod
    def insert(self, name: str, password: str) -> Tuple[str, str]:
        """Create a key. Returns (address, hex seed to back up)."""

    @abstractmethod
    def recover(self, name: str, password: str, seed: str) -> str:
        """Restore a key from its hex seed. Returns the address."""

    @abstractmethod
    def import_key(self, name: str, password: str, armor: str) -> str:
        """Import an exported keystore. Returns the address."""

    @abstractmethod
    def export(self, name: str, password: str) -> str:
        """Export the named key as an encrypted keystore."""

    @abstractmethod
    def delete(self, name: str, password: str) -> None:
        """Delete the named key."""

    @abstractmethod
    def find(self, name: str, password: str) -> Tuple[Ed25519PublicKey, AccAddress]:
        """Return the public key and address of the named key."""


@dataclass
class _StoredKey:
    address: AccAddress
    public_key: Ed25519PublicKey
    salt: bytes
    ciphertext: bytes
    iterations: int


class MemoryKeyManager(KeyManager):
    """
    In-memory key manager with password-encrypted keys.

    Safe for use from several threads.
    """

    # PBKDF2 iteration count - OWASP 2023 recommendation for SHA256
    PBKDF2_ITERATIONS = 480000

    def __init__(self, prefix: str = MAINNET_PREFIX, iterations: Optional[int] = None):
        self.prefix = prefix
        self.iterations = iterations or self.PBKDF2_ITERATIONS
        self._keys: Dict[str, _StoredKey] = {}
        self._lock = threading.RLock()

    # ------------------------------------------------------------------
    # Encryption helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _fernet(password: str, salt: bytes, iterations: int) -> Fernet:
        kdf = PBKDF2HMAC(
            algorithm=hashes.SHA256(),
            length=32,
            salt=salt,
            iterations=iterations,
        )
        return Fernet(base64.urlsafe_b64encode(kdf.derive(password.encode("utf-8"))))

    def _store(self, name: str, password: str, private_key: Ed25519PrivateKey) -> str:
        if not name:
            raise KeyManagerError("key name cannot be empty")
        if not password:
            raise KeyManagerError("password cannot be empty")
        salt = os.urandom(16)
        public_key = private_key.public_key()
        stored = _StoredKey(
            address=public_key.address(self.prefix),
            public_key=public_key,
            salt=salt,
            ciphertext=self._fernet(password, salt, self.iterations).encrypt(private_key.to_bytes()),
            iterations=self.iterations,
        )
        with self._lock:
            if name in self._keys:
                raise KeyManagerError(f"key {name!r} already exists")
            self._keys[name] = stored
        logger.debug("stored key %s (%s)", name, stored.address)
        return str(stored.address)

    def _get(self, name: str) -> _StoredKey:
        with self._lock:
            stored = self._keys.get(name)
        if stored is None:
            raise KeyNotFoundError(name)
        return stored

    def _unlock(self, name: str, password: str) -> Ed25519PrivateKey:
        stored = self._get(name)
        try:
            raw = self._fernet(password, stored.salt, stored.iterations).decrypt(stored.ciphertext)
        except InvalidToken as e:
            raise WrongPasswordError(name, cause=e)
        return Ed25519PrivateKey(raw)

    # ------------------------------------------------------------------
    # KeyManager
    # ------------------------------------------------------------------

    def query(self, name: str) -> AccAddress:
        return self._get(name).address

    def sign(self, name: str, password: str, data: bytes) -> StdSignature:
        private_key = self._unlock(name, password)
        signature = private_key.sign(data)
        return StdSignature(
            pub_key={
                "type": PUBKEY_AMINO_TYPE,
                "value": base64.b64encode(private_key.public_key().to_bytes()).decode("ascii"),
            },
            signature=base64.b64encode(signature).decode("ascii"),
        )

    def insert(self, name: str, password: str) -> Tuple[str, str]:
        private_key = Ed25519PrivateKey.generate()
        address = self._store(name, password, private_key)
        return address, private_key.to_hex()

    def recover(self, name: str, password: str, seed: str) -> str:
        try:
            private_key = Ed25519PrivateKey.from_hex(seed.strip())
        except (Ed25519Error, ValueError) as e:
            raise KeyManagerError(f"invalid seed: {e}", cause=e)
        return self._store(name, password, private_key)

    def import_key(self, name: str, password: str, armor: str) -> str:
        try:
            data = json.loads(armor)
            salt = base64.b64decode(data["salt"])
            ciphertext = base64.b64decode(data["ciphertext"])
            iterations = int(data.get("iterations", self.iterations))
        except (ValueError, KeyError, TypeError) as e:
            raise KeyManagerError(f"malformed keystore: {e}", cause=e)
        try:
            raw = self._fernet(password, salt, iterations).decrypt(ciphertext)
        except InvalidToken as e:
            raise WrongPasswordError(name, cause=e)
        return self._store(name, password, Ed25519PrivateKey(raw))

    def export(self, name: str, password: str) -> str:
        private_key = self._unlock(name, password)
        salt = os.urandom(16)
        ciphertext = self._fernet(password, salt, self.iterations).encrypt(private_key.to_bytes())
        return json.dumps({
            "name": name,
            "address": str(private_key.public_key().address(self.prefix)),
            "pub_key": private_key.public_key().to_hex(),
            "kdf": "pbkdf2-sha256",
            "iterations": self.iterations,
            "salt": base64.b64encode(salt).decode("ascii"),
            "ciphertext": base64.b64encode(ciphertext).decode("ascii"),
        }, sort_keys=True)

    def delete(self, name: str, password: str) -> None:
        self._unlock(name, password)
        with self._lock:
            self._keys.pop(name, None)
        logger.debug("deleted key %s", name)

    def find(self, name: str, password: str) -> Tuple[Ed25519PublicKey, AccAddress]:
        private_key = self._unlock(name, password)
        return private_key.public_key(), self._get(name).address

    def list_keys(self) -> List[str]:
        with self._lock:
            return sorted(self._keys)
