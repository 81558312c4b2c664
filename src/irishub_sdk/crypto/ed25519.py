"""
Ed25519 cryptographic operations.

Provides Ed25519 key generation, signing, verification and the Tendermint
address derivation (first 20 bytes of SHA-256 of the public key).
"""

from __future__ import annotations
import hashlib
from typing import Union

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.ed25519 import (
    Ed25519PrivateKey as CryptoEd25519PrivateKey,
    Ed25519PublicKey as CryptoEd25519PublicKey,
)

from ..runtime.address import ADDRESS_LENGTH, AccAddress, MAINNET_PREFIX

PUBKEY_AMINO_TYPE = "tendermint/PubKeyEd25519"


class Ed25519Error(Exception):
    """Base exception for Ed25519 operations."""
    pass


class Ed25519PublicKey:
    """
    Ed25519 public key.

    Provides verification operations and serialization.
    """

    def __init__(self, public_key_bytes: bytes):
        """
        Initialize from 32-byte public key.

        Args:
            public_key_bytes: 32-byte Ed25519 public key

        Raises:
            Ed25519Error: If key is invalid
        """
        if len(public_key_bytes) != 32:
            raise Ed25519Error(f"Ed25519 public key must be 32 bytes, got {len(public_key_bytes)}")

        self._key_bytes = public_key_bytes
        try:
            self._crypto_key = CryptoEd25519PublicKey.from_public_bytes(public_key_bytes)
        except ValueError as e:
            raise Ed25519Error(f"Invalid Ed25519 public key: {e}")

    @classmethod
    def from_hex(cls, hex_string: str) -> Ed25519PublicKey:
        """Create public key from hex string."""
        try:
            key_bytes = bytes.fromhex(hex_string)
        except ValueError as e:
            raise Ed25519Error(f"Invalid hex string: {e}")
        return cls(key_bytes)

    def to_bytes(self) -> bytes:
        """Get the 32-byte public key."""
        return self._key_bytes

    def to_hex(self) -> str:
        return self._key_bytes.hex()

    def address(self, prefix: str = MAINNET_PREFIX) -> AccAddress:
        """Derive the account address of this key."""
        return AccAddress(hashlib.sha256(self._key_bytes).digest()[:ADDRESS_LENGTH], prefix)

    def verify(self, signature: bytes, message: bytes) -> bool:
        """
        Verify a signature against a message.

        Args:
            signature: 64-byte Ed25519 signature
            message: Message that was signed

        Returns:
            True if signature is valid
        """
        if len(signature) != 64:
            return False
        try:
            self._crypto_key.verify(signature, message)
            return True
        except InvalidSignature:
            return False

    def __eq__(self, other) -> bool:
        if not isinstance(other, Ed25519PublicKey):
            return False
        return self._key_bytes == other._key_bytes

    def __hash__(self) -> int:
        return hash(self._key_bytes)

    def __repr__(self) -> str:
        return f"Ed25519PublicKey.from_hex('{self.to_hex()}')"


class Ed25519PrivateKey:
    """
    Ed25519 private key.

    Provides signing operations and key derivation.
    """

    def __init__(self, private_key_bytes: bytes):
        """
        Initialize from 32-byte private key seed.

        Args:
            private_key_bytes: 32-byte Ed25519 private key seed

        Raises:
            Ed25519Error: If key is invalid
        """
        if len(private_key_bytes) != 32:
            raise Ed25519Error(f"Ed25519 private key must be 32 bytes, got {len(private_key_bytes)}")
        self._key_bytes = private_key_bytes
        self._crypto_key = CryptoEd25519PrivateKey.from_private_bytes(private_key_bytes)

    @classmethod
    def generate(cls) -> Ed25519PrivateKey:
        """Generate a new random private key."""
        key = CryptoEd25519PrivateKey.generate()
        raw = key.private_bytes(
            encoding=serialization.Encoding.Raw,
            format=serialization.PrivateFormat.Raw,
            encryption_algorithm=serialization.NoEncryption(),
        )
        return cls(raw)

    @classmethod
    def from_hex(cls, hex_string: str) -> Ed25519PrivateKey:
        try:
            key_bytes = bytes.fromhex(hex_string)
        except ValueError as e:
            raise Ed25519Error(f"Invalid hex string: {e}")
        return cls(key_bytes)

    @classmethod
    def from_seed(cls, seed: Union[str, bytes]) -> Ed25519PrivateKey:
        """
        Derive a private key from a seed.

        Seeds that are not exactly 32 bytes are hashed with SHA-256.
        """
        if isinstance(seed, str):
            seed = seed.encode("utf-8")
        if len(seed) != 32:
            seed = hashlib.sha256(seed).digest()
        return cls(seed)

    def to_bytes(self) -> bytes:
        return self._key_bytes

    def to_hex(self) -> str:
        return self._key_bytes.hex()

    def public_key(self) -> Ed25519PublicKey:
        raw = self._crypto_key.public_key().public_bytes(
            encoding=serialization.Encoding.Raw,
            format=serialization.PublicFormat.Raw,
        )
        return Ed25519PublicKey(raw)

    def sign(self, message: bytes) -> bytes:
        """Sign a message, returning the 64-byte signature."""
        return self._crypto_key.sign(message)

    def __repr__(self) -> str:
        return "Ed25519PrivateKey(<hidden>)"
