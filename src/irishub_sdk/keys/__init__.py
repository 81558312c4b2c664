"""
Key management for the IRIS Hub Python SDK.

Provides the key manager interface consumed by the signer and an in-memory,
password-encrypted implementation.
"""

from .keymanager import (
    KeyManager,
    MemoryKeyManager,
    KeyManagerError,
    KeyNotFoundError,
    WrongPasswordError,
    KEYS_CODESPACE,
)

__all__ = [
    "KeyManager",
    "MemoryKeyManager",
    "KeyManagerError",
    "KeyNotFoundError",
    "WrongPasswordError",
    "KEYS_CODESPACE",
]
