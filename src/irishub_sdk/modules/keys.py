"""
Keys module: key lifecycle through the client's key manager.

Failures are re-raised as ``KeysError`` in the root codespace, each carrying
the description of the operation that failed and the key manager's error as
its cause.
"""

from __future__ import annotations
from typing import Optional, Tuple

from ..keys.keymanager import KeyManager
from ..runtime.errors import ROOT_CODESPACE, SdkError

ERR_INSERT = "key-manager insert error"
ERR_RECOVER = "key-manager recover error"
ERR_IMPORT = "key-manager import error"
ERR_EXPORT = "key-manager export error"
ERR_DELETE = "key-manager delete error"
ERR_SHOW = "key-manager show error"


class KeysError(SdkError):
    def __init__(self, description: str, cause: Optional[SdkError] = None):
        log = f"{description}: {cause.log}" if cause is not None else description
        super().__init__(log, 2, ROOT_CODESPACE, cause=cause)
        self.description = description


class KeysModule:
    """
    Example:
        ```python
        address, seed = client.keys.add("alice", "password")
        client.keys.show("alice", "password")  # -> address
        ```
    """

    name = "keys"

    def __init__(self, key_manager: KeyManager):
        self.key_manager = key_manager

    def add(self, name: str, password: str) -> Tuple[str, str]:
        """Create a key. Returns (address, hex seed)."""
        try:
            return self.key_manager.insert(name, password)
        except SdkError as e:
            raise KeysError(ERR_INSERT, e)

    def recover(self, name: str, password: str, seed: str) -> str:
        try:
            return self.key_manager.recover(name, password, seed)
        except SdkError as e:
            raise KeysError(ERR_RECOVER, e)

    def import_key(self, name: str, password: str, armor: str) -> str:
        try:
            return self.key_manager.import_key(name, password, armor)
        except SdkError as e:
            raise KeysError(ERR_IMPORT, e)

    def export(self, name: str, password: str) -> str:
        try:
            return self.key_manager.export(name, password)
        except SdkError as e:
            raise KeysError(ERR_EXPORT, e)

    def delete(self, name: str, password: str) -> None:
        try:
            self.key_manager.delete(name, password)
        except SdkError as e:
            raise KeysError(ERR_DELETE, e)

    def show(self, name: str, password: str) -> str:
        try:
            _, address = self.key_manager.find(name, password)
        except SdkError as e:
            raise KeysError(ERR_SHOW, e)
        return str(address)
