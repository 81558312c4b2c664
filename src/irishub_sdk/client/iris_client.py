"""
IRIS Hub client facade.
"""

from __future__ import annotations
from typing import Optional

from ..config import SDKConfig
from ..keys.keymanager import KeyManager
from ..modules.bank import BankModule
from ..modules.gov import GovModule
from ..modules.keys import KeysModule
from ..modules.record import RecordModule
from ..modules.token import TokenModule
from ..rpc.client import TendermintRPC
from ..runtime.codec import Codec
from .abstract_client import AbstractClient
from .coins import TokenCache


class IrisClient(AbstractClient):
    """
    Client for an IRIS Hub node with the module wrappers attached.

    Example:
        ```python
        config = SDKConfig.from_env()
        client = IrisClient.create(config)

        address, seed = client.keys.add("alice", "password")
        result = client.bank.send("iaa1...", "1iris",
                                  BaseTx(from_="alice", password="password"))
        detail = client.query_tx(result.hash)
        ```
    """

    def __init__(
        self,
        config: SDKConfig,
        rpc: TendermintRPC,
        key_manager: KeyManager,
        codec: Optional[Codec] = None,
        token_cache: Optional[TokenCache] = None,
    ):
        super().__init__(config, rpc, key_manager, codec, token_cache)
        self.bank = BankModule(self)
        self.token = TokenModule(self)
        self.gov = GovModule(self)
        self.record = RecordModule(self)
        self.keys = KeysModule(key_manager)

    def close(self) -> None:
        self.rpc.close()

    def __enter__(self) -> IrisClient:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
