"""
SDK configuration.

Holds the node endpoint, chain identity and the transaction defaults every
submission starts from.
"""

from __future__ import annotations
import os
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

from .runtime.address import MAINNET_PREFIX, TESTNET_PREFIX
from .types.coins import DecCoin, parse_dec_coins
from .types.tx import BroadcastMode

DEFAULT_NODE_URI = "http://localhost:26657"
DEFAULT_GAS = 200000
DEFAULT_FEE = "0.6iris"

NETWORK_PREFIXES = {
    "mainnet": MAINNET_PREFIX,
    "testnet": TESTNET_PREFIX,
}


class SDKConfig(BaseModel):
    """Configuration for the SDK client."""

    node_uri: str = DEFAULT_NODE_URI
    chain_id: str = "irishub"
    network: str = "mainnet"
    gas: int = Field(default=DEFAULT_GAS, gt=0)
    fee: List[DecCoin] = Field(default_factory=lambda: parse_dec_coins(DEFAULT_FEE))
    mode: BroadcastMode = BroadcastMode.SYNC
    online: bool = True
    timeout: float = 30.0
    debug: bool = False
    user_agent: str = "irishub-sdk-python/0.1.0"

    model_config = {"frozen": True}

    @field_validator("fee", mode="before")
    @classmethod
    def parse_fee(cls, v: Any) -> Any:
        if isinstance(v, str):
            return parse_dec_coins(v)
        return v

    @field_validator("network")
    @classmethod
    def known_network(cls, v: str) -> str:
        v = v.lower()
        if v not in NETWORK_PREFIXES:
            raise ValueError(f"unknown network {v!r}, expected one of {sorted(NETWORK_PREFIXES)}")
        return v

    @property
    def address_prefix(self) -> str:
        return NETWORK_PREFIXES[self.network]

    @classmethod
    def from_env(cls, prefix: str = "IRIS_", environ: Optional[Dict[str, str]] = None,
                 **overrides: Any) -> SDKConfig:
        """
        Build a configuration from environment variables.

        Recognised variables: ``<prefix>NODE_URI``, ``CHAIN_ID``, ``NETWORK``,
        ``GAS``, ``FEE``, ``MODE``, ``ONLINE``, ``TIMEOUT``, ``DEBUG``.
        Explicit keyword overrides win over the environment.
        """
        environ = os.environ if environ is None else environ
        values: Dict[str, Any] = {}
        for name in ("node_uri", "chain_id", "network", "gas", "fee", "mode", "timeout"):
            raw = environ.get(f"{prefix}{name.upper()}")
            if raw:
                values[name] = raw
        for name in ("online", "debug"):
            raw = environ.get(f"{prefix}{name.upper()}")
            if raw:
                values[name] = raw.strip().lower() in ("1", "true", "yes", "on")
        values.update(overrides)
        return cls(**values)
