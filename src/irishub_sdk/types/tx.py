"""
Transaction, request and result types.

Covers the caller-facing request (``BaseTx``), the signed transaction as it
travels on the wire (``StdTx``), and the normalised results returned by
broadcasts and queries.
"""

from __future__ import annotations
import base64
import binascii
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from .coins import Coin, DecCoin, parse_dec_coins


class BroadcastMode(str, Enum):
    """Delivery guarantee requested from the node."""

    SYNC = "sync"
    ASYNC = "async"
    COMMIT = "commit"


class BaseTx(BaseModel):
    """
    Per-call transaction parameters supplied by the caller.

    Only non-empty / non-zero fields override the configured defaults.
    """

    from_: str = Field(default="", alias="from")
    password: str = ""
    fee: List[DecCoin] = Field(default_factory=list)
    gas: int = Field(default=0, ge=0)
    memo: str = ""
    mode: Optional[BroadcastMode] = None
    simulate: bool = False

    model_config = {"frozen": True, "populate_by_name": True}

    @field_validator("fee", mode="before")
    @classmethod
    def parse_fee(cls, v: Any) -> Any:
        if v is None:
            return []
        if isinstance(v, str):
            return parse_dec_coins(v)
        return v

    @field_validator("fee")
    @classmethod
    def positive_fee(cls, v: List[DecCoin]) -> List[DecCoin]:
        for coin in v:
            if not coin.is_positive():
                raise ValueError(f"fee must be positive: {coin}")
        return v


# ---------------------------------------------------------------------------
# Signed transaction
# ---------------------------------------------------------------------------

@dataclass
class StdFee:
    amount: List[Coin] = field(default_factory=list)
    gas: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {"amount": [c.to_dict() for c in self.amount], "gas": str(self.gas)}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> StdFee:
        return cls(
            amount=[Coin.from_dict(c) for c in data.get("amount") or []],
            gas=int(data.get("gas") or 0),
        )


@dataclass
class StdSignature:
    pub_key: Dict[str, str]
    signature: str
    account_number: int = 0
    sequence: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "pub_key": dict(self.pub_key),
            "signature": self.signature,
            "account_number": str(self.account_number),
            "sequence": str(self.sequence),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> StdSignature:
        return cls(
            pub_key=dict(data.get("pub_key") or {}),
            signature=data.get("signature", ""),
            account_number=int(data.get("account_number") or 0),
            sequence=int(data.get("sequence") or 0),
        )


@dataclass
class StdTx:
    """A signed transaction: messages, fee, signatures and memo."""

    msgs: List[Any]
    fee: StdFee
    signatures: List[StdSignature] = field(default_factory=list)
    memo: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": "irishub/bank/StdTx",
            "value": {
                "msg": [m.to_dict() for m in self.msgs],
                "fee": self.fee.to_dict(),
                "signatures": [s.to_dict() for s in self.signatures],
                "memo": self.memo,
            },
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> StdTx:
        from ..tx.msgs.registry import msg_from_dict

        value = data.get("value", data)
        return cls(
            msgs=[msg_from_dict(m) for m in value.get("msg") or []],
            fee=StdFee.from_dict(value.get("fee") or {}),
            signatures=[StdSignature.from_dict(s) for s in value.get("signatures") or []],
            memo=value.get("memo", ""),
        )


# ---------------------------------------------------------------------------
# Tags
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Tag:
    key: str
    value: str

    def __str__(self) -> str:
        return f"{self.key}={self.value}"


class Tags(list):
    """Ordered list of key/value tags emitted by a transaction."""

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        for tag in self:
            if tag.key == key:
                return tag.value
        return default

    def get_all(self, key: str) -> List[str]:
        return [tag.value for tag in self if tag.key == key]

    def __str__(self) -> str:
        return ", ".join(str(t) for t in self)


def _decode_tag_part(raw: Any) -> str:
    if raw is None:
        return ""
    if not isinstance(raw, str):
        return str(raw)
    try:
        return base64.b64decode(raw, validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError, ValueError):
        return raw


def parse_tags(tags: Optional[Iterable[Dict[str, Any]]] = None,
               events: Optional[Iterable[Dict[str, Any]]] = None) -> Tags:
    """
    Normalise node tags into ``Tags``.

    Older nodes emit flat ``tags``; newer ones emit ``events`` whose
    attributes become ``"<event type>.<key>"`` tags. Keys and values may be
    base64 encoded.
    """
    result = Tags()
    for tag in tags or []:
        result.append(Tag(_decode_tag_part(tag.get("key")), _decode_tag_part(tag.get("value"))))
    for event in events or []:
        prefix = event.get("type", "")
        for attr in event.get("attributes") or []:
            key = _decode_tag_part(attr.get("key"))
            result.append(Tag(f"{prefix}.{key}" if prefix else key, _decode_tag_part(attr.get("value"))))
    return result


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------

@dataclass
class ResultTx:
    """
    Outcome of a broadcast.

    Which fields are populated depends on the broadcast mode: sync and async
    only know the hash; commit fills everything.
    """

    hash: str = ""
    height: int = 0
    gas_wanted: int = 0
    gas_used: int = 0
    tags: Tags = field(default_factory=Tags)

    def is_success(self) -> bool:
        return bool(self.hash)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "hash": self.hash,
            "height": self.height,
            "gas_wanted": self.gas_wanted,
            "gas_used": self.gas_used,
            "tags": [{"key": t.key, "value": t.value} for t in self.tags],
        }


@dataclass
class TxResult:
    code: int = 0
    log: str = ""
    gas_wanted: int = 0
    gas_used: int = 0
    tags: Tags = field(default_factory=Tags)


@dataclass
class TxDetail:
    hash: str
    height: int
    tx: StdTx
    result: TxResult
    timestamp: str


@dataclass
class TxSearch:
    total: int
    page: int
    size: int
    txs: List[TxDetail] = field(default_factory=list)


class BaseAccount(BaseModel):
    """Account state as returned by ``custom/acc/account``."""

    address: str = ""
    coins: List[Coin] = Field(default_factory=list)
    public_key: Optional[Any] = None
    account_number: int = 0
    sequence: int = 0

    model_config = {"extra": "ignore"}

    @model_validator(mode="before")
    @classmethod
    def unwrap_amino(cls, data: Any) -> Any:
        if isinstance(data, dict) and "value" in data and "type" in data:
            return data["value"]
        return data

    @field_validator("coins", mode="before")
    @classmethod
    def none_coins(cls, v: Any) -> Any:
        return v or []
