"""
Record messages and types.

A record anchors one or more content digests on chain.
"""

from __future__ import annotations
from typing import List

from pydantic import BaseModel

from .base import Msg
from .registry import register_msg
from ...runtime.address import AccAddress
from ...runtime.errors import ValidationError

MAX_CONTENTS = 32


class Content(BaseModel):
    """Detailed information for one recorded item."""

    digest: str
    digest_algo: str
    uri: str = ""
    meta: str = ""

    model_config = {"frozen": True}


class Record(BaseModel):
    tx_hash: str = ""
    contents: List[Content] = []
    creator: str = ""


@register_msg
class MsgCreateRecord(Msg):
    """Create a record holding the given contents."""

    amino_type = "irismod/record/MsgCreateRecord"
    route_name = "record"

    contents: List[Content]
    creator: AccAddress

    def validate_basic(self) -> None:
        if not self.contents:
            raise ValidationError("contents missing")
        if len(self.contents) > MAX_CONTENTS:
            raise ValidationError(f"too many contents: {len(self.contents)} > {MAX_CONTENTS}")
        for i, content in enumerate(self.contents):
            if not content.digest.strip():
                raise ValidationError(f"content {i}: digest missing")
            if not content.digest_algo.strip():
                raise ValidationError(f"content {i}: digest algo missing")

    def get_signers(self) -> List[AccAddress]:
        return [self.creator]
