"""
Record module: anchor content digests on chain and read them back.
"""

from __future__ import annotations
import base64
from typing import Sequence, Union

from ..runtime.errors import NotFoundError, SdkError, ValidationError
from ..tx.msgs.record import Content, MsgCreateRecord, Record
from ..types.tx import BaseTx, BroadcastMode
from .base import Module

QUERY_RECORD = "custom/record/record"
RECORD_ID_TAGS = ("record-id", "record_id", "create_record.record_id")


class RecordModule(Module):
    """
    Example:
        ```python
        record_id = client.record.create_record(
            [Content(digest="d1b2...", digest_algo="sha256")], base_tx)
        record = client.record.query_record(record_id)
        ```
    """

    name = "record"

    def create_record(self, contents: Sequence[Content], base_tx: BaseTx) -> str:
        """
        Create a record and return its id.

        The transaction is committed so that the id can be read from its tags.
        """
        msg = MsgCreateRecord(contents=list(contents), creator=self.sender(base_tx))
        base_tx = base_tx.model_copy(update={"mode": BroadcastMode.COMMIT})
        result = self.client.build_and_send([msg], base_tx)

        for key in RECORD_ID_TAGS:
            record_id = result.tags.get(key)
            if record_id:
                return record_id
        raise SdkError(f"record id missing from tags of tx {result.hash}")

    def query_record(self, record_id: Union[str, bytes]) -> Record:
        """Fetch a record by its hex id."""
        if isinstance(record_id, str):
            try:
                record_id = bytes.fromhex(record_id)
            except ValueError as e:
                raise ValidationError(f"invalid record id {record_id!r}", cause=e)

        data = self.client.query_with_response(QUERY_RECORD, {
            "RecordID": base64.b64encode(record_id).decode("ascii"),
        })
        if not data:
            raise NotFoundError(f"record {record_id.hex()} not found")
        return Record.model_validate(data)
