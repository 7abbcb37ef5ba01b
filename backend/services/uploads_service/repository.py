"""DynamoDB repository for upload metadata."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from botocore.exceptions import ClientError

from .schemas import UploadRecord, UploadStatus


ISO_FORMAT = "%Y-%m-%dT%H:%M:%S.%fZ"


def _utcnow() -> str:
    return datetime.utcnow().strftime(ISO_FORMAT)


class UploadRepository:
    """Persist and query upload rows keyed by ``uploadId``."""

    def __init__(self, table) -> None:
        self._table = table

    def create(self, record: UploadRecord) -> UploadRecord:
        if record.created_at is None:
            record.created_at = _utcnow()
        self._table.put_item(Item=record.to_ddb_item())
        return record

    def get(self, upload_id: str) -> Optional[UploadRecord]:
        response = self._table.get_item(Key={"uploadId": upload_id})
        item = response.get("Item")
        if not item:
            return None
        return UploadRecord.from_ddb(item)

    def mark_processing(self, upload_id: str) -> Optional[UploadRecord]:
        """Flip an existing row to ``processing``; ``None`` when the id is unknown."""

        try:
            response = self._table.update_item(
                Key={"uploadId": upload_id},
                UpdateExpression="SET #s = :s, processedAt = :p",
                ConditionExpression="attribute_exists(uploadId)",
                ExpressionAttributeNames={"#s": "status"},
                ExpressionAttributeValues={":s": UploadStatus.PROCESSING.value, ":p": _utcnow()},
                ReturnValues="ALL_NEW",
            )
        except ClientError as exc:
            if exc.response.get("Error", {}).get("Code") == "ConditionalCheckFailedException":
                return None
            raise
        return UploadRecord.from_ddb(response["Attributes"])


__all__ = ["UploadRepository"]
