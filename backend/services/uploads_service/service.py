"""Presigned upload issuance and the hand-off to processing."""

from __future__ import annotations

import logging
import uuid
from typing import Any, Dict, Optional

from fastapi import HTTPException

from .functions import S3Storage
from .queue import ProcessingQueue
from .repository import UploadRepository
from .schemas import UploadRecord, UploadStatus


LOGGER = logging.getLogger(__name__)


def _validate_filename(filename: Optional[str]) -> str:
    if not filename or not filename.strip():
        raise HTTPException(status_code=400, detail="filename required")
    name = filename.strip()
    if "/" in name or "\\" in name or name in {".", ".."}:
        raise HTTPException(status_code=400, detail="Invalid filename")
    return name


def build_upload_key(user_id: str, upload_id: str, filename: str) -> str:
    return f"uploads/{user_id}/{upload_id}/{filename}"


class UploadService:
    def __init__(
        self,
        storage: S3Storage,
        uploads: UploadRepository,
        queue: ProcessingQueue,
        *,
        expires_seconds: int = 900,
    ) -> None:
        self.storage = storage
        self.uploads = uploads
        self.queue = queue
        self.expires_seconds = expires_seconds

    def issue_upload_target(
        self,
        user_id: str,
        filename: Optional[str],
        content_type: Optional[str] = None,
        size: Optional[int] = None,
    ) -> Dict[str, Any]:
        name = _validate_filename(filename)
        upload_id = str(uuid.uuid4())
        key = build_upload_key(user_id, upload_id, name)

        presigned_url = self.storage.presign_put_url(
            key,
            expires_seconds=self.expires_seconds,
            content_type=content_type,
        )
        self.uploads.create(
            UploadRecord(
                upload_id=upload_id,
                user_id=user_id,
                filename=name,
                s3_key=key,
                status=UploadStatus.UPLOADED,
                content_type=content_type,
                size=size,
            )
        )
        LOGGER.info("Issued upload %s for user %s", upload_id, user_id)
        return {
            "uploadId": upload_id,
            "s3Key": key,
            "presignedUrl": presigned_url,
            "expiresIn": self.expires_seconds,
        }

    def _owned_upload(self, user_id: str, upload_id: str) -> UploadRecord:
        record = self.uploads.get(upload_id)
        if record is None:
            raise HTTPException(status_code=404, detail="Upload not found")
        if record.user_id != user_id:
            raise HTTPException(status_code=403, detail="Access denied: upload belongs to another user")
        return record

    def mark_processing(self, user_id: str, upload_id: Optional[str], s3_key: Optional[str]) -> Dict[str, Any]:
        if not upload_id or not s3_key:
            raise HTTPException(status_code=400, detail="uploadId and s3Key required")

        record = self._owned_upload(user_id, upload_id)
        if record.s3_key != s3_key:
            raise HTTPException(status_code=400, detail="s3Key does not match upload")

        if self.uploads.mark_processing(upload_id) is None:
            raise HTTPException(status_code=404, detail="Upload not found")

        message_id = self.queue.publish({"uploadId": upload_id, "s3Key": s3_key, "userId": user_id})
        LOGGER.info("Queued upload %s for processing (message %s)", upload_id, message_id)
        return {"jobId": upload_id, "status": "accepted"}

    def get_upload(self, user_id: str, upload_id: str) -> Dict[str, Any]:
        return self._owned_upload(user_id, upload_id).to_public()


__all__ = ["UploadService", "build_upload_key"]
