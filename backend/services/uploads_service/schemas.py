"""Request models and stored records for presigned uploads."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class UploadStatus(str, Enum):
    UPLOADED = "uploaded"
    PROCESSING = "processing"


class PresignReq(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    filename: str = Field(..., min_length=1, max_length=255)
    content_type: Optional[str] = Field(None, alias="contentType", max_length=255)
    size: Optional[int] = Field(None, ge=0)


class CompleteReq(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    upload_id: str = Field(..., alias="uploadId", min_length=1)
    s3_key: str = Field(..., alias="s3Key", min_length=1)


@dataclass
class UploadRecord:
    upload_id: str
    user_id: str
    filename: str
    s3_key: str
    status: UploadStatus = UploadStatus.UPLOADED
    content_type: Optional[str] = None
    size: Optional[int] = None
    created_at: Optional[str] = None
    processed_at: Optional[str] = None

    @classmethod
    def from_ddb(cls, item: Dict[str, Any]) -> "UploadRecord":
        size = item.get("size")
        return cls(
            upload_id=item["uploadId"],
            user_id=item.get("userId", ""),
            filename=item.get("filename", ""),
            s3_key=item.get("s3Key", ""),
            status=UploadStatus(item.get("status", UploadStatus.UPLOADED.value)),
            content_type=item.get("contentType"),
            size=int(size) if size is not None else None,
            created_at=item.get("createdAt"),
            processed_at=item.get("processedAt"),
        )

    def to_ddb_item(self) -> Dict[str, Any]:
        item: Dict[str, Any] = {
            "uploadId": self.upload_id,
            "userId": self.user_id,
            "filename": self.filename,
            "s3Key": self.s3_key,
            "status": self.status.value,
        }
        if self.content_type:
            item["contentType"] = self.content_type
        if self.size is not None:
            item["size"] = self.size
        if self.created_at:
            item["createdAt"] = self.created_at
        if self.processed_at:
            item["processedAt"] = self.processed_at
        return item

    def to_public(self) -> Dict[str, Any]:
        item = self.to_ddb_item()
        item.setdefault("size", None)
        item.setdefault("processedAt", None)
        return item
