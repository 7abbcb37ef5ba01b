from __future__ import annotations

from typing import Optional

import boto3
from botocore.config import Config


class S3Storage:
    def __init__(self, bucket: str, region: Optional[str] = None, client=None):
        self.bucket = bucket
        self.client = client or boto3.client(
            "s3",
            region_name=region,
            config=Config(
                retries={"max_attempts": 10, "mode": "adaptive"},
                connect_timeout=5,
                read_timeout=60,
                signature_version="s3v4",
            ),
        )

    # -------- Presigned URLs --------
    def presign_put_url(
        self,
        key: str,
        expires_seconds: int = 900,
        content_type: Optional[str] = None,
    ) -> str:
        params = {"Bucket": self.bucket, "Key": key}
        if content_type:
            params["ContentType"] = content_type
        return self.client.generate_presigned_url(
            "put_object",
            Params=params,
            ExpiresIn=expires_seconds,
        )
