"""Dependency helpers for the uploads plugin."""

from __future__ import annotations

from core.config import Settings
from kernel import Kernel
from kernel.runtime import get_kernel

from .functions import S3Storage
from .queue import ProcessingQueue
from .repository import UploadRepository
from .service import UploadService


def _normalize_bucket_name(bucket_identifier: str) -> str:
    """Return a usable bucket name extracted from an ARN or URI string."""

    bucket = bucket_identifier.strip()
    if not bucket:
        raise ValueError("S3 bucket identifier cannot be empty")

    if bucket.startswith("arn:"):
        # Standard bucket ARNs look like ``arn:aws:s3:::bucket-name``.
        if ":::" in bucket:
            bucket = bucket.split(":::")[-1]
        else:
            bucket = bucket.rsplit(":", 1)[-1]
    elif bucket.startswith("s3://"):
        bucket = bucket[5:]
    if "/" in bucket:
        bucket = bucket.split("/", 1)[0]

    if not bucket:
        raise ValueError("Could not determine S3 bucket name from identifier")

    return bucket


CAPABILITY_NAME = "capability.uploads.service"


def build_upload_service(settings: Settings, *, s3_client, sqs_client, files_table) -> UploadService:
    storage = S3Storage(
        bucket=_normalize_bucket_name(settings.UPLOAD_BUCKET),
        region=settings.AWS_REGION,
        client=s3_client,
    )
    return UploadService(
        storage=storage,
        uploads=UploadRepository(files_table),
        queue=ProcessingQueue(sqs_client, settings.PROCESSING_QUEUE_URL),
        expires_seconds=settings.PRESIGN_EXPIRES_SECONDS,
    )


def register_uploads_dependency(kernel: Kernel) -> None:
    """Expose the shared upload service capability through the kernel."""

    def _factory(k: Kernel) -> UploadService:
        settings = k.settings
        return build_upload_service(
            settings,
            s3_client=k.resolve("aws.s3"),
            sqs_client=k.resolve("aws.sqs"),
            files_table=k.resolve("aws.dynamodb").Table(settings.FILE_TABLE),
        )

    kernel.register_capability(CAPABILITY_NAME, _factory)


def get_upload_service() -> UploadService:
    """FastAPI dependency used by routers to access the upload service."""

    kernel = get_kernel()
    return kernel.resolve(CAPABILITY_NAME)
