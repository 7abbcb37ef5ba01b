"""Lambda-style handlers for presign, complete and upload status."""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Any, Dict

from core.aws import aws_client, dynamodb_resource
from core.config import get_settings
from utils.lambda_http import BadRequest, caller_id, parse_request, run_handler

from .deps import build_upload_service
from .schemas import CompleteReq, PresignReq
from .service import UploadService


LOGGER = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def _service() -> UploadService:
    settings = get_settings()
    logging.getLogger().setLevel(settings.LOG_LEVEL)
    return build_upload_service(
        settings,
        s3_client=aws_client("s3", settings),
        sqs_client=aws_client("sqs", settings),
        files_table=dynamodb_resource(settings).Table(settings.FILE_TABLE),
    )


def presign_handler(event: Dict[str, Any], _context: Any) -> Dict[str, Any]:
    def _run():
        req = parse_request(event, PresignReq, "filename required")
        return _service().issue_upload_target(caller_id(event), req.filename, req.content_type, req.size)

    return run_handler(_run, failure_message="internal")


def complete_handler(event: Dict[str, Any], _context: Any) -> Dict[str, Any]:
    def _run():
        req = parse_request(event, CompleteReq, "uploadId and s3Key required")
        return _service().mark_processing(caller_id(event), req.upload_id, req.s3_key)

    return run_handler(_run, failure_message="internal", success_status=202)


def get_upload_handler(event: Dict[str, Any], _context: Any) -> Dict[str, Any]:
    def _run():
        upload_id = (event.get("pathParameters") or {}).get("uploadId")
        if not upload_id:
            raise BadRequest("uploadId required")
        return _service().get_upload(caller_id(event), upload_id)

    return run_handler(_run, failure_message="internal")
