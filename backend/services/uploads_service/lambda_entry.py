"""Entry points for AWS Lambda functions wrapping the upload handlers."""

from __future__ import annotations

from typing import Any, Dict

from . import handlers


def presign(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    return handlers.presign_handler(event, context)


def complete(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    return handlers.complete_handler(event, context)


def get_upload(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    return handlers.get_upload_handler(event, context)


__all__ = ["presign", "complete", "get_upload"]
