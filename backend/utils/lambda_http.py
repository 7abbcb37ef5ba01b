"""Helpers shared by the API Gateway proxy handlers."""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Callable, Dict, List, Optional, Type, TypeVar

from fastapi import HTTPException
from pydantic import BaseModel, ValidationError

from core.config import get_settings


LOGGER = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class BadRequest(Exception):
    """Raised when an event cannot be turned into a request model."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


def parse_body(event: Dict[str, Any]) -> Dict[str, Any]:
    body = event.get("body")
    if body is None or body == "":
        return {}
    if isinstance(body, dict):
        return body
    if isinstance(body, str):
        try:
            data = json.loads(body)
        except json.JSONDecodeError:
            raise BadRequest("Invalid request body")
        if isinstance(data, dict):
            return data
    raise BadRequest("Invalid request body")


def parse_request(event: Dict[str, Any], model: Type[ModelT], missing_message: str) -> ModelT:
    data = parse_body(event)
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        errors = exc.errors(include_url=False)
        LOGGER.info("Rejected %s: %s", model.__name__, errors)
        # Absent or blank fields get the endpoint message; bad values name the field.
        for error in errors:
            if error.get("type") == "missing" or error.get("input") in (None, ""):
                continue
            field = ".".join(str(part) for part in error.get("loc", ()))
            if field:
                raise BadRequest(f"Invalid {field}")
        raise BadRequest(missing_message)


def _claims(event: Dict[str, Any]) -> Dict[str, Any]:
    context = event.get("requestContext") or {}
    return (context.get("authorizer") or {}).get("claims") or {}


def caller_id(event: Dict[str, Any], default: str = "anonymous") -> str:
    """Return the Cognito ``sub`` attached by the API Gateway authorizer."""

    return _claims(event).get("sub") or default


def caller_groups(event: Dict[str, Any]) -> List[str]:
    """Return the caller's Cognito groups.

    REST authorizers flatten ``cognito:groups`` into a string such as
    ``"admin"``, ``"admin,ops"`` or ``"[admin ops]"``.
    """

    groups = _claims(event).get("cognito:groups")
    if not groups:
        return []
    if isinstance(groups, (list, tuple)):
        return [str(group) for group in groups]
    return [group for group in re.split(r"[,\s]+", str(groups).strip("[]")) if group]


def require_group(event: Dict[str, Any], group: str) -> None:
    if group not in caller_groups(event):
        raise HTTPException(status_code=403, detail="Operation not permitted")


def respond(status_code: int, payload: Any, *, origin: Optional[str] = None) -> Dict[str, Any]:
    return {
        "statusCode": status_code,
        "headers": {
            "Content-Type": "application/json",
            "Access-Control-Allow-Origin": origin or get_settings().ALLOWED_ORIGIN,
            "Access-Control-Allow-Credentials": True,
        },
        "body": json.dumps(payload, default=str),
    }


def run_handler(
    operation: Callable[[], Any],
    *,
    failure_message: str,
    success_status: int = 200,
) -> Dict[str, Any]:
    """Execute ``operation`` and translate its outcome into a proxy response."""

    try:
        return respond(success_status, operation())
    except BadRequest as exc:
        return respond(400, {"message": exc.message})
    except HTTPException as exc:
        return respond(exc.status_code, {"message": exc.detail})
    except Exception as exc:
        LOGGER.exception("%s", failure_message)
        return respond(500, {"message": failure_message, "error": str(exc)})


__all__ = [
    "BadRequest",
    "caller_groups",
    "caller_id",
    "parse_body",
    "parse_request",
    "require_group",
    "respond",
    "run_handler",
]
