"""Entry points for AWS Lambda functions wrapping the auth handlers."""

from __future__ import annotations

from typing import Any, Dict

from . import handlers


def auth(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    return handlers.sign_in_handler(event, context)


def signup(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    return handlers.signup_handler(event, context)


def verify_otp(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    return handlers.verify_otp_handler(event, context)


def reset_password(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    return handlers.reset_password_handler(event, context)


def store_user(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    return handlers.store_user_handler(event, context)


__all__ = ["auth", "signup", "verify_otp", "reset_password", "store_user"]
