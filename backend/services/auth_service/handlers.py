"""Lambda-style handlers for the sign-in, signup, OTP and reset endpoints."""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Any, Dict

from core.aws import aws_client, dynamodb_resource
from core.config import get_settings
from utils.lambda_http import parse_request, require_group, run_handler

from .auth_service import AuthService
from .deps import build_auth_service
from .schemas import ResetPasswordReq, SignInReq, SignUpReq, StoreUserReq, VerifyOtpReq


LOGGER = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def _service() -> AuthService:
    settings = get_settings()
    logging.getLogger().setLevel(settings.LOG_LEVEL)
    return build_auth_service(
        settings,
        cognito_client=aws_client("cognito-idp", settings),
        users_table=dynamodb_resource(settings).Table(settings.USER_TABLE),
    )


def sign_in_handler(event: Dict[str, Any], _context: Any) -> Dict[str, Any]:
    return run_handler(
        lambda: _service().sign_in(parse_request(event, SignInReq, "Missing email or password")),
        failure_message="Sign in failed",
    )


def signup_handler(event: Dict[str, Any], _context: Any) -> Dict[str, Any]:
    return run_handler(
        lambda: _service().sign_up(parse_request(event, SignUpReq, "Missing email, fullName or password")),
        failure_message="Error during signup",
    )


def verify_otp_handler(event: Dict[str, Any], _context: Any) -> Dict[str, Any]:
    return run_handler(
        lambda: _service().verify_otp(parse_request(event, VerifyOtpReq, "Missing email, OTP, or purpose")),
        failure_message="Failed to verify OTP",
    )


def reset_password_handler(event: Dict[str, Any], _context: Any) -> Dict[str, Any]:
    return run_handler(
        lambda: _service().reset_password(
            parse_request(event, ResetPasswordReq, "Missing required fields: email or action")
        ),
        failure_message="Failed to reset password",
    )


def store_user_handler(event: Dict[str, Any], _context: Any) -> Dict[str, Any]:
    def _run():
        require_group(event, get_settings().OPERATOR_GROUP)
        return _service().store_user(parse_request(event, StoreUserReq, "Missing email or fullName"))

    return run_handler(_run, failure_message="Failed to store user")
