"""Tests for the Cognito wrapper and its error classification."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from conftest import client_error
from utils.cognito_repository import (
    INVALID_CODE,
    INVALID_PASSWORD,
    NOT_AUTHORIZED,
    UNKNOWN,
    USER_EXISTS,
    USER_NOT_FOUND,
    CognitoRepository,
    classify_cognito_error,
)


@pytest.mark.parametrize(
    "code, kind",
    [
        ("CodeMismatchException", INVALID_CODE),
        ("ExpiredCodeException", INVALID_CODE),
        ("InvalidPasswordException", INVALID_PASSWORD),
        ("UsernameExistsException", USER_EXISTS),
        ("UserNotFoundException", USER_NOT_FOUND),
        ("NotAuthorizedException", NOT_AUTHORIZED),
        ("InternalErrorException", UNKNOWN),
    ],
)
def test_classify_by_error_code(code, kind):
    assert classify_cognito_error(client_error(code, "whatever")) == kind


@pytest.mark.parametrize(
    "message",
    [
        "Invalid verification code provided, please try again.",
        "Code mismatch",
        "Confirmation code has expired",
    ],
)
def test_classify_falls_back_to_message(message):
    assert classify_cognito_error(client_error("", message)) == INVALID_CODE
    assert classify_cognito_error(RuntimeError(message)) == INVALID_CODE


def _repo(client=None, secret=None):
    return CognitoRepository(
        client or MagicMock(),
        user_pool_id="us-east-1_pool",
        client_id="client-id",
        client_secret=secret,
    )


def test_secret_hash_only_when_secret_configured():
    assert _repo(secret="")._secret_hash("a@b.com") is None
    assert _repo(secret="shh")._secret_hash("a@b.com")


def test_login_user_returns_tokens():
    client = MagicMock()
    client.initiate_auth.return_value = {"AuthenticationResult": {"AccessToken": "tok"}}

    result = _repo(client, secret="shh").login_user("a@b.com", "pw")

    assert result == {"status": "OK", "tokens": {"AccessToken": "tok"}}
    kwargs = client.initiate_auth.call_args.kwargs
    assert kwargs["AuthFlow"] == "USER_PASSWORD_AUTH"
    assert kwargs["AuthParameters"]["USERNAME"] == "a@b.com"
    assert "SECRET_HASH" in kwargs["AuthParameters"]


def test_login_user_returns_challenge():
    client = MagicMock()
    client.initiate_auth.return_value = {"ChallengeName": "NEW_PASSWORD_REQUIRED", "Session": "s"}

    result = _repo(client).login_user("a@b.com", "pw")

    assert result["status"] == "NEW_PASSWORD_REQUIRED"
    assert result["session"] == "s"
    assert "SECRET_HASH" not in client.initiate_auth.call_args.kwargs["AuthParameters"]


def test_create_user_suppresses_invitation_and_sets_permanent_password():
    client = MagicMock()
    _repo(client).create_user("a@b.com", "Ada", "Sup3rSecret!")

    create_kwargs = client.admin_create_user.call_args.kwargs
    assert create_kwargs["MessageAction"] == "SUPPRESS"
    assert {"Name": "name", "Value": "Ada"} in create_kwargs["UserAttributes"]
    client.admin_set_user_password.assert_called_once_with(
        UserPoolId="us-east-1_pool",
        Username="a@b.com",
        Password="Sup3rSecret!",
        Permanent=True,
    )


def test_get_user_reports_status_and_email_verification():
    client = MagicMock()
    client.admin_get_user.return_value = {
        "UserStatus": "CONFIRMED",
        "UserAttributes": [{"Name": "email", "Value": "a@b.com"}, {"Name": "email_verified", "Value": "true"}],
    }

    assert _repo(client).get_user("a@b.com") == {"status": "CONFIRMED", "email_verified": True}
    client.admin_get_user.assert_called_once_with(UserPoolId="us-east-1_pool", Username="a@b.com")


def test_get_user_without_email_verified_attribute():
    client = MagicMock()
    client.admin_get_user.return_value = {"UserStatus": "UNCONFIRMED", "UserAttributes": []}
    assert _repo(client).get_user("a@b.com") == {"status": "UNCONFIRMED", "email_verified": False}
