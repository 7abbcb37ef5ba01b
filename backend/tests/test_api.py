"""Tests for the FastAPI surface mounted by the kernel plugins."""

from __future__ import annotations

import time

import pytest

pytest.importorskip("httpx")

from fastapi.testclient import TestClient

from main import app, kernel
from services.auth_service.deps import get_auth_service
from services.uploads_service.deps import get_upload_service
from utils.get_current_user_cognito import TokenData, get_current_user


def _override_user() -> TokenData:
    return TokenData(
        sub="user-123",
        username="user@example.com",
        email="user@example.com",
        token_use="access",
        exp=int(time.time()) + 3600,
    )


@pytest.fixture
def client(auth_service, upload_service):
    app.dependency_overrides[get_auth_service] = lambda: auth_service
    app.dependency_overrides[get_upload_service] = lambda: upload_service
    app.dependency_overrides[get_current_user] = _override_user
    test_client = TestClient(app)
    try:
        yield test_client
    finally:
        app.dependency_overrides.clear()


def test_plugins_registered():
    assert set(kernel.plugins) == {"auth", "uploads"}


def test_signup_and_verify_flow(client: TestClient, users):
    response = client.post(
        "/api/signup", json={"email": "a@b.com", "fullName": "Ada", "password": "Sup3rSecret!"}
    )
    assert response.status_code == 200

    code = users.get("a@b.com").otp
    response = client.post("/api/verify-otp", json={"email": "a@b.com", "otp": code, "purpose": "signup"})

    assert response.status_code == 200
    assert response.json()["message"] == "OTP verified successfully"


def test_verify_wrong_code_detail(client: TestClient, users):
    client.post("/api/signup", json={"email": "a@b.com", "fullName": "Ada", "password": "Sup3rSecret!"})
    code = users.get("a@b.com").otp
    wrong = "000000" if code != "000000" else "111111"

    response = client.post("/api/verify-otp", json={"email": "a@b.com", "otp": wrong, "purpose": "signup"})

    assert response.status_code == 400
    assert response.json() == {"detail": "Invalid or expired OTP"}


def test_sign_in_rejects_malformed_email(client: TestClient):
    response = client.post("/api/auth", json={"email": "not-an-email", "password": "x"})
    assert response.status_code == 422


def test_reset_password_unverified(client: TestClient):
    response = client.post("/api/reset-password", json={"email": "a@b.com", "action": "forgot"})
    assert response.status_code == 404


def test_presign_and_complete(client: TestClient, queue):
    response = client.post("/api/presign", json={"filename": "a.pdf", "contentType": "application/pdf", "size": 7})
    assert response.status_code == 200
    issued = response.json()
    assert issued["s3Key"].startswith("uploads/user-123/")

    response = client.post("/api/complete", json={"uploadId": issued["uploadId"], "s3Key": issued["s3Key"]})
    assert response.status_code == 202
    assert response.json()["status"] == "accepted"
    assert queue.messages[0]["uploadId"] == issued["uploadId"]

    response = client.get(f"/api/uploads/{issued['uploadId']}")
    assert response.status_code == 200
    assert response.json()["status"] == "processing"


def test_uploads_require_token():
    app.dependency_overrides.clear()
    response = TestClient(app).post("/api/presign", json={"filename": "a.pdf"})
    assert response.status_code == 401


def test_store_user_requires_operator(client: TestClient, users):
    response = client.post("/api/store-user", json={"email": "c@d.com", "fullName": "Grace"})

    assert response.status_code == 403
    assert users.get("c@d.com") is None


def test_store_user_as_operator(client: TestClient, users):
    app.dependency_overrides[get_current_user] = lambda: TokenData(
        sub="op-1", token_use="access", exp=int(time.time()) + 3600, groups=["admin"]
    )

    response = client.post("/api/store-user", json={"email": "c@d.com", "fullName": "Grace"})

    assert response.status_code == 200
    assert users.get("c@d.com").verified is True


def test_store_user_rejects_anonymous_caller(auth_service):
    app.dependency_overrides.clear()
    app.dependency_overrides[get_auth_service] = lambda: auth_service
    try:
        response = TestClient(app).post("/api/store-user", json={"email": "c@d.com", "fullName": "Grace"})
    finally:
        app.dependency_overrides.clear()
    assert response.status_code == 401
