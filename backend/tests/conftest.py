"""Test configuration utilities shared across the backend suite."""

from __future__ import annotations

import os
from typing import Dict, List, Optional, Tuple

import pytest
from botocore.exceptions import ClientError


_DEFAULT_ENV = {
    "AWS_REGION": "us-east-1",
    "AWS_ACCESS_KEY_ID": "testing",
    "AWS_SECRET_ACCESS_KEY": "testing",
    "COGNITO_USER_POOL_ID": "us-east-1_test",
    "COGNITO_CLIENT_ID": "client-id",
    "USER_TABLE": "users-table",
    "FILE_TABLE": "files-table",
    "UPLOAD_BUCKET": "arn:aws:s3:::test-bucket",
    "PROCESSING_QUEUE_URL": "https://sqs.us-east-1.amazonaws.com/123456789012/processing",
    "SENDGRID_API_KEY": "SG.test",
    "SENDGRID_SENDER": "noreply@example.com",
}


for _key, _value in _DEFAULT_ENV.items():
    os.environ.setdefault(_key, _value)


from services.auth_service.otp import OtpWorkflow  # noqa: E402
from services.auth_service.schemas import OtpPurpose, UserProfile  # noqa: E402
from services.auth_service.auth_service import AuthService  # noqa: E402
from services.uploads_service.schemas import UploadRecord, UploadStatus  # noqa: E402
from services.uploads_service.service import UploadService  # noqa: E402


def client_error(code: str, message: str = "", operation: str = "Operation") -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": message}}, operation)


class FakeUsers:
    """In-memory stand-in for ``UserProfileRepository`` honouring its conditions."""

    def __init__(self) -> None:
        self.items: Dict[str, UserProfile] = {}
        self.writes = 0

    def get(self, email: str) -> Optional[UserProfile]:
        profile = self.items.get(email)
        if profile is None:
            return None
        return UserProfile.from_ddb(profile.to_ddb_item())

    def create_pending(self, email: str, full_name: str) -> bool:
        existing = self.items.get(email)
        if existing is not None and existing.verified:
            return False
        self.writes += 1
        self.items[email] = UserProfile(email=email, full_name=full_name, verified=False, created_at="now")
        return True

    def store_otp(self, email: str, otp: str, purpose: OtpPurpose, issued_at: int) -> None:
        self.writes += 1
        profile = self.items.setdefault(email, UserProfile(email=email))
        profile.otp = otp
        profile.otp_purpose = purpose
        profile.otp_issued_at = issued_at
        profile.otp_attempts = 0

    def mark_verified(self, email: str, otp: str, *, full_name: Optional[str] = None) -> bool:
        profile = self.items.get(email)
        if profile is None or profile.verified or profile.otp != otp:
            return False
        self.writes += 1
        profile.verified = True
        if full_name:
            profile.full_name = full_name
        profile.otp = profile.otp_purpose = profile.otp_issued_at = None
        profile.otp_attempts = 0
        return True

    def clear_otp(self, email: str, otp: str) -> bool:
        profile = self.items.get(email)
        if profile is None or profile.otp != otp:
            return False
        self.writes += 1
        profile.otp = profile.otp_purpose = profile.otp_issued_at = None
        profile.otp_attempts = 0
        return True

    def record_failed_attempt(self, email: str, otp: str) -> Optional[int]:
        profile = self.items.get(email)
        if profile is None or profile.otp != otp:
            return None
        self.writes += 1
        profile.otp_attempts += 1
        return profile.otp_attempts

    def put_verified(self, email: str, full_name: str) -> Optional[UserProfile]:
        if email in self.items:
            return None
        self.writes += 1
        profile = UserProfile(email=email, full_name=full_name, verified=True, created_at="now")
        self.items[email] = profile
        return profile


class FakeMailer:
    def __init__(self) -> None:
        self.sent: List[Tuple[str, str, OtpPurpose]] = []

    def send_otp(self, email: str, otp: str, purpose: OtpPurpose) -> None:
        self.sent.append((email, otp, purpose))

    def last_code(self, email: str) -> str:
        return [code for to, code, _ in self.sent if to == email][-1]


class FakeCognito:
    def __init__(self) -> None:
        self.users: Dict[str, str] = {}
        self.email_verified: set = set()
        self.statuses: Dict[str, str] = {}
        self.errors: Dict[str, ClientError] = {}
        self.login_result: Optional[dict] = None

    def _maybe_raise(self, operation: str) -> None:
        if operation in self.errors:
            raise self.errors[operation]

    def create_user(self, email: str, full_name: str, password: str):
        self._maybe_raise("create_user")
        if email in self.users:
            raise client_error("UsernameExistsException", "User account already exists")
        self.users[email] = password
        self.statuses[email] = "CONFIRMED"

    def set_password(self, email: str, password: str):
        self._maybe_raise("set_password")
        self.users[email] = password

    def get_user(self, email: str):
        self._maybe_raise("get_user")
        if email not in self.users:
            raise client_error("UserNotFoundException", "User does not exist.")
        return {"status": self.statuses.get(email, "CONFIRMED"), "email_verified": email in self.email_verified}

    def mark_email_verified(self, email: str):
        self._maybe_raise("mark_email_verified")
        self.email_verified.add(email)

    def login_user(self, email: str, password: str):
        self._maybe_raise("login_user")
        if self.users.get(email) != password:
            raise client_error("NotAuthorizedException", "Incorrect username or password.")
        if self.login_result is not None:
            return self.login_result
        return {
            "status": "OK",
            "tokens": {"IdToken": "id-token", "AccessToken": "access-token", "RefreshToken": "refresh-token"},
        }


class FakeS3Storage:
    def presign_put_url(self, key: str, expires_seconds: int = 900, content_type: Optional[str] = None) -> str:
        return f"https://s3.local/{key}?expires={expires_seconds}&type={content_type}"


class FakeUploads:
    def __init__(self) -> None:
        self.items: Dict[str, UploadRecord] = {}

    def create(self, record: UploadRecord) -> UploadRecord:
        record.created_at = record.created_at or "now"
        self.items[record.upload_id] = record
        return record

    def get(self, upload_id: str) -> Optional[UploadRecord]:
        return self.items.get(upload_id)

    def mark_processing(self, upload_id: str) -> Optional[UploadRecord]:
        record = self.items.get(upload_id)
        if record is None:
            return None
        record.status = UploadStatus.PROCESSING
        record.processed_at = "later"
        return record


class FakeQueue:
    def __init__(self) -> None:
        self.messages: List[dict] = []

    def publish(self, message: dict) -> str:
        self.messages.append(message)
        return f"msg-{len(self.messages)}"


@pytest.fixture
def users() -> FakeUsers:
    return FakeUsers()


@pytest.fixture
def mailer() -> FakeMailer:
    return FakeMailer()


@pytest.fixture
def cognito() -> FakeCognito:
    return FakeCognito()


@pytest.fixture
def auth_service(users: FakeUsers, mailer: FakeMailer, cognito: FakeCognito) -> AuthService:
    return AuthService(cognito=cognito, users=users, otp=OtpWorkflow(users, mailer, ttl_seconds=600))


@pytest.fixture
def uploads() -> FakeUploads:
    return FakeUploads()


@pytest.fixture
def queue() -> FakeQueue:
    return FakeQueue()


@pytest.fixture
def upload_service(uploads: FakeUploads, queue: FakeQueue) -> UploadService:
    return UploadService(storage=FakeS3Storage(), uploads=uploads, queue=queue, expires_seconds=900)
