"""Dependency registration for the auth service."""

from __future__ import annotations

from core.config import Settings
from kernel import Kernel
from kernel.runtime import get_kernel
from utils.cognito_repository import CognitoRepository

from .auth_service import AuthService
from .mailer import OtpMailer
from .otp import OtpWorkflow
from .repository import UserProfileRepository


CAPABILITY_USERS_TABLE = "capability.auth.users_table"
CAPABILITY_AUTH_SERVICE = "capability.auth.service"


def build_auth_service(settings: Settings, *, cognito_client, users_table) -> AuthService:
    """Assemble the auth service from already-created AWS handles."""

    users = UserProfileRepository(users_table)
    cognito = CognitoRepository(
        cognito_client,
        user_pool_id=settings.COGNITO_USER_POOL_ID,
        client_id=settings.COGNITO_CLIENT_ID,
        client_secret=settings.COGNITO_SECRET,
    )
    mailer = OtpMailer(settings.SENDGRID_API_KEY, settings.SENDGRID_SENDER, ttl_seconds=settings.OTP_TTL_SECONDS)
    otp = OtpWorkflow(
        users,
        mailer,
        ttl_seconds=settings.OTP_TTL_SECONDS,
        max_attempts=settings.OTP_MAX_ATTEMPTS,
    )
    return AuthService(cognito=cognito, users=users, otp=otp)


def register_dependencies(kernel: Kernel) -> None:
    """Register kernel capabilities consumed by the auth service."""

    def _users_table(k: Kernel):
        return k.resolve("aws.dynamodb").Table(k.settings.USER_TABLE)

    def _service(k: Kernel) -> AuthService:
        return build_auth_service(
            k.settings,
            cognito_client=k.resolve("aws.cognito-idp"),
            users_table=k.resolve(CAPABILITY_USERS_TABLE),
        )

    kernel.register_capability(CAPABILITY_USERS_TABLE, _users_table)
    kernel.register_capability(CAPABILITY_AUTH_SERVICE, _service)


def get_auth_service() -> AuthService:
    """FastAPI dependency resolving the configured auth service."""

    kernel = get_kernel()
    return kernel.resolve(CAPABILITY_AUTH_SERVICE)
