"""One-time passcodes guarding the signup and password-reset transitions."""

from __future__ import annotations

import hmac
import logging
import secrets
import time
from typing import Optional

from .schemas import OtpPurpose, UserProfile


LOGGER = logging.getLogger(__name__)

OTP_LENGTH = 6
MAX_ATTEMPTS = 5


def _now() -> int:
    return int(time.time())


def generate_otp(length: int = OTP_LENGTH) -> str:
    # Leading zeros are kept so every code has exactly ``length`` digits.
    return f"{secrets.randbelow(10 ** length):0{length}d}"


class OtpWorkflow:
    """Issue codes onto user records and check submitted ones against them."""

    def __init__(self, users, mailer, *, ttl_seconds: int = 600, max_attempts: int = MAX_ATTEMPTS) -> None:
        self.users = users
        self.mailer = mailer
        self.ttl_seconds = ttl_seconds
        self.max_attempts = max_attempts

    def request_otp(self, email: str, purpose: OtpPurpose) -> str:
        code = generate_otp()
        self.users.store_otp(email, code, purpose, _now())
        self.mailer.send_otp(email, code, purpose)
        LOGGER.info("Issued %s OTP for %s", purpose.value, email)
        return code

    def is_fresh(self, profile: UserProfile) -> bool:
        if self.ttl_seconds <= 0 or profile.otp_issued_at is None:
            return True
        return _now() - profile.otp_issued_at <= self.ttl_seconds

    def matches(self, profile: Optional[UserProfile], code: str, purpose: OtpPurpose) -> bool:
        """True when ``code`` is the live code issued to ``profile`` for ``purpose``."""

        if profile is None or not profile.otp or not code:
            return False
        if self.max_attempts > 0 and profile.otp_attempts >= self.max_attempts:
            return False
        if profile.otp_purpose is not None and profile.otp_purpose != purpose:
            return False
        if not hmac.compare_digest(profile.otp.encode("utf-8"), code.strip().encode("utf-8")):
            return False
        if not self.is_fresh(profile):
            LOGGER.info("Expired %s OTP submitted for %s", purpose.value, profile.email)
            return False
        return True

    def check(self, profile: Optional[UserProfile], code: str, purpose: OtpPurpose) -> bool:
        """Like ``matches``, but a wrong guess counts against the live code.

        Once ``max_attempts`` guesses have failed the code is discarded and a
        new one has to be requested.
        """

        if self.matches(profile, code, purpose):
            return True
        if profile is None or not profile.otp or self.max_attempts <= 0:
            return False

        attempts = self.users.record_failed_attempt(profile.email, profile.otp)
        if attempts is not None and attempts >= self.max_attempts:
            self.users.clear_otp(profile.email, profile.otp)
            LOGGER.warning("Discarded %s OTP for %s after %d failed attempts", purpose.value, profile.email, attempts)
        return False


__all__ = ["MAX_ATTEMPTS", "OTP_LENGTH", "OtpWorkflow", "generate_otp"]
