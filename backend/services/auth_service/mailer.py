"""OTP delivery through SendGrid."""

from __future__ import annotations

import logging
from typing import Optional

from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import Mail

from .schemas import OtpPurpose


LOGGER = logging.getLogger(__name__)

_SUBJECTS = {
    OtpPurpose.SIGNUP: "Your OTP for SimplifAI Verification",
    OtpPurpose.RESET: "Your OTP for Password Reset",
}


class OtpMailer:
    def __init__(self, api_key: Optional[str], sender: Optional[str], *, ttl_seconds: int = 600) -> None:
        self.api_key = api_key
        self.sender = sender
        self.ttl_seconds = ttl_seconds

    def build_message(self, email: str, otp: str, purpose: OtpPurpose) -> Mail:
        text = f"Your OTP is {otp}."
        if self.ttl_seconds > 0:
            minutes = max(1, self.ttl_seconds // 60)
            text += f" It expires in {minutes} minutes."
        return Mail(
            from_email=self.sender,
            to_emails=email,
            subject=_SUBJECTS[purpose],
            plain_text_content=text,
        )

    def send_otp(self, email: str, otp: str, purpose: OtpPurpose) -> None:
        if not self.api_key or not self.sender:
            raise RuntimeError("SendGrid is not configured (SENDGRID_API_KEY / SENDGRID_SENDER)")

        message = self.build_message(email, otp, purpose)
        response = SendGridAPIClient(self.api_key).send(message)
        if response.status_code >= 300:
            raise RuntimeError(f"SendGrid rejected the OTP email: {response.status_code}")
        LOGGER.info("OTP email for %s sent to %s (status %s)", purpose.value, email, response.status_code)


__all__ = ["OtpMailer"]
