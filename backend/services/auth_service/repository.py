"""DynamoDB repository for user profile records."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, Optional

from botocore.exceptions import ClientError

from .schemas import OtpPurpose, UserProfile


LOGGER = logging.getLogger(__name__)

ISO_FORMAT = "%Y-%m-%dT%H:%M:%S.%fZ"


def _utcnow() -> str:
    return datetime.utcnow().strftime(ISO_FORMAT)


def _is_condition_failure(exc: ClientError) -> bool:
    return exc.response.get("Error", {}).get("Code") == "ConditionalCheckFailedException"


class UserProfileRepository:
    """Persist user profiles and the OTP that guards their transitions."""

    def __init__(self, table) -> None:
        self._table = table

    def get(self, email: str) -> Optional[UserProfile]:
        response = self._table.get_item(Key={"userId": email}, ConsistentRead=True)
        item = response.get("Item")
        if not item:
            return None
        return UserProfile.from_ddb(item)

    def create_pending(self, email: str, full_name: str) -> bool:
        """Write an unverified profile unless a verified one already exists.

        Returns ``False`` when the email is already verified.
        """

        now = _utcnow()
        profile = UserProfile(email=email, full_name=full_name, verified=False, created_at=now, updated_at=now)
        try:
            self._table.put_item(
                Item=profile.to_ddb_item(),
                ConditionExpression="attribute_not_exists(userId) OR verified = :false",
                ExpressionAttributeValues={":false": False},
            )
        except ClientError as exc:
            if _is_condition_failure(exc):
                return False
            raise
        return True

    def store_otp(self, email: str, otp: str, purpose: OtpPurpose, issued_at: int) -> None:
        # Last write wins: a new code replaces any earlier one.
        self._table.update_item(
            Key={"userId": email},
            UpdateExpression=(
                "SET email=:email, otp=:otp, otpPurpose=:purpose, otpIssuedAt=:issued, otpAttempts=:zero, "
                "updatedAt=:updated, createdAt=if_not_exists(createdAt, :updated), "
                "verified=if_not_exists(verified, :false)"
            ),
            ExpressionAttributeValues={
                ":email": email,
                ":otp": otp,
                ":purpose": purpose.value,
                ":issued": issued_at,
                ":updated": _utcnow(),
                ":zero": 0,
                ":false": False,
            },
        )

    def mark_verified(self, email: str, otp: str, *, full_name: Optional[str] = None) -> bool:
        """Flip ``verified`` to true and consume the signup code.

        The write only happens while the record is unverified and still holds
        ``otp``; returns ``False`` otherwise.
        """

        update = "SET verified=:true, updatedAt=:updated"
        values: Dict[str, Any] = {
            ":true": True,
            ":false": False,
            ":otp": otp,
            ":updated": _utcnow(),
        }
        if full_name:
            update += ", fullName=:name"
            values[":name"] = full_name
        update += " REMOVE otp, otpPurpose, otpIssuedAt, otpAttempts"
        try:
            self._table.update_item(
                Key={"userId": email},
                UpdateExpression=update,
                ConditionExpression="otp = :otp AND verified = :false",
                ExpressionAttributeValues=values,
            )
        except ClientError as exc:
            if _is_condition_failure(exc):
                LOGGER.warning("Verification of %s lost a race or used a stale code", email)
                return False
            raise
        return True

    def clear_otp(self, email: str, otp: str) -> bool:
        try:
            self._table.update_item(
                Key={"userId": email},
                UpdateExpression="SET updatedAt=:updated REMOVE otp, otpPurpose, otpIssuedAt, otpAttempts",
                ConditionExpression="otp = :otp",
                ExpressionAttributeValues={":otp": otp, ":updated": _utcnow()},
            )
        except ClientError as exc:
            if _is_condition_failure(exc):
                return False
            raise
        return True

    def record_failed_attempt(self, email: str, otp: str) -> Optional[int]:
        """Count a wrong guess against the live code ``otp``.

        Returns the new count, or ``None`` when the code has already changed.
        """

        try:
            response = self._table.update_item(
                Key={"userId": email},
                UpdateExpression="SET updatedAt=:updated ADD otpAttempts :one",
                ConditionExpression="otp = :otp",
                ExpressionAttributeValues={":otp": otp, ":one": 1, ":updated": _utcnow()},
                ReturnValues="UPDATED_NEW",
            )
        except ClientError as exc:
            if _is_condition_failure(exc):
                return None
            raise
        return int(response.get("Attributes", {}).get("otpAttempts", 0))

    def put_verified(self, email: str, full_name: str) -> Optional[UserProfile]:
        """Back-fill a verified profile; ``None`` when the email already has a record."""

        now = _utcnow()
        profile = UserProfile(email=email, full_name=full_name, verified=True, created_at=now, updated_at=now)
        try:
            self._table.put_item(
                Item=profile.to_ddb_item(),
                ConditionExpression="attribute_not_exists(userId)",
            )
        except ClientError as exc:
            if _is_condition_failure(exc):
                return None
            raise
        return profile


__all__ = ["UserProfileRepository"]
