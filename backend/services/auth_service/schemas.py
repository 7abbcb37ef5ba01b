from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class OtpPurpose(str, Enum):
    SIGNUP = "signup"
    RESET = "reset"


class ResetAction(str, Enum):
    FORGOT = "forgot"
    RESET = "reset"


class SignInReq(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class SignUpReq(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    email: EmailStr
    full_name: str = Field(..., alias="fullName", min_length=1, max_length=100)
    password: str = Field(..., min_length=8, max_length=256)


class VerifyOtpReq(BaseModel):
    model_config = ConfigDict(populate_by_name=True, coerce_numbers_to_str=True)

    email: EmailStr
    otp: str = Field(..., min_length=1, max_length=12)
    purpose: str = Field(..., min_length=1)
    full_name: Optional[str] = Field(None, alias="fullName", max_length=100)


class ResetPasswordReq(BaseModel):
    model_config = ConfigDict(populate_by_name=True, coerce_numbers_to_str=True)

    email: EmailStr
    action: str = Field(..., min_length=1)
    otp: Optional[str] = Field(None, max_length=12)
    new_password: Optional[str] = Field(None, alias="newPassword", max_length=256)


class StoreUserReq(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    email: EmailStr
    full_name: str = Field(..., alias="fullName", min_length=1, max_length=100)


@dataclass
class UserProfile:
    """Row of the user-profile table, keyed by email."""

    email: str
    full_name: Optional[str] = None
    verified: bool = False
    otp: Optional[str] = None
    otp_purpose: Optional[OtpPurpose] = None
    otp_issued_at: Optional[int] = None
    otp_attempts: int = 0
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @classmethod
    def from_ddb(cls, item: Dict[str, Any]) -> "UserProfile":
        purpose = item.get("otpPurpose")
        issued_at = item.get("otpIssuedAt")
        created_at = item.get("createdAt")
        attempts = item.get("otpAttempts")
        return cls(
            email=item.get("email") or item.get("userId", ""),
            full_name=item.get("fullName"),
            verified=bool(item.get("verified", False)),
            otp=item.get("otp"),
            otp_purpose=OtpPurpose(purpose) if purpose else None,
            otp_issued_at=int(issued_at) if issued_at is not None else None,
            otp_attempts=int(attempts) if attempts is not None else 0,
            # Records written by older handlers carry epoch milliseconds.
            created_at=str(created_at) if created_at is not None else None,
            updated_at=item.get("updatedAt"),
        )

    def to_ddb_item(self) -> Dict[str, Any]:
        item: Dict[str, Any] = {
            "userId": self.email,
            "email": self.email,
            "verified": self.verified,
        }
        if self.full_name:
            item["fullName"] = self.full_name
        if self.otp:
            item["otp"] = self.otp
        if self.otp_purpose:
            item["otpPurpose"] = self.otp_purpose.value
        if self.otp_issued_at is not None:
            item["otpIssuedAt"] = self.otp_issued_at
        if self.otp_attempts:
            item["otpAttempts"] = self.otp_attempts
        if self.created_at:
            item["createdAt"] = self.created_at
        if self.updated_at:
            item["updatedAt"] = self.updated_at
        return item
