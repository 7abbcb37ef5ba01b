import logging

from botocore.exceptions import ClientError
from fastapi import HTTPException

from utils.cognito_repository import (
    INVALID_CODE,
    INVALID_PASSWORD,
    NOT_AUTHORIZED,
    USER_EXISTS,
    USER_NOT_CONFIRMED,
    USER_NOT_FOUND,
    CognitoRepository,
    classify_cognito_error,
)

from .otp import OtpWorkflow
from .repository import UserProfileRepository
from .schemas import (
    OtpPurpose,
    ResetAction,
    ResetPasswordReq,
    SignInReq,
    SignUpReq,
    StoreUserReq,
    VerifyOtpReq,
)


LOGGER = logging.getLogger(__name__)

INVALID_OTP = "Invalid or expired OTP"
ALREADY_REGISTERED = "Email already registered"


def _provider_error(exc: Exception, fallback: str) -> HTTPException:
    kind = classify_cognito_error(exc)
    if kind == INVALID_CODE:
        return HTTPException(status_code=400, detail=INVALID_OTP)
    if kind == INVALID_PASSWORD:
        message = exc.response["Error"].get("Message") if isinstance(exc, ClientError) else None
        return HTTPException(status_code=400, detail=message or "Password does not meet the policy")
    if kind == USER_EXISTS:
        return HTTPException(status_code=409, detail=ALREADY_REGISTERED)
    if kind == USER_NOT_FOUND:
        return HTTPException(status_code=404, detail="User not found")
    if kind == NOT_AUTHORIZED:
        return HTTPException(status_code=401, detail="Not authorized")
    LOGGER.error("Unclassified identity provider error: %s", exc)
    return HTTPException(status_code=500, detail=fallback)


class AuthService:
    def __init__(self, cognito: CognitoRepository, users: UserProfileRepository, otp: OtpWorkflow):
        self.cognito = cognito
        self.users = users
        self.otp = otp

    def sign_in(self, req: SignInReq):
        """
        Returns:
          - {"message": "Sign in successful", "idToken", "accessToken", "refreshToken"}
          - {"message": "Additional challenge required", "challenge", "session"}
        """
        email = str(req.email)
        try:
            result = self.cognito.login_user(email, req.password)
        except ClientError as e:
            kind = classify_cognito_error(e)
            if kind in (NOT_AUTHORIZED, USER_NOT_FOUND):
                raise HTTPException(status_code=401, detail="Invalid email or password")
            if kind == USER_NOT_CONFIRMED:
                raise HTTPException(status_code=403, detail="Account not verified")
            raise _provider_error(e, "Sign in failed")

        profile = self.users.get(email)
        if profile is None or not profile.verified:
            raise HTTPException(status_code=403, detail="Account not verified")

        if result["status"] != "OK":
            return {
                "message": "Additional challenge required",
                "challenge": result["status"],
                "session": result.get("session"),
            }

        tokens = result["tokens"]
        LOGGER.info("User %s signed in", email)
        return {
            "message": "Sign in successful",
            "idToken": tokens.get("IdToken"),
            "accessToken": tokens.get("AccessToken"),
            "refreshToken": tokens.get("RefreshToken"),
        }

    def _is_abandoned_signup(self, email: str, profile) -> bool:
        """True when an existing Cognito user is only a leftover of our own unverified signup.

        Our signups set a permanent password, so they are ``CONFIRMED`` in
        Cognito too; what marks them is a pending profile row and an
        unverified email attribute. Users still ``UNCONFIRMED`` never proved
        the address and may be taken over.
        """

        try:
            user = self.cognito.get_user(email)
        except ClientError as e:
            raise _provider_error(e, "Error during signup")
        if user["email_verified"]:
            return False
        if user["status"] != "CONFIRMED":
            return True
        return profile is not None and not profile.verified

    def sign_up(self, req: SignUpReq):
        email = str(req.email)
        try:
            profile = self.users.get(email)
            if profile is not None and profile.verified:
                raise HTTPException(status_code=409, detail=ALREADY_REGISTERED)

            existing = False
            try:
                self.cognito.create_user(email, req.full_name, req.password)
            except ClientError as e:
                if classify_cognito_error(e) != USER_EXISTS:
                    raise _provider_error(e, "Error during signup")
                existing = True

            if existing and not self._is_abandoned_signup(email, profile):
                LOGGER.warning("Signup for %s refused: identity already owned", email)
                raise HTTPException(status_code=409, detail=ALREADY_REGISTERED)

            if not self.users.create_pending(email, req.full_name):
                raise HTTPException(status_code=409, detail=ALREADY_REGISTERED)

            if existing:
                # An earlier, never verified signup: take the new password.
                try:
                    self.cognito.set_password(email, req.password)
                except ClientError as exc:
                    raise _provider_error(exc, "Error during signup")

            self.otp.request_otp(email, OtpPurpose.SIGNUP)
            return {"message": "OTP sent successfully", "email": email}
        except HTTPException:
            raise
        except Exception:
            LOGGER.exception("Signup failed for %s", email)
            raise HTTPException(status_code=500, detail="Error during signup")

    def verify_otp(self, req: VerifyOtpReq):
        email = str(req.email)
        try:
            purpose = OtpPurpose(req.purpose)
        except ValueError:
            raise HTTPException(status_code=400, detail="Invalid purpose")

        try:
            profile = self.users.get(email)
            if purpose is OtpPurpose.SIGNUP and profile is not None and profile.verified:
                raise HTTPException(status_code=409, detail=ALREADY_REGISTERED)

            if not self.otp.check(profile, req.otp, purpose):
                LOGGER.warning("Rejected %s OTP for %s", purpose.value, email)
                raise HTTPException(status_code=400, detail=INVALID_OTP)

            if purpose is OtpPurpose.RESET:
                # The code stays on the record; reset-password consumes it.
                return {"message": "OTP verified successfully", "purpose": purpose.value}

            try:
                self.cognito.mark_email_verified(email)
            except ClientError as e:
                raise _provider_error(e, "Failed to verify OTP")

            if not self.users.mark_verified(email, profile.otp, full_name=req.full_name or profile.full_name):
                raise HTTPException(status_code=400, detail=INVALID_OTP)

            LOGGER.info("User %s verified", email)
            return {"message": "OTP verified successfully", "userAlreadyExists": False}
        except HTTPException:
            raise
        except Exception:
            LOGGER.exception("OTP verification failed for %s", email)
            raise HTTPException(status_code=500, detail="Failed to verify OTP")

    def reset_password(self, req: ResetPasswordReq):
        email = str(req.email)
        try:
            action = ResetAction(req.action)
        except ValueError:
            raise HTTPException(status_code=400, detail="Invalid action")

        if action is ResetAction.RESET and (not req.otp or not req.new_password):
            raise HTTPException(status_code=400, detail="Missing required fields: otp or newPassword")

        try:
            profile = self.users.get(email)
            if profile is None or not profile.verified:
                raise HTTPException(status_code=404, detail="Email not found or not verified")

            if action is ResetAction.FORGOT:
                self.otp.request_otp(email, OtpPurpose.RESET)
                return {"message": "OTP sent for reset"}

            if not self.otp.check(profile, req.otp, OtpPurpose.RESET):
                LOGGER.warning("Rejected reset OTP for %s", email)
                raise HTTPException(status_code=400, detail=INVALID_OTP)

            try:
                self.cognito.set_password(email, req.new_password)
            except ClientError as e:
                raise _provider_error(e, "Failed to reset password")

            self.users.clear_otp(email, profile.otp)
            LOGGER.info("Password reset for %s", email)
            return {"message": "Password reset successfully"}
        except HTTPException:
            raise
        except Exception:
            LOGGER.exception("Password reset failed for %s", email)
            raise HTTPException(status_code=500, detail="Failed to reset password")

    def store_user(self, req: StoreUserReq):
        try:
            stored = self.users.put_verified(str(req.email), req.full_name)
        except Exception:
            LOGGER.exception("Storing user %s failed", req.email)
            raise HTTPException(status_code=500, detail="Failed to store user")
        if stored is None:
            raise HTTPException(status_code=409, detail=ALREADY_REGISTERED)
        return {"message": "User stored successfully"}
