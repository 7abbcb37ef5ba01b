import base64
import hashlib
import hmac
from typing import Optional

import boto3
from botocore.exceptions import ClientError

from core.config import settings


INVALID_CODE = "invalid_code"
INVALID_PASSWORD = "invalid_password"
USER_EXISTS = "user_exists"
USER_NOT_FOUND = "user_not_found"
USER_NOT_CONFIRMED = "user_not_confirmed"
NOT_AUTHORIZED = "not_authorized"
UNKNOWN = "unknown"

_ERROR_CODE_KINDS = {
    "CodeMismatchException": INVALID_CODE,
    "ExpiredCodeException": INVALID_CODE,
    "InvalidPasswordException": INVALID_PASSWORD,
    "UsernameExistsException": USER_EXISTS,
    "AliasExistsException": USER_EXISTS,
    "UserNotFoundException": USER_NOT_FOUND,
    "UserNotConfirmedException": USER_NOT_CONFIRMED,
    "NotAuthorizedException": NOT_AUTHORIZED,
}

# Some Cognito errors surface without a usable code (proxied or wrapped
# exceptions); their messages are the only signal left.
_ERROR_MESSAGE_KINDS = (
    ("invalid verification code", INVALID_CODE),
    ("code mismatch", INVALID_CODE),
    ("expired", INVALID_CODE),
    ("password did not conform", INVALID_PASSWORD),
    ("incorrect username or password", NOT_AUTHORIZED),
)


def classify_cognito_error(exc: Exception) -> str:
    """Map a Cognito failure to one of the module's error kinds."""

    if isinstance(exc, ClientError):
        error = exc.response.get("Error", {})
        kind = _ERROR_CODE_KINDS.get(error.get("Code", ""))
        if kind:
            return kind
        message = error.get("Message") or str(exc)
    else:
        message = str(exc)

    lowered = message.lower()
    for needle, kind in _ERROR_MESSAGE_KINDS:
        if needle in lowered:
            return kind
    return UNKNOWN


class CognitoRepository:
    def __init__(
        self,
        client=None,
        *,
        user_pool_id: Optional[str] = None,
        client_id: Optional[str] = None,
        client_secret: Optional[str] = None,
    ):
        self.client = client or boto3.client("cognito-idp", region_name=settings.AWS_REGION)
        self.user_pool_id = user_pool_id or settings.COGNITO_USER_POOL_ID
        self.client_id = client_id or settings.COGNITO_CLIENT_ID
        self.client_secret = client_secret if client_secret is not None else settings.COGNITO_SECRET

    def _secret_hash(self, email: str) -> Optional[str]:
        if not self.client_secret:
            return None
        digest = hmac.new(
            self.client_secret.encode("utf-8"),
            (email + self.client_id).encode("utf-8"),
            hashlib.sha256,
        ).digest()
        return base64.b64encode(digest).decode()

    def create_user(self, email: str, full_name: str, password: str):
        """Create the user silently and give it a permanent password.

        Verification is handled by our own OTP, so Cognito's invitation mail is
        suppressed.
        """

        self.client.admin_create_user(
            UserPoolId=self.user_pool_id,
            Username=email,
            UserAttributes=[
                {"Name": "email", "Value": email},
                {"Name": "name", "Value": full_name},
            ],
            MessageAction="SUPPRESS",
        )
        return self.set_password(email, password)

    def set_password(self, email: str, password: str):
        return self.client.admin_set_user_password(
            UserPoolId=self.user_pool_id,
            Username=email,
            Password=password,
            Permanent=True,
        )

    def get_user(self, email: str):
        """
        Returns:
          - {"status": "<UserStatus>", "email_verified": bool}
        """
        response = self.client.admin_get_user(UserPoolId=self.user_pool_id, Username=email)
        attributes = {attr["Name"]: attr["Value"] for attr in response.get("UserAttributes", [])}
        return {
            "status": response.get("UserStatus"),
            "email_verified": attributes.get("email_verified") == "true",
        }

    def mark_email_verified(self, email: str):
        return self.client.admin_update_user_attributes(
            UserPoolId=self.user_pool_id,
            Username=email,
            UserAttributes=[{"Name": "email_verified", "Value": "true"}],
        )

    def login_user(self, email: str, password: str):
        """
        Returns:
          - {"status": "OK", "tokens": {...}}
          - {"status": "<ChallengeName>", "session": "...", "params": {...}}
        """
        auth_parameters = {"USERNAME": email, "PASSWORD": password}
        secret_hash = self._secret_hash(email)
        if secret_hash:
            auth_parameters["SECRET_HASH"] = secret_hash

        response = self.client.initiate_auth(
            ClientId=self.client_id,
            AuthFlow="USER_PASSWORD_AUTH",
            AuthParameters=auth_parameters,
        )

        if "AuthenticationResult" in response:
            return {
                "status": "OK",
                "tokens": response["AuthenticationResult"],
            }

        if "ChallengeName" in response:
            return {
                "status": response["ChallengeName"],
                "session": response.get("Session"),
                "params": response.get("ChallengeParameters", {}),
            }

        raise RuntimeError("Unexpected response from Cognito")
