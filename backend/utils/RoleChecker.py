from typing import Iterable, Optional

from fastapi import Depends, HTTPException, status

from core.config import get_settings
from utils.get_current_user_cognito import TokenData, get_current_user


class RoleChecker:
    """
    Role checker that validates user roles from Cognito groups.

    Roles are Cognito groups, carried in the access token's ``cognito:groups``
    claim. Without explicit roles the operator group from settings is required.
    """

    def __init__(self, allowed_roles: Optional[Iterable[str]] = None):
        self.allowed_roles = set(allowed_roles) if allowed_roles is not None else None

    def _roles(self) -> set:
        if self.allowed_roles is not None:
            return self.allowed_roles
        return {get_settings().OPERATOR_GROUP}

    def __call__(
        self,
        current_user: TokenData = Depends(get_current_user),
    ) -> TokenData:
        if not self._roles().intersection(current_user.groups):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Operation not permitted",
            )
        return current_user


require_operator = RoleChecker()
