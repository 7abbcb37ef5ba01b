"""FastAPI dependency that authenticates Cognito access tokens."""

from functools import lru_cache
from typing import Any, Dict, List, Optional

import requests
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from pydantic import BaseModel

from core.config import settings


bearer_scheme = HTTPBearer(auto_error=False)


class TokenData(BaseModel):
    sub: str
    username: Optional[str] = None  # "username" on access tokens
    email: Optional[str] = None
    scope: Optional[str] = None
    token_use: str
    exp: int
    groups: List[str] = []


@lru_cache(maxsize=1)
def _get_jwks() -> Dict[str, Any]:
    resp = requests.get(settings.COGNITO_JWKS_URL, timeout=5)
    resp.raise_for_status()
    return resp.json()


def _find_key(kid: str) -> Optional[Dict[str, str]]:
    for _ in range(2):
        for key in _get_jwks().get("keys", []):
            if key.get("kid") == kid:
                return key
        # Keys rotate; refresh the cache once before giving up.
        _get_jwks.cache_clear()
    return None


def decode_access_token(token: str) -> TokenData:
    headers = jwt.get_unverified_header(token)
    kid = headers.get("kid")
    if not kid:
        raise HTTPException(status_code=401, detail="Missing kid header")

    key = _find_key(kid)
    if key is None:
        raise HTTPException(status_code=401, detail="Key not found in JWKS")

    # Access tokens carry client_id instead of aud.
    claims = jwt.decode(
        token,
        key,
        algorithms=["RS256"],
        issuer=settings.COGNITO_ISSUER,
        options={"verify_aud": False},
    )
    if claims.get("client_id") != settings.COGNITO_CLIENT_ID:
        raise HTTPException(status_code=401, detail="Invalid audience")
    if claims.get("token_use") != "access":
        raise HTTPException(status_code=401, detail="Invalid token use")

    return TokenData(
        sub=claims["sub"],
        username=claims.get("username") or claims.get("cognito:username"),
        email=claims.get("email"),
        scope=claims.get("scope"),
        token_use=claims["token_use"],
        exp=int(claims["exp"]),
        groups=list(claims.get("cognito:groups") or []),
    )


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> TokenData:
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    try:
        return decode_access_token(credentials.credentials)
    except HTTPException:
        raise
    except (JWTError, KeyError, requests.RequestException):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
