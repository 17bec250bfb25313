import secrets
from datetime import datetime, timedelta
from typing import Optional, Tuple
from uuid import UUID

from jose import JWTError, jwt
from pydantic import BaseModel, ValidationError

from kitchen_iam.config import ApplicationConfig
from kitchen_iam.domain.base import from_epoch_seconds, utcnow
from kitchen_iam.domain.entities import Role, User

ALGORITHM = "HS256"
ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"


class AccessTokenClaims(BaseModel):
    """Verified claims of an access token"""

    principal_id: UUID
    username: str
    role: Role
    branch_id: Optional[str] = None
    session_id: UUID
    issued_at: datetime
    expires_at: datetime
    issuer: str
    audience: str
    kind: str = ACCESS_TOKEN_TYPE


class RefreshTokenClaims(BaseModel):
    """Verified claims of a refresh token"""

    principal_id: UUID
    session_id: UUID
    token_id: str
    issued_at: datetime
    expires_at: datetime
    kind: str = REFRESH_TOKEN_TYPE


def new_token_id() -> str:
    """Fresh random refresh token identifier (jti)"""
    return secrets.token_urlsafe(32)


def issue_access_token(user: User, session_id: UUID) -> str:
    """
    Generate a signed access token

    Args:
        user: Authenticated principal
        session_id: Session the token is bound to

    Returns:
        JWT string (HS256, ACCESS_TOKEN_TTL_SECONDS expiry, access secret)
    """
    now = utcnow()
    payload = {
        "sub": str(user.id),
        "username": user.username,
        "role": Role(user.role).value,
        "branch_id": user.branch_id,
        "sid": str(session_id),
        "type": ACCESS_TOKEN_TYPE,
        "iss": ApplicationConfig.TOKEN_ISSUER,
        "aud": ApplicationConfig.TOKEN_AUDIENCE,
        "iat": now,
        "exp": now + timedelta(seconds=ApplicationConfig.ACCESS_TOKEN_TTL_SECONDS),
    }
    return jwt.encode(payload, ApplicationConfig.ACCESS_TOKEN_SECRET, algorithm=ALGORITHM)


def issue_refresh_token(
    user_id: UUID, session_id: UUID, token_id: Optional[str] = None
) -> Tuple[str, str]:
    """
    Generate a signed refresh token

    Signed with the refresh secret, so a leaked access secret cannot forge
    refresh tokens.

    Args:
        user_id: Principal UUID
        session_id: Session the token is bound to
        token_id: jti to embed; a fresh one is generated when omitted

    Returns:
        (token, token_id)
    """
    token_id = token_id or new_token_id()
    now = utcnow()
    payload = {
        "sub": str(user_id),
        "sid": str(session_id),
        "jti": token_id,
        "type": REFRESH_TOKEN_TYPE,
        "iss": ApplicationConfig.TOKEN_ISSUER,
        "aud": ApplicationConfig.TOKEN_AUDIENCE,
        "iat": now,
        "exp": now + timedelta(seconds=ApplicationConfig.REFRESH_TOKEN_TTL_SECONDS),
    }
    token = jwt.encode(payload, ApplicationConfig.REFRESH_TOKEN_SECRET, algorithm=ALGORITHM)
    return token, token_id


def _decode(token: str, secret: str, expected_type: str) -> Optional[dict]:
    try:
        payload = jwt.decode(
            token,
            secret,
            algorithms=[ALGORITHM],
            audience=ApplicationConfig.TOKEN_AUDIENCE,
            issuer=ApplicationConfig.TOKEN_ISSUER,
        )
    except JWTError:
        return None

    if payload.get("type") != expected_type:
        return None
    return payload


def verify_access_token(token: str) -> Optional[AccessTokenClaims]:
    """
    Verify and decode an access token

    Checks signature, type, issuer, audience and expiry.

    Returns:
        Claims, or None if the token is invalid
    """
    if not token:
        return None
    payload = _decode(token, ApplicationConfig.ACCESS_TOKEN_SECRET, ACCESS_TOKEN_TYPE)
    if payload is None:
        return None

    try:
        return AccessTokenClaims(
            principal_id=payload["sub"],
            username=payload["username"],
            role=payload["role"],
            branch_id=payload.get("branch_id"),
            session_id=payload["sid"],
            issued_at=from_epoch_seconds(payload["iat"]),
            expires_at=from_epoch_seconds(payload["exp"]),
            issuer=payload["iss"],
            audience=payload["aud"],
        )
    except (KeyError, TypeError, ValidationError):
        return None


def verify_refresh_token(token: str) -> Optional[RefreshTokenClaims]:
    """
    Verify and decode a refresh token

    Returns:
        Claims, or None if the token is invalid
    """
    if not token:
        return None
    payload = _decode(token, ApplicationConfig.REFRESH_TOKEN_SECRET, REFRESH_TOKEN_TYPE)
    if payload is None:
        return None

    try:
        return RefreshTokenClaims(
            principal_id=payload["sub"],
            session_id=payload["sid"],
            token_id=payload["jti"],
            issued_at=from_epoch_seconds(payload["iat"]),
            expires_at=from_epoch_seconds(payload["exp"]),
        )
    except (KeyError, TypeError, ValidationError):
        return None
