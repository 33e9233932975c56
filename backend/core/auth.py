# backend/core/auth.py

"""
Bearer token verification at the HTTP boundary.

Tokens are issued by the account service; this module only verifies them and
turns the claims into a ``CallerIdentity``. ``create_access_token`` is kept
for tooling and tests.
"""

from datetime import datetime, timedelta
from typing import Optional
import logging

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from .auth_context import CallerIdentity, CallerRole
from .config import settings
from .exceptions import AuthenticationError, PermissionError

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


def create_access_token(
    caller_id: int,
    role: CallerRole,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """Create a signed access token for the given caller."""
    expire = datetime.utcnow() + (
        expires_delta
        or timedelta(minutes=settings.jwt_access_token_expire_minutes)
    )
    to_encode = {
        "sub": str(caller_id),
        "role": role.value,
        "type": "access",
        "exp": expire,
        "iat": datetime.utcnow(),
    }
    return jwt.encode(to_encode, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def verify_token(token: str) -> Optional[CallerIdentity]:
    """
    Verify and decode a JWT access token.

    Returns:
        CallerIdentity if valid, None otherwise
    """
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
            options={"require_exp": True, "require_sub": True},
        )
    except JWTError as e:
        logger.warning(f"JWT verification failed: {e}")
        return None

    if payload.get("type") != "access":
        logger.warning(f"Token type mismatch: got {payload.get('type')}")
        return None

    try:
        caller_id = int(payload["sub"])
        role = CallerRole(payload.get("role", CallerRole.OWNER.value))
    except (KeyError, ValueError, TypeError):
        logger.warning("Token carries an invalid subject or role")
        return None

    return CallerIdentity(id=caller_id, role=role)


async def get_current_caller(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> CallerIdentity:
    """Resolve the authenticated caller from the bearer token."""
    if not credentials:
        raise AuthenticationError("Could not validate credentials")

    caller = verify_token(credentials.credentials)
    if caller is None:
        raise AuthenticationError("Could not validate credentials")
    return caller


async def require_owner(
    caller: CallerIdentity = Depends(get_current_caller),
) -> CallerIdentity:
    """Only business owners may access the endpoint."""
    if not caller.is_owner:
        raise PermissionError("Business owner access required")
    return caller


async def require_admin(
    caller: CallerIdentity = Depends(get_current_caller),
) -> CallerIdentity:
    """Only platform admins may access the endpoint."""
    if not caller.is_admin:
        raise PermissionError("Admin access required")
    return caller
