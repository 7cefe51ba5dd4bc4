"""
Authentication Utility - identity gate, JWT and password handling.

Provides:
- Password hashing with bcrypt (local register/login flow)
- JWT token creation/verification
- FastAPI dependencies resolving the caller's verified email once per request

Every lifecycle operation trusts Principal.email as the acting identity.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional
from jose import JWTError, jwt
from passlib.context import CryptContext
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from careerhub.core.config import get_settings
from careerhub.core.errors import AuthenticationError, ForbiddenError, IdentityMismatchError

logger = logging.getLogger(__name__)

settings = get_settings()

# Password hashing
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# Bearer token extractor; a missing header is reported as 401 by get_current_user
bearer_scheme = HTTPBearer(auto_error=False)


@dataclass
class Principal:
    """
    The authenticated caller, resolved from the bearer token.

    Attributes:
        email: Verified email, the key for every cross reference
        name: Display name claim, if the provider sent one
        role: 'student' or 'admin'
    """

    email: str
    name: Optional[str] = None
    role: str = "student"

    @property
    def is_admin(self) -> bool:
        return self.role == "admin" or self.email.lower() in settings.admin_email_list

    @property
    def display_name(self) -> str:
        return self.name or self.email.split("@")[0]


def hash_password(password: str) -> str:
    """Hash password with bcrypt."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify password against hash."""
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create JWT access token. `data` must carry the email as `sub`."""
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=settings.jwt_expire_minutes))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> Optional[dict]:
    """Decode and verify JWT token."""
    try:
        return jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError:
        return None


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Principal:
    """
    FastAPI dependency - resolve the authenticated caller.

    Usage:
        @router.get("/protected")
        async def route(user: Principal = Depends(get_current_user)):
            return user.email
    """
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise AuthenticationError("Unauthorized")

    payload = decode_token(credentials.credentials)
    if not payload:
        logger.warning("Rejected invalid or expired bearer token")
        raise AuthenticationError("Invalid token", error_code="INVALID_TOKEN")

    email = payload.get("email") or payload.get("sub")
    if not email:
        raise AuthenticationError("Invalid token", error_code="INVALID_TOKEN")

    return Principal(email=email, name=payload.get("name"), role=payload.get("role", "student"))


async def get_current_admin(user: Principal = Depends(get_current_user)) -> Principal:
    """Dependency - Require administrator role."""
    if not user.is_admin:
        logger.warning(f"Admin access denied for {user.email}")
        raise ForbiddenError("Admins only", error_code="ADMIN_REQUIRED")
    return user


def ensure_same_identity(principal: Principal, email: Optional[str], message: Optional[str] = None) -> None:
    """Raise 403 unless `email` is the caller's own email."""
    if not email or email != principal.email:
        raise IdentityMismatchError(message) if message else IdentityMismatchError()
