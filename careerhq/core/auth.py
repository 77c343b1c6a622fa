"""
Authentication Utility - JWT and Password handling.

The back-office has a single admin account configured through settings
(ADMIN_EMAIL / ADMIN_PASSWORD_HASH).

Provides:
- Password hashing with pbkdf2_sha256
- JWT token creation/verification
- FastAPI dependencies for admin-only routes and admin-aware public routes
"""

from datetime import datetime, timedelta, timezone
from typing import Optional
from jose import JWTError, jwt
from passlib.context import CryptContext
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from careerhq.core.config import get_settings

# Password hashing
pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

# Bearer token extractor (optional so public routes can peek at it)
bearer_scheme = HTTPBearer(auto_error=False)

ADMIN_ROLE = "admin"


def hash_password(password: str) -> str:
    """Hash password for ADMIN_PASSWORD_HASH."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify password against hash. An unset hash never matches."""
    if not hashed_password:
        return False
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        return False


def authenticate_admin(email: str, password: str) -> bool:
    settings = get_settings()
    return email.strip().lower() == settings.admin_email.strip().lower() and verify_password(
        password, settings.admin_password_hash
    )


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create JWT access token."""
    settings = get_settings()
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=settings.jwt_expire_minutes))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> Optional[dict]:
    """Decode and verify JWT token."""
    settings = get_settings()
    try:
        return jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError:
        return None


def _admin_from_credentials(credentials: Optional[HTTPAuthorizationCredentials]) -> Optional[dict]:
    if credentials is None:
        return None
    payload = decode_token(credentials.credentials)
    if not payload or not payload.get("sub"):
        return None
    return {"email": payload["sub"], "role": payload.get("role")}


async def get_current_admin(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> dict:
    """
    FastAPI dependency - require a valid admin token.

    Usage:
        @router.post("/countries")
        async def route(admin: dict = Depends(get_current_admin)):
            ...
    """
    user = _admin_from_credentials(credentials)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    if user["role"] != ADMIN_ROLE:
        raise HTTPException(status_code=403, detail="Admins only")
    return user


async def get_optional_admin(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Optional[dict]:
    """Dependency - the admin if a valid admin token was sent, else None."""
    user = _admin_from_credentials(credentials)
    if user is None or user["role"] != ADMIN_ROLE:
        return None
    return user
