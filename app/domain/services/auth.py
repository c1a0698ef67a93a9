# app/domain/services/auth.py
"""
Credential sign-in and session tokens for the dashboard.

Flow used by the login route:
    outcome = await authenticate(form, users)
    if isinstance(outcome, str):      # user-facing error message
        ...re-render the login form...
    else:                             # SignedIn
        ...set outcome.token as the session cookie, redirect...
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Mapping

import bcrypt as _bcrypt
from jose import JWTError, jwt
from pydantic import BaseModel, EmailStr, Field, ValidationError

from app.core.config import settings
from app.domain.errors import AuthError
from app.infrastructure.db.models import User
from app.infrastructure.db.repositories.user_repository import UserRepository

logger = logging.getLogger("auth")

CREDENTIALS_SIGNIN = "CredentialsSignin"
CALLBACK_ROUTE_ERROR = "CallbackRouteError"

INVALID_CREDENTIALS = "Invalid credentials."
UNKNOWN_AUTH_ERROR = "Something went wrong."

DEFAULT_REDIRECT = "/dashboard"


# ---------------------------------------------------------------------------
# Password hashing (bcrypt)
# ---------------------------------------------------------------------------


def hash_password(plain: str) -> str:
    """Hash a plain-text password with bcrypt."""
    return _bcrypt.hashpw(plain.encode(), _bcrypt.gensalt()).decode()


def verify_password(plain: str, hashed: str) -> bool:
    """Verify a plain-text password against a bcrypt hash."""
    return _bcrypt.checkpw(plain.encode(), hashed.encode())


# ---------------------------------------------------------------------------
# Session JWT
# ---------------------------------------------------------------------------

def create_session_token(user_id: str, email: str) -> str:
    expire = datetime.now(timezone.utc) + timedelta(
        minutes=settings.AUTH_SESSION_EXPIRE_MINUTES
    )
    payload = {
        "sub": user_id,
        "email": email,
        "type": "session",
        "exp": expire,
    }
    return jwt.encode(payload, settings.AUTH_SECRET, algorithm=settings.AUTH_JWT_ALGORITHM)


def decode_session_token(token: str) -> dict:
    """
    Decode & validate a session JWT. Returns the payload dict.
    Raises JWTError on any failure (expired, tampered, wrong type).
    """
    payload = jwt.decode(token, settings.AUTH_SECRET, algorithms=[settings.AUTH_JWT_ALGORITHM])
    if payload.get("type") != "session":
        raise JWTError("Invalid token type")
    return payload


# ---------------------------------------------------------------------------
# Credentials sign-in
# ---------------------------------------------------------------------------

class LoginCredentials(BaseModel):
    email: EmailStr
    password: str = Field(min_length=6)


@dataclass(frozen=True)
class SignedIn:
    user: User
    token: str
    redirect_to: str


async def authorize(credentials: Mapping[str, Any], users: UserRepository) -> User | None:
    """Return the user matching the credentials, or None."""
    try:
        parsed = LoginCredentials.model_validate(
            {"email": credentials.get("email"), "password": credentials.get("password")}
        )
    except ValidationError:
        logger.info("Invalid credentials provided.")
        return None

    user = await users.get_by_email(parsed.email)
    if user is None:
        logger.info("No user found for this email.")
        return None

    if verify_password(parsed.password, user.password_hash):
        return user

    logger.info("Invalid credentials provided.")
    return None


async def sign_in(credentials: Mapping[str, Any], users: UserRepository) -> User:
    try:
        user = await authorize(credentials, users)
    except Exception as exc:
        raise AuthError(CALLBACK_ROUTE_ERROR, str(exc)) from exc

    if user is None:
        raise AuthError(CREDENTIALS_SIGNIN)
    return user


def _safe_redirect(target: Any) -> str:
    # Only same-site paths
    if isinstance(target, str) and target.startswith("/") and not target.startswith("//"):
        return target
    return DEFAULT_REDIRECT


async def authenticate(form: Mapping[str, Any], users: UserRepository) -> SignedIn | str:
    """
    Sign in with the login form. Returns :class:`SignedIn`, or the message to
    show when the attempt failed. Errors other than :class:`AuthError` propagate.
    """
    try:
        user = await sign_in(form, users)
    except AuthError as exc:
        if exc.type == CREDENTIALS_SIGNIN:
            return INVALID_CREDENTIALS
        logger.warning("Authentication failed (%s): %s", exc.type, exc)
        return UNKNOWN_AUTH_ERROR

    token = create_session_token(str(user.id), user.email)
    return SignedIn(user=user, token=token, redirect_to=_safe_redirect(form.get("redirect_to")))
