# app/api/deps.py
"""
Shared FastAPI dependencies used across the page routes.

Repositories and the view cache are built per request from the shared engine
and Redis client, so tests can swap them through ``app.dependency_overrides``.
``get_current_user`` guards every ``/dashboard`` page.
"""

import logging
import uuid
from urllib.parse import quote

from fastapi import Depends, HTTPException, Request, status
from jose import JWTError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.db import get_db
from app.domain.services.auth import decode_session_token
from app.infrastructure.cache.redis_client import get_redis_client
from app.infrastructure.cache.view_cache import ViewCache
from app.infrastructure.db.models import User
from app.infrastructure.db.repositories import (
    CustomerRepository,
    InvoiceRepository,
    RevenueRepository,
    UserRepository,
)

logger = logging.getLogger("api.deps")

LOGIN_PATH = "/login"


# ---------------------------------------------------------------------------
# Collaborators
# ---------------------------------------------------------------------------

async def get_invoice_repository(db: AsyncSession = Depends(get_db)) -> InvoiceRepository:
    return InvoiceRepository(db)


async def get_customer_repository(db: AsyncSession = Depends(get_db)) -> CustomerRepository:
    return CustomerRepository(db)


async def get_revenue_repository(db: AsyncSession = Depends(get_db)) -> RevenueRepository:
    return RevenueRepository(db)


async def get_user_repository(db: AsyncSession = Depends(get_db)) -> UserRepository:
    return UserRepository(db)


def get_view_cache() -> ViewCache:
    return ViewCache(get_redis_client())


# ---------------------------------------------------------------------------
# Session auth
# ---------------------------------------------------------------------------

def _is_browser_request(request: Request) -> bool:
    """Return True if the caller looks like a web browser."""
    accept = request.headers.get("accept", "")
    return "text/html" in accept


def _session_user_id(request: Request) -> uuid.UUID | None:
    """User id carried by a valid session cookie, or None."""
    token = request.cookies.get(settings.AUTH_COOKIE_NAME)
    if not token:
        return None
    try:
        payload = decode_session_token(token)
        return uuid.UUID(payload["sub"])
    except (JWTError, KeyError, ValueError):
        return None


def has_valid_session(request: Request) -> bool:
    return _session_user_id(request) is not None


def _login_redirect(request: Request) -> HTTPException:
    """Redirect browsers to login; 401 for API clients."""
    if _is_browser_request(request):
        target = request.url.path
        if request.url.query:
            target = f"{target}?{request.url.query}"
        return HTTPException(
            status_code=status.HTTP_303_SEE_OTHER,
            detail="Not authenticated",
            headers={"Location": f"{LOGIN_PATH}?redirect_to={quote(target, safe='')}"},
        )
    return HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")


async def get_current_user(
    request: Request,
    users: UserRepository = Depends(get_user_repository),
) -> User:
    """
    Return the signed-in :class:`User` from the ``session`` cookie.

    Browsers without a valid session are redirected to the login page
    (keeping the requested path in ``redirect_to``); other clients get 401.
    """
    user_id = _session_user_id(request)
    if user_id is None:
        raise _login_redirect(request)

    user = await users.get_by_id(user_id)
    if user is None:
        logger.info("Session cookie for unknown user %s", user_id)
        raise _login_redirect(request)
    return user
