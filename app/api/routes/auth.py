# app/api/routes/auth.py
"""
Login / logout routes for the dashboard, using a session cookie.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, RedirectResponse

from app.api.deps import get_user_repository, has_valid_session
from app.api.templating import templates
from app.core.config import settings
from app.domain.services.auth import DEFAULT_REDIRECT, authenticate
from app.infrastructure.db.repositories import UserRepository

logger = logging.getLogger("api.auth")

router = APIRouter(tags=["auth"])


@router.get("/login", response_class=HTMLResponse)
async def login_page(request: Request, redirect_to: str = DEFAULT_REDIRECT):
    """Render the login form."""
    # Already signed in: straight to the dashboard
    if has_valid_session(request):
        return RedirectResponse(url=DEFAULT_REDIRECT, status_code=303)

    return templates.TemplateResponse(
        request,
        "login.html",
        {"title": "Log in", "error": None, "redirect_to": redirect_to, "email": ""},
    )


@router.post("/login")
async def login(
    request: Request,
    users: UserRepository = Depends(get_user_repository),
):
    """Check the credentials, set the session cookie and redirect."""
    form = await request.form()
    outcome = await authenticate(form, users)

    if isinstance(outcome, str):
        return templates.TemplateResponse(
            request,
            "login.html",
            {
                "title": "Log in",
                "error": outcome,
                "redirect_to": form.get("redirect_to") or DEFAULT_REDIRECT,
                "email": form.get("email") or "",
            },
            status_code=401,
        )

    logger.info("User %s signed in", outcome.user.id)
    response = RedirectResponse(url=outcome.redirect_to, status_code=303)
    response.set_cookie(
        key=settings.AUTH_COOKIE_NAME,
        value=outcome.token,
        httponly=True,
        samesite="lax",
        max_age=settings.AUTH_SESSION_EXPIRE_MINUTES * 60,
    )
    return response


@router.post("/logout")
async def logout():
    """Clear the session cookie and go back to the landing page."""
    response = RedirectResponse(url="/", status_code=303)
    response.delete_cookie(key=settings.AUTH_COOKIE_NAME)
    return response
