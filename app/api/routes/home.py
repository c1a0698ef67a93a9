# app/api/routes/home.py

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse

from app.api.templating import templates

router = APIRouter(tags=["home"])


@router.get("/", response_class=HTMLResponse)
async def home_page(request: Request):
    """Landing page with the login link."""
    return templates.TemplateResponse(request, "home.html", {"title": "Welcome to Acme"})
