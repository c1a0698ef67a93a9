import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request

from app.api.routes import api_router
from app.api.templating import templates
from app.core.config import settings
from app.core.db import engine
from app.core.logging_config import setup_logging
from app.domain.errors import InvoiceDeleteError
from app.infrastructure.cache.redis_client import close_redis_client
from app.infrastructure.db.base import Base

logger = logging.getLogger("app")


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    logger.info("Starting %s (%s)", settings.APP_NAME, settings.ENVIRONMENT)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    await close_redis_client()
    await engine.dispose()
    logger.info("Application shutdown")


app = FastAPI(title=settings.APP_NAME, debug=settings.DEBUG, lifespan=lifespan)

app.include_router(api_router)


@app.exception_handler(InvoiceDeleteError)
async def invoice_delete_error_handler(request: Request, exc: InvoiceDeleteError):
    """Error page for a failed delete; the action itself does not recover."""
    return templates.TemplateResponse(
        request,
        "error.html",
        {"title": "Something went wrong!", "message": str(exc)},
        status_code=500,
    )
