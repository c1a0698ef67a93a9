from fastapi import APIRouter

from app.api.routes.auth import router as auth_router
from app.api.routes.customers import router as customers_router
from app.api.routes.dashboard import router as dashboard_router
from app.api.routes.health import router as health_router
from app.api.routes.home import router as home_router
from app.api.routes.invoices import router as invoices_router

api_router = APIRouter()

# Public
api_router.include_router(health_router, tags=["health"])
api_router.include_router(home_router)
api_router.include_router(auth_router)

# Dashboard (session cookie required; each router carries the guard)
api_router.include_router(dashboard_router)
api_router.include_router(invoices_router)
api_router.include_router(customers_router)
