# app/api/routes/customers.py

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse

from app.api.deps import get_current_user, get_customer_repository
from app.api.templating import templates
from app.infrastructure.db.repositories import CustomerRepository

router = APIRouter(
    prefix="/dashboard/customers",
    tags=["customers"],
    dependencies=[Depends(get_current_user)],
)


@router.get("", response_class=HTMLResponse)
async def customers_page(
    request: Request,
    query: str = "",
    customers: CustomerRepository = Depends(get_customer_repository),
):
    return templates.TemplateResponse(
        request,
        "customers/list.html",
        {
            "title": "Customers",
            "query": query,
            "customers": await customers.fetch_filtered(query),
        },
    )
