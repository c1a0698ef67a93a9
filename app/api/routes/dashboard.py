# app/api/routes/dashboard.py

from typing import Any

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse

from app.api.deps import (
    get_current_user,
    get_invoice_repository,
    get_revenue_repository,
)
from app.api.templating import templates
from app.domain.models.dashboard import RevenuePoint
from app.domain.services.labels import bar_height, generate_y_axis
from app.infrastructure.db.repositories import InvoiceRepository, RevenueRepository

router = APIRouter(
    prefix="/dashboard",
    tags=["dashboard"],
    dependencies=[Depends(get_current_user)],
)

CHART_HEIGHT = 350


def revenue_chart(revenue: list[RevenuePoint], chart_height: int = CHART_HEIGHT) -> dict[str, Any] | None:
    """Template context for the revenue chart, or None when there is nothing to plot."""
    if not revenue:
        return None

    y_axis_labels, top_label = generate_y_axis(revenue)
    return {
        "height": chart_height,
        "y_axis_labels": y_axis_labels,
        "bars": [
            {"month": point.month, "height": bar_height(point.revenue, top_label, chart_height)}
            for point in revenue
        ],
    }


@router.get("", response_class=HTMLResponse)
async def overview_page(
    request: Request,
    invoices: InvoiceRepository = Depends(get_invoice_repository),
    revenue_repo: RevenueRepository = Depends(get_revenue_repository),
):
    """Cards, revenue chart and latest invoices."""
    revenue = await revenue_repo.fetch_revenue()
    latest = await invoices.fetch_latest()
    cards = await invoices.fetch_card_data()

    return templates.TemplateResponse(
        request,
        "dashboard/overview.html",
        {
            "title": "Dashboard",
            "cards": cards,
            "chart": revenue_chart(revenue),
            "latest_invoices": latest,
        },
    )
