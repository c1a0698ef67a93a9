# app/api/routes/invoices.py
"""
Invoice pages: searchable list, create and edit forms, delete.

The list page is served from the view cache when possible; the form actions
in ``invoice_actions`` invalidate it. The edit page always reads the database.
"""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, Query, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse

from app.api.deps import (
    get_current_user,
    get_customer_repository,
    get_invoice_repository,
    get_view_cache,
)
from app.api.templating import templates
from app.domain.services.invoice_actions import (
    INVOICES_PATH,
    FormState,
    Redirect,
    create_invoice,
    delete_invoice,
    update_invoice,
)
from app.domain.services.labels import ELLIPSIS, generate_pagination
from app.infrastructure.cache.view_cache import ViewCache
from app.infrastructure.db.repositories import CustomerRepository, InvoiceRepository

logger = logging.getLogger("api.invoices")

router = APIRouter(
    prefix=INVOICES_PATH,
    tags=["invoices"],
    dependencies=[Depends(get_current_user)],
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def page_url(query: str, page: int) -> str:
    params: dict[str, Any] = {"page": page}
    if query:
        params = {"query": query, **params}
    return f"{INVOICES_PATH}?{urlencode(params)}"


def pagination_links(query: str, current_page: int, total_pages: int) -> dict[str, Any]:
    """Links for the pager under the invoice table."""
    links = []
    for token in generate_pagination(current_page, total_pages):
        if token == ELLIPSIS:
            links.append({"label": ELLIPSIS, "url": None, "active": False})
        else:
            links.append({"label": token, "url": page_url(query, token), "active": token == current_page})

    return {
        "links": links,
        "previous": page_url(query, current_page - 1) if current_page > 1 else None,
        "next": page_url(query, current_page + 1) if current_page < total_pages else None,
    }


def _form_status(state: FormState) -> int:
    return status.HTTP_400_BAD_REQUEST if state.errors else status.HTTP_500_INTERNAL_SERVER_ERROR


# ---------------------------------------------------------------------------
# List
# ---------------------------------------------------------------------------

@router.get("", response_class=HTMLResponse)
async def invoices_page(
    request: Request,
    query: str = "",
    page: int = Query(default=1, ge=1),
    invoices: InvoiceRepository = Depends(get_invoice_repository),
    views: ViewCache = Depends(get_view_cache),
):
    cached = await views.get(request.url.path, request.url.query)
    if cached is not None:
        return HTMLResponse(cached)

    total_pages = await invoices.fetch_pages(query)
    rows = await invoices.fetch_filtered(query, page)

    response = templates.TemplateResponse(
        request,
        "invoices/list.html",
        {
            "title": "Invoices",
            "query": query,
            "invoices": rows,
            "pagination": pagination_links(query, page, total_pages),
            "return_to": page_url(query, page),
        },
    )
    await views.set(request.url.path, response.body.decode(), request.url.query)
    return response


# ---------------------------------------------------------------------------
# Create
# ---------------------------------------------------------------------------

@router.get("/create", response_class=HTMLResponse)
async def create_invoice_page(
    request: Request,
    customers: CustomerRepository = Depends(get_customer_repository),
):
    return templates.TemplateResponse(
        request,
        "invoices/form.html",
        {
            "title": "Create Invoice",
            "action": f"{INVOICES_PATH}/create",
            "submit_label": "Create Invoice",
            "customers": await customers.fetch_all(),
            "values": {},
            "state": FormState(),
        },
    )


@router.post("/create")
async def create_invoice_action(
    request: Request,
    invoices: InvoiceRepository = Depends(get_invoice_repository),
    customers: CustomerRepository = Depends(get_customer_repository),
    views: ViewCache = Depends(get_view_cache),
):
    form = await request.form()
    outcome = await create_invoice(FormState(), form, repository=invoices, views=views)

    if isinstance(outcome, Redirect):
        return RedirectResponse(url=outcome.path, status_code=status.HTTP_303_SEE_OTHER)

    return templates.TemplateResponse(
        request,
        "invoices/form.html",
        {
            "title": "Create Invoice",
            "action": f"{INVOICES_PATH}/create",
            "submit_label": "Create Invoice",
            "customers": await customers.fetch_all(),
            "values": dict(form),
            "state": outcome,
        },
        status_code=_form_status(outcome),
    )


# ---------------------------------------------------------------------------
# Edit
# ---------------------------------------------------------------------------

@router.get("/{invoice_id}/edit", response_class=HTMLResponse)
async def edit_invoice_page(
    request: Request,
    invoice_id: str,
    invoices: InvoiceRepository = Depends(get_invoice_repository),
    customers: CustomerRepository = Depends(get_customer_repository),
):
    # Not cached: a deleted invoice must 404 straight away
    invoice = await invoices.fetch_by_id(invoice_id)
    if invoice is None:
        return templates.TemplateResponse(
            request,
            "not_found.html",
            {"title": "Not Found", "message": "Could not find the requested invoice."},
            status_code=status.HTTP_404_NOT_FOUND,
        )

    return templates.TemplateResponse(
        request,
        "invoices/form.html",
        {
            "title": "Edit Invoice",
            "action": f"{INVOICES_PATH}/{invoice.id}/edit",
            "submit_label": "Edit Invoice",
            "customers": await customers.fetch_all(),
            "values": {
                "customer_id": invoice.customer_id,
                "amount": str(invoice.amount),
                "status": invoice.status,
            },
            "state": FormState(),
        },
    )


@router.post("/{invoice_id}/edit")
async def edit_invoice_action(
    request: Request,
    invoice_id: str,
    invoices: InvoiceRepository = Depends(get_invoice_repository),
    customers: CustomerRepository = Depends(get_customer_repository),
    views: ViewCache = Depends(get_view_cache),
):
    form = await request.form()
    outcome = await update_invoice(invoice_id, FormState(), form, repository=invoices, views=views)

    if isinstance(outcome, Redirect):
        return RedirectResponse(url=outcome.path, status_code=status.HTTP_303_SEE_OTHER)

    return templates.TemplateResponse(
        request,
        "invoices/form.html",
        {
            "title": "Edit Invoice",
            "action": f"{INVOICES_PATH}/{invoice_id}/edit",
            "submit_label": "Edit Invoice",
            "customers": await customers.fetch_all(),
            "values": dict(form),
            "state": outcome,
        },
        status_code=_form_status(outcome),
    )


# ---------------------------------------------------------------------------
# Delete
# ---------------------------------------------------------------------------

@router.post("/{invoice_id}/delete")
async def delete_invoice_action(
    request: Request,
    invoice_id: str,
    invoices: InvoiceRepository = Depends(get_invoice_repository),
    views: ViewCache = Depends(get_view_cache),
):
    """Delete and re-render the list the button was on. Failures reach the app's error handler."""
    form = await request.form()
    await delete_invoice(invoice_id, repository=invoices, views=views)

    return_to = form.get("return_to")
    if not isinstance(return_to, str) or not return_to.startswith(INVOICES_PATH):
        return_to = INVOICES_PATH
    return RedirectResponse(url=return_to, status_code=status.HTTP_303_SEE_OTHER)
