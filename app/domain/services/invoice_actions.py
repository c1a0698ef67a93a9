# app/domain/services/invoice_actions.py
"""
Create / update / delete actions behind the invoice forms.

Each action validates the submitted form, issues one repository statement and
invalidates the cached pages that show invoices. Navigation is not performed
here: a successful create/update returns :class:`Redirect` and the HTTP layer
turns it into a 303. Failures come back as a :class:`FormState` the page
re-renders with, except for delete, which raises :class:`InvoiceDeleteError`.

Usage in routes:
    outcome = await create_invoice(FormState(), form, repository=repo, views=views)
    if isinstance(outcome, Redirect):
        return RedirectResponse(outcome.path, status_code=303)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from datetime import date, datetime, timezone
from typing import Any, Mapping, Union

from app.domain.errors import InvoiceDeleteError, PersistenceError
from app.domain.services.invoice_form import Invalid, validate_invoice_form
from app.infrastructure.cache.view_cache import ViewCache
from app.infrastructure.db.repositories.invoice_repository import InvoiceRepository

logger = logging.getLogger("invoice_actions")

INVOICES_PATH = "/dashboard/invoices"

CREATE_MISSING_FIELDS = "Missing Fields. Failed to Create Invoice."
UPDATE_MISSING_FIELDS = "Missing Fields. Failed to Update Invoice."
CREATE_DB_ERROR = "Database Error: Failed to Create Invoice."
UPDATE_DB_ERROR = "Database Error: Failed to Update Invoice."
DELETE_FAILED = "Failed to Delete Invoice."


@dataclass(frozen=True)
class FormState:
    """What the invoice form re-renders with after a failed submission."""

    errors: dict[str, list[str]] = field(default_factory=dict)
    message: str | None = None


@dataclass(frozen=True)
class Redirect:
    path: str


MutationOutcome = Union[Redirect, FormState]


def edit_path(invoice_id: str) -> str:
    return f"{INVOICES_PATH}/{invoice_id}/edit"


def _today() -> date:
    return datetime.now(timezone.utc).date()


async def create_invoice(
    prev_state: FormState,
    form: Mapping[str, Any],
    *,
    repository: InvoiceRepository,
    views: ViewCache,
    today: date | None = None,
) -> MutationOutcome:
    result = validate_invoice_form(form)
    if isinstance(result, Invalid):
        return FormState(errors=result.errors, message=CREATE_MISSING_FIELDS)

    draft = result.draft
    invoice_date = today or _today()

    try:
        await repository.insert(
            customer_id=draft.customer_id,
            amount=draft.amount_in_cents,
            status=draft.status,
            invoice_date=invoice_date,
        )
    except PersistenceError:
        logger.exception("Database Error: failed to create invoice for customer %s", draft.customer_id)
        return replace(prev_state, message=CREATE_DB_ERROR)

    await views.revalidate_path(INVOICES_PATH)
    return Redirect(INVOICES_PATH)


async def update_invoice(
    invoice_id: str,
    prev_state: FormState,
    form: Mapping[str, Any],
    *,
    repository: InvoiceRepository,
    views: ViewCache,
) -> MutationOutcome:
    result = validate_invoice_form(form)
    if isinstance(result, Invalid):
        return FormState(errors=result.errors, message=UPDATE_MISSING_FIELDS)

    draft = result.draft

    try:
        await repository.update(
            invoice_id,
            customer_id=draft.customer_id,
            amount=draft.amount_in_cents,
            status=draft.status,
        )
    except PersistenceError:
        logger.exception("Database Error: failed to update invoice %s", invoice_id)
        return FormState(message=UPDATE_DB_ERROR)

    await views.revalidate_path(INVOICES_PATH)
    await views.revalidate_path(edit_path(invoice_id))
    return Redirect(INVOICES_PATH)


async def delete_invoice(
    invoice_id: str,
    *,
    repository: InvoiceRepository,
    views: ViewCache,
) -> None:
    """
    Delete an invoice and refresh the list. The caller stays on its page.

    Raises :class:`InvoiceDeleteError` when the statement fails.
    """
    try:
        await repository.delete(invoice_id)
    except PersistenceError as exc:
        logger.exception("Database Error: failed to delete invoice %s", invoice_id)
        raise InvoiceDeleteError(DELETE_FAILED) from exc

    await views.revalidate_path(INVOICES_PATH)
