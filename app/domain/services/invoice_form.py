# app/domain/services/invoice_form.py
"""
Validation of the create/edit invoice form.

The form arrives as a mapping of field name to string (or ``None`` when the
field was not submitted). ``validate_invoice_form`` returns either a
normalized :class:`InvoiceDraft` or the per-field error messages, never both.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Mapping, Union

from pydantic import BaseModel, ValidationError, field_validator
from pydantic_core import PydanticCustomError

from app.domain.models.dashboard import InvoiceStatus

CUSTOMER_REQUIRED = "Please select a customer."
AMOUNT_REQUIRED = "Please enter an amount greater than $0."
STATUS_REQUIRED = "Please select an invoice status."

INVOICE_STATUSES = ("pending", "paid")
FORM_FIELDS = ("customer_id", "amount", "status")

CENTS = Decimal(100)
# invoices.amount is a 32-bit integer column of cents
MAX_CENTS = 2**31 - 1
MAX_AMOUNT = Decimal(MAX_CENTS) / CENTS


def to_cents(amount: Decimal) -> int:
    return int((amount * CENTS).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


class InvoiceForm(BaseModel):
    customer_id: str
    amount: Decimal
    status: InvoiceStatus

    @field_validator("customer_id", mode="before")
    @classmethod
    def _customer_id_present(cls, value: Any) -> str:
        if value is None:
            value = ""
        if not isinstance(value, str) or not value:
            raise PydanticCustomError("customer_required", CUSTOMER_REQUIRED)
        return value

    @field_validator("amount", mode="before")
    @classmethod
    def _amount_positive(cls, value: Any) -> Decimal:
        if value is None or (isinstance(value, str) and not value.strip()):
            value = "0"
        try:
            amount = Decimal(str(value).strip())
        except InvalidOperation:
            raise PydanticCustomError("amount_required", AMOUNT_REQUIRED)
        if not amount.is_finite() or amount <= 0 or amount > MAX_AMOUNT:
            raise PydanticCustomError("amount_required", AMOUNT_REQUIRED)
        # Checked again once rounded to cents
        if not 0 < to_cents(amount) <= MAX_CENTS:
            raise PydanticCustomError("amount_required", AMOUNT_REQUIRED)
        return amount

    @field_validator("status", mode="before")
    @classmethod
    def _status_known(cls, value: Any) -> str:
        if value not in INVOICE_STATUSES:
            raise PydanticCustomError("invalid_status", STATUS_REQUIRED)
        return value


@dataclass(frozen=True)
class InvoiceDraft:
    customer_id: str
    amount: Decimal
    status: str

    @property
    def amount_in_cents(self) -> int:
        return to_cents(self.amount)


@dataclass(frozen=True)
class Valid:
    draft: InvoiceDraft


@dataclass(frozen=True)
class Invalid:
    errors: dict[str, list[str]] = field(default_factory=dict)


ValidationResult = Union[Valid, Invalid]


def field_errors(exc: ValidationError) -> dict[str, list[str]]:
    """Flatten pydantic errors into ``{field: [message, ...]}``."""
    errors: dict[str, list[str]] = {}
    for err in exc.errors():
        name = str(err["loc"][0]) if err["loc"] else "__all__"
        errors.setdefault(name, []).append(err["msg"])
    return errors


def validate_invoice_form(form: Mapping[str, Any]) -> ValidationResult:
    raw = {name: form.get(name) for name in FORM_FIELDS}
    try:
        parsed = InvoiceForm.model_validate(raw)
    except ValidationError as exc:
        return Invalid(errors=field_errors(exc))

    return Valid(
        draft=InvoiceDraft(
            customer_id=parsed.customer_id,
            amount=parsed.amount,
            status=parsed.status,
        )
    )
