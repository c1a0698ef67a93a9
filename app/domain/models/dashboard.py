# app/domain/models/dashboard.py
"""Read models rendered by the dashboard pages."""

from datetime import date
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, ConfigDict

InvoiceStatus = Literal["pending", "paid"]


class RevenuePoint(BaseModel):
    model_config = ConfigDict(frozen=True)

    month: str
    revenue: int


class LatestInvoice(BaseModel):
    id: str
    name: str
    image_url: str
    email: str
    amount: str


class InvoiceTableRow(BaseModel):
    id: str
    customer_id: str
    name: str
    email: str
    image_url: str
    date: date
    amount: int
    status: str


class InvoiceFormData(BaseModel):
    id: str
    customer_id: str
    # Whole units, ready to prefill the edit form
    amount: Decimal
    status: str


class CustomerField(BaseModel):
    id: str
    name: str


class CustomerTableRow(BaseModel):
    id: str
    name: str
    email: str
    image_url: str
    total_invoices: int
    total_pending: str
    total_paid: str


class CardData(BaseModel):
    number_of_customers: int
    number_of_invoices: int
    total_paid_invoices: str
    total_pending_invoices: str
