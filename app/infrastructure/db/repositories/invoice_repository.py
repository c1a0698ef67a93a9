import logging
import math
import uuid
from datetime import date
from decimal import Decimal

from sqlalchemy import ColumnElement, String, case, cast, delete, func, or_, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.domain.errors import PersistenceError
from app.domain.models.dashboard import (
    CardData,
    InvoiceFormData,
    InvoiceTableRow,
    LatestInvoice,
)
from app.domain.services.formatting import format_currency
from app.infrastructure.db.models import Customer, Invoice

logger = logging.getLogger("repositories.invoices")

ITEMS_PER_PAGE = 6


class InvoiceRepository:
    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    # ---------- small helpers ----------

    @staticmethod
    def _as_uuid(value: str | uuid.UUID) -> uuid.UUID:
        if isinstance(value, uuid.UUID):
            return value
        try:
            return uuid.UUID(str(value))
        except ValueError as exc:
            raise PersistenceError(f"Invalid identifier: {value!r}") from exc

    @staticmethod
    def _search_filter(query: str) -> ColumnElement[bool]:
        pattern = f"%{query}%"
        return or_(
            Customer.name.ilike(pattern),
            Customer.email.ilike(pattern),
            cast(Invoice.amount, String).ilike(pattern),
            cast(Invoice.date, String).ilike(pattern),
            Invoice.status.ilike(pattern),
        )

    async def _commit(self, what: str) -> None:
        try:
            await self.db.commit()
        except SQLAlchemyError as exc:
            await self.db.rollback()
            raise PersistenceError(f"Failed to {what}") from exc

    # ---------- writes ----------

    async def insert(
        self,
        customer_id: str,
        amount: int,
        status: str,
        invoice_date: date,
    ) -> uuid.UUID:
        """Insert a new invoice row. ``amount`` is in cents."""
        invoice = Invoice(
            id=uuid.uuid4(),
            customer_id=self._as_uuid(customer_id),
            amount=amount,
            status=status,
            date=invoice_date,
        )
        self.db.add(invoice)
        await self._commit("insert invoice")
        return invoice.id

    async def update(
        self,
        invoice_id: str,
        customer_id: str,
        amount: int,
        status: str,
    ) -> None:
        """Update customer, amount and status of an invoice. The date is left alone."""
        stmt = (
            update(Invoice)
            .where(Invoice.id == self._as_uuid(invoice_id))
            .values(
                customer_id=self._as_uuid(customer_id),
                amount=amount,
                status=status,
            )
        )
        try:
            await self.db.execute(stmt)
        except SQLAlchemyError as exc:
            await self.db.rollback()
            raise PersistenceError("Failed to update invoice") from exc
        await self._commit("update invoice")

    async def delete(self, invoice_id: str) -> None:
        """Delete an invoice. A missing row is not an error."""
        stmt = delete(Invoice).where(Invoice.id == self._as_uuid(invoice_id))
        try:
            await self.db.execute(stmt)
        except SQLAlchemyError as exc:
            await self.db.rollback()
            raise PersistenceError("Failed to delete invoice") from exc
        await self._commit("delete invoice")

    # ---------- reads ----------

    async def fetch_latest(self, limit: int = 5) -> list[LatestInvoice]:
        """Newest invoices with their customer, for the overview page."""
        stmt = (
            select(
                Invoice.id,
                Invoice.amount,
                Customer.name,
                Customer.image_url,
                Customer.email,
            )
            .join(Customer, Invoice.customer_id == Customer.id)
            .order_by(Invoice.date.desc())
            .limit(limit)
        )
        try:
            rows = (await self.db.execute(stmt)).all()
        except SQLAlchemyError as exc:
            logger.exception("Database Error while fetching latest invoices")
            raise PersistenceError("Failed to fetch the latest invoices.") from exc

        return [
            LatestInvoice(
                id=str(row.id),
                name=row.name,
                image_url=row.image_url,
                email=row.email,
                amount=format_currency(row.amount),
            )
            for row in rows
        ]

    async def fetch_card_data(self) -> CardData:
        invoice_count_q = select(func.count(Invoice.id))
        customer_count_q = select(func.count(Customer.id))
        status_q = select(
            func.coalesce(func.sum(case((Invoice.status == "paid", Invoice.amount), else_=0)), 0).label("paid"),
            func.coalesce(func.sum(case((Invoice.status == "pending", Invoice.amount), else_=0)), 0).label("pending"),
        )
        try:
            number_of_invoices = (await self.db.execute(invoice_count_q)).scalar_one() or 0
            number_of_customers = (await self.db.execute(customer_count_q)).scalar_one() or 0
            totals = (await self.db.execute(status_q)).one()
        except SQLAlchemyError as exc:
            logger.exception("Database Error while fetching card data")
            raise PersistenceError("Failed to fetch card data.") from exc

        return CardData(
            number_of_customers=number_of_customers,
            number_of_invoices=number_of_invoices,
            total_paid_invoices=format_currency(int(totals.paid)),
            total_pending_invoices=format_currency(int(totals.pending)),
        )

    async def fetch_filtered(self, query: str, current_page: int) -> list[InvoiceTableRow]:
        """One page of invoices matching *query* on customer, amount, date or status."""
        offset = (max(current_page, 1) - 1) * ITEMS_PER_PAGE
        stmt = (
            select(
                Invoice.id,
                Invoice.customer_id,
                Invoice.amount,
                Invoice.date,
                Invoice.status,
                Customer.name,
                Customer.email,
                Customer.image_url,
            )
            .join(Customer, Invoice.customer_id == Customer.id)
            .where(self._search_filter(query))
            .order_by(Invoice.date.desc())
            .limit(ITEMS_PER_PAGE)
            .offset(offset)
        )
        try:
            rows = (await self.db.execute(stmt)).all()
        except SQLAlchemyError as exc:
            logger.exception("Database Error while fetching invoices (query=%r)", query)
            raise PersistenceError("Failed to fetch invoices.") from exc

        return [
            InvoiceTableRow(
                id=str(row.id),
                customer_id=str(row.customer_id),
                name=row.name,
                email=row.email,
                image_url=row.image_url,
                date=row.date,
                amount=row.amount,
                status=row.status,
            )
            for row in rows
        ]

    async def fetch_pages(self, query: str) -> int:
        """Number of pages needed to list every invoice matching *query*."""
        stmt = (
            select(func.count(Invoice.id))
            .join(Customer, Invoice.customer_id == Customer.id)
            .where(self._search_filter(query))
        )
        try:
            total = (await self.db.execute(stmt)).scalar_one() or 0
        except SQLAlchemyError as exc:
            logger.exception("Database Error while counting invoices (query=%r)", query)
            raise PersistenceError("Failed to fetch total number of invoices.") from exc
        return math.ceil(total / ITEMS_PER_PAGE)

    async def fetch_by_id(self, invoice_id: str) -> InvoiceFormData | None:
        try:
            key = uuid.UUID(str(invoice_id))
        except ValueError:
            return None

        stmt = select(Invoice.id, Invoice.customer_id, Invoice.amount, Invoice.status).where(
            Invoice.id == key
        )
        try:
            row = (await self.db.execute(stmt)).one_or_none()
        except SQLAlchemyError as exc:
            logger.exception("Database Error while fetching invoice %s", invoice_id)
            raise PersistenceError("Failed to fetch invoice.") from exc

        if row is None:
            return None
        return InvoiceFormData(
            id=str(row.id),
            customer_id=str(row.customer_id),
            amount=Decimal(row.amount) / 100,
            status=row.status,
        )
