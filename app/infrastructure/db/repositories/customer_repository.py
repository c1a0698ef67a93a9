import logging

from sqlalchemy import case, func, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.domain.errors import PersistenceError
from app.domain.models.dashboard import CustomerField, CustomerTableRow
from app.domain.services.formatting import format_currency
from app.infrastructure.db.models import Customer, Invoice

logger = logging.getLogger("repositories.customers")


class CustomerRepository:
    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def fetch_all(self) -> list[CustomerField]:
        """Id and name of every customer, for the invoice form's select."""
        stmt = select(Customer.id, Customer.name).order_by(Customer.name.asc())
        try:
            rows = (await self.db.execute(stmt)).all()
        except SQLAlchemyError as exc:
            logger.exception("Database Error while fetching customers")
            raise PersistenceError("Failed to fetch all customers.") from exc
        return [CustomerField(id=str(row.id), name=row.name) for row in rows]

    async def fetch_filtered(self, query: str) -> list[CustomerTableRow]:
        """Customers matching *query* by name or email, with invoice totals."""
        pattern = f"%{query}%"
        pending = func.coalesce(
            func.sum(case((Invoice.status == "pending", Invoice.amount), else_=0)), 0
        )
        paid = func.coalesce(
            func.sum(case((Invoice.status == "paid", Invoice.amount), else_=0)), 0
        )
        stmt = (
            select(
                Customer.id,
                Customer.name,
                Customer.email,
                Customer.image_url,
                func.count(Invoice.id).label("total_invoices"),
                pending.label("total_pending"),
                paid.label("total_paid"),
            )
            .outerjoin(Invoice, Invoice.customer_id == Customer.id)
            .where(or_(Customer.name.ilike(pattern), Customer.email.ilike(pattern)))
            .group_by(Customer.id, Customer.name, Customer.email, Customer.image_url)
            .order_by(Customer.name.asc())
        )
        try:
            rows = (await self.db.execute(stmt)).all()
        except SQLAlchemyError as exc:
            logger.exception("Database Error while fetching customers (query=%r)", query)
            raise PersistenceError("Failed to fetch customer table.") from exc

        return [
            CustomerTableRow(
                id=str(row.id),
                name=row.name,
                email=row.email,
                image_url=row.image_url,
                total_invoices=row.total_invoices,
                total_pending=format_currency(int(row.total_pending)),
                total_paid=format_currency(int(row.total_paid)),
            )
            for row in rows
        ]
