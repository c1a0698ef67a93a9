import logging

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.domain.errors import PersistenceError
from app.domain.models.dashboard import RevenuePoint
from app.infrastructure.db.models import Revenue

logger = logging.getLogger("repositories.revenue")

# Calendar order of the month labels stored in the revenue table
MONTH_ORDER = ["Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]


class RevenueRepository:
    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def fetch_revenue(self) -> list[RevenuePoint]:
        try:
            result = await self.db.execute(select(Revenue))
        except SQLAlchemyError as exc:
            logger.exception("Database Error while fetching revenue")
            raise PersistenceError("Failed to fetch revenue data.") from exc

        points = [RevenuePoint(month=r.month, revenue=r.revenue) for r in result.scalars().all()]
        points.sort(key=lambda p: MONTH_ORDER.index(p.month) if p.month in MONTH_ORDER else len(MONTH_ORDER))
        return points
