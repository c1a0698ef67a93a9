import logging
import uuid

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.domain.errors import PersistenceError
from app.infrastructure.db.models import User

logger = logging.getLogger("repositories.users")


class UserRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_email(self, email: str) -> User | None:
        stmt = select(User).where(User.email == email)
        try:
            result = await self.db.execute(stmt)
        except SQLAlchemyError as exc:
            logger.exception("Failed to fetch user %s", email)
            raise PersistenceError("Failed to fetch user.") from exc
        return result.scalar_one_or_none()

    async def get_by_id(self, user_id: uuid.UUID) -> User | None:
        stmt = select(User).where(User.id == user_id)
        try:
            result = await self.db.execute(stmt)
        except SQLAlchemyError as exc:
            logger.exception("Failed to fetch user %s", user_id)
            raise PersistenceError("Failed to fetch user.") from exc
        return result.scalar_one_or_none()
