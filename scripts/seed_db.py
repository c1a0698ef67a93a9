# scripts/seed_db.py

import asyncio
import os
import sys
import uuid
from datetime import date

from loguru import logger

# Ensure project root (the folder containing 'app') is on sys.path
CURRENT_DIR = os.path.dirname(os.path.abspath(__file__))
PROJECT_ROOT = os.path.dirname(CURRENT_DIR)
if PROJECT_ROOT not in sys.path:
    sys.path.append(PROJECT_ROOT)

from app.core.db import AsyncSessionLocal, engine  # noqa: E402
from app.domain.services.auth import hash_password  # noqa: E402
from app.infrastructure.db.base import Base  # noqa: E402
from app.infrastructure.db.models import Customer, Invoice, Revenue, User  # noqa: E402

USERS = [
    {"name": "User", "email": "user@nextmail.com", "password": "123456"},
]

CUSTOMERS = [
    {"id": "d6e15727-9fe1-4961-8c5b-ea44a9bd81aa", "name": "Evil Rabbit", "email": "evil@rabbit.com",
     "image_url": "/customers/evil-rabbit.png"},
    {"id": "3958dc9e-712f-4377-85e9-fec4b6a6442a", "name": "Delba de Oliveira", "email": "delba@oliveira.com",
     "image_url": "/customers/delba-de-oliveira.png"},
    {"id": "3958dc9e-742f-4377-85e9-fec4b6a6442a", "name": "Lee Robinson", "email": "lee@robinson.com",
     "image_url": "/customers/lee-robinson.png"},
    {"id": "76d65c26-f784-44a2-ac19-586678f7c2f2", "name": "Michael Novotny", "email": "michael@novotny.com",
     "image_url": "/customers/michael-novotny.png"},
    {"id": "cc27c14a-0acf-4f4a-a6c9-d45682c144b9", "name": "Amy Burns", "email": "amy@burns.com",
     "image_url": "/customers/amy-burns.png"},
    {"id": "13d07535-c59e-4157-a011-f8d2ef4e0cbb", "name": "Balazs Orban", "email": "balazs@orban.com",
     "image_url": "/customers/balazs-orban.png"},
]

# (customer index, amount in cents, status, date)
INVOICES = [
    (0, 15795, "pending", "2022-12-06"),
    (1, 20348, "pending", "2022-11-14"),
    (4, 3040, "paid", "2022-10-29"),
    (3, 44800, "paid", "2023-09-10"),
    (5, 34577, "pending", "2023-08-05"),
    (2, 54246, "pending", "2023-07-16"),
    (0, 666, "pending", "2023-06-27"),
    (3, 32545, "paid", "2023-06-09"),
    (4, 1250, "paid", "2023-06-17"),
    (5, 8546, "paid", "2023-06-07"),
    (1, 500, "paid", "2023-08-19"),
    (5, 8945, "paid", "2023-06-03"),
    (2, 1000, "paid", "2022-06-05"),
]

REVENUE = [
    ("Jan", 2000), ("Feb", 1800), ("Mar", 2200), ("Apr", 2500),
    ("May", 2300), ("Jun", 3200), ("Jul", 3500), ("Aug", 3700),
    ("Sep", 2500), ("Oct", 2800), ("Nov", 3000), ("Dec", 4800),
]


async def seed_db():
    logger.info("Creating tables from current models...")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with AsyncSessionLocal() as session:
        logger.info("Seeding {} users", len(USERS))
        for u in USERS:
            session.add(User(name=u["name"], email=u["email"], password_hash=hash_password(u["password"])))

        logger.info("Seeding {} customers", len(CUSTOMERS))
        customer_ids = [uuid.UUID(c["id"]) for c in CUSTOMERS]
        for c, cid in zip(CUSTOMERS, customer_ids):
            session.add(Customer(id=cid, name=c["name"], email=c["email"], image_url=c["image_url"]))
        await session.flush()

        logger.info("Seeding {} invoices", len(INVOICES))
        for idx, amount, status, day in INVOICES:
            session.add(
                Invoice(
                    customer_id=customer_ids[idx],
                    amount=amount,
                    status=status,
                    date=date.fromisoformat(day),
                )
            )

        logger.info("Seeding {} revenue months", len(REVENUE))
        for month, revenue in REVENUE:
            session.add(Revenue(month=month, revenue=revenue))

        await session.commit()

    await engine.dispose()
    logger.success("DB seeded: users, customers, invoices and revenue created.")


if __name__ == "__main__":
    asyncio.run(seed_db())
