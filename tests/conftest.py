"""Shared test fixtures for the invoice dashboard test suite."""

import asyncio
from unittest.mock import AsyncMock

import pytest

from app.infrastructure.cache.view_cache import ViewCache
from app.infrastructure.db.repositories import (
    CustomerRepository,
    InvoiceRepository,
    RevenueRepository,
    UserRepository,
)

CUSTOMER_ID = "3958dc9e-712f-4377-85e9-fec4b6a6442a"
INVOICE_ID = "2b5c8e0a-7a3c-4c8e-9a53-3f1f0b1f9d11"


@pytest.fixture(scope="session")
def event_loop():
    """Use a single event loop for the entire test session."""
    loop = asyncio.new_event_loop()
    yield loop
    loop.close()


@pytest.fixture
def invoice_form() -> dict:
    """A valid create/edit invoice form submission."""
    return {"customer_id": CUSTOMER_ID, "amount": "1500.50", "status": "pending"}


@pytest.fixture
def invoice_repo() -> AsyncMock:
    return AsyncMock(spec=InvoiceRepository)


@pytest.fixture
def customer_repo() -> AsyncMock:
    repo = AsyncMock(spec=CustomerRepository)
    repo.fetch_all.return_value = []
    repo.fetch_filtered.return_value = []
    return repo


@pytest.fixture
def revenue_repo() -> AsyncMock:
    repo = AsyncMock(spec=RevenueRepository)
    repo.fetch_revenue.return_value = []
    return repo


@pytest.fixture
def user_repo() -> AsyncMock:
    return AsyncMock(spec=UserRepository)


@pytest.fixture
def views() -> AsyncMock:
    cache = AsyncMock(spec=ViewCache)
    cache.get.return_value = None
    return cache
