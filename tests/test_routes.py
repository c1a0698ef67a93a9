# tests/test_routes.py
"""
Page routes driven through FastAPI's TestClient.

Repositories and the view cache are replaced with mocks via
``app.dependency_overrides``; the lifespan (database setup) is not run.
"""

import uuid
from datetime import date

import pytest
from fastapi.testclient import TestClient

from app.api import deps
from app.core.config import settings
from app.domain.errors import PersistenceError
from app.domain.models.dashboard import (
    CardData,
    CustomerField,
    InvoiceFormData,
    InvoiceTableRow,
    RevenuePoint,
)
from app.domain.services.auth import create_session_token, hash_password
from app.domain.services.invoice_actions import CREATE_DB_ERROR, DELETE_FAILED
from app.domain.services.invoice_form import AMOUNT_REQUIRED
from app.infrastructure.db.models import User
from app.main import app

CUSTOMER_ID = "3958dc9e-712f-4377-85e9-fec4b6a6442a"
INVOICE_ID = "2b5c8e0a-7a3c-4c8e-9a53-3f1f0b1f9d11"
HTML = {"accept": "text/html"}


@pytest.fixture
def user():
    return User(
        id=uuid.uuid4(),
        name="User",
        email="user@nextmail.com",
        password_hash=hash_password("123456"),
    )


@pytest.fixture
def client(invoice_repo, customer_repo, revenue_repo, user_repo, views, user):
    invoice_repo.fetch_pages.return_value = 0
    invoice_repo.fetch_filtered.return_value = []
    invoice_repo.fetch_latest.return_value = []
    invoice_repo.fetch_card_data.return_value = CardData(
        number_of_customers=0,
        number_of_invoices=0,
        total_paid_invoices="0,00 €",
        total_pending_invoices="0,00 €",
    )
    customer_repo.fetch_all.return_value = [CustomerField(id=CUSTOMER_ID, name="Lee Robinson")]

    app.dependency_overrides[deps.get_invoice_repository] = lambda: invoice_repo
    app.dependency_overrides[deps.get_customer_repository] = lambda: customer_repo
    app.dependency_overrides[deps.get_revenue_repository] = lambda: revenue_repo
    app.dependency_overrides[deps.get_user_repository] = lambda: user_repo
    app.dependency_overrides[deps.get_view_cache] = lambda: views
    app.dependency_overrides[deps.get_current_user] = lambda: user

    yield TestClient(app, follow_redirects=False)
    app.dependency_overrides.clear()


@pytest.fixture
def anonymous(client):
    """Client that goes through the real session check."""
    app.dependency_overrides.pop(deps.get_current_user)
    return client


# ── auth guard ─────────────────────────────────────────────────


def test_dashboard_redirects_browsers_to_login(anonymous):
    resp = anonymous.get("/dashboard/invoices?page=2", headers=HTML)

    assert resp.status_code == 303
    assert resp.headers["location"] == "/login?redirect_to=%2Fdashboard%2Finvoices%3Fpage%3D2"


def test_dashboard_rejects_api_clients(anonymous):
    resp = anonymous.get("/dashboard", headers={"accept": "application/json"})
    assert resp.status_code == 401


def test_valid_session_cookie_passes_guard(anonymous, user_repo, user):
    user_repo.get_by_id.return_value = user
    anonymous.cookies.set(settings.AUTH_COOKIE_NAME, create_session_token(str(user.id), user.email))

    resp = anonymous.get("/dashboard/customers", headers=HTML)

    assert resp.status_code == 200
    user_repo.get_by_id.assert_awaited_once_with(user.id)


def test_session_for_deleted_user_is_rejected(anonymous, user_repo, user):
    user_repo.get_by_id.return_value = None
    anonymous.cookies.set(settings.AUTH_COOKIE_NAME, create_session_token(str(user.id), user.email))

    resp = anonymous.get("/dashboard", headers=HTML)
    assert resp.status_code == 303


def test_public_pages_need_no_session(anonymous):
    assert anonymous.get("/").status_code == 200
    assert anonymous.get("/health").json()["status"] == "ok"


# ── login / logout ─────────────────────────────────────────────


def test_login_page_renders(anonymous):
    resp = anonymous.get("/login?redirect_to=/dashboard/invoices")
    assert resp.status_code == 200
    assert 'value="/dashboard/invoices"' in resp.text


def test_login_with_bad_credentials(anonymous, user_repo):
    user_repo.get_by_email.return_value = None

    resp = anonymous.post("/login", data={"email": "user@nextmail.com", "password": "123456"})

    assert resp.status_code == 401
    assert "Invalid credentials." in resp.text
    assert settings.AUTH_COOKIE_NAME not in resp.cookies


def test_login_sets_session_cookie(anonymous, user_repo, user):
    user_repo.get_by_email.return_value = user

    resp = anonymous.post(
        "/login",
        data={"email": user.email, "password": "123456", "redirect_to": "/dashboard/customers"},
    )

    assert resp.status_code == 303
    assert resp.headers["location"] == "/dashboard/customers"
    assert resp.cookies.get(settings.AUTH_COOKIE_NAME)


def test_login_page_skipped_when_signed_in(anonymous, user):
    anonymous.cookies.set(settings.AUTH_COOKIE_NAME, create_session_token(str(user.id), user.email))

    resp = anonymous.get("/login")

    assert resp.status_code == 303
    assert resp.headers["location"] == "/dashboard"


def test_logout_clears_cookie(client):
    resp = client.post("/logout")
    assert resp.status_code == 303
    assert resp.headers["location"] == "/"


# ── overview / customers ───────────────────────────────────────


def test_overview_without_revenue(client):
    resp = client.get("/dashboard")
    assert resp.status_code == 200
    assert "No data available." in resp.text


def test_overview_draws_revenue_chart(client, revenue_repo):
    revenue_repo.fetch_revenue.return_value = [
        RevenuePoint(month="Jan", revenue=2000),
        RevenuePoint(month="Feb", revenue=4300),
    ]

    resp = client.get("/dashboard")

    assert "5 K €" in resp.text
    assert "No data available." not in resp.text


def test_customers_page_searches(client, customer_repo):
    resp = client.get("/dashboard/customers?query=lee")
    assert resp.status_code == 200
    customer_repo.fetch_filtered.assert_awaited_once_with("lee")


# ── invoice list ───────────────────────────────────────────────


def test_invoice_list_renders_and_is_cached(client, invoice_repo, views):
    invoice_repo.fetch_pages.return_value = 3
    invoice_repo.fetch_filtered.return_value = [
        InvoiceTableRow(
            id=INVOICE_ID,
            customer_id=CUSTOMER_ID,
            name="Lee Robinson",
            email="lee@robinson.com",
            image_url="/customers/lee-robinson.png",
            date=date(2025, 1, 15),
            amount=150050,
            status="pending",
        )
    ]

    resp = client.get("/dashboard/invoices?query=lee&page=2")

    assert resp.status_code == 200
    assert "1.500,50 €" in resp.text
    assert "15 gen 2025" in resp.text
    invoice_repo.fetch_filtered.assert_awaited_once_with("lee", 2)
    views.set.assert_awaited_once()
    assert views.set.await_args.args[0] == "/dashboard/invoices"
    assert views.set.await_args.args[2] == "query=lee&page=2"


def test_invoice_list_served_from_cache(client, invoice_repo, views):
    views.get.return_value = "<p>cached page</p>"

    resp = client.get("/dashboard/invoices")

    assert resp.text == "<p>cached page</p>"
    invoice_repo.fetch_filtered.assert_not_awaited()


def test_invoice_list_rejects_bad_page(client):
    assert client.get("/dashboard/invoices?page=0").status_code == 422


# ── create ─────────────────────────────────────────────────────


def test_create_page_lists_customers(client):
    resp = client.get("/dashboard/invoices/create")
    assert resp.status_code == 200
    assert "Lee Robinson" in resp.text


def test_create_redirects_to_list(client, invoice_repo, invoice_form):
    resp = client.post("/dashboard/invoices/create", data=invoice_form)

    assert resp.status_code == 303
    assert resp.headers["location"] == "/dashboard/invoices"
    invoice_repo.insert.assert_awaited_once()


def test_create_invalid_rerenders_with_errors(client, invoice_repo, invoice_form):
    invoice_form["amount"] = "-3"

    resp = client.post("/dashboard/invoices/create", data=invoice_form)

    assert resp.status_code == 400
    assert AMOUNT_REQUIRED in resp.text
    invoice_repo.insert.assert_not_awaited()


def test_create_db_error_rerenders_with_message(client, invoice_repo, invoice_form):
    invoice_repo.insert.side_effect = PersistenceError("boom")

    resp = client.post("/dashboard/invoices/create", data=invoice_form)

    assert resp.status_code == 500
    assert CREATE_DB_ERROR in resp.text


# ── edit ───────────────────────────────────────────────────────


def test_edit_page_prefills_form(client, invoice_repo):
    invoice_repo.fetch_by_id.return_value = InvoiceFormData(
        id=INVOICE_ID, customer_id=CUSTOMER_ID, amount="1500.5", status="paid"
    )

    resp = client.get(f"/dashboard/invoices/{INVOICE_ID}/edit")

    assert resp.status_code == 200
    assert "1500.5" in resp.text


def test_edit_page_for_missing_invoice(client, invoice_repo):
    invoice_repo.fetch_by_id.return_value = None

    resp = client.get(f"/dashboard/invoices/{INVOICE_ID}/edit")

    assert resp.status_code == 404
    assert "Could not find the requested invoice." in resp.text


def test_edit_page_after_delete_is_not_served_from_cache(client, invoice_repo, views):
    invoice_repo.fetch_by_id.return_value = InvoiceFormData(
        id=INVOICE_ID, customer_id=CUSTOMER_ID, amount="1500.5", status="paid"
    )
    assert client.get(f"/dashboard/invoices/{INVOICE_ID}/edit").status_code == 200

    client.post(f"/dashboard/invoices/{INVOICE_ID}/delete", data={})
    invoice_repo.fetch_by_id.return_value = None
    views.get.return_value = "<p>stale edit form</p>"

    resp = client.get(f"/dashboard/invoices/{INVOICE_ID}/edit")

    assert resp.status_code == 404
    assert invoice_repo.fetch_by_id.await_count == 2
    views.set.assert_not_awaited()
    views.revalidate_path.assert_awaited_once_with("/dashboard/invoices")


def test_edit_submits_update(client, invoice_repo, invoice_form):
    resp = client.post(f"/dashboard/invoices/{INVOICE_ID}/edit", data=invoice_form)

    assert resp.status_code == 303
    invoice_repo.update.assert_awaited_once()
    assert invoice_repo.update.await_args.args[0] == INVOICE_ID


# ── delete ─────────────────────────────────────────────────────


def test_delete_returns_to_the_same_page(client, invoice_repo):
    resp = client.post(
        f"/dashboard/invoices/{INVOICE_ID}/delete",
        data={"return_to": "/dashboard/invoices?page=2"},
    )

    assert resp.status_code == 303
    assert resp.headers["location"] == "/dashboard/invoices?page=2"
    invoice_repo.delete.assert_awaited_once_with(INVOICE_ID)


def test_delete_ignores_foreign_return_target(client):
    resp = client.post(
        f"/dashboard/invoices/{INVOICE_ID}/delete",
        data={"return_to": "https://evil.example"},
    )
    assert resp.headers["location"] == "/dashboard/invoices"


def test_delete_failure_shows_error_page(client, invoice_repo):
    invoice_repo.delete.side_effect = PersistenceError("boom")

    resp = client.post(f"/dashboard/invoices/{INVOICE_ID}/delete", data={})

    assert resp.status_code == 500
    assert DELETE_FAILED in resp.text
