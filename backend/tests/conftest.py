"""Pytest fixtures shared by unit and integration tests.

Provides:
- An in-memory SQLite database (fresh schema per test)
- Organizations with owner, admin and member users
- A TestClient wired to the test session and bearer-token helpers
- A fake SMTP server capturing outbound mail

Usage:
    def test_list_invoices(client, owner, auth_headers):
        response = client.get("/api/v1/invoices", headers=auth_headers(owner))
        assert response.status_code == 200
"""

import os

# Set environment variables BEFORE any imports to ensure they take effect
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET", "test-jwt-secret-key-256-bits-minimum-length-required-for-security")
os.environ.setdefault("PASSWORD_PEPPER", "test-pepper-secret-key-32-chars-long")
os.environ.setdefault("SITE_URL", "https://app.micromeet.test")
os.environ.setdefault("LOG_JSON", "false")

from typing import Callable, Dict, Generator, List

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from micromeet.auth.jwt import create_access_token
from micromeet.auth.password import hash_password
from micromeet.auth.rate_limit import rate_limiter
from micromeet.database import get_db
from micromeet.models import Base, Org, OrganizationMember, User

TEST_PASSWORD = "Rahasia#Kuat2024"

test_engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)


# pysqlite defers BEGIN on its own, which breaks SAVEPOINT handling; emit it explicitly
@event.listens_for(test_engine, "connect")
def _disable_pysqlite_transactions(dbapi_connection, connection_record):
    dbapi_connection.isolation_level = None


@event.listens_for(test_engine, "begin")
def _emit_begin(conn):
    conn.exec_driver_sql("BEGIN")


TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)


@pytest.fixture(autouse=True)
def no_redis():
    """Run without Redis: rate limiting degrades to a no-op."""
    rate_limiter._connected = True
    rate_limiter._redis = None
    yield


@pytest.fixture
def db_session() -> Generator[Session, None, None]:
    """Fresh schema and session for each test."""
    Base.metadata.create_all(bind=test_engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=test_engine)


@pytest.fixture
def make_user(db_session: Session) -> Callable[..., User]:
    """Factory creating a user, optionally as a member of an organization."""

    def _make_user(email: str, org: Org = None, role: str = "member", name: str = None) -> User:
        user = User(
            email=email,
            name=name or email.split("@")[0].title(),
            password_hash=hash_password(TEST_PASSWORD),
            status="ACTIVE",
        )
        db_session.add(user)
        db_session.flush()
        if org is not None:
            db_session.add(OrganizationMember(org_id=org.id, user_id=user.id, role=role))
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make_user


@pytest.fixture
def org(db_session: Session) -> Org:
    org = Org(name="PT Maju Jaya", settings_json={})
    db_session.add(org)
    db_session.commit()
    db_session.refresh(org)
    return org


@pytest.fixture
def other_org(db_session: Session) -> Org:
    org = Org(name="CV Sinar Abadi", settings_json={})
    db_session.add(org)
    db_session.commit()
    db_session.refresh(org)
    return org


@pytest.fixture
def owner(make_user, org) -> User:
    return make_user("owner@majujaya.co.id", org, "owner", name="Budi Santoso")


@pytest.fixture
def admin(make_user, org) -> User:
    return make_user("admin@majujaya.co.id", org, "admin", name="Sari Dewi")


@pytest.fixture
def member(make_user, org) -> User:
    return make_user("staff@majujaya.co.id", org, "member", name="Andi Wijaya")


@pytest.fixture
def other_owner(make_user, other_org) -> User:
    return make_user("owner@sinarabadi.co.id", other_org, "owner", name="Rina Kusuma")


@pytest.fixture
def auth_headers() -> Callable[[User], Dict[str, str]]:
    def _headers(user: User) -> Dict[str, str]:
        token = create_access_token(user_id=user.id, email=user.email)
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture
def client(db_session: Session) -> Generator[TestClient, None, None]:
    """TestClient whose requests share the test's database session."""
    from micromeet.main import app

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


class FakeSMTP:
    """Stand-in for smtplib.SMTP recording every message sent."""

    sent: List = []
    fail_with: Exception = None

    def __init__(self, host, port, timeout=None, **kwargs):
        self.host = host
        self.port = port

    def ehlo(self):
        return 250, b"ok"

    def has_extn(self, name):
        return False

    def login(self, user, password):
        return 235, b"ok"

    def noop(self):
        return 250, b"ok"

    def send_message(self, msg):
        if FakeSMTP.fail_with is not None:
            raise FakeSMTP.fail_with
        FakeSMTP.sent.append(msg)
        return {}

    def quit(self):
        return 221, b"bye"


@pytest.fixture
def smtp(monkeypatch):
    """Patch smtplib so mail is captured instead of sent."""
    import smtplib

    FakeSMTP.sent = []
    FakeSMTP.fail_with = None
    monkeypatch.setattr(smtplib, "SMTP", FakeSMTP)
    return FakeSMTP


def _invoice_payload(**overrides) -> dict:
    payload = {
        "date": "2025-03-01",
        "due_date": "2025-03-31",
        "company": {"name": "PT Maju Jaya", "address": "Jl. Sudirman No. 1, Jakarta"},
        "customer": {"name": "PT Pelanggan Setia", "address": "Jl. Gatot Subroto 10"},
        "items": [
            {"description": "Jasa konsultasi", "quantity": 2, "unit_price": 1500000},
            {"description": "Lisensi perangkat lunak", "quantity": 1, "unit_price": 750000},
        ],
        "tax_rate": 11,
    }
    payload.update(overrides)
    return payload


def _purchase_order_payload(**overrides) -> dict:
    payload = {
        "date": "2025-03-01",
        "company": {"name": "PT Maju Jaya", "address": "Jl. Sudirman No. 1, Jakarta"},
        "vendor": {"name": "CV Pemasok Utama", "address": "Jl. Industri 5, Bekasi"},
        "items": [{"description": "Kertas A4", "quantity": 10, "unit_price": 55000}],
        "tax_rate": 11,
    }
    payload.update(overrides)
    return payload


def _receipt_payload(**overrides) -> dict:
    payload = {
        "date": "2025-03-05",
        "company": {"name": "PT Maju Jaya", "address": "Jl. Sudirman No. 1, Jakarta"},
        "received_from": "PT Pelanggan Setia",
        "amount": 1500000,
        "payment_method": "transfer",
        "payment_for": "Pelunasan INV-2025-0001",
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def invoice_payload() -> Callable[..., dict]:
    return _invoice_payload


@pytest.fixture
def purchase_order_payload() -> Callable[..., dict]:
    return _purchase_order_payload


@pytest.fixture
def receipt_payload() -> Callable[..., dict]:
    return _receipt_payload


@pytest.fixture
def password() -> str:
    """Plain-text password of every fixture user."""
    return TEST_PASSWORD


def html_body(msg) -> str:
    """Decoded HTML part of a captured message."""
    for part in msg.walk():
        if part.get_content_type() == "text/html":
            return part.get_payload(decode=True).decode("utf-8")
    return ""


@pytest.fixture
def mail_html() -> Callable:
    return html_body
