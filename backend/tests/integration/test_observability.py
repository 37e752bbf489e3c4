"""Integration tests for request correlation and metrics endpoints"""

import pytest

pytestmark = pytest.mark.integration


def test_request_id_is_echoed(client):
    response = client.get("/", headers={"X-Request-ID": "req-1234"})

    assert response.status_code == 200
    assert response.headers["X-Request-ID"] == "req-1234"


def test_request_id_is_generated(client):
    response = client.get("/")
    assert response.headers["X-Request-ID"]


def test_request_id_on_errors(client):
    response = client.get("/api/v1/auth/me", headers={"X-Request-ID": "req-err"})

    assert response.status_code == 401
    assert response.headers["X-Request-ID"] == "req-err"


def test_readiness(client):
    response = client.get("/ready")

    assert response.status_code == 200
    assert response.json()["status"] == "ready"


def test_metrics_exposed(client, owner, auth_headers, invoice_payload):
    client.post("/api/v1/invoices", headers=auth_headers(owner), json=invoice_payload())

    response = client.get("/metrics")

    assert response.status_code == 200
    assert "micromeet_documents_created_total" in response.text
