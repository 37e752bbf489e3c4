"""Integration tests for customer and dashboard endpoints"""

import pytest

pytestmark = pytest.mark.integration

API = "/api/v1"


@pytest.fixture
def create_customer(client, auth_headers):
    def _create(user, **fields):
        payload = {"name": "PT Pelanggan Setia", "address": "Jl. Gatot Subroto 10"}
        payload.update(fields)
        response = client.post(f"{API}/customers", headers=auth_headers(user), json=payload)
        assert response.status_code == 201, response.text
        return response.json()

    return _create


class TestCustomers:

    def test_create_and_search(self, client, create_customer, owner, auth_headers):
        create_customer(owner, name="Toko Berkah", email="kasir@tokoberkah.id")
        create_customer(owner, name="PT Pelanggan Setia", phone="021-5551234")
        headers = auth_headers(owner)

        names = [c["name"] for c in client.get(f"{API}/customers", headers=headers).json()]
        assert names == ["PT Pelanggan Setia", "Toko Berkah"]

        by_email = client.get(f"{API}/customers", headers=headers, params={"q": "tokoberkah"}).json()
        assert [c["name"] for c in by_email] == ["Toko Berkah"]

        by_phone = client.get(f"{API}/customers", headers=headers, params={"q": "5551234"}).json()
        assert [c["name"] for c in by_phone] == ["PT Pelanggan Setia"]

    def test_invalid_email_rejected(self, client, owner, auth_headers):
        response = client.post(f"{API}/customers", headers=auth_headers(owner), json={
            "name": "Toko Berkah",
            "email": "bukan-email",
        })
        assert response.status_code == 422

    def test_update_and_delete(self, client, create_customer, owner, auth_headers):
        customer = create_customer(owner)
        headers = auth_headers(owner)
        url = f"{API}/customers/{customer['id']}"

        updated = client.patch(url, headers=headers, json={"address": "Jl. Thamrin 2"})
        assert updated.json()["address"] == "Jl. Thamrin 2"

        assert client.delete(url, headers=headers).status_code == 204
        assert client.get(url, headers=headers).status_code == 404

    def test_member_cannot_edit_others_customer(self, client, create_customer, owner, member, auth_headers):
        customer = create_customer(owner)

        response = client.patch(
            f"{API}/customers/{customer['id']}", headers=auth_headers(member), json={"name": "Diubah"}
        )
        assert response.status_code == 403

    def test_invoice_links_customer(self, client, create_customer, owner, auth_headers, invoice_payload):
        customer = create_customer(owner)

        response = client.post(
            f"{API}/invoices", headers=auth_headers(owner), json=invoice_payload(customer_id=customer["id"])
        )
        assert response.status_code == 201
        assert response.json()["customer_id"] == customer["id"]

    def test_anonymous_list_is_empty(self, client, create_customer, owner):
        create_customer(owner)
        assert client.get(f"{API}/customers").json() == []


class TestDashboard:

    @pytest.fixture
    def seeded(self, client, owner, auth_headers, invoice_payload, purchase_order_payload, receipt_payload):
        headers = auth_headers(owner)
        client.post(f"{API}/invoices", headers=headers, json=invoice_payload(status="paid"))
        client.post(f"{API}/invoices", headers=headers, json=invoice_payload(
            status="sent", customer={"name": "Toko Berkah"}, items=[
                {"description": "Jasa", "quantity": 1, "unit_price": 1000000},
            ],
        ))
        client.post(f"{API}/invoices", headers=headers, json=invoice_payload(status="cancelled"))
        client.post(f"{API}/purchase-orders", headers=headers, json=purchase_order_payload())
        client.post(f"{API}/receipts", headers=headers, json=receipt_payload())
        return headers

    def test_stats(self, client, seeded):
        stats = client.get(f"{API}/dashboard/stats", headers=seeded).json()

        assert stats["total_invoices"] == 3
        assert stats["paid_invoices"] == 1
        assert stats["pending_invoices"] == 1
        # Past due and still sent counts as overdue before the sweep runs
        assert stats["overdue_invoices"] == 1
        assert stats["total_paid_amount"] == 4162500
        assert stats["total_pending_amount"] == 1110000
        assert stats["total_invoice_amount"] == 4162500 + 1110000
        assert stats["total_purchase_orders"] == 1
        assert stats["total_receipts"] == 1

    def test_deleted_documents_excluded(self, client, owner, auth_headers, invoice_payload):
        headers = auth_headers(owner)
        invoice = client.post(f"{API}/invoices", headers=headers, json=invoice_payload()).json()
        client.delete(f"{API}/invoices/{invoice['id']}", headers=headers)

        assert client.get(f"{API}/dashboard/stats", headers=headers).json()["total_invoices"] == 0

    def test_top_customers(self, client, seeded):
        top = client.get(f"{API}/dashboard/top-customers", headers=seeded).json()

        assert [c["name"] for c in top] == ["PT Pelanggan Setia", "Toko Berkah"]
        assert top[0] == {"name": "PT Pelanggan Setia", "total": 4162500, "count": 1}

    def test_recent_documents(self, client, seeded):
        recent = client.get(f"{API}/dashboard/recent", headers=seeded).json()

        assert len(recent) == 5
        assert {d["type"] for d in recent} == {"invoice", "purchase_order", "receipt"}

    def test_revenue_covers_six_months(self, client, seeded):
        points = client.get(f"{API}/dashboard/revenue", headers=seeded).json()
        assert len(points) == 6

    def test_anonymous_gets_zeros(self, client, seeded):
        assert client.get(f"{API}/dashboard/stats").json()["total_invoices"] == 0
        assert client.get(f"{API}/dashboard/recent").json() == []
