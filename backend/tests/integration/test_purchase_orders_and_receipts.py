"""Integration tests for purchase order and receipt endpoints"""

from datetime import datetime, timezone

import pytest

pytestmark = pytest.mark.integration

API = "/api/v1"
YEAR = datetime.now(timezone.utc).year


class TestPurchaseOrders:

    def test_create_and_list(self, client, owner, auth_headers, purchase_order_payload):
        headers = auth_headers(owner)

        response = client.post(f"{API}/purchase-orders", headers=headers, json=purchase_order_payload())
        assert response.status_code == 201
        po = response.json()
        assert po["po_number"] == f"PO-{YEAR}-0001"
        assert po["subtotal"] == 550000
        assert po["tax_amount"] == 60500
        assert po["total"] == 610500
        assert po["vendor"]["name"] == "CV Pemasok Utama"

        listed = client.get(f"{API}/purchase-orders", headers=headers, params={"search": "pemasok"}).json()
        assert [p["id"] for p in listed] == [po["id"]]

    def test_status_transitions(self, client, owner, auth_headers, purchase_order_payload):
        headers = auth_headers(owner)
        po = client.post(f"{API}/purchase-orders", headers=headers, json=purchase_order_payload()).json()

        confirmed = client.patch(f"{API}/purchase-orders/{po['id']}/status", headers=headers, json={"status": "confirmed"})
        assert confirmed.json()["status"] == "confirmed"

        invalid = client.patch(f"{API}/purchase-orders/{po['id']}/status", headers=headers, json={"status": "paid"})
        assert invalid.status_code == 422

    def test_update_reprices(self, client, owner, auth_headers, purchase_order_payload):
        headers = auth_headers(owner)
        po = client.post(f"{API}/purchase-orders", headers=headers, json=purchase_order_payload()).json()

        body = client.patch(f"{API}/purchase-orders/{po['id']}", headers=headers, json={
            "items": [{"description": "Kertas A4", "quantity": 20, "unit_price": 55000}],
        }).json()
        assert body["subtotal"] == 1100000
        assert body["total"] == 1221000

    @pytest.mark.parametrize("field", ["date", "company", "vendor", "status"])
    def test_null_for_required_field_rejected(self, client, owner, auth_headers, purchase_order_payload, field):
        headers = auth_headers(owner)
        po = client.post(f"{API}/purchase-orders", headers=headers, json=purchase_order_payload()).json()

        response = client.patch(f"{API}/purchase-orders/{po['id']}", headers=headers, json={field: None})

        assert response.status_code == 422
        assert response.json()["error"] == "validation_error"
        assert client.get(f"{API}/purchase-orders/{po['id']}", headers=headers).json()[field] == po[field]

    def test_delivery_date_can_be_cleared(self, client, owner, auth_headers, purchase_order_payload):
        headers = auth_headers(owner)
        po = client.post(
            f"{API}/purchase-orders", headers=headers, json=purchase_order_payload(expected_delivery_date="2025-03-20")
        ).json()

        response = client.patch(
            f"{API}/purchase-orders/{po['id']}", headers=headers, json={"expected_delivery_date": None}
        )

        assert response.status_code == 200
        assert response.json()["expected_delivery_date"] is None

    def test_numbering_is_independent_of_invoices(self, client, owner, auth_headers, invoice_payload, purchase_order_payload):
        headers = auth_headers(owner)
        client.post(f"{API}/invoices", headers=headers, json=invoice_payload())

        po = client.post(f"{API}/purchase-orders", headers=headers, json=purchase_order_payload()).json()
        assert po["po_number"] == f"PO-{YEAR}-0001"

    def test_delete_restore(self, client, owner, auth_headers, purchase_order_payload):
        headers = auth_headers(owner)
        po = client.post(f"{API}/purchase-orders", headers=headers, json=purchase_order_payload()).json()
        url = f"{API}/purchase-orders/{po['id']}"

        assert client.delete(url, headers=headers).status_code == 204
        assert client.get(f"{API}/purchase-orders", headers=headers).json() == []
        assert client.post(f"{url}/restore", headers=headers).status_code == 200
        assert len(client.get(f"{API}/purchase-orders", headers=headers).json()) == 1


class TestReceipts:

    def test_amount_in_words_generated(self, client, owner, auth_headers, receipt_payload):
        response = client.post(f"{API}/receipts", headers=auth_headers(owner), json=receipt_payload())

        assert response.status_code == 201
        receipt = response.json()
        assert receipt["receipt_number"] == f"KWT-{YEAR}-0001"
        assert receipt["amount"] == 1500000
        assert receipt["amount_in_words"] == "Satu Juta Lima Ratus Ribu Rupiah"

    def test_explicit_amount_in_words_kept(self, client, owner, auth_headers, receipt_payload):
        receipt = client.post(
            f"{API}/receipts",
            headers=auth_headers(owner),
            json=receipt_payload(amount_in_words="Satu setengah juta rupiah"),
        ).json()

        assert receipt["amount_in_words"] == "Satu setengah juta rupiah"

    def test_new_amount_respells_words(self, client, owner, auth_headers, receipt_payload):
        headers = auth_headers(owner)
        receipt = client.post(f"{API}/receipts", headers=headers, json=receipt_payload()).json()

        body = client.patch(f"{API}/receipts/{receipt['id']}", headers=headers, json={"amount": 2500000}).json()
        assert body["amount"] == 2500000
        assert body["amount_in_words"] == "Dua Juta Lima Ratus Ribu Rupiah"

    @pytest.mark.parametrize("field", ["amount_in_words", "received_from", "payment_method", "amount"])
    def test_null_for_required_field_rejected(self, client, owner, auth_headers, receipt_payload, field):
        headers = auth_headers(owner)
        receipt = client.post(f"{API}/receipts", headers=headers, json=receipt_payload()).json()

        response = client.patch(f"{API}/receipts/{receipt['id']}", headers=headers, json={field: None})

        assert response.status_code == 422
        assert response.json()["error"] == "validation_error"
        stored = client.get(f"{API}/receipts/{receipt['id']}", headers=headers).json()
        assert stored[field] == receipt[field]

    @pytest.mark.parametrize("amount", [0, -5000])
    def test_amount_must_be_positive(self, client, owner, auth_headers, receipt_payload, amount):
        response = client.post(f"{API}/receipts", headers=auth_headers(owner), json=receipt_payload(amount=amount))
        assert response.status_code == 422

    def test_search_by_payer(self, client, owner, auth_headers, receipt_payload):
        headers = auth_headers(owner)
        client.post(f"{API}/receipts", headers=headers, json=receipt_payload())
        client.post(f"{API}/receipts", headers=headers, json=receipt_payload(received_from="Toko Berkah"))

        listed = client.get(f"{API}/receipts", headers=headers, params={"search": "berkah"}).json()
        assert [r["received_from"] for r in listed] == ["Toko Berkah"]

    def test_purge(self, client, owner, auth_headers, receipt_payload):
        headers = auth_headers(owner)
        receipt = client.post(f"{API}/receipts", headers=headers, json=receipt_payload()).json()
        url = f"{API}/receipts/{receipt['id']}"

        client.delete(url, headers=headers)
        assert client.delete(f"{url}/purge", headers=headers).status_code == 204
        assert client.get(f"{API}/receipts", headers=headers, params={"deleted": "all"}).json() == []
