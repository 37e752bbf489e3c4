"""Tenant isolation tests

Every row read or written through the API must belong to the caller's
organization. Rows of another organization behave as if they do not exist:
404 for direct access, absent from listings, untouched by mutations.
"""

import pytest

pytestmark = pytest.mark.security

API = "/api/v1"


@pytest.fixture
def foreign_documents(client, other_owner, auth_headers, invoice_payload, purchase_order_payload, receipt_payload):
    """One document of each type owned by the other organization."""
    headers = auth_headers(other_owner)
    return {
        "invoices": client.post(f"{API}/invoices", headers=headers, json=invoice_payload()).json(),
        "purchase-orders": client.post(f"{API}/purchase-orders", headers=headers, json=purchase_order_payload()).json(),
        "receipts": client.post(f"{API}/receipts", headers=headers, json=receipt_payload()).json(),
    }


DOCUMENT_PATHS = ["invoices", "purchase-orders", "receipts"]


class TestDocumentIsolation:

    @pytest.mark.parametrize("path", DOCUMENT_PATHS)
    def test_get_foreign_document(self, client, owner, auth_headers, foreign_documents, path):
        document = foreign_documents[path]

        response = client.get(f"{API}/{path}/{document['id']}", headers=auth_headers(owner))

        assert response.status_code == 404
        assert response.json()["error"] == "not_found"

    @pytest.mark.parametrize("path", DOCUMENT_PATHS)
    def test_foreign_documents_not_listed(self, client, owner, auth_headers, foreign_documents, path):
        response = client.get(f"{API}/{path}", headers=auth_headers(owner), params={"deleted": "all"})
        assert response.json() == []

    @pytest.mark.parametrize("path", DOCUMENT_PATHS)
    def test_cannot_modify_foreign_document(self, client, owner, other_owner, auth_headers, foreign_documents, path):
        document = foreign_documents[path]
        url = f"{API}/{path}/{document['id']}"
        headers = auth_headers(owner)

        assert client.patch(url, headers=headers, json={"notes": "diubah"}).status_code == 404
        assert client.delete(url, headers=headers).status_code == 404
        assert client.post(f"{url}/restore", headers=headers).status_code == 404
        assert client.delete(f"{url}/purge", headers=headers).status_code == 404

        unchanged = client.get(url, headers=auth_headers(other_owner)).json()
        assert unchanged["notes"] == document["notes"]
        assert unchanged["deleted_at"] is None

    def test_admin_role_does_not_cross_tenants(self, client, admin, auth_headers, foreign_documents):
        invoice = foreign_documents["invoices"]

        response = client.patch(
            f"{API}/invoices/{invoice['id']}/status", headers=auth_headers(admin), json={"status": "paid"}
        )
        assert response.status_code == 404

    def test_numbering_is_per_organization(self, client, owner, auth_headers, invoice_payload, foreign_documents):
        invoice = client.post(f"{API}/invoices", headers=auth_headers(owner), json=invoice_payload()).json()

        assert invoice["invoice_number"] == foreign_documents["invoices"]["invoice_number"]

    def test_cannot_email_foreign_document(self, client, owner, auth_headers, foreign_documents):
        invoice = foreign_documents["invoices"]

        response = client.post(f"{API}/emails/send", headers=auth_headers(owner), json={
            "document_type": "invoice",
            "document_id": invoice["id"],
            "to": "someone@example.com",
            "subject": "x",
            "html": "<p>x</p>",
        })
        assert response.status_code == 404

    def test_dashboard_excludes_foreign_documents(self, client, owner, auth_headers, foreign_documents):
        stats = client.get(f"{API}/dashboard/stats", headers=auth_headers(owner)).json()

        assert stats["total_invoices"] == 0
        assert stats["total_purchase_orders"] == 0
        assert stats["total_receipts"] == 0
        assert client.get(f"{API}/dashboard/recent", headers=auth_headers(owner)).json() == []


class TestSettingsIsolation:

    def test_foreign_customer(self, client, owner, other_owner, auth_headers, invoice_payload):
        customer = client.post(
            f"{API}/customers", headers=auth_headers(other_owner), json={"name": "Pelanggan Rahasia"}
        ).json()
        headers = auth_headers(owner)

        assert client.get(f"{API}/customers/{customer['id']}", headers=headers).status_code == 404
        assert client.get(f"{API}/customers", headers=headers).json() == []
        linked = client.post(f"{API}/invoices", headers=headers, json=invoice_payload(customer_id=customer["id"]))
        assert linked.status_code == 404

    def test_foreign_bank_account(self, client, owner, other_owner, auth_headers):
        account = client.post(f"{API}/bank-accounts", headers=auth_headers(other_owner), json={
            "bank_name": "BCA", "account_number": "999", "account_holder": "CV Sinar Abadi",
        }).json()
        headers = auth_headers(owner)

        assert client.post(f"{API}/bank-accounts/{account['id']}/default", headers=headers).status_code == 404
        assert client.delete(f"{API}/bank-accounts/{account['id']}", headers=headers).status_code == 404
        assert client.get(f"{API}/bank-accounts/default", headers=headers).json() is None

    def test_foreign_terms_template(self, client, owner, other_owner, auth_headers):
        template = client.post(f"{API}/terms-templates", headers=auth_headers(other_owner), json={
            "name": "Rahasia", "content": "x", "type": "both",
        }).json()

        response = client.patch(
            f"{API}/terms-templates/{template['id']}", headers=auth_headers(owner), json={"name": "Diambil"}
        )
        assert response.status_code == 404

    def test_foreign_membership(self, client, owner, other_owner, auth_headers):
        members = client.get(f"{API}/members", headers=auth_headers(other_owner)).json()
        membership_id = members[0]["id"]

        response = client.delete(f"{API}/members/{membership_id}", headers=auth_headers(owner))
        assert response.status_code == 404

        assert len(client.get(f"{API}/members", headers=auth_headers(other_owner)).json()) == 1

    def test_audit_log_is_per_organization(self, client, owner, other_owner, auth_headers, foreign_documents):
        invoice = foreign_documents["invoices"]
        client.delete(f"{API}/invoices/{invoice['id']}", headers=auth_headers(other_owner))

        entries = client.get(f"{API}/audit", headers=auth_headers(owner)).json()
        assert entries["total"] == 0
        assert entries["entries"] == []
