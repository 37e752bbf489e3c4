"""Unit tests for the overdue invoice sweep"""

from datetime import date, datetime, timezone
from decimal import Decimal

import pytest

from micromeet.invoices.overdue import mark_overdue_invoices
from micromeet.models import Invoice

TODAY = date(2025, 4, 15)

_sequence = iter(range(1, 10000))


def add_invoice(db, org, status="sent", due_date=date(2025, 4, 1), deleted=False) -> Invoice:
    invoice = Invoice(
        org_id=org.id,
        invoice_number=f"INV-2025-{next(_sequence):04d}",
        date=date(2025, 3, 1),
        due_date=due_date,
        company={"name": "PT Maju Jaya"},
        customer={"name": "PT Pelanggan"},
        items=[],
        subtotal=Decimal("100.00"),
        tax_rate=Decimal("0"),
        tax_amount=Decimal("0"),
        total=Decimal("100.00"),
        status=status,
        deleted_at=datetime(2025, 4, 2, tzinfo=timezone.utc) if deleted else None,
    )
    db.add(invoice)
    db.commit()
    return invoice


class TestMarkOverdue:

    @pytest.mark.parametrize("status", ["draft", "sent"])
    def test_past_due_open_invoices_become_overdue(self, db_session, org, status):
        invoice = add_invoice(db_session, org, status=status)

        assert mark_overdue_invoices(db_session, today=TODAY) == 1
        assert invoice.status == "overdue"

    @pytest.mark.parametrize("status", ["paid", "cancelled", "overdue"])
    def test_closed_invoices_untouched(self, db_session, org, status):
        invoice = add_invoice(db_session, org, status=status)

        assert mark_overdue_invoices(db_session, today=TODAY) == 0
        assert invoice.status == status

    def test_due_today_is_not_overdue(self, db_session, org):
        invoice = add_invoice(db_session, org, due_date=TODAY)

        assert mark_overdue_invoices(db_session, today=TODAY) == 0
        assert invoice.status == "sent"

    def test_soft_deleted_invoices_skipped(self, db_session, org):
        invoice = add_invoice(db_session, org, deleted=True)

        assert mark_overdue_invoices(db_session, today=TODAY) == 0
        assert invoice.status == "sent"

    def test_scoped_to_organization(self, db_session, org, other_org):
        mine = add_invoice(db_session, org)
        theirs = add_invoice(db_session, other_org)

        assert mark_overdue_invoices(db_session, org_id=org.id, today=TODAY) == 1
        assert mine.status == "overdue"
        assert theirs.status == "sent"

    def test_idempotent(self, db_session, org):
        add_invoice(db_session, org)

        assert mark_overdue_invoices(db_session, today=TODAY) == 1
        assert mark_overdue_invoices(db_session, today=TODAY) == 0
