"""Unit tests for document number allocation

Tests cover:
- Formatting ({PREFIX}-{YYYY}-{seq:04d}, unbounded past 9999)
- Lazy counter creation and monotonic increments
- Independent sequences per organization, type and year
- peek_next does not consume numbers
- Prefix overrides
"""

import pytest

from micromeet.documents.numbering import (
    DocumentType,
    allocate,
    configured_prefix,
    format_number,
    increment,
    peek_next,
    set_prefix,
)
from micromeet.models import DocumentCounter


class TestFormatNumber:

    def test_zero_pads_to_four_digits(self):
        assert format_number("INV", 2025, 1) == "INV-2025-0001"

    def test_grows_past_four_digits(self):
        assert format_number("KWT", 2025, 12345) == "KWT-2025-12345"


class TestAllocate:

    def test_first_allocation_creates_counter(self, db_session, org):
        allocated = allocate(db_session, org.id, DocumentType.INVOICE, year=2025)

        assert allocated.number == "INV-2025-0001"
        counter = db_session.query(DocumentCounter).filter_by(org_id=org.id).one()
        assert counter.last_number == 1
        assert counter.prefix == "INV"

    def test_sequential_allocations(self, db_session, org):
        numbers = [allocate(db_session, org.id, DocumentType.RECEIPT, year=2025).number for _ in range(3)]
        assert numbers == ["KWT-2025-0001", "KWT-2025-0002", "KWT-2025-0003"]

    def test_types_have_independent_sequences(self, db_session, org):
        allocate(db_session, org.id, DocumentType.INVOICE, year=2025)
        allocate(db_session, org.id, DocumentType.INVOICE, year=2025)

        po = allocate(db_session, org.id, DocumentType.PURCHASE_ORDER, year=2025)
        assert po.number == "PO-2025-0001"

    def test_organizations_have_independent_sequences(self, db_session, org, other_org):
        allocate(db_session, org.id, DocumentType.INVOICE, year=2025)
        assert allocate(db_session, other_org.id, DocumentType.INVOICE, year=2025).next_sequence == 1

    def test_new_year_restarts_sequence(self, db_session, org):
        allocate(db_session, org.id, DocumentType.INVOICE, year=2025)
        allocate(db_session, org.id, DocumentType.INVOICE, year=2025)

        assert allocate(db_session, org.id, DocumentType.INVOICE, year=2026).number == "INV-2026-0001"

    def test_increment_returns_sequence(self, db_session, org):
        assert increment(db_session, org.id, DocumentType.INVOICE, year=2025) == 1
        assert increment(db_session, org.id, DocumentType.INVOICE, year=2025) == 2


class TestPeekNext:

    def test_without_counter(self, db_session, org):
        preview = peek_next(db_session, org.id, DocumentType.PURCHASE_ORDER, year=2025)

        assert preview.number == "PO-2025-0001"
        assert db_session.query(DocumentCounter).count() == 0

    def test_does_not_consume(self, db_session, org):
        allocate(db_session, org.id, DocumentType.INVOICE, year=2025)

        first = peek_next(db_session, org.id, DocumentType.INVOICE, year=2025)
        second = peek_next(db_session, org.id, DocumentType.INVOICE, year=2025)
        assert first == second
        assert first.number == "INV-2025-0002"


class TestPrefixOverride:

    def test_set_prefix_applies_to_current_counter(self, db_session, org):
        allocate(db_session, org.id, DocumentType.INVOICE, year=2025)

        preview = set_prefix(db_session, org.id, DocumentType.INVOICE, "FKT", year=2025)

        assert preview.number == "FKT-2025-0002"
        assert allocate(db_session, org.id, DocumentType.INVOICE, year=2025).number == "FKT-2025-0002"

    def test_set_prefix_without_counter_keeps_sequence_at_one(self, db_session, org):
        preview = set_prefix(db_session, org.id, DocumentType.RECEIPT, "KW", year=2025)

        assert preview.number == "KW-2025-0001"
        assert allocate(db_session, org.id, DocumentType.RECEIPT, year=2025).number == "KW-2025-0001"

    def test_override_used_for_later_years(self, db_session, org):
        set_prefix(db_session, org.id, DocumentType.INVOICE, "FKT", year=2025)
        db_session.commit()

        assert configured_prefix(db_session, org.id, DocumentType.INVOICE) == "FKT"
        assert allocate(db_session, org.id, DocumentType.INVOICE, year=2026).number == "FKT-2026-0001"

    @pytest.mark.parametrize("doc_type,prefix", [
        (DocumentType.INVOICE, "INV"),
        (DocumentType.PURCHASE_ORDER, "PO"),
        (DocumentType.RECEIPT, "KWT"),
    ])
    def test_defaults(self, db_session, org, doc_type, prefix):
        assert configured_prefix(db_session, org.id, doc_type) == prefix
