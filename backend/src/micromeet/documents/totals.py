"""Line item and total computation.

Amounts are computed with Decimal and rounded half-up to two places:

    amount     = quantity * unit_price
    subtotal   = sum(amount)
    tax_amount = subtotal * tax_rate / 100
    total      = subtotal + tax_amount

Line items are stored in the document's JSON column as plain numbers.
"""

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, Iterable, List

CENT = Decimal("0.01")


def to_decimal(value) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def round_money(value) -> Decimal:
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class Totals:
    subtotal: Decimal
    tax_amount: Decimal
    total: Decimal


def normalize_items(items: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Recompute each item's amount; client-sent amounts are ignored."""
    normalized = []
    for item in items:
        quantity = to_decimal(item["quantity"])
        unit_price = to_decimal(item["unit_price"])
        normalized.append({
            "description": item["description"],
            "quantity": float(quantity),
            "unit_price": float(unit_price),
            "amount": float(round_money(quantity * unit_price)),
        })
    return normalized


def compute_totals(items: Iterable[Dict[str, Any]], tax_rate) -> Totals:
    subtotal = round_money(sum((to_decimal(item["amount"]) for item in items), Decimal("0")))
    tax_amount = round_money(subtotal * to_decimal(tax_rate) / Decimal(100))
    return Totals(subtotal=subtotal, tax_amount=tax_amount, total=subtotal + tax_amount)
