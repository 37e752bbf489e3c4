"""Turns validated line items and a tax rate into stored column values."""

from typing import Any, Dict, Iterable, Optional

from .totals import compute_totals, normalize_items


def priced_values(items: Iterable[Any], tax_rate) -> Dict[str, Any]:
    """Column values for items/subtotal/tax_amount/total.

    Args:
        items: LineItemIn models or plain dicts
        tax_rate: Percentage, e.g. 11 for 11%
    """
    normalized = normalize_items(
        item.model_dump() if hasattr(item, "model_dump") else item for item in items
    )
    totals = compute_totals(normalized, tax_rate)
    return {
        "items": normalized,
        "tax_rate": tax_rate,
        "subtotal": totals.subtotal,
        "tax_amount": totals.tax_amount,
        "total": totals.total,
    }


def repriced_changes(row, changes: Dict[str, Any]) -> Dict[str, Any]:
    """Merge a partial update, recomputing totals when items or tax change."""
    if "items" not in changes and "tax_rate" not in changes:
        return changes

    items: Optional[Iterable[Any]] = changes.get("items")
    if items is None:
        items = row.items or []
    tax_rate = changes.get("tax_rate")
    if tax_rate is None:
        tax_rate = row.tax_rate

    merged = dict(changes)
    merged.update(priced_values(items, tax_rate))
    return merged
