"""
Widget layout helpers shared by the API and viah.client.
"""

from collections.abc import Sequence
from typing import TypeVar

T = TypeVar("T")

DEFAULT_WIDGET_TYPES = (
    "budget_overview",
    "alerts",
    "spending_by_category",
    "spending_trend",
    "recent_expenses",
    "upcoming_payments",
)


def move_item(items: Sequence[T], from_index: int, to_index: int) -> list[T]:
    """Return a copy with the item at from_index moved to to_index."""
    result = list(items)
    if from_index == to_index:
        return result
    if not (0 <= from_index < len(result)) or not (0 <= to_index < len(result)):
        raise IndexError(f"Cannot move item {from_index} -> {to_index} in list of {len(result)}")
    result.insert(to_index, result.pop(from_index))
    return result


def merge_order(current_ids: Sequence[str], requested_ids: Sequence[str]) -> list[str]:
    """
    Requested ids first, in request order, then every other current id in
    its existing relative order.
    """
    requested = list(dict.fromkeys(requested_ids))
    remaining = [widget_id for widget_id in current_ids if widget_id not in set(requested)]
    return requested + remaining
