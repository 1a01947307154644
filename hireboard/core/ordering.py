"""Order-field arithmetic for drag-and-drop reordering.

Rows carry an integer ``order``. Moving one row from ``from_order`` to
``to_order`` shifts only the rows in between by one, so a move costs the
minimal set of per-row writes.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol, TypeVar


class Orderable(Protocol):
    id: str
    order: int


TOrderable = TypeVar("TOrderable", bound=Orderable)
T = TypeVar("T")


@dataclass(frozen=True)
class OrderUpdate:
    id: str
    order: int


def move_item(items: Sequence[T], from_index: int, to_index: int) -> list[T]:
    """Return a copy of ``items`` with the element at ``from_index`` moved to ``to_index``."""
    if not 0 <= from_index < len(items):
        raise IndexError(f"from_index out of range: {from_index}")
    if not 0 <= to_index < len(items):
        raise IndexError(f"to_index out of range: {to_index}")
    moved = list(items)
    moved.insert(to_index, moved.pop(from_index))
    return moved


def plan_reorder(
    rows: Sequence[Orderable],
    item_id: str,
    from_order: int,
    to_order: int,
) -> list[OrderUpdate]:
    """Compute the order writes for moving ``item_id`` from ``from_order`` to ``to_order``.

    Moving down, rows with order in (from, to] move up one slot (order - 1);
    moving up, rows with order in [to, from) move down one slot (order + 1).
    The moved row receives ``to_order``. A no-op move yields no writes.

    Args:
        rows: Sibling rows, including the moved one
        item_id: Identifier of the moved row
        from_order: Order value the row is moved from
        to_order: Order value the row is moved to

    Returns:
        Writes in row order, one per row whose order changes
    """
    if from_order == to_order:
        return []

    updates: list[OrderUpdate] = []
    for row in rows:
        if row.id == item_id:
            updates.append(OrderUpdate(row.id, to_order))
        elif from_order < to_order and from_order < row.order <= to_order:
            updates.append(OrderUpdate(row.id, row.order - 1))
        elif to_order < from_order and to_order <= row.order < from_order:
            updates.append(OrderUpdate(row.id, row.order + 1))
    return updates


def apply_order_updates(
    items: Sequence[TOrderable],
    updates: Sequence[OrderUpdate],
) -> list[TOrderable]:
    """Apply ``updates`` to copies of ``items`` and sort by order.

    Ties keep their previous relative position; the backend gives no
    stronger guarantee for duplicate order values.
    """
    new_orders = {u.id: u.order for u in updates}
    updated = [
        item.model_copy(update={"order": new_orders[item.id]}) if item.id in new_orders else item
        for item in items
    ]
    return sorted(updated, key=lambda item: item.order)
