"""Windowed rendering of long fixed-height lists.

Only the rows that intersect the viewport (plus a buffer on each side) are
rendered. The slice is translated down by ``offset`` and the container keeps
``total_height`` so the scrollbar behaves as if every row were present.
"""

import math
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")

DEFAULT_BUFFER = 5


@dataclass(frozen=True)
class WindowRange:
    start: int
    end: int
    offset: float
    total_height: float

    def __len__(self) -> int:
        return max(0, self.end - self.start)

    def __contains__(self, index: object) -> bool:
        return isinstance(index, int) and self.start <= index < self.end


def compute_window(
    count: int,
    item_height: float,
    viewport_height: float,
    scroll_top: float,
    buffer: int = DEFAULT_BUFFER,
) -> WindowRange:
    """Compute the rendered index range for a scroll position.

    start = max(0, floor(S/H) - buffer)
    end   = min(N, start + ceil(V/H) + 2 * buffer)

    Args:
        count: Number of rows (N)
        item_height: Fixed row height (H)
        viewport_height: Visible height of the container (V)
        scroll_top: Current scroll offset (S); negative values clamp to 0
        buffer: Extra rows rendered above and below the viewport

    Returns:
        WindowRange with the half-open range [start, end)
    """
    if item_height <= 0:
        raise ValueError("item_height must be positive")
    if viewport_height < 0:
        raise ValueError("viewport_height must not be negative")
    if buffer < 1:
        raise ValueError("buffer must be at least 1")
    if count < 0:
        raise ValueError("count must not be negative")

    scroll_top = max(0.0, scroll_top)
    visible_count = math.ceil(viewport_height / item_height)
    start = min(count, max(0, math.floor(scroll_top / item_height) - buffer))
    end = min(count, start + visible_count + 2 * buffer)
    return WindowRange(
        start=start,
        end=end,
        offset=start * item_height,
        total_height=count * item_height,
    )


class WindowedList(Generic[T]):
    """Scroll state over a list that is re-filtered over time."""

    def __init__(
        self,
        item_height: float = 80,
        viewport_height: float = 600,
        buffer: int = DEFAULT_BUFFER,
        items: Sequence[T] = (),
    ):
        self.item_height = item_height
        self.viewport_height = viewport_height
        self.buffer = buffer
        self.items: list[T] = list(items)
        self.scroll_top = 0.0

    def set_items(self, items: Sequence[T]) -> None:
        """Swap in a newly filtered list and jump back to the top."""
        self.items = list(items)
        self.scroll_top = 0.0

    def on_scroll(self, scroll_top: float) -> WindowRange:
        self.scroll_top = max(0.0, scroll_top)
        return self.window

    @property
    def window(self) -> WindowRange:
        return compute_window(
            len(self.items), self.item_height, self.viewport_height, self.scroll_top, self.buffer
        )

    def visible_items(self) -> list[tuple[int, T]]:
        """(index, item) pairs of the rendered slice."""
        window = self.window
        return list(enumerate(self.items[window.start:window.end], start=window.start))
