"""Optimistic local state with rollback on backend failure."""

import copy
from collections.abc import Awaitable, Callable, Sequence
from typing import Any, Generic, TypeVar

from ..core.errors import HireboardError
from ..observability.logger import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


class OptimisticState(Generic[T]):
    """Displayed list that accepts speculative changes.

    ``apply`` shows the speculative list immediately, awaits the backend
    write, and restores the pre-change snapshot if the write fails. The
    failure message is kept in ``error`` for display.
    """

    def __init__(self, items: Sequence[T] = ()):
        self.items: list[T] = list(items)
        self.error: str | None = None

    def replace(self, items: Sequence[T]) -> None:
        """Install authoritative rows (after a fetch)."""
        self.items = list(items)

    async def apply(
        self,
        speculative: Sequence[T],
        commit: Callable[[], Awaitable[Any]],
        action: str = "update",
    ) -> bool:
        """Show ``speculative`` now and confirm it with ``commit``.

        Args:
            speculative: List to display while the write is in flight
            commit: Coroutine factory performing the backend write
            action: Name used in log events

        Returns:
            True when the write succeeded, False when it was rolled back
        """
        snapshot = copy.deepcopy(self.items)
        self.items = list(speculative)
        self.error = None

        try:
            await commit()
        except HireboardError as e:
            self.items = snapshot
            self.error = str(e)
            logger.warning("optimistic_update_reverted", action=action, error=str(e))
            return False

        logger.debug("optimistic_update_committed", action=action)
        return True
