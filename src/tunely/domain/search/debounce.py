"""
Latest-wins debouncing for search-as-you-type.

Each submission takes a new generation number. Work runs only if no newer
submission arrived during the quiet window, and its result is applied only
if it is still the newest once the work finishes.
"""

import asyncio
from typing import Awaitable, Callable, TypeVar

from loguru import logger

T = TypeVar("T")


class Debouncer:
    """Suppress redundant calls while input is still changing."""

    def __init__(self, window_sec: float = 0.3):
        self.window_sec = window_sec
        self._generation = 0

    @property
    def generation(self) -> int:
        return self._generation

    def cancel(self) -> None:
        """Invalidate anything pending without submitting new work."""
        self._generation += 1

    async def submit(
        self,
        work: Callable[[], Awaitable[T]],
        on_result: Callable[[T], Awaitable[None]],
    ) -> bool:
        """Run ``work`` after the quiet window and hand its result to ``on_result``.

        Returns:
            True if the result was applied, False if superseded
        """
        self._generation += 1
        generation = self._generation

        await asyncio.sleep(self.window_sec)
        if generation != self._generation:
            return False

        result = await work()
        if generation != self._generation:
            logger.debug(f"Discarding stale result for generation {generation}")
            return False

        await on_result(result)
        return True
