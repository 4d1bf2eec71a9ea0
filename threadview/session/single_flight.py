"""Single-flight execution for refresh cycles.

At most one run is in flight and at most one is pending. Triggers that
arrive while a run is in flight all join the pending run, which starts as
soon as the current one finishes. Runs therefore apply their results in
the order they started.
"""

import asyncio
from collections.abc import Awaitable, Callable
from typing import Generic, TypeVar

from threadview.observability.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


class SingleFlight(Generic[T]):
    """Serializes and coalesces calls to an async operation."""

    def __init__(self, operation: Callable[[], Awaitable[T]], name: str = "operation") -> None:
        self._operation = operation
        self._name = name
        self._current: asyncio.Future[T] | None = None
        self._pending: asyncio.Future[T] | None = None
        self._driver: asyncio.Task[None] | None = None

    @property
    def in_flight(self) -> bool:
        return self._current is not None

    @property
    def pending(self) -> bool:
        return self._pending is not None

    async def __call__(self) -> T:
        """Run the operation, or join the next run if one is in flight."""
        loop = asyncio.get_running_loop()
        if self._current is None:
            future: asyncio.Future[T] = loop.create_future()
            self._current = future
            self._driver = loop.create_task(self._drive())
        else:
            if self._pending is None:
                self._pending = loop.create_future()
                logger.debug("single_flight_queued", name=self._name)
            else:
                logger.debug("single_flight_coalesced", name=self._name)
            future = self._pending
        return await asyncio.shield(future)

    async def _drive(self) -> None:
        while self._current is not None:
            future = self._current
            try:
                result = await self._operation()
            except asyncio.CancelledError:
                future.cancel()
                if self._pending is not None:
                    self._pending.cancel()
                self._current = self._pending = None
                raise
            except Exception as exc:
                future.set_exception(exc)
            else:
                future.set_result(result)
            self._current, self._pending = self._pending, None
