"""Cancellable repeating timer on the running asyncio loop."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Callable

_logger = logging.getLogger(__name__)


class RepeatingTimer:
    """Call *callback* every *interval* seconds until cancelled.

    The first call happens one interval after :meth:`start`. Once
    :meth:`cancel` has returned, the callback is never invoked again.
    """

    def __init__(self, interval: float, callback: Callable[[], None], *, name: str = "repeating-timer") -> None:
        if interval <= 0:
            raise ValueError(f"interval must be positive, got {interval}")
        self._interval = interval
        self._callback = callback
        self._name = name
        self._task: asyncio.Task[None] | None = None
        self._cancelled = False

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done() and not self._cancelled

    def start(self) -> None:
        if self._task is not None:
            raise RuntimeError(f"{self._name} already started")
        self._task = asyncio.get_running_loop().create_task(self._run(), name=self._name)

    async def _run(self) -> None:
        while not self._cancelled:
            await asyncio.sleep(self._interval)
            if self._cancelled:
                return
            try:
                self._callback()
            except Exception:
                _logger.warning("%s callback failed", self._name, exc_info=True)

    def cancel(self) -> None:
        self._cancelled = True
        if self._task is not None and not self._task.done():
            self._task.cancel()

    async def wait_closed(self) -> None:
        """Wait until the underlying task has finished after :meth:`cancel`."""
        if self._task is None:
            return
        with contextlib.suppress(asyncio.CancelledError):
            await self._task
