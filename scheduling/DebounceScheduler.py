# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-10
# Updated: 2026-03-02
# Description: DebounceScheduler
# -----------------------------------------------------------------------------
from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional, Set

from utility.logging_utils import get_class_logger

RefreshAction = Callable[[], Awaitable[Any]]


class DebounceScheduler:
    """
    Coalesces bursts of change notifications into one refresh.

    Every notify_changed() cancels the pending timer (if any) and arms a new
    one `quiet_period` seconds out. When a timer fires uninterrupted the slot
    is cleared and the action runs. Runs are serialized by a lock: a running
    refresh is never cancelled, the next one waits for it to finish.
    """

    def __init__(
            self,
            action: RefreshAction,
            *,
            quiet_period: float = 10.0,
            logger: logging.Logger | None = None,
    ) -> None:
        if quiet_period < 0:
            raise ValueError("quiet_period must be >= 0")
        self.action = action
        self.quiet_period = quiet_period
        self.logger = logger or get_class_logger(self.__class__)

        self._lock = asyncio.Lock()
        self._pending: Optional[asyncio.Task] = None
        self._tasks: Set[asyncio.Task] = set()
        self._running = False

        self.refresh_count = 0
        self.last_error: Optional[BaseException] = None

    @property
    def pending(self) -> bool:
        return self._pending is not None and not self._pending.done()

    @property
    def running(self) -> bool:
        return self._running

    def notify_changed(self) -> None:
        """Must be called from the event loop thread."""
        if self.pending:
            self._pending.cancel()
            self.logger.debug("Pending refresh timer reset")

        task = asyncio.get_running_loop().create_task(self._wait_then_run())
        self._pending = task
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        self.logger.debug("Refresh scheduled in %.1fs", self.quiet_period)

    async def run_now(self) -> Any:
        """
        Run the action immediately (serialized with timer-driven runs) and
        return its result. Errors propagate to the caller.
        """
        if self.pending:
            self._pending.cancel()
            self._pending = None
        return await self._execute(raise_errors=True)

    async def wait_idle(self) -> None:
        """Wait until no timer is pending and no refresh is running."""
        while True:
            tasks = [t for t in self._tasks if not t.done()]
            if not tasks:
                return
            await asyncio.wait(tasks)

    async def aclose(self) -> None:
        """Drop the pending timer and let an in-flight refresh finish."""
        if self.pending:
            self._pending.cancel()
        self._pending = None
        await self.wait_idle()
        self.logger.info("DebounceScheduler closed (refreshes run=%d)", self.refresh_count)

    async def _wait_then_run(self) -> None:
        await asyncio.sleep(self.quiet_period)

        # Timer fired: free the slot so later notifications cannot cancel this run
        if self._pending is asyncio.current_task():
            self._pending = None

        await self._execute(raise_errors=False)

    async def _execute(self, *, raise_errors: bool) -> Any:
        async with self._lock:
            self._running = True
            self.refresh_count += 1
            run_no = self.refresh_count
            self.logger.info("Refresh #%d started", run_no)
            try:
                result = await self.action()
                self.last_error = None
                self.logger.info("Refresh #%d finished", run_no)
                return result
            except Exception as e:
                self.last_error = e
                self.logger.error("Refresh #%d failed: %s", run_no, e, exc_info=True)
                if raise_errors:
                    raise
                return None
            finally:
                self._running = False
