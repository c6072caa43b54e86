"""Keyed delayed execution for write coalescing and refresh throttling.

All bookkeeping happens on the running event loop, so the pending and
processing maps need no locking.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Hashable

Task = Callable[[], Awaitable[None]]


class KeyedScheduler:
    """Run at most one delayed task per key.

    Scheduling a key that already has a waiting task cancels that task
    and replaces it, so only the most recent request runs.  While a
    key's task is executing, new requests for the key are dropped, not
    queued.  A later request never cancels a task that has started.
    """

    def __init__(self, name: str = "scheduler") -> None:
        self.name = name
        self._logger = logging.getLogger(
            f"{self.__class__.__module__}.{self.__class__.__name__}."
            f"{name}"
        )
        self._pending: dict[Hashable, asyncio.Task] = {}
        self._processing: set[Hashable] = set()
        self._tasks: set[asyncio.Task] = set()

    def schedule(self, key: Hashable, delay: float, task: Task) -> bool:
        """Schedule ``task`` for ``key`` after ``delay`` seconds.

        Returns:
            False when the request was dropped because the key is busy.
        """
        if key in self._processing:
            self._logger.debug("Dropping %s: already in progress", key)
            return False

        previous = self._pending.pop(key, None)
        if previous is not None:
            previous.cancel()
            self._logger.debug("Replaced pending task for %s", key)

        runner = asyncio.get_running_loop().create_task(
            self._run(key, delay, task)
        )
        self._pending[key] = runner
        self._tasks.add(runner)
        runner.add_done_callback(self._tasks.discard)
        return True

    async def _run(self, key: Hashable, delay: float, task: Task) -> None:
        await asyncio.sleep(delay)
        if self._pending.get(key) is asyncio.current_task():
            del self._pending[key]
        self._processing.add(key)
        try:
            await task()
        except Exception:
            self._logger.exception("Scheduled task for %s failed", key)
        finally:
            self._processing.discard(key)

    def is_pending(self, key: Hashable) -> bool:
        return key in self._pending

    def is_processing(self, key: Hashable) -> bool:
        return key in self._processing

    def is_busy(self, key: Hashable) -> bool:
        return key in self._pending or key in self._processing

    def cancel_all(self) -> None:
        """Cancel every task still waiting out its delay."""
        for runner in self._pending.values():
            runner.cancel()
        self._pending.clear()

    async def shutdown(self) -> None:
        """Cancel waiting and executing tasks and wait for them to end."""
        self.cancel_all()
        for runner in list(self._tasks):
            runner.cancel()
        await self.wait_idle()

    async def wait_idle(self) -> None:
        """Wait until no task is waiting or executing."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)


class WriteCoalescer:
    """Collapse rapid writes to the same logical target into one."""

    def __init__(self, delay: float, name: str = "writes") -> None:
        self.delay = delay
        self.scheduler = KeyedScheduler(name)

    def submit(self, key: Hashable, task: Task) -> bool:
        return self.scheduler.schedule(key, self.delay, task)

    def cancel_all(self) -> None:
        self.scheduler.cancel_all()

    async def shutdown(self) -> None:
        await self.scheduler.shutdown()

    async def wait_idle(self) -> None:
        await self.scheduler.wait_idle()


class RefreshThrottle:
    """Rate-limit full refreshes requested after writes.

    An accepted request sets the pending flag, waits ``settle`` seconds,
    refreshes, then keeps the flag set for ``cooldown`` seconds whatever
    the refresh outcome.  Requests arriving while the flag is set are
    no-ops.  Periodic polling goes through ``run_now`` and shares the
    same flag, so the two can never overlap.
    """

    KEY = "refresh"

    def __init__(
        self,
        refresh: Task,
        settle: float,
        cooldown: float,
        name: str = "refresh",
    ) -> None:
        self.refresh = refresh
        self.settle = settle
        self.cooldown = cooldown
        self.scheduler = KeyedScheduler(name)
        self._logger = logging.getLogger(
            f"{self.__class__.__module__}.{self.__class__.__name__}."
            f"{name}"
        )
        self._pending = False

    @property
    def pending(self) -> bool:
        return self._pending

    def request(self) -> bool:
        """Request a throttled refresh; return False when absorbed."""
        if self._pending:
            self._logger.debug("Refresh already pending, request absorbed")
            return False
        self._pending = True
        return self.scheduler.schedule(self.KEY, self.settle, self._run)

    async def _run(self) -> None:
        try:
            await self.refresh()
        except Exception:
            self._logger.exception("Throttled refresh failed")
        finally:
            try:
                await asyncio.sleep(self.cooldown)
            finally:
                self._pending = False

    async def run_now(self) -> bool:
        """Refresh immediately unless a refresh is already pending."""
        if self._pending:
            self._logger.debug("Refresh pending, skipping immediate refresh")
            return False
        self._pending = True
        try:
            await self.refresh()
        finally:
            self._pending = False
        return True

    async def shutdown(self) -> None:
        await self.scheduler.shutdown()
        self._pending = False

    async def wait_idle(self) -> None:
        await self.scheduler.wait_idle()
