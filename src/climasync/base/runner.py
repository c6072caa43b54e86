"""Periodic execution of the engine's poll tick."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any

from pydantic import ConfigDict, Field

from climasync.base.entity import Entity


class PollingRunner(Entity):
    """Run an async tick at a fixed interval on the event loop.

    Key characteristics:
    - Runs as an asyncio task, not a thread
    - A failing tick is logged and the loop continues
    - Stopping cancels the sleep between ticks; a running tick is
      allowed to finish
    """

    model_config = ConfigDict(extra="allow", frozen=True)

    name: str = Field(default="poller", min_length=1)
    interval_s: float = Field(
        gt=0, description="Seconds between the start of consecutive ticks"
    )
    tick: Callable[[], Awaitable[Any]] = Field(
        description="Coroutine function executed every interval"
    )

    def __init__(self, **data: Any) -> None:
        super().__init__(**data)
        self._logger = logging.getLogger(
            f"{self.__class__.__module__}.{self.__class__.__name__}."
            f"{self.name}"
        )
        self._task: asyncio.Task | None = None
        self._stop_requested = asyncio.Event()
        self._ticks = 0

    @property
    def ticks(self) -> int:
        """Number of ticks started since creation."""
        return self._ticks

    def start(self) -> None:
        """Start polling on the running event loop.

        Raises:
            RuntimeError: If the runner is already started
        """
        if self.is_running():
            raise RuntimeError(f"Runner {self.name} already started")
        self._logger.info(
            "Starting runner %s every %.1fs", self.name, self.interval_s
        )
        self._stop_requested.clear()
        self._task = asyncio.get_running_loop().create_task(
            self._execution_loop(), name=f"Runner-{self.name}"
        )

    async def stop(self) -> None:
        """Stop polling and wait for the loop to end."""
        if self._task is None:
            return
        self._logger.info("Stopping runner %s", self.name)
        self._stop_requested.set()
        try:
            await asyncio.wait_for(self._task, timeout=5.0)
        except asyncio.TimeoutError:
            self._logger.warning(
                "Runner %s did not stop within timeout", self.name
            )
            self._task.cancel()
        self._task = None

    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def _execution_loop(self) -> None:
        try:
            while not self._stop_requested.is_set():
                try:
                    await asyncio.wait_for(
                        self._stop_requested.wait(), timeout=self.interval_s
                    )
                except asyncio.TimeoutError:
                    pass
                if self._stop_requested.is_set():
                    break
                self._ticks += 1
                try:
                    await self.tick()
                except Exception as e:
                    self._logger.error(
                        "Error in execution loop: %s", e, exc_info=True
                    )
        finally:
            self._logger.info("Runner %s execution loop ended", self.name)
