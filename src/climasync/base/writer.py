"""Acknowledged and optimistic writes into the state store."""

import logging
from typing import Any

from climasync.base.state import StateStore


class StateWriter:
    """Single write path from the engine into the store.

    ``confirm`` records values known to match the remote side and
    remembers them so that an optimistic value can later be reverted.
    None is never written, so an unknown raw field cannot clobber a
    previously known value.
    """

    def __init__(self, store: StateStore, name: str = "writer") -> None:
        self.store = store
        self._logger = logging.getLogger(
            f"{self.__class__.__module__}.{self.__class__.__name__}."
            f"{name}"
        )
        self._confirmed: dict[str, Any] = {}

    async def confirm(self, path: str, value: Any) -> bool:
        """Write an acknowledged value; return False when skipped."""
        if value is None:
            return False
        await self.store.write(path, value, True)
        self._confirmed[path] = value
        self._logger.debug("Confirmed %s = %r", path, value)
        return True

    async def propose(self, path: str, value: Any) -> None:
        """Write an optimistic value awaiting remote confirmation."""
        await self.store.write(path, value, False)
        self._logger.debug("Proposed %s = %r", path, value)

    async def current(self, path: str) -> Any:
        """Current value of a node, acknowledged or not."""
        node = await self.store.read(path)
        return None if node is None else node.value

    def last_confirmed(self, path: str) -> Any:
        return self._confirmed.get(path)

    async def revert(self, path: str) -> bool:
        """Restore the last acknowledged value of a node, if any."""
        if path not in self._confirmed:
            return False
        await self.store.write(path, self._confirmed[path], True)
        self._logger.info("Reverted %s to %r", path, self._confirmed[path])
        return True
