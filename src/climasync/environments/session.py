"""Session handling around every gateway call."""

import logging
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from climasync.base.constants import CONNECTION_PATH
from climasync.base.writer import StateWriter
from climasync.environments.gateway import RemoteDeviceGateway
from climasync.errors import AuthError, GatewayError, NetworkError, SyncError

T = TypeVar("T")


class SessionGuard:
    """Wrap gateway calls with login and a single re-login retry.

    Every call first makes sure a session exists.  When a call is
    rejected with AuthError the guard logs in again and re-issues the
    call exactly once; a second failure reaches the caller.  Login
    outcomes and network failures drive the shared connection
    indicator, mirrored to the ``info.connection`` node.
    """

    def __init__(
        self,
        gateway: RemoteDeviceGateway,
        writer: StateWriter,
        name: str = "session",
    ) -> None:
        self.gateway = gateway
        self.writer = writer
        self._logger = logging.getLogger(
            f"{self.__class__.__module__}.{self.__class__.__name__}."
            f"{name}"
        )
        self._connected = False

    @property
    def connected(self) -> bool:
        return self._connected

    async def _set_connected(self, connected: bool) -> None:
        if connected != self._connected:
            self._logger.info(
                "Connection %s", "established" if connected else "lost"
            )
        self._connected = connected
        try:
            await self.writer.confirm(CONNECTION_PATH, connected)
        except SyncError:
            self._logger.exception("Could not update %s", CONNECTION_PATH)

    async def login(self) -> None:
        """Log in and update the connection indicator.

        Raises:
            GatewayError: If the login itself failed
        """
        try:
            await self.gateway.login()
        except GatewayError:
            await self._set_connected(False)
            raise
        self._logger.info("Logged in to remote service")
        await self._set_connected(True)

    async def ensure_session(self) -> bool:
        """Log in if needed; return the connection state without raising."""
        if self.gateway.is_authenticated() and self._connected:
            return True
        try:
            await self.login()
        except GatewayError as e:
            self._logger.warning("Login failed: %s", e)
        return self._connected

    async def call(
        self, operation: Callable[..., Awaitable[T]], *args: Any
    ) -> T:
        """Run a gateway operation under session protection."""
        if not self.gateway.is_authenticated():
            await self.login()
        try:
            return await self._invoke(operation, *args)
        except AuthError as e:
            self._logger.warning(
                "Session rejected during %s (%s), logging in again",
                getattr(operation, "__name__", operation),
                e,
            )
        await self.login()
        return await self._invoke(operation, *args)

    async def _invoke(
        self, operation: Callable[..., Awaitable[T]], *args: Any
    ) -> T:
        try:
            return await operation(*args)
        except NetworkError:
            await self._set_connected(False)
            raise
