"""Interface of the remote device API the engine synchronizes with."""

from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable

Record = dict[str, Any]


@runtime_checkable
class RemoteDeviceGateway(Protocol):
    """Request/response access to the controller cloud service.

    Implementations attach the session token to every call except
    ``login`` and translate failures into the climasync error types:
    AuthError when the session was rejected, NetworkError for transport
    failures and timeouts, ApplicationError for non-success result codes.
    Write calls send the complete record as one form-encoded request.
    """

    async def login(self) -> None:
        ...

    def is_authenticated(self) -> bool:
        ...

    async def list_devices(self) -> list[Record]:
        """Return every controller with its ports and sensor readings."""
        ...

    async def get_port_mode_settings(
        self, device_id: str, port_id: int
    ) -> Record:
        ...

    async def get_device_settings(self, device_id: str, port_id: int) -> Record:
        """Return advanced settings; port 0 addresses the controller."""
        ...

    async def set_port_mode(
        self, device_id: str, port_id: int, fields: Mapping[str, Any]
    ) -> None:
        ...

    async def set_advanced_settings(
        self, device_id: str, port_id: int, fields: Mapping[str, Any]
    ) -> None:
        ...
