"""Dispatch externally originated store writes to setting handlers."""

from typing import Any, NamedTuple

from pydantic import Field

from climasync.base.component import Component
from climasync.base.constants import CONTROLLER_PORT, ROOT
from climasync.base.layout import SEPARATOR, join, split
from climasync.controllers.device_settings import DeviceSettingsHandler
from climasync.controllers.mode import PortModeHandler
from climasync.controllers.port_settings import PortSettingsHandler
from climasync.errors import SettingValidationError


class Route(NamedTuple):
    """Parsed target of a write."""

    kind: str
    device_id: str
    port_id: int
    setting: str


class ChangeRouter(Component):
    """Route store change notifications to the matching handler.

    Acknowledged writes are the engine's own and are ignored.  Paths
    are ``devices.<id>.settings.<setting>`` for the controller and
    ``devices.<id>.ports.<port>.(mode|settings).<setting>`` for ports;
    anything else is logged and dropped.
    """

    name: str = Field(default="router", min_length=1)
    mode: PortModeHandler
    port_settings: PortSettingsHandler
    device_settings: DeviceSettingsHandler

    def parse(self, path: str) -> Route:
        """Parse a node path into a Route.

        Raises:
            SettingValidationError: If the path has no handler
        """
        namespace = self.config.namespace
        if namespace and path.startswith(namespace + SEPARATOR):
            path = path[len(namespace) + 1 :]
        segments = split(path)
        if len(segments) < 4 or segments[0] != ROOT or not segments[1]:
            raise SettingValidationError(f"Not a device path: {path}")

        device_id, section = segments[1], segments[2]
        if section == "settings" and len(segments) == 4:
            return Route("device", device_id, CONTROLLER_PORT, segments[3])
        if section == "ports" and len(segments) >= 6:
            try:
                port_id = int(segments[3])
            except ValueError as e:
                raise SettingValidationError(
                    f"Invalid port in {path}"
                ) from e
            category, rest = segments[4], segments[5:]
            if category == "mode":
                return Route("mode", device_id, port_id, join(*rest))
            if category == "settings" and len(rest) == 1:
                return Route("settings", device_id, port_id, rest[0])
        raise SettingValidationError(f"No handler for {path}")

    async def on_external_write(
        self, path: str, value: Any, acknowledged: bool = False
    ) -> bool:
        """Handle one change notification; never raises.

        Returns:
            True when a handler accepted the write
        """
        if acknowledged:
            return False
        try:
            route = self.parse(path)
        except SettingValidationError as e:
            self._logger.warning("Ignoring write to %s: %s", path, e)
            return False

        handler = {
            "device": self.device_settings,
            "mode": self.mode,
            "settings": self.port_settings,
        }[route.kind]
        try:
            return await handler.submit(
                route.device_id, route.port_id, route.setting, value
            )
        except Exception:
            self._logger.exception("Handling write to %s failed", path)
            return False
