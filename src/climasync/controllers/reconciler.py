"""Mirror remote snapshots into the state tree as acknowledged values."""

from collections.abc import Mapping
from typing import Any

from pydantic import Field

from climasync.base.component import Component
from climasync.base.constants import CONTROLLER_PORT
from climasync.base.device import Device, Port
from climasync.base.layout import device_path, join, port_path
from climasync.base.settings import AdvancedSettings, ModeSettings


class Reconciler(Component):
    """Write decoded device, port and settings records into the tree.

    Every write is acknowledged.  None values are skipped so a field the
    remote side did not report never replaces a known value, and a
    failing node write is logged without stopping its siblings.
    """

    name: str = Field(default="reconciler", min_length=1)

    async def _write(self, path: str, value: Any) -> bool:
        try:
            return await self.writer.confirm(path, value)
        except Exception:
            self._logger.exception("Could not write %s", path)
            return False

    async def _write_all(self, base: str, values: Mapping[str, Any]) -> int:
        written = 0
        for relative, value in values.items():
            if await self._write(join(base, relative), value):
                written += 1
        return written

    async def _reconcile_on_speed(
        self, path: str, speed: int | None, is_on: bool, configured: bool
    ) -> None:
        """Write an on-speed unless it is the transient zero of an On port.

        Some controllers report a speed of 0 for a port that is On; the
        last known non-zero on-speed is kept then, and the default is
        used when none is known.  The live output of a port that is not
        On says nothing about its on-speed and is ignored.
        """
        if speed is None:
            return
        if is_on and speed == 0:
            current = await self.writer.current(path)
            if current:
                self._logger.debug(
                    "Keeping %s = %r, port reports On at speed 0",
                    path,
                    current,
                )
                return
            speed = self.config.default_on_speed
        elif not is_on and not configured:
            return
        await self._write(path, speed)

    async def reconcile_device(
        self, device_id: str, snapshot: Mapping[str, Any] | Device
    ) -> Device:
        """Write device info and sensor readings.

        Args:
            device_id: Remote device identifier
            snapshot: Device list entry, or an already decoded Device

        Returns:
            The decoded device
        """
        device = (
            snapshot
            if isinstance(snapshot, Device)
            else Device.from_snapshot(snapshot)
        )
        base = device_path(device_id)
        info = {
            "info.name": device.name,
            "info.online": device.online,
            "info.mac": device.mac,
            "info.firmware": device.firmware,
            "info.hardware": device.hardware,
            "info.deviceType": device.device_type,
            "info.deviceTypeDescription": device.description,
            "sensors.temperature": device.temperature,
            "sensors.humidity": device.humidity,
            "sensors.vpd": device.vpd,
        }
        written = await self._write_all(base, info)
        self._logger.debug("Reconciled device %s (%d nodes)", device_id, written)
        return device

    async def reconcile_port(
        self,
        device_id: str,
        port_id: int,
        snapshot: Mapping[str, Any] | Port,
    ) -> Port:
        """Write port info and the mode fields carried by the device list."""
        port = (
            snapshot
            if isinstance(snapshot, Port)
            else Port.from_snapshot(device_id, {"port": port_id, **snapshot})
        )
        base = port_path(device_id, port_id)
        values: dict[str, Any] = {
            "info.name": port.name,
            "info.online": port.online,
            "info.power": port.speed,
            "info.state": port.is_on,
            "info.remainingTime": port.remaining_time,
        }
        if port.remaining_time is not None:
            values["info.nextStateChange"] = port.next_state_change() or ""
        if port.mode_type is not None:
            values["mode.active"] = port.mode
            values["mode.offSpeed"] = port.off_speed
        await self._write_all(base, values)

        if port.mode_type is not None:
            await self._reconcile_on_speed(
                join(base, "mode.onSpeed"),
                port.speed,
                is_on=port.mode_is_on,
                configured=False,
            )
        return port

    async def reconcile_mode_settings(
        self, device_id: str, port_id: int, record: Mapping[str, Any]
    ) -> ModeSettings:
        """Write a port's mode-settings record into ``mode.*``."""
        settings = ModeSettings.from_record(record)
        base = port_path(device_id, port_id, "mode")
        await self._write_all(base, settings.nodes())
        await self._reconcile_on_speed(
            join(base, "onSpeed"),
            settings.on_speed,
            is_on=settings.is_on,
            configured=True,
        )
        return settings

    async def reconcile_advanced_settings(
        self, device_id: str, port_id: int, record: Mapping[str, Any]
    ) -> AdvancedSettings:
        """Write an advanced-settings record.

        Port 0 addresses the controller and fills ``devices.<id>.settings``;
        other ports fill their own ``settings`` channel.  Records without
        a unit flag fall back to the controller's known unit.
        """
        unit = await self.writer.current(
            device_path(device_id, "settings.temperatureUnit")
        )
        unit_flag = None if unit is None else int(unit == "C")
        settings = AdvancedSettings.from_record(record, unit_flag)
        if port_id == CONTROLLER_PORT:
            await self._write_all(
                device_path(device_id, "settings"),
                settings.controller_nodes(),
            )
        else:
            await self._write_all(
                port_path(device_id, port_id, "settings"),
                settings.port_nodes(),
            )
        return settings
