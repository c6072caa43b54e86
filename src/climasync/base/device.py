"""Device and port snapshots decoded from the remote device list."""

import re
from collections.abc import Mapping
from datetime import datetime, timedelta, timezone
from typing import Any

from pydantic import Field

from climasync.base.constants import (
    DEVICE_MODELS,
    MODE_ON,
    DeviceKey,
    PortKey,
)
from climasync.base.entity import Entity
from climasync.base.transforms import decode_flag, decode_mode, scale_sensor

_DIGITS = re.compile(r"\d+")


def _parse_device_type(raw: Any) -> int:
    """Extract the numeric model from ``devType`` (number or string)."""
    if isinstance(raw, bool):
        return 0
    if isinstance(raw, int):
        return raw
    if isinstance(raw, str):
        match = _DIGITS.search(raw)
        if match:
            return int(match.group(0))
    return 0


class Port(Entity):
    """A controllable output channel of a controller.

    Ports refer back to their controller through ``device_id`` and do
    not own it.  ``speed`` is the live output level (``speak``) and
    ``mode_type`` the one-based remote mode, both optional because the
    device list does not always carry them.
    """

    device_id: str = Field(description="Identifier of the owning device")
    port_id: int = Field(description="Port number within the device")
    online: bool | None = None
    speed: int | None = Field(default=None, description="Live output level")
    is_on: bool | None = Field(
        default=None, description="Whether the load is currently powered"
    )
    remaining_time: int | None = Field(
        default=None, description="Seconds until the next transition"
    )
    mode_type: int | None = Field(
        default=None, description="One-based remote mode (atType)"
    )
    on_speed: int | None = None
    off_speed: int | None = None

    @classmethod
    def from_snapshot(
        cls, device_id: str, snapshot: Mapping[str, Any]
    ) -> "Port":
        port_id = int(snapshot[PortKey.PORT])
        mode_type = snapshot.get(PortKey.AT_TYPE) or snapshot.get(
            PortKey.CUR_MODE
        )
        return cls(
            unique_id=f"{device_id}.{port_id}",
            name=snapshot.get(PortKey.NAME) or f"Port {port_id}",
            device_id=device_id,
            port_id=port_id,
            online=decode_flag(snapshot.get(PortKey.ONLINE)),
            speed=snapshot.get(PortKey.SPEAK),
            is_on=decode_flag(snapshot.get(PortKey.STATE)),
            remaining_time=snapshot.get(PortKey.REMAINING_TIME),
            mode_type=mode_type if isinstance(mode_type, int) else None,
            on_speed=snapshot.get("onSpead"),
            off_speed=snapshot.get("offSpead"),
        )

    @property
    def mode(self) -> str | None:
        return decode_mode(self.mode_type)

    @property
    def mode_is_on(self) -> bool:
        return self.mode_type == MODE_ON

    def next_state_change(self, now: datetime | None = None) -> str | None:
        """ISO timestamp of the next transition, None when not scheduled."""
        if not self.remaining_time or self.remaining_time <= 0:
            return None
        now = now or datetime.now(timezone.utc)
        return (now + timedelta(seconds=self.remaining_time)).isoformat()


class Device(Entity):
    """A controller as reported by the device list.

    Sensor readings arrive as hundredths and are stored scaled.
    """

    device_id: str = Field(description="Remote device identifier")
    mac: str | None = None
    firmware: str | None = None
    hardware: str | None = None
    device_type: int = Field(default=0, description="Numeric model id")
    online: bool | None = None
    temperature: float | None = None
    humidity: float | None = None
    vpd: float | None = None
    ports: list[Port] = Field(default_factory=list)

    @classmethod
    def from_snapshot(cls, snapshot: Mapping[str, Any]) -> "Device":
        device_id = str(snapshot[DeviceKey.DEVICE_ID])
        info = snapshot.get(DeviceKey.DEVICE_INFO) or {}
        # Versions and readings sit either in deviceInfo or at top level.
        merged = {**snapshot, **info}
        ports = [
            Port.from_snapshot(device_id, port)
            for port in info.get(DeviceKey.PORTS) or []
            if port.get(PortKey.PORT) is not None
        ]
        return cls(
            unique_id=device_id,
            name=snapshot.get(DeviceKey.DEVICE_NAME) or device_id,
            device_id=device_id,
            mac=snapshot.get(DeviceKey.MAC_ADDR),
            firmware=merged.get(DeviceKey.SW_VERSION),
            hardware=merged.get(DeviceKey.HW_VERSION),
            device_type=_parse_device_type(snapshot.get(DeviceKey.DEVICE_TYPE)),
            online=decode_flag(snapshot.get(DeviceKey.ONLINE)),
            temperature=scale_sensor(merged.get(DeviceKey.TEMPERATURE)),
            humidity=scale_sensor(merged.get(DeviceKey.HUMIDITY)),
            vpd=scale_sensor(merged.get(DeviceKey.VPD)),
            ports=ports,
        )

    @property
    def description(self) -> str | None:
        """Marketing name of known controller models."""
        return DEVICE_MODELS.get(self.device_type)

    def get_port(self, port_id: int) -> Port | None:
        for port in self.ports:
            if port.port_id == port_id:
                return port
        return None
