"""Handler for writes below ``devices.<id>.ports.<port>.mode``."""

from enum import Enum
from functools import partial
from typing import Any, ClassVar

from pydantic import Field

from climasync.base.constants import (
    MODE_OFF,
    MODE_ON,
    MODE_OPTIONS,
    MODE_RECORD_DEFAULTS,
    MODE_RECORD_DROP,
    SCHEDULE_DISABLED,
    SCHEDULE_END_OF_DAY,
    SCHEDULE_MIDNIGHT,
    SETTINGS_MODE_OPTIONS,
    ModeKey,
)
from climasync.base.layout import port_path
from climasync.base.transforms import (
    encode_option,
    encode_vpd,
    minutes_to_seconds,
    parse_time,
    to_bool,
    to_float,
    to_int,
    to_option,
    to_time,
)
from climasync.controllers.base import (
    Encoder,
    SettingHandler,
    SettingRule,
    WriteRequest,
    celsius_pair,
    flag,
    raw,
)
from climasync.environments.gateway import Record
from climasync.errors import SettingValidationError


class ModeSetting(str, Enum):
    """Writable nodes of a port's ``mode`` channel and its sub-channels."""

    ACTIVE = "active"
    ON_SPEED = "onSpeed"
    OFF_SPEED = "offSpeed"
    TIMER_TO_ON = "timer.toOnMinutes"
    TIMER_TO_OFF = "timer.toOffMinutes"
    CYCLE_ON = "cycle.onMinutes"
    CYCLE_OFF = "cycle.offMinutes"
    SCHEDULE_START_ENABLED = "schedule.startEnabled"
    SCHEDULE_START_TIME = "schedule.startTime"
    SCHEDULE_END_ENABLED = "schedule.endEnabled"
    SCHEDULE_END_TIME = "schedule.endTime"
    AUTO_SETTINGS_MODE = "auto.settingsMode"
    AUTO_TEMP_HIGH_ENABLED = "auto.tempHighEnabled"
    AUTO_TEMP_HIGH_TRIGGER = "auto.tempHighTrigger"
    AUTO_TEMP_LOW_ENABLED = "auto.tempLowEnabled"
    AUTO_TEMP_LOW_TRIGGER = "auto.tempLowTrigger"
    AUTO_HUMIDITY_HIGH_ENABLED = "auto.humidityHighEnabled"
    AUTO_HUMIDITY_HIGH_TRIGGER = "auto.humidityHighTrigger"
    AUTO_HUMIDITY_LOW_ENABLED = "auto.humidityLowEnabled"
    AUTO_HUMIDITY_LOW_TRIGGER = "auto.humidityLowTrigger"
    AUTO_TARGET_TEMP_ENABLED = "auto.targetTempEnabled"
    AUTO_TARGET_TEMP = "auto.targetTemp"
    AUTO_TARGET_HUMIDITY_ENABLED = "auto.targetHumidityEnabled"
    AUTO_TARGET_HUMIDITY = "auto.targetHumidity"
    VPD_SETTINGS_MODE = "vpd.settingsMode"
    VPD_HIGH_ENABLED = "vpd.highEnabled"
    VPD_HIGH_TRIGGER = "vpd.highTrigger"
    VPD_LOW_ENABLED = "vpd.lowEnabled"
    VPD_LOW_TRIGGER = "vpd.lowTrigger"
    VPD_TARGET_ENABLED = "vpd.targetEnabled"
    VPD_TARGET = "vpd.target"


def coerce_mode(value: Any) -> str:
    """Accept a mode name or a boolean-like on/off value."""
    try:
        on = to_bool(value)
    except SettingValidationError:
        return to_option(value, MODE_OPTIONS)
    return MODE_OPTIONS[(MODE_ON if on else MODE_OFF) - 1]


def prepare_mode_record(record: Record, device_id: str, port_id: int) -> Record:
    """Clean a fetched mode record for a full resend."""
    prepared = {
        key: value
        for key, value in record.items()
        if key not in MODE_RECORD_DROP
    }
    for key, default in MODE_RECORD_DEFAULTS.items():
        if prepared.get(key) is None:
            prepared[key] = default
    prepared = {
        key: 0 if value is None else value for key, value in prepared.items()
    }
    prepared.setdefault(ModeKey.DEV_ID, device_id)
    prepared.setdefault("port", port_id)
    try:
        prepared[ModeKey.DEV_ID] = int(prepared[ModeKey.DEV_ID])
    except (TypeError, ValueError):
        pass
    if ModeKey.MODE_SET_ID in prepared:
        prepared[ModeKey.MODE_SET_ID] = str(prepared[ModeKey.MODE_SET_ID])
    return prepared


def _minutes(key: str) -> SettingRule:
    return SettingRule(
        partial(to_int, minimum=0, maximum=1440),
        raw(key, minutes_to_seconds),
    )


def _schedule_enabled(key: str, default: int) -> Encoder:
    """Disable with the sentinel, enable with the kept or default time."""

    async def encode(
        handler: SettingHandler, request: WriteRequest, record: Record
    ) -> Record:
        if not request.value:
            return {key: SCHEDULE_DISABLED}
        current = record.get(key)
        if isinstance(current, int) and current != SCHEDULE_DISABLED:
            return {key: current}
        return {key: default}

    return encode


def _enabled(key: str) -> SettingRule:
    return SettingRule(to_bool, flag(key))


def _option(key: str, options: tuple[str, ...]) -> SettingRule:
    return SettingRule(
        partial(to_option, options=options),
        raw(key, partial(encode_option, options)),
    )


_TEMPERATURE = partial(to_int, minimum=0, maximum=90)
_HUMIDITY = partial(to_int, minimum=0, maximum=100)
_VPD = partial(to_float, minimum=0, maximum=9.9)
_SPEED = partial(to_int, minimum=0, maximum=10)


class PortModeHandler(SettingHandler):
    """Apply writes to a port's mode and its mode-specific parameters.

    The remote API only accepts complete mode records, so every write
    fetches the current record, merges the changed fields and sends the
    whole record back.  Switching the active mode always sends both
    speeds, preserving the last known values.
    """

    name: str = Field(default="mode", min_length=1)

    CATEGORY: ClassVar[str] = "mode"
    SETTINGS: ClassVar[type[Enum]] = ModeSetting

    def node_path(self, request: WriteRequest) -> str:
        return port_path(
            request.device_id, request.port_id, "mode", request.setting
        )

    async def _fetch(self, device_id: str, port_id: int) -> Record:
        return await self.session.call(
            self.gateway.get_port_mode_settings, device_id, port_id
        )

    async def _prepare(self, record: Record, request: WriteRequest) -> Record:
        return prepare_mode_record(record, request.device_id, request.port_id)

    async def _send(
        self, device_id: str, port_id: int, fields: Record
    ) -> None:
        await self.session.call(
            self.gateway.set_port_mode, device_id, port_id, fields
        )

    async def _known_speed(
        self, request: WriteRequest, node: str, fallback: Any
    ) -> int:
        current = await self.writer.current(
            port_path(request.device_id, request.port_id, "mode", node)
        )
        if isinstance(current, (int, float)) and not isinstance(current, bool):
            return int(current)
        if isinstance(fallback, int) and not isinstance(fallback, bool):
            return fallback
        return 0

    async def _active_fields(
        self, request: WriteRequest, record: Record
    ) -> Record:
        at_type = MODE_OPTIONS.index(request.value) + 1
        on_speed = await self._known_speed(
            request, "onSpeed", record.get(ModeKey.ON_SPEED)
        )
        if on_speed <= 0:
            on_speed = self.config.default_on_speed
        off_speed = await self._known_speed(
            request, "offSpeed", record.get(ModeKey.OFF_SPEED)
        )
        fields = {
            ModeKey.AT_TYPE: at_type,
            ModeKey.ON_SPEED: on_speed,
            ModeKey.OFF_SPEED: off_speed,
        }
        if at_type == MODE_ON:
            fields[ModeKey.SPEAK] = on_speed
        elif at_type == MODE_OFF:
            fields[ModeKey.SPEAK] = 0
        return fields

    async def _on_speed_fields(
        self, request: WriteRequest, record: Record
    ) -> Record:
        fields = {ModeKey.ON_SPEED: request.value}
        if record.get(ModeKey.AT_TYPE) == MODE_ON:
            fields[ModeKey.SPEAK] = request.value
        return fields

    RULES: ClassVar[dict[Enum, SettingRule]] = {
        ModeSetting.ACTIVE: SettingRule(coerce_mode, _active_fields),
        ModeSetting.ON_SPEED: SettingRule(_SPEED, _on_speed_fields),
        ModeSetting.OFF_SPEED: SettingRule(_SPEED, raw(ModeKey.OFF_SPEED)),
        ModeSetting.TIMER_TO_ON: _minutes(ModeKey.TIMER_TO_ON),
        ModeSetting.TIMER_TO_OFF: _minutes(ModeKey.TIMER_TO_OFF),
        ModeSetting.CYCLE_ON: _minutes(ModeKey.CYCLE_ON),
        ModeSetting.CYCLE_OFF: _minutes(ModeKey.CYCLE_OFF),
        ModeSetting.SCHEDULE_START_ENABLED: SettingRule(
            to_bool,
            _schedule_enabled(ModeKey.SCHEDULED_START_TIME, SCHEDULE_MIDNIGHT),
        ),
        ModeSetting.SCHEDULE_START_TIME: SettingRule(
            to_time, raw(ModeKey.SCHEDULED_START_TIME, parse_time)
        ),
        ModeSetting.SCHEDULE_END_ENABLED: SettingRule(
            to_bool,
            _schedule_enabled(ModeKey.SCHEDULED_END_TIME, SCHEDULE_END_OF_DAY),
        ),
        ModeSetting.SCHEDULE_END_TIME: SettingRule(
            to_time, raw(ModeKey.SCHEDULED_END_TIME, parse_time)
        ),
        ModeSetting.AUTO_SETTINGS_MODE: _option(
            ModeKey.AUTO_SETTINGS_MODE, SETTINGS_MODE_OPTIONS
        ),
        ModeSetting.AUTO_TEMP_HIGH_ENABLED: _enabled(
            ModeKey.AUTO_TEMP_HIGH_ENABLED
        ),
        ModeSetting.AUTO_TEMP_HIGH_TRIGGER: SettingRule(
            _TEMPERATURE,
            celsius_pair(
                ModeKey.AUTO_TEMP_HIGH_TRIGGER, ModeKey.AUTO_TEMP_HIGH_TRIGGER_F
            ),
        ),
        ModeSetting.AUTO_TEMP_LOW_ENABLED: _enabled(
            ModeKey.AUTO_TEMP_LOW_ENABLED
        ),
        ModeSetting.AUTO_TEMP_LOW_TRIGGER: SettingRule(
            _TEMPERATURE,
            celsius_pair(
                ModeKey.AUTO_TEMP_LOW_TRIGGER, ModeKey.AUTO_TEMP_LOW_TRIGGER_F
            ),
        ),
        ModeSetting.AUTO_HUMIDITY_HIGH_ENABLED: _enabled(
            ModeKey.AUTO_HUMIDITY_HIGH_ENABLED
        ),
        ModeSetting.AUTO_HUMIDITY_HIGH_TRIGGER: SettingRule(
            _HUMIDITY, raw(ModeKey.AUTO_HUMIDITY_HIGH_TRIGGER)
        ),
        ModeSetting.AUTO_HUMIDITY_LOW_ENABLED: _enabled(
            ModeKey.AUTO_HUMIDITY_LOW_ENABLED
        ),
        ModeSetting.AUTO_HUMIDITY_LOW_TRIGGER: SettingRule(
            _HUMIDITY, raw(ModeKey.AUTO_HUMIDITY_LOW_TRIGGER)
        ),
        ModeSetting.AUTO_TARGET_TEMP_ENABLED: _enabled(
            ModeKey.AUTO_TARGET_TEMP_ENABLED
        ),
        ModeSetting.AUTO_TARGET_TEMP: SettingRule(
            _TEMPERATURE,
            celsius_pair(ModeKey.AUTO_TARGET_TEMP, ModeKey.AUTO_TARGET_TEMP_F),
        ),
        ModeSetting.AUTO_TARGET_HUMIDITY_ENABLED: _enabled(
            ModeKey.AUTO_TARGET_HUMIDITY_ENABLED
        ),
        ModeSetting.AUTO_TARGET_HUMIDITY: SettingRule(
            _HUMIDITY, raw(ModeKey.AUTO_TARGET_HUMIDITY)
        ),
        ModeSetting.VPD_SETTINGS_MODE: _option(
            ModeKey.VPD_SETTINGS_MODE, SETTINGS_MODE_OPTIONS
        ),
        ModeSetting.VPD_HIGH_ENABLED: _enabled(ModeKey.VPD_HIGH_ENABLED),
        ModeSetting.VPD_HIGH_TRIGGER: SettingRule(
            _VPD, raw(ModeKey.VPD_HIGH_TRIGGER, encode_vpd)
        ),
        ModeSetting.VPD_LOW_ENABLED: _enabled(ModeKey.VPD_LOW_ENABLED),
        ModeSetting.VPD_LOW_TRIGGER: SettingRule(
            _VPD, raw(ModeKey.VPD_LOW_TRIGGER, encode_vpd)
        ),
        ModeSetting.VPD_TARGET_ENABLED: _enabled(ModeKey.VPD_TARGET_ENABLED),
        ModeSetting.VPD_TARGET: SettingRule(
            _VPD, raw(ModeKey.VPD_TARGET, encode_vpd)
        ),
    }
