"""Decoded port mode settings and advanced settings records."""

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict

from climasync.base.constants import (
    DEVICE_LOAD_TYPE_OPTIONS,
    DYNAMIC_RESPONSE_OPTIONS,
    MODE_ON,
    OUTSIDE_CLIMATE_OPTIONS,
    SETTINGS_MODE_OPTIONS,
    AdvancedKey,
    ModeKey,
)
from climasync.base.transforms import (
    decode_flag,
    decode_mode,
    decode_option,
    decode_schedule,
    is_celsius,
    is_number,
    scale_vpd,
    seconds_to_minutes,
)


def _number(record: Mapping[str, Any], key: str) -> Any:
    value = record.get(key)
    return value if is_number(value) else None


class _Record(BaseModel):
    model_config = ConfigDict(frozen=True)

    def nodes(self) -> dict[str, Any]:
        """Node values keyed by their path relative to the category."""
        return {
            _NODE_NAMES.get(name, name): value
            for name, value in self
            if not isinstance(value, _Record)
        }


class TimerSettings(_Record):
    to_on_minutes: int | None = None
    to_off_minutes: int | None = None


class CycleSettings(_Record):
    on_minutes: int | None = None
    off_minutes: int | None = None


class ScheduleSettings(_Record):
    start_enabled: bool | None = None
    start_time: str | None = None
    end_enabled: bool | None = None
    end_time: str | None = None


class AutoSettings(_Record):
    """Temperature and humidity thresholds of Auto mode (Celsius)."""

    settings_mode: str | None = None
    temp_high_enabled: bool | None = None
    temp_high_trigger: int | None = None
    temp_low_enabled: bool | None = None
    temp_low_trigger: int | None = None
    humidity_high_enabled: bool | None = None
    humidity_high_trigger: int | None = None
    humidity_low_enabled: bool | None = None
    humidity_low_trigger: int | None = None
    target_temp_enabled: bool | None = None
    target_temp: int | None = None
    target_humidity_enabled: bool | None = None
    target_humidity: int | None = None


class VpdSettings(_Record):
    """VPD mode thresholds in kPa."""

    settings_mode: str | None = None
    high_enabled: bool | None = None
    high_trigger: float | None = None
    low_enabled: bool | None = None
    low_trigger: float | None = None
    target_enabled: bool | None = None
    target: float | None = None


class ModeSettings(_Record):
    """A port's mode-settings record with its mode-specific sub-records."""

    mode_type: int | None = None
    on_speed: int | None = None
    off_speed: int | None = None
    timer: TimerSettings = TimerSettings()
    cycle: CycleSettings = CycleSettings()
    schedule: ScheduleSettings = ScheduleSettings()
    auto: AutoSettings = AutoSettings()
    vpd: VpdSettings = VpdSettings()

    @property
    def active(self) -> str | None:
        return decode_mode(self.mode_type)

    @property
    def is_on(self) -> bool:
        return self.mode_type == MODE_ON

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "ModeSettings":
        start_enabled, start_time = decode_schedule(
            _number(record, ModeKey.SCHEDULED_START_TIME)
        )
        end_enabled, end_time = decode_schedule(
            _number(record, ModeKey.SCHEDULED_END_TIME)
        )
        return cls(
            mode_type=_number(record, ModeKey.AT_TYPE),
            on_speed=_number(record, ModeKey.ON_SPEED),
            off_speed=_number(record, ModeKey.OFF_SPEED),
            timer=TimerSettings(
                to_on_minutes=seconds_to_minutes(
                    _number(record, ModeKey.TIMER_TO_ON)
                ),
                to_off_minutes=seconds_to_minutes(
                    _number(record, ModeKey.TIMER_TO_OFF)
                ),
            ),
            cycle=CycleSettings(
                on_minutes=seconds_to_minutes(
                    _number(record, ModeKey.CYCLE_ON)
                ),
                off_minutes=seconds_to_minutes(
                    _number(record, ModeKey.CYCLE_OFF)
                ),
            ),
            schedule=ScheduleSettings(
                start_enabled=start_enabled,
                start_time=start_time,
                end_enabled=end_enabled,
                end_time=end_time,
            ),
            auto=AutoSettings(
                settings_mode=decode_option(
                    SETTINGS_MODE_OPTIONS,
                    _number(record, ModeKey.AUTO_SETTINGS_MODE),
                    "auto settings mode",
                ),
                temp_high_enabled=decode_flag(
                    _number(record, ModeKey.AUTO_TEMP_HIGH_ENABLED)
                ),
                temp_high_trigger=_number(
                    record, ModeKey.AUTO_TEMP_HIGH_TRIGGER
                ),
                temp_low_enabled=decode_flag(
                    _number(record, ModeKey.AUTO_TEMP_LOW_ENABLED)
                ),
                temp_low_trigger=_number(record, ModeKey.AUTO_TEMP_LOW_TRIGGER),
                humidity_high_enabled=decode_flag(
                    _number(record, ModeKey.AUTO_HUMIDITY_HIGH_ENABLED)
                ),
                humidity_high_trigger=_number(
                    record, ModeKey.AUTO_HUMIDITY_HIGH_TRIGGER
                ),
                humidity_low_enabled=decode_flag(
                    _number(record, ModeKey.AUTO_HUMIDITY_LOW_ENABLED)
                ),
                humidity_low_trigger=_number(
                    record, ModeKey.AUTO_HUMIDITY_LOW_TRIGGER
                ),
                target_temp_enabled=decode_flag(
                    _number(record, ModeKey.AUTO_TARGET_TEMP_ENABLED)
                ),
                target_temp=_number(record, ModeKey.AUTO_TARGET_TEMP),
                target_humidity_enabled=decode_flag(
                    _number(record, ModeKey.AUTO_TARGET_HUMIDITY_ENABLED)
                ),
                target_humidity=_number(record, ModeKey.AUTO_TARGET_HUMIDITY),
            ),
            vpd=VpdSettings(
                settings_mode=decode_option(
                    SETTINGS_MODE_OPTIONS,
                    _number(record, ModeKey.VPD_SETTINGS_MODE),
                    "vpd settings mode",
                ),
                high_enabled=decode_flag(
                    _number(record, ModeKey.VPD_HIGH_ENABLED)
                ),
                high_trigger=scale_vpd(
                    _number(record, ModeKey.VPD_HIGH_TRIGGER)
                ),
                low_enabled=decode_flag(_number(record, ModeKey.VPD_LOW_ENABLED)),
                low_trigger=scale_vpd(_number(record, ModeKey.VPD_LOW_TRIGGER)),
                target_enabled=decode_flag(
                    _number(record, ModeKey.VPD_TARGET_ENABLED)
                ),
                target=scale_vpd(_number(record, ModeKey.VPD_TARGET)),
            ),
        )

    def nodes(self) -> dict[str, Any]:
        """Flatten into ``mode``-relative node paths.

        ``onSpeed`` is left out; the reconciler guards it separately.
        """
        values: dict[str, Any] = {
            "active": self.active,
            "offSpeed": self.off_speed,
        }
        for category in ("timer", "cycle", "schedule", "auto", "vpd"):
            sub: _Record = getattr(self, category)
            for name, value in sub.nodes().items():
                values[f"{category}.{name}"] = value
        return values


class AdvancedSettings(_Record):
    """Advanced settings of a port, or of the controller at port 0.

    Dual Celsius/Fahrenheit raw fields are resolved by the controller's
    unit flag when decoding.
    """

    temperature_unit: str | None = None
    temperature_calibration: int | None = None
    humidity_calibration: int | None = None
    vpd_leaf_temperature_offset: int | None = None
    outside_temperature: str | None = None
    outside_humidity: str | None = None
    device_type: int | None = None
    dynamic_response: str | None = None
    dynamic_transition_temp: int | None = None
    dynamic_transition_humidity: int | None = None
    dynamic_transition_vpd: float | None = None
    dynamic_buffer_temp: int | None = None
    dynamic_buffer_humidity: int | None = None
    dynamic_buffer_vpd: float | None = None
    sunrise_timer_enabled: bool | None = None
    sunrise_timer_minutes: int | None = None

    @classmethod
    def from_record(
        cls, record: Mapping[str, Any], unit_flag: int | None = None
    ) -> "AdvancedSettings":
        """Decode a record; ``unit_flag`` applies when it carries none."""
        if _number(record, AdvancedKey.TEMP_UNIT) is not None:
            unit_flag = _number(record, AdvancedKey.TEMP_UNIT)
        celsius = is_celsius(unit_flag)

        def by_unit(celsius_key: str, fahrenheit_key: str) -> Any:
            if unit_flag is None:
                return None
            return _number(record, celsius_key if celsius else fahrenheit_key)

        load_type = _number(record, AdvancedKey.DEVICE_LOAD_TYPE)
        if load_type is not None and decode_option(
            DEVICE_LOAD_TYPE_OPTIONS, load_type, "load type"
        ) is None:
            load_type = None

        return cls(
            temperature_unit=None
            if unit_flag is None
            else ("C" if celsius else "F"),
            temperature_calibration=by_unit(
                AdvancedKey.CALIBRATE_TEMP, AdvancedKey.CALIBRATE_TEMP_F
            ),
            humidity_calibration=_number(
                record, AdvancedKey.CALIBRATE_HUMIDITY
            ),
            vpd_leaf_temperature_offset=by_unit(
                AdvancedKey.VPD_LEAF_TEMP_OFFSET,
                AdvancedKey.VPD_LEAF_TEMP_OFFSET_F,
            ),
            outside_temperature=decode_option(
                OUTSIDE_CLIMATE_OPTIONS,
                _number(record, AdvancedKey.OUTSIDE_TEMP_COMPARE),
                "outside climate",
            ),
            outside_humidity=decode_option(
                OUTSIDE_CLIMATE_OPTIONS,
                _number(record, AdvancedKey.OUTSIDE_HUMIDITY_COMPARE),
                "outside climate",
            ),
            device_type=load_type,
            dynamic_response=decode_option(
                DYNAMIC_RESPONSE_OPTIONS,
                _number(record, AdvancedKey.DYNAMIC_RESPONSE_TYPE),
                "dynamic response",
            ),
            dynamic_transition_temp=by_unit(
                AdvancedKey.DYNAMIC_TRANSITION_TEMP,
                AdvancedKey.DYNAMIC_TRANSITION_TEMP_F,
            ),
            dynamic_transition_humidity=_number(
                record, AdvancedKey.DYNAMIC_TRANSITION_HUMIDITY
            ),
            dynamic_transition_vpd=scale_vpd(
                _number(record, AdvancedKey.DYNAMIC_TRANSITION_VPD)
            ),
            dynamic_buffer_temp=by_unit(
                AdvancedKey.DYNAMIC_BUFFER_TEMP,
                AdvancedKey.DYNAMIC_BUFFER_TEMP_F,
            ),
            dynamic_buffer_humidity=_number(
                record, AdvancedKey.DYNAMIC_BUFFER_HUMIDITY
            ),
            dynamic_buffer_vpd=scale_vpd(
                _number(record, AdvancedKey.DYNAMIC_BUFFER_VPD)
            ),
            sunrise_timer_enabled=decode_flag(
                _number(record, AdvancedKey.SUNRISE_TIMER_ENABLED)
            ),
            sunrise_timer_minutes=_number(
                record, AdvancedKey.SUNRISE_TIMER_DURATION
            ),
        )

    def controller_nodes(self) -> dict[str, Any]:
        """Node values for ``devices.<id>.settings``."""
        values = self.nodes()
        return {name: values[name] for name in _CONTROLLER_NODES}

    def port_nodes(self) -> dict[str, Any]:
        """Node values for ``devices.<id>.ports.<port>.settings``."""
        values = self.nodes()
        return {name: values[name] for name in _PORT_NODES}


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


# Snake-case field names whose node name is not a plain camelCase copy.
_NODE_NAMES: dict[str, str] = {
    "dynamic_transition_vpd": "dynamicTransitionVPD",
    "dynamic_buffer_vpd": "dynamicBufferVPD",
}
for _field in (
    set(TimerSettings.model_fields)
    | set(CycleSettings.model_fields)
    | set(ScheduleSettings.model_fields)
    | set(AutoSettings.model_fields)
    | set(VpdSettings.model_fields)
    | set(AdvancedSettings.model_fields)
):
    _NODE_NAMES.setdefault(_field, _camel(_field))

_CONTROLLER_NODES: tuple[str, ...] = (
    "temperatureUnit",
    "temperatureCalibration",
    "humidityCalibration",
    "vpdLeafTemperatureOffset",
    "outsideTemperature",
    "outsideHumidity",
)
_PORT_NODES: tuple[str, ...] = (
    "deviceType",
    "dynamicResponse",
    "dynamicTransitionTemp",
    "dynamicTransitionHumidity",
    "dynamicTransitionVPD",
    "dynamicBufferTemp",
    "dynamicBufferHumidity",
    "dynamicBufferVPD",
    "sunriseTimerEnabled",
    "sunriseTimerMinutes",
)
