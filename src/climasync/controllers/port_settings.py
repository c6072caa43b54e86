"""Handler for writes below ``devices.<id>.ports.<port>.settings``."""

from enum import Enum
from functools import partial
from typing import Any, ClassVar

from pydantic import Field

from climasync.base.constants import (
    DEVICE_LOAD_TYPE_OPTIONS,
    DYNAMIC_RESPONSE_OPTIONS,
    AdvancedKey,
)
from climasync.base.layout import port_path
from climasync.base.transforms import (
    dynamic_temperature,
    encode_option,
    encode_vpd,
    to_bool,
    to_float,
    to_int,
    to_option,
)
from climasync.controllers.advanced import AdvancedSettingsHandler
from climasync.controllers.base import (
    Encoder,
    SettingHandler,
    SettingRule,
    WriteRequest,
    flag,
    raw,
)
from climasync.environments.gateway import Record
from climasync.errors import SettingValidationError


class PortSetting(str, Enum):
    DEVICE_TYPE = "deviceType"
    DYNAMIC_RESPONSE = "dynamicResponse"
    DYNAMIC_TRANSITION_TEMP = "dynamicTransitionTemp"
    DYNAMIC_TRANSITION_HUMIDITY = "dynamicTransitionHumidity"
    DYNAMIC_TRANSITION_VPD = "dynamicTransitionVPD"
    DYNAMIC_BUFFER_TEMP = "dynamicBufferTemp"
    DYNAMIC_BUFFER_HUMIDITY = "dynamicBufferHumidity"
    DYNAMIC_BUFFER_VPD = "dynamicBufferVPD"
    SUNRISE_TIMER_ENABLED = "sunriseTimerEnabled"
    SUNRISE_TIMER_MINUTES = "sunriseTimerMinutes"


def coerce_load_type(value: Any) -> int:
    """Accept a load type id or its name; return the id."""
    if isinstance(value, str):
        wanted = value.strip().lower()
        for load_type, name in DEVICE_LOAD_TYPE_OPTIONS.items():
            if name.lower() == wanted:
                return load_type
    load_type = to_int(value)
    if load_type not in DEVICE_LOAD_TYPE_OPTIONS:
        raise SettingValidationError(
            f"{value!r} is not one of {DEVICE_LOAD_TYPE_OPTIONS}"
        )
    return load_type


def _dynamic_temperature(celsius_key: str, fahrenheit_key: str) -> Encoder:
    async def encode(
        handler: SettingHandler, request: WriteRequest, record: Record
    ) -> Record:
        celsius = await handler.uses_celsius(request, record)
        c_value, f_value = dynamic_temperature(request.value, celsius)
        return {celsius_key: c_value, fahrenheit_key: f_value}

    return encode


_STEPS = partial(to_int, minimum=0, maximum=20)
_HUMIDITY = partial(to_int, minimum=0, maximum=10)
_VPD = partial(to_float, minimum=0, maximum=1)


class PortSettingsHandler(AdvancedSettingsHandler):
    """Apply writes to a port's advanced settings."""

    name: str = Field(default="port_settings", min_length=1)

    CATEGORY: ClassVar[str] = "settings"
    SETTINGS: ClassVar[type[Enum]] = PortSetting

    def node_path(self, request: WriteRequest) -> str:
        return port_path(
            request.device_id, request.port_id, "settings", request.setting
        )

    def name_path(self, request: WriteRequest) -> str:
        return port_path(request.device_id, request.port_id, "info.name")

    RULES: ClassVar[dict[Enum, SettingRule]] = {
        PortSetting.DEVICE_TYPE: SettingRule(
            coerce_load_type, raw(AdvancedKey.DEVICE_LOAD_TYPE)
        ),
        PortSetting.DYNAMIC_RESPONSE: SettingRule(
            partial(to_option, options=DYNAMIC_RESPONSE_OPTIONS),
            raw(
                AdvancedKey.DYNAMIC_RESPONSE_TYPE,
                partial(encode_option, DYNAMIC_RESPONSE_OPTIONS),
            ),
        ),
        PortSetting.DYNAMIC_TRANSITION_TEMP: SettingRule(
            _STEPS,
            _dynamic_temperature(
                AdvancedKey.DYNAMIC_TRANSITION_TEMP,
                AdvancedKey.DYNAMIC_TRANSITION_TEMP_F,
            ),
        ),
        PortSetting.DYNAMIC_TRANSITION_HUMIDITY: SettingRule(
            _HUMIDITY, raw(AdvancedKey.DYNAMIC_TRANSITION_HUMIDITY)
        ),
        PortSetting.DYNAMIC_TRANSITION_VPD: SettingRule(
            _VPD, raw(AdvancedKey.DYNAMIC_TRANSITION_VPD, encode_vpd)
        ),
        PortSetting.DYNAMIC_BUFFER_TEMP: SettingRule(
            _STEPS,
            _dynamic_temperature(
                AdvancedKey.DYNAMIC_BUFFER_TEMP,
                AdvancedKey.DYNAMIC_BUFFER_TEMP_F,
            ),
        ),
        PortSetting.DYNAMIC_BUFFER_HUMIDITY: SettingRule(
            _HUMIDITY, raw(AdvancedKey.DYNAMIC_BUFFER_HUMIDITY)
        ),
        PortSetting.DYNAMIC_BUFFER_VPD: SettingRule(
            _VPD, raw(AdvancedKey.DYNAMIC_BUFFER_VPD, encode_vpd)
        ),
        PortSetting.SUNRISE_TIMER_ENABLED: SettingRule(
            to_bool, flag(AdvancedKey.SUNRISE_TIMER_ENABLED)
        ),
        PortSetting.SUNRISE_TIMER_MINUTES: SettingRule(
            partial(to_int, minimum=0, maximum=360),
            raw(AdvancedKey.SUNRISE_TIMER_DURATION),
        ),
    }
