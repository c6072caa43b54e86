"""Handler for writes below ``devices.<id>.settings``."""

from enum import Enum
from functools import partial
from typing import ClassVar

from pydantic import Field

from climasync.base.constants import OUTSIDE_CLIMATE_OPTIONS, AdvancedKey
from climasync.base.layout import device_path
from climasync.base.transforms import encode_option, to_int, to_option
from climasync.controllers.advanced import AdvancedSettingsHandler
from climasync.controllers.base import SettingRule, WriteRequest, raw, same


class DeviceSetting(str, Enum):
    """Writable controller settings; the temperature unit is read-only."""

    TEMPERATURE_CALIBRATION = "temperatureCalibration"
    HUMIDITY_CALIBRATION = "humidityCalibration"
    VPD_LEAF_TEMPERATURE_OFFSET = "vpdLeafTemperatureOffset"
    OUTSIDE_TEMPERATURE = "outsideTemperature"
    OUTSIDE_HUMIDITY = "outsideHumidity"


def _outside(key: str) -> SettingRule:
    return SettingRule(
        partial(to_option, options=OUTSIDE_CLIMATE_OPTIONS),
        raw(key, partial(encode_option, OUTSIDE_CLIMATE_OPTIONS)),
    )


class DeviceSettingsHandler(AdvancedSettingsHandler):
    """Apply writes to controller-level advanced settings (port 0).

    Calibration offsets are unit-agnostic integers written into both
    the Celsius and Fahrenheit raw fields.
    """

    name: str = Field(default="device_settings", min_length=1)

    CATEGORY: ClassVar[str] = "device"
    SETTINGS: ClassVar[type[Enum]] = DeviceSetting

    def node_path(self, request: WriteRequest) -> str:
        return device_path(request.device_id, "settings", request.setting)

    def name_path(self, request: WriteRequest) -> str:
        return device_path(request.device_id, "info.name")

    RULES: ClassVar[dict[Enum, SettingRule]] = {
        DeviceSetting.TEMPERATURE_CALIBRATION: SettingRule(
            to_int,
            same(AdvancedKey.CALIBRATE_TEMP, AdvancedKey.CALIBRATE_TEMP_F),
        ),
        DeviceSetting.HUMIDITY_CALIBRATION: SettingRule(
            to_int, raw(AdvancedKey.CALIBRATE_HUMIDITY)
        ),
        DeviceSetting.VPD_LEAF_TEMPERATURE_OFFSET: SettingRule(
            to_int,
            same(
                AdvancedKey.VPD_LEAF_TEMP_OFFSET,
                AdvancedKey.VPD_LEAF_TEMP_OFFSET_F,
            ),
        ),
        DeviceSetting.OUTSIDE_TEMPERATURE: _outside(
            AdvancedKey.OUTSIDE_TEMP_COMPARE
        ),
        DeviceSetting.OUTSIDE_HUMIDITY: _outside(
            AdvancedKey.OUTSIDE_HUMIDITY_COMPARE
        ),
    }
