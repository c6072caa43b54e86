"""Components that map between remote records and the state tree."""

from climasync.controllers.base import SettingHandler, SettingRule, WriteRequest
from climasync.controllers.device_settings import (
    DeviceSetting,
    DeviceSettingsHandler,
)
from climasync.controllers.mode import ModeSetting, PortModeHandler
from climasync.controllers.port_settings import PortSetting, PortSettingsHandler
from climasync.controllers.reconciler import Reconciler
from climasync.controllers.registrar import TopologyRegistrar
from climasync.controllers.router import ChangeRouter, Route

__all__ = [
    "ChangeRouter",
    "DeviceSetting",
    "DeviceSettingsHandler",
    "ModeSetting",
    "PortModeHandler",
    "PortSetting",
    "PortSettingsHandler",
    "Reconciler",
    "Route",
    "SettingHandler",
    "SettingRule",
    "TopologyRegistrar",
    "WriteRequest",
]
