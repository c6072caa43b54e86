"""Node paths and the static node tree declared for devices and ports.

Paths are dot-delimited: ``devices.<deviceId>.ports.<portId>.mode.timer``.
Tables map paths relative to a device or port to their NodeSpec.
"""

from climasync.base.constants import (
    DEVICE_LOAD_TYPE_OPTIONS,
    DYNAMIC_RESPONSE_OPTIONS,
    MODE_OPTIONS,
    OUTSIDE_CLIMATE_OPTIONS,
    ROOT,
    SETTINGS_MODE_OPTIONS,
    TEMPERATURE_UNIT_OPTIONS,
)
from climasync.base.state import NodeSpec

SEPARATOR = "."


def join(*parts: object) -> str:
    return SEPARATOR.join(str(part) for part in parts if part != "")


def device_path(device_id: object, *parts: object) -> str:
    return join(ROOT, device_id, *parts)


def port_path(device_id: object, port_id: object, *parts: object) -> str:
    return join(ROOT, device_id, "ports", port_id, *parts)


def split(path: str) -> list[str]:
    return path.split(SEPARATOR)


def _channel(name: str) -> NodeSpec:
    return NodeSpec(kind="channel", name=name)


def _text(name: str, role: str = "text", **extra) -> NodeSpec:
    return NodeSpec(name=name, type="string", role=role, **extra)


def _number(name: str, role: str = "value", **extra) -> NodeSpec:
    return NodeSpec(name=name, type="number", role=role, **extra)


def _switch(name: str, role: str = "switch.enable", **extra) -> NodeSpec:
    return NodeSpec(name=name, type="boolean", role=role, **extra)


def _setting(name: str, **extra) -> NodeSpec:
    return NodeSpec(name=name, write=True, **extra)


ADAPTER_TREE: dict[str, NodeSpec] = {
    "info": _channel("Information"),
    "info.connection": _switch(
        "Connected to remote service", role="indicator.connected"
    ),
    ROOT: NodeSpec(kind="folder", name="Devices"),
}

DEVICE_TREE: dict[str, NodeSpec] = {
    "info": _channel("Device information"),
    "info.name": _text("Name"),
    "info.online": _switch("Online", role="indicator.connected"),
    "info.mac": _text("MAC address"),
    "info.firmware": _text("Firmware version"),
    "info.hardware": _text("Hardware version"),
    "info.deviceType": _number("Device type"),
    "sensors": _channel("Sensors"),
    "sensors.temperature": _number(
        "Temperature", role="value.temperature", unit="°C"
    ),
    "sensors.humidity": _number("Humidity", role="value.humidity", unit="%"),
    "sensors.vpd": _number("Vapor pressure deficit", unit="kPa"),
    "settings": _channel("Controller settings"),
    "settings.temperatureUnit": _text(
        "Temperature unit", states=TEMPERATURE_UNIT_OPTIONS
    ),
    "settings.temperatureCalibration": _number(
        "Temperature calibration", role="level", unit="°", write=True
    ),
    "settings.humidityCalibration": _number(
        "Humidity calibration", role="level", unit="%", write=True
    ),
    "settings.vpdLeafTemperatureOffset": _number(
        "VPD leaf temperature offset", role="level", unit="°", write=True
    ),
    "settings.outsideTemperature": _text(
        "Outside temperature", write=True, states=OUTSIDE_CLIMATE_OPTIONS
    ),
    "settings.outsideHumidity": _text(
        "Outside humidity", write=True, states=OUTSIDE_CLIMATE_OPTIONS
    ),
    "ports": NodeSpec(kind="folder", name="Ports"),
}

# Only created for controller models with a known marketing name.
DEVICE_DESCRIPTION: tuple[str, NodeSpec] = (
    "info.deviceTypeDescription",
    _text("Device type description"),
)


def _minutes(name: str, maximum: int) -> NodeSpec:
    return _setting(
        name,
        type="number",
        role="value.interval",
        unit="min",
        min=0,
        max=maximum,
    )


def _enable(name: str) -> NodeSpec:
    return _setting(name, type="boolean", role="switch.enable")


def _celsius(name: str, maximum: int = 90) -> NodeSpec:
    return _setting(
        name,
        type="number",
        role="value.temperature",
        unit="°C",
        min=0,
        max=maximum,
    )


def _percent(name: str, maximum: int = 100) -> NodeSpec:
    return _setting(
        name,
        type="number",
        role="value.humidity",
        unit="%",
        min=0,
        max=maximum,
    )


def _kpa(name: str, maximum: float = 9.9) -> NodeSpec:
    return _setting(
        name, type="number", role="value", unit="kPa", min=0, max=maximum
    )


def _choice(name: str, states: tuple[str, ...]) -> NodeSpec:
    return _setting(name, type="string", role="text", states=states)


def _level(name: str) -> NodeSpec:
    return _setting(name, type="number", role="level", min=0, max=10)


PORT_TREE: dict[str, NodeSpec] = {
    "info": _channel("Port information"),
    "info.name": _text("Name"),
    "info.online": _switch("Online", role="indicator.connected"),
    "info.power": _number("Power level", role="value.power"),
    "info.state": _switch("Powered", role="switch.power"),
    "info.remainingTime": _number(
        "Remaining time", role="value.interval", unit="s"
    ),
    "info.nextStateChange": _text("Next state change", role="date.start"),
    "mode": _channel("Mode"),
    "mode.active": _choice("Active mode", MODE_OPTIONS),
    "mode.onSpeed": _level("On speed"),
    "mode.offSpeed": _level("Off speed"),
    "mode.timer": _channel("Timer mode"),
    "mode.timer.toOnMinutes": _minutes("Minutes until on", 1440),
    "mode.timer.toOffMinutes": _minutes("Minutes until off", 1440),
    "mode.cycle": _channel("Cycle mode"),
    "mode.cycle.onMinutes": _minutes("Minutes on", 1440),
    "mode.cycle.offMinutes": _minutes("Minutes off", 1440),
    "mode.schedule": _channel("Schedule mode"),
    "mode.schedule.startEnabled": _enable("Start time enabled"),
    "mode.schedule.startTime": _setting(
        "Start time", type="string", role="value.time"
    ),
    "mode.schedule.endEnabled": _enable("End time enabled"),
    "mode.schedule.endTime": _setting(
        "End time", type="string", role="value.time"
    ),
    "mode.auto": _channel("Auto mode"),
    "mode.auto.settingsMode": _choice("Settings mode", SETTINGS_MODE_OPTIONS),
    "mode.auto.tempHighEnabled": _enable("High temperature enabled"),
    "mode.auto.tempHighTrigger": _celsius("High temperature trigger"),
    "mode.auto.tempLowEnabled": _enable("Low temperature enabled"),
    "mode.auto.tempLowTrigger": _celsius("Low temperature trigger"),
    "mode.auto.humidityHighEnabled": _enable("High humidity enabled"),
    "mode.auto.humidityHighTrigger": _percent("High humidity trigger"),
    "mode.auto.humidityLowEnabled": _enable("Low humidity enabled"),
    "mode.auto.humidityLowTrigger": _percent("Low humidity trigger"),
    "mode.auto.targetTempEnabled": _enable("Target temperature enabled"),
    "mode.auto.targetTemp": _celsius("Target temperature"),
    "mode.auto.targetHumidityEnabled": _enable("Target humidity enabled"),
    "mode.auto.targetHumidity": _percent("Target humidity"),
    "mode.vpd": _channel("VPD mode"),
    "mode.vpd.settingsMode": _choice("Settings mode", SETTINGS_MODE_OPTIONS),
    "mode.vpd.highEnabled": _enable("High VPD enabled"),
    "mode.vpd.highTrigger": _kpa("High VPD trigger"),
    "mode.vpd.lowEnabled": _enable("Low VPD enabled"),
    "mode.vpd.lowTrigger": _kpa("Low VPD trigger"),
    "mode.vpd.targetEnabled": _enable("Target VPD enabled"),
    "mode.vpd.target": _kpa("Target VPD"),
    "settings": _channel("Port settings"),
    "settings.deviceType": _setting(
        "Load type",
        type="number",
        role="value",
        states=dict(DEVICE_LOAD_TYPE_OPTIONS),
    ),
    "settings.dynamicResponse": _choice(
        "Dynamic response", DYNAMIC_RESPONSE_OPTIONS
    ),
    "settings.dynamicTransitionTemp": _setting(
        "Dynamic transition temperature",
        type="number",
        role="value.temperature",
        unit="°",
        min=0,
        max=20,
    ),
    "settings.dynamicTransitionHumidity": _percent(
        "Dynamic transition humidity", 10
    ),
    "settings.dynamicTransitionVPD": _kpa("Dynamic transition VPD", 1),
    "settings.dynamicBufferTemp": _setting(
        "Dynamic buffer temperature",
        type="number",
        role="value.temperature",
        unit="°",
        min=0,
        max=20,
    ),
    "settings.dynamicBufferHumidity": _percent("Dynamic buffer humidity", 10),
    "settings.dynamicBufferVPD": _kpa("Dynamic buffer VPD", 1),
    "settings.sunriseTimerEnabled": _enable("Sunrise timer enabled"),
    "settings.sunriseTimerMinutes": _minutes("Sunrise timer duration", 360),
}
