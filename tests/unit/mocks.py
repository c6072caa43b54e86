"""Test doubles for the remote gateway and sample remote records.

FakeGateway behaves like a small in-memory controller service: writes
replace the stored records, so a refresh after a write sees the new
values.  Failures are injected per method and raised in order.
"""

import copy
from collections import defaultdict
from typing import Any

from climasync import Context, EngineConfig, MemoryStore

DEVICE_ID = "1234567890"


def device_snapshot(
    device_id: str = DEVICE_ID, ports: list[dict] | None = None, **extra: Any
) -> dict:
    """A device list entry in the remote format."""
    snapshot = {
        "devId": device_id,
        "devName": "Grow Tent",
        "devMacAddr": "AA:BB:CC:DD:EE:FF",
        "devType": 11,
        "online": 1,
        "deviceInfo": {
            "temperature": 2350,
            "humidity": 5512,
            "vpdnums": 147,
            "firmwareVersion": "3.2.1",
            "hardwareVersion": "1.1",
            "ports": ports
            if ports is not None
            else [port_snapshot(1), port_snapshot(2, name="Light")],
        },
    }
    snapshot.update(extra)
    return snapshot


def port_snapshot(port: int, name: str = "Fan", **extra: Any) -> dict:
    snapshot = {
        "port": port,
        "portName": name,
        "speak": 5,
        "online": 1,
        "loadState": 1,
        "remainTime": 0,
        "atType": 2,
    }
    snapshot.update(extra)
    return snapshot


def mode_record(**extra: Any) -> dict:
    """A port mode-settings record in the remote format."""
    record = {
        "devId": DEVICE_ID,
        "port": 1,
        "modeSetid": 998877,
        "devMacAddr": "AA:BB:CC:DD:EE:FF",
        "ipcSetting": {"x": 1},
        "atType": 2,
        "onSpead": 5,
        "offSpead": 0,
        "acitveTimerOn": 600,
        "acitveTimerOff": 0,
        "activeCycleOn": 3600,
        "activeCycleOff": 1800,
        "schedStartTime": 90,
        "schedEndtTime": 65535,
        "settingMode": 0,
        "activeHt": 1,
        "devHt": 30,
        "devHtf": 86,
        "activeLt": 0,
        "devLt": 18,
        "devLtf": 64,
        "activeHh": 1,
        "devHh": 70,
        "activeLh": 0,
        "devLh": 40,
        "targetTSwitch": 0,
        "targetTemp": 25,
        "targetTempF": 77,
        "targetHumiSwitch": 0,
        "targetHumi": 55,
        "vpdSettingMode": 1,
        "activeHtVpd": 1,
        "activeHtVpdNums": 47,
        "activeLtVpd": 0,
        "activeLtVpdNums": 8,
        "targetVpdSwitch": 1,
        "targetVpd": 12,
        "vpdstatus": None,
        "surplus": None,
    }
    record.update(extra)
    return record


def controller_record(**extra: Any) -> dict:
    """Advanced settings of the controller itself (port 0)."""
    record = {
        "devId": DEVICE_ID,
        "devName": "Grow Tent",
        "setId": 5,
        "devMacAddr": "AA:BB:CC:DD:EE:FF",
        "devCompany": 1,
        "devCt": 2,
        "devCth": 4,
        "devCh": -3,
        "vpdCt": 1,
        "vpdCth": 2,
        "tempCompare": 1,
        "humiCompare": 2,
        "sensorSettingStr": None,
        "calibrationTime": None,
    }
    record.update(extra)
    return record


def port_settings_record(**extra: Any) -> dict:
    """Advanced settings of a port."""
    record = {
        "devId": DEVICE_ID,
        "port": 1,
        "devName": "Fan",
        "loadType": 6,
        "isFlag": 1,
        "devTt": 3,
        "devTth": 6,
        "devTh": 4,
        "vpdTransition": 2,
        "devBt": 1,
        "devBth": 2,
        "devBh": 5,
        "devBvpd": 3,
        "onTimeSwitch": 1,
        "onTime": 15,
        "portResistance": 12,
    }
    record.update(extra)
    return record


class FakeGateway:
    """In-memory RemoteDeviceGateway with call recording."""

    def __init__(
        self,
        devices: list[dict] | None = None,
        mode_records: dict[tuple[str, int], dict] | None = None,
        advanced_records: dict[tuple[str, int], dict] | None = None,
        authenticated: bool = True,
    ) -> None:
        self.devices = devices if devices is not None else [device_snapshot()]
        self.mode_records = (
            mode_records
            if mode_records is not None
            else {(DEVICE_ID, 1): mode_record(), (DEVICE_ID, 2): mode_record(port=2)}
        )
        self.advanced_records = (
            advanced_records
            if advanced_records is not None
            else {
                (DEVICE_ID, 0): controller_record(),
                (DEVICE_ID, 1): port_settings_record(),
                (DEVICE_ID, 2): port_settings_record(port=2, loadType=1),
            }
        )
        self.authenticated = authenticated
        self.login_calls = 0
        self.login_failures: list[Exception] = []
        self.failures: dict[str, list[Exception]] = defaultdict(list)
        self.calls: list[str] = []
        self.mode_writes: list[tuple[str, int, dict]] = []
        self.advanced_writes: list[tuple[str, int, dict]] = []

    def fail(self, method: str, *errors: Exception) -> None:
        """Make the next calls of ``method`` raise the given errors."""
        self.failures[method].extend(errors)

    def _enter(self, method: str) -> None:
        self.calls.append(method)
        if self.failures[method]:
            raise self.failures[method].pop(0)

    def count(self, method: str) -> int:
        return self.calls.count(method)

    async def login(self) -> None:
        self.login_calls += 1
        if self.login_failures:
            self.authenticated = False
            raise self.login_failures.pop(0)
        self.authenticated = True

    def is_authenticated(self) -> bool:
        return self.authenticated

    async def list_devices(self) -> list[dict]:
        self._enter("list_devices")
        return copy.deepcopy(self.devices)

    async def get_port_mode_settings(self, device_id: str, port_id: int) -> dict:
        self._enter("get_port_mode_settings")
        return copy.deepcopy(self.mode_records.get((str(device_id), port_id), {}))

    async def get_device_settings(self, device_id: str, port_id: int) -> dict:
        self._enter("get_device_settings")
        return copy.deepcopy(
            self.advanced_records.get((str(device_id), port_id), {})
        )

    async def set_port_mode(self, device_id: str, port_id: int, fields: dict) -> None:
        self._enter("set_port_mode")
        self.mode_writes.append((device_id, port_id, dict(fields)))
        self.mode_records[(str(device_id), port_id)] = dict(fields)

    async def set_advanced_settings(
        self, device_id: str, port_id: int, fields: dict
    ) -> None:
        self._enter("set_advanced_settings")
        self.advanced_writes.append((device_id, port_id, dict(fields)))
        self.advanced_records[(str(device_id), port_id)] = dict(fields)


class RecordingRefresh:
    """Async callable counting refreshes, optionally failing."""

    def __init__(self, error: Exception | None = None) -> None:
        self.calls = 0
        self.error = error

    async def __call__(self) -> None:
        self.calls += 1
        if self.error is not None:
            raise self.error


def fast_config(**overrides: Any) -> EngineConfig:
    """Config with millisecond timings for tests."""
    options = {
        "debounce_s": 0.01,
        "refresh_settle_s": 0.01,
        "refresh_cooldown_s": 0.05,
    }
    options.update(overrides)
    return EngineConfig(**options)


def make_context(
    gateway: FakeGateway | None = None,
    store: MemoryStore | None = None,
    refresh: Any = None,
    **overrides: Any,
) -> Context:
    return Context.create(
        gateway or FakeGateway(),
        store or MemoryStore(),
        refresh or RecordingRefresh(),
        fast_config(**overrides),
    )
