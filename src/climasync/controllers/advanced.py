"""Shared write path for advanced settings of controllers and ports."""

from abc import abstractmethod

from climasync.base.constants import (
    ADVANCED_RECORD_DEFAULTS,
    ADVANCED_RECORD_DROP,
    ADVANCED_RECORD_STRINGS,
    AdvancedKey,
)
from climasync.base.layout import device_path
from climasync.base.transforms import is_celsius
from climasync.controllers.base import SettingHandler, WriteRequest
from climasync.environments.gateway import Record


def prepare_advanced_record(
    record: Record, device_id: str, port_id: int, name: str | None = None
) -> Record:
    """Clean a fetched advanced-settings record for a full resend."""
    prepared = {
        key: value
        for key, value in record.items()
        if key not in ADVANCED_RECORD_DROP
    }
    for key in ADVANCED_RECORD_STRINGS:
        if prepared.get(key) is None:
            prepared[key] = ""
    for key, default in ADVANCED_RECORD_DEFAULTS.items():
        if prepared.get(key) is None:
            prepared[key] = default
    prepared = {
        key: 0 if value is None else value for key, value in prepared.items()
    }
    prepared.setdefault(AdvancedKey.DEV_ID, device_id)
    prepared.setdefault("port", port_id)
    if name:
        prepared[AdvancedKey.DEV_NAME] = name
    return prepared


class AdvancedSettingsHandler(SettingHandler):
    """Fetch-merge-resend of ``getDevSetting``/``updateAdvSetting`` records."""

    @abstractmethod
    def name_path(self, request: WriteRequest) -> str:
        """Node holding the display name sent back as ``devName``."""

    async def _fetch(self, device_id: str, port_id: int) -> Record:
        return await self.session.call(
            self.gateway.get_device_settings, device_id, port_id
        )

    async def _prepare(self, record: Record, request: WriteRequest) -> Record:
        name = await self.writer.current(self.name_path(request))
        return prepare_advanced_record(
            record, request.device_id, request.port_id, name
        )

    async def _send(
        self, device_id: str, port_id: int, fields: Record
    ) -> None:
        await self.session.call(
            self.gateway.set_advanced_settings, device_id, port_id, fields
        )

    async def uses_celsius(self, request: WriteRequest, record: Record) -> bool:
        """Temperature unit of the controller owning the request's port."""
        flag = record.get(AdvancedKey.TEMP_UNIT)
        if isinstance(flag, int):
            return is_celsius(flag)
        unit = await self.writer.current(
            device_path(request.device_id, "settings.temperatureUnit")
        )
        return unit != "F"
