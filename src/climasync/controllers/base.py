"""Common write path of the setting handlers.

A user write is coerced to a canonical value, shown optimistically,
coalesced per (device, port, category, setting), then applied with a
fetch-merge-resend of the complete remote record.  Each handler declares
a table from its setting enumeration to a SettingRule; subclasses whose
table misses a setting fail at class creation.
"""

from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from enum import Enum
from functools import partial
from typing import Any, ClassVar, NamedTuple

from pydantic import BaseModel, ConfigDict

from climasync.base.component import Component
from climasync.base.config import FailurePolicy
from climasync.base.transforms import celsius_to_fahrenheit, encode_flag
from climasync.environments.gateway import Record
from climasync.errors import SettingValidationError, SyncError


class WriteRequest(BaseModel):
    """A coerced user write addressed to one remote setting."""

    model_config = ConfigDict(frozen=True)

    device_id: str
    port_id: int
    category: str
    setting: str
    value: Any

    @property
    def key(self) -> tuple[str, int, str, str]:
        """Coalescing key; at most one pending write exists per key."""
        return (self.device_id, self.port_id, self.category, self.setting)


Encoder = Callable[["SettingHandler", WriteRequest, Record], Awaitable[Record]]


class SettingRule(NamedTuple):
    """How one setting is validated and turned into remote fields."""

    coerce: Callable[[Any], Any]
    encode: Encoder


def raw(key: str, transform: Callable[[Any], Any] | None = None) -> Encoder:
    """Encoder setting a single raw field, optionally transformed."""

    async def encode(
        handler: "SettingHandler", request: WriteRequest, record: Record
    ) -> Record:
        value = request.value
        return {key: value if transform is None else transform(value)}

    return encode


def flag(key: str) -> Encoder:
    """Encoder writing a boolean as 0/1."""
    return raw(key, encode_flag)


def same(*keys: str) -> Encoder:
    """Encoder writing the same value into several raw fields."""

    async def encode(
        handler: "SettingHandler", request: WriteRequest, record: Record
    ) -> Record:
        return dict.fromkeys(keys, request.value)

    return encode


def celsius_pair(celsius_key: str, fahrenheit_key: str) -> Encoder:
    """Encoder for a Celsius value stored alongside its Fahrenheit twin."""

    async def encode(
        handler: "SettingHandler", request: WriteRequest, record: Record
    ) -> Record:
        return {
            celsius_key: request.value,
            fahrenheit_key: celsius_to_fahrenheit(request.value),
        }

    return encode


class SettingHandler(Component, ABC):
    """Base class for the Mode, Port-Settings and Device-Settings handlers.

    Subclasses define CATEGORY, the SETTINGS enumeration, the RULES table
    and the record-specific steps: node path, fetch, preparation and send.
    """

    CATEGORY: ClassVar[str]
    SETTINGS: ClassVar[type[Enum]]
    RULES: ClassVar[dict[Enum, SettingRule]]

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        if "RULES" in cls.__dict__:
            missing = set(cls.SETTINGS) - set(cls.RULES)
            if missing:
                names = sorted(setting.value for setting in missing)
                raise TypeError(f"{cls.__name__} has no rule for {names}")

    def resolve(self, setting: str) -> Enum:
        try:
            return self.SETTINGS(setting)
        except ValueError as e:
            raise SettingValidationError(
                f"Unknown or read-only {self.CATEGORY} setting {setting!r}"
            ) from e

    @abstractmethod
    def node_path(self, request: WriteRequest) -> str:
        """Tree path of the node the request targets."""

    @abstractmethod
    async def _fetch(self, device_id: str, port_id: int) -> Record:
        """Fetch the complete current remote record."""

    @abstractmethod
    async def _prepare(self, record: Record, request: WriteRequest) -> Record:
        """Clean a fetched record so it can be sent back in full."""

    @abstractmethod
    async def _send(
        self, device_id: str, port_id: int, fields: Record
    ) -> None:
        """Send the complete merged record."""

    async def submit(
        self, device_id: str, port_id: int, setting: str, value: Any
    ) -> bool:
        """Accept a user write.

        Invalid writes are logged and dropped.  Valid ones are shown
        immediately as unacknowledged values and handed to the write
        coalescer.

        Returns:
            True when the write was scheduled
        """
        try:
            rule = self.RULES[self.resolve(setting)]
            canonical = rule.coerce(value)
        except SettingValidationError as e:
            self._logger.warning(
                "Dropping write %r to %s.%s %s: %s",
                value,
                device_id,
                port_id,
                setting,
                e,
            )
            return False

        request = WriteRequest(
            device_id=str(device_id),
            port_id=port_id,
            category=self.CATEGORY,
            setting=setting,
            value=canonical,
        )
        path = self.node_path(request)
        try:
            await self.writer.propose(path, canonical)
        except Exception:
            self._logger.exception("Could not show pending value at %s", path)

        accepted = self.context.coalescer.submit(
            request.key, partial(self._process, request)
        )
        if not accepted:
            self._logger.info(
                "Write to %s dropped, a write for it is in progress", path
            )
        return accepted

    async def _process(self, request: WriteRequest) -> bool:
        """Apply a coalesced write remotely; return True on success."""
        rule = self.RULES[self.resolve(request.setting)]
        path = self.node_path(request)
        try:
            record = await self._fetch(request.device_id, request.port_id)
            fields = await rule.encode(self, request, record)
            payload = {**await self._prepare(record, request), **fields}
            await self._send(request.device_id, request.port_id, payload)
        except SyncError as e:
            self._logger.error(
                "Writing %r to %s failed: %s", request.value, path, e
            )
            await self._handle_failure(path)
            return False

        self._logger.info("Set %s to %r", path, request.value)
        try:
            await self.writer.confirm(path, request.value)
        finally:
            self.context.throttle.request()
        return True

    async def _handle_failure(self, path: str) -> None:
        if self.config.failure_policy is FailurePolicy.REVERT:
            if not await self.writer.revert(path):
                self._logger.debug("No acknowledged value to restore at %s", path)
        else:
            self._logger.debug("Keeping unacknowledged value at %s", path)
