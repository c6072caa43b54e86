"""Base classes for the climasync synchronization engine."""

from climasync.base.component import Component
from climasync.base.config import EngineConfig, FailurePolicy
from climasync.base.context import Context
from climasync.base.device import Device, Port
from climasync.base.entity import Entity
from climasync.base.runner import PollingRunner
from climasync.base.scheduler import (
    KeyedScheduler,
    RefreshThrottle,
    WriteCoalescer,
)
from climasync.base.settings import AdvancedSettings, ModeSettings
from climasync.base.state import MemoryStore, NodeSpec, StateNode, StateStore
from climasync.base.writer import StateWriter

__all__ = [
    "AdvancedSettings",
    "Component",
    "Context",
    "Device",
    "EngineConfig",
    "Entity",
    "FailurePolicy",
    "KeyedScheduler",
    "MemoryStore",
    "ModeSettings",
    "NodeSpec",
    "PollingRunner",
    "Port",
    "RefreshThrottle",
    "StateNode",
    "StateStore",
    "StateWriter",
    "WriteCoalescer",
]
