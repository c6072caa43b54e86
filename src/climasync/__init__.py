"""State synchronization between a remote climate controller API and a
hierarchical state store."""

from .base import (
    Component,
    Context,
    Device,
    EngineConfig,
    Entity,
    FailurePolicy,
    KeyedScheduler,
    MemoryStore,
    NodeSpec,
    PollingRunner,
    Port,
    RefreshThrottle,
    StateNode,
    StateStore,
    StateWriter,
    WriteCoalescer,
)
from .controllers import (
    ChangeRouter,
    DeviceSettingsHandler,
    PortModeHandler,
    PortSettingsHandler,
    Reconciler,
    TopologyRegistrar,
)
from .engine import SyncEngine
from .environments import RemoteDeviceGateway, SessionGuard
from .errors import (
    ApplicationError,
    AuthError,
    GatewayError,
    NetworkError,
    SettingValidationError,
    StoreError,
    SyncError,
)

__all__ = [
    "ApplicationError",
    "AuthError",
    "ChangeRouter",
    "Component",
    "Context",
    "Device",
    "DeviceSettingsHandler",
    "EngineConfig",
    "Entity",
    "FailurePolicy",
    "GatewayError",
    "KeyedScheduler",
    "MemoryStore",
    "NetworkError",
    "NodeSpec",
    "PollingRunner",
    "Port",
    "PortModeHandler",
    "PortSettingsHandler",
    "Reconciler",
    "RefreshThrottle",
    "RemoteDeviceGateway",
    "SessionGuard",
    "SettingValidationError",
    "StateNode",
    "StateStore",
    "StateWriter",
    "StoreError",
    "SyncEngine",
    "SyncError",
    "TopologyRegistrar",
    "WriteCoalescer",
]
