"""Shared collaborators handed to every component."""

from typing import Any

from pydantic import BaseModel, ConfigDict

from climasync.base.config import EngineConfig
from climasync.base.scheduler import RefreshThrottle, Task, WriteCoalescer
from climasync.base.writer import StateWriter
from climasync.environments.session import SessionGuard


class Context(BaseModel):
    """Everything a component needs, constructed once per engine.

    The gateway and store are external collaborators typed as Any so
    test doubles and real implementations can be used alike.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    config: EngineConfig
    gateway: Any
    store: Any
    writer: StateWriter
    session: SessionGuard
    coalescer: WriteCoalescer
    throttle: RefreshThrottle

    @classmethod
    def create(
        cls,
        gateway: Any,
        store: Any,
        refresh: Task,
        config: EngineConfig | None = None,
    ) -> "Context":
        """Wire the shared collaborators around a gateway and store.

        Args:
            gateway: RemoteDeviceGateway implementation
            store: StateStore implementation
            refresh: Coroutine function performing a full refresh,
                invoked by the refresh throttle
            config: Engine configuration, defaults when omitted
        """
        config = config or EngineConfig()
        writer = StateWriter(store)
        return cls(
            config=config,
            gateway=gateway,
            store=store,
            writer=writer,
            session=SessionGuard(gateway, writer),
            coalescer=WriteCoalescer(config.debounce_s),
            throttle=RefreshThrottle(
                refresh,
                settle=config.refresh_settle_s,
                cooldown=config.refresh_cooldown_s,
            ),
        )
