"""Base class for engine components."""

import logging
from typing import Any

from pydantic import ConfigDict, Field

from climasync.base.config import EngineConfig
from climasync.base.context import Context
from climasync.base.entity import Entity
from climasync.base.writer import StateWriter
from climasync.environments.session import SessionGuard


class Component(Entity):
    """A named unit of the engine holding its shared Context.

    Components receive their collaborators explicitly through the
    context instead of reaching for module-level singletons, and each
    owns a logger named after its class and instance name.
    """

    model_config = ConfigDict(
        extra="allow", frozen=False, arbitrary_types_allowed=True
    )

    context: Context = Field(
        description="Shared collaborators of the owning engine"
    )

    def __init__(self, **data: Any) -> None:
        """Initialize component with a per-instance logger."""
        super().__init__(**data)
        self._logger = logging.getLogger(
            f"{self.__class__.__module__}."
            f"{self.__class__.__name__}."
            f"{self.name}"
        )

    @property
    def config(self) -> EngineConfig:
        return self.context.config

    @property
    def writer(self) -> StateWriter:
        return self.context.writer

    @property
    def session(self) -> SessionGuard:
        return self.context.session

    @property
    def gateway(self) -> Any:
        return self.context.gateway
