"""Engine configuration."""

from collections.abc import Mapping
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

MIN_POLL_INTERVAL_S = 10.0


class FailurePolicy(str, Enum):
    """What happens to an optimistic value when its remote write fails."""

    KEEP_OPTIMISTIC = "keep_optimistic"
    REVERT = "revert"


class EngineConfig(BaseModel):
    """Timing and behaviour settings for a SyncEngine.

    Values are validated on construction; the poll interval is raised
    to the minimum the remote service tolerates rather than rejected.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    poll_interval_s: float = Field(
        default=30.0, description="Seconds between periodic refreshes"
    )
    debounce_s: float = Field(
        default=0.2, ge=0, description="Write coalescing window in seconds"
    )
    refresh_settle_s: float = Field(
        default=2.0,
        ge=0,
        description="Delay between a write and the refresh it triggers",
    )
    refresh_cooldown_s: float = Field(
        default=3.0,
        ge=0,
        description="Time the refresh-pending flag stays set after a "
        "write-triggered refresh",
    )
    default_on_speed: int = Field(
        default=5,
        ge=0,
        le=10,
        description="On-speed used when no previous value is known",
    )
    failure_policy: FailurePolicy = Field(
        default=FailurePolicy.KEEP_OPTIMISTIC,
        description="Handling of optimistic values after a failed write",
    )
    namespace: str = Field(
        default="",
        description="Instance prefix stripped from incoming node paths",
    )

    @field_validator("poll_interval_s")
    @classmethod
    def _clamp_poll_interval(cls, value: float) -> float:
        return max(value, MIN_POLL_INTERVAL_S)

    @field_validator("namespace")
    @classmethod
    def _strip_namespace(cls, value: str) -> str:
        return value.strip(".")

    @classmethod
    def from_mapping(cls, options: Mapping[str, Any]) -> "EngineConfig":
        """Build a config from a plain options mapping.

        Unset or None entries fall back to defaults.
        """
        return cls(**{k: v for k, v in options.items() if v is not None})
