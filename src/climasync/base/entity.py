"""Base entity class for identifiable objects."""

from typing import Any
from uuid import NAMESPACE_DNS, UUID, uuid4, uuid5

from pydantic import BaseModel, ConfigDict, Field


class Entity(BaseModel):
    """Base class for all identifiable objects in climasync.

    Provides identification through a UUID and a human-readable name.
    Entities mirroring remote objects derive their UUID from the remote
    identifier so the same controller or port keeps its UUID across
    polls and restarts.
    """

    model_config = ConfigDict(extra="allow", frozen=True)

    uuid: UUID = Field(
        default_factory=uuid4,
        description="Unique identifier for this entity",
    )
    name: str = Field(
        min_length=1, description="Human-readable name for this entity"
    )

    def __init__(self, unique_id: str | None = None, **data: Any) -> None:
        """Initialize Entity, optionally with a deterministic UUID.

        Args:
            unique_id: Remote identifier; when given, the UUID is
                derived from it instead of being random.
            **data: Field values for the entity
        """
        if unique_id is not None and "uuid" not in data:
            data["uuid"] = uuid5(
                NAMESPACE_DNS, f"{unique_id}.uuid.climasync"
            )
        super().__init__(**data)

    def __repr__(self) -> str:
        """Return string representation showing all fields."""
        fields = []
        for field_name, field_value in self.model_dump().items():
            if isinstance(field_value, str):
                fields.append(f"{field_name}='{field_value}'")
            else:
                fields.append(f"{field_name}={field_value}")

        return f"{self.__class__.__name__}({', '.join(fields)})"
