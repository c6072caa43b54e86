from uuid import UUID

import pytest
from pydantic import ValidationError

from climasync import Entity


@pytest.mark.unit
class TestEntity:
    """Test cases for the Entity base class."""

    def test_entity_creation_with_defaults(self):
        """Test entity creation with default UUID generation."""
        entity = Entity(name="test_entity")

        assert entity.name == "test_entity"
        assert isinstance(entity.uuid, UUID)

    def test_entity_name_validation(self):
        """Empty names are rejected."""
        with pytest.raises(ValidationError):
            Entity(name="")

    def test_unique_id_gives_stable_uuid(self):
        """Entities built from the same remote id share their UUID."""
        first = Entity(unique_id="1234.1", name="Fan")
        second = Entity(unique_id="1234.1", name="Renamed")
        other = Entity(unique_id="1234.2", name="Fan")

        assert first.uuid == second.uuid
        assert first.uuid != other.uuid

    def test_explicit_uuid_wins(self):
        uuid = UUID("12345678-1234-5678-9abc-123456789abc")
        entity = Entity(unique_id="1234", uuid=uuid, name="Fan")
        assert entity.uuid == uuid

    def test_entity_immutability(self):
        entity = Entity(name="test")
        with pytest.raises(ValidationError):
            entity.name = "changed"

    def test_entity_repr(self):
        entity = Entity(name="test")
        assert repr(entity).startswith("Entity(")
        assert "name='test'" in repr(entity)
