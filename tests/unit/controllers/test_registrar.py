"""Tests for the topology registrar."""

import pytest

from climasync import MemoryStore, StoreError, TopologyRegistrar
from climasync.base.layout import DEVICE_TREE, PORT_TREE

from tests.unit.mocks import DEVICE_ID, make_context


@pytest.mark.unit
class TestTopologyRegistrar:
    """Test idempotent node tree creation."""

    async def test_adapter_nodes(self, context, store):
        registrar = TopologyRegistrar(context=context)
        await registrar.register_adapter()

        assert store.get_spec("info.connection").role == "indicator.connected"
        assert store.get_spec("devices").kind == "folder"

    async def test_device_tree(self, context, store):
        registrar = TopologyRegistrar(context=context)
        await registrar.register_device(DEVICE_ID, "Grow Tent")

        base = f"devices.{DEVICE_ID}"
        device = store.get_spec(base)
        assert device.kind == "device"
        assert device.name == "Grow Tent"
        assert store.has_node(f"{base}.sensors.temperature")
        assert store.get_spec(f"{base}.settings.temperatureUnit").write is False
        assert store.get_spec(f"{base}.settings.outsideTemperature").states == (
            "Neutral",
            "Lower",
            "Higher",
        )
        assert store.node_count() == len(DEVICE_TREE) + 1

    async def test_port_tree(self, context, store):
        registrar = TopologyRegistrar(context=context)
        await registrar.register_port(DEVICE_ID, 1, "Fan")

        base = f"devices.{DEVICE_ID}.ports.1"
        assert store.get_spec(base).kind == "channel"
        assert store.get_spec(base).name == "Fan"
        assert store.get_spec(f"{base}.mode.active").states[0] == "Off"
        speed = store.get_spec(f"{base}.mode.onSpeed")
        assert (speed.min, speed.max, speed.write) == (0, 10, True)
        assert store.get_spec(f"{base}.mode.vpd.target").max == 9.9
        assert store.get_spec(f"{base}.settings.deviceType").states[6] == "Fan"
        assert store.node_count() == len(PORT_TREE) + 1

    async def test_registration_is_idempotent(self, context, store):
        registrar = TopologyRegistrar(context=context)
        original = store.ensure_node
        calls = []

        async def counting(path, spec):
            calls.append(path)
            return await original(path, spec)

        store.ensure_node = counting
        await registrar.register_device(DEVICE_ID, "Grow Tent")
        first = len(calls)
        await registrar.register_device(DEVICE_ID, "Grow Tent")

        assert first == len(DEVICE_TREE) + 1
        assert len(calls) == first
        assert f"devices.{DEVICE_ID}" in registrar.created_paths

    async def test_existing_nodes_are_kept(self, context, store):
        """Nodes from an earlier run are not recreated."""
        await TopologyRegistrar(context=context).register_port(DEVICE_ID, 1)
        await store.write(f"devices.{DEVICE_ID}.ports.1.mode.onSpeed", 7, True)

        await TopologyRegistrar(context=context).register_port(DEVICE_ID, 1)

        assert store.get_value(f"devices.{DEVICE_ID}.ports.1.mode.onSpeed") == 7

    async def test_store_failure_is_isolated(self, caplog):
        """One failing node does not stop its siblings."""
        store = MemoryStore()
        original = store.ensure_node

        async def flaky(path, spec):
            if path.endswith("sensors.humidity"):
                raise StoreError("disk full")
            return await original(path, spec)

        store.ensure_node = flaky
        registrar = TopologyRegistrar(context=make_context(store=store))

        await registrar.register_device(DEVICE_ID)

        assert not store.has_node(f"devices.{DEVICE_ID}.sensors.humidity")
        assert store.has_node(f"devices.{DEVICE_ID}.sensors.vpd")
        assert "registered with 1 failed nodes" in caplog.text

        # The failed node is retried on the next registration.
        store.ensure_node = original
        await registrar.register_device(DEVICE_ID)
        assert store.has_node(f"devices.{DEVICE_ID}.sensors.humidity")

    async def test_default_names(self, context, store):
        registrar = TopologyRegistrar(context=context)
        await registrar.register_device(DEVICE_ID)
        await registrar.register_port(DEVICE_ID, 3)

        assert store.get_spec(f"devices.{DEVICE_ID}").name == DEVICE_ID
        assert store.get_spec(f"devices.{DEVICE_ID}.ports.3").name == "Port 3"
