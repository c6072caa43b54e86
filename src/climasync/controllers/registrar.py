"""Idempotent creation of the node tree for devices and ports."""

from typing import Any

from pydantic import Field

from climasync.base.component import Component
from climasync.base.layout import (
    ADAPTER_TREE,
    DEVICE_DESCRIPTION,
    DEVICE_TREE,
    PORT_TREE,
    device_path,
    port_path,
)
from climasync.base.state import NodeSpec


class TopologyRegistrar(Component):
    """Materialize the static sub-tree of each discovered device and port.

    Created paths are remembered, so registering the same device or
    port again costs no store calls; the store's own create-if-absent
    semantics cover nodes that already existed before this process.
    A store failure on one node is logged and its siblings are still
    created.
    """

    name: str = Field(default="registrar", min_length=1)

    def __init__(self, **data: Any) -> None:
        super().__init__(**data)
        self._created: set[str] = set()

    @property
    def created_paths(self) -> frozenset[str]:
        return frozenset(self._created)

    async def _ensure(self, path: str, spec: NodeSpec) -> bool:
        if path in self._created:
            return True
        try:
            await self.context.store.ensure_node(path, spec)
        except Exception:
            self._logger.exception("Could not create node %s", path)
            return False
        self._created.add(path)
        return True

    async def _ensure_tree(
        self, base: str, tree: dict[str, NodeSpec]
    ) -> int:
        failures = 0
        for relative, spec in tree.items():
            if not await self._ensure(f"{base}.{relative}", spec):
                failures += 1
        return failures

    async def register_adapter(self) -> None:
        """Create the engine-level nodes such as ``info.connection``."""
        for path, spec in ADAPTER_TREE.items():
            await self._ensure(path, spec)

    async def register_device(
        self, device_id: str, device_name: str | None = None
    ) -> None:
        """Create the device object with its info, sensor and settings nodes."""
        base = device_path(device_id)
        await self._ensure(
            base, NodeSpec(kind="device", name=device_name or str(device_id))
        )
        failures = await self._ensure_tree(base, DEVICE_TREE)
        if failures:
            self._logger.warning(
                "Device %s registered with %d failed nodes",
                device_id,
                failures,
            )
        else:
            self._logger.debug("Registered device %s", device_id)

    async def register_device_description(self, device_id: str) -> None:
        relative, spec = DEVICE_DESCRIPTION
        await self._ensure(device_path(device_id, relative), spec)

    async def register_port(
        self, device_id: str, port_id: int, port_name: str | None = None
    ) -> None:
        """Create a port channel with its info, mode and settings nodes."""
        base = port_path(device_id, port_id)
        await self._ensure(
            base, NodeSpec(kind="channel", name=port_name or f"Port {port_id}")
        )
        failures = await self._ensure_tree(base, PORT_TREE)
        if failures:
            self._logger.warning(
                "Port %s.%s registered with %d failed nodes",
                device_id,
                port_id,
                failures,
            )
        else:
            self._logger.debug("Registered port %s.%s", device_id, port_id)
