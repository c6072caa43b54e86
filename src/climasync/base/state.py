"""Hierarchical state store interface and an in-memory implementation."""

import logging
from collections import deque
from collections.abc import Awaitable, Callable
from typing import Any, Literal, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict

from climasync.errors import StoreError

ChangeListener = Callable[[str, Any, bool], Awaitable[None]]


class NodeSpec(BaseModel):
    """Declared metadata of a node in the state tree.

    Channels, folders and device objects group states; only ``state``
    nodes carry values.  ``states`` restricts the value domain to a list
    of names or a mapping of raw values to labels.
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal["device", "channel", "folder", "state"] = "state"
    name: str
    type: Literal["string", "number", "boolean", "mixed"] = "mixed"
    role: str = "state"
    unit: str | None = None
    read: bool = True
    write: bool = False
    states: tuple[str, ...] | dict[int, str] | None = None
    min: float | None = None
    max: float | None = None


class StateNode(BaseModel):
    """A value in the store and whether it has been remotely confirmed."""

    model_config = ConfigDict(frozen=True)

    path: str
    value: Any = None
    acknowledged: bool = False


@runtime_checkable
class StateStore(Protocol):
    """The hierarchical, observable store the engine mirrors devices into.

    ``subscribe`` registers a listener for writes that originate outside
    the engine; writes made through ``write`` are not reported back.
    """

    async def ensure_node(self, path: str, spec: NodeSpec) -> bool:
        """Create the node if absent; return True when it was created."""
        ...

    async def write(self, path: str, value: Any, acknowledged: bool) -> None:
        ...

    async def read(self, path: str) -> StateNode | None:
        ...

    def subscribe(self, listener: ChangeListener) -> None:
        ...

    def unsubscribe(self, listener: ChangeListener) -> None:
        ...


class MemoryStore:
    """StateStore keeping nodes and values in dictionaries.

    Used by tests and embedding applications.  ``submit`` plays the part
    of an external consumer: it writes an unacknowledged value and
    notifies subscribers, like a user changing a node.  ``history``
    keeps only the most recent ``history_size`` writes.
    """

    def __init__(self, name: str = "memory", history_size: int = 1000) -> None:
        self.name = name
        self._logger = logging.getLogger(
            f"{self.__class__.__module__}.{self.__class__.__name__}."
            f"{name}"
        )
        self._specs: dict[str, NodeSpec] = {}
        self._values: dict[str, StateNode] = {}
        self._listeners: list[ChangeListener] = []
        self.history: deque[StateNode] = deque(maxlen=history_size)

    async def ensure_node(self, path: str, spec: NodeSpec) -> bool:
        if path in self._specs:
            return False
        self._specs[path] = spec
        self._logger.debug("Created %s node %s", spec.kind, path)
        return True

    async def write(self, path: str, value: Any, acknowledged: bool) -> None:
        spec = self._specs.get(path)
        if spec is None:
            raise StoreError(f"No node at {path}")
        if spec.kind != "state":
            raise StoreError(f"{path} is a {spec.kind}, not a state")
        node = StateNode(path=path, value=value, acknowledged=acknowledged)
        self._values[path] = node
        self.history.append(node)

    async def read(self, path: str) -> StateNode | None:
        return self._values.get(path)

    def subscribe(self, listener: ChangeListener) -> None:
        self._listeners.append(listener)

    def unsubscribe(self, listener: ChangeListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    async def submit(self, path: str, value: Any) -> None:
        """Write as an external consumer and notify subscribers."""
        await self.write(path, value, False)
        for listener in list(self._listeners):
            await listener(path, value, False)

    def get_spec(self, path: str) -> NodeSpec | None:
        return self._specs.get(path)

    def get_value(self, path: str) -> Any:
        node = self._values.get(path)
        return node.value if node else None

    def has_node(self, path: str) -> bool:
        return path in self._specs

    def node_paths(self) -> list[str]:
        return list(self._specs.keys())

    def node_count(self) -> int:
        return len(self._specs)

    def __repr__(self) -> str:
        return f"MemoryStore({self.node_count()} nodes)"
