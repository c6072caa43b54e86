"""The synchronization engine wiring all components together."""

from typing import Any

from pydantic import Field

from climasync.base.component import Component
from climasync.base.config import EngineConfig
from climasync.base.constants import CONTROLLER_PORT
from climasync.base.context import Context
from climasync.base.device import Device
from climasync.base.runner import PollingRunner
from climasync.controllers.device_settings import DeviceSettingsHandler
from climasync.controllers.mode import PortModeHandler
from climasync.controllers.port_settings import PortSettingsHandler
from climasync.controllers.reconciler import Reconciler
from climasync.controllers.registrar import TopologyRegistrar
from climasync.controllers.router import ChangeRouter


class SyncEngine(Component):
    """Keep a state store in sync with a remote controller service.

    On start the engine logs in, discovers devices, builds their node
    tree and performs a first refresh, then listens for user writes and
    refreshes periodically.  Periodic and write-triggered refreshes
    share one pending flag and never overlap.
    """

    name: str = Field(default="engine", min_length=1)

    def __init__(self, **data: Any) -> None:
        super().__init__(**data)
        context = self.context
        self._registrar = TopologyRegistrar(context=context)
        self._reconciler = Reconciler(context=context)
        self._router = ChangeRouter(
            context=context,
            mode=PortModeHandler(context=context),
            port_settings=PortSettingsHandler(context=context),
            device_settings=DeviceSettingsHandler(context=context),
        )
        self._runner = PollingRunner(
            interval_s=self.config.poll_interval_s, tick=self.poll
        )
        self._devices: dict[str, Device] = {}
        self._subscribed = False

    @classmethod
    def create(
        cls,
        gateway: Any,
        store: Any,
        config: EngineConfig | None = None,
        name: str = "engine",
    ) -> "SyncEngine":
        """Build an engine and its shared context.

        Args:
            gateway: RemoteDeviceGateway implementation
            store: StateStore implementation
            config: Engine configuration, defaults when omitted
            name: Instance name used in log records
        """
        engine: SyncEngine | None = None

        async def refresh() -> None:
            await engine.refresh()

        context = Context.create(gateway, store, refresh, config)
        engine = cls(name=name, context=context)
        return engine

    @property
    def registrar(self) -> TopologyRegistrar:
        return self._registrar

    @property
    def reconciler(self) -> Reconciler:
        return self._reconciler

    @property
    def router(self) -> ChangeRouter:
        return self._router

    @property
    def runner(self) -> PollingRunner:
        return self._runner

    @property
    def devices(self) -> dict[str, Device]:
        """Devices seen in the most recent refresh, by device id."""
        return dict(self._devices)

    async def start(self) -> None:
        """Connect, build the tree, subscribe to writes and start polling.

        A failed initial login or refresh is logged; the poller keeps
        retrying on its schedule.
        """
        await self._registrar.register_adapter()
        if await self.session.ensure_session():
            try:
                await self.context.throttle.run_now()
            except Exception:
                self._logger.exception("Initial refresh failed")
        else:
            self._logger.warning("Starting without a remote session")

        if not self._subscribed:
            self.context.store.subscribe(self._router.on_external_write)
            self._subscribed = True
        self._runner.start()

    async def stop(self) -> None:
        """Stop polling, ignore further user writes and drop unsent ones."""
        if self._subscribed:
            self.context.store.unsubscribe(self._router.on_external_write)
            self._subscribed = False
        await self._runner.stop()
        await self.context.coalescer.shutdown()
        await self.context.throttle.shutdown()
        self._logger.info("Engine %s stopped", self.name)

    async def poll(self) -> None:
        """One poll tick: re-establish the session if needed, then refresh."""
        if not await self.session.ensure_session():
            self._logger.warning("Not connected, skipping poll")
            return
        if not await self.context.throttle.run_now():
            self._logger.debug("Refresh in progress, poll absorbed")

    def request_refresh(self) -> bool:
        """Ask for a throttled refresh; False when one is already pending."""
        return self.context.throttle.request()

    async def register(self, device: Device) -> None:
        """Create the node tree of a device and its ports."""
        await self._registrar.register_device(device.device_id, device.name)
        if device.description:
            await self._registrar.register_device_description(device.device_id)
        for port in device.ports:
            await self._registrar.register_port(
                device.device_id, port.port_id, port.name
            )
        if device.device_id not in self._devices:
            self._logger.info(
                "Discovered device %s (%s) with %d ports",
                device.device_id,
                device.name,
                len(device.ports),
            )

    async def refresh(self) -> None:
        """Fetch all devices and reconcile them into the tree.

        Failures are isolated per device and per port.

        Raises:
            GatewayError: If the device list itself could not be fetched
        """
        snapshots = await self.session.call(self.gateway.list_devices)
        devices: dict[str, Device] = {}
        for snapshot in snapshots or []:
            try:
                device = Device.from_snapshot(snapshot)
            except Exception:
                self._logger.exception("Skipping malformed device entry")
                continue
            try:
                await self._refresh_device(device)
            except Exception:
                self._logger.exception(
                    "Refreshing device %s failed", device.device_id
                )
            devices[device.device_id] = device
        self._devices = devices

    async def _refresh_device(self, device: Device) -> None:
        await self.register(device)
        await self._reconciler.reconcile_device(device.device_id, device)
        # Controller settings first so ports see the temperature unit.
        try:
            record = await self.session.call(
                self.gateway.get_device_settings,
                device.device_id,
                CONTROLLER_PORT,
            )
            await self._reconciler.reconcile_advanced_settings(
                device.device_id, CONTROLLER_PORT, record or {}
            )
        except Exception:
            self._logger.exception(
                "Refreshing settings of device %s failed", device.device_id
            )
        for port in device.ports:
            try:
                await self._refresh_port(device, port.port_id)
            except Exception:
                self._logger.exception(
                    "Refreshing port %s.%s failed",
                    device.device_id,
                    port.port_id,
                )

    async def _refresh_port(self, device: Device, port_id: int) -> None:
        device_id = device.device_id
        await self._reconciler.reconcile_port(
            device_id, port_id, device.get_port(port_id)
        )
        mode = await self.session.call(
            self.gateway.get_port_mode_settings, device_id, port_id
        )
        await self._reconciler.reconcile_mode_settings(
            device_id, port_id, mode or {}
        )
        advanced = await self.session.call(
            self.gateway.get_device_settings, device_id, port_id
        )
        await self._reconciler.reconcile_advanced_settings(
            device_id, port_id, advanced or {}
        )
