"""Collaborators outside the engine: the remote gateway and its session."""

from climasync.environments.gateway import RemoteDeviceGateway
from climasync.environments.session import SessionGuard

__all__ = ["RemoteDeviceGateway", "SessionGuard"]
