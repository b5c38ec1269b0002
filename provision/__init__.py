"""Provisioners: OS-specific delegates for package, service and TLS setup."""
from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

from provision.actions import PackageAction, ServiceAction
from provision.os_release import OsRelease, parse_os_release

if TYPE_CHECKING:
    from Lifecycle.models import AuthOptions, EngineOptions, SwarmOptions


class ProvisionerError(Exception):
    """Base class for errors raised by provisioners."""


class ProvisionerDetectionError(ProvisionerError):
    """Raised when no registered provisioner matches the machine."""


@runtime_checkable
class Provisioner(Protocol):
    """Common interface for OS-family provisioners."""

    def package(self, name: str, action: PackageAction) -> None:
        """Install, remove or upgrade package *name*."""
        ...

    def service(self, name: str, action: ServiceAction) -> None:
        """Start, stop, restart, enable or disable service *name*."""
        ...

    def provision(
        self,
        swarm_options: SwarmOptions,
        auth_options: AuthOptions,
        engine_options: EngineOptions,
    ) -> None:
        """Install and configure the engine, issuing TLS material."""
        ...

    def compatible_with_host(self) -> bool:
        """True if this provisioner handles the detected OS."""
        ...

    def set_os_release_info(self, info: OsRelease) -> None:
        ...

    def get_os_release_info(self) -> OsRelease | None:
        ...


from provision.registry import (  # noqa: E402
    ProvisionerRegistry,
    default_registry,
    detect_provisioner,
    register_provisioner,
)

__all__ = [
    "OsRelease",
    "PackageAction",
    "Provisioner",
    "ProvisionerDetectionError",
    "ProvisionerError",
    "ProvisionerRegistry",
    "ServiceAction",
    "default_registry",
    "detect_provisioner",
    "parse_os_release",
    "register_provisioner",
]
