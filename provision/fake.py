"""Recording provisioner for tests."""
from __future__ import annotations

from typing import TYPE_CHECKING, Any

from provision.actions import PackageAction, ServiceAction
from provision.os_release import OsRelease

if TYPE_CHECKING:
    from drivers import Driver
    from Lifecycle.models import AuthOptions, EngineOptions, SwarmOptions


class FakeProvisioner:
    """Provisioner that records calls instead of touching a machine.

    Parameters
    ----------
    driver:
        Driver the provisioner was created for (kept for inspection).
    compatible_ids:
        os-release ``ID`` values this provisioner accepts.  ``None`` accepts
        everything.
    errors:
        Maps a call name (``package``, ``service``, ``provision``) to the
        exception that call raises.
    """

    def __init__(
        self,
        driver: Driver | None = None,
        *,
        compatible_ids: list[str] | None = None,
        errors: dict[str, BaseException] | None = None,
    ) -> None:
        self.driver = driver
        self.compatible_ids = compatible_ids
        self.errors: dict[str, BaseException] = dict(errors or {})
        self.calls: list[tuple[str, Any]] = []
        self._os_release: OsRelease | None = None

    def package(self, name: str, action: PackageAction) -> None:
        self._record("package", (name, action))

    def service(self, name: str, action: ServiceAction) -> None:
        self._record("service", (name, action))

    def provision(
        self,
        swarm_options: SwarmOptions,
        auth_options: AuthOptions,
        engine_options: EngineOptions,
    ) -> None:
        self._record("provision", (swarm_options, auth_options, engine_options))

    def compatible_with_host(self) -> bool:
        if self.compatible_ids is None:
            return True
        info = self._os_release
        return info is not None and info.id in self.compatible_ids

    def set_os_release_info(self, info: OsRelease) -> None:
        self._os_release = info

    def get_os_release_info(self) -> OsRelease | None:
        return self._os_release

    @property
    def call_names(self) -> list[str]:
        return [name for name, _ in self.calls]

    def _record(self, name: str, args: Any) -> None:
        self.calls.append((name, args))
        err = self.errors.get(name)
        if err is not None:
            raise err
