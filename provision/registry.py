"""Registry of provisioner factories and detection against a live machine.

Detection reads ``/etc/os-release`` over SSH, hands the parsed result to
each registered provisioner in registration order, and returns the first
one that reports itself compatible.
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable

from drivers import run_ssh_command_from_driver
from provision import ProvisionerDetectionError
from provision.os_release import parse_os_release
from ssh import SSHClientError, SSHCommandError
from ssh.external_client import DEFAULT_CONNECT_TIMEOUT

if TYPE_CHECKING:
    from drivers import Driver
    from provision import Provisioner

logger = logging.getLogger(__name__)

ProvisionerFactory = Callable[["Driver"], "Provisioner"]
# Called as run_command(driver, command, connect_timeout=seconds).
CommandRunner = Callable[..., str]

OS_RELEASE_COMMAND = "cat /etc/os-release"


class ProvisionerRegistry:
    """Ordered mapping of provisioner name -> factory."""

    def __init__(self, run_command: CommandRunner = run_ssh_command_from_driver) -> None:
        self._factories: dict[str, ProvisionerFactory] = {}
        self._run_command = run_command

    def register(self, name: str, factory: ProvisionerFactory) -> None:
        """Register *factory* under *name*, replacing any previous one."""
        self._factories[name] = factory

    def unregister(self, name: str) -> None:
        self._factories.pop(name, None)

    def names(self) -> list[str]:
        return list(self._factories)

    def detect(
        self, driver: Driver, *, connect_timeout: int = DEFAULT_CONNECT_TIMEOUT
    ) -> Provisioner:
        """Return the first provisioner compatible with *driver*'s OS.

        *connect_timeout* bounds the SSH connection that reads os-release.

        Raises:
            ProvisionerDetectionError: If the OS cannot be read or no
                registered provisioner is compatible.
        """
        logger.info("Detecting the provisioner...")
        try:
            output = self._run_command(
                driver, OS_RELEASE_COMMAND, connect_timeout=connect_timeout
            )
        except (SSHClientError, SSHCommandError) as exc:
            raise ProvisionerDetectionError(
                f"Error reading os-release over SSH: {exc}"
            ) from exc

        info = parse_os_release(output)
        for name, factory in self._factories.items():
            provisioner = factory(driver)
            provisioner.set_os_release_info(info)
            if provisioner.compatible_with_host():
                logger.debug("Provisioner %s matches %s", name, info.id or "unknown OS")
                return provisioner

        raise ProvisionerDetectionError(
            f"No provisioner found for this machine (os id={info.id!r})"
        )


default_registry = ProvisionerRegistry()


def register_provisioner(name: str, factory: ProvisionerFactory) -> None:
    """Register *factory* with the process-wide default registry."""
    default_registry.register(name, factory)


def detect_provisioner(
    driver: Driver, *, connect_timeout: int = DEFAULT_CONNECT_TIMEOUT
) -> Provisioner:
    """Detect a provisioner for *driver* using the default registry."""
    return default_registry.detect(driver, connect_timeout=connect_timeout)
