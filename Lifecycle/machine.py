"""Machine: lifecycle operations for one managed machine.

Every transition follows the same order: guard against the target state,
dispatch the driver action, then poll until the driver reports the
target state.  Composite operations chain these cycles strictly in
sequence.  Nothing here locks; callers serialize operations on one
machine (see :mod:`Lifecycle.machine_lock`).
"""

from __future__ import annotations

import re
from functools import lru_cache, partial
from typing import Any, Callable

from drivers import Driver, State, machine_in_state
from drivers.utils import get_ssh_client_from_driver, run_ssh_command_from_driver
from engine import docker_version
from provision import PackageAction, Provisioner, ServiceAction, detect_provisioner
from ssh import Client

from .config import LifecycleConfig
from .exceptions import AlreadyInStateError, InvalidMachineNameError, NotRunningError
from .guard import ensure_not_in_state, is_in_state
from .logger import get_logger
from .metadata_validator import validate_metadata
from .models import CONFIG_VERSION, AuthOptions, HostOptions, Metadata, SwarmOptions
from .poller import wait_for

VALID_NAME_PATTERN = r"[a-zA-Z0-9][a-zA-Z0-9\-\.]*"

ENGINE_PACKAGE = "docker"
ENGINE_SERVICE = "docker"

ProvisionerDetector = Callable[[Driver], Provisioner]
VersionQuery = Callable[["Machine"], str]


@lru_cache(maxsize=1)
def _name_pattern() -> re.Pattern[str]:
    return re.compile(VALID_NAME_PATTERN)


def validate_machine_name(name: str) -> bool:
    """True if *name* starts alphanumeric and continues with [A-Za-z0-9.-]."""
    return _name_pattern().fullmatch(name) is not None


class Machine:
    """One machine and the driver that owns its real resource."""

    def __init__(
        self,
        name: str,
        driver: Driver,
        host_options: HostOptions | None = None,
        *,
        config_version: int = CONFIG_VERSION,
        config: LifecycleConfig | None = None,
        provisioner_detector: ProvisionerDetector | None = None,
        version_query: VersionQuery | None = None,
    ) -> None:
        """Initialize Machine.

        Args:
            name: Machine name; validated and immutable afterwards.
            driver: Backend exclusively owned by this machine.
            host_options: Options snapshot; defaults to empty options.
            config_version: Metadata format version this machine came from.
            config: Polling / timeout settings.
            provisioner_detector: Replaces provisioner detection (for testing).
            version_query: Replaces the engine version probe (for testing).

        Raises:
            InvalidMachineNameError: If *name* is not a valid machine name.
        """
        if not validate_machine_name(name):
            raise InvalidMachineNameError(name)
        self._name = name
        self.driver = driver
        self.host_options = host_options or HostOptions()
        self.config_version = config_version
        self.config = config or LifecycleConfig()
        self._detect_provisioner = provisioner_detector or partial(
            detect_provisioner,
            connect_timeout=self.config.ssh_connect_timeout_seconds,
        )
        self._version_query = version_query
        self.log = get_logger(name)

    @classmethod
    def from_metadata(
        cls, name: str, driver: Driver, raw: dict[str, Any], **kwargs: Any
    ) -> Machine:
        """Build a machine from a persisted metadata dict.

        Raises:
            MetadataValidationError: If *raw* does not match the schema.
        """
        validate_metadata(raw)
        metadata = Metadata.model_validate(raw)
        return cls(
            name,
            driver,
            metadata.host_options,
            config_version=metadata.config_version,
            **kwargs,
        )

    @staticmethod
    def validate_name(name: str) -> bool:
        """Report whether *name* is acceptable as a machine name."""
        return validate_machine_name(name)

    @property
    def name(self) -> str:
        """Name given at construction; read-only."""
        return self._name

    @property
    def driver_name(self) -> str:
        """Name the driver reports for itself."""
        return self.driver.driver_name()

    def metadata(self) -> Metadata:
        """Snapshot of what a store should persist for this machine."""
        return Metadata(
            config_version=self.config_version,
            driver_name=self.driver_name,
            host_options=self.host_options,
        )

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def _run_action_for_state(
        self, action: Callable[[], None], desired: State, operation: str
    ) -> None:
        ensure_not_in_state(self._name, self.driver, desired)
        self.log.debug("Dispatching %s", operation, extra={"operation": operation})
        action()
        self._wait_for_state(desired)
        self.log.info("Machine is %s", str(desired).lower(), extra={"operation": operation})

    def _wait_for_state(self, desired: State) -> None:
        wait_for(machine_in_state(self.driver, desired), self.config)

    def start(self) -> None:
        """Start the machine and wait until it is running.

        Raises:
            AlreadyInStateError: If it is already running.
            PollTimeoutError: If it never reports running.
        """
        self._run_action_for_state(self.driver.start, State.RUNNING, "start")

    def stop(self) -> None:
        """Gracefully stop the machine and wait until it is stopped."""
        self._run_action_for_state(self.driver.stop, State.STOPPED, "stop")

    def kill(self) -> None:
        """Forcefully stop the machine and wait until it is stopped."""
        self._run_action_for_state(self.driver.kill, State.STOPPED, "kill")

    def restart(self) -> None:
        """Stop the machine if running, then start it again.

        A machine found already stopped during the stop phase is not an
        error.  Every other failure aborts the restart where it happened.
        """
        if is_in_state(self.driver, State.RUNNING):
            try:
                self.stop()
            except AlreadyInStateError:
                self.log.info("Machine already stopped", extra={"operation": "restart"})
            self._wait_for_state(State.STOPPED)

        self.start()
        self._wait_for_state(State.RUNNING)

    def upgrade(self) -> None:
        """Upgrade the container engine in place and restart it.

        Raises:
            NotRunningError: If the machine is not running.
        """
        if self.driver.get_state() != State.RUNNING:
            raise NotRunningError()

        provisioner = self._detect_provisioner(self.driver)

        self.log.info("Upgrading docker...", extra={"operation": "upgrade"})
        provisioner.package(ENGINE_PACKAGE, PackageAction.UPGRADE)

        self.log.info("Restarting docker...", extra={"operation": "upgrade"})
        provisioner.service(ENGINE_SERVICE, ServiceAction.RESTART)

    def configure_auth(self) -> None:
        """Re-issue TLS material by re-running provisioning without clustering."""
        provisioner = self._detect_provisioner(self.driver)
        provisioner.provision(
            SwarmOptions(),
            self.host_options.auth_options,
            self.host_options.engine_options,
        )

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    def url(self) -> str:
        return self.driver.get_url()

    def auth_options(self) -> AuthOptions:
        return self.host_options.auth_options

    def docker_version(self) -> str:
        """Ask the machine's engine for its version."""
        if self._version_query is not None:
            return self._version_query(self)
        return docker_version(self, timeout=self.config.engine_timeout_seconds)

    # ------------------------------------------------------------------
    # SSH
    # ------------------------------------------------------------------

    def run_ssh_command(self, command: str) -> str:
        """Run *command* on the machine and return its output."""
        return run_ssh_command_from_driver(
            self.driver, command,
            connect_timeout=self.config.ssh_connect_timeout_seconds,
        )

    def create_ssh_client(self) -> Client:
        """Build an SSH client from the connection details the driver reports."""
        return get_ssh_client_from_driver(
            self.driver, connect_timeout=self.config.ssh_connect_timeout_seconds
        )

    def __repr__(self) -> str:
        return f"Machine(name={self._name!r}, driver={self.driver_name!r})"
