"""Driver capability interface: what the lifecycle core needs from a backend."""
from __future__ import annotations

from typing import Protocol, runtime_checkable

from drivers.state import State


class DriverError(Exception):
    """Base class for errors raised by driver implementations."""


@runtime_checkable
class Driver(Protocol):
    """Common interface for machine backends (hypervisors / cloud APIs).

    Mechanical actions (``start``, ``stop``, ``kill``) may return before the
    new state is observable; confirming the transition is the caller's job.
    """

    def driver_name(self) -> str:
        """Short name of the backend, e.g. ``virtualbox``."""
        ...

    def get_state(self) -> State:
        """Return the current observed state.  Should be cheap."""
        ...

    def start(self) -> None:
        ...

    def stop(self) -> None:
        ...

    def kill(self) -> None:
        ...

    def get_ssh_hostname(self) -> str:
        ...

    def get_ssh_port(self) -> int:
        ...

    def get_ssh_username(self) -> str:
        ...

    def get_ssh_key_path(self) -> str:
        ...

    def get_url(self) -> str:
        """Return the container engine endpoint, e.g. ``tcp://1.2.3.4:2376``."""
        ...


from drivers.utils import machine_in_state, run_ssh_command_from_driver  # noqa: E402

__all__ = [
    "Driver",
    "DriverError",
    "State",
    "machine_in_state",
    "run_ssh_command_from_driver",
]
