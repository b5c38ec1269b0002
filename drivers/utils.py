"""Helpers built on top of the :class:`~drivers.Driver` interface."""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable

from drivers.state import State
from ssh import Auth, Client, new_client
from ssh.external_client import DEFAULT_CONNECT_TIMEOUT

if TYPE_CHECKING:
    from drivers import Driver

logger = logging.getLogger(__name__)


def machine_in_state(driver: Driver, desired: State) -> Callable[[], bool]:
    """Return a predicate reporting whether *driver* is in *desired* state.

    The predicate only queries the driver.  Query errors are raised to the
    caller, which decides whether they mean "not yet" or a failure.
    """

    def _in_state() -> bool:
        return driver.get_state() == desired

    return _in_state


def get_ssh_client_from_driver(
    driver: Driver, *, connect_timeout: int = DEFAULT_CONNECT_TIMEOUT
) -> Client:
    """Build an SSH client from the connection details *driver* reports.

    The hostname is looked up before the port; the first failing lookup
    propagates unchanged.
    """
    address = driver.get_ssh_hostname()
    port = driver.get_ssh_port()
    auth = Auth(keys=[driver.get_ssh_key_path()])
    return new_client(
        driver.get_ssh_username(), address, port, auth,
        connect_timeout=connect_timeout,
    )


def run_ssh_command_from_driver(
    driver: Driver, command: str, *, connect_timeout: int = DEFAULT_CONNECT_TIMEOUT
) -> str:
    """Run *command* on the machine behind *driver* and return its output."""
    client = get_ssh_client_from_driver(driver, connect_timeout=connect_timeout)
    logger.debug("About to run SSH command: %s", command)
    output = client.output(command)
    logger.debug("SSH command output: %s", output)
    return output
