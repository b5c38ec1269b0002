"""Pre-dispatch check that keeps redundant transitions off the driver."""
from __future__ import annotations

import logging

from drivers import Driver, State, machine_in_state

from .exceptions import AlreadyInStateError

logger = logging.getLogger(__name__)


def is_in_state(driver: Driver, state: State) -> bool:
    """Query *driver* once and report whether it is in *state*.

    A failed query is logged and counts as "not in state".
    """
    try:
        return machine_in_state(driver, state)()
    except Exception as exc:  # noqa: BLE001
        logger.warning("State query failed, assuming not %s: %s", state, exc)
        return False


def ensure_not_in_state(machine_name: str, driver: Driver, state: State) -> None:
    """Raise AlreadyInStateError if *driver* already reports *state*."""
    if is_in_state(driver, state):
        raise AlreadyInStateError(machine_name, state)
