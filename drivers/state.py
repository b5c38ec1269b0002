"""Observable run condition of a machine, as reported by its driver."""
from __future__ import annotations

from enum import Enum


class State(str, Enum):
    """Lifecycle state of a machine.

    Values are the human-readable names drivers and users see, so
    ``str(State.RUNNING)`` is ``"Running"``.
    """

    NONE = ""
    RUNNING = "Running"
    PAUSED = "Paused"
    SAVED = "Saved"
    STOPPED = "Stopped"
    STOPPING = "Stopping"
    STARTING = "Starting"
    ERROR = "Error"
    TIMEOUT = "Timeout"

    def __str__(self) -> str:
        return self.value
