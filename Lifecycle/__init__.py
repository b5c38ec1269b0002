"""Lifecycle: guarded, confirmed state transitions for managed machines."""

__version__ = "1.0.0"

from .config import LifecycleConfig
from .exceptions import (
    AlreadyInStateError,
    InvalidMachineNameError,
    LifecycleError,
    MachineLockError,
    MetadataValidationError,
    NotRunningError,
    PollTimeoutError,
)
from .machine import Machine, validate_machine_name
from .machine_lock import MachineLock
from .models import (
    AuthOptions,
    EngineOptions,
    HostOptions,
    Metadata,
    SwarmOptions,
)
from .poller import wait_for, wait_for_specific

__all__ = [
    "AlreadyInStateError",
    "AuthOptions",
    "EngineOptions",
    "HostOptions",
    "InvalidMachineNameError",
    "LifecycleConfig",
    "LifecycleError",
    "Machine",
    "MachineLock",
    "MachineLockError",
    "Metadata",
    "MetadataValidationError",
    "NotRunningError",
    "PollTimeoutError",
    "SwarmOptions",
    "validate_machine_name",
    "wait_for",
    "wait_for_specific",
]
