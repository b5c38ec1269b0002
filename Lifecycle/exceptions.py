"""Custom exceptions for the Lifecycle module."""

from __future__ import annotations

from drivers.state import State


class LifecycleError(Exception):
    """Base exception for all Lifecycle errors."""


class InvalidMachineNameError(LifecycleError):
    """Raised when a machine name does not match the allowed pattern."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(
            f"Invalid machine name {name!r}: must start with a letter or "
            "digit and contain only letters, digits, '-' and '.'"
        )


class AlreadyInStateError(LifecycleError):
    """Raised when a transition is requested toward the current state."""

    def __init__(self, machine_name: str, state: State) -> None:
        self.machine_name = machine_name
        self.state = state
        super().__init__(
            f'Machine "{machine_name}" is already {str(state).lower()}.'
        )


class PollTimeoutError(LifecycleError, TimeoutError):
    """Raised when a polled condition never became true within budget."""

    def __init__(
        self, attempts: int, last_error: BaseException | None = None
    ) -> None:
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(f"Maximum number of retries ({attempts}) exceeded")


class NotRunningError(LifecycleError):
    """Raised when an operation requires a running machine."""

    def __init__(self, message: str = "Error: machine must be running to upgrade.") -> None:
        super().__init__(message)


class MetadataValidationError(LifecycleError):
    """Raised when persisted machine metadata fails schema validation."""

    def __init__(
        self,
        errors: list[str],
        message: str = "Metadata validation failed",
    ) -> None:
        self.errors = errors
        super().__init__(f"{message}: {'; '.join(errors)}")


class MachineLockError(LifecycleError):
    """Raised when the per-machine lock cannot be acquired."""
