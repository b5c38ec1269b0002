"""SSH session handles for reaching a machine."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable


class SSHClientError(Exception):
    """Raised when an SSH client cannot be created."""


class SSHCommandError(Exception):
    """Raised when a remote command exits with a non-zero status."""

    def __init__(self, command: str, exit_status: int, output: str) -> None:
        self.command = command
        self.exit_status = exit_status
        self.output = output
        super().__init__(
            f"ssh command error: command: {command} "
            f"exit status: {exit_status} output: {output}"
        )


@dataclass(frozen=True)
class Auth:
    """Authentication material for an SSH session."""

    keys: list[str] = field(default_factory=list)
    passwords: list[str] = field(default_factory=list)


@runtime_checkable
class Client(Protocol):
    """Common interface for SSH session implementations."""

    def output(self, command: str) -> str:
        """Run *command* remotely and return its combined output."""
        ...

    def shell(self, *args: str) -> None:
        """Open an interactive shell, or run *args* attached to the terminal."""
        ...


from ssh.external_client import ExternalClient, new_client  # noqa: E402

__all__ = [
    "Auth",
    "Client",
    "ExternalClient",
    "SSHClientError",
    "SSHCommandError",
    "new_client",
]
