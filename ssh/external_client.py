"""SSH client that shells out to the system ``ssh`` binary."""
from __future__ import annotations

import logging
import shutil
import subprocess
from typing import TYPE_CHECKING

from ssh import SSHClientError, SSHCommandError

if TYPE_CHECKING:
    from ssh import Auth

logger = logging.getLogger(__name__)

DEFAULT_CONNECT_TIMEOUT = 10

# Non-interactive defaults: machines are recreated often, so host keys
# are never pinned and user ssh config is ignored.
_BASE_OPTIONS = [
    "-F", "/dev/null",
    "-o", "ConnectionAttempts=3",
    "-o", "ControlMaster=no",
    "-o", "ControlPath=none",
    "-o", "LogLevel=quiet",
    "-o", "PasswordAuthentication=no",
    "-o", "ServerAliveInterval=60",
    "-o", "StrictHostKeyChecking=no",
    "-o", "UserKnownHostsFile=/dev/null",
]


class ExternalClient:
    """Run commands through an external ``ssh`` executable.

    Parameters
    ----------
    binary_path:
        Absolute path of the ``ssh`` executable.
    user, host, port:
        Connection target.
    auth:
        Key material; each key becomes one ``-i`` argument.
    connect_timeout:
        Seconds passed as ``ConnectTimeout``.
    """

    def __init__(
        self,
        binary_path: str,
        user: str,
        host: str,
        port: int,
        auth: Auth,
        connect_timeout: int = DEFAULT_CONNECT_TIMEOUT,
    ) -> None:
        self.binary_path = binary_path
        self.user = user
        self.host = host
        self.port = port
        self.auth = auth
        self.connect_timeout = connect_timeout

    @property
    def base_args(self) -> list[str]:
        """Arguments shared by every invocation, excluding the command."""
        args = [self.binary_path, *_BASE_OPTIONS]
        args += ["-o", f"ConnectTimeout={self.connect_timeout}"]
        if self.auth.keys:
            args += ["-o", "IdentitiesOnly=yes"]
        for key in self.auth.keys:
            args += ["-i", key]
        args += ["-p", str(self.port), f"{self.user}@{self.host}"]
        return args

    def output(self, command: str) -> str:
        args = [*self.base_args, command]
        logger.debug("Running %s", " ".join(args))
        proc = subprocess.run(
            args,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            check=False,
        )
        if proc.returncode != 0:
            raise SSHCommandError(command, proc.returncode, proc.stdout)
        return proc.stdout

    def shell(self, *args: str) -> None:
        argv = [*self.base_args, *args]
        proc = subprocess.run(argv, check=False)
        if proc.returncode != 0:
            raise SSHCommandError(" ".join(args), proc.returncode, "")


def new_client(
    user: str,
    host: str,
    port: int,
    auth: Auth,
    *,
    connect_timeout: int = DEFAULT_CONNECT_TIMEOUT,
) -> ExternalClient:
    """Return an SSH client for ``user@host:port``.

    Raises SSHClientError when no ``ssh`` executable is on PATH.
    """
    binary = shutil.which("ssh")
    if binary is None:
        raise SSHClientError("Cannot find an ssh executable on PATH")
    return ExternalClient(
        binary, user, host, port, auth, connect_timeout=connect_timeout
    )
