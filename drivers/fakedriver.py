"""In-memory driver for tests and dry runs.

The fake keeps a current state that ``start``/``stop``/``kill`` update, and
can optionally replay a scripted sequence of ``get_state`` results first.
A script entry may be an exception instance, which ``get_state`` raises.
"""
from __future__ import annotations

from typing import Union

from drivers import DriverError
from drivers.state import State

ScriptEntry = Union[State, BaseException]

_ACTION_TARGETS = {
    "start": State.RUNNING,
    "stop": State.STOPPED,
    "kill": State.STOPPED,
}


class FakeDriver:
    """Scriptable :class:`~drivers.Driver` that records every call."""

    def __init__(
        self,
        state: State = State.STOPPED,
        *,
        script: list[ScriptEntry] | None = None,
        apply_actions: bool = True,
        errors: dict[str, BaseException] | None = None,
        name: str = "fake",
        ssh_hostname: str = "127.0.0.1",
        ssh_port: int = 22,
        ssh_username: str = "docker",
        ssh_key_path: str = "/tmp/fake/id_rsa",
        url: str = "tcp://127.0.0.1:2376",
    ) -> None:
        self.state = state
        self.script: list[ScriptEntry] = list(script or [])
        self.apply_actions = apply_actions
        self.errors: dict[str, BaseException] = dict(errors or {})
        self.calls: list[str] = []
        self.state_queries = 0
        self._name = name
        self._ssh_hostname = ssh_hostname
        self._ssh_port = ssh_port
        self._ssh_username = ssh_username
        self._ssh_key_path = ssh_key_path
        self._url = url

    # -- Driver interface -----------------------------------------------------

    def driver_name(self) -> str:
        return self._name

    def get_state(self) -> State:
        self.state_queries += 1
        if self.script:
            entry = self.script.pop(0)
            if isinstance(entry, BaseException):
                raise entry
            return entry
        return self.state

    def start(self) -> None:
        self._act("start")

    def stop(self) -> None:
        self._act("stop")

    def kill(self) -> None:
        self._act("kill")

    def get_ssh_hostname(self) -> str:
        self._check("get_ssh_hostname")
        return self._ssh_hostname

    def get_ssh_port(self) -> int:
        self._check("get_ssh_port")
        return self._ssh_port

    def get_ssh_username(self) -> str:
        return self._ssh_username

    def get_ssh_key_path(self) -> str:
        return self._ssh_key_path

    def get_url(self) -> str:
        self._check("get_url")
        return self._url

    # -- Test helpers ---------------------------------------------------------

    @property
    def actions(self) -> list[str]:
        """Mechanical actions issued so far, in order."""
        return [c for c in self.calls if c in _ACTION_TARGETS]

    def _act(self, action: str) -> None:
        self._check(action)
        if self.apply_actions:
            self.state = _ACTION_TARGETS[action]

    def _check(self, call: str) -> None:
        self.calls.append(call)
        err = self.errors.get(call)
        if err is not None:
            raise err


class FakeDriverError(DriverError):
    """Convenience error type for scripting driver failures."""
