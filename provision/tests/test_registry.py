"""Tests for provisioner registration and detection."""
from __future__ import annotations

from typing import Any, Callable

import pytest

from drivers.fakedriver import FakeDriver
from provision import (
    Provisioner,
    ProvisionerDetectionError,
    ProvisionerRegistry,
    default_registry,
    detect_provisioner,
    register_provisioner,
)
from provision.fake import FakeProvisioner
from provision.registry import OS_RELEASE_COMMAND
from ssh import SSHClientError, SSHCommandError
from ssh.external_client import DEFAULT_CONNECT_TIMEOUT

UBUNTU = 'NAME="Ubuntu"\nID=ubuntu\nID_LIKE=debian\nVERSION_ID="22.04"\n'


class _Runner:
    def __init__(self, output: str = UBUNTU, error: Exception | None = None) -> None:
        self.output = output
        self.error = error
        self.calls: list[tuple[Any, str]] = []
        self.timeouts: list[int] = []

    def __call__(self, driver: Any, command: str, *, connect_timeout: int) -> str:
        self.calls.append((driver, command))
        self.timeouts.append(connect_timeout)
        if self.error is not None:
            raise self.error
        return self.output


def _factory(
    ids: list[str] | None, created: list[FakeProvisioner] | None = None
) -> Callable[[Any], FakeProvisioner]:
    def make(driver: Any) -> FakeProvisioner:
        p = FakeProvisioner(driver, compatible_ids=ids)
        if created is not None:
            created.append(p)
        return p

    return make


class TestProvisionerRegistry:
    def test_register_and_names(self) -> None:
        reg = ProvisionerRegistry(run_command=_Runner())
        reg.register("ubuntu", _factory(["ubuntu"]))
        reg.register("centos", _factory(["centos"]))
        assert reg.names() == ["ubuntu", "centos"]
        reg.unregister("ubuntu")
        assert reg.names() == ["centos"]

    def test_detects_first_compatible(self) -> None:
        runner = _Runner()
        created: list[FakeProvisioner] = []
        reg = ProvisionerRegistry(run_command=runner)
        reg.register("centos", _factory(["centos"], created))
        reg.register("ubuntu", _factory(["ubuntu"], created))
        reg.register("generic", _factory(None, created))

        driver = FakeDriver()
        provisioner = reg.detect(driver)

        assert provisioner is created[1]
        assert len(created) == 2
        assert provisioner.driver is driver
        info = provisioner.get_os_release_info()
        assert info is not None and info.id == "ubuntu"
        assert runner.calls == [(driver, OS_RELEASE_COMMAND)]
        assert runner.timeouts == [DEFAULT_CONNECT_TIMEOUT]

    def test_connect_timeout_reaches_runner(self) -> None:
        runner = _Runner()
        reg = ProvisionerRegistry(run_command=runner)
        reg.register("generic", _factory(None))
        reg.detect(FakeDriver(), connect_timeout=4)
        assert runner.timeouts == [4]

    def test_detected_provisioner_satisfies_protocol(self) -> None:
        reg = ProvisionerRegistry(run_command=_Runner())
        reg.register("generic", _factory(None))
        assert isinstance(reg.detect(FakeDriver()), Provisioner)

    def test_no_match(self) -> None:
        reg = ProvisionerRegistry(run_command=_Runner())
        reg.register("centos", _factory(["centos"]))
        with pytest.raises(ProvisionerDetectionError, match="No provisioner found"):
            reg.detect(FakeDriver())

    def test_empty_registry(self) -> None:
        reg = ProvisionerRegistry(run_command=_Runner())
        with pytest.raises(ProvisionerDetectionError):
            reg.detect(FakeDriver())

    @pytest.mark.parametrize(
        "error",
        [SSHClientError("no ssh binary"), SSHCommandError("cat /etc/os-release", 255, "")],
    )
    def test_ssh_failure_becomes_detection_error(self, error: Exception) -> None:
        reg = ProvisionerRegistry(run_command=_Runner(error=error))
        reg.register("generic", _factory(None))
        with pytest.raises(ProvisionerDetectionError) as exc_info:
            reg.detect(FakeDriver())
        assert exc_info.value.__cause__ is error

    def test_other_errors_propagate(self) -> None:
        reg = ProvisionerRegistry(run_command=_Runner(error=RuntimeError("driver broke")))
        with pytest.raises(RuntimeError, match="driver broke"):
            reg.detect(FakeDriver())


class TestDefaultRegistry:
    def test_module_level_helpers(self, monkeypatch: pytest.MonkeyPatch) -> None:
        runner = _Runner()
        monkeypatch.setattr(default_registry, "_factories", {})
        monkeypatch.setattr(default_registry, "_run_command", runner)

        register_provisioner("ubuntu", _factory(["ubuntu"]))
        assert default_registry.names() == ["ubuntu"]
        provisioner = detect_provisioner(FakeDriver(), connect_timeout=6)
        assert isinstance(provisioner, FakeProvisioner)
        assert runner.timeouts == [6]
