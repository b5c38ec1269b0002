"""Shared fixtures for Lifecycle tests."""

from __future__ import annotations

import copy
from pathlib import Path
from typing import Any

import pytest

from drivers import State
from drivers.fakedriver import FakeDriver
from Lifecycle.config import LifecycleConfig
from Lifecycle.models import AuthOptions, EngineOptions, HostOptions

SAMPLE_METADATA: dict[str, Any] = {
    "config_version": 3,
    "driver_name": "virtualbox",
    "host_options": {
        "driver": "virtualbox",
        "memory": 2048,
        "disk": 20000,
        "engine_options": {
            "storage_driver": "overlay2",
            "labels": ["env=dev"],
            "tls_verify": True,
        },
        "swarm_options": {"is_swarm": False},
        "auth_options": {
            "cert_dir": "/home/user/.machine/certs",
            "ca_cert_path": "/home/user/.machine/certs/ca.pem",
            "client_cert_path": "/home/user/.machine/certs/cert.pem",
            "client_key_path": "/home/user/.machine/certs/key.pem",
            "server_cert_sans": ["dev.local"],
        },
    },
}


@pytest.fixture()
def fast_config(tmp_path: Path) -> LifecycleConfig:
    """Config with a short, sleep-free polling budget."""
    return LifecycleConfig(
        poll_max_attempts=5,
        poll_interval_seconds=0,
        lock_dir=tmp_path / "locks",
        lock_timeout_seconds=5.0,
    )


@pytest.fixture()
def host_options() -> HostOptions:
    return HostOptions(
        driver="fake",
        memory=1024,
        disk=10000,
        engine_options=EngineOptions(storage_driver="overlay2"),
        auth_options=AuthOptions(
            ca_cert_path="/certs/ca.pem",
            client_cert_path="/certs/cert.pem",
            client_key_path="/certs/key.pem",
        ),
    )


@pytest.fixture()
def running_driver() -> FakeDriver:
    return FakeDriver(State.RUNNING)


@pytest.fixture()
def stopped_driver() -> FakeDriver:
    return FakeDriver(State.STOPPED)


@pytest.fixture()
def sample_metadata() -> dict[str, Any]:
    """Return a valid metadata dict (deep copy)."""
    return copy.deepcopy(SAMPLE_METADATA)
