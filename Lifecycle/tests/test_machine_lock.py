"""Tests for MachineLock."""

from __future__ import annotations

import threading
import time
from pathlib import Path

import pytest

from drivers import State
from drivers.fakedriver import FakeDriver
from Lifecycle.config import LifecycleConfig
from Lifecycle.exceptions import MachineLockError
from Lifecycle.machine import Machine
from Lifecycle.machine_lock import MachineLock


class TestMachineLockBasic:
    def test_acquire_and_release(self, tmp_path: Path) -> None:
        lock = MachineLock(tmp_path / "dev.lock", timeout=5.0)
        lock.acquire()
        assert lock.is_held
        lock.release()
        assert not lock.is_held

    def test_context_manager(self, tmp_path: Path) -> None:
        with MachineLock(tmp_path / "dev.lock", timeout=5.0) as lock:
            assert lock.is_held
        assert not lock.is_held

    def test_reentrant_acquire(self, tmp_path: Path) -> None:
        lock = MachineLock(tmp_path / "dev.lock", timeout=5.0)
        lock.acquire()
        lock.acquire()
        assert lock.is_held
        lock.release()
        assert lock.is_held
        lock.release()
        assert not lock.is_held

    def test_nested_context_keeps_outer_hold(self, tmp_path: Path) -> None:
        lock_path = tmp_path / "dev.lock"
        lock = MachineLock(lock_path, timeout=5.0)
        with lock:
            with lock:
                pass
            assert lock.is_held
            with pytest.raises(MachineLockError):
                MachineLock(lock_path, timeout=0.2).acquire()
        assert not lock.is_held

    def test_release_when_not_held(self, tmp_path: Path) -> None:
        MachineLock(tmp_path / "dev.lock", timeout=5.0).release()

    def test_creates_lock_dir(self, tmp_path: Path) -> None:
        lock_path = tmp_path / "a" / "b" / "dev.lock"
        with MachineLock(lock_path, timeout=5.0):
            assert lock_path.exists()

    def test_for_machine_uses_config(self, fast_config: LifecycleConfig) -> None:
        with MachineLock.for_machine("dev", fast_config) as lock:
            assert lock.is_held
        assert fast_config.lock_path("dev").exists()

    def test_releases_on_exception(self, tmp_path: Path) -> None:
        lock_path = tmp_path / "dev.lock"
        with pytest.raises(RuntimeError, match="boom"):
            with MachineLock(lock_path, timeout=5.0):
                raise RuntimeError("boom")

        with MachineLock(lock_path, timeout=2.0) as again:
            assert again.is_held


class TestMachineLockConcurrency:
    def test_threads_serialize(self, tmp_path: Path) -> None:
        lock_path = tmp_path / "dev.lock"
        counter = [0]

        def worker() -> None:
            with MachineLock(lock_path, timeout=15.0):
                val = counter[0]
                time.sleep(0.01)
                counter[0] = val + 1

        threads = [threading.Thread(target=worker) for _ in range(5)]
        for t in threads:
            t.start()
        for t in threads:
            t.join(timeout=30)

        assert counter[0] == 5

    def test_contender_times_out(self, tmp_path: Path) -> None:
        lock_path = tmp_path / "dev.lock"
        holder = MachineLock(lock_path, timeout=5.0)
        holder.acquire()
        try:
            contender = MachineLock(lock_path, timeout=0.3)
            started = time.monotonic()
            with pytest.raises(MachineLockError):
                contender.acquire()
            assert time.monotonic() - started < 3.0
            assert not contender.is_held
        finally:
            holder.release()

        with MachineLock(lock_path, timeout=2.0) as again:
            assert again.is_held

    def test_contender_in_thread_times_out(self, tmp_path: Path) -> None:
        lock_path = tmp_path / "dev.lock"
        outcome: list[BaseException] = []

        def contend() -> None:
            try:
                MachineLock(lock_path, timeout=0.3).acquire()
            except MachineLockError as exc:
                outcome.append(exc)

        with MachineLock(lock_path, timeout=5.0):
            t = threading.Thread(target=contend)
            t.start()
            t.join(timeout=5)
            assert not t.is_alive()

        assert len(outcome) == 1

    def test_serialized_restarts(self, fast_config: LifecycleConfig) -> None:
        driver = FakeDriver(State.RUNNING)
        machine = Machine("dev", driver, config=fast_config)
        errors: list[BaseException] = []

        def worker() -> None:
            try:
                with MachineLock.for_machine("dev", fast_config):
                    machine.restart()
            except BaseException as exc:  # noqa: BLE001
                errors.append(exc)

        threads = [threading.Thread(target=worker) for _ in range(3)]
        for t in threads:
            t.start()
        for t in threads:
            t.join(timeout=30)

        assert errors == []
        assert driver.actions == ["stop", "start"] * 3
        assert driver.state == State.RUNNING
