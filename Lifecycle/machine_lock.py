"""Per-machine exclusive lock for callers that share machines across threads or processes.

Operations on one machine must not overlap; the Machine object does not
serialize itself, so callers wrap operations in this lock::

    with MachineLock.for_machine("dev", config):
        machine.restart()
"""

from __future__ import annotations

import logging
import os
import threading
from pathlib import Path
from types import TracebackType

import portalocker

from .config import LifecycleConfig
from .exceptions import MachineLockError

logger = logging.getLogger(__name__)


class MachineLock:
    """Exclusive lock on one machine name.

    threading.RLock serializes threads of this process; a portalocker file
    lock serializes processes.  Supports the context manager protocol.
    """

    def __init__(self, lock_path: Path, timeout: float = 30.0) -> None:
        self._lock_path = lock_path
        self._timeout = timeout
        self._mu = threading.RLock()
        self._file_lock: portalocker.Lock | None = None
        self._depth = 0

    @classmethod
    def for_machine(
        cls, machine_name: str, config: LifecycleConfig | None = None
    ) -> MachineLock:
        cfg = config or LifecycleConfig()
        return cls(cfg.lock_path(machine_name), timeout=cfg.lock_timeout_seconds)

    def acquire(self) -> None:
        """Block until the lock is held or the timeout elapses.

        Nested acquires from the holding thread only deepen the hold; the
        file lock is released once every acquire has been matched by a
        release.
        """
        if not self._mu.acquire(timeout=self._timeout):
            raise MachineLockError(
                f"Thread lock timeout after {self._timeout}s on {self._lock_path}"
            )

        if self._depth:
            # Re-entrant acquire from the holding thread.
            self._depth += 1
            self._mu.release()
            return

        try:
            self._lock_path.parent.mkdir(parents=True, exist_ok=True)
            # LOCK_NB lets portalocker retry until the timeout instead of blocking.
            file_lock = portalocker.Lock(
                str(self._lock_path),
                mode="w",
                timeout=self._timeout,
                flags=portalocker.LOCK_EX | portalocker.LOCK_NB,
            )
            fh = file_lock.acquire()
            fh.write(str(os.getpid()))
            fh.flush()
        except (portalocker.LockException, OSError) as exc:
            self._mu.release()
            raise MachineLockError(
                f"Cannot lock {self._lock_path}: {exc}"
            ) from exc

        self._file_lock = file_lock
        self._depth = 1
        logger.debug("Machine lock acquired: %s", self._lock_path)

    def release(self) -> None:
        """Release one hold on the lock.  Safe to call when not held."""
        if not self._depth:
            return

        if self._depth > 1:
            self._depth -= 1
            return

        try:
            if self._file_lock is not None:
                self._file_lock.release()
                self._file_lock = None
            # Lock file is never unlinked; waiters may already hold it open.
            self._depth = 0
            logger.debug("Machine lock released: %s", self._lock_path)
        finally:
            self._mu.release()

    @property
    def is_held(self) -> bool:
        return self._depth > 0

    def __enter__(self) -> MachineLock:
        self.acquire()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.release()
