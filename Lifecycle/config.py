"""Configuration for the Lifecycle core.

Override via environment variables:
    MACHINE_POLL_MAX_ATTEMPTS   : state confirmation attempts (default: 60)
    MACHINE_POLL_INTERVAL       : seconds between attempts (default: 3)
    MACHINE_LOCK_DIR            : directory for per-machine lock files
    MACHINE_LOCK_TIMEOUT        : lock timeout in seconds (default: 30)
    MACHINE_ENGINE_TIMEOUT      : engine API timeout in seconds (default: 20)
    MACHINE_SSH_CONNECT_TIMEOUT : ssh ConnectTimeout in seconds (default: 10)
"""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any


def _default_lock_dir() -> Path:
    return Path.home() / ".machine" / "locks"


@dataclass(frozen=True)
class LifecycleConfig:
    """Immutable configuration for machine operations."""

    # Confirmation polling
    poll_max_attempts: int = 60
    poll_interval_seconds: float = 3.0

    # Per-machine lock
    lock_dir: Path = field(default_factory=_default_lock_dir)
    lock_timeout_seconds: float = 30.0

    # Remote access
    engine_timeout_seconds: float = 20.0
    ssh_connect_timeout_seconds: int = 10

    @property
    def poll_budget_seconds(self) -> float:
        """Upper bound on time spent waiting for one state transition."""
        return self.poll_max_attempts * self.poll_interval_seconds

    def lock_path(self, machine_name: str) -> Path:
        """lock_dir/{machine_name}.lock"""
        return self.lock_dir / f"{machine_name}.lock"

    @classmethod
    def from_env(cls) -> LifecycleConfig:
        """Build config from environment variables with sensible defaults."""
        kwargs: dict[str, Any] = {}
        if v := os.environ.get("MACHINE_POLL_MAX_ATTEMPTS"):
            kwargs["poll_max_attempts"] = int(v)
        if v := os.environ.get("MACHINE_POLL_INTERVAL"):
            kwargs["poll_interval_seconds"] = float(v)
        if v := os.environ.get("MACHINE_LOCK_DIR"):
            kwargs["lock_dir"] = Path(v)
        if v := os.environ.get("MACHINE_LOCK_TIMEOUT"):
            kwargs["lock_timeout_seconds"] = float(v)
        if v := os.environ.get("MACHINE_ENGINE_TIMEOUT"):
            kwargs["engine_timeout_seconds"] = float(v)
        if v := os.environ.get("MACHINE_SSH_CONNECT_TIMEOUT"):
            kwargs["ssh_connect_timeout_seconds"] = int(v)
        return cls(**kwargs)
