"""Container engine API access, limited to the version probe."""
from __future__ import annotations


class EngineClientError(Exception):
    """Raised when the engine API cannot be reached or answers badly."""


from engine.client import EngineClient, docker_version  # noqa: E402

__all__ = ["EngineClient", "EngineClientError", "docker_version"]
