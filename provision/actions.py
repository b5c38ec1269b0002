"""Package and service actions a provisioner can perform."""
from __future__ import annotations

from enum import Enum


class PackageAction(str, Enum):
    INSTALL = "install"
    REMOVE = "remove"
    UPGRADE = "upgrade"


class ServiceAction(str, Enum):
    START = "start"
    STOP = "stop"
    RESTART = "restart"
    ENABLE = "enable"
    DISABLE = "disable"
    DAEMON_RELOAD = "daemon-reload"
