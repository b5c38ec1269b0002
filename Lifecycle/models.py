"""Pydantic models for machine options and persisted metadata."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

CONFIG_VERSION = 3


class _Options(BaseModel):
    """Immutable options snapshot."""

    model_config = ConfigDict(frozen=True)


class AuthOptions(_Options):
    """Where TLS material lives locally and on the machine."""

    cert_dir: str = ""
    ca_cert_path: str = ""
    ca_private_key_path: str = ""
    ca_cert_remote_path: str = ""
    server_cert_path: str = ""
    server_key_path: str = ""
    client_key_path: str = ""
    server_cert_remote_path: str = ""
    server_key_remote_path: str = ""
    client_cert_path: str = ""
    server_cert_sans: list[str] = Field(default_factory=list)
    store_path: str = ""


class EngineOptions(_Options):
    """Container engine daemon settings applied during provisioning."""

    arbitrary_flags: list[str] = Field(default_factory=list)
    dns: list[str] = Field(default_factory=list)
    graph_dir: str = ""
    env: list[str] = Field(default_factory=list)
    ipv6: bool = False
    insecure_registry: list[str] = Field(default_factory=list)
    labels: list[str] = Field(default_factory=list)
    log_level: str = ""
    storage_driver: str = ""
    selinux_enabled: bool = False
    tls_verify: bool = True
    registry_mirror: list[str] = Field(default_factory=list)
    install_url: str = "https://get.docker.com"


class SwarmOptions(_Options):
    """Clustering settings.  The default instance means "no clustering"."""

    is_swarm: bool = False
    address: str = ""
    discovery: str = ""
    agent: bool = False
    master: bool = False
    host: str = ""
    image: str = ""
    strategy: str = ""
    heartbeat: int = 0
    overcommit: float = 0.0
    arbitrary_flags: list[str] = Field(default_factory=list)
    env: list[str] = Field(default_factory=list)
    is_experimental: bool = False


class HostOptions(_Options):
    """Options bundle attached to a machine at creation or load time."""

    driver: str = ""
    memory: int = 0
    disk: int = 0
    engine_options: EngineOptions = Field(default_factory=EngineOptions)
    swarm_options: SwarmOptions = Field(default_factory=SwarmOptions)
    auth_options: AuthOptions = Field(default_factory=AuthOptions)


class Metadata(_Options):
    """What an external store persists about a machine besides its driver."""

    config_version: int = CONFIG_VERSION
    driver_name: str
    host_options: HostOptions = Field(default_factory=HostOptions)
