"""JSON Schema validation for persisted machine metadata.

Metadata is loaded by an external store as a plain dict; it is checked
here before a Machine is built from it.  Uses jsonschema Draft 7.
"""
from __future__ import annotations

from typing import Any

from jsonschema import Draft7Validator, ValidationError

from .exceptions import MetadataValidationError

_STRING_LIST: dict[str, Any] = {"type": "array", "items": {"type": "string"}}

# ---------------------------------------------------------------------------
# Option schemas
# ---------------------------------------------------------------------------

AUTH_OPTIONS_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "cert_dir": {"type": "string"},
        "ca_cert_path": {"type": "string"},
        "ca_private_key_path": {"type": "string"},
        "ca_cert_remote_path": {"type": "string"},
        "server_cert_path": {"type": "string"},
        "server_key_path": {"type": "string"},
        "client_key_path": {"type": "string"},
        "server_cert_remote_path": {"type": "string"},
        "server_key_remote_path": {"type": "string"},
        "client_cert_path": {"type": "string"},
        "server_cert_sans": _STRING_LIST,
        "store_path": {"type": "string"},
    },
}

ENGINE_OPTIONS_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "arbitrary_flags": _STRING_LIST,
        "dns": _STRING_LIST,
        "graph_dir": {"type": "string"},
        "env": _STRING_LIST,
        "ipv6": {"type": "boolean"},
        "insecure_registry": _STRING_LIST,
        "labels": _STRING_LIST,
        "log_level": {"type": "string"},
        "storage_driver": {"type": "string"},
        "selinux_enabled": {"type": "boolean"},
        "tls_verify": {"type": "boolean"},
        "registry_mirror": _STRING_LIST,
        "install_url": {"type": "string"},
    },
}

SWARM_OPTIONS_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "is_swarm": {"type": "boolean"},
        "address": {"type": "string"},
        "discovery": {"type": "string"},
        "agent": {"type": "boolean"},
        "master": {"type": "boolean"},
        "host": {"type": "string"},
        "image": {"type": "string"},
        "strategy": {"type": "string"},
        "heartbeat": {"type": "integer", "minimum": 0},
        "overcommit": {"type": "number"},
        "arbitrary_flags": _STRING_LIST,
        "env": _STRING_LIST,
        "is_experimental": {"type": "boolean"},
    },
}

# ---------------------------------------------------------------------------
# Metadata schema
# ---------------------------------------------------------------------------

METADATA_SCHEMA: dict[str, Any] = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "title": "MachineMetadata",
    "type": "object",
    "required": ["driver_name"],
    "additionalProperties": False,
    "properties": {
        "config_version": {"type": "integer", "minimum": 0},
        "driver_name": {"type": "string", "minLength": 1},
        "host_options": {
            "type": "object",
            "additionalProperties": False,
            "properties": {
                "driver": {"type": "string"},
                "memory": {"type": "integer", "minimum": 0},
                "disk": {"type": "integer", "minimum": 0},
                "engine_options": ENGINE_OPTIONS_SCHEMA,
                "swarm_options": SWARM_OPTIONS_SCHEMA,
                "auth_options": AUTH_OPTIONS_SCHEMA,
            },
        },
    },
}

_metadata_validator = Draft7Validator(METADATA_SCHEMA)


def validate_metadata(data: dict[str, Any]) -> None:
    """Validate a raw metadata dict against the metadata schema.

    Raises MetadataValidationError if the data is invalid.
    """
    errors: list[str] = []
    err: ValidationError
    for err in sorted(
        _metadata_validator.iter_errors(data),
        key=lambda e: [str(p) for p in e.path],
    ):
        path = ".".join(str(p) for p in err.absolute_path) or "(root)"
        errors.append(f"{path}: {err.message}")
    if errors:
        raise MetadataValidationError(errors)
