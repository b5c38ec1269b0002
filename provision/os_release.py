"""Parsing of ``/etc/os-release`` as returned by a machine."""
from __future__ import annotations

from dataclasses import dataclass, field

# os-release key -> OsRelease attribute
_KEY_MAP = {
    "ANSI_COLOR": "ansi_color",
    "NAME": "name",
    "VERSION": "version",
    "VARIANT": "variant",
    "VARIANT_ID": "variant_id",
    "ID": "id",
    "ID_LIKE": "id_like",
    "PRETTY_NAME": "pretty_name",
    "VERSION_ID": "version_id",
    "HOME_URL": "home_url",
    "SUPPORT_URL": "support_url",
    "BUG_REPORT_URL": "bug_report_url",
}


@dataclass
class OsRelease:
    """Identification of the operating system running on a machine."""

    ansi_color: str = ""
    name: str = ""
    version: str = ""
    variant: str = ""
    variant_id: str = ""
    id: str = ""
    id_like: str = ""
    pretty_name: str = ""
    version_id: str = ""
    home_url: str = ""
    support_url: str = ""
    bug_report_url: str = ""
    extra: dict[str, str] = field(default_factory=dict)

    def is_like(self, distro_id: str) -> bool:
        """True if this OS is *distro_id* or declares itself like it."""
        return self.id == distro_id or distro_id in self.id_like.split()


def _unquote(value: str) -> str:
    value = value.strip()
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
        return value[1:-1]
    return value


def parse_os_release(content: str) -> OsRelease:
    """Parse ``KEY=value`` lines; comments and blank lines are skipped.

    Keys without an OsRelease attribute are kept in ``extra``.
    """
    release = OsRelease()
    for raw_line in content.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, _, value = line.partition("=")
        key = key.strip()
        attr = _KEY_MAP.get(key)
        if attr is not None:
            setattr(release, attr, _unquote(value))
        else:
            release.extra[key] = _unquote(value)
    return release
