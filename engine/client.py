"""Minimal TLS client for the container engine's remote API."""
from __future__ import annotations

import logging
import ssl
from typing import TYPE_CHECKING, Any, Protocol

import httpx

from engine import EngineClientError

if TYPE_CHECKING:
    from Lifecycle.models import AuthOptions

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 20.0


class _EngineHost(Protocol):
    """What ``docker_version`` needs from a machine."""

    def url(self) -> str: ...

    def auth_options(self) -> AuthOptions: ...


def to_http_url(url: str) -> str:
    """``tcp://host:port`` -> ``https://host:port``; other schemes unchanged."""
    if url.startswith("tcp://"):
        return "https://" + url[len("tcp://"):]
    return url


class EngineClient:
    """Talks to one engine endpoint with mutual TLS from *auth_options*.

    Parameters
    ----------
    url:
        Endpoint as reported by the driver, e.g. ``tcp://1.2.3.4:2376``.
    auth_options:
        Supplies CA, client certificate and client key paths.
    timeout:
        Seconds per request.
    transport:
        Optional httpx transport; when set, no TLS context is built.
    """

    def __init__(
        self,
        url: str,
        auth_options: AuthOptions,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.base_url = to_http_url(url)
        self._auth = auth_options
        self._timeout = timeout
        self._transport = transport

    def _ssl_context(self) -> ssl.SSLContext:
        ctx = ssl.create_default_context(cafile=self._auth.ca_cert_path or None)
        ctx.load_cert_chain(self._auth.client_cert_path, self._auth.client_key_path)
        return ctx

    def _client(self) -> httpx.Client:
        kwargs: dict[str, Any] = {"base_url": self.base_url, "timeout": self._timeout}
        if self._transport is not None:
            kwargs["transport"] = self._transport
        else:
            try:
                kwargs["verify"] = self._ssl_context()
            except (OSError, ssl.SSLError) as exc:
                raise EngineClientError(f"Cannot load TLS material: {exc}") from exc
        return httpx.Client(**kwargs)

    def version(self) -> str:
        """Return the engine's ``Version`` string from ``GET /version``."""
        try:
            with self._client() as client:
                response = client.get("/version")
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPError as exc:
            raise EngineClientError(
                f"Error querying engine version at {self.base_url}: {exc}"
            ) from exc
        except ValueError as exc:
            raise EngineClientError(f"Invalid version response: {exc}") from exc

        version = data.get("Version") if isinstance(data, dict) else None
        if not isinstance(version, str) or not version:
            raise EngineClientError("Version field missing from engine response")
        logger.debug("Engine at %s reports version %s", self.base_url, version)
        return version


def docker_version(
    host: _EngineHost,
    *,
    timeout: float = DEFAULT_TIMEOUT,
    transport: httpx.BaseTransport | None = None,
) -> str:
    """Query the engine version of *host* using its URL and TLS options."""
    client = EngineClient(
        host.url(), host.auth_options(), timeout=timeout, transport=transport
    )
    return client.version()
