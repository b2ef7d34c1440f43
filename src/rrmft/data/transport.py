"""Byte transports for the data root.

A data root is either a local directory or an http(s) base URL. Transports
return raw bytes and raise `TransportError` on any failure; retry policy lives
in the loader.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Protocol

import requests

logger = logging.getLogger(__name__)


class TransportError(Exception):
    """A single fetch attempt failed."""


class ResourceNotFound(TransportError):
    """The resource does not exist (missing file, HTTP 404/410)."""


class Transport(Protocol):
    def fetch(self, path: str) -> bytes: ...


class LocalTransport:
    def __init__(self, root: str | Path):
        self.root = Path(root)

    def fetch(self, path: str) -> bytes:
        p = self.root / path
        try:
            return p.read_bytes()
        except FileNotFoundError as e:
            raise ResourceNotFound(f"{p}: not found") from e
        except OSError as e:
            raise TransportError(f"{p}: {e.strerror or e}") from e

    def __repr__(self) -> str:
        return f"LocalTransport({str(self.root)!r})"


class HttpTransport:
    """Fetch over HTTP(S), always revalidating with the origin."""

    def __init__(self, base_url: str, *, timeout: float = 30.0, session: requests.Session | None = None):
        self.base_url = base_url.rstrip("/") + "/"
        self.timeout = timeout
        self.session = session or requests.Session()

    def fetch(self, path: str) -> bytes:
        url = self.base_url + path.lstrip("/")
        logger.debug(f"GET {url}")
        try:
            response = self.session.get(
                url,
                headers={"Cache-Control": "no-cache", "Pragma": "no-cache"},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise TransportError(f"{url}: {e}") from e
        if response.status_code in (404, 410):
            raise ResourceNotFound(f"HTTP {response.status_code}: {response.reason}")
        if not response.ok:
            raise TransportError(f"HTTP {response.status_code}: {response.reason}")
        return response.content

    def __repr__(self) -> str:
        return f"HttpTransport({self.base_url!r})"


def make_transport(data_root: str | Path, *, timeout: float = 30.0) -> Transport:
    s = str(data_root)
    if s.startswith(("http://", "https://")):
        return HttpTransport(s, timeout=timeout)
    return LocalTransport(s)
