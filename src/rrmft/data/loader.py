"""Verified data loader.

`Loader.load(path)` fetches a JSON resource, retries transport failures, computes its sha256, compares it against the expected digest from
the manifest (or the checksum table), parses it and caches the result by path.

The manifest and checksum table are the trust anchors. They are fetched
through the same loader once and memoized:
- `manifest.json` is never verified (nothing to verify it against);
- `metadata/checksums.json` is verified against a manifest entry when present;
- an anchor that does not exist counts as empty (paths go unverified); any
  other fetch failure of an anchor propagates.
"""

from __future__ import annotations

import json
import logging
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable

from tenacity import RetryCallState, Retrying, retry_if_exception, stop_after_attempt, wait_incrementing

from rrmft.errors import FetchError, IntegrityError, ParseError, RRMFTError

from .manifest import CHECKSUMS_PATH, MANIFEST_PATH, check_checksums, check_manifest, expected_digest, sha256_bytes
from .transport import ResourceNotFound, Transport, TransportError, make_transport

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoaderConfig:
    data_root: str = "."
    retries: int = 3
    backoff_seconds: float = 1.0
    # Reject any non-anchor path that has no expected digest.
    require_checksum: bool = False
    timeout_seconds: float = 30.0
    manifest_path: str = MANIFEST_PATH
    checksums_path: str = CHECKSUMS_PATH

    def __post_init__(self) -> None:
        if self.retries < 1:
            raise ValueError("LoaderConfig.retries must be >= 1")
        if self.backoff_seconds < 0:
            raise ValueError("LoaderConfig.backoff_seconds must be >= 0")


@dataclass(frozen=True)
class LoadedResource:
    path: str
    content: Any
    raw_bytes: bytes
    sha256: str
    verified: bool


@dataclass(frozen=True)
class VerifyResult:
    path: str
    ok: bool
    message: str


def _log_retry(retry_state: RetryCallState) -> None:
    exc = retry_state.outcome.exception() if retry_state.outcome else None
    wait = retry_state.next_action.sleep if retry_state.next_action else 0
    path = retry_state.args[0] if retry_state.args else "?"
    logger.warning(f"fetch {path} failed (attempt {retry_state.attempt_number}): {exc}; retrying in {wait:g}s")


def _is_transport_failure(e: BaseException) -> bool:
    return isinstance(e, TransportError)


def _parse_json(path: str, raw: bytes) -> Any:
    try:
        return json.loads(raw.decode("utf-8"))
    except UnicodeDecodeError as e:
        raise ParseError(f"{path}: invalid UTF-8: {e}") from e
    except json.JSONDecodeError as e:
        raise ParseError(f"{path}: invalid JSON: {e}") from e


class Loader:
    """Fetch + verify + cache JSON resources keyed by relative path."""

    def __init__(
        self,
        config: LoaderConfig | None = None,
        *,
        transport: Transport | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.config = config or LoaderConfig()
        self.transport = transport or make_transport(self.config.data_root, timeout=self.config.timeout_seconds)
        self._sleep = sleep
        self._cache: dict[str, LoadedResource] = {}
        self._manifest: dict[str, Any] | None = None
        self._checksums: dict[str, str] | None = None
        self._lock = threading.RLock()

    # ---- transport with retry ----

    def fetch_bytes(self, path: str) -> bytes:
        """Fetch raw bytes, retrying any transport failure with linear backoff (1s, 2s, ...)."""
        step = self.config.backoff_seconds
        retrying = Retrying(
            stop=stop_after_attempt(self.config.retries),
            wait=wait_incrementing(start=step, increment=step),
            retry=retry_if_exception(_is_transport_failure),
            before_sleep=_log_retry,
            sleep=self._sleep,
            reraise=True,
        )
        try:
            return retrying(self.transport.fetch, path)
        except TransportError as e:
            attempts = retrying.statistics.get("attempt_number", self.config.retries)
            raise FetchError(path, attempts, str(e)) from e

    # ---- trust anchors ----

    def _is_anchor(self, path: str) -> bool:
        return path in (self.config.manifest_path, self.config.checksums_path)

    def _load_anchor(self, path: str, expected: str | None, check: Callable[[Any], Any]) -> Any:
        try:
            rec = self._fetch_verified(path, expected)
        except FetchError as e:
            # Only an anchor that does not exist counts as empty; outages propagate.
            if not isinstance(e.__cause__, ResourceNotFound):
                raise
            logger.warning(f"{path} not found, paths it covers will not be verified")
            return {}
        try:
            return check(rec.content)
        except ValueError as e:
            raise ParseError(str(e)) from e

    def anchors(self) -> tuple[dict[str, Any], dict[str, str]]:
        """Return the memoized (manifest, checksums) pair, fetching on first use."""
        with self._lock:
            if self._manifest is None:
                self._manifest = self._load_anchor(self.config.manifest_path, None, check_manifest)
            if self._checksums is None:
                exp = expected_digest(self.config.checksums_path, self._manifest, None)
                self._checksums = self._load_anchor(self.config.checksums_path, exp, check_checksums)
            return self._manifest, self._checksums

    def expected_digest(self, path: str) -> str | None:
        manifest, checksums = self.anchors()
        return expected_digest(path, manifest, checksums)

    # ---- core ----

    def _fetch_verified(self, path: str, expected: str | None) -> LoadedResource:
        raw = self.fetch_bytes(path)
        digest = sha256_bytes(raw)
        if expected is not None and expected != digest:
            raise IntegrityError(path, expected=expected, actual=digest)
        content = _parse_json(path, raw)
        rec = LoadedResource(path=path, content=content, raw_bytes=raw, sha256=digest, verified=expected is not None)
        with self._lock:
            self._cache[path] = rec
        return rec

    def load(self, path: str) -> LoadedResource:
        """Fetch, verify, parse and cache `path`.

        Raises:
            FetchError: every retry attempt failed (missing resources included).
            IntegrityError: computed sha256 differs from the expected digest, or
                no digest is known while `require_checksum` is set.
            ParseError: payload is not UTF-8 JSON.
        """
        if self._is_anchor(path):
            self.anchors()
            rec = self.cached(path)
            if rec is not None:
                return rec
            # Anchor was not found at startup; surface the fetch error now.
            expected = None
            if path == self.config.checksums_path:
                expected = expected_digest(path, self._manifest, None)
            return self._fetch_verified(path, expected)

        expected = self.expected_digest(path)
        if expected is None and self.config.require_checksum:
            raise IntegrityError(path, expected=None, actual=None)
        if expected is None:
            logger.info(f"{path}: no checksum entry, loading unverified")
        return self._fetch_verified(path, expected)

    def cached(self, path: str) -> LoadedResource | None:
        with self._lock:
            return self._cache.get(path)

    def verify_all(self) -> list[VerifyResult]:
        """Load every manifest source and report per-path status."""
        manifest, _ = self.anchors()
        results: list[VerifyResult] = []
        for item in manifest.get("sources", []):
            path = item["path"]
            try:
                rec = self.load(path)
            except RRMFTError as e:
                results.append(VerifyResult(path=path, ok=False, message=str(e)))
            else:
                results.append(VerifyResult(path=path, ok=True, message=rec.sha256))
        return results

    def __repr__(self) -> str:
        return f"Loader({self.transport!r})"

