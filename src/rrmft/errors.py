"""Error taxonomy for rrmft.

Every error carries a stable message suitable for test assertions. Loader and
packager code raises these; the command layer records them in the activity
log before re-raising.
"""

from __future__ import annotations


class RRMFTError(Exception):
    """Base class for all rrmft errors."""


class FetchError(RRMFTError):
    """Transport or HTTP failure after the retry budget is exhausted."""

    def __init__(self, path: str, attempts: int, reason: str):
        self.path = path
        self.attempts = attempts
        self.reason = reason
        super().__init__(f"failed to fetch {path} after {attempts} attempt(s): {reason}")


class IntegrityError(RRMFTError, ValueError):
    """Computed sha256 disagrees with the expected digest (or none is known and one is required)."""

    def __init__(self, path: str, *, expected: str | None, actual: str | None):
        self.path = path
        self.expected = expected
        self.actual = actual
        if expected is None:
            msg = f"no expected sha256 for {path} (checksum required)"
        else:
            msg = f"checksum mismatch for {path}: expected {expected}, got {actual}"
        super().__init__(msg)


class ParseError(RRMFTError, ValueError):
    """Bytes are not valid UTF-8 JSON (or not the expected JSON shape)."""


class FormatError(RRMFTError, ValueError):
    """A project archive is not a ZIP or lacks `project.json`."""


class PackagingError(RRMFTError):
    """Archive construction failed."""


class NoSelectionError(RRMFTError):
    """An operation needs a selected commodity and none is selected."""


__all__ = [
    "RRMFTError",
    "FetchError",
    "IntegrityError",
    "ParseError",
    "FormatError",
    "PackagingError",
    "NoSelectionError",
]
