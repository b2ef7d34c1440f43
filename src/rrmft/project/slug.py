"""Filename helpers for saved projects and exported reports."""

from __future__ import annotations

import re
import unicodedata
from datetime import date, datetime, timezone

SLUG_MAX_LEN = 120
DEFAULT_SLUG = "project"

_NON_ALNUM = re.compile(r"[^a-zA-Z0-9]+")


def _utc_today() -> date:
    return datetime.now(timezone.utc).date()


def slugify(text: str | None) -> str:
    """Turn a human-entered name into `[a-z0-9_]{1,120}`.

    Example: "Café & Co." -> "cafe_and_co". Empty results fall back to
    `DEFAULT_SLUG`.
    """
    if not text:
        return DEFAULT_SLUG
    s = text.replace("&", "and")
    s = unicodedata.normalize("NFKD", s)
    s = s.encode("ascii", "ignore").decode("ascii")
    s = _NON_ALNUM.sub("_", s).strip("_").lower()
    # Truncation can expose a trailing underscore; strip it so slugify is idempotent.
    s = s[:SLUG_MAX_LEN].rstrip("_")
    return s or DEFAULT_SLUG


def project_filename(name: str | None, today: date | None = None) -> str:
    day = (today or _utc_today()).isoformat()
    return f"rrmft_{slugify(name)}_{day}.rrm"


def export_filename(commodity_code: str, today: date | None = None) -> str:
    day = (today or _utc_today()).isoformat()
    return f"rrmft_export_{commodity_code}_{day}.json"
