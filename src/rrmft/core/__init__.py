"""rrmft core: data model, pair tables, activity log and i18n lookup.

This package is intentionally standalone and must not import data/project/
app/cli to avoid circular dependencies.
"""

from __future__ import annotations

from .activity import LOG_CAP, LOG_KEEP, ActivityLog, LogEntry
from .i18n import DEFAULT_LANGUAGE, LANGUAGES, check_language, localized
from .model import CRITERIA, Commodity, HazardPair, max_score, parse_pairs
from .pairs import PAIR_COLUMN_ORDER, pair_records, pairs_frame

__all__ = [
    "ActivityLog",
    "LogEntry",
    "LOG_CAP",
    "LOG_KEEP",
    "CRITERIA",
    "Commodity",
    "HazardPair",
    "max_score",
    "parse_pairs",
    "PAIR_COLUMN_ORDER",
    "pair_records",
    "pairs_frame",
    "DEFAULT_LANGUAGE",
    "LANGUAGES",
    "check_language",
    "localized",
]
