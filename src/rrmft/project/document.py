"""Project document (`project.json` inside an `.rrm` archive).

Wire keys follow the archives written by the browser tool:

    {
      "metadata": {"name", "reference", "notes", "created", "version", "lang"},
      "analysis": {"commodity", "category", "pairs"},
      "log": [{"timestamp", "message", "type"}, ...]
    }

Readers are lenient about missing optional fields (they default to empty)
but reject wrong JSON types with a `ParseError` naming the field.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from rrmft.core.activity import LogEntry
from rrmft.errors import ParseError

SCHEMA_VERSION = "1.0"


def _require_dict(value: Any, *, where: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise ParseError(f"{where}: expected JSON object, got {type(value).__name__}")
    return value


def _opt_str(obj: dict[str, Any], key: str, *, where: str, default: str = "") -> str:
    v = obj.get(key)
    if v is None:
        return default
    if not isinstance(v, str):
        raise ParseError(f"{where}.{key}: expected str, got {type(v).__name__}")
    return v


@dataclass(frozen=True)
class ProjectMetadata:
    name: str = "Untitled"
    reference: str = ""
    notes: str = ""
    created: str = ""
    version: str = SCHEMA_VERSION
    lang: str = "fr"

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "reference": self.reference,
            "notes": self.notes,
            "created": self.created,
            "version": self.version,
            "lang": self.lang,
        }

    @classmethod
    def from_dict(cls, obj: Any) -> "ProjectMetadata":
        d = _require_dict(obj, where="project.json.metadata")
        w = "project.json.metadata"
        return cls(
            name=_opt_str(d, "name", where=w),
            reference=_opt_str(d, "reference", where=w),
            notes=_opt_str(d, "notes", where=w),
            created=_opt_str(d, "created", where=w),
            version=_opt_str(d, "version", where=w, default=SCHEMA_VERSION),
            lang=_opt_str(d, "lang", where=w, default="fr"),
        )


@dataclass(frozen=True)
class Analysis:
    commodity: str | None = None
    category: str | None = None
    pairs: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"commodity": self.commodity, "category": self.category, "pairs": self.pairs}

    @classmethod
    def from_dict(cls, obj: Any) -> "Analysis":
        d = _require_dict(obj, where="project.json.analysis")
        pairs = d.get("pairs")
        if pairs is not None:
            pairs = _require_dict(pairs, where="project.json.analysis.pairs")
        commodity = _opt_str(d, "commodity", where="project.json.analysis")
        category = _opt_str(d, "category", where="project.json.analysis")
        return cls(
            commodity=commodity or None,
            category=category or None,
            pairs=pairs,
        )


@dataclass(frozen=True)
class ProjectDocument:
    metadata: ProjectMetadata
    analysis: Analysis
    log: list[LogEntry] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "metadata": self.metadata.to_dict(),
            "analysis": self.analysis.to_dict(),
            "log": [e.to_dict() for e in self.log],
        }

    @classmethod
    def from_dict(cls, obj: Any) -> "ProjectDocument":
        d = _require_dict(obj, where="project.json")
        log_raw = d.get("log") or []
        if not isinstance(log_raw, list):
            raise ParseError(f"project.json.log: expected JSON array, got {type(log_raw).__name__}")
        try:
            log = [LogEntry.from_dict(e) for e in log_raw]
        except ValueError as e:
            raise ParseError(f"project.json.log: {e}") from e
        return cls(
            metadata=ProjectMetadata.from_dict(d.get("metadata") or {}),
            analysis=Analysis.from_dict(d.get("analysis") or {}),
            log=log,
        )
