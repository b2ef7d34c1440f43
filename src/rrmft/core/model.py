"""Core data model for rrmft.

Plain dataclasses over the static FDA RRM-FT tables. Records are read-only
views; the source of truth is always the JSON table they were built from.

This module must not import data/project/app/cli.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

CRITERIA: tuple[str, ...] = ("c1", "c2", "c3", "c4", "c5", "c6", "c7")


def _norm_str(value: Any, *, where: str) -> str:
    """Normalize a required string: strip and reject empty/whitespace."""
    if not isinstance(value, str):
        raise ValueError(f"{where}: expected str, got {type(value).__name__}")
    s = value.strip()
    if not s:
        raise ValueError(f"{where}: must be a non-empty string")
    return s


def _number(value: Any, *, where: str) -> float | int:
    # Missing or null criteria read as 0.
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{where}: expected number, got {type(value).__name__}")
    return value


@dataclass(frozen=True)
class Commodity:
    code: str
    name: str
    category: str
    ftl: bool = False

    @classmethod
    def from_tables(
        cls,
        code: str,
        entry: Mapping[str, Any],
        ftl_table: Mapping[str, Any] | None = None,
    ) -> "Commodity":
        """Build a record from a commodity table (2A) row plus the FTL table (1A)."""
        c = _norm_str(code, where="commodity code")
        if not isinstance(entry, Mapping):
            raise ValueError(f"commodities[{c}]: expected JSON object, got {type(entry).__name__}")
        name = entry.get("name") or c
        category = entry.get("category") or ""
        ftl_entry = (ftl_table or {}).get(c)
        ftl = bool(ftl_entry.get("ftl", False)) if isinstance(ftl_entry, Mapping) else False
        return cls(code=c, name=str(name), category=str(category), ftl=ftl)


@dataclass(frozen=True)
class HazardPair:
    hazard: str
    c1: float | int = 0
    c2: float | int = 0
    c3: float | int = 0
    c4: float | int = 0
    c5: float | int = 0
    c6: float | int = 0
    c7: float | int = 0
    score: float | int = 0

    @classmethod
    def from_dict(cls, hazard: str, data: Mapping[str, Any]) -> "HazardPair":
        h = _norm_str(hazard, where="hazard code")
        if not isinstance(data, Mapping):
            raise ValueError(f"pairs[{h}]: expected JSON object, got {type(data).__name__}")
        values = {k: _number(data.get(k), where=f"pairs[{h}].{k}") for k in CRITERIA}
        score = _number(data.get("score"), where=f"pairs[{h}].score")
        return cls(hazard=h, score=score, **values)

    def criteria(self) -> dict[str, float | int]:
        return {k: getattr(self, k) for k in CRITERIA}


def parse_pairs(pairs: Mapping[str, Any] | None) -> list[HazardPair]:
    """Parse a per-commodity pair mapping `{hazard: {c1..c7, score}}`."""
    if not pairs:
        return []
    if not isinstance(pairs, Mapping):
        raise ValueError(f"pairs: expected JSON object, got {type(pairs).__name__}")
    return [HazardPair.from_dict(h, d) for h, d in pairs.items()]


def max_score(pairs: Mapping[str, Any] | None) -> float | int:
    """Highest aggregate score in a pair mapping (0 when empty)."""
    return max((p.score for p in parse_pairs(pairs)), default=0)
