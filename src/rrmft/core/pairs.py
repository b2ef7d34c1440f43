"""Hazard-pair tables as canonical pandas DataFrames.

A per-commodity pair mapping `{hazard: {c1..c7, score}}` is normalized into a
single DataFrame with a fixed column order and nullable dtypes, sorted by
descending score. Ties keep the mapping's original order (stable sort).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Mapping

from rrmft.core.model import CRITERIA, parse_pairs

if TYPE_CHECKING:  # pragma: no cover
    import pandas as pd


PAIR_SCHEMA: dict[str, str] = {
    "hazard": "string",
    "hazard_name": "string",
    **{k: "Float64" for k in CRITERIA},
    "score": "Float64",
}

PAIR_COLUMN_ORDER: list[str] = list(PAIR_SCHEMA.keys())


def pairs_frame(
    pairs: Mapping[str, Any] | None,
    *,
    hazard_names: Mapping[str, str] | None = None,
) -> "pd.DataFrame":
    """Build the canonical pair table, highest score first.

    `hazard_names` maps hazard code -> display name; codes without a name
    display as themselves.
    """
    import pandas as pd  # local import to keep module import-light

    names = hazard_names or {}
    rows = []
    for p in parse_pairs(pairs):
        row: dict[str, Any] = {"hazard": p.hazard, "hazard_name": names.get(p.hazard) or p.hazard}
        row.update(p.criteria())
        row["score"] = p.score
        rows.append(row)

    df = pd.DataFrame(rows, columns=PAIR_COLUMN_ORDER)
    for col, dtype in PAIR_SCHEMA.items():
        df[col] = df[col].astype(dtype)
    if df.empty:
        return df
    df = df.sort_values("score", ascending=False, kind="mergesort")
    return df.reset_index(drop=True)


def pair_records(df: "pd.DataFrame") -> list[dict[str, Any]]:
    """Convert a pair table back to plain Python rows (numbers as int where integral)."""
    out: list[dict[str, Any]] = []
    for rec in df.to_dict(orient="records"):
        row: dict[str, Any] = {}
        for k, v in rec.items():
            if k in PAIR_SCHEMA and PAIR_SCHEMA[k] == "Float64":
                f = float(v)
                row[k] = int(f) if f.is_integer() else f
            else:
                row[k] = str(v)
        out.append(row)
    return out
