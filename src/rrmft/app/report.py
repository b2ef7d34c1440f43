"""Standalone JSON export of the current commodity's hazard pairs."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from rrmft.core.i18n import localized
from rrmft.core.model import CRITERIA
from rrmft.core.pairs import pair_records, pairs_frame
from rrmft.errors import NoSelectionError

from .state import AppState

REPORT_SOURCE = "FDA RRM-FT"
REPORT_METHOD = "FSMA 204 Rule"
DISCLAIMER = "Risk scores are intrinsic and do not account for preventive controls"

# Reports are always written with English names.
REPORT_LANGUAGE = "en"


def build_report(state: AppState, *, now: datetime | None = None) -> dict[str, Any]:
    cur = state.current
    if not cur.commodity or cur.pairs is None:
        raise NoSelectionError("No data to export")

    ds = state.dataset
    lang = REPORT_LANGUAGE
    code = cur.commodity
    c = ds.commodity(code) if ds is not None else None
    if ds is not None and c is not None:
        name = ds.name("commodity", code, lang, c.name)
        category = ds.name("category", c.category, lang, c.category)
        ftl = c.ftl
        hazard_table = ds.i18n.get("hazard")
    else:
        name, category, ftl, hazard_table = code, cur.category or "", False, None

    hazard_names = {h: localized(hazard_table, h, lang) for h in cur.pairs}

    df = pairs_frame(cur.pairs, hazard_names=hazard_names)
    pairs = [
        {
            "hazard": row["hazard_name"],
            "criteria": {k: row[k] for k in CRITERIA},
            "score": row["score"],
        }
        for row in pair_records(df)
    ]

    stamp = (now or datetime.now(timezone.utc)).isoformat().replace("+00:00", "Z")
    return {
        "exportDate": stamp,
        "commodity": {"code": code, "name": name, "category": category, "ftl": ftl},
        "pairs": pairs,
        "metadata": {"source": REPORT_SOURCE, "method": REPORT_METHOD, "disclaimer": DISCLAIMER},
    }
