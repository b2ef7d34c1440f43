"""Startup dataset: commodity table 2A, FTL table 1A and translation tables.

The trust anchors are loaded first, then the independent resources are
fetched concurrently and joined.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Mapping

from rrmft.core.i18n import localized
from rrmft.core.model import Commodity
from rrmft.errors import ParseError

from .loader import Loader

logger = logging.getLogger(__name__)

COMMODITIES_PATH = "en/commodities_table_2A.json"
FTL_PATH = "en/ftl_table_1A.json"
I18N_KINDS: tuple[str, ...] = ("hazard", "commodity", "category")


def i18n_path(kind: str) -> str:
    return f"i18n/{kind}.json"


def pairs_path(code: str) -> str:
    """Per-commodity hazard-pair table (2B)."""
    return f"en/pairs_table_2B/{code}.json"


def _require_object(value: Any, *, where: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise ParseError(f"{where}: expected JSON object, got {type(value).__name__}")
    return value


@dataclass(frozen=True)
class CommodityOption:
    code: str
    name: str
    category: str

    @property
    def label(self) -> str:
        return f"{self.name} ({self.code})"


@dataclass
class Dataset:
    commodities: dict[str, Any]
    ftl: dict[str, Any]
    i18n: dict[str, dict[str, Any]] = field(default_factory=lambda: {k: {} for k in I18N_KINDS})

    def __len__(self) -> int:
        return len(self.commodities)

    def commodity(self, code: str) -> Commodity | None:
        entry = self.commodities.get(code)
        if entry is None:
            return None
        return Commodity.from_tables(code, entry, self.ftl)

    def is_ftl(self, code: str) -> bool:
        entry = self.ftl.get(code)
        return bool(entry.get("ftl", False)) if isinstance(entry, Mapping) else False

    def name(self, kind: str, code: str, lang: str, fallback: str | None = None) -> str:
        return localized(self.i18n.get(kind), code, lang, fallback)

    def options(self, lang: str) -> list[CommodityOption]:
        """Commodity choices sorted by localized name."""
        out = []
        for code, data in self.commodities.items():
            fallback = data.get("name") if isinstance(data, Mapping) else None
            category = data.get("category", "") if isinstance(data, Mapping) else ""
            out.append(CommodityOption(code=code, name=self.name("commodity", code, lang, fallback), category=category))
        return sorted(out, key=lambda o: (o.name.casefold(), o.code))


def load_dataset(loader: Loader, *, max_workers: int = 5) -> Dataset:
    """Load every startup resource through `loader`."""
    logger.info("loading FDA RRM-FT data")
    # Anchors once, before fanning out.
    loader.anchors()

    paths = [COMMODITIES_PATH, FTL_PATH] + [i18n_path(k) for k in I18N_KINDS]
    with ThreadPoolExecutor(max_workers=max_workers) as pool:
        records = list(pool.map(loader.load, paths))
    contents = {rec.path: _require_object(rec.content, where=rec.path) for rec in records}

    return Dataset(
        commodities=contents[COMMODITIES_PATH],
        ftl=contents[FTL_PATH],
        i18n={k: contents[i18n_path(k)] for k in I18N_KINDS},
    )
