"""Pytest configuration.

This repo follows the `src/` layout. Some environments may invoke a `pytest`
entrypoint from a different Python install than the one used for
`python -m pip install -e ...`, which can cause `import rrmft` to fail.

To keep the suite robust, we ensure `src/` is on `sys.path` during tests.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any

import pytest


def pytest_configure() -> None:
    repo_root = Path(__file__).resolve().parents[1]
    src_dir = repo_root / "src"
    sys.path.insert(0, str(src_dir))


# =============================================================================
# Shared Test Helpers
# =============================================================================


def dump_json(obj: Any) -> bytes:
    return (json.dumps(obj, indent=2, ensure_ascii=False) + "\n").encode("utf-8")


def write_json(path: Path, obj: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(dump_json(obj))


def make_pair(score: float, **criteria: float) -> dict[str, Any]:
    row = {f"c{i}": criteria.get(f"c{i}", i) for i in range(1, 8)}
    row["score"] = score
    return row


COMMODITIES = {
    "LEAFY": {"name": "Leafy greens", "category": "VEG"},
    "CHEESE": {"name": "Soft cheese", "category": "DAIRY"},
    "NUTS": {"name": "Tree nuts", "category": "NUTS"},
}

FTL = {
    "LEAFY": {"ftl": True},
    "CHEESE": {"ftl": True},
    "NUTS": {"ftl": False},
}

I18N = {
    "hazard": {
        "LM": {"en": "Listeria monocytogenes", "fr": "Listeria monocytogenes"},
        "STEC": {"en": "Shiga toxin-producing E. coli", "fr": "E. coli STEC"},
        "SAL": {"en": "Salmonella", "fr": "Salmonelle"},
    },
    "commodity": {
        "LEAFY": {"en": "Leafy greens", "fr": "Légumes-feuilles"},
        "CHEESE": {"en": "Soft cheese", "fr": "Fromage à pâte molle"},
    },
    "category": {
        "VEG": {"en": "Vegetables", "fr": "Légumes"},
        "DAIRY": {"en": "Dairy", "fr": "Produits laitiers"},
    },
}

PAIRS = {
    "LEAFY": {
        "LM": make_pair(5.1),
        "STEC": make_pair(7.2, c1=9),
        "SAL": make_pair(6.4),
    },
    "CHEESE": {
        "LM": make_pair(8),
    },
}


def data_files() -> dict[str, bytes]:
    """Relative path -> bytes for the standard fixture dataset (no manifest)."""
    files = {
        "en/commodities_table_2A.json": dump_json(COMMODITIES),
        "en/ftl_table_1A.json": dump_json(FTL),
    }
    for kind, table in I18N.items():
        files[f"i18n/{kind}.json"] = dump_json(table)
    for code, pairs in PAIRS.items():
        files[f"en/pairs_table_2B/{code}.json"] = dump_json(pairs)
    return files


def write_data_root(root: Path, *, manifest: bool = True) -> Path:
    """Write the fixture dataset under `root`.

    With `manifest=True` both trust anchors are written: a checksum table for the
    data files and a manifest covering everything (checksum table included).
    """
    from rrmft.data.manifest import build_manifest, sha256_bytes, write_manifest

    files = data_files()
    for rel, data in files.items():
        p = root / rel
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_bytes(data)
    if manifest:
        write_json(root / "metadata" / "checksums.json", {rel: sha256_bytes(data) for rel, data in files.items()})
        write_manifest(root / "manifest.json", build_manifest(root, created_utc="2026-01-01T00:00:00Z"))
    return root


class FakeTransport:
    """In-memory transport; `failures[path]` makes the next N fetches of path fail."""

    def __init__(self, files: dict[str, bytes] | None = None, failures: dict[str, int] | None = None):
        self.files = dict(files or {})
        self.failures = dict(failures or {})
        self.calls: list[str] = []

    def fetch(self, path: str) -> bytes:
        from rrmft.data.transport import ResourceNotFound, TransportError

        self.calls.append(path)
        if self.failures.get(path, 0) > 0:
            self.failures[path] -= 1
            raise TransportError(f"simulated failure for {path}")
        if path not in self.files:
            raise ResourceNotFound(f"HTTP 404: {path}")
        return self.files[path]


@pytest.fixture
def data_root(tmp_path: Path) -> Path:
    return write_data_root(tmp_path / "data")
