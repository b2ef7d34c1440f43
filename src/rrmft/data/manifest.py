"""Checksum manifest utilities.

This module is intentionally small and dependency-light to avoid import cycles.
It provides:
- sha256 hashing helpers
- expected-digest lookup over `manifest.json` + `metadata/checksums.json`
- a manifest builder for publishing a data directory
"""

from __future__ import annotations

import hashlib
import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Mapping

MANIFEST_PATH = "manifest.json"
CHECKSUMS_PATH = "metadata/checksums.json"


def sha256_bytes(b: bytes) -> str:
    """Return hex-encoded sha256 for bytes."""
    if not isinstance(b, (bytes, bytearray)):
        raise TypeError(f"sha256_bytes: expected bytes, got {type(b).__name__}")
    return hashlib.sha256(bytes(b)).hexdigest()


def sha256_file(path: Path) -> str:
    """Return hex-encoded sha256 for a file on disk."""
    p = Path(path)
    h = hashlib.sha256()
    with p.open("rb") as f:
        for chunk in iter(lambda: f.read(1024 * 1024), b""):
            h.update(chunk)
    return h.hexdigest()


def _now_utc_iso() -> str:
    # Example: 2025-12-16T00:00:00Z
    return datetime.now(timezone.utc).replace(microsecond=0).isoformat().replace("+00:00", "Z")


def check_manifest(obj: Any) -> dict[str, Any]:
    """Validate the manifest shape: `{"sources": [{"path": str, "sha256": str}, ...]}`."""
    if not isinstance(obj, dict):
        raise ValueError("manifest.json: expected JSON object")
    sources = obj.get("sources", [])
    if not isinstance(sources, list):
        raise ValueError("manifest.json: sources must be an array")
    for i, item in enumerate(sources):
        if not isinstance(item, dict):
            raise ValueError(f"manifest.json: sources[{i}] must be an object")
        if not isinstance(item.get("path"), str) or not isinstance(item.get("sha256"), str):
            raise ValueError(f"manifest.json: sources[{i}] must have string path and sha256")
    return obj


def check_checksums(obj: Any) -> dict[str, str]:
    """Validate the flat checksum table: `{path: sha256}`."""
    if not isinstance(obj, dict):
        raise ValueError("checksums.json: expected JSON object")
    for k, v in obj.items():
        if not isinstance(v, str):
            raise ValueError(f"checksums.json: {k}: expected sha256 string, got {type(v).__name__}")
    return obj


def expected_digest(
    path: str,
    manifest: Mapping[str, Any] | None,
    checksums: Mapping[str, str] | None,
) -> str | None:
    """Expected sha256 for `path`: manifest sources first, then the checksum table."""
    for item in (manifest or {}).get("sources", []):
        if item.get("path") == path and item.get("sha256"):
            return str(item["sha256"]).lower()
    v = (checksums or {}).get(path)
    return v.lower() if v else None


def build_manifest(root: Path, *, created_utc: str | None = None) -> dict[str, Any]:
    """Hash every JSON file under `root` (except the manifest itself).

    Paths are POSIX-style and relative to `root`, sorted for stable output.
    """
    root = Path(root)
    if not root.is_dir():
        raise ValueError(f"build_manifest: not a directory: {root}")
    if created_utc is None:
        created_utc = _now_utc_iso()

    sources = []
    for p in sorted(root.rglob("*.json")):
        rel = p.relative_to(root).as_posix()
        if rel == MANIFEST_PATH:
            continue
        sources.append({"path": rel, "sha256": sha256_file(p)})

    return {"created_utc": created_utc, "sources": sources}


def write_manifest(path: Path, manifest: dict[str, Any]) -> None:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    text = json.dumps(manifest, indent=2, sort_keys=True) + "\n"
    p.write_text(text, encoding="utf-8")
