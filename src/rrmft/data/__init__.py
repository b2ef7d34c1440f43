"""rrmft data layer (verified loading of the static FDA tables).

- `manifest.json` / `metadata/checksums.json` hold expected sha256 digests
- `Loader` fetches with retry, verifies, parses and caches by path
- `load_dataset()` loads the startup tables
"""

from __future__ import annotations

from .dataset import Dataset, load_dataset, pairs_path
from .loader import LoadedResource, Loader, LoaderConfig, VerifyResult
from .manifest import build_manifest, sha256_bytes, sha256_file, write_manifest

__all__ = [
    "Dataset",
    "load_dataset",
    "pairs_path",
    "LoadedResource",
    "Loader",
    "LoaderConfig",
    "VerifyResult",
    "build_manifest",
    "sha256_bytes",
    "sha256_file",
    "write_manifest",
]
