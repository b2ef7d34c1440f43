"""rrmft: FDA RRM-FT assistant.

Browse FDA food-commodity/hazard risk data (FSMA 204 Risk Ranking Model for
Food Tracing), view the precomputed scores verbatim and save/restore `.rrm`
project archives. Static data files are verified against a sha256 manifest.
"""

from __future__ import annotations

from rrmft.data import Loader, LoaderConfig, load_dataset
from rrmft.errors import FetchError, FormatError, IntegrityError, PackagingError, ParseError, RRMFTError
from rrmft.project import pack, slugify, unpack

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "Loader",
    "LoaderConfig",
    "load_dataset",
    "RRMFTError",
    "FetchError",
    "IntegrityError",
    "ParseError",
    "FormatError",
    "PackagingError",
    "pack",
    "unpack",
    "slugify",
]
