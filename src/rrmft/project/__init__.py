"""rrmft project archives (`.rrm`).

- `project.json` holds metadata, the current analysis and recent log entries
- `attachments/` holds verbatim copies of user-supplied files
"""

from __future__ import annotations

from .document import SCHEMA_VERSION, Analysis, ProjectDocument, ProjectMetadata
from .packager import (
    ATTACHMENTS_DIR,
    LOG_EXPORT_LIMIT,
    PROJECT_ENTRY,
    build_document,
    extract_attachments,
    list_attachments,
    pack,
    read_project,
    unpack,
    write_project,
)
from .slug import DEFAULT_SLUG, export_filename, project_filename, slugify

__all__ = [
    "SCHEMA_VERSION",
    "Analysis",
    "ProjectDocument",
    "ProjectMetadata",
    "ATTACHMENTS_DIR",
    "LOG_EXPORT_LIMIT",
    "PROJECT_ENTRY",
    "build_document",
    "extract_attachments",
    "list_attachments",
    "pack",
    "read_project",
    "unpack",
    "write_project",
    "DEFAULT_SLUG",
    "export_filename",
    "project_filename",
    "slugify",
]
