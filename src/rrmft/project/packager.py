"""Project archive (`.rrm`) pack/unpack.

An archive is a ZIP containing:
- project.json          (pretty-printed ProjectDocument)
- attachments/<name>    (verbatim copies of user-supplied files, optional)

Packing never reaches into live application state; callers pass the pieces
in and apply the unpacked document themselves.
"""

from __future__ import annotations

import io
import json
import logging
import zipfile
from datetime import datetime, timezone
from pathlib import Path, PurePosixPath
from typing import Iterable, Union

from rrmft.core.activity import LogEntry
from rrmft.errors import FormatError, PackagingError, ParseError

from .document import Analysis, ProjectDocument, ProjectMetadata

logger = logging.getLogger(__name__)

PROJECT_ENTRY = "project.json"
ATTACHMENTS_DIR = "attachments"
# Log entries carried in a saved project.
LOG_EXPORT_LIMIT = 20

# A path on disk, or an in-memory (filename, bytes) pair.
Attachment = Union[str, Path, tuple[str, bytes]]


def _now_utc_iso() -> str:
    # Example: 2025-12-16T00:00:00.000Z (same shape as JavaScript toISOString)
    now = datetime.now(timezone.utc)
    return now.strftime("%Y-%m-%dT%H:%M:%S.") + f"{now.microsecond // 1000:03d}Z"


def build_document(
    metadata: ProjectMetadata,
    analysis: Analysis,
    log: Iterable[LogEntry] = (),
) -> ProjectDocument:
    """Assemble the document to save; only the last LOG_EXPORT_LIMIT log entries are kept."""
    if not metadata.created:
        metadata = ProjectMetadata(
            name=metadata.name,
            reference=metadata.reference,
            notes=metadata.notes,
            created=_now_utc_iso(),
            version=metadata.version,
            lang=metadata.lang,
        )
    entries = list(log)[-LOG_EXPORT_LIMIT:]
    return ProjectDocument(metadata=metadata, analysis=analysis, log=entries)


def _read_attachment(item: Attachment) -> tuple[str, bytes]:
    if isinstance(item, tuple):
        name, data = item
        return PurePosixPath(str(name).replace("\\", "/")).name, bytes(data)
    p = Path(item)
    return p.name, p.read_bytes()


def pack(
    metadata: ProjectMetadata,
    analysis: Analysis,
    log: Iterable[LogEntry] = (),
    attachments: Iterable[Attachment] = (),
) -> bytes:
    """Build an `.rrm` archive and return its bytes.

    Raises:
        PackagingError: an attachment cannot be read or the archive cannot be written.
    """
    doc = build_document(metadata, analysis, log)
    text = json.dumps(doc.to_dict(), indent=2, ensure_ascii=False)

    try:
        # Same-name attachments overwrite each other; last one wins.
        files: dict[str, bytes] = {}
        for item in attachments:
            name, data = _read_attachment(item)
            if not name:
                raise PackagingError(f"attachment has no filename: {item!r}")
            files[name] = data

        buf = io.BytesIO()
        with zipfile.ZipFile(buf, "w", compression=zipfile.ZIP_DEFLATED) as zf:
            zf.writestr(PROJECT_ENTRY, text)
            for name, data in files.items():
                zf.writestr(f"{ATTACHMENTS_DIR}/{name}", data)
    except (OSError, zipfile.LargeZipFile, ValueError) as e:
        raise PackagingError(f"failed to build project archive: {e}") from e

    logger.info(f"packed project {doc.metadata.name!r} with {len(files)} attachment(s)")
    return buf.getvalue()


def _open_archive(archive: bytes) -> zipfile.ZipFile:
    try:
        return zipfile.ZipFile(io.BytesIO(archive))
    except zipfile.BadZipFile as e:
        raise FormatError(f"not a project archive: {e}") from e


def unpack(archive: bytes) -> ProjectDocument:
    """Read the ProjectDocument from `.rrm` bytes.

    Raises:
        FormatError: not a ZIP, or `project.json` is missing.
        ParseError: `project.json` is not valid UTF-8 JSON of the expected shape.
    """
    with _open_archive(archive) as zf:
        try:
            raw = zf.read(PROJECT_ENTRY)
        except KeyError as e:
            raise FormatError(f"{PROJECT_ENTRY} not found") from e
    try:
        obj = json.loads(raw.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ParseError(f"{PROJECT_ENTRY}: invalid JSON: {e}") from e
    return ProjectDocument.from_dict(obj)


def _entry_name(filename: str) -> str | None:
    """Basename of an archive entry, or None for names that are empty or point at a directory."""
    name = filename.rsplit("/", 1)[-1]
    return None if name in ("", ".", "..") else name


def list_attachments(archive: bytes) -> list[str]:
    """Attachment filenames stored in the archive, in archive order."""
    prefix = ATTACHMENTS_DIR + "/"
    with _open_archive(archive) as zf:
        names = [i.filename for i in zf.infolist() if not i.is_dir()]
    return [name for name in (_entry_name(n) for n in names if n.startswith(prefix)) if name]


def extract_attachments(archive: bytes, dest: Path) -> list[Path]:
    """Write attachments into `dest` (basenames only) and return the written paths."""
    dest = Path(dest)
    prefix = ATTACHMENTS_DIR + "/"
    out: list[Path] = []
    with _open_archive(archive) as zf:
        for info in zf.infolist():
            if info.is_dir() or not info.filename.startswith(prefix):
                continue
            name = _entry_name(info.filename)
            if name is None:
                continue
            dest.mkdir(parents=True, exist_ok=True)
            target = dest / name
            target.write_bytes(zf.read(info))
            out.append(target)
    return out


def read_project(path: Path) -> ProjectDocument:
    return unpack(Path(path).read_bytes())


def write_project(path: Path, archive: bytes) -> Path:
    p = Path(path)
    try:
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_bytes(archive)
    except OSError as e:
        raise PackagingError(f"failed to write {p}: {e}") from e
    return p
