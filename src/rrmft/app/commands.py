"""Closed command set driving `AppState` transitions.

Each command is a frozen dataclass; `dispatch(state, loader, command)` runs it
and returns a command-specific result. Errors are recorded in the activity log
before they propagate, except pair-table failures on selection, which fall
back to an empty pair set.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Any, Callable, Union

from rrmft.core.i18n import LANGUAGE_NAMES
from rrmft.core.model import Commodity, parse_pairs
from rrmft.data.dataset import pairs_path
from rrmft.data.loader import Loader
from rrmft.errors import NoSelectionError, PackagingError, ParseError, RRMFTError
from rrmft.project.document import Analysis, ProjectDocument, ProjectMetadata
from rrmft.project.packager import pack, unpack, write_project
from rrmft.project.slug import export_filename, project_filename

from .report import build_report
from .state import AppState, apply_pairs, apply_project, begin_selection, record, set_language

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SelectCommodity:
    code: str


@dataclass(frozen=True)
class ChangeLanguage:
    lang: str


@dataclass(frozen=True)
class Search:
    query: str


@dataclass(frozen=True)
class SaveProject:
    out_dir: Path
    today: date | None = None


@dataclass(frozen=True)
class LoadProject:
    path: Path


@dataclass(frozen=True)
class ExportReport:
    out_dir: Path
    today: date | None = None


Command = Union[SelectCommodity, ChangeLanguage, Search, SaveProject, LoadProject, ExportReport]


def _select(state: AppState, loader: Loader, cmd: SelectCommodity) -> Commodity | None:
    ds = state.dataset
    if not cmd.code or ds is None:
        return None
    commodity = ds.commodity(cmd.code)
    if commodity is None:
        return None

    token = begin_selection(state, commodity.code, commodity.category)
    path = pairs_path(commodity.code)
    try:
        pairs = loader.load(path).content
        if not isinstance(pairs, dict):
            raise ParseError(f"{path}: expected JSON object, got {type(pairs).__name__}")
        try:
            parse_pairs(pairs)
        except ValueError as e:
            raise ParseError(f"{path}: {e}") from e
    except RRMFTError as e:
        record(state, f"Error loading pairs for {commodity.code}: {e}", "error")
        pairs = {}
    if not apply_pairs(state, token, pairs):
        logger.debug(f"dropped stale pair table for {commodity.code}")
    return commodity


def _change_language(state: AppState, loader: Loader, cmd: ChangeLanguage) -> str:
    lang = set_language(state, cmd.lang)
    if state.current.commodity:
        _select(state, loader, SelectCommodity(state.current.commodity))
    record(state, f"Language changed to {LANGUAGE_NAMES[lang]}")
    return lang


def _search(state: AppState, loader: Loader, cmd: Search) -> str | None:
    q = cmd.query.strip().lower()
    if not q or state.dataset is None:
        return None
    for opt in state.dataset.options(state.lang):
        if q in opt.label.lower() or q in opt.code.lower():
            _select(state, loader, SelectCommodity(opt.code))
            return opt.code
    return None


def _save(state: AppState, loader: Loader, cmd: SaveProject) -> Path:
    cur = state.current
    if not cur.commodity:
        msg = "Veuillez d'abord sélectionner un produit" if state.lang == "fr" else "Please select a commodity first"
        record(state, msg, "warning")
        raise NoSelectionError(msg)

    fields = state.project
    metadata = ProjectMetadata(
        name=fields.name or "Untitled",
        reference=fields.reference,
        notes=fields.notes,
        lang=state.lang,
    )
    analysis = Analysis(commodity=cur.commodity, category=cur.category, pairs=cur.pairs)
    try:
        archive = pack(metadata, analysis, state.log.entries, fields.attachments)
        filename = project_filename(fields.name or "project", cmd.today)
        out = write_project(Path(cmd.out_dir) / filename, archive)
    except RRMFTError as e:
        record(state, f"Error saving project: {e}", "error")
        raise
    record(state, f"Project saved: {filename}", "success")
    return out


def _load(state: AppState, loader: Loader, cmd: LoadProject) -> ProjectDocument:
    path = Path(cmd.path)
    try:
        doc = unpack(path.read_bytes())
    except (RRMFTError, OSError) as e:
        record(state, f"Error loading project: {e}", "error")
        raise
    apply_project(state, doc)
    record(state, f"Project loaded: {path.name}", "success")
    return doc


def _export(state: AppState, loader: Loader, cmd: ExportReport) -> Path:
    try:
        report = build_report(state)
    except NoSelectionError as e:
        msg = "Aucune donnée à exporter" if state.lang == "fr" else str(e)
        record(state, msg, "warning")
        raise
    out = Path(cmd.out_dir) / export_filename(str(state.current.commodity), cmd.today)
    try:
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_text(json.dumps(report, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")
    except OSError as e:
        record(state, f"Error exporting report: {e}", "error")
        raise PackagingError(f"failed to write {out}: {e}") from e
    record(state, f"Export completed: {out.name}", "success")
    return out


_HANDLERS: dict[type, Callable[[AppState, Loader, Any], Any]] = {
    SelectCommodity: _select,
    ChangeLanguage: _change_language,
    Search: _search,
    SaveProject: _save,
    LoadProject: _load,
    ExportReport: _export,
}


def dispatch(state: AppState, loader: Loader, command: Command) -> Any:
    """Run `command` against `state`."""
    handler = _HANDLERS.get(type(command))
    if handler is None:
        raise TypeError(f"unknown command: {type(command).__name__}")
    return handler(state, loader, command)
