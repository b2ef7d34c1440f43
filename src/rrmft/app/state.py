"""Application state and the functions allowed to mutate it.

`AppState` is owned by the caller and passed explicitly to every command.
Only the functions in this module write to it.

Pair-table results are tagged with the selection token current when the
request was issued; a result whose token is no longer current is dropped so a
slow response can never overwrite a newer selection.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable

from rrmft.core.activity import ActivityLog, LogEntry
from rrmft.core.i18n import DEFAULT_LANGUAGE, check_language
from rrmft.data.dataset import Dataset
from rrmft.project.document import ProjectDocument


@dataclass
class Selection:
    commodity: str | None = None
    category: str | None = None
    pairs: dict[str, Any] | None = None
    token: int = 0


@dataclass
class ProjectFields:
    name: str = ""
    reference: str = ""
    notes: str = ""
    attachments: list[Path] = field(default_factory=list)


@dataclass
class AppState:
    lang: str = DEFAULT_LANGUAGE
    dataset: Dataset | None = None
    current: Selection = field(default_factory=Selection)
    project: ProjectFields = field(default_factory=ProjectFields)
    log: ActivityLog = field(default_factory=ActivityLog)


def record(state: AppState, message: str, type: str = "info") -> LogEntry:
    return state.log.add(message, type)


def set_dataset(state: AppState, dataset: Dataset) -> None:
    state.dataset = dataset


def set_language(state: AppState, lang: str) -> str:
    state.lang = check_language(lang)
    return state.lang


def begin_selection(state: AppState, commodity: str, category: str | None) -> int:
    """Select a commodity and return the token its pair-table result must carry."""
    cur = state.current
    cur.token += 1
    cur.commodity = commodity
    cur.category = category
    cur.pairs = None
    return cur.token


def apply_pairs(state: AppState, token: int, pairs: dict[str, Any]) -> bool:
    """Store a pair table unless a newer selection has started since `token`."""
    if token != state.current.token:
        return False
    state.current.pairs = pairs
    return True


def set_project_fields(
    state: AppState,
    *,
    name: str | None = None,
    reference: str | None = None,
    notes: str | None = None,
    attachments: Iterable[Path | str] | None = None,
) -> ProjectFields:
    p = state.project
    if name is not None:
        p.name = name.strip()
    if reference is not None:
        p.reference = reference.strip()
    if notes is not None:
        p.notes = notes.strip()
    if attachments is not None:
        p.attachments = [Path(a) for a in attachments]
    return p


def apply_project(state: AppState, doc: ProjectDocument) -> None:
    """Full overwrite of project fields, selection and log from a loaded project."""
    state.project = ProjectFields(
        name=doc.metadata.name,
        reference=doc.metadata.reference,
        notes=doc.metadata.notes,
    )
    token = state.current.token + 1
    state.current = Selection(
        commodity=doc.analysis.commodity,
        category=doc.analysis.category,
        pairs=doc.analysis.pairs,
        token=token,
    )
    state.log.replace(doc.log)
