"""rrmft application layer: owned state, commands and the export report."""

from __future__ import annotations

from .commands import (
    ChangeLanguage,
    Command,
    ExportReport,
    LoadProject,
    SaveProject,
    Search,
    SelectCommodity,
    dispatch,
)
from .report import DISCLAIMER, build_report
from .state import AppState, ProjectFields, Selection, apply_pairs, begin_selection, set_project_fields

__all__ = [
    "AppState",
    "ProjectFields",
    "Selection",
    "apply_pairs",
    "begin_selection",
    "set_project_fields",
    "ChangeLanguage",
    "Command",
    "ExportReport",
    "LoadProject",
    "SaveProject",
    "Search",
    "SelectCommodity",
    "dispatch",
    "DISCLAIMER",
    "build_report",
]
