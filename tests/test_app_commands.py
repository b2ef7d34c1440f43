from __future__ import annotations

import json
from datetime import date
from pathlib import Path

import pytest

from conftest import PAIRS, FakeTransport, data_files, dump_json
from rrmft.app.commands import (
    ChangeLanguage,
    ExportReport,
    LoadProject,
    SaveProject,
    Search,
    SelectCommodity,
    dispatch,
)
from rrmft.app.report import DISCLAIMER
from rrmft.app.state import AppState, apply_pairs, begin_selection, set_dataset, set_project_fields
from rrmft.data.dataset import load_dataset
from rrmft.data.loader import Loader, LoaderConfig
from rrmft.errors import NoSelectionError, PackagingError

TODAY = date(2026, 10, 18)


@pytest.fixture
def session() -> tuple[AppState, Loader, FakeTransport]:
    files = data_files()
    files["manifest.json"] = b'{"sources": []}'
    files["metadata/checksums.json"] = b"{}"
    transport = FakeTransport(files)
    loader = Loader(LoaderConfig(backoff_seconds=0), transport=transport, sleep=lambda _s: None)
    state = AppState()
    set_dataset(state, load_dataset(loader))
    return state, loader, transport


def test_dataset_options_sorted_by_localized_name(session) -> None:
    state, _, _ = session
    assert state.dataset is not None
    assert [o.code for o in state.dataset.options("fr")] == ["CHEESE", "LEAFY", "NUTS"]
    assert [o.label for o in state.dataset.options("en")] == [
        "Leafy greens (LEAFY)",
        "Soft cheese (CHEESE)",
        "Tree nuts (NUTS)",
    ]


def test_select_commodity_loads_pairs(session) -> None:
    state, loader, _ = session
    c = dispatch(state, loader, SelectCommodity("LEAFY"))
    assert c.ftl is True
    assert state.current.commodity == "LEAFY"
    assert state.current.category == "VEG"
    assert state.current.pairs == PAIRS["LEAFY"]


def test_select_unknown_commodity_is_noop(session) -> None:
    state, loader, _ = session
    assert dispatch(state, loader, SelectCommodity("NOPE")) is None
    assert state.current.commodity is None


def test_pair_table_failure_falls_back_to_empty_pairs(session) -> None:
    state, loader, _ = session
    dispatch(state, loader, SelectCommodity("NUTS"))
    assert state.current.commodity == "NUTS"
    assert state.current.pairs == {}
    last = state.log.entries[-1]
    assert last.type == "error"
    assert last.message.startswith("Error loading pairs for NUTS")


def test_malformed_pair_table_falls_back_to_empty_pairs(session) -> None:
    state, loader, transport = session
    transport.files["en/pairs_table_2B/CHEESE.json"] = dump_json({"LM": {"c2": "high", "score": 3}})
    c = dispatch(state, loader, SelectCommodity("CHEESE"))
    assert c.code == "CHEESE"
    assert state.current.commodity == "CHEESE"
    assert state.current.pairs == {}
    last = state.log.entries[-1]
    assert last.type == "error"
    assert "pairs_table_2B/CHEESE.json" in last.message
    assert "expected number" in last.message


def test_stale_pair_result_is_dropped() -> None:
    state = AppState()
    first = begin_selection(state, "LEAFY", "VEG")
    second = begin_selection(state, "CHEESE", "DAIRY")
    assert apply_pairs(state, second, PAIRS["CHEESE"]) is True
    assert apply_pairs(state, first, PAIRS["LEAFY"]) is False
    assert state.current.commodity == "CHEESE"
    assert state.current.pairs == PAIRS["CHEESE"]


def test_search_matches_name_or_code(session) -> None:
    state, loader, _ = session
    assert dispatch(state, loader, Search("fromage")) == "CHEESE"
    assert state.current.commodity == "CHEESE"
    assert dispatch(state, loader, Search("nuts")) == "NUTS"
    assert dispatch(state, loader, Search("")) is None
    assert dispatch(state, loader, Search("zzz")) is None
    assert state.current.commodity == "NUTS"


def test_change_language_reselects_and_logs(session) -> None:
    state, loader, transport = session
    dispatch(state, loader, SelectCommodity("LEAFY"))
    before = transport.calls.count("en/pairs_table_2B/LEAFY.json")
    assert dispatch(state, loader, ChangeLanguage("en")) == "en"
    assert state.lang == "en"
    assert transport.calls.count("en/pairs_table_2B/LEAFY.json") == before + 1
    assert state.log.entries[-1].message == "Language changed to English"
    with pytest.raises(ValueError, match="unsupported language"):
        dispatch(state, loader, ChangeLanguage("de"))


def test_save_requires_selection(session, tmp_path: Path) -> None:
    state, loader, _ = session
    with pytest.raises(NoSelectionError):
        dispatch(state, loader, SaveProject(out_dir=tmp_path))
    assert state.log.entries[-1].type == "warning"


def test_save_then_load_restores_state(session, tmp_path: Path) -> None:
    state, loader, _ = session
    dispatch(state, loader, SelectCommodity("LEAFY"))
    note = tmp_path / "note.txt"
    note.write_text("hello", encoding="utf-8")
    set_project_fields(state, name="  Café & Co. ", reference="R1", notes="n", attachments=[note])

    out = dispatch(state, loader, SaveProject(out_dir=tmp_path / "out", today=TODAY))
    assert out.name == "rrmft_cafe_and_co_2026-10-18.rrm"
    assert state.log.entries[-1].message == f"Project saved: {out.name}"

    fresh = AppState()
    doc = dispatch(fresh, loader, LoadProject(path=out))
    assert doc.metadata.name == "Café & Co."
    assert fresh.project.name == "Café & Co."
    assert fresh.project.reference == "R1"
    assert fresh.current.commodity == "LEAFY"
    assert fresh.current.category == "VEG"
    assert fresh.current.pairs == PAIRS["LEAFY"]
    assert fresh.log.entries[-1].message == f"Project loaded: {out.name}"


def test_load_bad_archive_logs_and_raises(session, tmp_path: Path) -> None:
    state, loader, _ = session
    bad = tmp_path / "bad.rrm"
    bad.write_bytes(b"nope")
    with pytest.raises(Exception, match="not a project archive"):
        dispatch(state, loader, LoadProject(path=bad))
    assert state.log.entries[-1].type == "error"


def test_export_report_sorted_with_disclaimer(session, tmp_path: Path) -> None:
    state, loader, _ = session
    dispatch(state, loader, SelectCommodity("LEAFY"))
    out = dispatch(state, loader, ExportReport(out_dir=tmp_path, today=TODAY))
    assert out.name == "rrmft_export_LEAFY_2026-10-18.json"

    report = json.loads(out.read_text(encoding="utf-8"))
    assert report["commodity"] == {"code": "LEAFY", "name": "Leafy greens", "category": "Vegetables", "ftl": True}
    assert [p["score"] for p in report["pairs"]] == [7.2, 6.4, 5.1]
    assert report["pairs"][0]["hazard"] == "Shiga toxin-producing E. coli"
    assert report["pairs"][0]["criteria"]["c1"] == 9
    assert report["metadata"]["disclaimer"] == DISCLAIMER


def test_export_without_selection_raises(session, tmp_path: Path) -> None:
    state, loader, _ = session
    with pytest.raises(NoSelectionError):
        dispatch(state, loader, ExportReport(out_dir=tmp_path))


def test_export_write_failure_is_logged_as_packaging_error(session, tmp_path: Path) -> None:
    state, loader, _ = session
    dispatch(state, loader, SelectCommodity("LEAFY"))
    blocker = tmp_path / "not_a_dir"
    blocker.write_text("x", encoding="utf-8")
    with pytest.raises(PackagingError, match="failed to write"):
        dispatch(state, loader, ExportReport(out_dir=blocker, today=TODAY))
    last = state.log.entries[-1]
    assert last.type == "error"
    assert last.message.startswith("Error exporting report")
