from __future__ import annotations

import json
from pathlib import Path

from typer.testing import CliRunner

from rrmft.cli.main import app


def _run(data_root: Path, *args: str):
    runner = CliRunner()
    return runner.invoke(app, ["--data-root", str(data_root), "--backoff", "0", *args])


def test_status_reports_commodity_count(data_root: Path) -> None:
    res = _run(data_root, "status")
    assert res.exit_code == 0, res.output
    assert "Ready: 3 commodities" in res.output


def test_list_uses_language(data_root: Path) -> None:
    res = _run(data_root, "--lang", "en", "list")
    assert res.exit_code == 0, res.output
    assert res.output.splitlines()[:2] == ["Leafy greens (LEAFY)", "Soft cheese (CHEESE)"]


def test_show_prints_pairs_highest_first(data_root: Path) -> None:
    res = _run(data_root, "--lang", "en", "show", "LEAFY")
    assert res.exit_code == 0, res.output
    out = res.output
    assert "Leafy greens (LEAFY)" in out
    assert "Category: Vegetables" in out
    assert "FTL" in out
    assert "Max score: 7.2" in out
    assert out.index("Shiga toxin-producing E. coli") < out.index("Salmonella") < out.index("Listeria monocytogenes")


def test_show_unknown_code_is_usage_error(data_root: Path) -> None:
    res = _run(data_root, "show", "NOPE")
    assert res.exit_code == 2


def test_tampered_file_fails_loudly(data_root: Path) -> None:
    (data_root / "en" / "commodities_table_2A.json").write_text('{"X": {}}', encoding="utf-8")
    res = _run(data_root, "status")
    assert res.exit_code == 1
    assert "checksum mismatch for en/commodities_table_2A.json" in res.output

    res = _run(data_root, "verify")
    assert res.exit_code == 1
    assert "FAIL  en/commodities_table_2A.json" in res.output


def test_verify_ok(data_root: Path) -> None:
    res = _run(data_root, "verify")
    assert res.exit_code == 0, res.output
    assert "OK  en/ftl_table_1A.json" in res.output


def test_require_checksum_without_manifest(tmp_path: Path) -> None:
    from conftest import write_data_root

    root = write_data_root(tmp_path / "bare", manifest=False)
    assert _run(root, "status").exit_code == 0
    res = _run(root, "--require-checksum", "status")
    assert res.exit_code == 1
    assert "no expected sha256" in res.output


def test_build_manifest_then_verify(tmp_path: Path) -> None:
    from conftest import write_data_root

    root = write_data_root(tmp_path / "bare", manifest=False)
    res = CliRunner().invoke(app, ["build-manifest", str(root)])
    assert res.exit_code == 0, res.output
    manifest = json.loads((root / "manifest.json").read_text(encoding="utf-8"))
    assert {s["path"] for s in manifest["sources"]} >= {"en/commodities_table_2A.json", "i18n/hazard.json"}
    assert _run(root, "--require-checksum", "verify").exit_code == 0


def test_export_writes_report(data_root: Path, tmp_path: Path) -> None:
    out_dir = tmp_path / "exports"
    res = _run(data_root, "export", "CHEESE", "--out-dir", str(out_dir))
    assert res.exit_code == 0, res.output
    written = Path(res.output.strip())
    assert written.parent == out_dir
    report = json.loads(written.read_text(encoding="utf-8"))
    assert report["commodity"]["code"] == "CHEESE"
    assert report["pairs"][0]["score"] == 8


def test_save_and_open_project(data_root: Path, tmp_path: Path) -> None:
    att = tmp_path / "audit.txt"
    att.write_text("audit", encoding="utf-8")
    out_dir = tmp_path / "projects"
    res = _run(
        data_root,
        "save",
        "LEAFY",
        "--name",
        "Café & Co.",
        "--ref",
        "R-9",
        "--attach",
        str(att),
        "--out-dir",
        str(out_dir),
    )
    assert res.exit_code == 0, res.output
    archive = Path(res.output.strip())
    assert archive.name.startswith("rrmft_cafe_and_co_") and archive.suffix == ".rrm"

    extract_dir = tmp_path / "restored"
    res = CliRunner().invoke(app, ["open", str(archive), "--extract", str(extract_dir)])
    assert res.exit_code == 0, res.output
    assert "Name: Café & Co." in res.output
    assert "Reference: R-9" in res.output
    assert "Commodity: LEAFY (category VEG)" in res.output
    assert "Pairs: 3" in res.output
    assert "Attachments: audit.txt" in res.output
    assert (extract_dir / "audit.txt").read_text(encoding="utf-8") == "audit"


def test_open_rejects_non_archive(tmp_path: Path) -> None:
    bad = tmp_path / "bad.rrm"
    bad.write_bytes(b"nope")
    res = CliRunner().invoke(app, ["open", str(bad)])
    assert res.exit_code == 1
    assert "not a project archive" in res.output


def test_render_without_selection_prints_placeholder() -> None:
    from rrmft.app.state import AppState
    from rrmft.cli.commands.browse import _render_selection

    assert _render_selection(AppState()) == "No commodity selected"
