from __future__ import annotations

import re
from datetime import date, datetime, timezone

import pytest

from rrmft.project.slug import DEFAULT_SLUG, export_filename, project_filename, slugify

SLUG_RE = re.compile(r"^[a-z0-9_]{0,120}$")


def test_slugify_example() -> None:
    assert slugify("Café & Co.") == "cafe_and_co"


@pytest.mark.parametrize("text", ["", None, "!!!", "   ", "日本語"])
def test_slugify_empty_result_falls_back(text) -> None:
    assert slugify(text) == DEFAULT_SLUG


@pytest.mark.parametrize(
    "text",
    [
        "Café & Co.",
        "  Leading and trailing  ",
        "__already_slugged__",
        "Ünïcödé—dashes—and — spaces",
        "a" * 119 + " b" * 10,
        "x" * 500,
        "Project #42 (draft) / v2",
    ],
)
def test_slugify_shape_and_idempotence(text: str) -> None:
    s = slugify(text)
    assert SLUG_RE.match(s)
    assert len(s) <= 120
    assert slugify(s) == s


def test_slugify_truncation_does_not_leave_trailing_underscore() -> None:
    s = slugify("a" * 119 + " tail")
    assert s == "a" * 119


def test_project_and_export_filenames() -> None:
    d = date(2026, 10, 18)
    assert project_filename("Café & Co.", d) == "rrmft_cafe_and_co_2026-10-18.rrm"
    assert project_filename("", d) == "rrmft_project_2026-10-18.rrm"
    assert export_filename("LEAFY", d) == "rrmft_export_LEAFY_2026-10-18.json"


def test_default_filename_date_is_utc() -> None:
    day = datetime.now(timezone.utc).date().isoformat()
    assert project_filename("x") == f"rrmft_x_{day}.rrm"
    assert export_filename("LEAFY") == f"rrmft_export_LEAFY_{day}.json"
