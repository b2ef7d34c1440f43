"""Browsing commands: `status`, `list`, `show`, `search`."""

from __future__ import annotations

import typer

from rrmft.app.commands import Search, SelectCommodity, dispatch
from rrmft.app.state import AppState
from rrmft.cli.session import cli_errors, open_session
from rrmft.core.model import max_score
from rrmft.core.pairs import pairs_frame
from rrmft.data.dataset import Dataset


def _render_selection(state: AppState) -> str:
    ds = state.dataset
    cur = state.current
    c = ds.commodity(cur.commodity) if ds is not None and cur.commodity else None
    if c is None:
        return "No commodity selected"
    lang = state.lang
    name = ds.name("commodity", c.code, lang, c.name)
    category = ds.name("category", c.category, lang, c.category)

    lines = [f"{name} ({c.code})", f"Category: {category}"]
    if c.ftl:
        lines.append("FTL")
    pairs = cur.pairs or {}
    if not pairs:
        lines.append("No data available")
        return "\n".join(lines)

    lines.append(f"Max score: {max_score(pairs):g}")
    hazard_names = {h: ds.name("hazard", h, lang) for h in pairs}
    df = pairs_frame(pairs, hazard_names=hazard_names)
    table = df.drop(columns=["hazard"]).rename(columns={"hazard_name": "hazard"})
    lines.append(table.to_string(index=False))
    return "\n".join(lines)


def _require_dataset(state: AppState) -> Dataset:
    if state.dataset is None:
        typer.echo("error: dataset not loaded", err=True)
        raise typer.Exit(code=1)
    return state.dataset


def register(app: typer.Typer) -> None:
    @app.command("status")
    def status(ctx: typer.Context) -> None:
        """Load the dataset and print a readiness summary."""
        with cli_errors():
            state, _ = open_session(ctx)
        typer.echo(f"Ready: {len(_require_dataset(state))} commodities")

    @app.command("list")
    def list_commodities(ctx: typer.Context) -> None:
        """List commodities sorted by localized name."""
        with cli_errors():
            state, _ = open_session(ctx)
        for opt in _require_dataset(state).options(state.lang):
            typer.echo(opt.label)

    @app.command("show")
    def show(
        ctx: typer.Context,
        code: str = typer.Argument(..., help="Commodity code."),
    ) -> None:
        """Show the hazard-pair scores of one commodity, highest first."""
        with cli_errors():
            state, loader = open_session(ctx)
            if dispatch(state, loader, SelectCommodity(code)) is None:
                raise typer.BadParameter(f"unknown commodity code: {code}", param_hint="CODE")
        typer.echo(_render_selection(state))

    @app.command("search")
    def search(
        ctx: typer.Context,
        query: str = typer.Argument(..., help="Text to find in commodity names or codes."),
    ) -> None:
        """Select the first commodity matching QUERY and show it."""
        with cli_errors():
            state, loader = open_session(ctx)
            code = dispatch(state, loader, Search(query))
        if code is None:
            typer.echo(f"no commodity matches {query!r}", err=True)
            raise typer.Exit(code=1)
        typer.echo(_render_selection(state))
