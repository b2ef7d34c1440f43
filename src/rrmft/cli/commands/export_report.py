"""`rrmft export` command.

Writes `rrmft_export_<code>_<date>.json` with the commodity's hazard pairs
sorted by descending score and the intrinsic-risk disclaimer.
"""

from __future__ import annotations

import typer

from rrmft.app.commands import ExportReport, SelectCommodity, dispatch
from rrmft.cli.session import cli_errors, open_session


def register(app: typer.Typer) -> None:
    @app.command("export")
    def export(
        ctx: typer.Context,
        code: str = typer.Argument(..., help="Commodity code."),
        out_dir: str = typer.Option(".", "--out-dir", help="Directory for the exported JSON report."),
    ) -> None:
        """Export a commodity's hazard-pair scores as a JSON report."""
        with cli_errors():
            state, loader = open_session(ctx)
            if dispatch(state, loader, SelectCommodity(code)) is None:
                raise typer.BadParameter(f"unknown commodity code: {code}", param_hint="CODE")
            out = dispatch(state, loader, ExportReport(out_dir=out_dir))
        typer.echo(str(out))
