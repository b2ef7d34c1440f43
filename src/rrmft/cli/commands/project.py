"""`rrmft save` and `rrmft open` commands (`.rrm` project archives)."""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import typer

from rrmft.app.commands import LoadProject, SaveProject, SelectCommodity, dispatch
from rrmft.app.state import set_project_fields
from rrmft.cli.session import cli_errors, open_session
from rrmft.project.packager import extract_attachments, list_attachments


def register(app: typer.Typer) -> None:
    @app.command("save")
    def save(
        ctx: typer.Context,
        code: str = typer.Argument(..., help="Commodity code to save."),
        name: str = typer.Option("", "--name", help="Project name."),
        reference: str = typer.Option("", "--ref", help="Project reference."),
        notes: str = typer.Option("", "--notes", help="Free-text notes."),
        attach: Optional[List[Path]] = typer.Option(
            None,
            "--attach",
            exists=True,
            dir_okay=False,
            readable=True,
            help="File to bundle under attachments/ (repeatable).",
        ),
        out_dir: str = typer.Option(".", "--out-dir", help="Directory for the .rrm archive."),
    ) -> None:
        """Save the selected commodity and project details to an .rrm archive."""
        with cli_errors():
            state, loader = open_session(ctx)
            if dispatch(state, loader, SelectCommodity(code)) is None:
                raise typer.BadParameter(f"unknown commodity code: {code}", param_hint="CODE")
            set_project_fields(state, name=name, reference=reference, notes=notes, attachments=attach or [])
            out = dispatch(state, loader, SaveProject(out_dir=Path(out_dir)))
        typer.echo(str(out))

    @app.command("open")
    def open_project(
        ctx: typer.Context,
        path: Path = typer.Argument(..., exists=True, dir_okay=False, readable=True, help="Project .rrm file."),
        extract: Optional[Path] = typer.Option(None, "--extract", help="Extract attachments into this directory."),
    ) -> None:
        """Print the contents of an .rrm project archive."""
        with cli_errors():
            state, loader = open_session(ctx, with_dataset=False)
            doc = dispatch(state, loader, LoadProject(path=path))
            archive = path.read_bytes()
            attachments = list_attachments(archive)
            extracted = extract_attachments(archive, extract) if extract is not None else []

        md = doc.metadata
        typer.echo(f"Name: {md.name}")
        typer.echo(f"Reference: {md.reference}")
        typer.echo(f"Notes: {md.notes}")
        typer.echo(f"Created: {md.created}")
        typer.echo(f"Commodity: {doc.analysis.commodity or '-'} (category {doc.analysis.category or '-'})")
        typer.echo(f"Pairs: {len(doc.analysis.pairs or {})}")
        typer.echo(f"Attachments: {', '.join(attachments) if attachments else '-'}")
        for p in extracted:
            typer.echo(f"extracted {p}")
        if doc.log:
            typer.echo("Log:")
            for entry in doc.log:
                typer.echo(f"  {entry.render()}")
