"""rrmft CLI entrypoint.

Global options configure the data root and language; each subcommand loads
what it needs through a verified loader.
"""

from __future__ import annotations

import logging
from typing import Optional

import typer

from rrmft.cli.session import CliSettings

app = typer.Typer(
    name="rrmft",
    add_completion=False,
    no_args_is_help=True,
    help="FDA RRM-FT assistant: browse FSMA 204 risk scores and manage .rrm projects.",
)


@app.callback()
def _callback(
    ctx: typer.Context,
    data_root: str = typer.Option(
        ".",
        "--data-root",
        envvar="RRMFT_DATA_ROOT",
        help="Directory or http(s) base URL holding manifest.json and the data tables.",
    ),
    lang: str = typer.Option("fr", "--lang", envvar="RRMFT_LANG", help="Display language: fr|en."),
    require_checksum: bool = typer.Option(
        False,
        "--require-checksum",
        envvar="RRMFT_REQUIRE_CHECKSUM",
        help="Refuse data files that have no manifest/checksum entry.",
    ),
    retries: int = typer.Option(3, "--retries", min=1, help="Fetch attempts per file."),
    backoff: float = typer.Option(
        1.0, "--backoff", envvar="RRMFT_BACKOFF", min=0.0, help="Seconds added to the wait after each failed fetch."
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log progress to stderr."),
    log_file: Optional[str] = typer.Option(None, "--log-file", help="Also append logs to this file."),
) -> None:
    """RRM-FT CLI."""
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if log_file:
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=handlers,
        force=True,
    )
    if lang not in ("fr", "en"):
        raise typer.BadParameter("lang must be 'fr' or 'en'", param_hint="--lang")
    ctx.obj = CliSettings(
        data_root=data_root,
        lang=lang,
        require_checksum=require_checksum,
        retries=retries,
        backoff_seconds=backoff,
    )


@app.command("version")
def version() -> None:
    """Print the installed rrmft version."""
    from rrmft import __version__

    typer.echo(__version__)


def _register_commands() -> None:
    """Register CLI subcommands.

    Importing these modules must remain lightweight so `rrmft --help` is fast.
    """
    from rrmft.cli.commands import browse as browse_cmd
    from rrmft.cli.commands import export_report as export_report_cmd
    from rrmft.cli.commands import project as project_cmd
    from rrmft.cli.commands import verify_data as verify_data_cmd

    verify_data_cmd.register(app)
    browse_cmd.register(app)
    export_report_cmd.register(app)
    project_cmd.register(app)


_register_commands()


def main() -> None:
    app()
