"""Shared CLI plumbing: settings from global options, session bootstrap, error mapping."""

from __future__ import annotations

import contextlib
from dataclasses import dataclass
from typing import Iterator

import typer

from rrmft.app.state import AppState, record, set_dataset
from rrmft.data.dataset import load_dataset
from rrmft.data.loader import Loader, LoaderConfig
from rrmft.errors import RRMFTError


@dataclass(frozen=True)
class CliSettings:
    data_root: str = "."
    lang: str = "fr"
    require_checksum: bool = False
    retries: int = 3
    backoff_seconds: float = 1.0

    def loader_config(self) -> LoaderConfig:
        return LoaderConfig(
            data_root=self.data_root,
            retries=self.retries,
            backoff_seconds=self.backoff_seconds,
            require_checksum=self.require_checksum,
        )


def settings(ctx: typer.Context) -> CliSettings:
    obj = ctx.find_object(CliSettings)
    return obj if obj is not None else CliSettings()


def make_loader(ctx: typer.Context) -> Loader:
    return Loader(settings(ctx).loader_config())


def open_session(ctx: typer.Context, *, with_dataset: bool = True) -> tuple[AppState, Loader]:
    """Build a fresh AppState, loading the startup dataset unless told not to."""
    s = settings(ctx)
    loader = Loader(s.loader_config())
    state = AppState(lang=s.lang)
    if with_dataset:
        record(state, "Loading FDA RRM-FT data...")
        try:
            set_dataset(state, load_dataset(loader))
        except RRMFTError as e:
            record(state, f"Critical error: {e}", "error")
            raise
        record(state, "Data loaded successfully", "success")
    return state, loader


@contextlib.contextmanager
def cli_errors() -> Iterator[None]:
    """Map rrmft errors to a one-line message on stderr and exit code 1."""
    try:
        yield
    except RRMFTError as e:
        typer.echo(f"error: {e}", err=True)
        raise typer.Exit(code=1) from e
