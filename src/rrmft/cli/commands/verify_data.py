"""`rrmft verify` and `rrmft build-manifest` commands.

`verify` loads every file listed in the data root's manifest and reports the
sha256 status of each. `build-manifest` hashes a local data directory and
writes its `manifest.json`.
"""

from __future__ import annotations

from pathlib import Path

import typer

from rrmft.cli.session import cli_errors, make_loader
from rrmft.data.manifest import MANIFEST_PATH, build_manifest, write_manifest


def register(app: typer.Typer) -> None:
    @app.command("verify")
    def verify(ctx: typer.Context) -> None:
        """Verify every manifest source against its sha256."""
        loader = make_loader(ctx)
        with cli_errors():
            results = loader.verify_all()

        if not results:
            typer.echo("no manifest sources to verify")
            return
        failed = 0
        for r in results:
            status = "OK" if r.ok else "FAIL"
            typer.echo(f"{status}  {r.path}  {r.message}")
            failed += 0 if r.ok else 1
        if failed:
            typer.echo(f"{failed} of {len(results)} file(s) failed verification", err=True)
            raise typer.Exit(code=1)

    @app.command("build-manifest")
    def build_manifest_cmd(
        data_dir: str = typer.Argument(..., help="Local data directory to hash."),
    ) -> None:
        """Write `<data_dir>/manifest.json` listing every JSON file with its sha256."""
        root = Path(data_dir)
        try:
            manifest = build_manifest(root)
        except ValueError as e:
            raise typer.BadParameter(str(e)) from e
        out = root / MANIFEST_PATH
        write_manifest(out, manifest)
        typer.echo(f"{out} ({len(manifest['sources'])} sources)")
