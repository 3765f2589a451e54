from __future__ import annotations

from typing import Annotated

import typer
from typer.main import get_command

from covgate._meta import __version__
from covgate.cli import check


def _version_callback(value: bool) -> None:  # noqa: FBT001
    if value:
        typer.echo(f"covgate {__version__}")
        raise typer.Exit


def create_app() -> typer.Typer:
    app = typer.Typer(help="Coverage quality gate: compare measured coverage against per-metric targets.")

    @app.callback()
    def _root(
        *,
        version: Annotated[
            bool,
            typer.Option("--version", help="Show version and exit", callback=_version_callback, is_eager=True),
        ] = False,
    ) -> None:
        del version  # handled eagerly by _version_callback

    @app.command("version")
    def _version() -> None:
        """Print the version and exit."""
        typer.echo(__version__)

    check.register(app)

    return app


def main() -> None:
    app = create_app()
    get_command(app)()


# Click-compatible object for tooling that imports it
cli = get_command(create_app())

__all__ = ["cli", "create_app", "main"]
