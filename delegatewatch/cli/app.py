"""Main Typer application: imports and registers all CLI commands.

Entry point: ``delegatewatch`` (configured via pyproject.toml scripts).
"""

from __future__ import annotations

import typer

from delegatewatch.cli.commands.status_cmd import status_cmd
from delegatewatch.cli.commands.watch_cmd import watch_cmd

app = typer.Typer(
    name="delegatewatch",
    help="delegatewatch: forging health monitor for DPoS delegates.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)

app.command(name="watch", help="Follow a peer and print delegate events.")(watch_cmd)
app.command(name="status", help="Show the forging status of every delegate.")(status_cmd)


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
