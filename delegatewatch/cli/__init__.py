"""delegatewatch CLI: Typer-based command-line interface.

Provides the ``delegatewatch`` command with subcommands for watching a
peer continuously and printing a one-shot delegate status table.

All output uses Rich for formatted terminal display.
"""
