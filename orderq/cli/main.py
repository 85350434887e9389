#!/usr/bin/env python3
"""
orderq CLI

Main entrypoint for the orderq command-line tool.
"""

import typer
from rich.console import Console
from rich.table import Table

from orderq import QUESTION_TYPE, __version__
from orderq.cli.commands import log, restore, submit

# Initialize Typer app
app = typer.Typer(
    name="orderq",
    help="Ordering question submission log CLI",
    add_completion=False,
)

# Console for rich output
console = Console()

# Add command groups
app.add_typer(log.app, name="log", help="Submission log operations")
app.add_typer(restore.app, name="restore", help="Reconnect reconstructions")

# Add standalone commands
app.command(name="submit")(submit.submit_command)


@app.command()
def version():
    """Show version information."""
    table = Table(show_header=False, box=None)
    table.add_row("[bold]orderq[/bold]", f"v{__version__}")
    table.add_row("Question type", QUESTION_TYPE)

    console.print(table)


def main():
    """Main entrypoint."""
    app()


if __name__ == "__main__":
    main()
