"""
Submission log commands: tail
"""

import json
import os
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from orderq.config import Settings
from orderq.core.errors import SubmissionLogError
from orderq.log import FileSubmissionLog
from orderq.questions import InMemoryQuestionRepository

app = typer.Typer()
console = Console()


def open_log(log_path: str, questions=None) -> FileSubmissionLog:
    """Open an existing file log; a missing file is an error, not a new log."""
    if not os.path.exists(log_path):
        raise FileNotFoundError(log_path)
    return FileSubmissionLog(log_path, questions or InMemoryQuestionRepository())


@app.command()
def tail(
    log_path: str = typer.Option(
        Settings.from_env().log_path,
        "--log",
        "-l",
        help="Path to submission log file",
    ),
    lines: Optional[int] = typer.Option(None, "--lines", "-n", help="Number of records to show"),
    session: Optional[str] = typer.Option(None, "--session", "-s", help="Only records of this session"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    Show the last records of a submission log.

    Examples:
        orderq log tail
        orderq log tail --lines 10
        orderq log tail --session s1 --json
    """
    try:
        records = [sub.to_dict() for sub in open_log(log_path).read()]
    except FileNotFoundError:
        if json_output:
            print(json.dumps({"error": "Log file not found", "path": log_path}))
        else:
            console.print(f"[red]Error: Log file not found:[/red] {log_path}")
        raise typer.Exit(2)
    except SubmissionLogError as e:
        if json_output:
            print(json.dumps({"error": str(e)}))
        else:
            console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(2)

    if session:
        records = [rec for rec in records if rec["session"] == session]
    if lines:
        records = records[-lines:]

    if json_output:
        print(json.dumps({"submissions": records, "count": len(records)}, indent=2))
        return

    if not records:
        console.print("[yellow]Submission log is empty[/yellow]")
        return

    table = Table(title=f"Submission Log: {log_path}")
    table.add_column("Seq", style="cyan")
    table.add_column("Session", style="magenta")
    table.add_column("Question", style="green")
    table.add_column("Answeree", style="yellow")
    table.add_column("Submitted", style="dim")
    table.add_column("Order")

    for rec in records:
        table.add_row(
            str(rec["seq"]),
            rec["session"],
            rec["question_uid"],
            rec["answeree"],
            str(rec["submit_date"]),
            " > ".join(rec["submission"]),
        )

    console.print(table)
    console.print(f"\n[bold]Total submissions:[/bold] {len(records)}")
