"""
Submit command: ingest one ordering answer into a file log
"""

import json
import os
import sys
from typing import List, Optional

import typer
from rich.console import Console

from orderq.config import Settings
from orderq.core.errors import SubmissionLogError, SubmissionValidationError
from orderq.hooks import ON_INGEST
from orderq.logging_config import setup_logging
from orderq.log import FileSubmissionLog
from orderq.notify import PROGRESS_EVENT, RecordingChannel
from orderq.plugin import build_plugin
from orderq.questions import load_questions

console = Console()


def submit_command(
    question: str = typer.Option(..., "--question", help="Question uid"),
    session: str = typer.Option(..., "--session", "-s", help="Session id"),
    participant: str = typer.Option(..., "--participant", "-a", help="Participant (answeree) id"),
    items: List[str] = typer.Argument(..., help="Item identifiers in submitted order"),
    questions_path: str = typer.Option(..., "--questions", "-q", help="JSON file of question definitions"),
    log_path: str = typer.Option(Settings.from_env().log_path, "--log", "-l", help="Path to submission log file"),
    confidence: Optional[int] = typer.Option(None, "--confidence", help="Self-reported confidence"),
    json_output: bool = typer.Option(False, "--json", help="Output the progress event as JSON"),
):
    """
    Append one submission and print the progress event it produces.

    Examples:
        orderq submit --question q1 -s s1 -a alice -q questions.json A B C
    """
    settings = Settings.from_env()
    setup_logging(settings.log_level, settings.log_format, stream=sys.stderr)

    if not os.path.exists(questions_path):
        console.print(f"[red]Error: Questions file not found:[/red] {questions_path}")
        raise typer.Exit(2)

    questions = load_questions(questions_path)
    channel = RecordingChannel()
    hooks = build_plugin(questions, FileSubmissionLog(log_path, questions), channel)

    answer = {
        "questionUid": question,
        "answeree": participant,
        "session": session,
        "submission": list(items),
        "confidence": confidence,
    }
    try:
        hooks.run(ON_INGEST, answer)
    except (SubmissionValidationError, SubmissionLogError) as e:
        console.print(f"[red]Rejected:[/red] {e}")
        raise typer.Exit(1)

    progress = channel.named(PROGRESS_EVENT)
    if not progress:
        console.print(f"[yellow]Question {question} is not an ordering question; passed through[/yellow]")
        return

    payload = progress[-1].payload
    if json_output:
        print(json.dumps(payload, indent=2))
    else:
        console.print(
            f"[green]✓ Accepted[/green] {participant} → {' > '.join(items)} "
            f"({len(payload['submissions'])} participants on {question})"
        )
