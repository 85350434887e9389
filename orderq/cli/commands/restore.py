"""
Reconstruction commands: presenter, viewer

Print the bundle a (re)connecting client would receive.
"""

import json

import typer
from rich.console import Console
from rich.table import Table

from orderq.config import Settings
from orderq.core.errors import SubmissionLogError
from orderq.notify import NullChannel
from orderq.questions import load_questions
from orderq.reconnect import ReconnectCoordinator

from .log import open_log

app = typer.Typer()
console = Console()


def _coordinator(log_path: str, questions_path: str) -> ReconnectCoordinator:
    questions = load_questions(questions_path)
    return ReconnectCoordinator(questions, open_log(log_path, questions), NullChannel())


def _fail(message: str, json_output: bool) -> None:
    if json_output:
        print(json.dumps({"error": message}))
    else:
        console.print(f"[red]Error:[/red] {message}")
    raise typer.Exit(2)


@app.command()
def presenter(
    session: str = typer.Option(..., "--session", "-s", help="Session id"),
    presentation: str = typer.Option(..., "--presentation", "-p", help="Presentation id"),
    questions_path: str = typer.Option(..., "--questions", "-q", help="JSON file of question definitions"),
    log_path: str = typer.Option(Settings.from_env().log_path, "--log", "-l", help="Path to submission log file"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    Print the restorePresenter bundle for a session.

    Examples:
        orderq restore presenter -s s1 -p pres1 -q questions.json
    """
    try:
        payload = _coordinator(log_path, questions_path).restore_presenter(session, presentation)
    except FileNotFoundError as e:
        _fail(f"File not found: {e.filename or e}", json_output)
    except (SubmissionLogError, ValueError, KeyError) as e:
        _fail(str(e), json_output)

    if json_output:
        print(json.dumps(payload, indent=2))
        return

    for question in payload["questions"]:
        table = Table(title=f"Question {question['uid']}")
        table.add_column("Participant", style="yellow")
        table.add_column("Submitted", style="dim")
        table.add_column("Order")
        for entry in question["submissions"]:
            table.add_row(entry["participantId"], str(entry["submitDate"]), " > ".join(entry["submission"]))
        console.print(table)
    console.print(f"\n[bold]Questions:[/bold] {len(payload['questions'])}")


@app.command()
def viewer(
    session: str = typer.Option(..., "--session", "-s", help="Session id"),
    presentation: str = typer.Option(..., "--presentation", "-p", help="Presentation id"),
    participant: str = typer.Option(..., "--participant", "-a", help="Participant (answeree) id"),
    questions_path: str = typer.Option(..., "--questions", "-q", help="JSON file of question definitions"),
    log_path: str = typer.Option(Settings.from_env().log_path, "--log", "-l", help="Path to submission log file"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    Print the restoreViewer bundle for one participant.

    Examples:
        orderq restore viewer -s s1 -p pres1 -a alice -q questions.json
    """
    try:
        payload = _coordinator(log_path, questions_path).restore_viewer(session, presentation, participant)
    except FileNotFoundError as e:
        _fail(f"File not found: {e.filename or e}", json_output)
    except (SubmissionLogError, ValueError, KeyError) as e:
        _fail(str(e), json_output)

    if json_output:
        print(json.dumps(payload, indent=2))
        return

    if not payload["questions"]:
        console.print(f"[yellow]{participant} has not answered any question[/yellow]")
        return

    table = Table(title=f"Answers of {participant}")
    table.add_column("Question", style="green")
    table.add_column("Order")
    for entry in payload["questions"]:
        table.add_row(entry["uid"], " > ".join(entry["orders"]))
    console.print(table)
