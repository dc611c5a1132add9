"""complink CLI - drive the sync engine against a JSON host document.

Usage:
    complink catalog ./project.skp
    complink export ./project.skp Bracket --path ./kaynak/Bracket.skp
    complink update ./project.skp Bracket
    complink note-add ./project.skp ./kaynak/Bracket.skp "Hole spacing fixed"
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Annotated, Any, Optional

import typer
from dotenv import load_dotenv

# Load .env early for COMPLINK_* overrides
load_dotenv()
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from complink import __version__
from complink.app.config import get_config
from complink.app.state import ExporterState
from complink.core.models.result import OperationResult, ResultStatus
from complink.domain.settings import SETTING_KEYS
from complink.infrastructure.json_host import JsonDocument
from complink.presentation.opener import open_path
from complink.presentation.session import PanelSession
from complink.utils.logging import setup_logging

app = typer.Typer(
    name="complink",
    help="Component file binding and sync",
    add_completion=False,
)

console = Console()

DocumentArg = Annotated[Path, typer.Argument(help="Path to the host document")]
TargetArg = Annotated[str, typer.Argument(help="Component name or bound file path")]


class CollectingRenderer:
    """Keeps the latest payload of each view pushed by a PanelSession."""

    def __init__(self):
        self.views: dict[str, dict[str, Any]] = {}
        self.messages: list[dict[str, Any]] = []

    def __call__(self, view: str, payload: dict[str, Any]) -> None:
        if view == "message":
            self.messages.append(payload)
        else:
            self.views[view] = payload


@app.callback()
def main_callback(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Debug logging")] = False,
):
    """Configure logging for every command."""
    config = get_config()
    setup_logging(
        level="DEBUG" if verbose else config.log_level,
        log_dir=config.log_dir,
        file_output=config.log_to_file,
    )


# ============================================================================
# Helpers
# ============================================================================


def _open_state(document_path: Path, prompt=None) -> ExporterState:
    try:
        document = JsonDocument.open(document_path)
    except ValueError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    return ExporterState.create(document, prompt=prompt)


def _print_result(result: OperationResult) -> None:
    if result.status == ResultStatus.CANCELLED:
        console.print(f"[yellow]{result.operation.value.title()} cancelled[/yellow]")
        return
    if not result.ok:
        console.print(f"[red]Error ({result.error_code}):[/red] {result.message}")
        raise typer.Exit(1)

    console.print(f"[green]{result.message}[/green]")
    for warning in result.warnings:
        console.print(f"[yellow]Warning:[/yellow] {warning}")


def _run(document_path: Path, target: str, operation: str) -> None:
    """Run update/reload/restore on a component named ``target`` or bound to it."""
    state = _open_state(document_path)
    definition = state.document.definition_named(target)
    engine = state.engine

    if definition is not None:
        action = {"update": engine.update, "reload": engine.reload, "restore": engine.restore}
        result = action[operation](definition)
    else:
        file_path = os.path.abspath(target)
        action = {
            "update": engine.update_by_path,
            "reload": engine.reload_by_path,
            "restore": engine.restore_by_path,
        }
        result = action[operation](file_path)

    if result.ok:
        state.document.save()
    _print_result(result)


# ============================================================================
# Commands
# ============================================================================


@app.command("catalog")
def show_catalog(document: DocumentArg):
    """List every component bound to a file."""
    state = _open_state(document)
    renderer = CollectingRenderer()
    session = PanelSession(state, renderer)
    if not session.open_panel():
        for message in renderer.messages:
            console.print(f"[red]Error:[/red] {message.get('message', '')}")
        raise typer.Exit(1)
    state.document.save()

    payload = renderer.views["panel"]
    table = Table(title=f"Components in {document.name}")
    table.add_column("Name", style="cyan")
    table.add_column("File")
    table.add_column("Updated")
    table.add_column("Backup", justify="center")
    table.add_column("Notes", justify="right")
    for row in payload["components"]:
        table.add_row(
            row["name"],
            row["file_path"],
            row["updated_at"],
            "yes" if row["backup_exists"] else "-",
            str(row["note_count"]),
        )
    console.print(table)

    if not payload["components"]:
        console.print("[dim]No linked components.[/dim]")


@app.command("export")
def export_component(
    document: DocumentArg,
    name: Annotated[str, typer.Argument(help="Component definition name")],
    path: Annotated[
        Optional[Path], typer.Option("--path", "-p", help="Target file for a first export")
    ] = None,
):
    """Export a component, binding it to a file on first use."""

    def prompt(title: str, default_dir: str, default_name: str) -> str | None:
        if path is not None:
            return str(path)
        answer = typer.prompt(title, default=os.path.join(default_dir, default_name))
        return answer or None

    state = _open_state(document, prompt=prompt)
    definition = state.document.definition_named(name)
    if definition is None:
        console.print(f"[red]Error:[/red] No component named '{name}'")
        raise typer.Exit(1)

    result = state.engine.export(definition)
    if result.ok:
        state.document.save()
    _print_result(result)


@app.command("update")
def update_component(document: DocumentArg, target: TargetArg):
    """Write the in-document component over its file (old file goes to backup)."""
    _run(document, target, "update")


@app.command("reload")
def reload_component(document: DocumentArg, target: TargetArg):
    """Replace placed instances with the component loaded from its file."""
    _run(document, target, "reload")


@app.command("restore")
def restore_component(document: DocumentArg, target: TargetArg):
    """Copy the backup over the bound file."""
    _run(document, target, "restore")


@app.command("notes")
def show_notes(
    document: DocumentArg,
    file_path: Annotated[str, typer.Argument(help="Bound file path")],
):
    """Show the notes of a component."""
    state = _open_state(document)
    renderer = CollectingRenderer()
    session = PanelSession(state, renderer)
    session.open_notes(os.path.abspath(file_path))
    _print_notes(renderer.views.get("notes"))


@app.command("note-add")
def add_note(
    document: DocumentArg,
    file_path: Annotated[str, typer.Argument(help="Bound file path")],
    text: Annotated[str, typer.Argument(help="Note text")],
):
    """Add a note (newest first)."""
    _edit_notes(document, file_path, "add_note", {"text": text})


@app.command("note-edit")
def edit_note(
    document: DocumentArg,
    file_path: Annotated[str, typer.Argument(help="Bound file path")],
    index: Annotated[int, typer.Argument(help="Note position, 0 is newest")],
    text: Annotated[str, typer.Argument(help="Replacement text")],
):
    """Replace the text of an existing note."""
    _edit_notes(document, file_path, "update_note", {"index": index, "text": text})


def _edit_notes(document: Path, file_path: str, action: str, payload: dict[str, Any]) -> None:
    state = _open_state(document)
    renderer = CollectingRenderer()
    session = PanelSession(state, renderer)
    session.open_notes(os.path.abspath(file_path))
    session.handle_notes(action, payload)
    state.document.save()
    _print_notes(renderer.views.get("notes"))


def _print_notes(payload: dict[str, Any] | None) -> None:
    if not payload or not payload["notes"]:
        console.print("[dim]No notes.[/dim]")
        return
    lines = [
        f"[bold]{i}[/bold] [dim]{note['at']}[/dim]  {note['text']}"
        for i, note in enumerate(payload["notes"])
    ]
    console.print(Panel("\n".join(lines), title=payload["file_path"], border_style="cyan"))


@app.command("settings")
def document_settings(
    document: DocumentArg,
    assign: Annotated[
        Optional[list[str]],
        typer.Option("--set", help=f"key=value, key in {', '.join(SETTING_KEYS)}"),
    ] = None,
):
    """Show or change the document's path settings."""
    state = _open_state(document)

    if assign:
        for item in assign:
            key, sep, value = item.partition("=")
            if not sep:
                console.print(f"[red]Error:[/red] Expected key=value, got '{item}'")
                raise typer.Exit(1)
            try:
                state.settings.write(key.strip(), value.strip())
            except KeyError as e:
                console.print(f"[red]Error:[/red] {e.args[0]}")
                raise typer.Exit(1)
        state.document.save()

    values = state.settings.read_all()
    console.print(Panel(
        "\n".join(f"[bold]{k}:[/bold] {v or '-'}" for k, v in values.items()),
        title="Settings",
        border_style="cyan",
    ))


@app.command("open")
def open_file(path: Annotated[str, typer.Argument(help="File, folder or URL")]):
    """Open a file with the system's default application."""
    if not open_path(path):
        console.print(f"[red]Error:[/red] Could not open {path}")
        raise typer.Exit(1)


@app.command("version")
def show_version():
    """Print the complink version."""
    console.print(f"complink {__version__}")


# Module entry point
def main() -> None:
    """Entry point for python -m complink"""
    app()


if __name__ == "__main__":
    main()
