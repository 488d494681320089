"""Main CLI entry point for Groot."""

import logging
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.text import Text

from groot.constants import (
    EXIT_DATA_ERROR,
    EXIT_SYSTEM_ERROR,
    EXIT_USER_ERROR,
    GROOT_DIR,
    SHORT_HASH_LENGTH,
)
from groot.core import (
    CorruptCommitError,
    CorruptHistoryError,
    CorruptIndexError,
    NothingStagedError,
    StagingError,
)
from groot.diff import CommitDiffReport, DiffKind, FileStatus
from groot.diff.base import split_lines
from groot.repository import AlreadyInitializedError, Repository
from groot.storage import AmbiguousHashError, ObjectCorruptedError, ObjectNotFoundError

console = Console(highlight=False, soft_wrap=True)
app = typer.Typer(
    name="groot",
    help="A minimal content-addressable version control system",
    add_completion=False,
)

_DATA_ERRORS = (
    CorruptIndexError,
    CorruptCommitError,
    CorruptHistoryError,
    ObjectCorruptedError,
)

_DIFF_STYLES = {
    DiffKind.ADDED: ("++", "green"),
    DiffKind.REMOVED: ("--", "red"),
    DiffKind.UNCHANGED: ("  ", "dim"),
}


def _error(message: str, code: int = EXIT_USER_ERROR) -> typer.Exit:
    console.print(f"[bold red]Error:[/bold red] {escape(message)}", style="red")
    return typer.Exit(code)


def _open_repository() -> Repository:
    """Repository for the current directory, or exit if there is none."""
    workspace_root = Path.cwd()
    repo = Repository(workspace_root)

    if not repo.is_initialized():
        console.print("[bold red]Error:[/bold red] Not a Groot repository", style="red")
        console.print(f"  No {GROOT_DIR}/ directory found in {workspace_root}", style="dim")
        console.print("\nRun [bold]groot init[/bold] to initialize a repository", style="yellow")
        raise typer.Exit(EXIT_USER_ERROR)

    return repo


def _short(commit_hash: Optional[str]) -> str:
    return commit_hash[:SHORT_HASH_LENGTH] if commit_hash else "(none)"


@app.callback()
def main_callback(
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Show debug logging",
    ),
) -> None:
    """Groot: snapshot files, commit them and diff commits."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


@app.command()
def version() -> None:
    """Show Groot version."""
    from groot import __version__
    typer.echo(f"Groot version {__version__}")


@app.command()
def init(
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Suppress output except errors",
    ),
) -> None:
    """Initialize a Groot repository in the current directory."""
    workspace_root = Path.cwd()
    repo = Repository(workspace_root)

    try:
        repo.init()
    except AlreadyInitializedError:
        console.print(
            f"[yellow]Already initialized:[/yellow] {escape(str(repo.groot_dir))}",
        )
        return
    except OSError as e:
        raise _error(f"Failed to initialize repository: {e}", EXIT_SYSTEM_ERROR)

    if not quiet:
        success_message = f"""[bold green]✓[/bold green] Initialized Groot repository

[dim]Repository root:[/dim] {workspace_root}
[dim]Storage location:[/dim] {repo.groot_dir}

[bold]Next steps:[/bold]
  1. Stage a file: [cyan]groot add notes.txt[/cyan]
  2. Commit it: [cyan]groot commit "Initial commit"[/cyan]
"""
        console.print(Panel(success_message, border_style="green", title="Groot Initialized"))


@app.command()
def add(
    paths: List[str] = typer.Argument(..., help="Files to stage"),
) -> None:
    """Add files to the staging area."""
    repo = _open_repository()
    failed = False

    for path_str in paths:
        try:
            entry = repo.add(Path(path_str))
        except (FileNotFoundError, StagingError) as e:
            console.print(f"  [red]x[/red] {escape(path_str)}: {escape(str(e))}")
            failed = True
            continue
        except _DATA_ERRORS as e:
            raise _error(str(e), EXIT_DATA_ERROR)
        except OSError as e:
            raise _error(f"{path_str}: {e}", EXIT_SYSTEM_ERROR)

        console.print(f"  [green]+[/green] {escape(entry.path)}  [dim]({_short(entry.hash)})[/dim]")

    if failed:
        raise typer.Exit(EXIT_USER_ERROR)


@app.command()
def commit(
    message: str = typer.Argument(..., help="Commit message"),
) -> None:
    """Commit staged files as a snapshot."""
    repo = _open_repository()

    try:
        parent = repo.current_head()
        commit_hash = repo.commit(message)
    except NothingStagedError:
        console.print(
            "[bold yellow]Warning:[/bold yellow] Nothing to commit (staging area is empty)",
            style="yellow",
        )
        console.print("  Use [bold]groot add <file>[/bold] to stage files", style="dim")
        raise typer.Exit(EXIT_USER_ERROR)
    except _DATA_ERRORS as e:
        raise _error(str(e), EXIT_DATA_ERROR)
    except OSError as e:
        raise _error(str(e), EXIT_SYSTEM_ERROR)

    console.print(f"[bold green]>[/bold green] Committed [bold cyan]{_short(commit_hash)}[/bold cyan]")
    console.print(f"  [dim]Hash:[/dim]    {commit_hash}")
    console.print(f"  [dim]Parent:[/dim]  {_short(parent) if parent else '(root commit)'}")
    console.print(f"\n  {message}", markup=False)


@app.command()
def log(
    max_count: Optional[int] = typer.Option(
        None,
        "--max-count",
        "-n",
        min=1,
        help="Limit number of commits to show",
    ),
    oneline: bool = typer.Option(
        False,
        "--oneline",
        help="Show each commit on a single line",
    ),
) -> None:
    """Show commit history, newest first."""
    repo = _open_repository()
    shown = 0

    try:
        for commit_obj in repo.history(limit=max_count):
            if oneline:
                first_line = commit_obj.message.split("\n")[0]
                console.print(
                    Text.assemble((_short(commit_obj.hash), "yellow"), " ", first_line)
                )
            else:
                if shown:
                    console.print()
                console.print(f"[bold yellow]commit {commit_obj.hash}[/bold yellow]")
                console.print(f"[bold]Date:[/bold]   {commit_obj.timestamp}")
                console.print()
                for line in commit_obj.message.split("\n"):
                    console.print(f"    {line}", markup=False)
            shown += 1
    except _DATA_ERRORS as e:
        raise _error(str(e), EXIT_DATA_ERROR)
    except OSError as e:
        raise _error(str(e), EXIT_SYSTEM_ERROR)

    if not shown:
        console.print("[dim]No commits yet[/dim]")


def _print_report(report: CommitDiffReport) -> None:
    commit_obj = report.commit
    console.print(f"[bold yellow]commit {commit_obj.hash}[/bold yellow]")
    console.print(f"[bold]Date:[/bold]   {commit_obj.timestamp}")
    console.print(f"    {commit_obj.message}\n", markup=False)

    if report.is_initial:
        console.print("[dim]Initial commit, no diff[/dim]")
        return

    console.print("Changes in this commit:\n")
    for file_diff in report.files:
        console.print(Text(f"File: {file_diff.path}", style="bold"))

        if file_diff.status is FileStatus.ADDED:
            console.print("  [green]New file in this commit[/green]\n")
            continue
        if file_diff.status is FileStatus.MISSING:
            console.print("  [red]File content missing from object store[/red]\n")
            continue
        if file_diff.status is FileStatus.UNCHANGED:
            console.print("  [dim](content unchanged)[/dim]\n")
            continue

        for run in file_diff.runs:
            marker, style = _DIFF_STYLES[run.kind]
            for line in split_lines(run.text):
                console.print(Text(marker + line.rstrip("\r\n"), style=style), soft_wrap=True)
        console.print(
            f"[dim]{file_diff.added_lines} added, {file_diff.removed_lines} removed[/dim]\n"
        )


@app.command()
def show(
    commit_hash: str = typer.Argument(..., help="Commit hash (or unique prefix)"),
) -> None:
    """Show the diff of a commit against its parent."""
    repo = _open_repository()

    try:
        report = repo.show(commit_hash)
    except ObjectNotFoundError:
        raise _error(f"Commit not found: {commit_hash}")
    except AmbiguousHashError as e:
        raise _error(str(e))
    except _DATA_ERRORS as e:
        raise _error(str(e), EXIT_DATA_ERROR)
    except OSError as e:
        raise _error(str(e), EXIT_SYSTEM_ERROR)

    _print_report(report)


@app.command()
def status(
    short: bool = typer.Option(
        False,
        "--short",
        help="Show short format output",
    ),
) -> None:
    """Show HEAD and the staging area."""
    repo = _open_repository()

    try:
        head = repo.current_head()
        staged = repo.staged()
    except CorruptIndexError as e:
        raise _error(str(e), EXIT_DATA_ERROR)
    except OSError as e:
        raise _error(str(e), EXIT_SYSTEM_ERROR)

    if short:
        for entry in staged:
            console.print(f"A  {entry.path}", markup=False)
        return

    if head:
        console.print(f"[bold]HEAD:[/bold] {_short(head)}  [dim]({head})[/dim]")
    else:
        console.print("[bold]HEAD:[/bold] [dim](no commits yet)[/dim]")
    console.print()

    if staged:
        console.print("[bold green]Changes to be committed:[/bold green]")
        for entry in staged:
            console.print(f"  [green]+[/green] {escape(entry.path)}  [dim]({_short(entry.hash)})[/dim]")
    else:
        console.print("[dim]Nothing staged[/dim]")


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
