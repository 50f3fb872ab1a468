import logging
from collections.abc import Sequence
from pathlib import Path
from typing import Any

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from clipfix.config import Settings
from clipfix.core.ports.filesystem import FileSystem
from clipfix.models import AggregateReport

console = Console()
err_console = Console(stderr=True)

ABORTED_EXIT_CODE = 130
SETUP_ERROR_EXIT_CODE = 2


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def load_settings(**overrides: object) -> Settings:
    """Build settings from the environment and options, exiting on a bad value."""
    try:
        return Settings.from_env(**overrides)
    except ValidationError as exc:
        err_console.print("[yellow]Invalid clipfix configuration:[/yellow]")
        for error in exc.errors():
            field = ".".join(str(part) for part in error["loc"])
            err_console.print(f"  {field}: {error['msg']}", markup=False, highlight=False)
        raise typer.Exit(code=SETUP_ERROR_EXIT_CODE) from None


def get_filesystem() -> FileSystem:
    from clipfix.fs import LocalFileSystem

    return LocalFileSystem()


def resolve_root(root: str) -> Path:
    return Path(root).expanduser().resolve()


def render_table(headers: Sequence[str], rows: Sequence[tuple[Any, ...]]) -> None:
    table = Table(show_lines=False)
    for h in headers:
        table.add_column(h)
    for row in rows:
        table.add_row(*(escape(str(v)) for v in row))
    console.print(table)
    console.print(f"({len(rows)} rows)")


def print_errors(report: AggregateReport) -> None:
    for error in report.errors:
        err_console.print(f"[red]error[/red] {escape(error.path)}: {escape(error.message)}", highlight=False)
