import asyncio
import logging
from typing import Annotated

import typer
from rich.markup import escape

from clipfix.cli.common import (
    ABORTED_EXIT_CODE,
    SETUP_ERROR_EXIT_CODE,
    configure_logging,
    console,
    err_console,
    get_filesystem,
    load_settings,
    print_errors,
    render_table,
    resolve_root,
)
from clipfix.config import Settings
from clipfix.core.errors import ProjectRootError
from clipfix.core.pipeline import run_fix
from clipfix.core.report import render_summary
from clipfix.fs import entry_for_path
from clipfix.models import FixRun

logger = logging.getLogger(__name__)

RootArg = Annotated[str, typer.Argument(help="Project folder containing a .fraytools file.")]
FirstPerLineOpt = Annotated[
    bool, typer.Option("--first-per-line", help="Report at most one unresolved call per line.")
]
FailFastOpt = Annotated[bool, typer.Option("--fail-fast", help="Stop at the first file that cannot be processed.")]
MaxDepthOpt = Annotated[int | None, typer.Option(help="Maximum directory nesting to descend into.")]
VerboseOpt = Annotated[bool, typer.Option("--verbose", "-v", help="Log every file that gets rewritten.")]


def _flag(value: bool) -> bool | None:
    return True if value else None


def _execute(root: str, settings: Settings) -> FixRun:
    """Run the pipeline and translate failures into exit codes."""
    fs = get_filesystem()
    root_entry = entry_for_path(resolve_root(root))
    try:
        return asyncio.run(run_fix(fs, root_entry, settings))
    except ProjectRootError as exc:
        err_console.print(f"[yellow]{escape(str(exc))}[/yellow]", highlight=False)
        err_console.print("Select the folder that holds your project's .fraytools file and try again.")
        raise typer.Exit(code=SETUP_ERROR_EXIT_CODE) from None
    except KeyboardInterrupt:
        raise typer.Exit(code=ABORTED_EXIT_CODE) from None
    except Exception as exc:
        logger.debug("Run failed", exc_info=exc)
        err_console.print("[red]Couldn't process the provided folder.[/red]")
        err_console.print(str(exc), markup=False, highlight=False)
        raise typer.Exit(code=1) from None


def _print_run(run: FixRun, settings: Settings) -> None:
    console.print(render_summary(run, settings.target_call), markup=False, highlight=False)
    if settings.dry_run:
        console.print("[dim](dry run: no files were written)[/dim]")
    if run.audio.unresolved:
        render_table(["location", "line"], [(m.location, m.line.strip()) for m in run.audio.unresolved])
    print_errors(run.content)
    print_errors(run.audio)


def fix(
    root: RootArg = ".",
    dry_run: Annotated[bool, typer.Option("--dry-run", help="Report what would change without writing.")] = False,
    first_per_line: FirstPerLineOpt = False,
    fail_fast: FailFastOpt = False,
    max_depth: MaxDepthOpt = None,
    verbose: VerboseOpt = False,
) -> None:
    """Rewrite AudioClip.play calls and local:: content references in a project."""
    configure_logging(verbose)
    settings = load_settings(
        dry_run=_flag(dry_run),
        first_unresolved_per_line=_flag(first_per_line),
        fail_fast=_flag(fail_fast),
        max_depth=max_depth,
    )
    run = _execute(root, settings)
    _print_run(run, settings)
    if run.content.errors or run.audio.errors:
        raise typer.Exit(code=1)


def scan(
    root: RootArg = ".",
    first_per_line: FirstPerLineOpt = False,
    max_depth: MaxDepthOpt = None,
    verbose: VerboseOpt = False,
) -> None:
    """Report fixable and unresolved calls without touching any file.

    Exits with status 1 when anything is left to fix.
    """
    configure_logging(verbose)
    settings = load_settings(
        dry_run=True,
        first_unresolved_per_line=_flag(first_per_line),
        max_depth=max_depth,
    )
    run = _execute(root, settings)
    _print_run(run, settings)
    dirty = run.content.fixed or run.audio.fixed or run.audio.unresolved
    if dirty or run.content.errors or run.audio.errors:
        raise typer.Exit(code=1)
