import asyncio
from collections.abc import Callable, Coroutine
from pathlib import Path
from typing import Annotated, Any

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
    resolve_root,
)
from clipfix.config import Settings
from clipfix.core.errors import ProjectRootError
from clipfix.core.pipeline import fix_files, run_fix
from clipfix.core.ports.filesystem import FileSystem
from clipfix.core.report import render_summary
from clipfix.fs import entry_for_path
from clipfix.models import FixRun


def _report(run: FixRun, settings: Settings) -> None:
    if run.content.is_empty and run.audio.is_empty:
        return
    console.print(render_summary(run, settings.target_call), markup=False, highlight=False)


def make_change_handler(fs: FileSystem, settings: Settings) -> Callable[[set[Path]], Coroutine[Any, Any, None]]:
    async def _on_change(paths: set[Path]) -> None:
        entries = [entry_for_path(p) for p in sorted(paths) if p.is_file()]
        if entries:
            _report(await fix_files(fs, entries, settings), settings)

    return _on_change


def watch(
    root: Annotated[str, typer.Argument(help="Project folder containing a .fraytools file.")] = ".",
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Log every file that gets rewritten.")] = False,
) -> None:
    """Fix the project once, then keep fixing scripts and entities as they change."""
    from clipfix.watcher.watchfiles_adapter import WatchfilesWatcher

    configure_logging(verbose)
    settings = load_settings()
    fs = get_filesystem()
    root_path = resolve_root(root)

    async def _run() -> None:
        _report(await run_fix(fs, entry_for_path(root_path), settings), settings)
        watcher = WatchfilesWatcher(root_path, make_change_handler(fs, settings), settings)
        await watcher.start()
        console.print(f"[green]Watching[/green] {escape(str(root_path))} (Ctrl+C to stop)")
        try:
            await asyncio.Event().wait()
        finally:
            await watcher.stop()

    try:
        asyncio.run(_run())
    except ProjectRootError as exc:
        err_console.print(f"[yellow]{escape(str(exc))}[/yellow]", highlight=False)
        raise typer.Exit(code=SETUP_ERROR_EXIT_CODE) from None
    except KeyboardInterrupt:
        raise typer.Exit(code=ABORTED_EXIT_CODE) from None
