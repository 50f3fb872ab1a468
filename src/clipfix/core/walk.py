import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

from clipfix.config import Settings
from clipfix.core.ports.filesystem import FileSystem
from clipfix.models import AggregateReport, Entry, FileError, MatchReport

logger = logging.getLogger(__name__)

T = TypeVar("T")

FileOperation = Callable[[FileSystem, Entry, Settings], Awaitable[MatchReport]]


async def walk(
    fs: FileSystem,
    directory: Entry,
    visit: Callable[[Entry], Awaitable[T]],
    max_depth: int | None = None,
    _depth: int = 0,
) -> list[T]:
    """Apply ``visit`` to every file below ``directory``, one entry at a time.

    Results come back in enumeration order. Directories nested deeper than
    ``max_depth`` levels below ``directory`` are skipped.
    """
    results: list[T] = []
    for entry in await fs.list_entries(directory):
        if entry.kind == "file":
            results.append(await visit(entry))
        elif entry.kind == "directory":
            if max_depth is not None and _depth >= max_depth:
                logger.warning("Skipping %s: deeper than %d levels", entry.path, max_depth)
                continue
            results.extend(await walk(fs, entry, visit, max_depth, _depth + 1))
    return results


def combine_reports(reports: list[MatchReport], errors: list[FileError] | None = None) -> AggregateReport:
    aggregate = AggregateReport(errors=list(errors or []))
    for report in reports:
        aggregate.unresolved.extend(report.unresolved)
        aggregate.fixed += report.fixed
        aggregate.dropped_resource_ids.extend(report.dropped_resource_ids)
        aggregate.files += 1
    return aggregate


async def apply_to_tree(
    fs: FileSystem, directory: Entry, operation: FileOperation, settings: Settings
) -> AggregateReport:
    """Run ``operation`` on every file below ``directory`` and sum up the reports.

    A file that fails is recorded as a ``FileError`` and the walk moves on, unless
    ``settings.fail_fast`` is set.
    """
    errors: list[FileError] = []

    async def _visit(entry: Entry) -> MatchReport | None:
        try:
            return await operation(fs, entry, settings)
        except Exception as exc:
            if settings.fail_fast:
                raise
            logger.exception("Failed to process %s", entry.path)
            errors.append(FileError(path=entry.path, message=str(exc)))
            return None

    results = await walk(fs, directory, _visit, settings.max_depth)
    return combine_reports([r for r in results if r is not None], errors)
