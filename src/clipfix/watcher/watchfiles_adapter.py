from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Callable, Coroutine
from pathlib import Path
from typing import Any

from watchfiles import awatch

from clipfix.config import Settings

logger = logging.getLogger(__name__)


def _is_eligible_file(path: Path, settings: Settings) -> bool:
    return settings.is_eligible(path.name)


class WatchfilesWatcher:
    """Watch a project for script and entity changes and trigger a callback.

    Implements the ``FileWatcherPort`` protocol.
    """

    def __init__(
        self,
        directory: str | Path,
        on_change: Callable[[set[Path]], Coroutine[Any, Any, None]],
        settings: Settings | None = None,
    ) -> None:
        self._directory = Path(directory)
        self._on_change = on_change
        self._settings = settings or Settings()
        self._task: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def start(self) -> None:
        if self._task is not None:
            return
        self._task = asyncio.create_task(self._watch())
        logger.info("Watching %s", self._directory)

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task
        self._task = None
        logger.info("Stopped watching %s", self._directory)

    async def _watch(self) -> None:
        async for changes in awatch(self._directory):
            paths = {Path(p) for _, p in changes if _is_eligible_file(Path(p), self._settings)}
            if not paths:
                continue
            logger.info("Detected changes in %d file(s)", len(paths))
            try:
                await self._on_change(paths)
            except Exception:
                logger.exception("Error while fixing changed files")
