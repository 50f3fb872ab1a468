import logging

from clipfix.core.ports.filesystem import FileSystem
from clipfix.models import Entry

logger = logging.getLogger(__name__)


class OverlayFileSystem:
    """``FileSystem`` that reads through to ``base`` but keeps every write in memory.

    Later reads of a written path return the pending text, so a dry run sees the
    same contents a real run would without touching ``base``.
    """

    def __init__(self, base: FileSystem) -> None:
        self.base = base
        self.pending: dict[str, str] = {}

    async def list_entries(self, directory: Entry) -> list[Entry]:
        return await self.base.list_entries(directory)

    async def read_text(self, entry: Entry) -> str:
        if entry.path in self.pending:
            return self.pending[entry.path]
        return await self.base.read_text(entry)

    async def write_text(self, entry: Entry, text: str) -> None:
        logger.debug("Holding write to %s in memory", entry.path)
        self.pending[entry.path] = text
