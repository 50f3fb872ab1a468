import asyncio
import logging
from pathlib import Path

from clipfix.models import Entry

logger = logging.getLogger(__name__)


def entry_for_path(path: str | Path) -> Entry:
    file_path = Path(path)
    kind = "directory" if file_path.is_dir() else "file"
    return Entry(name=file_path.name, kind=kind, path=str(file_path))


class LocalFileSystem:
    """``FileSystem`` adapter over the local disk.

    Entries are listed sorted by name. Symlinks are not followed, so a linked
    directory can never make a walk revisit its own ancestors. Disk access runs in
    a worker thread so a running watcher keeps receiving events.
    """

    def __init__(self, encoding: str = "utf-8") -> None:
        self.encoding = encoding

    async def list_entries(self, directory: Entry) -> list[Entry]:
        return await asyncio.to_thread(self._list_entries, directory)

    async def read_text(self, entry: Entry) -> str:
        return await asyncio.to_thread(self._read_text, entry)

    async def write_text(self, entry: Entry, text: str) -> None:
        await asyncio.to_thread(self._write_text, entry, text)

    def _list_entries(self, directory: Entry) -> list[Entry]:
        entries: list[Entry] = []
        for child in sorted(Path(directory.path).iterdir(), key=lambda p: p.name):
            if child.is_symlink():
                logger.debug("Skipping symlink %s", child)
                continue
            if child.is_dir():
                entries.append(Entry(name=child.name, kind="directory", path=str(child)))
            elif child.is_file():
                entries.append(Entry(name=child.name, kind="file", path=str(child)))
        return entries

    def _read_text(self, entry: Entry) -> str:
        # newline="" keeps CRLF files byte-for-byte intact on write-back
        with Path(entry.path).open(encoding=self.encoding, newline="") as handle:
            return handle.read()

    def _write_text(self, entry: Entry, text: str) -> None:
        with Path(entry.path).open("w", encoding=self.encoding, newline="") as handle:
            handle.write(text)
