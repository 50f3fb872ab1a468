from typing import Protocol

from clipfix.models import Entry


class FileSystem(Protocol):
    async def list_entries(self, directory: Entry) -> list[Entry]: ...

    async def read_text(self, entry: Entry) -> str: ...

    async def write_text(self, entry: Entry, text: str) -> None: ...
