from collections.abc import Mapping

from clipfix.models import Entry


class InMemoryFileSystem:
    """Dict-backed ``FileSystem`` keyed by ``/``-separated relative paths.

    Directories exist implicitly through the files below them. Entries are listed
    in insertion order and every write is recorded in ``writes``.
    """

    def __init__(self, files: Mapping[str, str] | None = None) -> None:
        self.files: dict[str, str] = dict(files or {})
        self.writes: list[str] = []
        self.reads: list[str] = []

    def root(self) -> Entry:
        return Entry(name="", kind="directory", path="")

    def entry(self, path: str) -> Entry:
        name = path.rsplit("/", 1)[-1]
        if path in self.files:
            return Entry(name=name, kind="file", path=path)
        return Entry(name=name, kind="directory", path=path)

    async def list_entries(self, directory: Entry) -> list[Entry]:
        prefix = f"{directory.path}/" if directory.path else ""
        seen: dict[str, Entry] = {}
        for path in self.files:
            if not path.startswith(prefix):
                continue
            head, sep, _ = path[len(prefix) :].partition("/")
            if head in seen:
                continue
            kind = "directory" if sep else "file"
            seen[head] = Entry(name=head, kind=kind, path=prefix + head)
        return list(seen.values())

    async def read_text(self, entry: Entry) -> str:
        try:
            text = self.files[entry.path]
        except KeyError:
            raise FileNotFoundError(f"File not found: {entry.path}") from None
        self.reads.append(entry.path)
        return text

    async def write_text(self, entry: Entry, text: str) -> None:
        self.files[entry.path] = text
        self.writes.append(entry.path)
