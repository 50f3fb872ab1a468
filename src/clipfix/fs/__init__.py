from clipfix.fs.local import LocalFileSystem, entry_for_path
from clipfix.fs.memory import InMemoryFileSystem
from clipfix.fs.overlay import OverlayFileSystem

__all__ = [
    "InMemoryFileSystem",
    "LocalFileSystem",
    "OverlayFileSystem",
    "entry_for_path",
]
