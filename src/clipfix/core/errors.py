class ClipfixError(Exception):
    """Base class for errors raised by clipfix."""


class ProjectRootError(ClipfixError):
    """The selected directory is not a project root."""


class EntityParseError(ClipfixError):
    """An entity file could not be parsed into an ``EntityDocument``."""

    def __init__(self, name: str, reason: str) -> None:
        super().__init__(f"Could not parse entity file {name}: {reason}")
        self.name = name
        self.reason = reason
