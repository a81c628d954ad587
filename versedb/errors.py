# versedb/errors.py


class VerseDbError(Exception):
    """Base class for aggregator errors."""


class DatabaseResetError(VerseDbError):
    """The output database could not be truncated and re-initialised."""


class NoDirectorySelectedError(VerseDbError):
    """Explicit-directory mode was chosen but no directory was picked."""


class EnumerationError(VerseDbError):
    """A project directory could not be walked at all."""

    def __init__(self, project: str, reason: str):
        super().__init__(f"Cannot enumerate project '{project}': {reason}")
        self.project = project
        self.reason = reason
