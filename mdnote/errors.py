"""Exception types raised by mdnote."""


class NoteError(Exception):
    """Base class for every error mdnote reports to the user."""


class NoteIOError(NoteError):
    """A directory or file could not be created, read, written or removed."""


class CorruptIndexError(NoteError):
    """The index file exists but does not hold a valid list of notes."""


class EditorError(NoteError):
    """The external editor could not be started or exited with an error."""

    def __init__(self, message: str, command=None, returncode=None):
        super().__init__(message)
        self.command = command
        self.returncode = returncode


class InvalidTitleError(NoteError):
    """A title cannot be used as a note file name."""


class DuplicateTitleError(NoteError):
    """A note with the same title is already in the index."""


class NoteNotFoundError(NoteError):
    """No note with the requested title exists."""


class ConfigError(NoteError):
    """The configuration file holds a value of the wrong type."""
