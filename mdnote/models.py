"""Note records and their JSON representation."""

import re
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from .errors import CorruptIndexError, InvalidTitleError

NOTE_EXTENSION = ".md"

# Namespace for ids derived from titles of records written before ids existed
_LEGACY_ID_NAMESPACE = uuid.UUID("6f1c1f0e-4d3a-4f55-9a43-2b8f0f6c7e11")

_FORBIDDEN_TITLE_CHARS = ("/", "\\", "\x00")

# Timestamps from other writers may carry nanoseconds; datetime keeps microseconds
_EXTRA_FRACTION_RE = re.compile(r"(\.\d{6})\d+")


def new_note_id() -> str:
    return uuid.uuid4().hex


def legacy_note_id(title: str, position: int = 0) -> str:
    # older indexes may repeat a title, so the position keeps ids distinct
    return uuid.uuid5(_LEGACY_ID_NAMESPACE, f"{position}:{title}").hex


def validate_title(title: str) -> str:
    """
    Check that a title can be used as a note file name.

    Args:
        title: The user-supplied title

    Returns:
        The title with surrounding whitespace removed

    Raises:
        InvalidTitleError: if the title is empty, contains a path separator
            or NUL byte, or starts with a dot
    """
    cleaned = title.strip()
    if not cleaned:
        raise InvalidTitleError("Title must not be empty")
    for char in _FORBIDDEN_TITLE_CHARS:
        if char in cleaned:
            raise InvalidTitleError(f"Title {title!r} contains a forbidden character {char!r}")
    if cleaned.startswith("."):
        raise InvalidTitleError(f"Title {title!r} must not start with '.'")
    return cleaned


def utc_now() -> datetime:
    # Seconds precision keeps the ISO strings short and round-trippable
    return datetime.now(timezone.utc).replace(microsecond=0)


@dataclass
class Note:
    """A single Markdown note and its metadata record."""
    title: str
    content: str = ""
    created_at: Optional[datetime] = None
    id: str = field(default_factory=new_note_id)

    @property
    def filename(self) -> str:
        return f"{self.title}{NOTE_EXTENSION}"

    @property
    def date_label(self) -> str:
        if self.created_at is None:
            return ""
        return self.created_at.strftime("%Y-%m-%d %H:%M")

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"id": self.id, "title": self.title, "content": self.content}
        if self.created_at is not None:
            data["date"] = self.created_at.isoformat()
        return data

    @classmethod
    def from_dict(cls, data: Any, position: int = 0) -> "Note":
        """
        Build a Note from one entry of the index file.

        Args:
            data: A decoded JSON value
            position: Index of the entry in the file, used for the id of
                entries written without one

        Returns:
            The Note

        Raises:
            CorruptIndexError: if the entry is not an object with string
                title and content, its title names a path outside the notes
                directory, or its date is not ISO-8601
        """
        if not isinstance(data, dict):
            raise CorruptIndexError(f"Expected a note object, got {type(data).__name__}")
        title = data.get("title")
        content = data.get("content")
        if not isinstance(title, str) or not title:
            raise CorruptIndexError(f"Note entry has no valid 'title': {data!r}")
        if any(char in title for char in _FORBIDDEN_TITLE_CHARS) or title in (".", ".."):
            raise CorruptIndexError(f"Note title {title!r} is not a plain file name")
        if not isinstance(content, str):
            raise CorruptIndexError(f"Note {title!r} has no valid 'content'")

        created_at = None
        raw_date = data.get("date", data.get("created_at"))
        if raw_date is not None:
            if not isinstance(raw_date, str):
                raise CorruptIndexError(f"Note {title!r} has a non-string date")
            try:
                # older Python releases reject the trailing 'Z' some writers emit
                iso = _EXTRA_FRACTION_RE.sub(r"\1", raw_date.replace("Z", "+00:00"))
                created_at = datetime.fromisoformat(iso)
            except ValueError as e:
                raise CorruptIndexError(f"Note {title!r} has an invalid date {raw_date!r}") from e

        note_id = data.get("id")
        if note_id is None:
            note_id = legacy_note_id(title, position)
        elif not isinstance(note_id, str) or not note_id:
            raise CorruptIndexError(f"Note {title!r} has an invalid id")
        return cls(title=title, content=content, created_at=created_at, id=note_id)
