"""
Note Store - the ordered collection of notes in notes/notes.json.

The index file is a JSON array of note objects; insertion order is the
display order. Each note also has a Markdown file named after its title in
the same directory.
"""

import json
import logging
import os
import stat
import tempfile
from pathlib import Path
from typing import Iterable, List, Optional

from .errors import CorruptIndexError, NoteIOError
from .models import Note

logger = logging.getLogger(__name__)

INDEX_FILENAME = "notes.json"


class NoteStore:
    """Loads and saves notes for a single notes directory."""

    def __init__(self, notes_dir: Path):
        self.notes_dir = Path(notes_dir)
        self.index_path = self.notes_dir / INDEX_FILENAME

    def __repr__(self) -> str:
        return f"NoteStore({str(self.notes_dir)!r})"

    def ensure_dir(self) -> None:
        """Create the notes directory if it does not exist yet."""
        try:
            self.notes_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise NoteIOError(f"Cannot create notes directory '{self.notes_dir}': {e}") from e

    def note_path(self, note: Note) -> Path:
        return self.notes_dir / note.filename

    def load(self) -> List[Note]:
        """
        Read every note from the index file.

        Returns:
            Notes in index order; an empty list if the index file is missing

        Raises:
            CorruptIndexError: if the file is not a JSON array of notes
            NoteIOError: if the file exists but cannot be read
        """
        try:
            with open(self.index_path, "r", encoding="utf-8") as f:
                raw = f.read()
        except FileNotFoundError:
            logger.debug("No index at %s, starting empty", self.index_path)
            return []
        except OSError as e:
            raise NoteIOError(f"Cannot read index file '{self.index_path}': {e}") from e

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise CorruptIndexError(f"Index file '{self.index_path}' is not valid JSON: {e}") from e
        if not isinstance(data, list):
            raise CorruptIndexError(f"Index file '{self.index_path}' must contain a JSON array")

        notes = [Note.from_dict(entry, position=i) for i, entry in enumerate(data)]
        logger.debug("Loaded %d notes from %s", len(notes), self.index_path)
        return notes

    def save(self, notes: Iterable[Note]) -> None:
        """
        Overwrite the index file with the given notes.

        The data goes to a temporary file in the notes directory first and
        replaces the index only once fully written, so a crash mid-write
        leaves the previous index intact.

        Args:
            notes: Notes in display order

        Raises:
            NoteIOError: if the directory or file cannot be written
        """
        payload = json.dumps([note.to_dict() for note in notes], indent=4, ensure_ascii=False)
        self.ensure_dir()
        tmp_name = None
        try:
            fd, tmp_name = tempfile.mkstemp(
                dir=self.notes_dir, prefix=".notes-", suffix=".json.tmp"
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
                f.write("\n")
                f.flush()
                os.fsync(f.fileno())
            # mkstemp creates 0600; keep the old index's mode, else the umask default
            os.chmod(tmp_name, self._index_mode())
            os.replace(tmp_name, self.index_path)
        except OSError as e:
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise NoteIOError(f"Cannot write index file '{self.index_path}': {e}") from e
        logger.debug("Saved index %s", self.index_path)

    def _index_mode(self) -> int:
        try:
            return stat.S_IMODE(os.stat(self.index_path).st_mode)
        except FileNotFoundError:
            umask = os.umask(0)
            os.umask(umask)
            return 0o666 & ~umask

    def append(self, note: Note) -> List[Note]:
        """Add a note to the end of the index and return the new sequence."""
        notes = self.load()
        notes.append(note)
        self.save(notes)
        return notes

    def find(self, title: str, notes: Optional[List[Note]] = None) -> Optional[Note]:
        """Return the first note with the given title, or None."""
        for note in self.load() if notes is None else notes:
            if note.title == title:
                return note
        return None

    def read_content(self, note: Note) -> str:
        """
        Read a note's Markdown file.

        Returns:
            File text, or an empty string if the file does not exist
        """
        path = self.note_path(note)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return ""
        except OSError as e:
            raise NoteIOError(f"Cannot read note file '{path}': {e}") from e

    def remove_file(self, note: Note) -> bool:
        """
        Delete a note's Markdown file.

        Returns:
            True if a file was removed, False if there was none

        Raises:
            NoteIOError: if the file exists but cannot be removed
        """
        path = self.note_path(note)
        try:
            path.unlink()
        except FileNotFoundError:
            logger.debug("Note file %s already gone", path)
            return False
        except OSError as e:
            raise NoteIOError(f"Cannot delete note file '{path}': {e}") from e
        return True
