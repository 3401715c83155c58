from pathlib import Path
from typing import Any, List

import pytest

from mdnote.models import Note
from mdnote.store import NoteStore


@pytest.fixture(autouse=True)
def isolate_env(tmp_path: Path, monkeypatch: Any) -> None:
    """Keep tests away from the user's config and editor."""
    monkeypatch.setenv("MDNOTE_CONFIG", str(tmp_path / "config.json"))
    monkeypatch.delenv("EDITOR", raising=False)


@pytest.fixture
def notes_dir(tmp_path: Path) -> Path:
    return tmp_path / "notes"


@pytest.fixture
def store(notes_dir: Path) -> NoteStore:
    return NoteStore(notes_dir)


@pytest.fixture
def make_notes(store: NoteStore):
    """Write notes with their Markdown files and index, return them in order."""
    def _make(*titles: str) -> List[Note]:
        notes = [Note(title=title, content=f"# {title}\n") for title in titles]
        store.ensure_dir()
        for note in notes:
            store.note_path(note).write_text(note.content, encoding="utf-8")
        store.save(notes)
        return notes
    return _make


class FakeEditor:
    """Stands in for mdnote.editor.open_note and writes canned content."""

    def __init__(self) -> None:
        self.calls: List[Path] = []
        self.content = None

    def __call__(self, note_path: Path, default_editor=None) -> None:
        self.calls.append(Path(note_path))
        if self.content is not None:
            Path(note_path).write_text(self.content, encoding="utf-8")


@pytest.fixture
def fake_editor(monkeypatch: Any) -> FakeEditor:
    editor = FakeEditor()
    monkeypatch.setattr("mdnote.cli.open_note", editor)
    monkeypatch.setattr("mdnote.app.open_note", editor)
    return editor
