"""
Viewer state machine.

The viewer holds a working copy of the notes, the selected position and the
transient UI flags. It knows nothing about the terminal: the interactive loop
in mdnote.app turns key presses into Actions and calls Viewer.apply().
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from .models import Note
from .store import NoteStore

logger = logging.getLogger(__name__)


class Action(Enum):
    MOVE_UP = "move_up"
    MOVE_DOWN = "move_down"
    OPEN = "open"
    DELETE = "delete"
    TOGGLE_KEYBINDS = "toggle_keybinds"
    QUIT = "quit"
    NONE = "none"


class Outcome(Enum):
    """What the interactive loop must do after an action."""
    CONTINUE = "continue"
    OPEN_EDITOR = "open_editor"
    QUIT = "quit"


@dataclass
class ViewerState:
    notes: List[Note] = field(default_factory=list)
    selected_index: int = 0
    show_keybinds: bool = True
    message: Optional[str] = None

    @property
    def selected(self) -> Optional[Note]:
        if not self.notes:
            return None
        return self.notes[self.selected_index]

    @property
    def showing_message(self) -> bool:
        return self.message is not None


class Viewer:
    """Applies input actions to a ViewerState and keeps the store in sync."""

    def __init__(self, store: NoteStore, notes: Optional[List[Note]] = None,
                 show_keybinds: bool = True):
        self.store = store
        self.state = ViewerState(
            notes=list(notes) if notes is not None else store.load(),
            show_keybinds=show_keybinds,
        )

    def apply(self, action: Action) -> Outcome:
        """
        Apply one input action.

        Nothing happens while a message is on screen; the interactive loop
        clears it with dismiss_message() once its display time has passed.

        Args:
            action: The action decoded from a key press

        Returns:
            Outcome telling the caller whether to open the editor or quit

        Raises:
            NoteIOError: if deleting a note fails to remove its file or to
                persist the index
        """
        if self.state.showing_message:
            return Outcome.CONTINUE

        if action is Action.MOVE_UP:
            self.move_up()
        elif action is Action.MOVE_DOWN:
            self.move_down()
        elif action is Action.OPEN:
            if self.state.notes:
                return Outcome.OPEN_EDITOR
        elif action is Action.DELETE:
            if self.state.notes:
                self.delete_selected()
        elif action is Action.TOGGLE_KEYBINDS:
            self.state.show_keybinds = not self.state.show_keybinds
        elif action is Action.QUIT:
            return Outcome.QUIT
        return Outcome.CONTINUE

    def move_up(self) -> None:
        if self.state.selected_index > 0:
            self.state.selected_index -= 1

    def move_down(self) -> None:
        if self.state.selected_index < len(self.state.notes) - 1:
            self.state.selected_index += 1

    def delete_selected(self) -> Note:
        """
        Delete the selected note from disk, the working copy and the index.

        The selection stays on the same position, moving up one only when the
        last entry was removed. Shows a confirmation message afterwards.

        Returns:
            The removed note
        """
        state = self.state
        note = state.notes[state.selected_index]
        self.store.remove_file(note)
        del state.notes[state.selected_index]
        self.store.save(state.notes)
        if state.notes and state.selected_index >= len(state.notes):
            state.selected_index -= 1
        state.message = f"Deleted note '{note.title}'."
        logger.debug("Deleted note %s (%s)", note.title, note.id)
        return note

    def dismiss_message(self) -> None:
        self.state.message = None

    def refresh_selected(self) -> bool:
        """
        Reload the selected note's content from its file after editing.

        Returns:
            True if the content changed and the index was saved
        """
        note = self.state.selected
        if note is None:
            return False
        if not self.store.note_path(note).exists():
            logger.debug("Note file for %s missing after edit, keeping old content", note.title)
            return False
        content = self.store.read_content(note)
        if content == note.content:
            return False
        note.content = content
        self.store.save(self.state.notes)
        return True
