"""Interactive note viewer: key bindings, redraw loop and editor hand-off."""

import asyncio
import logging
from contextlib import contextmanager
from logging.handlers import BufferingHandler
from typing import List, Optional, Tuple

from prompt_toolkit import Application
from prompt_toolkit.filters import Condition
from prompt_toolkit.key_binding import KeyBindings

from .editor import open_note
from .errors import NoteError
from .render import build_layout, create_style
from .store import NoteStore
from .viewer import Action, Outcome, Viewer

logger = logging.getLogger(__name__)

# (action, prompt_toolkit keys, label shown in the key hints pane)
KEYMAP: List[Tuple[Action, Tuple[str, ...], str]] = [
    (Action.MOVE_UP, ("up", "k"), "↑/k"),
    (Action.MOVE_DOWN, ("down", "j"), "↓/j"),
    (Action.OPEN, ("enter", "o"), "Enter/o"),
    (Action.DELETE, ("d", "delete"), "d/Del"),
    (Action.TOGGLE_KEYBINDS, ("?", "h"), "?/h"),
    (Action.QUIT, ("q", "escape", "c-c"), "q/Esc"),
]

DESCRIPTIONS = {
    Action.MOVE_UP: "up",
    Action.MOVE_DOWN: "down",
    Action.OPEN: "open in editor",
    Action.DELETE: "delete",
    Action.TOGGLE_KEYBINDS: "hide keys",
    Action.QUIT: "quit",
}


class _HeldRecords(BufferingHandler):
    """Buffers every record until closed."""

    def __init__(self):
        super().__init__(capacity=0)

    def shouldFlush(self, record):
        return False


@contextmanager
def held_log_records():
    """
    Keep log records away from the root handlers while the UI owns the screen.

    Records are buffered and handed to the original handlers on exit, so
    `-v` output appears after the full-screen application has closed.
    """
    root = logging.getLogger()
    handlers = root.handlers[:]
    buffer = _HeldRecords()
    for handler in handlers:
        root.removeHandler(handler)
    root.addHandler(buffer)
    try:
        yield
    finally:
        root.removeHandler(buffer)
        for handler in handlers:
            root.addHandler(handler)
        for record in buffer.buffer:
            for handler in handlers:
                if record.levelno >= handler.level:
                    handler.handle(record)
        buffer.close()


class NoteViewerApp:
    """Full-screen list/content viewer over a NoteStore."""

    def __init__(self, store: NoteStore, editor: Optional[str] = None,
                 track_dates: bool = True, message_seconds: float = 1.0,
                 notes=None):
        """
        Args:
            store: Store the notes are read from and deletions saved to
            editor: Editor command for opening notes; $EDITOR wins when set
            track_dates: Show creation dates in the list
            message_seconds: How long the confirmation message stays up
            notes: Preloaded notes; read from the store when omitted
        """
        self.viewer = Viewer(store, notes=notes)
        self.editor = editor
        self.track_dates = track_dates
        self.message_seconds = message_seconds
        self.key_bindings = KeyBindings()
        self._setup_key_bindings()

    def _setup_key_bindings(self) -> None:
        """Bind every key in KEYMAP; all of them are ignored while a message shows."""
        browsing = Condition(lambda: not self.viewer.state.showing_message)

        for action, keys, _label in KEYMAP:
            handler = self._make_handler(action)
            for key in keys:
                self.key_bindings.add(key, filter=browsing, eager=key == "escape")(handler)

    def _make_handler(self, action: Action):
        def handler(event):
            self.handle_action(event.app, action)
        handler.__name__ = f"on_{action.value}"
        return handler

    def handle_action(self, app: Application, action: Action) -> None:
        """
        Apply an action and react to its outcome.

        Opening and quitting leave the application with the Outcome as
        result. A failed transition leaves it with the exception so run()
        re-raises it after the terminal has been restored.
        """
        try:
            outcome = self.viewer.apply(action)
        except NoteError as e:
            logger.debug("Action %s failed: %s", action.value, e)
            app.exit(exception=e)
            return

        if outcome is not Outcome.CONTINUE:
            app.exit(result=outcome)
        elif self.viewer.state.showing_message:
            app.create_background_task(self._dismiss_message_later(app))

    async def _dismiss_message_later(self, app: Application) -> None:
        await asyncio.sleep(self.message_seconds)
        self.viewer.dismiss_message()
        app.invalidate()

    def keymap_help(self) -> List[Tuple[str, str]]:
        return [(label, DESCRIPTIONS[action]) for action, _keys, label in KEYMAP]

    def create_application(self, input=None, output=None) -> Application:
        layout = build_layout(lambda: self.viewer.state, self.keymap_help(), self.track_dates)
        return Application(
            layout=layout,
            input=input,
            output=output,
            key_bindings=self.key_bindings,
            full_screen=True,
            style=create_style(),
        )

    def run(self) -> None:
        """
        Run the viewer until the user quits.

        The terminal is in raw mode only while Application.run() is active;
        prompt_toolkit restores it on every exit, including exceptions. The
        editor runs between two application runs so it gets a normal
        terminal. Log output is held back while the application is on screen.
        """
        while True:
            with held_log_records():
                outcome = self.create_application().run()

            if outcome is Outcome.OPEN_EDITOR:
                note = self.viewer.state.selected
                open_note(self.viewer.store.note_path(note), self.editor)
                if self.viewer.refresh_selected():
                    logger.debug("Reloaded %s after editing", note.title)
            else:
                # Quit, or the application closed without a result
                break
