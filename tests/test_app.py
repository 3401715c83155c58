import asyncio
import io
import logging
from typing import Any
from unittest.mock import MagicMock

import pytest
from prompt_toolkit.input import create_pipe_input
from prompt_toolkit.keys import Keys
from prompt_toolkit.output import DummyOutput

from mdnote.app import KEYMAP, NoteViewerApp
from mdnote.errors import EditorError, NoteIOError
from mdnote.store import NoteStore
from mdnote.viewer import Action, Outcome


def test_every_action_has_keys() -> None:
    actions = {action for action, _keys, _label in KEYMAP}
    assert actions == set(Action) - {Action.NONE}


def test_key_bindings_registered(store: NoteStore) -> None:
    viewer_app = NoteViewerApp(store)
    bound = {binding.keys for binding in viewer_app.key_bindings.bindings}
    assert (Keys.Up,) in bound
    assert ("k",) in bound
    assert ("j",) in bound
    assert ("q",) in bound
    assert (Keys.ControlC,) in bound


def test_bindings_disabled_while_message_shows(store: NoteStore, make_notes) -> None:
    make_notes("a")
    viewer_app = NoteViewerApp(store)
    binding = viewer_app.key_bindings.bindings[0]
    assert binding.filter()
    viewer_app.viewer.state.message = "Deleted note 'a'."
    assert not binding.filter()


def test_quit_exits_application(store: NoteStore) -> None:
    app = MagicMock()
    NoteViewerApp(store).handle_action(app, Action.QUIT)
    app.exit.assert_called_once_with(result=Outcome.QUIT)


def test_move_keeps_application_running(store: NoteStore, make_notes) -> None:
    make_notes("a", "b")
    app = MagicMock()
    viewer_app = NoteViewerApp(store)
    viewer_app.handle_action(app, Action.MOVE_DOWN)
    app.exit.assert_not_called()
    assert viewer_app.viewer.state.selected_index == 1


def test_delete_schedules_message_dismissal(store: NoteStore, make_notes) -> None:
    make_notes("a", "b")
    app = MagicMock()
    viewer_app = NoteViewerApp(store, message_seconds=0)
    viewer_app.handle_action(app, Action.DELETE)
    app.exit.assert_not_called()
    app.create_background_task.assert_called_once()
    # close the coroutine handed to the mock so it isn't reported as never awaited
    app.create_background_task.call_args[0][0].close()
    assert viewer_app.viewer.state.showing_message


def test_failed_delete_exits_with_exception(store: NoteStore, make_notes, monkeypatch: Any) -> None:
    make_notes("a")
    viewer_app = NoteViewerApp(store)
    error = NoteIOError("read-only")
    monkeypatch.setattr(store, "remove_file", MagicMock(side_effect=error))
    app = MagicMock()
    viewer_app.handle_action(app, Action.DELETE)
    app.exit.assert_called_once_with(exception=error)


def _patch_application(monkeypatch: Any, *results) -> MagicMock:
    application = MagicMock()
    application.return_value.run.side_effect = list(results)
    monkeypatch.setattr("mdnote.app.Application", application)
    return application


def test_run_quits(store: NoteStore, monkeypatch: Any) -> None:
    application = _patch_application(monkeypatch, Outcome.QUIT)
    NoteViewerApp(store).run()
    assert application.return_value.run.call_count == 1


def test_run_with_no_notes_quits_cleanly(store: NoteStore, monkeypatch: Any, fake_editor) -> None:
    _patch_application(monkeypatch, None)
    NoteViewerApp(store).run()
    assert fake_editor.calls == []


def test_run_opens_editor_and_reloads(store: NoteStore, make_notes, monkeypatch: Any,
                                      fake_editor) -> None:
    notes = make_notes("a")
    fake_editor.content = "rewritten"
    application = _patch_application(monkeypatch, Outcome.OPEN_EDITOR, Outcome.QUIT)

    viewer_app = NoteViewerApp(store)
    viewer_app.run()

    assert fake_editor.calls == [store.note_path(notes[0])]
    assert viewer_app.viewer.state.selected.content == "rewritten"
    assert store.load()[0].content == "rewritten"
    assert application.return_value.run.call_count == 2


def test_run_propagates_editor_failure(store: NoteStore, make_notes, monkeypatch: Any) -> None:
    make_notes("a")
    _patch_application(monkeypatch, Outcome.OPEN_EDITOR)
    monkeypatch.setattr("mdnote.app.open_note", MagicMock(side_effect=EditorError("boom")))
    with pytest.raises(EditorError):
        NoteViewerApp(store).run()


def test_message_screen_blocks_keys_until_dismissed(store: NoteStore, make_notes) -> None:
    make_notes("a", "b", "c")
    viewer_app = NoteViewerApp(store, message_seconds=0.5)
    state = viewer_app.viewer.state

    async def session():
        with create_pipe_input() as pipe:
            application = viewer_app.create_application(input=pipe, output=DummyOutput())
            running = asyncio.ensure_future(application.run_async())
            await asyncio.sleep(0.1)

            pipe.send_text("d")
            await asyncio.sleep(0.1)
            assert state.message == "Deleted note 'a'."
            pipe.send_text("j")
            await asyncio.sleep(0.1)
            assert state.selected_index == 0

            await asyncio.sleep(0.6)
            assert state.message is None
            pipe.send_text("j")
            await asyncio.sleep(0.1)
            assert state.selected_index == 1

            pipe.send_text("q")
            return await asyncio.wait_for(running, timeout=2)

    assert asyncio.run(session()) is Outcome.QUIT
    assert [n.title for n in store.load()] == ["b", "c"]


def test_log_records_held_while_viewer_runs(store: NoteStore, monkeypatch: Any) -> None:
    stream = io.StringIO()
    handler = logging.StreamHandler(stream)
    root = logging.getLogger()
    root.addHandler(handler)
    seen_during_run = []

    def run() -> Outcome:
        logging.getLogger("mdnote.viewer").warning("while on screen")
        seen_during_run.append(stream.getvalue())
        return Outcome.QUIT

    application = MagicMock()
    application.return_value.run.side_effect = run
    monkeypatch.setattr("mdnote.app.Application", application)
    try:
        NoteViewerApp(store).run()
        assert handler in root.handlers
    finally:
        root.removeHandler(handler)

    assert seen_during_run == [""]
    assert "while on screen" in stream.getvalue()
