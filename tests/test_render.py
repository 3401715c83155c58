from datetime import datetime, timezone

from prompt_toolkit.layout.layout import Layout

from mdnote.models import Note
from mdnote.render import (
    EMPTY_LIST_TEXT, NO_SELECTION_TEXT, build_layout, content_text, keybind_fragments,
    list_fragments, message_fragments,
)
from mdnote.viewer import ViewerState


def _text(fragments) -> str:
    return "".join(text for _style, text in fragments)


def _state() -> ViewerState:
    return ViewerState(
        notes=[
            Note(title="a", content="alpha", created_at=datetime(2024, 5, 1, 9, 30, tzinfo=timezone.utc)),
            Note(title="b", content="beta"),
        ],
        selected_index=1,
    )


def test_list_marks_only_selected_entry() -> None:
    fragments = list_fragments(_state())
    selected = [text for style, text in fragments if style == "class:selected"]
    assert selected == [" b "]
    assert ("class:note", " a ") in fragments


def test_list_shows_dates_when_tracked() -> None:
    assert "2024-05-01 09:30" in _text(list_fragments(_state(), track_dates=True))
    assert "2024-05-01" not in _text(list_fragments(_state(), track_dates=False))


def test_content_shows_selected_note() -> None:
    assert _text(content_text(_state())) == "beta"


def test_empty_state_renders_placeholders() -> None:
    state = ViewerState()
    assert _text(list_fragments(state)) == EMPTY_LIST_TEXT
    assert _text(content_text(state)) == NO_SELECTION_TEXT


def test_keybind_fragments() -> None:
    text = _text(keybind_fragments([("q", "quit"), ("d", "delete")]))
    assert text == "q quit   d delete"


def test_message_fragments() -> None:
    state = ViewerState(message="Deleted note 'a'.")
    assert "Deleted note 'a'." in _text(message_fragments(state))


def test_build_layout() -> None:
    state = _state()
    layout = build_layout(lambda: state, [("q", "quit")])
    assert isinstance(layout, Layout)
