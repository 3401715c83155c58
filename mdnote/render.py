"""
Render layer for the interactive viewer.

The *_fragments functions turn a ViewerState into prompt_toolkit formatted
text and do not touch the terminal. build_layout() wires them into windows
that prompt_toolkit redraws after every key press.
"""

from typing import Callable, List, Sequence, Tuple

from prompt_toolkit.filters import Condition
from prompt_toolkit.layout.containers import (
    ConditionalContainer, Float, FloatContainer, HSplit, VSplit, Window,
)
from prompt_toolkit.layout.controls import FormattedTextControl
from prompt_toolkit.layout.dimension import Dimension as D
from prompt_toolkit.layout.layout import Layout
from prompt_toolkit.styles import Style
from prompt_toolkit.widgets import Frame

from .viewer import ViewerState

Fragments = List[Tuple[str, str]]

EMPTY_LIST_TEXT = "No notes yet. Create one with: mdnote new <TITLE>"
NO_SELECTION_TEXT = "(no note selected)"


def list_fragments(state: ViewerState, track_dates: bool = True) -> Fragments:
    """
    Create formatted text for the notes list pane.

    Args:
        state: Current viewer state
        track_dates: Whether to show each note's creation date

    Returns:
        List of (style, text) tuples for display
    """
    result: Fragments = []
    for i, note in enumerate(state.notes):
        is_selected = i == state.selected_index
        result.append(("class:selected" if is_selected else "class:note", f" {note.title} "))
        if track_dates and note.date_label:
            result.append(("class:date", f" {note.date_label}"))
        result.append(("", "\n"))

    if not state.notes:
        result.append(("class:placeholder", EMPTY_LIST_TEXT))
    return result


def content_text(state: ViewerState) -> Fragments:
    note = state.selected
    if note is None:
        return [("class:placeholder", NO_SELECTION_TEXT)]
    return [("class:content", note.content)]


def keybind_fragments(keymap: Sequence[Tuple[str, str]]) -> Fragments:
    """Render (keys, description) pairs as a single line of hints."""
    result: Fragments = []
    for i, (keys, description) in enumerate(keymap):
        if i:
            result.append(("", "   "))
        result.append(("class:key", keys))
        result.append(("", f" {description}"))
    return result


def message_fragments(state: ViewerState) -> Fragments:
    return [("class:message", f"  {state.message or ''}  ")]


def create_style() -> Style:
    """Create the viewer styling."""
    return Style.from_dict({
        'selected': 'bg:#0055aa #ffffff bold',
        'note': '',
        'date': '#888888',
        'placeholder': '#888888 italic',
        'key': 'fg:#00aaaa bold',
        'message': 'fg:#00aa00 bold',
    })


def build_layout(get_state: Callable[[], ViewerState],
                 keymap: Sequence[Tuple[str, str]],
                 track_dates: bool = True) -> Layout:
    """
    Create the viewer layout.

    The list and content panes sit side by side with the key hints beneath
    them. While a message is showing, the whole screen is replaced by a
    centred message box.

    Args:
        get_state: Returns the state to draw; called on every redraw
        keymap: (keys, description) pairs for the key hints pane
        track_dates: Whether the list shows creation dates

    Returns:
        The prompt_toolkit Layout
    """
    showing_message = Condition(lambda: get_state().showing_message)
    show_keybinds = Condition(lambda: get_state().show_keybinds)

    list_window = Window(
        FormattedTextControl(lambda: list_fragments(get_state(), track_dates)),
    )
    content_window = Window(
        FormattedTextControl(lambda: content_text(get_state())),
        wrap_lines=True,
    )
    main_area = VSplit([
        Frame(list_window, title="Notes", width=D(weight=1)),
        Frame(content_window, title="Content", width=D(weight=1)),
    ])
    keybinds_pane = ConditionalContainer(
        Frame(Window(FormattedTextControl(lambda: keybind_fragments(keymap)), height=1),
              title="Keys"),
        filter=show_keybinds,
    )

    browsing = ConditionalContainer(HSplit([main_area, keybinds_pane]), filter=~showing_message)
    message_screen = ConditionalContainer(
        FloatContainer(
            content=Window(),
            floats=[Float(Frame(Window(
                FormattedTextControl(lambda: message_fragments(get_state())),
                height=1,
                dont_extend_width=True,
            )))],
        ),
        filter=showing_message,
    )
    return Layout(HSplit([browsing, message_screen]))
