"""
mdnote - Markdown notes from the command line.

Commands:
    new TITLE      write a new note in $EDITOR and add it to the index
    list           browse notes interactively, or print a table with --plain
    delete TITLE   remove a note and its Markdown file
    config         show (or write) the effective configuration

Notes live in notes/ under the current directory unless configured otherwise:
one <title>.md file per note plus notes.json, the index of all notes.
"""

import argparse
import json
import logging
import sys
from typing import Optional, Sequence

from rich import box
from rich.console import Console
from rich.table import Table
from rich.text import Text

from . import __version__, console
from .config import Config, config_path, load_config, save_config
from .editor import open_note
from .errors import DuplicateTitleError, NoteError, NoteNotFoundError
from .models import Note, utc_now, validate_title
from .store import NoteStore

logger = logging.getLogger(__name__)


def create_note(store: NoteStore, title: str, default_editor: Optional[str] = None,
                track_dates: bool = True) -> Optional[Note]:
    """
    Create a note by opening the editor on a new Markdown file.

    Args:
        store: Store to add the note to
        title: Note title, also the file name stem
        default_editor: Editor used when $EDITOR is unset
        track_dates: Record the creation time

    Returns:
        The stored note, or None if the editor exited without writing the file

    Raises:
        InvalidTitleError: if the title cannot be a file name
        DuplicateTitleError: if a note with that title exists
        EditorError: if the editor fails; nothing is recorded
    """
    title = validate_title(title)
    if store.find(title) is not None:
        raise DuplicateTitleError(f"A note titled '{title}' already exists")

    store.ensure_dir()
    note = Note(title=title, created_at=utc_now() if track_dates else None)
    path = store.note_path(note)
    open_note(path, default_editor)

    if not path.exists():
        return None
    note.content = store.read_content(note)
    store.append(note)
    logger.debug("Created note %s (%s)", note.title, note.id)
    return note


def delete_note(store: NoteStore, title: str) -> Note:
    """
    Delete a note by title from disk and from the index.

    Raises:
        NoteNotFoundError: if no note has that title
    """
    notes = store.load()
    # first match only; indexes from older versions may repeat a title
    position = next((i for i, n in enumerate(notes) if n.title == title), None)
    if position is None:
        raise NoteNotFoundError(f"No note titled '{title}'")
    note = notes[position]
    store.remove_file(note)
    del notes[position]
    store.save(notes)
    return note


def format_table(notes: Sequence[Note], track_dates: bool = True) -> Table:
    """
    Build the title/date table printed by `list --plain`.

    Args:
        notes: Notes in display order
        track_dates: Include the date column

    Returns:
        A rich Table; columns are padded by display width
    """
    table = Table(box=box.SIMPLE_HEAVY, show_edge=False)
    table.add_column("Title", style="bold", no_wrap=True)
    if track_dates:
        table.add_column("Date", style="dim", no_wrap=True)
    for note in notes:
        if track_dates:
            table.add_row(Text(note.title), note.date_label)
        else:
            table.add_row(Text(note.title))
    return table


def cmd_new(args: argparse.Namespace, config: Config, store: NoteStore) -> int:
    console.info("Opening note in editor...")
    note = create_note(store, args.title, config.editor, config.track_dates)
    if note is None:
        console.warning("Editor closed without saving; no note was created.")
        return 0
    console.success(f"Created note '{note.title}'")
    return 0


def stdout_is_tty() -> bool:
    return sys.stdout.isatty()


def cmd_list(args: argparse.Namespace, config: Config, store: NoteStore) -> int:
    if config.interactive and not args.plain and stdout_is_tty():
        # imported lazily: table output doesn't need prompt_toolkit's startup cost
        from .app import NoteViewerApp

        NoteViewerApp(
            store,
            editor=config.editor,
            track_dates=config.track_dates,
            message_seconds=config.message_seconds,
        ).run()
        return 0

    notes = store.load()
    if not notes:
        console.warning("No notes yet. Create one with: mdnote new <TITLE>")
        return 0
    Console().print(format_table(notes, config.track_dates))
    return 0


def cmd_delete(args: argparse.Namespace, config: Config, store: NoteStore) -> int:
    note = delete_note(store, args.title)
    console.success(f"Deleted note '{note.title}'")
    return 0


def cmd_config(args: argparse.Namespace, config: Config, store: NoteStore) -> int:
    if args.write:
        path = save_config(config, config_path(args.config))
        console.success(f"Wrote configuration to {path}")
        return 0
    print(json.dumps(config.to_dict(), indent=4))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mdnote",
        description="Take Markdown notes from the command line.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--config", metavar="PATH",
                        help="config file (default: $MDNOTE_CONFIG or ~/.config/mdnote/config.json)")
    parser.add_argument("--notes-dir", metavar="DIR", help="directory holding notes and notes.json")
    parser.add_argument("-v", "--verbose", action="store_true", help="log debug output to stderr")

    sub = parser.add_subparsers(dest="command", metavar="<command>")
    sub.required = True

    p_new = sub.add_parser("new", help="create a note and open it in $EDITOR")
    p_new.add_argument("title", metavar="TITLE", help="note title, also used as the file name")
    p_new.set_defaults(func=cmd_new)

    p_list = sub.add_parser("list", help="browse notes")
    p_list.add_argument("--plain", action="store_true",
                        help="print a table instead of starting the interactive viewer")
    p_list.set_defaults(func=cmd_list)

    p_delete = sub.add_parser("delete", help="delete a note by title")
    p_delete.add_argument("title", metavar="TITLE")
    p_delete.set_defaults(func=cmd_delete)

    p_config = sub.add_parser("config", help="show the effective configuration")
    p_config.add_argument("--write", action="store_true",
                          help="save the effective configuration to the config file")
    p_config.set_defaults(func=cmd_config)
    return parser


def setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point for mdnote."""
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.verbose)

    try:
        config = load_config(config_path(args.config))
        if args.notes_dir:
            config.notes_dir = args.notes_dir
        store = NoteStore(config.notes_path)
        return args.func(args, config, store)
    except NoteError as e:
        console.error(str(e))
        return 1
    except KeyboardInterrupt:
        print("\nInterrupted.")
        return 130


if __name__ == "__main__":
    sys.exit(main())
