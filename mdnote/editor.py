"""Launching the user's text editor on a note file."""

import logging
import os
import shlex
import subprocess
from pathlib import Path
from typing import List, Optional

from .config import DEFAULT_EDITOR
from .errors import EditorError

logger = logging.getLogger(__name__)


def get_editor(default: Optional[str] = None) -> str:
    """
    Get the preferred text editor.

    Args:
        default: Editor to use when $EDITOR is unset, usually from the config

    Returns:
        Editor command from $EDITOR, else default, else DEFAULT_EDITOR
    """
    return os.environ.get("EDITOR") or default or DEFAULT_EDITOR


def editor_command(editor: str, note_path: Path) -> List[str]:
    # $EDITOR may carry its own flags, e.g. "code --wait"
    try:
        parts = shlex.split(editor)
    except ValueError as e:
        raise EditorError(f"Cannot parse editor command {editor!r}: {e}") from e
    if not parts:
        raise EditorError("Editor command is empty. Please check your $EDITOR environment variable.")
    return parts + [str(note_path)]


def open_note(note_path: Path, default_editor: Optional[str] = None) -> None:
    """
    Open a note file in the user's editor and wait for it to exit.

    The editor may create, change or leave the file untouched; callers
    re-read the file afterwards.

    Args:
        note_path: Path to the note file to open
        default_editor: Editor used when $EDITOR is unset, usually from the config

    Raises:
        EditorError: if the editor cannot be started or exits non-zero
    """
    editor = get_editor(default_editor)
    command = editor_command(editor, note_path)
    logger.debug("Running editor: %s", command)
    try:
        subprocess.run(command, check=True)
    except FileNotFoundError as e:
        raise EditorError(
            f"Editor '{command[0]}' not found. Please check your $EDITOR environment variable.",
            command=command,
        ) from e
    except subprocess.CalledProcessError as e:
        raise EditorError(
            f"Editor '{command[0]}' exited with status {e.returncode}",
            command=command,
            returncode=e.returncode,
        ) from e
    except OSError as e:
        raise EditorError(f"Cannot start editor '{command[0]}': {e}", command=command) from e
