"""Coloured terminal output helpers."""

import sys


class Colors:
    """ANSI color codes for terminal output."""
    GREEN = '\033[92m'
    RED = '\033[91m'
    YELLOW = '\033[93m'
    BLUE = '\033[94m'
    CYAN = '\033[96m'
    BOLD = '\033[1m'
    DIM = '\033[2m'
    END = '\033[0m'


def paint(text: str, *codes: str) -> str:
    """Wrap text in the given color codes."""
    return f"{''.join(codes)}{text}{Colors.END}"


def success(message: str) -> None:
    print(paint(f"✓ {message}", Colors.GREEN))


def info(message: str) -> None:
    print(paint(message, Colors.CYAN))


def warning(message: str) -> None:
    print(paint(f"⚠ {message}", Colors.YELLOW))


def error(message: str) -> None:
    print(paint(f"✗ Error: {message}", Colors.RED), file=sys.stderr)
