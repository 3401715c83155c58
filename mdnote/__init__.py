"""mdnote - Markdown notes with a JSON index and a terminal viewer."""

__version__ = "0.1.0"
