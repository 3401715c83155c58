"""
Configuration for mdnote.

The configuration is a small JSON object. Every key is optional; missing keys
take the values in DEFAULT_CONFIG. The file location defaults to
~/.config/mdnote/config.json and can be moved with $MDNOTE_CONFIG.
"""

import json
import logging
import os
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from .errors import ConfigError, NoteIOError

logger = logging.getLogger(__name__)

CONFIG_ENV = "MDNOTE_CONFIG"
DEFAULT_CONFIG_PATH = Path.home() / ".config" / "mdnote" / "config.json"
DEFAULT_EDITOR = "nano"

DEFAULT_CONFIG: Dict[str, Any] = {
    "notes_dir": "notes",
    "editor": DEFAULT_EDITOR,
    "interactive": True,
    "track_dates": True,
    "message_seconds": 1.0,
}

_EXPECTED_TYPES = {
    "notes_dir": (str,),
    "editor": (str,),
    "interactive": (bool,),
    "track_dates": (bool,),
    "message_seconds": (int, float),
}


@dataclass
class Config:
    """Effective settings for one mdnote invocation."""
    notes_dir: str = DEFAULT_CONFIG["notes_dir"]
    editor: str = DEFAULT_CONFIG["editor"]
    interactive: bool = DEFAULT_CONFIG["interactive"]
    track_dates: bool = DEFAULT_CONFIG["track_dates"]
    message_seconds: float = DEFAULT_CONFIG["message_seconds"]

    @property
    def notes_path(self) -> Path:
        return Path(self.notes_dir).expanduser()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Config":
        """
        Build a Config from a parsed JSON object.

        Args:
            data: Mapping read from the config file

        Returns:
            Config with defaults filled in for missing keys

        Raises:
            ConfigError: if a known key holds a value of the wrong type
        """
        values = dict(DEFAULT_CONFIG)
        for key, value in data.items():
            if key not in _EXPECTED_TYPES:
                logger.debug("Ignoring unknown config key %r", key)
                continue
            expected = _EXPECTED_TYPES[key]
            # bool is an int subclass; keep it out of numeric settings
            if not isinstance(value, expected) or (
                isinstance(value, bool) and bool not in expected
            ):
                names = " or ".join(t.__name__ for t in expected)
                raise ConfigError(f"Config key '{key}' must be {names}, got {value!r}")
            values[key] = value
        if values["message_seconds"] < 0:
            raise ConfigError("Config key 'message_seconds' must not be negative")
        return cls(**values)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def config_path(override: Optional[str] = None) -> Path:
    """Return the config file path, honouring an explicit override and $MDNOTE_CONFIG."""
    if override:
        return Path(override).expanduser()
    env_path = os.environ.get(CONFIG_ENV)
    if env_path:
        return Path(env_path).expanduser()
    return DEFAULT_CONFIG_PATH


def load_config(path: Optional[Path] = None) -> Config:
    """
    Load configuration from JSON file.

    Args:
        path: Config file location; defaults to config_path()

    Returns:
        Config object. Returns the defaults if the file doesn't exist or
        cannot be parsed.
    """
    path = path or config_path()
    if not path.exists():
        return Config()
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (json.JSONDecodeError, OSError) as e:
        logger.warning("Ignoring unreadable config %s: %s", path, e)
        return Config()
    if not isinstance(data, dict):
        logger.warning("Ignoring config %s: top level is not an object", path)
        return Config()
    return Config.from_dict(data)


def save_config(config: Config, path: Optional[Path] = None) -> Path:
    """
    Save configuration to JSON file.

    Args:
        config: Configuration to save
        path: Destination; defaults to config_path()

    Returns:
        The path written
    """
    path = path or config_path()
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(config.to_dict(), f, indent=4)
            f.write("\n")
    except OSError as e:
        raise NoteIOError(f"Cannot write config file {path}: {e}") from e
    return path
