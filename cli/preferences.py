"""Display preference storage for the CLI.

Only one preference exists: the light/dark theme, kept under a single key in
a small JSON file in the user's home directory.
"""

import json
import logging
from pathlib import Path
from typing import Optional, Union

from app.core.config import settings
from bansuri.constants import THEMES
from bansuri.exceptions import InvalidThemeError

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def _preferences_path(path: Optional[PathLike]) -> Path:
    return Path(path) if path else Path(settings.PREFERENCES_FILE)


def _read_preferences(path: Path) -> dict:
    if not path.exists():
        return {}
    try:
        data = json.loads(path.read_text())
    except (OSError, json.JSONDecodeError) as e:
        logger.warning(f"Ignoring unreadable preferences file {path}: {e}")
        return {}
    return data if isinstance(data, dict) else {}


def load_theme(path: Optional[PathLike] = None) -> str:
    """Return the saved theme, or the default when none is stored."""
    theme = _read_preferences(_preferences_path(path)).get(settings.THEME_KEY)
    return theme if theme in THEMES else settings.DEFAULT_THEME


def save_theme(theme: str, path: Optional[PathLike] = None) -> str:
    """
    Store the display theme.

    Raises:
        InvalidThemeError: If the theme is not 'light' or 'dark'
    """
    theme = theme.lower()
    if theme not in THEMES:
        raise InvalidThemeError(f"Theme must be one of {', '.join(THEMES)}, got {theme!r}")

    preferences_path = _preferences_path(path)
    preferences = _read_preferences(preferences_path)
    preferences[settings.THEME_KEY] = theme
    preferences_path.parent.mkdir(parents=True, exist_ok=True)
    preferences_path.write_text(json.dumps(preferences, indent=2))
    return theme


def toggle_theme(path: Optional[PathLike] = None) -> str:
    """Switch between light and dark and return the new theme."""
    current = load_theme(path)
    return save_theme("light" if current == "dark" else "dark", path)
