"""Color theme for the svcctl console output.

The bundled ``data/theme.toml`` holds the defaults. A user theme, either
``$SVCCTL_THEME`` or ``~/.config/svcctl/theme.toml``, may override any
subset of its ``[colors]`` table.
"""

import logging
import os
import sys
import tomllib
from functools import cache
from importlib import resources
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator
from rich.theme import Theme

from svcctl.core.paths import get_config_dir

logger = logging.getLogger(__name__)

THEME_ENV_VAR = "SVCCTL_THEME"


def _normalize_hex(name: str, value: object) -> str:
    """Return a stripped ``#RGB``/``#RRGGBB`` color or raise ValueError."""
    if not isinstance(value, str):
        raise ValueError(f"{name}: color must be a string")
    color = value.strip()
    digits = color.removeprefix("#")
    if digits == color:
        raise ValueError(f"{name}: color must start with '#'")
    if len(digits) not in (3, 6):
        raise ValueError(f"{name}: color must be #RGB or #RRGGBB format")
    try:
        int(digits, 16)
    except ValueError:
        raise ValueError(f"{name}: invalid hex color '{color}'") from None
    return color


class ThemeColors(BaseModel):
    """Named colors used by the svcctl console."""

    model_config = ConfigDict(extra="forbid")

    text: str = "#ffffff"
    muted: str = "#b2bec3"
    header: str = "#69B9A1"
    border: str = "#29526d"

    success: str = "#03b971"
    warning: str = "#f5b332"
    error: str = "#f53263"
    info: str = "#0ec1c8"

    # Live service state
    running: str = "#c1ff62"
    stopped: str = "#0e8ac8"
    missing: str = "#d44ebc"

    # Eligibility decisions and dry-run output
    eligible: str = "#03b971"
    skipped: str = "#b2bec3"
    confirm: str = "#faf870"
    what_if: str = "#0ec1c8"

    @field_validator("*", mode="before")
    @classmethod
    def validate_hex_color(cls, v: object, info: Any) -> str:
        """Validate that every color is a hex code."""
        return _normalize_hex(info.field_name, v)


# Rich style name -> (color field, extra style attributes)
_STYLES: dict[str, tuple[str, str]] = {
    "text": ("text", ""),
    "muted": ("muted", ""),
    "dim": ("muted", ""),
    "header": ("header", ""),
    "bold_header": ("header", "bold"),
    "border": ("border", ""),
    "success": ("success", ""),
    "warning": ("warning", ""),
    "error": ("error", "bold"),
    "info": ("info", ""),
    "running": ("running", ""),
    "stopped": ("stopped", ""),
    "missing": ("missing", ""),
    "eligible": ("eligible", ""),
    "skipped": ("skipped", ""),
    "confirm": ("confirm", "bold"),
    "what_if": ("what_if", ""),
    "service.name": ("text", "bold"),
}


def get_user_theme_path() -> Path:
    """Get the user theme path.

    Returns:
        ``$SVCCTL_THEME`` if set, else ~/.config/svcctl/theme.toml.
    """
    override = os.environ.get(THEME_ENV_VAR)
    if override:
        return Path(override)
    return get_config_dir() / "theme.toml"


def _read_colors(source: Any) -> dict[str, str]:
    """Read the ``[colors]`` table of a theme file.

    Unreadable or malformed files contribute no colors.
    """
    try:
        with source.open("rb") as f:
            data = tomllib.load(f)
    except FileNotFoundError:
        return {}
    except tomllib.TOMLDecodeError as e:
        logger.warning("Failed to parse theme %s: %s", source, e)
        print(f"Warning: Failed to parse {source}: {e}", file=sys.stderr)
        return {}
    except OSError as e:
        logger.warning("Failed to read theme %s: %s", source, e)
        return {}

    colors = data.get("colors", {})
    if not isinstance(colors, dict):
        logger.warning("Ignoring non-table 'colors' in %s", source)
        return {}
    return {key: value for key, value in colors.items() if isinstance(value, str)}


def load_theme() -> ThemeColors:
    """Load the bundled colors merged with the user's overrides.

    An invalid merged theme falls back to the built-in defaults.
    """
    colors = _read_colors(resources.files("svcctl.data").joinpath("theme.toml"))
    if not colors:
        logger.error("Bundled theme is missing or empty")

    user_path = get_user_theme_path()
    overrides = _read_colors(user_path)
    if overrides:
        logger.debug("Applying %d theme override(s) from %s", len(overrides), user_path)
        colors.update(overrides)

    try:
        return ThemeColors(**colors)
    except ValidationError as e:
        logger.warning("Theme validation failed, using defaults: %s", e)
        print(f"Warning: Invalid theme configuration: {e}", file=sys.stderr)
        return ThemeColors()


def get_rich_theme(colors: ThemeColors | None = None) -> Theme:
    """Build the Rich theme for a set of colors.

    Args:
        colors: Colors to use. If None, the theme is loaded from disk.

    Returns:
        Rich Theme with one style per entry of the style table.
    """
    colors = colors or load_theme()
    styles: dict[str, str] = {}
    for style, (field, attributes) in _STYLES.items():
        color = getattr(colors, field)
        styles[style] = f"{attributes} {color}".strip()
    return Theme(styles)


@cache
def get_theme() -> Theme:
    """Get the Rich theme, loaded once per process."""
    return get_rich_theme()
