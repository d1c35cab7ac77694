"""Color themes - the fixed palette a chart can be drawn with."""

import logging
from dataclasses import dataclass
from enum import StrEnum

logger = logging.getLogger(__name__)

RGBA = tuple[float, float, float, float]


class ColorTheme(StrEnum):
    """Theme names accepted by the `color` query parameter."""

    RED = "red"
    ORANGE = "orange"
    YELLOW = "yellow"
    GREEN = "green"
    BLUE = "blue"
    VIOLET = "violet"


DEFAULT_THEME = ColorTheme.VIOLET


@dataclass(frozen=True)
class ThemeStyle:
    """Render colors for one theme, as matplotlib RGBA tuples (0-1 floats)."""

    line: RGBA
    area: RGBA  # Fill under the line
    title: RGBA
    xlabel: RGBA


def _style(red: int, green: int, blue: int) -> ThemeStyle:
    base = (red / 255, green / 255, blue / 255)
    return ThemeStyle(
        line=(*base, 1.0),
        area=(*base, 0.25),
        title=(*base, 0.80),
        xlabel=(*base, 0.80),
    )


THEMES: dict[ColorTheme, ThemeStyle] = {
    ColorTheme.RED: _style(201, 25, 0),
    ColorTheme.ORANGE: _style(255, 137, 0),
    ColorTheme.YELLOW: _style(255, 215, 0),
    ColorTheme.GREEN: _style(32, 212, 32),
    ColorTheme.BLUE: _style(30, 78, 255),
    ColorTheme.VIOLET: _style(150, 0, 215),
}


def parse_theme(name: str) -> ColorTheme:
    """
    Strict theme lookup (case-insensitive).

    Raises:
        ValueError: If the name is not one of the known themes
    """
    return ColorTheme(name.strip().lower())


def get_theme(name: str | None, default: ColorTheme = DEFAULT_THEME) -> ColorTheme:
    """
    Resolve a theme name, falling back to `default` for absent or unknown names.

    Unknown names are logged rather than rejected so that a typo in a README
    badge still renders an image.
    """
    if not name:
        return default
    try:
        return parse_theme(name)
    except ValueError:
        logger.warning(f"Unknown color theme {name!r}, using {default.value}")
        return default


def get_style(theme: ColorTheme) -> ThemeStyle:
    """Get the render colors for a theme."""
    return THEMES[theme]
