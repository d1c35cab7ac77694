"""Configuration package."""

from starchart.config.settings import Settings, settings
from starchart.config.themes import (
    DEFAULT_THEME,
    THEMES,
    ColorTheme,
    ThemeStyle,
    get_style,
    get_theme,
    parse_theme,
)

__all__ = [
    "ColorTheme",
    "DEFAULT_THEME",
    "THEMES",
    "ThemeStyle",
    "get_style",
    "get_theme",
    "parse_theme",
    "Settings",
    "settings",
]
