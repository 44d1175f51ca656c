"""
Avatar themes - deterministic renderers keyed by name.

Usage:
    from avatarseed.themes import generate_avatar

    surface = generate_avatar("digidoodle", id="alice@example.com", size=64)
"""

from typing import Any, Mapping, Optional, Union

from ..core.config import ThemeOptions
from ..core.surface import Surface
from .base import AvatarTheme
from .digidoodle import DigiDoodleOptions, DigiDoodleTheme, apply_symmetry, build_grid
from .interference import InterferenceOptions, InterferenceTheme, interference_field
from .pixels import PixelsOptions, PixelsTheme
from .plasma import PlasmaOptions, PlasmaTheme, build_palette, palette_indices, plasma_field
from .smile import SmileOptions, SmileTheme, ink_color

THEMES: dict[str, AvatarTheme] = {
    theme.name: theme
    for theme in (
        DigiDoodleTheme(),
        InterferenceTheme(),
        PlasmaTheme(),
        PixelsTheme(),
        SmileTheme(),
    )
}


def get_theme(name: str) -> AvatarTheme:
    """Look up a theme by name. Raises KeyError for unknown names."""
    try:
        return THEMES[name]
    except KeyError:
        raise KeyError(f"Unknown theme {name!r}; expected one of {sorted(THEMES)}") from None


def generate_avatar(
    theme: str,
    options: Union[ThemeOptions, Mapping[str, Any], None] = None,
    **overrides: Any,
) -> Surface:
    return get_theme(theme).generate(options, **overrides)


async def generate_avatar_async(
    theme: str,
    options: Optional[Union[ThemeOptions, Mapping[str, Any]]] = None,
    **overrides: Any,
) -> Surface:
    return await get_theme(theme).generate_async(options, **overrides)


__all__ = [
    "AvatarTheme",
    "THEMES",
    "get_theme",
    "generate_avatar",
    "generate_avatar_async",
    # Themes
    "DigiDoodleTheme",
    "DigiDoodleOptions",
    "InterferenceTheme",
    "InterferenceOptions",
    "PlasmaTheme",
    "PlasmaOptions",
    "PixelsTheme",
    "PixelsOptions",
    "SmileTheme",
    "SmileOptions",
    # Building blocks
    "build_grid",
    "apply_symmetry",
    "interference_field",
    "build_palette",
    "plasma_field",
    "palette_indices",
    "ink_color",
]
