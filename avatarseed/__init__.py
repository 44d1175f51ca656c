"""avatarseed - deterministic avatar images from an identifier string."""

from .core import (
    Color,
    ColorOptions,
    SeededRandom,
    Surface,
    SurfaceError,
    get_surface,
    parse_color,
    pick_colors,
)
from .themes import THEMES, generate_avatar, generate_avatar_async, get_theme

__version__ = "0.1.0"

__all__ = [
    "Color",
    "ColorOptions",
    "SeededRandom",
    "Surface",
    "SurfaceError",
    "get_surface",
    "parse_color",
    "pick_colors",
    "THEMES",
    "get_theme",
    "generate_avatar",
    "generate_avatar_async",
]
