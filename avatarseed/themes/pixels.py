"""
Pixels theme - a grid of independently colored cells.
"""

from dataclasses import dataclass

from ..core.colors import pick_background_color, pick_foreground_color
from ..core.seeded_random import SeededRandom
from ..core.config import ThemeOptions
from ..core.surface import DrawContext
from .base import AvatarTheme


@dataclass(frozen=True)
class PixelsOptions(ThemeOptions):
    grid_size: int = 9

    def __post_init__(self):
        super().__post_init__()
        self._clamp("grid_size", low=1, cast=int)


def cell_bounds(index: int, size: int, grid_size: int) -> tuple[int, int]:
    """Integer start and extent of a cell; neighbouring cells share edges exactly."""
    start = int(index * size / grid_size)
    end = int((index + 1) * size / grid_size)
    return start, end - start


class PixelsTheme(AvatarTheme):
    """Random colored pixel avatars. Every cell draws its own color."""

    name = "pixels"
    options_class = PixelsOptions

    def render(self, ctx: DrawContext, random: SeededRandom, options: PixelsOptions) -> None:
        size = options.size
        n = options.grid_size

        ctx.fill_style = pick_background_color(options, random)
        ctx.fill_rect(0, 0, size, size)

        for y in range(n):
            py, height = cell_bounds(y, size, n)
            for x in range(n):
                px, width = cell_bounds(x, size, n)
                ctx.fill_style = pick_foreground_color(options, random)
                ctx.fill_rect(px, py, width, height)
