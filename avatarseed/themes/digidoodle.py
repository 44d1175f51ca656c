"""
DigiDoodle theme - symmetric pixel-art grids.

One boolean grid per layer, each cell filled with probability `density`,
then mirrored/rotated by the enabled symmetry operations. Layers are
painted in order over a solid background, later layers on top.
"""

from dataclasses import dataclass
from typing import ClassVar

from ..core.colors import pick_background_color, pick_colors
from ..core.config import GeneratorOptions, ThemeOptions
from ..core.seeded_random import SeededRandom
from ..core.surface import DrawContext
from .base import AvatarTheme

Grid = list[list[bool]]


@dataclass(frozen=True)
class DigiDoodleOptions(ThemeOptions):
    """DigiDoodle options. Margin and spacing are fractions; border is in cells."""
    grid_size: int = 8
    density: float = 0.5
    layers: int = 1
    border: int = 0
    margin: float = 0.1
    spacing: float = 0.0
    symmetry_vertical: bool = True
    symmetry_horizontal: bool = False
    symmetry_diagonal_left: bool = False
    symmetry_diagonal_right: bool = False
    symmetry_rotational: bool = False

    ALIASES: ClassVar[dict[str, str]] = {**GeneratorOptions.ALIASES, "symmetry": "symmetry_vertical"}

    def __post_init__(self):
        super().__post_init__()
        self._clamp("grid_size", low=1, cast=int)
        self._clamp("density", low=0.0, high=1.0, cast=float)
        self._clamp("layers", low=1, cast=int)
        self._clamp("border", low=0, high=self.grid_size // 2, cast=int)
        self._clamp("margin", low=0.0, high=0.49, cast=float)
        self._clamp("spacing", low=0.0, high=1.0, cast=float)


# =============================================================================
# Grid construction
# =============================================================================

def build_grid(random: SeededRandom, grid_size: int, density: float, border: int = 0) -> Grid:
    """Fill cells row by row; cells within `border` of the edge stay empty and draw nothing."""
    grid = []
    for y in range(grid_size):
        row = []
        for x in range(grid_size):
            inside = border <= x < grid_size - border and border <= y < grid_size - border
            row.append(random.random_boolean(density) if inside else False)
        grid.append(row)
    return grid


def mirror_vertical(grid: Grid) -> None:
    """Copy the left half onto the right half."""
    n = len(grid)
    for y in range(n):
        for x in range(n // 2):
            grid[y][n - 1 - x] = grid[y][x]


def mirror_horizontal(grid: Grid) -> None:
    """Copy the top half onto the bottom half."""
    n = len(grid)
    for y in range(n // 2):
        for x in range(n):
            grid[n - 1 - y][x] = grid[y][x]


def mirror_diagonal(grid: Grid) -> None:
    """Copy the upper triangle across the top-left to bottom-right diagonal."""
    n = len(grid)
    for y in range(n):
        for x in range(y + 1, n):
            grid[x][y] = grid[y][x]


def mirror_anti_diagonal(grid: Grid) -> None:
    """Copy the upper-left triangle across the top-right to bottom-left diagonal."""
    n = len(grid)
    for y in range(n):
        for x in range(n - y - 1):
            grid[n - 1 - x][n - 1 - y] = grid[y][x]


def rotate_quadrant(grid: Grid) -> None:
    """Copy the top-left quadrant to the other three at 90, 180 and 270 degrees."""
    n = len(grid)
    quadrant = (n + 1) // 2
    for y in range(quadrant):
        for x in range(quadrant):
            cell = grid[y][x]
            grid[x][n - 1 - y] = cell
            grid[n - 1 - y][n - 1 - x] = cell
            grid[n - 1 - x][y] = cell


def apply_symmetry(grid: Grid, options: DigiDoodleOptions) -> Grid:
    """Apply enabled symmetry operations in fixed order."""
    if options.symmetry_vertical:
        mirror_vertical(grid)
    if options.symmetry_horizontal:
        mirror_horizontal(grid)
    if options.symmetry_diagonal_left:
        mirror_diagonal(grid)
    if options.symmetry_diagonal_right:
        mirror_anti_diagonal(grid)
    if options.symmetry_rotational:
        rotate_quadrant(grid)
    return grid


# =============================================================================
# Theme
# =============================================================================

class DigiDoodleTheme(AvatarTheme):
    """Symmetric pixel-art avatars."""

    name = "digidoodle"
    options_class = DigiDoodleOptions

    def render(self, ctx: DrawContext, random: SeededRandom, options: DigiDoodleOptions) -> None:
        size = options.size
        n = options.grid_size

        background = pick_background_color(options, random)
        layer_colors = pick_colors(options, random, options.layers)

        ctx.fill_style = background
        ctx.fill_rect(0, 0, size, size)

        effective = size * (1 - options.margin * 2)
        cell_size = effective / n
        pixel_size = cell_size * (1 - options.spacing)
        offset = size * options.margin + (cell_size - pixel_size) / 2

        for color in layer_colors:
            grid = apply_symmetry(build_grid(random, n, options.density, options.border), options)

            ctx.fill_style = color
            for y in range(n):
                for x in range(n):
                    if grid[y][x]:
                        ctx.fill_rect(offset + x * cell_size, offset + y * cell_size, pixel_size, pixel_size)
