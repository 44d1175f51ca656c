"""
Raster surface with a small canvas-style drawing context.

Pixels live in a numpy RGBA array (height, width, 4) of uint8. Vector
primitives (rects, arcs, ellipses, bezier paths) are flattened to
polylines and rasterized with vectorized coverage masks sampled at pixel
centers. There is no anti-aliasing: identical calls always produce
identical bytes.

Coordinate convention matches HTML canvas: pixel (x, y) covers
[x, x+1) x [y, y+1) and is sampled at (x + 0.5, y + 0.5).
"""

from __future__ import annotations

import base64
import io
import logging
import math
from dataclasses import dataclass, replace
from typing import Any, Optional

import numpy as np

from .colors import BLACK, Color, ColorValue, parse_color

logger = logging.getLogger(__name__)

# Flattening resolution for curves
ARC_SEGMENTS_PER_TURN = 96
QUADRATIC_SEGMENTS = 16
BEZIER_SEGMENTS = 24

Point = tuple[float, float]
Transform = tuple[float, float, float, float, float, float]  # a, b, c, d, e, f

IDENTITY: Transform = (1.0, 0.0, 0.0, 1.0, 0.0, 0.0)


class SurfaceError(RuntimeError):
    """Raster sink is unavailable or misconfigured."""


# =============================================================================
# Drawing state
# =============================================================================

@dataclass(frozen=True)
class DrawState:
    """Save/restore-able drawing state."""
    fill_style: Color = BLACK
    stroke_style: Color = BLACK
    line_width: float = 1.0
    transform: Transform = IDENTITY
    clip: Optional[np.ndarray] = None


@dataclass
class _Subpath:
    points: list[Point]
    closed: bool = False


def _apply(transform: Transform, x: float, y: float) -> Point:
    a, b, c, d, e, f = transform
    return (a * x + c * y + e, b * x + d * y + f)


def _multiply(m: Transform, n: Transform) -> Transform:
    """Compose so that points are mapped by n first, then m."""
    a1, b1, c1, d1, e1, f1 = m
    a2, b2, c2, d2, e2, f2 = n
    return (
        a1 * a2 + c1 * b2,
        b1 * a2 + d1 * b2,
        a1 * c2 + c1 * d2,
        b1 * c2 + d1 * d2,
        a1 * e2 + c1 * f2 + e1,
        b1 * e2 + d1 * f2 + f1,
    )


# =============================================================================
# Drawing context
# =============================================================================

class DrawContext:
    """Canvas-style 2D drawing context bound to a Surface."""

    def __init__(self, surface: "Surface"):
        self.surface = surface
        self._state = DrawState()
        self._stack: list[DrawState] = []
        self._subpaths: list[_Subpath] = []

    # -- state ---------------------------------------------------------------

    @property
    def fill_style(self) -> Color:
        return self._state.fill_style

    @fill_style.setter
    def fill_style(self, value: ColorValue):
        self._state = replace(self._state, fill_style=parse_color(value))

    @property
    def stroke_style(self) -> Color:
        return self._state.stroke_style

    @stroke_style.setter
    def stroke_style(self, value: ColorValue):
        self._state = replace(self._state, stroke_style=parse_color(value))

    @property
    def line_width(self) -> float:
        return self._state.line_width

    @line_width.setter
    def line_width(self, value: float):
        if value > 0:
            self._state = replace(self._state, line_width=float(value))

    @property
    def transform(self) -> Transform:
        return self._state.transform

    def save(self):
        self._stack.append(self._state)

    def restore(self):
        """Pop the last saved state. Unbalanced restores are ignored."""
        if self._stack:
            self._state = self._stack.pop()

    def reset(self):
        """Drop all state, saved states and the current path."""
        self._state = DrawState()
        self._stack.clear()
        self._subpaths = []

    def translate(self, dx: float, dy: float):
        self._state = replace(
            self._state, transform=_multiply(self._state.transform, (1.0, 0.0, 0.0, 1.0, dx, dy))
        )

    def rotate(self, angle: float):
        c, s = math.cos(angle), math.sin(angle)
        self._state = replace(
            self._state, transform=_multiply(self._state.transform, (c, s, -s, c, 0.0, 0.0))
        )

    def reset_transform(self):
        self._state = replace(self._state, transform=IDENTITY)

    # -- paths ---------------------------------------------------------------

    def begin_path(self):
        self._subpaths = []

    def _current(self) -> Optional[_Subpath]:
        return self._subpaths[-1] if self._subpaths else None

    def _device(self, x: float, y: float) -> Point:
        return _apply(self._state.transform, x, y)

    def move_to(self, x: float, y: float):
        self._subpaths.append(_Subpath([self._device(x, y)]))

    def line_to(self, x: float, y: float):
        current = self._current()
        if current is None:
            self.move_to(x, y)
            return
        current.points.append(self._device(x, y))

    def close_path(self):
        current = self._current()
        if current is None:
            return
        current.closed = True
        self._subpaths.append(_Subpath([current.points[0]]))

    def quadratic_curve_to(self, cpx: float, cpy: float, x: float, y: float):
        current = self._current()
        if current is None:
            self.move_to(cpx, cpy)
            current = self._current()
        x0, y0 = current.points[-1]
        x1, y1 = self._device(cpx, cpy)
        x2, y2 = self._device(x, y)
        for i in range(1, QUADRATIC_SEGMENTS + 1):
            t = i / QUADRATIC_SEGMENTS
            u = 1 - t
            current.points.append((
                u * u * x0 + 2 * u * t * x1 + t * t * x2,
                u * u * y0 + 2 * u * t * y1 + t * t * y2,
            ))

    def bezier_curve_to(self, cp1x: float, cp1y: float, cp2x: float, cp2y: float, x: float, y: float):
        current = self._current()
        if current is None:
            self.move_to(cp1x, cp1y)
            current = self._current()
        x0, y0 = current.points[-1]
        x1, y1 = self._device(cp1x, cp1y)
        x2, y2 = self._device(cp2x, cp2y)
        x3, y3 = self._device(x, y)
        for i in range(1, BEZIER_SEGMENTS + 1):
            t = i / BEZIER_SEGMENTS
            u = 1 - t
            current.points.append((
                u ** 3 * x0 + 3 * u * u * t * x1 + 3 * u * t * t * x2 + t ** 3 * x3,
                u ** 3 * y0 + 3 * u * u * t * y1 + 3 * u * t * t * y2 + t ** 3 * y3,
            ))

    def arc(self, x: float, y: float, radius: float, start: float, end: float, anticlockwise: bool = False):
        self.ellipse(x, y, radius, radius, 0.0, start, end, anticlockwise)

    def ellipse(
        self,
        x: float,
        y: float,
        radius_x: float,
        radius_y: float,
        rotation: float,
        start: float,
        end: float,
        anticlockwise: bool = False,
    ):
        """Append an elliptical arc, connected to the current point if there is one."""
        if radius_x < 0 or radius_y < 0:
            return

        sweep = _normalize_sweep(start, end, anticlockwise)
        steps = max(8, math.ceil(abs(sweep) / (2 * math.pi) * ARC_SEGMENTS_PER_TURN))
        cos_r, sin_r = math.cos(rotation), math.sin(rotation)

        points = []
        for i in range(steps + 1):
            theta = start + sweep * i / steps
            ex = radius_x * math.cos(theta)
            ey = radius_y * math.sin(theta)
            points.append(self._device(x + ex * cos_r - ey * sin_r, y + ex * sin_r + ey * cos_r))

        current = self._current()
        if current is None:
            self._subpaths.append(_Subpath(points))
        else:
            current.points.extend(points)

    def rect(self, x: float, y: float, w: float, h: float):
        self.move_to(x, y)
        self.line_to(x + w, y)
        self.line_to(x + w, y + h)
        self.line_to(x, y + h)
        self.close_path()

    # -- painting ------------------------------------------------------------

    def fill(self):
        """Fill the current path with the nonzero winding rule."""
        mask = self.surface.polygon_mask([sp.points for sp in self._subpaths if len(sp.points) > 2])
        self._paint(mask, self._state.fill_style)

    def stroke(self):
        """Stroke the current path with round caps and joins."""
        segments = []
        for sp in self._subpaths:
            pts = list(sp.points)
            if sp.closed and len(pts) > 1:
                pts.append(pts[0])
            segments.extend(zip(pts[:-1], pts[1:]))
        mask = self.surface.stroke_mask(segments, self._state.line_width / 2)
        self._paint(mask, self._state.stroke_style)

    def clip(self):
        """Intersect the clip region with the current path."""
        mask = self.surface.polygon_mask([sp.points for sp in self._subpaths if len(sp.points) > 2])
        if self._state.clip is not None:
            mask = mask & self._state.clip
        self._state = replace(self._state, clip=mask)

    def fill_rect(self, x: float, y: float, w: float, h: float):
        t = self._state.transform
        if t[1] == 0 and t[2] == 0:
            x0, y0 = _apply(t, x, y)
            x1, y1 = _apply(t, x + w, y + h)
            mask = self.surface.rect_mask(x0, y0, x1, y1)
        else:
            corners = [self._device(x, y), self._device(x + w, y), self._device(x + w, y + h), self._device(x, y + h)]
            mask = self.surface.polygon_mask([corners])
        self._paint(mask, self._state.fill_style)

    def _paint(self, mask: np.ndarray, color: Color):
        if self._state.clip is not None:
            mask = mask & self._state.clip
        r, g, b = color.to_rgb8()
        self.surface.pixels[mask] = (r, g, b, 255)

    # -- pixel buffer --------------------------------------------------------

    def create_image_data(self, width: int, height: int) -> np.ndarray:
        return np.zeros((height, width, 4), dtype=np.uint8)

    def get_image_data(self) -> np.ndarray:
        return self.surface.pixels.copy()

    def put_image_data(self, data: np.ndarray, x: int = 0, y: int = 0):
        """Copy an RGBA block onto the surface, ignoring transform and clip."""
        self.surface.blit(x, y, data)


def to_image_data(rgb: np.ndarray) -> np.ndarray:
    """Convert float RGB (h, w, 3) to opaque RGBA bytes, rounding half to even and clamping."""
    out = np.empty(rgb.shape[:2] + (4,), dtype=np.uint8)
    out[..., :3] = np.clip(np.rint(rgb), 0, 255)
    out[..., 3] = 255
    return out


def _normalize_sweep(start: float, end: float, anticlockwise: bool) -> float:
    full = 2 * math.pi
    sweep = end - start
    if not anticlockwise:
        if sweep >= full:
            return full
        if sweep < 0:
            sweep = sweep % full
    else:
        if sweep <= -full:
            return -full
        if sweep > 0:
            sweep = -((-sweep) % full)
    return sweep


# =============================================================================
# Surface
# =============================================================================

class Surface:
    """Square or rectangular RGBA pixel buffer with a drawing context."""

    def __init__(self, width: int, height: Optional[int] = None):
        self.width = 0
        self.height = 0
        self.pixels = np.zeros((0, 0, 4), dtype=np.uint8)
        self._context: Optional[DrawContext] = None
        self.resize(width, height)

    def __repr__(self) -> str:
        return f"Surface({self.width}x{self.height})"

    def resize(self, width: int, height: Optional[int] = None):
        """Resize and clear to transparent black, resetting the context."""
        height = width if height is None else height
        if width <= 0 or height <= 0:
            raise ValueError(f"Surface size must be positive, got {width}x{height}")
        self.width = int(width)
        self.height = int(height)
        self.pixels = np.zeros((self.height, self.width, 4), dtype=np.uint8)
        # Pixel-center sample coordinates for coverage masks
        self._xs = np.arange(self.width, dtype=np.float64)[None, :] + 0.5
        self._ys = np.arange(self.height, dtype=np.float64)[:, None] + 0.5
        if self._context is not None:
            self._context.reset()

    def get_context(self) -> DrawContext:
        if self._context is None:
            self._context = DrawContext(self)
        return self._context

    # -- coverage masks ------------------------------------------------------

    def rect_mask(self, x0: float, y0: float, x1: float, y1: float) -> np.ndarray:
        """Pixels whose centers fall inside the axis-aligned box."""
        x0, x1 = sorted((x0, x1))
        y0, y1 = sorted((y0, y1))
        col1 = max(0, math.ceil(x0 - 0.5))
        col2 = min(self.width, math.ceil(x1 - 0.5))
        row1 = max(0, math.ceil(y0 - 0.5))
        row2 = min(self.height, math.ceil(y1 - 0.5))
        mask = np.zeros((self.height, self.width), dtype=bool)
        if col1 < col2 and row1 < row2:
            mask[row1:row2, col1:col2] = True
        return mask

    def polygon_mask(self, polygons: list[list[Point]]) -> np.ndarray:
        """Nonzero-winding coverage of closed polygons at pixel centers."""
        winding = np.zeros((self.height, self.width), dtype=np.int32)
        for points in polygons:
            n = len(points)
            for i in range(n):
                x0, y0 = points[i]
                x1, y1 = points[(i + 1) % n]
                if y0 == y1:
                    continue
                crosses = (y0 <= self._ys) != (y1 <= self._ys)  # (h, 1)
                x_at = x0 + (self._ys - y0) * (x1 - x0) / (y1 - y0)  # (h, 1)
                hit = crosses & (self._xs < x_at)  # (h, w)
                winding += np.where(hit, 1 if y1 > y0 else -1, 0).astype(np.int32)
        return winding != 0

    def stroke_mask(self, segments: list[tuple[Point, Point]], half_width: float) -> np.ndarray:
        """Pixels whose centers lie within half_width of any segment."""
        mask = np.zeros((self.height, self.width), dtype=bool)
        limit = half_width * half_width
        for (x0, y0), (x1, y1) in segments:
            dx, dy = x1 - x0, y1 - y0
            length_sq = dx * dx + dy * dy
            if length_sq == 0:
                t = 0.0
            else:
                t = np.clip(((self._xs - x0) * dx + (self._ys - y0) * dy) / length_sq, 0.0, 1.0)
            px = x0 + t * dx - self._xs
            py = y0 + t * dy - self._ys
            mask |= (px * px + py * py) <= limit
        return mask

    # -- pixel buffer --------------------------------------------------------

    def blit(self, x: int, y: int, data: np.ndarray):
        """Copy an RGBA array to position, clipped to the surface bounds."""
        if data.ndim != 3 or data.shape[2] != 4:
            raise SurfaceError(f"Image data must have shape (h, w, 4), got {data.shape}")
        src_h, src_w = data.shape[:2]

        src_x1 = max(0, -x)
        src_y1 = max(0, -y)
        src_x2 = min(src_w, self.width - x)
        src_y2 = min(src_h, self.height - y)

        dst_x1 = max(0, x)
        dst_y1 = max(0, y)
        dst_x2 = dst_x1 + (src_x2 - src_x1)
        dst_y2 = dst_y1 + (src_y2 - src_y1)

        if dst_x1 >= dst_x2 or dst_y1 >= dst_y2:
            return  # Completely off-surface

        self.pixels[dst_y1:dst_y2, dst_x1:dst_x2] = data[src_y1:src_y2, src_x1:src_x2]

    def rgb(self) -> np.ndarray:
        """RGB view without the alpha channel."""
        return self.pixels[:, :, :3]

    # -- encoding ------------------------------------------------------------

    def to_image(self):
        """Convert to a Pillow RGBA image."""
        try:
            from PIL import Image
        except ImportError as exc:
            raise SurfaceError("Pillow is required to encode surfaces (pip install Pillow)") from exc
        return Image.fromarray(self.pixels)

    def to_bytes(self, format: str = "PNG") -> bytes:
        """Encode as PNG or JPEG bytes."""
        image = self.to_image()
        if format.upper() in ("JPEG", "JPG"):
            image = image.convert("RGB")
            format = "JPEG"
        buffer = io.BytesIO()
        image.save(buffer, format=format)
        return buffer.getvalue()

    def to_data_url(self, mime_type: str = "image/png") -> str:
        format = "JPEG" if mime_type == "image/jpeg" else "PNG"
        encoded = base64.b64encode(self.to_bytes(format)).decode("ascii")
        return f"data:{mime_type};base64,{encoded}"


def get_surface(size: int, existing: Any = None) -> tuple[Any, DrawContext]:
    """Reuse (and resize) an existing surface, or create a new one."""
    if existing is None:
        surface = Surface(size)
        return surface, surface.get_context()

    get_context = getattr(existing, "get_context", None)
    resize = getattr(existing, "resize", None)
    if not callable(get_context) or not callable(resize):
        raise SurfaceError(f"Existing surface {existing!r} has no drawing context")

    resize(size)
    ctx = get_context()
    if ctx is None:
        raise SurfaceError("Failed to get drawing context from existing surface")
    return existing, ctx
