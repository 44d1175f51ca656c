"""Generator option resolution.

Every theme resolves its options exactly once, before the first RNG draw:
caller overrides are merged over literal defaults into one frozen
dataclass. Mappings may use snake_case or camelCase keys; unknown keys
are dropped.
"""

from __future__ import annotations

import json
import logging
import math
import re
from dataclasses import MISSING, dataclass, field, fields
from numbers import Integral, Real
from pathlib import Path
from typing import Any, ClassVar, Mapping, Optional, Type, TypeVar, Union

from .colors import ColorOptions
from .seeded_random import SeededRandom

logger = logging.getLogger(__name__)

O = TypeVar("O", bound="GeneratorOptions")

# Legacy sentinel meaning "draw this parameter at render time"
RANDOM_SENTINEL = -1


# =============================================================================
# Randomizable parameters
# =============================================================================

@dataclass(frozen=True)
class Fixed:
    """Parameter pinned to a value. Consumes no randomness."""
    value: float

    def resolve(self, random: SeededRandom) -> float:
        return self.value


@dataclass(frozen=True)
class Randomized:
    """Parameter drawn from [low, high) at render time."""
    low: float
    high: float
    integer: bool = False

    def resolve(self, random: SeededRandom) -> float:
        if self.integer:
            return random.random_int(int(self.low), int(self.high))
        return random.random_float(self.low, self.high)


Param = Union[Fixed, Randomized]


def _is_finite_number(value: Any) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool) and math.isfinite(value)


def coerce_param(value: Any, default: Randomized) -> Param:
    """
    Normalize a caller value to a Fixed or Randomized parameter.

    None and -1 mean "use the documented random range"; a number pins the
    parameter; a (low, high) pair randomizes within that range. NaN and
    infinities fall back to the default.
    """
    if isinstance(value, (Fixed, Randomized)):
        return value
    if value is None or (isinstance(value, Real) and value == RANDOM_SENTINEL):
        return default
    if _is_finite_number(value):
        return Fixed(int(value) if default.integer else float(value))
    if isinstance(value, (list, tuple)) and len(value) == 2 and all(_is_finite_number(v) for v in value):
        return Randomized(value[0], value[1], default.integer)
    logger.debug("Ignoring unusable parameter %r, using %r", value, default)
    return default


# =============================================================================
# Base options
# =============================================================================

_CAMEL_RE = re.compile(r"(?<!^)(?=[A-Z])")


def camel_to_snake(name: str) -> str:
    return _CAMEL_RE.sub("_", name).lower()


@dataclass(frozen=True)
class GeneratorOptions:
    """Options shared by every theme: the seed id, pixel size and optional surface."""
    id: str
    size: int
    surface: Optional[Any] = field(default=None, compare=False, repr=False)

    # Legacy / alternate option names
    ALIASES: ClassVar[dict[str, str]] = {"canvas": "surface"}

    def __post_init__(self):
        if not isinstance(self.id, str) or not self.id:
            raise ValueError("id must be a non-empty string")
        if isinstance(self.size, bool) or not isinstance(self.size, Integral) or self.size <= 0:
            raise ValueError(f"size must be a positive integer, got {self.size!r}")
        object.__setattr__(self, "size", int(self.size))

    def _clamp(self, name: str, low: Optional[float] = None, high: Optional[float] = None, cast=None):
        """Clamp a numeric field in place during __post_init__. Non-finite values revert to the field default."""
        value = getattr(self, name)
        if isinstance(value, Real) and not math.isfinite(value):
            default = next(f.default for f in fields(self) if f.name == name)
            if default is not MISSING:
                logger.debug("Non-finite %s=%r, using default %r", name, value, default)
                value = default
        if cast is not None:
            value = cast(value)
        if low is not None and value < low:
            value = low
        if high is not None and value > high:
            value = high
        object.__setattr__(self, name, value)

    @classmethod
    def from_dict(cls: Type[O], d: Mapping[str, Any]) -> O:
        known = {f.name for f in fields(cls)}
        kwargs = {}
        for key, value in d.items():
            name = cls.ALIASES.get(key, key)
            name = cls.ALIASES.get(camel_to_snake(name), camel_to_snake(name))
            if name in known:
                kwargs[name] = value
            else:
                logger.debug("Dropping unknown %s option %r", cls.__name__, key)

        missing = [n for n in ("id", "size") if n not in kwargs]
        if missing:
            raise ValueError(f"Missing required option(s): {', '.join(missing)}")
        return cls(**kwargs)


@dataclass(frozen=True)
class ThemeOptions(ColorOptions, GeneratorOptions):
    """Base for per-theme options: generator fields plus palette settings."""

    def __post_init__(self):
        GeneratorOptions.__post_init__(self)
        ColorOptions.__post_init__(self)


def resolve_options(
    cls: Type[O],
    options: Union[O, Mapping[str, Any], None] = None,
    **overrides: Any,
) -> O:
    """Merge overrides over an options instance or mapping into one frozen value."""
    if isinstance(options, cls):
        if not overrides:
            return options
        merged = {f.name: getattr(options, f.name) for f in fields(cls)}
        merged.update(overrides)
        return cls.from_dict(merged)

    if isinstance(options, GeneratorOptions):
        # Options for another theme: fields this theme lacks are dropped
        merged = {f.name: getattr(options, f.name) for f in fields(options)}
    else:
        merged = dict(options or {})
    merged.update(overrides)
    return cls.from_dict(merged)


# =============================================================================
# Option files
# =============================================================================

def load_options_file(path: Union[str, Path]) -> dict:
    """Load a JSON object of option mappings. Unreadable files yield {}."""
    path = Path(path)
    try:
        data = json.loads(path.read_text())
    except (json.JSONDecodeError, OSError) as exc:
        logger.warning("Could not read options file %s: %s", path, exc)
        return {}
    if not isinstance(data, dict):
        logger.warning("Options file %s does not contain a JSON object", path)
        return {}
    return data

