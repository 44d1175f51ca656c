"""
Base class for avatar themes.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Mapping, Optional, Type, Union

from ..core.config import ThemeOptions, resolve_options
from ..core.seeded_random import SeededRandom
from ..core.surface import DrawContext, Surface, get_surface

logger = logging.getLogger(__name__)


class AvatarTheme(ABC):
    """
    A deterministic avatar renderer.

    Themes are stateless: everything derived while rendering lives in
    locals of render(), so one instance can serve any number of calls.

    Subclasses set `name` and `options_class` and implement render().
    """

    name: str = ""
    options_class: Type[ThemeOptions] = ThemeOptions

    def resolve(self, options: Union[ThemeOptions, Mapping[str, Any], None] = None, **overrides) -> ThemeOptions:
        """Merge caller options over this theme's defaults."""
        return resolve_options(self.options_class, options, **overrides)

    def generate(self, options: Union[ThemeOptions, Mapping[str, Any], None] = None, **overrides) -> Surface:
        """
        Generate an avatar.

        Args:
            options: Options instance or mapping (must include id and size)
            **overrides: Individual option overrides

        Returns the surface (the caller's reusable surface if one was given).
        """
        opts = self.resolve(options, **overrides)
        random = SeededRandom(opts.id)
        surface, ctx = get_surface(opts.size, opts.surface)

        self.render(ctx, random, opts)

        logger.debug("Rendered %s avatar %dx%d (seed %d)", self.name, opts.size, opts.size, random.seed)
        return surface

    async def generate_async(self, options: Optional[Any] = None, **overrides) -> Surface:
        """Async entry point; same output as generate()."""
        return self.generate(options, **overrides)

    @abstractmethod
    def render(self, ctx: DrawContext, random: SeededRandom, options: ThemeOptions) -> None:
        """Paint the avatar onto ctx, drawing only from `random`."""
        ...

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"
