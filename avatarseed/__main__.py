"""
Batch avatar generation.

    python -m avatarseed alice@example.com bob@example.com --theme smile --size 128 --out avatars

The optional --config file is a JSON object of options. Keys named after a
theme hold options for that theme only; every other key applies to all.
"""

import argparse
import logging
import re
import sys
from pathlib import Path

from .core.config import load_options_file
from .core.surface import SurfaceError
from .themes import THEMES, get_theme

logger = logging.getLogger("avatarseed")

_UNSAFE_RE = re.compile(r"[^A-Za-z0-9]")


def output_name(index: int, identifier: str) -> str:
    """File name for the index-th (0-based) avatar, e.g. avatar-1-alice-example-com.png."""
    safe = _UNSAFE_RE.sub("-", identifier)
    return f"avatar-{index + 1}-{safe}.png"


def theme_options(config: dict, theme: str) -> dict:
    """Shared options overlaid with the theme's own section."""
    options = {k: v for k, v in config.items() if k not in THEMES}
    section = config.get(theme)
    if isinstance(section, dict):
        options.update(section)
    return options


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="avatarseed",
        description="Write deterministic avatar PNGs for a list of identifiers.",
    )
    parser.add_argument("ids", nargs="+", metavar="ID", help="Identifier(s) to seed avatars from")
    parser.add_argument("--theme", default="digidoodle", choices=sorted(THEMES), help="Avatar theme (default: digidoodle)")
    parser.add_argument("--size", type=int, default=128, help="Side length in pixels (default: 128)")
    parser.add_argument("--out", type=Path, default=Path("."), help="Output directory (default: .)")
    parser.add_argument("--config", type=Path, help="JSON file of theme options")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        stream=sys.stderr,
        format="%(name)s %(levelname)s: %(message)s",
    )

    config = load_options_file(args.config) if args.config else {}
    options = theme_options(config, args.theme)
    theme = get_theme(args.theme)

    args.out.mkdir(parents=True, exist_ok=True)
    for index, identifier in enumerate(args.ids):
        try:
            surface = theme.generate(options, id=identifier, size=args.size)
        except ValueError as exc:
            logger.error("Invalid options for %r: %s", identifier, exc)
            return 2

        path = args.out / output_name(index, identifier)
        try:
            path.write_bytes(surface.to_bytes("PNG"))
        except SurfaceError as exc:
            logger.error("%s", exc)
            return 1
        logger.info("Wrote %s", path)

    return 0


if __name__ == "__main__":
    sys.exit(main())
