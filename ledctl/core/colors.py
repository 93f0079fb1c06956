"""Color spec parsing: palette names and literal r,g,b triples."""

from __future__ import annotations

import re

from ledctl.core.errors import InvalidColorError
from ledctl.core.model import RgbColor

WHITE = RgbColor(255, 255, 255)

PALETTE: dict[str, RgbColor] = {
    "red": RgbColor(255, 0, 0),
    "green": RgbColor(0, 255, 0),
    "blue": RgbColor(0, 0, 255),
    "yellow": RgbColor(255, 255, 0),
    "purple": RgbColor(255, 0, 255),
    "cyan": RgbColor(0, 255, 255),
    "white": WHITE,
}

_RGB_RE = re.compile(r"(\d{1,3}),(\d{1,3}),(\d{1,3})", re.ASCII)
_HEX_RE = re.compile(r"#([0-9A-Fa-f]{2})([0-9A-Fa-f]{2})([0-9A-Fa-f]{2})", re.ASCII)


def resolve_color(spec: str) -> RgbColor:
    """Resolve a palette name (case-insensitive) or an ``r,g,b`` literal."""
    preset = PALETTE.get(spec.lower()) if isinstance(spec, str) else None
    if preset is not None:
        return preset

    match = _RGB_RE.fullmatch(spec) if isinstance(spec, str) else None
    if not match:
        names = ", ".join(PALETTE)
        raise InvalidColorError(
            f"Invalid color: {spec}. Use a color name ({names}) or RGB format (255,0,0)"
        )

    components = [int(group) for group in match.groups()]
    if any(value > 255 for value in components):
        raise InvalidColorError(f"Invalid color: {spec}. RGB values must be between 0 and 255")
    return RgbColor(*components)


def hex_to_rgb_spec(value: str | None) -> str | None:
    """Convert ``#RRGGBB`` to the ``r,g,b`` form; other values pass through unchanged."""
    if value is None:
        return None
    match = _HEX_RE.fullmatch(value)
    if not match:
        return value
    return ",".join(str(int(group, 16)) for group in match.groups())
