"""Parsing of colour specifications and font path lists."""

from __future__ import annotations

import re

from fehview.lists import string_split

__all__ = ["parse_color", "parse_fontpath"]

_HEX_PREFIX = re.compile(r"\s*([+-]?)(?:0[xX](?=[0-9a-fA-F]))?([0-9a-fA-F]*)")
_INT_PREFIX = re.compile(r"\s*([+-]?\d+)")
_ULONG = 1 << 64


def _parse_hex_prefix(text: str) -> int:
    match = _HEX_PREFIX.match(text)
    digits = match.group(2) if match else ""
    if not digits:
        return 0
    value = int(digits, 16)
    if match.group(1) == "-":
        value = -value
    return value % _ULONG


def _parse_int_prefix(text: str) -> int:
    match = _INT_PREFIX.match(text)
    return int(match.group(1)) if match else 0


def parse_color(spec: str) -> tuple[int, int, int, int]:
    """Parse ``#RRGGBB``, ``#RRGGBBAA``, ``r,g,b`` or ``r,g,b,a`` into RGBA.

    Raises ValueError for any other shape.
    """
    if spec.startswith("#"):
        digits = spec[1:]
        value = _parse_hex_prefix(digits)
        if len(digits) == 8:
            return (
                (value & 0xFF000000) >> 24,
                (value & 0x00FF0000) >> 16,
                (value & 0x0000FF00) >> 8,
                value & 0x000000FF,
            )
        if len(digits) == 6:
            return (
                (value & 0xFF0000) >> 16,
                (value & 0x00FF00) >> 8,
                value & 0x0000FF,
                255,
            )
        raise ValueError(f"unable to parse color {digits}")

    parts = string_split(spec, ",")
    if len(parts) == 3:
        r, g, b = (_parse_int_prefix(p) for p in parts)
        return (r, g, b, 255)
    if len(parts) == 4:
        r, g, b, a = (_parse_int_prefix(p) for p in parts)
        return (r, g, b, a)
    raise ValueError(f"unable to parse color {spec}")


def parse_fontpath(path: str | None) -> list[str]:
    """Split a colon-separated font path into its directories."""
    if not path:
        return []
    return string_split(path, ":")