"""Text styles made of offset, coloured copies of the drawn text."""

from __future__ import annotations

from dataclasses import dataclass, field

__all__ = ["StyleBit", "Style"]

Color = tuple[int, int, int, int]


@dataclass(frozen=True)
class StyleBit:
    """One copy of the text, drawn at an offset in an optional colour.

    A bit whose colour components sum to zero is drawn in the caller's colour.
    """

    x_offset: int = 0
    y_offset: int = 0
    r: int = 0
    g: int = 0
    b: int = 0
    a: int = 0

    @property
    def color(self) -> Color:
        return (self.r, self.g, self.b, self.a)


@dataclass
class Style:
    """A named, ordered collection of style bits."""

    name: str | None = None
    bits: list[StyleBit] = field(default_factory=list)

    def add_bit(self, bit: StyleBit) -> None:
        """Append a bit; bits are drawn in insertion order."""
        self.bits.append(bit)

    def draw_shift(self) -> tuple[int, int]:
        """Return the shift that keeps bits with negative offsets on the canvas."""
        min_x = min((bit.x_offset for bit in self.bits), default=0)
        min_y = min((bit.y_offset for bit in self.bits), default=0)
        return (-min(min_x, 0), -min(min_y, 0))

    def adjust_text_size(self, width: int, height: int) -> tuple[int, int]:
        """Grow a plain text size by the spread of the bit offsets."""
        max_x = min_x = max_y = min_y = 0
        for bit in self.bits:
            max_x = max(max_x, bit.x_offset)
            min_x = min(min_x, bit.x_offset)
            max_y = max(max_y, bit.y_offset)
            min_y = min(min_y, bit.y_offset)
        return (width + max_x - min_x, height + max_y - min_y)

    def bit_color(self, bit: StyleBit, default: Color) -> Color:
        """Return the colour ``bit`` is drawn in, falling back to ``default``."""
        if bit.r + bit.g + bit.b + bit.a == 0:
            return tuple(default)  # type: ignore[return-value]
        return bit.color