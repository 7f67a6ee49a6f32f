"""Display buffer and sprite engine.

The buffer is a 64x32 grid of cells holding exactly 0 or 1, stored row-major
(``index = x + y * width``). Sprites are XOR-ed onto it; a sprite bit that
turns a lit cell off is a collision.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

WIDTH = 64
HEIGHT = 32

SPRITE_POLICIES = ("clamp", "wrap")


class Display:
    """Monochrome frame buffer with a redraw flag."""

    width: int
    height: int
    policy: str
    cells: bytearray
    redraw: bool

    def __init__(self, width: int = WIDTH, height: int = HEIGHT, policy: str = "clamp") -> None:
        """Create an empty (all cells off) display."""
        if policy not in SPRITE_POLICIES:
            msg = f"Unknown sprite policy: {policy!r} (expected one of {', '.join(SPRITE_POLICIES)})"
            raise ValueError(msg)
        self.width = int(width)
        self.height = int(height)
        self.policy = policy
        self.cells = bytearray(self.width * self.height)
        self.redraw = False

    def clear(self) -> None:
        """Turn every cell off."""
        self.cells[:] = bytes(len(self.cells))

    def _index(self, x: int, y: int) -> int:
        # Map a possibly off-grid coordinate to a cell index according to the policy.
        if self.policy == "wrap":
            return x % self.width + (y % self.height) * self.width
        return min(x + y * self.width, len(self.cells) - 1)

    def pixel(self, x: int, y: int) -> int:
        """Return the cell value (0 or 1) at an on-grid coordinate."""
        if not (0 <= x < self.width and 0 <= y < self.height):
            msg = f"pixel ({x}, {y}) outside {self.width}x{self.height} display"
            raise IndexError(msg)
        return self.cells[x + y * self.width]

    def draw_sprite(self, x: int, y: int, rows: Iterable[int]) -> bool:
        """XOR a sprite onto the buffer with its top-left corner at (x, y).

        Each element of ``rows`` is one 8-pixel row, most significant bit
        leftmost. Coordinates falling outside the grid are mapped by the
        display policy: ``clamp`` keeps the row-major index, so a column past
        the right edge continues on the next row and anything past the end
        lands on the last cell; ``wrap`` takes each axis modulo the grid size.

        Returns True when any lit cell was turned off.
        """
        collision = False
        for row, bits in enumerate(rows):
            for col in range(8):
                if not bits & (0x80 >> col):
                    continue
                idx = self._index(x + col, y + row)
                if self.cells[idx]:
                    collision = True
                self.cells[idx] ^= 1
        self.redraw = True
        logging.debug("Display: sprite at (%d, %d) collision=%s", x, y, collision)
        return collision

    def lit_count(self) -> int:
        """Number of cells currently on."""
        return sum(self.cells)

    def render_text(self, on: str = "#", off: str = ".") -> str:
        """Render the buffer as text, one line per row."""
        lines = []
        for y in range(self.height):
            row = self.cells[y * self.width : (y + 1) * self.width]
            lines.append("".join(on if c else off for c in row))
        return "\n".join(lines)
