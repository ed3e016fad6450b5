"""Cursor-based page layout on top of a reportlab canvas.

Receipt sections are laid out top to bottom. The cursor keeps the current
vertical offset measured from the top edge of the page, which is how the
sections are described, and converts to reportlab's bottom-left origin only
at draw time.
"""

from dataclasses import dataclass

from reportlab.lib.utils import simpleSplit


def wrap_text(text: str, font_name: str, font_size: float, width: float) -> list[str]:
    """Split text into lines that fit ``width`` using the font's metrics."""
    if not text:
        return []
    return simpleSplit(text, font_name, font_size, width)


@dataclass
class LayoutCursor:
    """Current position on a single page."""
    page_width: float
    page_height: float
    margin: float
    y: float = 0.0

    @property
    def left(self) -> float:
        return self.margin

    @property
    def right(self) -> float:
        return self.page_width - self.margin

    @property
    def content_width(self) -> float:
        return self.page_width - 2 * self.margin

    @property
    def bottom(self) -> float:
        return self.page_height - self.margin

    def advance(self, dy: float) -> float:
        """Move the cursor down by ``dy`` points and return the new offset."""
        self.y += dy
        return self.y

    def move_to(self, y: float) -> float:
        self.y = y
        return self.y

    def baseline(self, offset: float = 0.0) -> float:
        """reportlab y coordinate for a text baseline ``offset`` below the cursor."""
        return self.page_height - (self.y + offset)

    def box_bottom(self, height: float, offset: float = 0.0) -> float:
        """reportlab y coordinate of the bottom edge of a box whose top is ``offset`` below the cursor."""
        return self.page_height - (self.y + offset + height)

    def draw_lines(self, canvas, lines: list[str], x: float, offset: float, leading: float) -> float:
        """Draw pre-wrapped lines starting at ``offset`` below the cursor.

        Returns the total height consumed, which is ``len(lines) * leading``.
        The cursor itself is not moved.
        """
        for i, line in enumerate(lines):
            canvas.drawString(x, self.baseline(offset + i * leading), line)
        return len(lines) * leading

    def remaining(self) -> float:
        return self.bottom - self.y
