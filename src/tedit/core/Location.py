# tedit/core/Location.py
"""Coordinate types shared by the buffer and the view.

``Location`` addresses text (line index, grapheme index); ``Position``
addresses terminal cells (row, column); ``Size`` is a viewport extent.
"""

from typing import NamedTuple


class Location(NamedTuple):
    """A position between grapheme clusters of the document.

    ``grapheme_index`` may equal the line's grapheme count ("after the last
    cluster"), and ``line_index`` may equal the line count (the virtual line
    just past the end of the document).
    """

    line_index: int = 0
    grapheme_index: int = 0


class Position(NamedTuple):
    """A (row, col) pair in rendered-cell space."""

    row: int = 0
    col: int = 0

    def saturating_sub(self, other: "Position") -> "Position":
        """Component-wise subtraction clamped at zero."""
        return Position(max(0, self.row - other.row), max(0, self.col - other.col))


class Size(NamedTuple):
    height: int = 0
    width: int = 0
