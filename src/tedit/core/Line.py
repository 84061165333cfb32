# tedit/core/Line.py
"""tedit.core.Line
==================
Grapheme-aware storage for a single line of text.

A ``Line`` keeps its content as an ordered list of ``Fragment`` objects, one per
extended grapheme cluster. Each fragment knows how many terminal columns it
occupies (1 or 2) and, for glyphs that cannot be painted as-is (tabs, exotic
whitespace, control and zero-width characters), which visible placeholder has to
be drawn instead.

The fragment list is the only source of truth for the line's content: the plain
string is always derived by concatenating the fragments, and every mutation
rebuilds that string and segments it again from scratch.

Three units are involved when working with a line:

- grapheme index: position between clusters (what the cursor stores),
- render column: sum of fragment widths (what the terminal shows),
- string offset: index into ``str(line)`` (used for substring search only).
"""

import logging
import unicodedata
from enum import Enum
from typing import Iterable, Optional

import regex
from wcwidth import wcswidth


# Extended grapheme cluster, as defined by UAX #29.
_GRAPHEME_RE = regex.compile(r"\X")

TAB_REPLACEMENT = " "
WHITESPACE_REPLACEMENT = "␣"
CONTROL_REPLACEMENT = "▯"
ZERO_WIDTH_REPLACEMENT = "·"
TRUNCATION_MARKER = "⋯"

# str.isspace() also accepts the information separators, which are not
# Unicode White_Space.
_NOT_WHITE_SPACE = frozenset("\x1c\x1d\x1e\x1f")


class GraphemeWidth(Enum):
    """Number of terminal columns a fragment occupies once rendered."""

    HALF = 1
    FULL = 2


class Fragment:
    """One grapheme cluster of a line plus its display metadata.

    Attributes:
        grapheme (str): The exact text of the cluster (may be several code points).
        render_width (GraphemeWidth): Columns used on screen.
        replacement (Optional[str]): Visible character painted instead of the
            grapheme, or ``None`` when the grapheme is painted as-is.
    """

    def __init__(
        self,
        grapheme: str,
        render_width: GraphemeWidth,
        replacement: Optional[str] = None,
    ) -> None:
        self.grapheme = grapheme
        self.render_width = render_width
        self.replacement = replacement

    @classmethod
    def from_grapheme(cls, grapheme: str) -> "Fragment":
        """Builds the fragment for a single grapheme cluster."""
        replacement = replacement_character(grapheme)
        if replacement is not None:
            return cls(grapheme, GraphemeWidth.HALF, replacement)

        width = wcswidth(grapheme)
        render_width = GraphemeWidth.FULL if width > 1 else GraphemeWidth.HALF
        return cls(grapheme, render_width, None)

    @property
    def columns(self) -> int:
        return self.render_width.value

    def is_whitespace(self) -> bool:
        """True for blank clusters and for tab/whitespace substitutions."""
        return (
            is_blank(self.grapheme)
            or self.replacement == TAB_REPLACEMENT
            or self.replacement == WHITESPACE_REPLACEMENT
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Fragment):
            return NotImplemented
        return (
            self.grapheme == other.grapheme
            and self.render_width == other.render_width
            and self.replacement == other.replacement
        )

    def __repr__(self) -> str:
        return (
            f"Fragment({self.grapheme!r}, {self.render_width.name}, "
            f"replacement={self.replacement!r})"
        )


def is_blank(text: str) -> bool:
    """True when ``text`` is empty or made only of Unicode White_Space."""
    return all(c.isspace() and c not in _NOT_WHITE_SPACE for c in text)


def replacement_character(grapheme: str) -> Optional[str]:
    """Returns the placeholder painted instead of ``grapheme``, if any.

    Rules, in order:
        - a tab is painted as a plain space;
        - a plain space is painted as itself;
        - any other blank cluster is painted as ``␣``;
        - a lone control character (no printable width) is painted as ``▯``;
        - any other zero-width cluster is painted as ``·``.
    """
    if grapheme == "\t":
        return TAB_REPLACEMENT
    if grapheme == " ":
        return None
    if is_blank(grapheme):
        return WHITESPACE_REPLACEMENT

    # wcswidth() reports -1 for non-printable input; treat it as zero width.
    if wcswidth(grapheme) <= 0:
        if len(grapheme) == 1 and unicodedata.category(grapheme) == "Cc":
            return CONTROL_REPLACEMENT
        return ZERO_WIDTH_REPLACEMENT
    return None


def str_to_fragments(text: str) -> list[Fragment]:
    """Segments ``text`` into grapheme clusters and wraps each one in a Fragment."""
    return [Fragment.from_grapheme(g) for g in _GRAPHEME_RE.findall(text)]


## ==================== Line Class ====================
class Line:
    """Class Line
    ===============
    One row of the document, stored as an ordered list of fragments.

    A line never contains a newline character. It is created from a plain
    string, mutated by grapheme index and converted back to a string with
    ``str(line)`` (this is the form written to disk; placeholders are only
    used by ``visible_slice``).

    Methods:
        grapheme_count(): Number of grapheme clusters in the line.
        width_until(index): Rendered columns used by the clusters before ``index``.
        visible_slice(left, right): Text painted for a column window.
        insert_char(ch, index): Inserts text before the cluster at ``index``.
        delete(index): Removes the cluster at ``index``.
        split(at): Cuts the line in two and returns the tail.
        append(other): Concatenates another line onto this one.
        search_forward(query, from_index) / search_backward(query, from_index):
            Grapheme index of a substring match.
    """

    def __init__(self, text: str = "") -> None:
        self._fragments: list[Fragment] = str_to_fragments(text)

    @classmethod
    def from_text(cls, text: str) -> "Line":
        """Creates a line from ``text``. Never fails; ``""`` yields an empty line."""
        return cls(text)

    @classmethod
    def _from_fragments(cls, fragments: Iterable[Fragment]) -> "Line":
        line = cls()
        line._fragments = list(fragments)
        return line

    # --- Inspection ---

    @property
    def fragments(self) -> tuple[Fragment, ...]:
        return tuple(self._fragments)

    def get_fragment(self, index: int) -> Optional[Fragment]:
        if 0 <= index < len(self._fragments):
            return self._fragments[index]
        return None

    def grapheme_count(self) -> int:
        return len(self._fragments)

    def __len__(self) -> int:
        return len(self._fragments)

    def is_empty(self) -> bool:
        return not self._fragments

    def __str__(self) -> str:
        return "".join(fragment.grapheme for fragment in self._fragments)

    def to_display_string(self) -> str:
        """Raw text of the line, without any render substitutions."""
        return str(self)

    def __repr__(self) -> str:
        return f"Line({str(self)!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Line):
            return NotImplemented
        return self._fragments == other._fragments

    # --- Width / rendering ---

    def width_until(self, index: int) -> int:
        """Returns the number of terminal columns used by the first ``index`` clusters.

        An ``index`` past the end of the line sums the whole line.
        """
        return sum(fragment.columns for fragment in self._fragments[: max(0, index)])

    # Name used by the view when converting a cursor into a screen column.
    render_width_until = width_until

    def width(self) -> int:
        return self.width_until(len(self._fragments))

    def visible_slice(self, left: int, right: int) -> str:
        """Returns the text to paint for the half-open column window ``[left, right)``.

        Clusters that fit entirely inside the window are emitted verbatim (or as
        their placeholder). A cluster that straddles either edge of the window
        is replaced by a single ``⋯`` and stops the walk, so a wide glyph is
        never cut in half.

        Args:
            left (int): First rendered column of the window.
            right (int): Column just past the end of the window.

        Returns:
            str: Text for the window; empty when ``left >= right``.
        """
        if left >= right:
            return ""

        parts: list[str] = []
        position = 0
        for fragment in self._fragments:
            if position >= right:
                break

            fragment_end = position + fragment.columns
            if fragment_end > left:
                if fragment_end > right or position < left:
                    parts.append(TRUNCATION_MARKER)
                    break
                if fragment.replacement is not None:
                    parts.append(fragment.replacement)
                else:
                    parts.append(fragment.grapheme)

            position = fragment_end
        return "".join(parts)

    def get_visible_graphemes(self, column_range: range) -> str:
        """``visible_slice`` taking a ``range`` object (``range(left, right)``)."""
        return self.visible_slice(column_range.start, column_range.stop)

    # --- Mutation ---

    def insert_char(self, character: str, grapheme_index: int) -> None:
        """Inserts ``character`` immediately before the cluster at ``grapheme_index``.

        Any index at or past the end appends. The resulting text is segmented
        again, so a combining mark merges with its base cluster.
        """
        builder: list[str] = []
        for index, fragment in enumerate(self._fragments):
            if index == grapheme_index:
                builder.append(character)
            builder.append(fragment.grapheme)

        if grapheme_index >= len(self._fragments):
            builder.append(character)

        self._fragments = str_to_fragments("".join(builder))

    def delete(self, grapheme_index: int) -> None:
        """Removes the cluster at ``grapheme_index``; out-of-range indices are ignored."""
        if not 0 <= grapheme_index < len(self._fragments):
            return
        remaining = "".join(
            fragment.grapheme
            for index, fragment in enumerate(self._fragments)
            if index != grapheme_index
        )
        self._fragments = str_to_fragments(remaining)

    def split(self, at: int) -> "Line":
        """Keeps the clusters before ``at`` and returns the rest as a new line.

        Callers must pass ``at <= grapheme_count()``; for larger values an empty
        line is returned and this line is left untouched.
        """
        if at > len(self._fragments):
            logging.debug(
                "Line.split: index %d past end (%d), returning empty line",
                at,
                len(self._fragments),
            )
            return Line()
        tail = self._fragments[at:]
        del self._fragments[at:]
        return Line._from_fragments(tail)

    def append(self, other: "Line") -> None:
        """Appends the text of ``other`` and segments the joined text again."""
        self._fragments = str_to_fragments(str(self) + str(other))

    # --- Search ---

    def _grapheme_offsets(self) -> list[int]:
        """String offset of every cluster start, plus the offset of the end."""
        offsets = [0]
        for fragment in self._fragments:
            offsets.append(offsets[-1] + len(fragment.grapheme))
        return offsets

    def _matches(self, query: str) -> list[int]:
        """Grapheme indices where ``query`` starts and ends on cluster boundaries."""
        if not query:
            return []
        offsets = self._grapheme_offsets()
        index_by_offset = {offset: index for index, offset in enumerate(offsets)}
        text = str(self)

        found: list[int] = []
        start = text.find(query)
        while start != -1:
            if start in index_by_offset and start + len(query) in index_by_offset:
                found.append(index_by_offset[start])
            start = text.find(query, start + 1)
        return found

    def search_forward(self, query: str, from_grapheme_index: int = 0) -> Optional[int]:
        """Returns the first match starting at or after ``from_grapheme_index``."""
        for index in self._matches(query):
            if index >= from_grapheme_index:
                return index
        return None

    def search_backward(self, query: str, from_grapheme_index: int) -> Optional[int]:
        """Returns the last match starting strictly before ``from_grapheme_index``."""
        result: Optional[int] = None
        for index in self._matches(query):
            if index >= from_grapheme_index:
                break
            result = index
        return result
