# tedit/core/View.py
"""tedit.core.View
==================
View: the viewport and cursor controller of the tedit editor.

The view owns a ``Buffer`` together with:

- the text cursor, a ``Location`` (line index, grapheme index),
- the scroll offset, a ``Position`` (first visible document row and rendered
  column),
- the visible ``Size`` of the text area.

It turns movement and edit commands into cursor updates and buffer
mutations, keeps the cursor inside the visible rectangle by adjusting the
scroll offset, and produces the text to paint for every visible row.

Invariant kept after every command: the cursor's grapheme index never
exceeds the grapheme count of its line, its line index never exceeds the
line count (the position just past the last line is allowed), and the
cursor's rendered position lies within the visible rectangle.
"""

import logging
from typing import NamedTuple, Optional

from tedit.core.Buffer import Buffer, PathLike
from tedit.core.Commands import Edit, Move
from tedit.core.Line import Fragment
from tedit.core.Location import Location, Position, Size
from tedit.utils.utils import APP_NAME, APP_VERSION


NAME = APP_NAME
VERSION = APP_VERSION

# "{:4}  " line number column shown when line numbers are enabled.
GUTTER_WIDTH = 6
PAST_END_MARKER = "~"


class DocumentStatus(NamedTuple):
    """Snapshot of the document shown by the status bar."""

    file_name: str = "[No Name]"
    number_of_lines: int = 0
    line_number: int = 0
    modified: bool = False

    def line_count_to_string(self) -> str:
        return f"{self.number_of_lines} lines"

    def modified_indicator_to_string(self) -> str:
        return "(modified)" if self.modified else ""

    def position_indicator_to_string(self) -> str:
        return f"{self.line_number + 1}/{self.number_of_lines}"


class SearchInfo:
    """State of an active find prompt: where the cursor was and the last query."""

    def __init__(self, prev_location: Location, prev_scroll_offset: Position) -> None:
        self.prev_location = prev_location
        self.prev_scroll_offset = prev_scroll_offset
        self.query = ""


def _is_whitespace(fragment: Optional[Fragment]) -> bool:
    return fragment is not None and fragment.is_whitespace()


## ==================== View Class ====================
class View:
    """Class View
    ===============
    Maps between document coordinates and terminal coordinates for one buffer.

    Attributes:
        buffer (Buffer): The document being edited.
        size (Size): Height and width of the text area (gutter included).
        text_location (Location): The cursor.
        scroll_offset (Position): Document row / rendered column shown at the
            top-left corner of the text area.
        show_line_numbers (bool): Whether a line-number gutter is painted.
        needs_redraw (bool): Set whenever the painted content is stale.
        search_info (Optional[SearchInfo]): Present while a find prompt is open.
    """

    def __init__(
        self,
        buffer: Optional[Buffer] = None,
        size: Size = Size(),
        show_line_numbers: bool = False,
    ) -> None:
        self.buffer = buffer if buffer is not None else Buffer()
        self.size = size
        self.text_location = Location()
        self.scroll_offset = Position()
        self.show_line_numbers = show_line_numbers
        self.needs_redraw = True
        self.search_info: Optional[SearchInfo] = None

    # ---------------- Geometry ------------------------

    def mark_redraw(self, value: bool = True) -> None:
        self.needs_redraw = value

    def resize(self, size: Size) -> None:
        """Sets the visible area and scrolls the cursor back into it."""
        self.size = size
        self.scroll_text_location_into_view()
        self.mark_redraw()

    @property
    def gutter_width(self) -> int:
        return GUTTER_WIDTH if self.show_line_numbers else 0

    @property
    def content_width(self) -> int:
        return max(0, self.size.width - self.gutter_width)

    def toggle_line_numbers(self) -> None:
        self.show_line_numbers = not self.show_line_numbers
        self.scroll_text_location_into_view()
        self.mark_redraw()

    # ---------------- Files ------------------------

    def load(self, path: PathLike) -> None:
        """Replaces the buffer with the content of ``path``.

        Raises:
            BufferIOError: The file could not be read; the current buffer is kept.
        """
        self.set_buffer(Buffer.load(path))

    def set_buffer(self, buffer: Buffer) -> None:
        """Installs ``buffer`` with the cursor at the top and no search running."""
        self.buffer = buffer
        self.text_location = Location()
        self.scroll_offset = Position()
        self.search_info = None
        self.mark_redraw()

    def save(self) -> None:
        self.buffer.save()

    def save_as(self, path: PathLike) -> None:
        self.buffer.save_as(path)

    def is_file_loaded(self) -> bool:
        return self.buffer.file_info.has_path()

    # ---------------- Command handlers ------------------------

    def handle_edit(self, command: Edit, character: Optional[str] = None) -> None:
        """Applies one edit command at the cursor.

        Args:
            command (Edit): The edit to perform.
            character (Optional[str]): Text inserted by ``Edit.INSERT``.
        """
        if command is Edit.INSERT:
            if character:
                self.insert_character(character)
        elif command is Edit.BACKSPACE:
            self.backspace()
        elif command is Edit.DELETE:
            self.delete()
        elif command is Edit.ENTER:
            self.insert_newline()
        elif command is Edit.REMOVE_LINE:
            self.delete_line()

    def handle_move(self, command: Move) -> None:
        """Moves the cursor and scrolls it into view."""
        height = self.size.height
        if command is Move.UP:
            self.move_up(1)
        elif command is Move.DOWN:
            self.move_down(1)
        elif command is Move.LEFT:
            self.move_left()
        elif command is Move.RIGHT:
            self.move_right()
        elif command is Move.PAGE_UP:
            self.move_up(max(0, height - 1))
        elif command is Move.PAGE_DOWN:
            self.move_down(max(0, height - 1))
        elif command is Move.HOME:
            self.move_to_start_of_line()
        elif command is Move.END:
            self.move_to_end_of_line()
        elif command is Move.WORD_JUMP_LEFT:
            self.jump_word_left()
        elif command is Move.WORD_JUMP_RIGHT:
            self.jump_word_right()

        self.scroll_text_location_into_view()
        logging.debug(
            "cursor %s -> (%d,%d), scroll: (%d,%d)",
            command.value,
            self.text_location.line_index,
            self.text_location.grapheme_index,
            self.scroll_offset.row,
            self.scroll_offset.col,
        )

    # ---------------- Editing ------------------------

    def _current_grapheme_count(self) -> int:
        return self.buffer.grapheme_count(self.text_location.line_index)

    def insert_character(self, character: str) -> None:
        """Inserts text at the cursor and moves past it if the line grew.

        A combining mark merges with the cluster before it, so the grapheme
        count does not change and the cursor stays where it is.
        """
        old_count = self._current_grapheme_count()
        self.buffer.insert_char(character, self.text_location)
        new_count = self._current_grapheme_count()

        if new_count > old_count:
            self.handle_move(Move.RIGHT)
        self.mark_redraw()

    def insert_newline(self) -> None:
        self.buffer.insert_newline(self.text_location)
        self.handle_move(Move.RIGHT)
        self.mark_redraw()

    def backspace(self) -> None:
        """Moves left and deletes; at the start of a line this joins it to the previous one."""
        if self.text_location == Location(0, 0):
            return
        self.handle_move(Move.LEFT)
        self.delete()

    def delete(self) -> None:
        self.buffer.delete(self.text_location)
        self.mark_redraw()

    def delete_line(self) -> None:
        """Removes the cursor's line, then moves up one row."""
        self.buffer.delete_line(self.text_location.line_index)
        self.move_up(1)
        self.scroll_text_location_into_view()
        self.mark_redraw()

    # ---------------- Movement ------------------------

    def move_up(self, step: int) -> None:
        line_index = max(0, self.text_location.line_index - step)
        self.text_location = self.text_location._replace(line_index=line_index)
        self.snap_to_valid_grapheme()

    def move_down(self, step: int) -> None:
        line_index = self.text_location.line_index + step
        self.text_location = self.text_location._replace(line_index=line_index)
        self.snap_to_valid_grapheme()
        self.snap_to_valid_line()

    def move_left(self) -> None:
        if self.text_location.grapheme_index > 0:
            self.text_location = self.text_location._replace(
                grapheme_index=self.text_location.grapheme_index - 1
            )
        elif self.text_location.line_index > 0:
            self.move_up(1)
            self.move_to_end_of_line()

    def move_right(self) -> None:
        if self.text_location.grapheme_index < self._current_grapheme_count():
            self.text_location = self.text_location._replace(
                grapheme_index=self.text_location.grapheme_index + 1
            )
        else:
            self.move_to_start_of_line()
            self.move_down(1)

    def move_to_start_of_line(self) -> None:
        self.text_location = self.text_location._replace(grapheme_index=0)

    def move_to_end_of_line(self) -> None:
        self.text_location = self.text_location._replace(
            grapheme_index=self._current_grapheme_count()
        )

    def jump_word_right(self) -> None:
        """Moves to the first grapheme of the next word.

        The word under the cursor is skipped first, then the whitespace after
        it. When the end of the line is reached the cursor goes to the start
        of the next line.
        """
        line = self.buffer.get_line(self.text_location.line_index)
        if line is None:
            return

        count = line.grapheme_count()
        index = self.text_location.grapheme_index
        while index < count and not _is_whitespace(line.get_fragment(index)):
            index += 1
        while index < count and _is_whitespace(line.get_fragment(index)):
            index += 1

        if index >= count:
            self.move_to_start_of_line()
            self.move_down(1)
            return
        self.text_location = self.text_location._replace(grapheme_index=index)

    def jump_word_left(self) -> None:
        """Moves to the first grapheme of the current or previous word.

        At column 0 the cursor goes to the end of the previous line.
        """
        if self.text_location == Location(0, 0):
            return

        line = self.buffer.get_line(self.text_location.line_index)
        if line is None or self.text_location.grapheme_index == 0:
            self.move_up(1)
            self.move_to_end_of_line()
            return

        index = self.text_location.grapheme_index - 1
        while index > 0 and _is_whitespace(line.get_fragment(index)):
            index -= 1
        while index > 0 and not _is_whitespace(line.get_fragment(index - 1)):
            index -= 1

        if index == 0 and self.text_location.line_index > 0 and _is_whitespace(
            line.get_fragment(0)
        ):
            # Only blanks before the cursor: continue on the previous line.
            self.move_up(1)
            self.move_to_end_of_line()
            return
        self.text_location = self.text_location._replace(grapheme_index=index)

    # ---------------- Fixups ------------------------

    def snap_to_valid_grapheme(self) -> None:
        count = self._current_grapheme_count()
        if self.text_location.grapheme_index > count:
            self.text_location = self.text_location._replace(grapheme_index=count)

    def snap_to_valid_line(self) -> None:
        line_count = self.buffer.line_count()
        if self.text_location.line_index > line_count:
            self.text_location = self.text_location._replace(line_index=line_count)

    # ---------------- Scrolling ------------------------

    def text_location_to_position(self) -> Position:
        """Rendered (row, col) of the cursor in document space."""
        row = self.text_location.line_index
        line = self.buffer.get_line(row)
        col = line.width_until(self.text_location.grapheme_index) if line else 0
        return Position(row, col)

    def scroll_vertically(self, to: int) -> None:
        height = self.size.height
        row = self.scroll_offset.row
        if to < row:
            row = to
        elif to >= row + height:
            row = to - height + 1
        else:
            return
        self.scroll_offset = self.scroll_offset._replace(row=max(0, row))
        self.mark_redraw()

    def scroll_horizontally(self, to: int) -> None:
        width = self.content_width
        col = self.scroll_offset.col
        if to < col:
            col = to
        elif to >= col + width:
            col = to - width + 1
        else:
            return
        self.scroll_offset = self.scroll_offset._replace(col=max(0, col))
        self.mark_redraw()

    def scroll_text_location_into_view(self) -> None:
        position = self.text_location_to_position()
        self.scroll_vertically(position.row)
        self.scroll_horizontally(position.col)

    # ---------------- Search ------------------------

    def enter_search(self) -> None:
        """Opens a search session, remembering where to return on dismiss."""
        self.search_info = SearchInfo(self.text_location, self.scroll_offset)

    def exit_search(self) -> None:
        """Closes the search session, keeping the cursor on the last match."""
        self.search_info = None

    def dismiss_search(self) -> None:
        """Closes the search session and returns to where it was opened."""
        if self.search_info is not None:
            self.text_location = self.search_info.prev_location
            self.scroll_offset = self.search_info.prev_scroll_offset
        self.search_info = None
        self.scroll_text_location_into_view()
        self.mark_redraw()

    def _move_to_match(self, location: Optional[Location]) -> bool:
        if location is None:
            return False
        self.text_location = location
        self.scroll_text_location_into_view()
        self.mark_redraw()
        return True

    def search(self, query: str) -> bool:
        """Moves the cursor to the first match at or after the cursor.

        Searching from the cursor itself keeps the current match when the
        query is extended one character at a time.

        Returns:
            bool: True if a match was found. An empty query is a no-op.
        """
        if self.search_info is not None:
            self.search_info.query = query
        if not query:
            return False
        return self._move_to_match(self.buffer.search_forward(self.text_location, query))

    def _last_query(self) -> str:
        return self.search_info.query if self.search_info is not None else ""

    def search_next(self) -> bool:
        query = self._last_query()
        if not query:
            return False
        start = self.text_location._replace(
            grapheme_index=self.text_location.grapheme_index + 1
        )
        return self._move_to_match(self.buffer.search_forward(start, query))

    def search_prev(self) -> bool:
        query = self._last_query()
        if not query:
            return False
        return self._move_to_match(
            self.buffer.search_backward(self.text_location, query)
        )

    # ---------------- Rendering ------------------------

    @staticmethod
    def build_welcome_message(width: int) -> str:
        """``~`` followed by the centred editor name, or just ``~`` if it does not fit."""
        if width <= 0:
            return ""
        message = f"{NAME} editor -- version {VERSION}"
        remaining = width - 1
        if remaining < len(message):
            return PAST_END_MARKER
        return f"{PAST_END_MARKER}{message:^{remaining}}"

    def visible_line(self, row: int) -> str:
        """Text painted in the content area of screen row ``row`` (0-based)."""
        line_index = self.scroll_offset.row + row
        line = self.buffer.get_line(line_index)
        if line is not None:
            left = self.scroll_offset.col
            return line.visible_slice(left, left + self.content_width)
        if self.buffer.is_empty() and row == self.size.height // 3:
            return self.build_welcome_message(self.content_width)
        return PAST_END_MARKER

    def gutter(self, row: int) -> str:
        """Line-number column for screen row ``row``; empty when numbers are off."""
        if not self.show_line_numbers:
            return ""
        line_index = self.scroll_offset.row + row
        if line_index < self.buffer.line_count():
            return f"{line_index + 1:4}  "
        return " " * GUTTER_WIDTH

    def render(self) -> list[str]:
        """Every visible row, gutter included, top to bottom."""
        rows = [self.gutter(row) + self.visible_line(row) for row in range(self.size.height)]
        self.mark_redraw(False)
        return rows

    def cursor_screen_position(self) -> Position:
        """Caret position relative to the top-left corner of the text area."""
        position = self.text_location_to_position().saturating_sub(self.scroll_offset)
        return position._replace(col=position.col + self.gutter_width)

    def status(self) -> DocumentStatus:
        return DocumentStatus(
            file_name=str(self.buffer.file_info),
            number_of_lines=self.buffer.line_count(),
            line_number=self.text_location.line_index,
            modified=self.buffer.dirty,
        )
