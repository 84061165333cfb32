# tedit/ui/DrawScreen.py
"""DrawScreen.py
========================
DrawScreen paints one editor session into a curses window.

Screen layout, top to bottom:
- the text area (every row but the last two), produced by ``View.render()``,
- the status bar (inverted),
- the message bar, or the command bar while a prompt is open.

Rows are cleared before they are rewritten, the caret is placed last and the
physical terminal is updated once per frame with ``noutrefresh``/``doupdate``.
Writes that hit the bottom-right corner or fall outside a shrunken window
raise ``curses.error``; those are caught and logged so drawing never stops the
editor.
"""

import curses
import logging
from typing import TYPE_CHECKING

from tedit.core.Location import Position

if TYPE_CHECKING:
    from tedit.core.Editor import Editor


## ================= class DrawScreen ==============================
class DrawScreen:
    """DrawScreen Class
    =========================
    Attributes:
        editor (Editor): The session being painted.
        stdscr (curses.window): Target window.
    """

    def __init__(self, editor: "Editor") -> None:
        self.editor = editor
        self.stdscr = editor.stdscr

    def _put_row(self, row: int, text: str, attr: int = 0) -> None:
        """Clears ``row`` and writes ``text`` from column 0."""
        try:
            self.stdscr.move(row, 0)
            self.stdscr.clrtoeol()
            if text:
                self.stdscr.addstr(row, 0, text, attr)
        except curses.error:
            # The last cell of the screen cannot be written without scrolling.
            logging.debug("DrawScreen: clipped write on row %d", row)

    def _draw_text_area(self, height: int) -> None:
        view = self.editor.view
        if not view.needs_redraw:
            return
        for row, text in enumerate(view.render()[:height]):
            self._put_row(row, text)

    def _draw_status_bar(self, row: int) -> None:
        status_bar = self.editor.status_bar
        if status_bar.needs_redraw:
            self._put_row(row, status_bar.render(), curses.A_REVERSE)

    def _draw_bottom_bar(self, row: int) -> None:
        if self.editor.in_prompt():
            command_bar = self.editor.command_bar
            if command_bar.needs_redraw:
                self._put_row(row, command_bar.render())
            return

        message_bar = self.editor.message_bar
        message_bar.check_expiry()
        if message_bar.needs_redraw:
            self._put_row(row, message_bar.render())

    def caret_position(self) -> Position:
        height = self.editor.terminal_size.height
        if self.editor.in_prompt():
            return Position(max(0, height - 1), self.editor.command_bar.caret_position_col())
        return self.editor.view.cursor_screen_position()

    def _position_cursor(self) -> None:
        caret = self.caret_position()
        try:
            self.stdscr.move(caret.row, caret.col)
        except curses.error as e:
            logging.warning(f"Curses error positioning cursor at ({caret.row}, {caret.col}): {e}")

    def draw(self) -> None:
        """Repaints whatever is stale and places the caret."""
        size = self.editor.terminal_size
        if size.height == 0 or size.width == 0:
            return

        bottom_row = size.height - 1
        self._draw_bottom_bar(bottom_row)
        if size.height > 1:
            self.editor.refresh_status()
            self._draw_status_bar(size.height - 2)
        if size.height > 2:
            self._draw_text_area(size.height - 2)

        self._position_cursor()
        self._update_display()

    def _update_display(self) -> None:
        try:
            self.stdscr.noutrefresh()
            curses.doupdate()
        except curses.error as e:
            logging.error(f"Curses doupdate error: {e}")
