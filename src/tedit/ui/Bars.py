# tedit/ui/Bars.py
"""Bars.py
==================
The single-row bars painted below the text area:

- ``StatusBar``: document name, line count, modified marker and the
  ``line/total`` position indicator.
- ``MessageBar``: a transient message (help text, save results, warnings)
  that disappears after a timeout.
- ``CommandBar``: an editable prompt ("Save as: ", "Find: ") whose value is a
  grapheme ``Line``, so wide and combining characters edit correctly.

Each bar only produces the text for its row; ``DrawScreen`` does the painting.
"""

import logging
import time
from typing import Callable, Optional

from wcwidth import wcswidth

from tedit.core.Commands import Edit
from tedit.core.Line import Line
from tedit.core.View import DocumentStatus

DEFAULT_MESSAGE_TIMEOUT = 5.0


def _cells(text: str) -> int:
    width = wcswidth(text)
    return width if width >= 0 else len(text)


class _Bar:
    """Shared redraw flag and width of a one-row bar."""

    def __init__(self) -> None:
        self.width = 0
        self.needs_redraw = True

    def mark_redraw(self, value: bool = True) -> None:
        self.needs_redraw = value

    def resize(self, width: int) -> None:
        self.width = width
        self.mark_redraw()


class StatusBar(_Bar):
    def __init__(self) -> None:
        super().__init__()
        self.status = DocumentStatus()

    def update_status(self, new_status: DocumentStatus) -> None:
        if new_status != self.status:
            self.status = new_status
            self.mark_redraw()

    def render(self) -> str:
        """``"<name> - <N> lines <modified>"`` with the position right-aligned.

        Returns an empty string when the text does not fit the bar width.
        """
        status = self.status
        beginning = (
            f"{status.file_name} - {status.line_count_to_string()} "
            f"{status.modified_indicator_to_string()}"
        )
        position = status.position_indicator_to_string()
        remainder = max(0, self.width - _cells(beginning))
        text = f"{beginning}{position:>{remainder}}"

        self.mark_redraw(False)
        return text if _cells(text) <= self.width else ""


class MessageBar(_Bar):
    """Shows the latest message until ``timeout`` seconds have passed.

    Attributes:
        message (str): The message text.
        timeout (float): Seconds a message stays visible.
    """

    def __init__(
        self,
        timeout: float = DEFAULT_MESSAGE_TIMEOUT,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        super().__init__()
        self.message = ""
        self.timeout = timeout
        self._clock = clock
        self._set_at = clock()
        self._cleared_after_expiry = False

    def update_message(self, new_message: str) -> None:
        logging.debug("MessageBar: %s", new_message)
        self.message = new_message
        self._set_at = self._clock()
        self._cleared_after_expiry = False
        self.mark_redraw()

    def is_expired(self) -> bool:
        return self._clock() - self._set_at > self.timeout

    def check_expiry(self) -> None:
        """Requests one more repaint when the message has just expired."""
        if self.is_expired() and not self._cleared_after_expiry:
            self._cleared_after_expiry = True
            self.mark_redraw()

    def render(self) -> str:
        self.mark_redraw(False)
        if self.is_expired():
            return ""
        return self.message


class CommandBar(_Bar):
    """Prompt text followed by an editable value.

    Only appending and erasing at the end of the value are supported.
    """

    def __init__(self) -> None:
        super().__init__()
        self.prompt = ""
        self.value = Line()

    def set_prompt(self, new_prompt: str) -> None:
        self.prompt = new_prompt
        self.mark_redraw()

    def clear_value(self) -> None:
        self.value = Line()
        self.mark_redraw()

    def get_value(self) -> str:
        return str(self.value)

    def handle_edit(self, command: Edit, character: Optional[str] = None) -> None:
        if command is Edit.INSERT and character:
            self.value.insert_char(character, self.value.grapheme_count())
            self.mark_redraw()
        elif command is Edit.BACKSPACE and not self.value.is_empty():
            self.value.delete(self.value.grapheme_count() - 1)
            self.mark_redraw()

    def _value_area(self) -> int:
        return max(0, self.width - _cells(self.prompt))

    def render(self) -> str:
        """Prompt plus the tail of the value that fits; empty if the prompt alone does not fit."""
        value_end = self.value.width()
        value_start = max(0, value_end - self._value_area())
        text = self.prompt + self.value.visible_slice(value_start, value_end)

        self.mark_redraw(False)
        return text if _cells(text) <= self.width else ""

    def caret_position_col(self) -> int:
        col = _cells(self.prompt) + min(self.value.width(), self._value_area())
        return min(col, max(0, self.width - 1))
