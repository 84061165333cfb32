# tedit/core/Editor.py
"""tedit.core.Editor
====================
One editing session: a ``View`` plus the status, message and command bars,
the key binder and the screen painter.

The session is a small state machine over the prompt type:

- ``PromptType.NONE``: commands go to the view (moves, edits) or trigger
  session actions (save, search, quit, line numbers).
- ``PromptType.SAVE``: the command bar collects a file name for "save as".
- ``PromptType.SEARCH``: the command bar collects a query; every edit
  re-runs the search, Up/Down step through matches, Enter keeps the match
  and Esc returns to where the search started.

Quitting a modified document needs ``quit_times`` consecutive quit presses.
"""

import curses
import os
from enum import Enum
from typing import Any, Optional

from tedit.core.Buffer import Buffer, BufferIOError, FileInfo, PathLike
from tedit.core.Commands import Command, Edit, Move, System
from tedit.core.Location import Size
from tedit.core.View import View
from tedit.ui.Bars import CommandBar, MessageBar, StatusBar
from tedit.ui.DrawScreen import DrawScreen
from tedit.ui.KeyBinder import KeyBinder
from tedit.utils.logging_config import logger
from tedit.utils.utils import DEFAULT_CONFIG

HELP_MESSAGE = "help: ^S - save | ^Q - quit | ^F find | ^L line numbers"
SAVE_PROMPT = "Save as: "
SEARCH_PROMPT = "Find: "

# Milliseconds get_wch() waits before the loop repaints (message expiry).
INPUT_TIMEOUT_MS = 100


class PromptType(Enum):
    NONE = "none"
    SAVE = "save"
    SEARCH = "search"


## ==================== Editor Class ====================
class Editor:
    """Class Editor
    =================
    Attributes:
        stdscr: The curses window (may be ``None`` when driven headless).
        config (dict): Merged configuration.
        view (View): The document view.
        status_bar / message_bar / command_bar: The bottom bars.
        prompt_type (PromptType): The open prompt, if any.
        quit_times (int): Quit presses so far on a modified document.
        should_quit (bool): Set once the session may end.
        terminal_size (Size): Full terminal size, bars included.
    """

    def __init__(self, stdscr: Any = None, config: Optional[dict[str, Any]] = None) -> None:
        self.stdscr = stdscr
        self.config = config if config is not None else DEFAULT_CONFIG
        editor_config = self.config.get("editor", {})

        self.times_for_quit = max(1, int(editor_config.get("quit_times", 2)))
        self.view = View(show_line_numbers=bool(editor_config.get("show_line_numbers", False)))
        self.status_bar = StatusBar()
        self.message_bar = MessageBar(timeout=float(editor_config.get("message_timeout", 5)))
        self.command_bar = CommandBar()
        self.prompt_type = PromptType.NONE
        self.quit_times = 0
        self.should_quit = False
        self.terminal_size = Size()

        self.key_binder = KeyBinder(self)
        self.drawer = DrawScreen(self)

        if stdscr is not None:
            height, width = stdscr.getmaxyx()
            self.handle_resize(Size(height, width))
        self.refresh_status()
        self.message_bar.update_message(HELP_MESSAGE)

    # ---------------- State helpers ------------------------

    def in_prompt(self) -> bool:
        return self.prompt_type is not PromptType.NONE

    def set_needs_redraw(self, value: bool = True) -> None:
        self.view.mark_redraw(value)
        self.status_bar.mark_redraw(value)
        self.message_bar.mark_redraw(value)
        self.command_bar.mark_redraw(value)

    def refresh_status(self) -> None:
        self.status_bar.update_status(self.view.status())

    def set_prompt(self, prompt_type: PromptType) -> None:
        if prompt_type is PromptType.NONE:
            self.message_bar.mark_redraw()
        elif prompt_type is PromptType.SAVE:
            self.command_bar.set_prompt(SAVE_PROMPT)
        elif prompt_type is PromptType.SEARCH:
            self.view.enter_search()
            self.command_bar.set_prompt(SEARCH_PROMPT)
        self.command_bar.clear_value()
        self.prompt_type = prompt_type

    # ---------------- Files ------------------------

    def load(self, path: PathLike) -> None:
        """Opens ``path``; a file that does not exist yet becomes an empty named buffer."""
        file_name = os.fspath(path)
        if not os.path.exists(file_name):
            self.view.set_buffer(Buffer(file_info=FileInfo(file_name)))
            self.message_bar.update_message(f"New file: {file_name}")
            logger.info("Started new buffer for '%s'", file_name)
        else:
            try:
                self.view.load(file_name)
            except BufferIOError:
                logger.error("Could not open '%s'", file_name, exc_info=True)
                self.message_bar.update_message(f"ERROR: Failed to read file {file_name}")
                return
        self.refresh_status()

    def save(self, file_name: Optional[str] = None) -> None:
        try:
            if file_name is not None:
                self.view.save_as(file_name)
            else:
                self.view.save()
        except BufferIOError:
            logger.error("Save failed", exc_info=True)
            self.message_bar.update_message("Failed to save file")
            return
        self.message_bar.update_message("File saved successfully")
        self.refresh_status()

    def handle_save_command(self) -> None:
        if self.view.is_file_loaded():
            self.save()
        else:
            self.set_prompt(PromptType.SAVE)

    # ---------------- Commands ------------------------

    def handle_quit(self) -> None:
        if not self.view.status().modified or self.quit_times + 1 >= self.times_for_quit:
            self.should_quit = True
            return
        self.quit_times += 1
        remaining = self.times_for_quit - self.quit_times
        self.message_bar.update_message(
            f"WARNING: File has unsaved changes. Press ^Q {remaining} more times to exit"
        )

    def handle_resize(self, size: Optional[Size] = None) -> None:
        if size is None:
            if self.stdscr is None:
                return
            size = Size(*self.stdscr.getmaxyx())
        self.terminal_size = size
        self.view.resize(Size(max(0, size.height - 2), size.width))
        for bar in (self.status_bar, self.message_bar, self.command_bar):
            bar.resize(size.width)
        if self.stdscr is not None:
            try:
                self.stdscr.clear()
            except curses.error:
                logger.debug("clear() failed during resize")
        self.set_needs_redraw()

    def _process_no_prompt(self, command: Command) -> None:
        if command.kind is System.QUIT:
            self.handle_quit()
            return
        self.quit_times = 0

        if command.is_system():
            if command.kind is System.SEARCH:
                self.set_prompt(PromptType.SEARCH)
            elif command.kind is System.SAVE:
                self.handle_save_command()
            elif command.kind is System.SHOW_LINE_NUMBERS:
                self.view.toggle_line_numbers()
        elif command.is_edit():
            self.view.handle_edit(command.kind, command.payload)
        elif command.is_move():
            self.view.handle_move(command.kind)

    def _process_during_save(self, command: Command) -> None:
        if command.kind is System.DISMISS:
            self.set_prompt(PromptType.NONE)
            self.message_bar.update_message("Save aborted!")
        elif command.kind is Edit.ENTER:
            file_name = self.command_bar.get_value()
            self.set_prompt(PromptType.NONE)
            if file_name:
                self.save(file_name)
            else:
                self.message_bar.update_message("Save aborted!")
        elif command.is_edit():
            self.command_bar.handle_edit(command.kind, command.payload)

    def _process_during_search(self, command: Command) -> None:
        if command.kind is System.DISMISS:
            self.set_prompt(PromptType.NONE)
            self.view.dismiss_search()
        elif command.kind is Edit.ENTER:
            self.set_prompt(PromptType.NONE)
            self.view.exit_search()
        elif command.is_edit():
            self.command_bar.handle_edit(command.kind, command.payload)
            self.view.search(self.command_bar.get_value())
        elif command.kind is Move.DOWN:
            self.view.search_next()
        elif command.kind is Move.UP:
            self.view.search_prev()

    def process_command(self, command: Command) -> None:
        """Dispatches one command according to the open prompt."""
        if command.kind is System.RESIZE:
            self.handle_resize(command.payload)
            return

        if self.prompt_type is PromptType.NONE:
            self._process_no_prompt(command)
        elif self.prompt_type is PromptType.SAVE:
            self._process_during_save(command)
        else:
            self._process_during_search(command)
        self.refresh_status()

    # ---------------- Main loop ------------------------

    def run(self) -> None:
        """Reads keys and repaints until the session ends."""
        logger.info("Editor main loop started.")
        self.key_binder.input_timeout = INPUT_TIMEOUT_MS
        self.stdscr.timeout(INPUT_TIMEOUT_MS)

        while not self.should_quit:
            try:
                self.drawer.draw()
                key = self.key_binder.get_key_input(self.stdscr)
                if key == curses.ERR:
                    continue
                command = self.key_binder.translate(key)
                if command is not None:
                    self.process_command(command)
            except KeyboardInterrupt:
                logger.info("Main loop interrupted by KeyboardInterrupt.")
                break

        logger.info("Editor main loop finished.")
