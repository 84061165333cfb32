# tedit/ui/TerminalAppMode.py
import curses
import logging
from typing import Optional


class TerminalAppMode:
    """
    Put the terminal into an editor-friendly state:

    - Alternate screen buffer (smcup/rmcup) so the shell prompt is hidden.
    - Application cursor keys (smkx/rmkx).
    - raw + noecho (cbreak fallback), keypad(True), short ESC delay.

    Use as a context manager, or pair `enter(stdscr)` with `exit()`.
    """

    ESC_DELAY_MS = 25

    def __init__(self, stdscr: Optional["curses.window"] = None) -> None:
        self._entered: bool = False
        self._stdscr = stdscr

    def __enter__(self) -> "TerminalAppMode":
        if self._stdscr is None:
            raise ValueError("TerminalAppMode needs a window to enter")
        self.enter(self._stdscr)
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.exit()

    def enter(self, stdscr: "curses.window") -> None:
        self._stdscr = stdscr

        try:
            curses.setupterm()
        except curses.error as e:
            logging.debug("setupterm() failed or not required: %r", e)

        self._tputs("smcup")
        self._tputs("smkx")

        try:
            curses.raw()  # deliver ^Q and ^S to the editor instead of flow control
        except curses.error:
            curses.cbreak()
        curses.noecho()
        stdscr.keypad(True)

        try:
            curses.set_escdelay(self.ESC_DELAY_MS)
        except (curses.error, AttributeError):
            logging.debug("set_escdelay unavailable")

        stdscr.scrollok(False)
        stdscr.leaveok(False)
        stdscr.clearok(True)
        stdscr.erase()
        stdscr.refresh()

        self._entered = True
        logging.debug("TerminalAppMode: entered (alternate screen + app cursor keys).")

    def exit(self) -> None:
        if not self._entered:
            return

        try:
            if self._stdscr is not None:
                self._stdscr.keypad(False)
            curses.noraw()
            curses.echo()
        except curses.error as e:
            logging.debug("TerminalAppMode: restoring input modes failed: %r", e)

        self._tputs("rmkx")
        self._tputs("rmcup")

        self._entered = False
        logging.debug("TerminalAppMode: exited (restored terminal modes).")

    # ── helpers ───────────────────────────────────────────────────────────────

    def _tputs(self, capname: str) -> None:
        try:
            s = curses.tigetstr(capname)
            if s:
                curses.putp(s)
        except curses.error as e:
            # Missing capability (FreeBSD console, etc.).
            logging.debug("tputs(%s) skipped: %r", capname, e)
