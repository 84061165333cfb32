# tedit/main.py
"""
tedit Main Entry Point
======================

1) Configuration & Logging: loads config and initializes logging first.
2) Arguments: an optional file to open (``-f/--file`` or positional).
3) Curses Wrapper: sets up and tears down curses, entering the alternate
   screen and raw mode for the lifetime of the session.
4) Application Run: builds the ``Editor`` and starts its main loop.
"""

import argparse
import curses
import locale
import logging
import signal
import sys
from typing import Any, Optional

from tedit.utils.logging_config import setup_logging
from tedit.utils.utils import APP_NAME, APP_VERSION, load_config

logger = logging.getLogger("tedit")

KEYBOARD_SHORTCUTS = """keyboard shortcuts:
  Ctrl+Q           quit (press repeatedly to discard unsaved changes)
  Ctrl+S           save
  Ctrl+F           find (Up/Down: previous/next match, Esc: cancel)
  Ctrl+L           toggle line numbers
  Ctrl+X           delete current line
  Ctrl+Left/Right  jump to previous/next word
  Home/End         start/end of line
  PageUp/PageDown  scroll up/down
"""


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog=APP_NAME,
        description="A small terminal text editor.",
        epilog=KEYBOARD_SHORTCUTS,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("-f", "--file", dest="file_name", metavar="FILE",
                        help="name of the file to open")
    parser.add_argument("positional_file", nargs="?", metavar="FILE",
                        help=argparse.SUPPRESS)
    parser.add_argument("--version", action="version",
                        version=f"%(prog)s {APP_VERSION}")
    args = parser.parse_args(argv)
    if args.file_name is None:
        args.file_name = args.positional_file
    return args


def main_app_runner(stdscr: "curses.window", config: dict[str, Any], file_to_open: Optional[str]) -> None:
    """Target for ``curses.wrapper``: runs one editor session."""
    # Imported here so a broken install is reported after logging is ready.
    from tedit.core.Editor import Editor
    from tedit.ui.TerminalAppMode import TerminalAppMode

    # Ctrl+Z is not bound; keep the editor in the foreground.
    if hasattr(signal, "SIGTSTP"):
        signal.signal(signal.SIGTSTP, signal.SIG_IGN)

    with TerminalAppMode(stdscr):
        editor = Editor(stdscr, config=config)
        if file_to_open:
            editor.load(file_to_open)
        editor.run()


def start(argv: Optional[list[str]] = None) -> None:
    """Console-script entry point."""
    args = parse_args(argv)

    try:
        config = load_config()
        setup_logging(config)
    except Exception as e:
        print(f"FATAL: Could not initialize configuration or logging system: {e}", file=sys.stderr)
        sys.exit(1)

    logger.info("%s editor starting up...", APP_NAME)
    try:
        locale.setlocale(locale.LC_ALL, "")
    except locale.Error:
        logger.warning("Could not set system locale. Character rendering may be affected.")

    try:
        curses.wrapper(main_app_runner, config, args.file_name)
    except Exception:
        logger.critical("Unhandled exception at the top level.", exc_info=True)
        sys.exit(1)

    logger.info("%s editor shut down gracefully.", APP_NAME)
    print(f"Thank you for using {APP_NAME}!")


if __name__ == "__main__":
    start()
