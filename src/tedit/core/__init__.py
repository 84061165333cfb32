# src/tedit/core/__init__.py
"""Public facade for tedit.core: re-export main classes from CamelCase modules.

Keeps the one-class-per-module file names (Line.py, Buffer.py, View.py, ...),
but provides flat imports for convenience and stability. The session class
(`tedit.core.Editor`) is left out because it pulls in the curses UI modules.
"""

# Re-export classes/symbols from CamelCase modules
from .Buffer import Buffer, BufferIOError, FileInfo  # noqa: F401
from .Commands import Command, Edit, Move, System  # noqa: F401
from .Line import Fragment, GraphemeWidth, Line  # noqa: F401
from .Location import Location, Position, Size  # noqa: F401
from .View import DocumentStatus, View  # noqa: F401


__all__ = [
    "Buffer",
    "BufferIOError",
    "FileInfo",
    "Command",
    "Edit",
    "Move",
    "System",
    "Fragment",
    "GraphemeWidth",
    "Line",
    "Location",
    "Position",
    "Size",
    "DocumentStatus",
    "View",
]
