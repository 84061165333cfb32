# tedit/core/Commands.py
"""Abstract editor commands produced by the key binder.

Three families exist: cursor movement (``Move``), text edits (``Edit``) and
session-level actions (``System``). A ``Command`` wraps one of them, together
with the inserted character for ``Edit.INSERT`` or the new terminal size for
``System.RESIZE``.
"""

from enum import Enum
from typing import Any, NamedTuple, Optional, Union


class Move(Enum):
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"
    PAGE_UP = "page_up"
    PAGE_DOWN = "page_down"
    HOME = "home"
    END = "end"
    WORD_JUMP_LEFT = "word_jump_left"
    WORD_JUMP_RIGHT = "word_jump_right"


class Edit(Enum):
    INSERT = "insert"
    DELETE = "delete"
    BACKSPACE = "backspace"
    ENTER = "enter"
    REMOVE_LINE = "remove_line"


class System(Enum):
    SAVE = "save"
    QUIT = "quit"
    SEARCH = "search"
    DISMISS = "dismiss"
    RESIZE = "resize"
    SHOW_LINE_NUMBERS = "show_line_numbers"


class Command(NamedTuple):
    """One decoded user command.

    Attributes:
        kind: The ``Move``, ``Edit`` or ``System`` member.
        payload: The character for ``Edit.INSERT``, the ``Size`` for
            ``System.RESIZE``, otherwise ``None``.
    """

    kind: Union[Move, Edit, System]
    payload: Optional[Any] = None

    @classmethod
    def insert(cls, character: str) -> "Command":
        return cls(Edit.INSERT, character)

    def is_move(self) -> bool:
        return isinstance(self.kind, Move)

    def is_edit(self) -> bool:
        return isinstance(self.kind, Edit)

    def is_system(self) -> bool:
        return isinstance(self.kind, System)
