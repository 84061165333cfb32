# tedit/ui/KeyBinder.py
"""KeyBinder.py
==================
Description:
-----------------------
Translates terminal key presses into editor ``Command`` objects.

Key Features:
- Default keybindings that the ``[keybindings]`` config section can override.
- Decoding of key specification strings ("ctrl+s", "pageup", "alt-x") into
  curses key codes or logical key names.
- Robust reading of a single key from curses, including ESC / Alt chords and
  CSI/SS3 escape sequences that curses does not decode by itself.
- Printable characters (combining marks included) become insert commands.

Intended Usage:
---------------
Instantiate KeyBinder with the editor session, read a key with
``get_key_input`` and turn it into a command with ``translate``.
"""

import curses
import logging
import re
from typing import TYPE_CHECKING, Optional

from tedit.core.Commands import Command, Edit, Move, System
from tedit.utils.logging_config import KEY_LOGGER

if TYPE_CHECKING:
    from tedit.core.Editor import Editor


# Action names usable in the [keybindings] section and the command each one emits.
ACTION_COMMANDS: dict[str, Command] = {
    "quit": Command(System.QUIT),
    "save": Command(System.SAVE),
    "search": Command(System.SEARCH),
    "dismiss": Command(System.DISMISS),
    "show_line_numbers": Command(System.SHOW_LINE_NUMBERS),
    "remove_line": Command(Edit.REMOVE_LINE),
    "delete": Command(Edit.DELETE),
    "backspace": Command(Edit.BACKSPACE),
    "enter": Command(Edit.ENTER),
    "tab": Command.insert("\t"),
    "up": Command(Move.UP),
    "down": Command(Move.DOWN),
    "left": Command(Move.LEFT),
    "right": Command(Move.RIGHT),
    "page_up": Command(Move.PAGE_UP),
    "page_down": Command(Move.PAGE_DOWN),
    "home": Command(Move.HOME),
    "end": Command(Move.END),
    "word_jump_left": Command(Move.WORD_JUMP_LEFT),
    "word_jump_right": Command(Move.WORD_JUMP_RIGHT),
}


# ==================== KeyBinder Class ====================
class KeyBinder:
    """Class KeyBinder
    ====================
    Maps key codes and logical key names to editor commands.

    Attributes:
        editor (Editor): The session the keys are read for.
        config (dict): Editor configuration, including user keybindings.
        stdscr: The curses window keys are read from.
        keybindings (dict): Action name -> list of key codes / logical names.
        action_map (dict): Key code / logical name -> ``Command``.
    """

    # Keys do NOT include the leading ESC, get_key_input() reads after it.
    ESCAPE_SEQUENCE_MAP: dict[str, str] = {
        "[A": "up", "[B": "down", "[C": "right", "[D": "left",
        "OA": "up", "OB": "down", "OC": "right", "OD": "left",

        # xterm modifiers: ;3=Alt, ;5=Ctrl
        "[1;3C": "alt+right", "[1;3D": "alt+left",
        "[1;5A": "ctrl+up", "[1;5B": "ctrl+down",
        "[1;5C": "ctrl+right", "[1;5D": "ctrl+left",
        # rxvt
        "Oc": "ctrl+right", "Od": "ctrl+left",

        "[H": "home", "[F": "end", "OH": "home", "OF": "end",
        "[1~": "home", "[4~": "end", "[7~": "home", "[8~": "end",

        "[3~": "delete", "[5~": "pageup", "[6~": "pagedown",
    }

    # curses.keyname() of modified arrows in terminfo entries (kLFT5 = Ctrl+Left).
    KEYNAME_MAP: dict[str, str] = {
        "kLFT5": "ctrl+left",
        "kRIT5": "ctrl+right",
        "kUP5": "ctrl+up",
        "kDN5": "ctrl+down",
        "kLFT3": "alt+left",
        "kRIT3": "alt+right",
    }

    # Logical names for modified keys that curses has no constant for.
    LOGICAL_KEYS = frozenset(KEYNAME_MAP.values())

    def __init__(self, editor: "Editor"):
        logging.debug("KeyBinder initialized with editor: %s", editor)
        self.editor = editor
        self.config = editor.config
        self.stdscr = getattr(editor, "stdscr", None)
        # Input delay restored after an escape sequence; -1 blocks.
        self.input_timeout = -1

        self.keybindings = self._load_keybindings()
        self.action_map = self._setup_action_map()

    def _load_keybindings(self) -> dict[str, list[int | str]]:
        """Returns action name -> key codes, user config applied over the defaults.

        A user entry may be a single spec, a list of specs or a string of
        specs separated by ``|``. An empty entry disables the action.
        """
        default_keybindings: dict[str, list[int | str]] = {
            "quit": ["ctrl+q", 17],
            "save": ["ctrl+s", 19],
            "search": ["ctrl+f", 6],
            "show_line_numbers": ["ctrl+l", 12],
            "remove_line": ["ctrl+x", 24],
            "dismiss": ["esc", 27],
            "word_jump_left": ["ctrl+left"],
            "word_jump_right": ["ctrl+right"],
            "delete": ["del", curses.KEY_DC],
            "backspace": ["backspace", curses.KEY_BACKSPACE, 8, 127],
            "enter": ["enter", 10, 13],
            "tab": ["tab", 9],
            "up": ["up"],
            "down": ["down"],
            "left": ["left"],
            "right": ["right"],
            "page_up": ["pageup"],
            "page_down": ["pagedown"],
            "home": ["home"],
            "end": ["end"],
        }

        user_keybindings_config: dict[str, object] = self.config.get("keybindings", {})
        parsed_keybindings: dict[str, list[int | str]] = {}

        for action, default_value_spec in default_keybindings.items():
            key_value_spec: object = user_keybindings_config.get(action, default_value_spec)

            if not key_value_spec:
                logging.debug("Keybinding for action %r is disabled or empty.", action)
                continue

            specs_to_process: list[int | str]
            if isinstance(key_value_spec, list):
                specs_to_process = key_value_spec
            elif isinstance(key_value_spec, str) and "|" in key_value_spec:
                specs_to_process = [s.strip() for s in key_value_spec.split("|")]
            else:
                specs_to_process = [key_value_spec]  # type: ignore[list-item]

            key_codes_for_action: list[int | str] = []
            for key_spec_item in specs_to_process:
                try:
                    key_code = self._decode_keystring(key_spec_item)
                except ValueError as e:
                    logging.error(
                        "Error parsing keybinding item %r for action %r: %s. "
                        "This specific binding for the action will be ignored.",
                        key_spec_item, action, e,
                    )
                    continue
                if key_code not in key_codes_for_action:
                    key_codes_for_action.append(key_code)

            if key_codes_for_action:
                parsed_keybindings[action] = key_codes_for_action
            else:
                logging.warning(
                    "No valid key codes found for action %r after parsing. It will not be bound.",
                    action,
                )

        for action in user_keybindings_config:
            if action not in default_keybindings:
                logging.warning("Unknown action %r in keybindings config. Ignored.", action)

        logging.debug("Loaded keybindings (action -> key codes): %s", parsed_keybindings)
        return parsed_keybindings

    def _decode_keystring(self, key_input: str | int) -> int | str:
        """Decodes a key specification into a key code or a logical key name.

        Args:
            key_input (Union[str, int]): A spec such as ``"ctrl+s"``,
                ``"pagedown"``, ``"alt-x"`` or a raw integer key code.

        Returns:
            Union[int, str]: The curses key code, or a logical name
            (``"alt-x"``, ``"ctrl+left"``) for keys without a code.

        Raises:
            ValueError: The spec is empty, names an unknown key or uses an
                unsupported modifier.
        """
        if isinstance(key_input, int):
            return key_input
        if not isinstance(key_input, str):
            raise ValueError(f"Invalid key_input type: {type(key_input)}. Expected str or int.")

        s = key_input.strip().lower()
        if not s:
            raise ValueError("Key string cannot be empty.")

        # alt+x and alt-x are the same logical binding
        if s.startswith("alt+"):
            s = "alt-" + s[len("alt+"):]
        if s.startswith("alt-"):
            return s

        if s in self.LOGICAL_KEYS:
            return s

        named_keys_map: dict[str, int] = {
            "left": curses.KEY_LEFT,
            "right": curses.KEY_RIGHT,
            "up": curses.KEY_UP,
            "down": curses.KEY_DOWN,
            "home": curses.KEY_HOME,
            "end": getattr(curses, "KEY_END", curses.KEY_LL),
            "pageup": curses.KEY_PPAGE,
            "pgup": curses.KEY_PPAGE,
            "pagedown": curses.KEY_NPAGE,
            "pgdn": curses.KEY_NPAGE,
            "delete": curses.KEY_DC,
            "del": curses.KEY_DC,
            "backspace": curses.KEY_BACKSPACE,
            "tab": 9,
            "enter": curses.KEY_ENTER,
            "return": curses.KEY_ENTER,
            "space": ord(" "),
            "esc": 27,
            "escape": 27,
        }
        named_keys_map.update(
            {f"f{i}": getattr(curses, f"KEY_F{i}", 264 + i) for i in range(1, 13)}
        )

        if s in named_keys_map:
            return named_keys_map[s]

        parts = s.split("+")
        base_key_str = parts[-1].strip()
        modifiers = {p.strip() for p in parts[:-1]}

        if modifiers == {"ctrl"} and len(base_key_str) == 1:
            if "a" <= base_key_str <= "z":
                return ord(base_key_str) - ord("a") + 1
            ctrl_symbols = {"[": 27, "\\": 28, "]": 29, "/": 31}
            if base_key_str in ctrl_symbols:
                return ctrl_symbols[base_key_str]

        if modifiers:
            raise ValueError(f"Unknown or unhandled modifiers {sorted(modifiers)} in '{key_input}'")
        if len(base_key_str) == 1:
            return ord(base_key_str)
        raise ValueError(f"Unknown base key '{base_key_str}' in '{key_input}'")

    def _setup_action_map(self) -> dict[int | str, Command]:
        """Builds key code / logical name -> ``Command`` from the keybindings."""
        final_key_action_map: dict[int | str, Command] = {
            curses.KEY_RESIZE: Command(System.RESIZE),
        }
        owners: dict[int | str, str] = {}

        for action_name, key_code_list in self.keybindings.items():
            command = ACTION_COMMANDS[action_name]
            for key_code in key_code_list:
                if key_code in owners and owners[key_code] != action_name:
                    logging.warning(
                        f"Keybinding for action '{action_name}' (key: {key_code}) is overwriting "
                        f"an existing mapping for action '{owners[key_code]}'."
                    )
                final_key_action_map[key_code] = command
                owners[key_code] = action_name

        logging.debug(f"Final constructed action map: {owners}")
        return final_key_action_map

    def translate(self, key: int | str) -> Optional[Command]:
        """Turns one key from ``get_key_input`` into a command.

        Control characters delivered as strings are looked up by their code;
        any other printable text becomes ``Edit.INSERT``.

        Returns:
            Optional[Command]: The command, or ``None`` for unbound keys.
        """
        if isinstance(key, str) and len(key) == 1 and (ord(key) < 32 or ord(key) == 127):
            key = ord(key)

        command = self.action_map.get(key)
        if command is not None:
            return command

        if isinstance(key, int) and 32 <= key < 0x110000 and key != 127:
            key = chr(key)
        # Multi-character strings are logical key names, never text.
        if isinstance(key, str) and len(key) == 1 and key.isprintable():
            return Command.insert(key)

        logging.debug("Unhandled input: %r (type: %s)", key, type(key).__name__)
        return None

    def _keyname(self, code: int) -> Optional[str]:
        try:
            name = curses.keyname(code)
        except (curses.error, ValueError):
            return None
        if isinstance(name, bytes):
            name = name.decode("ascii", "replace")
        return self.KEYNAME_MAP.get(name)

    def get_key_input(self, window: Optional["curses.window"] = None) -> int | str:
        """Reads a single key or key sequence from the terminal.

        Returns:
            int | str:
            - a curses key code (int) for function keys and control codes,
            - the typed character (str) for text,
            - "alt-<char>" for Alt/Meta chords, "ctrl+left" and friends for
              modified arrows,
            - 27 for a lone ESC,
            - curses.ERR when nothing could be read.
        """
        target = window or self.stdscr
        try:
            key = target.get_wch()
        except curses.error:
            return curses.ERR

        if isinstance(key, int):
            resolved: int | str = self._keyname(key) or key
            KEY_LOGGER.debug("key code %r -> %r", key, resolved)
            return resolved

        if key != "\x1b":
            KEY_LOGGER.debug("key char %r", key)
            return key

        # ESC received: lone ESC, Alt chord, or an escape sequence
        seq = ""
        target.nodelay(True)
        try:
            while True:
                try:
                    nx = target.get_wch()
                except curses.error:
                    break
                seq += nx if isinstance(nx, str) else f"<{nx}>"
        finally:
            target.timeout(self.input_timeout)

        if not seq:
            KEY_LOGGER.debug("standalone ESC")
            return 27

        if seq[0] == "\x1b":
            seq = seq[1:]

        if len(seq) == 1 and seq.isprintable():
            alt_key = f"alt-{seq.lower()}"
            KEY_LOGGER.debug("Alt chord -> %r", alt_key)
            return alt_key

        mapped = self.ESCAPE_SEQUENCE_MAP.get(seq)
        if not mapped:
            cleaned = "".join(re.findall(r"[\[O0-9;~A-Za-z]", seq))
            mapped = self.ESCAPE_SEQUENCE_MAP.get(cleaned)

        if mapped:
            code = self._decode_keystring(mapped)
            KEY_LOGGER.debug("ESC %r -> %r -> %r", seq, mapped, code)
            return code

        logging.warning("get_key_input: unknown escape sequence: ESC + %r", seq)
        return 27
