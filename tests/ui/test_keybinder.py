# tests/ui/test_keybinder.py
"""Unit tests for the `KeyBinder` class.
========================================

The tests exercise the real decoding of key specs, user overrides from the
config, `translate` and the escape-sequence parsing in `get_key_input`
against fake windows.
"""

import curses
import logging
from typing import Any
from unittest.mock import MagicMock, patch

import pytest

from tedit.core.Commands import Command, Edit, Move, System
from tedit.ui.KeyBinder import KeyBinder


def make_binder(keybindings: dict[str, Any] | None = None) -> KeyBinder:
    editor = MagicMock()
    editor.config = {"keybindings": keybindings or {}}
    editor.stdscr = None
    return KeyBinder(editor)


def fake_window(*keys: Any) -> MagicMock:
    """A window whose get_wch() returns ``keys`` and then raises curses.error."""
    window = MagicMock()
    window.get_wch.side_effect = [*keys, curses.error("no input")]
    return window


# --- Decoding ---------------------------------------------------------------------
@pytest.mark.parametrize(
    "spec, expected",
    [
        ("ctrl+s", 19),
        ("Ctrl+Q", 17),
        ("ctrl+[", 27),
        ("esc", 27),
        ("pageup", curses.KEY_PPAGE),
        ("pgdn", curses.KEY_NPAGE),
        ("del", curses.KEY_DC),
        ("x", ord("x")),
        ("alt+x", "alt-x"),
        ("alt-X", "alt-x"),
        ("ctrl+left", "ctrl+left"),
        (42, 42),
    ],
)
def test_decode_keystring(spec: str | int, expected: int | str) -> None:
    assert make_binder()._decode_keystring(spec) == expected


def test_decode_function_keys() -> None:
    assert make_binder()._decode_keystring("f5") == getattr(curses, "KEY_F5", 269)


@pytest.mark.parametrize("spec", ["", "   ", "ctrl+shift+x", "hyper+a", "nosuchkey"])
def test_decode_rejects_bad_specs(spec: str) -> None:
    with pytest.raises(ValueError):
        make_binder()._decode_keystring(spec)


# --- Default bindings and translate ---------------------------------------------------
@pytest.mark.parametrize(
    "key, expected",
    [
        (17, Command(System.QUIT)),
        ("\x13", Command(System.SAVE)),
        ("\x06", Command(System.SEARCH)),
        ("\x0c", Command(System.SHOW_LINE_NUMBERS)),
        (27, Command(System.DISMISS)),
        ("\x18", Command(Edit.REMOVE_LINE)),
        (curses.KEY_DC, Command(Edit.DELETE)),
        (127, Command(Edit.BACKSPACE)),
        (curses.KEY_BACKSPACE, Command(Edit.BACKSPACE)),
        ("\n", Command(Edit.ENTER)),
        (curses.KEY_ENTER, Command(Edit.ENTER)),
        ("\t", Command.insert("\t")),
        (curses.KEY_LEFT, Command(Move.LEFT)),
        (curses.KEY_NPAGE, Command(Move.PAGE_DOWN)),
        (curses.KEY_HOME, Command(Move.HOME)),
        ("ctrl+left", Command(Move.WORD_JUMP_LEFT)),
        ("ctrl+right", Command(Move.WORD_JUMP_RIGHT)),
        (curses.KEY_RESIZE, Command(System.RESIZE)),
    ],
)
def test_translate_bound_keys(key: int | str, expected: Command) -> None:
    assert make_binder().translate(key) == expected


def test_command_families() -> None:
    assert Command(System.QUIT).is_system()
    assert Command(Move.UP).is_move()
    assert Command.insert("x").is_edit()
    assert not Command.insert("x").is_system()


@pytest.mark.parametrize("text", ["a", "Z", " ", "é", "日", "\u0301"])
def test_translate_printable_text_inserts(text: str) -> None:
    assert make_binder().translate(text) == Command.insert(text)


def test_translate_printable_code_point_inserts() -> None:
    assert make_binder().translate(ord("q")) == Command.insert("q")


@pytest.mark.parametrize("key", ["alt-x", "\x01", -1, "ctrl+up"])
def test_translate_unbound_keys(key: int | str) -> None:
    assert make_binder().translate(key) is None


# --- User configuration -------------------------------------------------------------
def test_user_override_replaces_defaults() -> None:
    kb = make_binder({"quit": "ctrl+w|ctrl+e"})
    assert kb.keybindings["quit"] == [23, 5]
    assert kb.translate("\x05") == Command(System.QUIT)
    assert kb.translate(17) is None


def test_user_override_as_list() -> None:
    kb = make_binder({"search": ["ctrl+g", "f3"]})
    assert kb.keybindings["search"] == [7, getattr(curses, "KEY_F3", 267)]
    assert kb.translate(7) == Command(System.SEARCH)


def test_empty_binding_disables_action() -> None:
    kb = make_binder({"search": ""})
    assert "search" not in kb.keybindings
    assert kb.translate(6) is None


def test_invalid_spec_is_skipped(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.ERROR):
        kb = make_binder({"save": ["ctrl+shift+s", "ctrl+s"]})
    assert kb.keybindings["save"] == [19]
    assert "ctrl+shift+s" in caplog.text


def test_conflicting_binding_warns_and_wins(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING):
        kb = make_binder({"save": "ctrl+q"})
    assert "overwriting" in caplog.text
    assert kb.translate(17) == Command(System.SAVE)


def test_unknown_action_warns(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING):
        make_binder({"teleport": "ctrl+t"})
    assert "teleport" in caplog.text


# --- Reading keys ---------------------------------------------------------------------
def test_get_key_input_plain_character() -> None:
    assert make_binder().get_key_input(fake_window("é")) == "é"


def test_get_key_input_nothing_to_read() -> None:
    window = MagicMock()
    window.get_wch.side_effect = curses.error("timeout")
    assert make_binder().get_key_input(window) == curses.ERR


def test_get_key_input_lone_escape() -> None:
    window = fake_window("\x1b")
    assert make_binder().get_key_input(window) == 27
    window.nodelay.assert_any_call(True)
    window.timeout.assert_called_with(-1)


class DelayWindow:
    """Window keeping a single input-delay setting, as curses does."""

    def __init__(self, *keys: str) -> None:
        self.keys = list(keys)
        self.delay = -1

    def timeout(self, delay: int) -> None:
        self.delay = delay

    def nodelay(self, flag: bool) -> None:
        self.delay = 0 if flag else -1

    def get_wch(self) -> str:
        if not self.keys:
            raise curses.error("no input")
        return self.keys.pop(0)


@pytest.mark.parametrize("keys", [("\x1b",), ("\x1b", "x"), ("\x1b", "[", "1", ";", "5", "D")])
def test_get_key_input_restores_input_timeout(keys: tuple[str, ...]) -> None:
    kb = make_binder()
    kb.input_timeout = 100
    window = DelayWindow(*keys)
    window.timeout(100)

    kb.get_key_input(window)

    assert window.delay == 100


def test_get_key_input_alt_chord() -> None:
    assert make_binder().get_key_input(fake_window("\x1b", "X")) == "alt-x"


@pytest.mark.parametrize(
    "sequence, expected",
    [
        ("[A", curses.KEY_UP),
        ("OD", curses.KEY_LEFT),
        ("[1;5C", "ctrl+right"),
        ("[1;5D", "ctrl+left"),
        ("[3~", curses.KEY_DC),
        ("[6~", curses.KEY_NPAGE),
    ],
)
def test_get_key_input_escape_sequences(sequence: str, expected: int | str) -> None:
    window = fake_window("\x1b", *sequence)
    assert make_binder().get_key_input(window) == expected


def test_get_key_input_unknown_sequence_is_escape(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING):
        key = make_binder().get_key_input(fake_window("\x1b", "[", "9", "9", "z"))
    assert key == 27
    assert "unknown escape sequence" in caplog.text


def test_get_key_input_function_key_code() -> None:
    kb = make_binder()
    with patch.object(kb, "_keyname", return_value=None):
        assert kb.get_key_input(fake_window(curses.KEY_LEFT)) == curses.KEY_LEFT


def test_get_key_input_modified_arrow_by_keyname() -> None:
    kb = make_binder()
    with patch("tedit.ui.KeyBinder.curses.keyname", return_value=b"kLFT5"):
        key = kb.get_key_input(fake_window(545))
    assert key == "ctrl+left"
    assert kb.translate(key) == Command(Move.WORD_JUMP_LEFT)
