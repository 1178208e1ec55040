"""A console window model: prompt, command history, reverse search and tab completion."""

from __future__ import annotations

import enum
import itertools
from collections import deque
from dataclasses import dataclass
from typing import Any, ClassVar, Iterable

from consolewin.buffer import SEARCH_PROMPT, SEARCH_PROMPT_SLOT_OFF, TextBuffer
from consolewin.tab import cmd_tab_complete, digest_line, fs_tab_complete

__all__ = [
    "Key",
    "Modifiers",
    "KeyEvent",
    "ConsoleEvent",
    "ConsoleWindow",
    "ConsoleBuilder",
]

_INSTANCE_COUNT = itertools.count()
_QUOTES = ('"', "'")


class Key(enum.Enum):
    """Keys the console knows about."""

    ARROW_DOWN = "ArrowDown"
    ARROW_UP = "ArrowUp"
    ARROW_LEFT = "ArrowLeft"
    ARROW_RIGHT = "ArrowRight"
    BACKSPACE = "Backspace"
    DELETE = "Delete"
    ENTER = "Enter"
    ESCAPE = "Escape"
    TAB = "Tab"
    HOME = "Home"
    END = "End"
    SPACE = "Space"
    R = "R"


@dataclass(frozen=True)
class Modifiers:
    """State of the modifier keys when a key was pressed."""

    alt: bool = False
    ctrl: bool = False
    shift: bool = False
    mac_cmd: bool = False
    command: bool = False

    NONE: ClassVar[Modifiers]


Modifiers.NONE = Modifiers()
_CTRL_R_MODIFIERS = Modifiers(ctrl=True, command=True)


@dataclass(frozen=True)
class KeyEvent:
    """A key press or release delivered to the console."""

    key: Key
    modifiers: Modifiers = Modifiers.NONE
    pressed: bool = True


@dataclass(frozen=True)
class ConsoleEvent:
    """What the console produced: an entered command, or nothing."""

    command: str | None = None

    @property
    def is_command(self) -> bool:
        return self.command is not None


class ConsoleWindow:
    """State and key handling of an interactive console."""

    def __init__(self, prompt: str) -> None:
        self._buffer = TextBuffer(prompt, 1000)
        self.force_cursor_to_end = False
        self.history_size = 100
        self._command_history: deque[str] = deque()
        self._history_cursor: int | None = None
        self._prompt_len = len(prompt)
        self._id = f"console_text_{next(_INSTANCE_COUNT)}"
        self._save_prompt: str | None = None
        self._search_partial: str | None = None
        self._init_done = False

        self._tab_string = ""
        self._tab_nth = 0
        self.tab_quote = '"'
        self._tab_quoted = False
        self._tab_offset = -1
        self._tab_command_table: list[str] = []

    def __repr__(self) -> str:
        return (
            f"ConsoleWindow(id={self._id!r}, prompt={self.current_prompt!r}, "
            f"history={list(self._command_history)!r})"
        )

    # ----- read-only views -------------------------------------------------

    @property
    def id(self) -> str:
        return self._id

    @property
    def text(self) -> str:
        return self._buffer.text

    @property
    def current_prompt(self) -> str:
        return self._buffer.prompt

    @property
    def scrollback_size(self) -> int:
        return self._buffer.scrollback_size

    @scrollback_size.setter
    def scrollback_size(self, size: int) -> None:
        self._buffer.scrollback_size = size

    @property
    def history_cursor(self) -> int | None:
        return self._history_cursor

    @property
    def searching(self) -> bool:
        return self._search_partial is not None

    @property
    def tab_quoted(self) -> bool:
        return self._tab_quoted

    # ----- frame handling ---------------------------------------------------

    def start(self) -> None:
        """Restore a saved prompt and draw it; only acts the first time."""
        if self._init_done:
            return
        self._init_done = True
        if self._save_prompt is not None:
            self._buffer.prompt = self._save_prompt
            self._save_prompt = None
        self._buffer.draw_prompt()

    def process_events(
        self, events: Iterable[KeyEvent], cursor: int | None
    ) -> tuple[ConsoleEvent, list[KeyEvent]]:
        """Handle queued key events.

        Returns the console event and the events that were not consumed,
        which belong to the text editor.
        """
        events = list(events)
        position = 0 if cursor is None else cursor
        consumed: set[tuple[Modifiers, Key]] = set()
        command: str | None = None
        for event in events:
            if not event.pressed:
                continue
            kill, command = self.handle_key(event.key, event.modifiers, position)
            if kill:
                consumed.add((event.modifiers, event.key))
            if command is not None:
                break
        remaining = [
            event
            for event in events
            if not (event.pressed and (event.modifiers, event.key) in consumed)
        ]
        return ConsoleEvent(command), remaining

    def type_text(self, text: str) -> None:
        """Insert typed text at the input position and react to the change.

        In search mode the text goes at the end of the search string inside
        the search prompt; otherwise it is appended to the input line.
        """
        before = len(self._buffer.text)
        if self._search_partial is not None:
            pos = (
                self._buffer.last_line_offset()
                + SEARCH_PROMPT_SLOT_OFF
                + 1
                + len(self._search_partial)
            )
            current = self._buffer.text
            self._buffer.text = current[:pos] + text + current[pos:]
        else:
            self._buffer.text += text
        if len(self._buffer.text) == before:
            return
        if self._search_partial is not None:
            self._search_partial = self._buffer.search_text()
            self._buffer.prompt = (
                SEARCH_PROMPT[: SEARCH_PROMPT_SLOT_OFF + 1]
                + self._search_partial
                + SEARCH_PROMPT[SEARCH_PROMPT_SLOT_OFF + 1 :]
            )
            self._history_cursor = None
            self._history_back()
        self._tab_string = ""
        self._tab_nth = 0

    def fix_cursor(self, cursor: int | None) -> int | None:
        """Return where the cursor must move to, or None to leave it."""
        new_cursor: int | None = None
        last_off = self._buffer.last_line_offset()
        if self._search_partial is not None:
            if cursor is not None:
                slot = last_off + SEARCH_PROMPT_SLOT_OFF + 1
                if cursor < slot:
                    new_cursor = self._cursor_at(slot)
                else:
                    search_text = self._buffer.search_text()
                    if cursor > last_off + len(SEARCH_PROMPT) + len(search_text):
                        new_cursor = self._cursor_at(slot + len(search_text))
        else:
            if cursor is not None and cursor < last_off + self._prompt_len - 1:
                new_cursor = self._cursor_at_end()
            if self.force_cursor_to_end:
                new_cursor = self._cursor_at_end()
                self.force_cursor_to_end = False
        return new_cursor

    def _cursor_at_end(self) -> int:
        return len(self._buffer.text)

    def _cursor_at(self, loc: int) -> int:
        return min(loc, self._cursor_at_end())

    # ----- public operations ------------------------------------------------

    def write(self, data: str) -> None:
        """Write a line to the console."""
        self._buffer.write(data)
        self.force_cursor_to_end = True

    def load_history(self, history: str | Iterable[str]) -> None:
        """Replace the command history with the given lines."""
        if isinstance(history, str):
            lines = history.split("\n")
            if lines and lines[-1] == "":
                lines.pop()
            history = (line[:-1] if line.endswith("\r") else line for line in lines)
        self._command_history = deque(history)
        self._history_cursor = None

    def history(self) -> list[str]:
        """A copy of the command history, oldest first."""
        return list(self._command_history)

    def clear_history(self) -> None:
        self._command_history.clear()
        self._history_cursor = None

    def clear(self) -> None:
        """Remove all text from the console."""
        self._buffer.clear()
        self.force_cursor_to_end = False

    def prompt(self) -> None:
        """Prompt the user for input."""
        self._buffer.draw_prompt()

    def command_table(self) -> list[str]:
        """The mutable list of command names used for tab completion."""
        return self._tab_command_table

    def last_line(self) -> str:
        """The user's input on the last line, without the prompt."""
        return self._buffer.last_line()

    # ----- key handling -----------------------------------------------------

    def handle_key(
        self, key: Key, modifiers: Modifiers, cursor: int
    ) -> tuple[bool, str | None]:
        """Handle one key press; returns (consume the key, entered command)."""
        if modifiers == Modifiers.NONE:
            if key is Key.ARROW_DOWN:
                self._history_forward()
                return True, None
            if key is Key.ARROW_UP:
                if not self._command_history:
                    return True, None
                if self._search_partial is not None:
                    self._exit_search_mode()
                self._history_back()
                return True, None
            if key is Key.ENTER:
                return True, self._enter()
            if key in (Key.DELETE, Key.ARROW_RIGHT):
                if self._search_partial is not None:
                    limit = (
                        self._buffer.last_line_offset()
                        + len(SEARCH_PROMPT)
                        - 2
                        + len(self._search_partial)
                    )
                    if cursor > limit:
                        return True, None
                return False, None
            if key in (Key.ARROW_LEFT, Key.BACKSPACE):
                last_off = self._buffer.last_line_offset()
                if self._search_partial is not None:
                    limit = last_off + SEARCH_PROMPT_SLOT_OFF + 2
                else:
                    limit = last_off + len(self._buffer.prompt) + 1
                return cursor < limit, None
            if key is Key.ESCAPE:
                if self._search_partial is not None:
                    self._exit_search_mode()
                self._history_cursor = None
                return True, None
            if key is Key.TAB:
                self.tab_complete()
                return True, None
        elif modifiers == _CTRL_R_MODIFIERS and key is Key.R:
            if self._search_partial is None:
                self._enter_search_mode()
            else:
                self._history_back()
            return True, None
        return False, None

    def _enter(self) -> str:
        last = self._buffer.last_line()
        if self._search_partial is not None:
            self._exit_search_mode()
        if len(self._command_history) >= self.history_size and self._command_history:
            self._command_history.popleft()
        self._command_history.append(last)
        self.force_cursor_to_end = True
        self._history_cursor = None
        self._buffer.truncate_scroll_back()
        return last

    def _history_forward(self) -> None:
        if self._search_partial is not None:
            self._exit_search_mode()
        hc = self._history_cursor
        if hc is None:
            return
        self._buffer.replace_last_line("")
        newest = len(self._command_history) - 1
        if hc == newest:
            self._history_cursor = None
            return
        if hc < newest:
            hc += 1
            self._buffer.text += self._command_history[hc]
        self._history_cursor = hc

    def _history_back(self) -> None:
        hc = (
            self._history_cursor
            if self._history_cursor is not None
            else len(self._command_history)
        )
        hist_line = ""
        search = self._search_partial
        for i in reversed(range(hc)):
            entry = self._command_history[i]
            if search is not None:
                if not search:
                    self._history_cursor = None
                    break
                if search in entry:
                    hist_line = entry
                    self._history_cursor = i
                    break
            else:
                hist_line = entry
                self._history_cursor = i
                break
        if hist_line:
            self._buffer.replace_last_line(hist_line)

    def _enter_search_mode(self) -> None:
        self._save_prompt = self._buffer.prompt
        self._buffer.prompt = SEARCH_PROMPT
        self._search_partial = ""
        self._buffer.truncate_to_last_line()
        self._buffer.draw_prompt()
        self.force_cursor_to_end = True

    def _exit_search_mode(self) -> None:
        if self._save_prompt is None:
            raise RuntimeError("no saved prompt to restore after search")
        self._buffer.prompt = self._save_prompt
        self._save_prompt = None
        self._buffer.truncate_to_last_line()
        self._buffer.draw_prompt()
        self._search_partial = None
        self.force_cursor_to_end = True

    # ----- tab completion ---------------------------------------------------

    def tab_complete(self) -> None:
        """Complete the last argument, cycling through matches on repeats."""
        args = digest_line(self._buffer.last_line())
        if not args:
            return
        last_arg = args[-1]
        is_command_arg = len(args) == 1
        quote_char = self.tab_quote
        if not self._tab_string:
            self._tab_quoted = False
            if not last_arg:
                return
            if last_arg[0] in _QUOTES:
                self._tab_string = last_arg[1:]
                quote_char = last_arg[0]
            else:
                self._tab_string = last_arg
            self._tab_nth = 0
            self._tab_offset = len(self._buffer.text) - len(last_arg)
        else:
            self._tab_nth += 1

        while True:
            if is_command_arg:
                path = cmd_tab_complete(
                    self._tab_string, self._tab_nth, self._tab_command_table
                )
            else:
                path = fs_tab_complete(self._tab_string, self._tab_nth)
            if path is not None:
                added_quotes = False
                if " " in path:
                    path = f"{quote_char}{path}{quote_char}"
                    added_quotes = True
                self._buffer.text = self._buffer.text[: self._tab_offset] + path
                self.force_cursor_to_end = True
                self._tab_quoted = added_quotes
                return
            if self._tab_nth == 0:
                return
            self._tab_nth = 0

    # ----- persistence ------------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        """The persistent part of the console state."""
        return {
            "history_size": self.history_size,
            "scrollback_size": self._buffer.scrollback_size,
            "command_history": list(self._command_history),
            "prompt": self._buffer.prompt,
            "prompt_len": self._prompt_len,
            "id": self._id,
            "save_prompt": self._save_prompt,
            "tab_quote": self.tab_quote,
            "tab_command_table": list(self._tab_command_table),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ConsoleWindow:
        """Rebuild a console from :meth:`to_dict` output."""
        console = cls(data["prompt"])
        console.history_size = data["history_size"]
        console._buffer.scrollback_size = data["scrollback_size"]
        console._command_history = deque(data["command_history"])
        console._prompt_len = data["prompt_len"]
        console._id = data["id"]
        console._save_prompt = data["save_prompt"]
        console.tab_quote = data["tab_quote"]
        console._tab_command_table = list(data["tab_command_table"])
        return console


class ConsoleBuilder:
    """Builder for :class:`ConsoleWindow`."""

    def __init__(self) -> None:
        self._prompt = ">> "
        self._history_size = 100
        self._scrollback_size = 1000
        self._tab_quote_character = "'"

    def prompt(self, prompt: str) -> ConsoleBuilder:
        self._prompt = prompt
        return self

    def history_size(self, size: int) -> ConsoleBuilder:
        self._history_size = size
        return self

    def scrollback_size(self, size: int) -> ConsoleBuilder:
        self._scrollback_size = size
        return self

    def tab_quote_character(self, quote: str) -> ConsoleBuilder:
        """Set the character that quotes completed paths containing spaces."""
        self._tab_quote_character = quote
        return self

    def build(self) -> ConsoleWindow:
        console = ConsoleWindow(self._prompt)
        console.history_size = self._history_size
        console.scrollback_size = self._scrollback_size
        console.tab_quote = self._tab_quote_character
        return console