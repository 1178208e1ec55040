"""Splitting of console input into arguments and tab completion helpers."""

from __future__ import annotations

import enum
import os
import sys

__all__ = ["digest_line", "cmd_tab_complete", "fs_tab_complete"]

_QUOTES = ('"', "'")
_IS_WINDOWS = sys.platform.startswith("win")
_SEPARATORS = os.sep + (os.altsep or "")


class _State(enum.Enum):
    IN_QUOTES = enum.auto()
    IN_WHITE = enum.auto()
    IN_WORD = enum.auto()
    NOT_SURE = enum.auto()


def digest_line(line: str) -> list[str]:
    """Split an input line into arguments, keeping quoted runs together.

    Quoted arguments keep their quote characters. A trailing space yields
    a final empty argument, which signals that a new argument is starting.
    """
    state = _State.IN_WORD
    quote = ""
    start = 0
    result: list[str] = []

    for idx, ch in enumerate(line):
        if state is _State.IN_WORD:
            if ch == " ":
                result.append(line[start:idx])
                state = _State.IN_WHITE
            elif ch in _QUOTES:
                state, quote, start = _State.IN_QUOTES, ch, idx
        elif state is _State.IN_WHITE:
            if ch in _QUOTES:
                state, quote, start = _State.IN_QUOTES, ch, idx
            elif ch != " ":
                state, start = _State.IN_WORD, idx
        elif state is _State.IN_QUOTES:
            if ch == quote:
                result.append(line[start : idx + 1])
                state, start = _State.NOT_SURE, idx
        else:
            state = _State.IN_WHITE if ch == " " else _State.IN_WORD
            start = idx

    if state in (_State.IN_WORD, _State.IN_QUOTES):
        result.append(line[start:])
    elif state is _State.IN_WHITE:
        result.append("")
    return result


def cmd_tab_complete(search: str, nth: int, commands: list[str]) -> str | None:
    """Return the nth command starting with ``search``, or None."""
    matches = (command for command in commands if command.startswith(search))
    for index, command in enumerate(matches):
        if index == nth:
            return command
    return None


def _parent(path: str) -> str | None:
    """Parent of ``path`` as a string; None for an empty path or a root."""
    if not path:
        return None
    _drive, rest = os.path.splitdrive(path)
    if rest and not rest.strip(_SEPARATORS):
        return None
    trimmed = path.rstrip(_SEPARATORS)
    return os.path.dirname(trimmed)


def _sorted_names(directory: str) -> list[str]:
    with os.scandir(directory) as entries:
        names = [entry.name for entry in entries]
    if _IS_WINDOWS:
        return sorted(names, key=str.lower)
    return sorted(names)


def fs_tab_complete(search: str, nth: int) -> str | None:
    """Return the nth filesystem path that starts with ``search``, or None."""
    dot_slash = ".\\" if _IS_WINDOWS and "\\" in search else "./"
    added_dot = False

    if os.path.isdir(search):
        base = search
    else:
        parent = _parent(search)
        if parent is None:
            return None
        if parent == "":
            added_dot = True
            base = dot_slash
        elif parent == ".":
            base = dot_slash
        else:
            base = parent

    if base == "..":
        base = f".{dot_slash}"

    try:
        names = _sorted_names(base)
    except OSError:
        return None

    remaining = nth
    for name in names:
        candidate = os.path.join(base, name)
        if added_dot:
            if not candidate.startswith(dot_slash):
                return None
            candidate = candidate[len(dot_slash) :]
        compared = candidate.lower() if _IS_WINDOWS else candidate
        if compared.startswith(search):
            if remaining == 0:
                return candidate
            remaining -= 1
    return None