"""The text held by a console window and the line edits made on it."""

from __future__ import annotations

__all__ = ["SEARCH_PROMPT", "SEARCH_PROMPT_SLOT_OFF", "TextBuffer"]

SEARCH_PROMPT = "(reverse-i-search) :"
SEARCH_PROMPT_SLOT_OFF = 18


def _lines(text: str) -> list[str]:
    """Split text into lines: no empty line after a final newline, and a
    trailing carriage return is dropped from each line."""
    if not text:
        return []
    parts = text.split("\n")
    if parts[-1] == "":
        parts.pop()
    return [part[:-1] if part.endswith("\r") else part for part in parts]


class TextBuffer:
    """Scrollback text of a console, whose last line carries the prompt."""

    def __init__(self, prompt: str, scrollback_size: int) -> None:
        self.text = ""
        self.prompt = prompt
        self.scrollback_size = scrollback_size

    def __repr__(self) -> str:
        return (
            f"TextBuffer(prompt={self.prompt!r}, "
            f"scrollback_size={self.scrollback_size!r}, text={self.text!r})"
        )

    def write(self, data: str) -> None:
        """Append ``data`` on a new line and trim the scrollback."""
        self.text += f"\n{data}"
        self.truncate_scroll_back()

    def draw_prompt(self) -> None:
        """Start a new line, if needed, and put the prompt on it."""
        if self.text and not self.text.endswith("\n"):
            self.text += "\n"
        self.text += self.prompt

    def last_line(self) -> str:
        """What follows the prompt on the last line; empty without a prompt."""
        lines = _lines(self.text)
        last = lines[-1] if lines else ""
        if last.startswith(self.prompt):
            return last[len(self.prompt) :]
        return ""

    def last_line_offset(self) -> int:
        """Offset in the text where the last line starts."""
        return self.text.rfind("\n") + 1

    def search_text(self) -> str:
        """The partial search string inside a reverse search prompt."""
        lines = _lines(self.text)
        last = lines[-1] if lines else ""
        start = SEARCH_PROMPT_SLOT_OFF + 1
        if len(last) <= start:
            return ""
        end = last.find(":", start + 1)
        if end == -1:
            return ""
        return last[start:end]

    def truncate_scroll_back(self) -> None:
        """Drop the oldest lines once the scrollback limit is reached."""
        lines = _lines(self.text)
        if len(lines) < self.scrollback_size:
            return
        first_kept = len(lines) - self.scrollback_size + 1
        self.text = "".join(f"{line}\n" for line in lines[first_kept:])

    def replace_last_line(self, line: str) -> None:
        """Replace what follows the prompt on the last line with ``line``."""
        last = self.last_line()
        if self.text.endswith(last):
            kept = self.text[: len(self.text) - len(last)]
        else:
            kept = ""
        self.text = kept + line

    def truncate_to_last_line(self) -> None:
        """Remove the whole last line, keeping the newline before it."""
        self.text = self.text[: self.last_line_offset()]

    def clear(self) -> None:
        """Remove all text."""
        self.text = ""