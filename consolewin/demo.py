"""A small command shell built on the console window."""

from __future__ import annotations

import argparse
import json
import os
import shlex
import sys
from dataclasses import dataclass
from typing import NoReturn, Sequence

from consolewin.console import ConsoleBuilder, ConsoleWindow, Key, KeyEvent

__all__ = ["CommandError", "build_parser", "command_names", "ConsoleDemo", "main"]


class CommandError(Exception):
    """A command line could not be parsed or was not accepted."""


@dataclass(frozen=True)
class _CommandSpec:
    name: str
    aliases: tuple[str, ...] = ()
    about: str | None = None


_COMMANDS = (
    _CommandSpec("quit", ("exit", "q"), "Quit demo"),
    _CommandSpec("dir", (), "Directory list of current directory"),
    _CommandSpec("dark", (), "Set dark mode"),
    _CommandSpec("light", (), "Set light mode"),
    _CommandSpec("clear_screen", ("cls",), "Clear the screen"),
    _CommandSpec("history", (), "dump command history"),
    _CommandSpec("clear_history", ("clh",), None),
    _CommandSpec("cd", (), "change current dir"),
)


class _CommandParser(argparse.ArgumentParser):
    """Argument parser that raises instead of printing and exiting."""

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._captured: list[str] = []

    def _print_message(self, message, file=None) -> None:
        if message:
            self._captured.append(message)

    def exit(self, status: int = 0, message: str | None = None) -> NoReturn:
        text = "".join(self._captured) + (message or "")
        self._captured.clear()
        raise CommandError(text.rstrip("\n"))

    def error(self, message: str) -> NoReturn:
        self._captured.clear()
        raise CommandError(f"error: {message}")


def build_parser() -> argparse.ArgumentParser:
    """The parser for console command lines; the first word names the command."""
    parser = _CommandParser(prog="", add_help=True)
    subparsers = parser.add_subparsers(
        title="Commands", metavar="Command", dest="invoked", required=True
    )
    for spec in _COMMANDS:
        sub = subparsers.add_parser(
            spec.name,
            aliases=list(spec.aliases),
            help=spec.about,
            description=spec.about,
            prog=spec.name,
        )
        sub.set_defaults(command=spec.name)
        if spec.name == "dir":
            sub.add_argument("filter", nargs="?")
        elif spec.name == "cd":
            sub.add_argument("directory")
    return parser


def command_names() -> list[str]:
    """Names of all commands, in the order they are defined."""
    return [spec.name for spec in _COMMANDS]


class ConsoleDemo:
    """Runs commands typed into a console window."""

    def __init__(self, console: ConsoleWindow | None = None) -> None:
        if console is None:
            console = (
                ConsoleBuilder()
                .prompt(">> ")
                .history_size(20)
                .tab_quote_character('"')
                .build()
            )
        self.console = console
        self.label = "Hello World!"
        self.visuals = "dark"
        self.running = True
        table = self.console.command_table()
        table.extend(name for name in command_names() if name not in table)

    def dispatch(self, line: str) -> str:
        """Execute one command line and return its output text."""
        try:
            args = shlex.split(line)
        except ValueError as exc:
            raise CommandError("cannot parse") from exc
        parsed = build_parser().parse_args(args)
        command = parsed.command

        if command == "cd":
            os.chdir(parsed.directory)
            return f"Current working directory: {os.getcwd()}"
        if command == "dark":
            self.visuals = "dark"
            return "Dark mode enabled"
        if command == "light":
            self.visuals = "light"
            return "Light mode enabled"
        if command == "quit":
            self.running = False
            return "Bye"
        if command == "clear_screen":
            self.console.clear()
            return ""
        if command == "dir":
            wanted = parsed.filter or ""
            with os.scandir(".") as entries:
                names = sorted(entry.name for entry in entries)
            paths = (os.path.join(".", name) for name in names)
            return "".join(f"{path}\n" for path in paths if wanted in path)
        if command == "history":
            return "".join(
                f"{index}: {entry}\n"
                for index, entry in enumerate(self.console.history())
            )
        if command == "clear_history":
            self.console.clear_history()
            return ""
        return "Unknown command"

    def run_command(self, command: str) -> str:
        """Run a command entered in the console, show its output and re-prompt."""
        try:
            response = self.dispatch(command)
        except (CommandError, OSError) as exc:
            response = str(exc)
        if response:
            self.console.write(response)
        self.console.prompt()
        return response


def _load_console(path: str | None) -> ConsoleWindow | None:
    if path is None or not os.path.exists(path):
        return None
    with open(path, encoding="utf-8") as handle:
        return ConsoleWindow.from_dict(json.load(handle))


def _save_console(path: str, console: ConsoleWindow) -> None:
    with open(path, "w", encoding="utf-8") as handle:
        json.dump(console.to_dict(), handle)


def main(argv: Sequence[str] | None = None) -> int:
    """Run the demo shell on standard input and output."""
    options = argparse.ArgumentParser(
        prog="consolewin-demo", description="Interactive console demo."
    )
    options.add_argument(
        "--state", metavar="FILE", help="file that keeps the console state"
    )
    args = options.parse_args(argv)

    demo = ConsoleDemo(_load_console(args.state))
    console = demo.console
    console.start()

    while demo.running:
        try:
            line = input(console.current_prompt)
        except EOFError:
            break
        console.type_text(line)
        event, _ = console.process_events([KeyEvent(Key.ENTER)], len(console.text))
        if event.command is not None:
            response = demo.run_command(event.command)
            if response:
                print(response.rstrip("\n"))

    if args.state:
        _save_console(args.state, console)
    return 0


if __name__ == "__main__":
    sys.exit(main())