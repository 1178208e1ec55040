import pytest

from consolewin.buffer import SEARCH_PROMPT, SEARCH_PROMPT_SLOT_OFF
from consolewin.console import (
    ConsoleBuilder,
    ConsoleEvent,
    ConsoleWindow,
    Key,
    KeyEvent,
    Modifiers,
)

CTRL_R = KeyEvent(Key.R, Modifiers(ctrl=True, command=True))


def press(console, key):
    event, _ = console.process_events([KeyEvent(key)], len(console.text))
    return event


def make_console(history=None, **kwargs):
    builder = ConsoleBuilder()
    for name, value in kwargs.items():
        getattr(builder, name)(value)
    console = builder.build()
    if history is not None:
        console.load_history(history)
    console.start()
    return console


def test_builder_defaults():
    console = ConsoleBuilder().build()
    assert console.current_prompt == ">> "
    assert console.history_size == 100
    assert console.scrollback_size == 1000
    assert console.tab_quote == "'"


def test_window_default_tab_quote():
    assert ConsoleWindow(">> ").tab_quote == '"'


def test_start_draws_prompt_once():
    console = make_console()
    console.start()
    assert console.text == ">> "


def test_enter_returns_command_and_records_history():
    console = make_console()
    console.type_text("ls")
    event, remaining = console.process_events([KeyEvent(Key.ENTER)], len(console.text))
    assert event == ConsoleEvent("ls")
    assert event.is_command
    assert remaining == []
    assert console.history() == ["ls"]


def test_unhandled_key_is_passed_on():
    console = make_console()
    home = KeyEvent(Key.HOME)
    event, remaining = console.process_events([home], 0)
    assert event.command is None
    assert remaining == [home]


def test_processing_stops_after_enter():
    console = make_console(history=["one"])
    console.type_text("ls")
    up = KeyEvent(Key.ARROW_UP)
    event, remaining = console.process_events([KeyEvent(Key.ENTER), up], 0)
    assert event.command == "ls"
    assert remaining == [up]
    assert console.history_cursor is None


def test_released_events_are_ignored():
    console = make_console(history=["one"])
    released = KeyEvent(Key.ARROW_UP, pressed=False)
    event, remaining = console.process_events([released], 0)
    assert remaining == [released]
    assert console.last_line() == ""


def test_history_up_and_down():
    console = make_console(history="one\ntwo")
    press(console, Key.ARROW_UP)
    assert console.last_line() == "two"
    press(console, Key.ARROW_UP)
    assert console.last_line() == "one"
    press(console, Key.ARROW_DOWN)
    assert console.last_line() == "two"
    press(console, Key.ARROW_DOWN)
    assert console.last_line() == ""
    assert console.history_cursor is None


def test_up_with_empty_history_is_consumed_and_changes_nothing():
    console = make_console()
    assert console.handle_key(Key.ARROW_UP, Modifiers.NONE, 0) == (True, None)
    assert console.text == ">> "


def test_load_history_strips_carriage_returns():
    console = make_console(history="one\r\ntwo\r\n")
    assert console.history() == ["one", "two"]


def test_history_size_limit():
    console = make_console(history_size=2)
    for command in ["a", "b", "c"]:
        console.type_text(command)
        press(console, Key.ENTER)
        console.prompt()
    assert console.history() == ["b", "c"]


def test_clear_history():
    console = make_console(history=["one"])
    press(console, Key.ARROW_UP)
    console.clear_history()
    assert console.history() == []
    assert console.history_cursor is None


def test_reverse_search_cycle_and_escape():
    console = make_console(history=["make build", "ls", "make test"])
    console.process_events([CTRL_R], 0)
    assert console.searching
    assert console.text == SEARCH_PROMPT
    console.type_text("make")
    assert console.current_prompt == "(reverse-i-search) make:"
    assert console.last_line() == "make test"
    console.process_events([CTRL_R], 0)
    assert console.last_line() == "make build"
    press(console, Key.ESCAPE)
    assert not console.searching
    assert console.current_prompt == ">> "
    assert console.text == ">> "


def test_enter_in_search_returns_match():
    console = make_console(history=["make build", "ls"])
    console.process_events([CTRL_R], 0)
    console.type_text("ls")
    event = press(console, Key.ENTER)
    assert event.command == "ls"
    assert console.current_prompt == ">> "
    assert console.history() == ["make build", "ls", "ls"]


def test_backspace_cannot_enter_prompt():
    console = make_console()
    console.type_text("ls")
    at_prompt = len(">> ")
    assert console.handle_key(Key.BACKSPACE, Modifiers.NONE, at_prompt) == (True, None)
    assert console.handle_key(Key.BACKSPACE, Modifiers.NONE, at_prompt + 1) == (
        False,
        None,
    )


def test_fix_cursor_normal_mode():
    console = make_console()
    console.type_text("ls")
    assert console.fix_cursor(0) == len(console.text)
    assert console.fix_cursor(len(console.text)) is None
    console.write("output")
    assert console.fix_cursor(len(console.text)) == len(console.text)
    assert console.force_cursor_to_end is False


def test_fix_cursor_search_mode():
    console = make_console(history=["ls"])
    console.process_events([CTRL_R], 0)
    assert console.fix_cursor(0) == SEARCH_PROMPT_SLOT_OFF + 1


def test_tab_completes_commands_and_wraps():
    console = make_console()
    console.command_table().extend(["history", "help", "dark"])
    console.type_text("h")
    press(console, Key.TAB)
    assert console.last_line() == "history"
    press(console, Key.TAB)
    assert console.last_line() == "help"
    press(console, Key.TAB)
    assert console.last_line() == "history"


def test_tab_without_match_leaves_text():
    console = make_console()
    console.command_table().append("dark")
    console.type_text("zz")
    before = console.text
    press(console, Key.TAB)
    assert console.text == before


def test_tab_completes_paths(tmp_path, monkeypatch):
    (tmp_path / "alpha").touch()
    (tmp_path / "also").touch()
    monkeypatch.chdir(tmp_path)
    console = make_console()
    console.type_text("cd al")
    press(console, Key.TAB)
    assert console.last_line() == "cd alpha"
    press(console, Key.TAB)
    assert console.last_line() == "cd also"
    press(console, Key.TAB)
    assert console.last_line() == "cd alpha"


def test_tab_quotes_paths_with_spaces(tmp_path, monkeypatch):
    (tmp_path / "my dir").mkdir()
    monkeypatch.chdir(tmp_path)
    console = make_console()
    console.type_text("cd my")
    press(console, Key.TAB)
    assert console.last_line() == "cd 'my dir'"
    assert console.tab_quoted


def test_clear_removes_text():
    console = make_console()
    console.write("output")
    console.clear()
    assert console.text == ""
    assert console.force_cursor_to_end is False


def test_ids_are_unique():
    assert ConsoleWindow(">> ").id != ConsoleWindow(">> ").id
    assert ConsoleWindow(">> ").id.startswith("console_text_")


def test_dict_round_trip():
    console = make_console(history=["one", "two"], history_size=20)
    console.command_table().append("dark")
    restored = ConsoleWindow.from_dict(console.to_dict())
    assert restored.to_dict() == console.to_dict()
    assert restored.text == ""
    restored.start()
    assert restored.text == ">> "
    assert restored.history() == ["one", "two"]


def test_restore_during_search_brings_back_prompt():
    console = make_console(history=["ls"])
    console.process_events([CTRL_R], 0)
    restored = ConsoleWindow.from_dict(console.to_dict())
    restored.start()
    assert restored.current_prompt == ">> "
    assert not restored.searching


def test_from_dict_requires_fields():
    with pytest.raises(KeyError):
        ConsoleWindow.from_dict({"prompt": ">> "})