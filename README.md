# consolewin

`consolewin` models an interactive console window that a GUI or terminal
application can embed. It keeps the scrollback text and the prompt. It also
handles the keys that make a console pleasant to use:

- **Enter** submits the text after the prompt as a command and adds it to
  the history.
- **Up / Down** walk through the command history.
- **Ctrl-R** starts a reverse incremental search through the history.
  Pressing it again finds the next older match. **Escape**, **Up**, **Down**
  or **Enter** leave search mode.
- **Tab** completes words:
  - The first word is completed from a table of command names.
  - Later words are completed from file-system paths.
  - Repeated presses cycle through the matches and wrap around to the first.
  - A completion containing a space is wrapped in a quote character. By
    default this is the quote the user typed, otherwise the configured one.
- **Left / Backspace** are swallowed when they would move into the prompt.
  In search mode, **Right / Delete** are kept inside the search slot.

The history length and the scrollback length are bounded and configurable.
When the history is full, the oldest entry is dropped. When the scrollback
limit is reached, the oldest lines are dropped.

## Installing

```
pip install consolewin
```

The package has no dependencies outside the standard library.

## Using the console

Create a `ConsoleWindow` with `ConsoleBuilder`. The defaults are:

| Setting | Default |
| --- | --- |
| prompt | `">> "` |
| history size | 100 |
| scrollback size | 1000 |
| tab quote | `'` |

```python
from consolewin.console import ConsoleBuilder, Key, KeyEvent, Modifiers

console = (
    ConsoleBuilder()
    .prompt(">> ")
    .history_size(20)
    .scrollback_size(1000)
    .tab_quote_character('"')
    .build()
)
console.start()                      # draws the first prompt
console.command_table().extend(["cd", "dir", "history", "quit"])
```

### Feeding it input

Your host toolkit supplies the keyboard input:

- **Typed characters** go through `type_text(text)`. In search mode the text
  is added to the search string and the history is searched again.
  Otherwise it is appended to the input line.
- **Special keys** are passed to `process_events(events, cursor)` as
  `KeyEvent(key, modifiers, pressed)` values, together with the current
  cursor position:
  - `key` is a member of `Key`.
  - `modifiers` is a `Modifiers` value; `Modifiers.NONE` means no modifier.
  - Ctrl-R is `Modifiers(ctrl=True, command=True)` with `Key.R`.

`process_events` returns a pair:

1. A `ConsoleEvent`. When Enter was pressed, its `command` is the line that
   was typed and `is_command` is true. Otherwise `command` is `None`.
2. The events the console did not consume. Those belong to your text
   editor.

```python
event, remaining = console.process_events([KeyEvent(Key.ENTER)], len(console.text))
if event.is_command:
    console.write(f"You entered: {event.command}")
    console.prompt()
```

After a mouse click or scroll has moved the cursor, call
`fix_cursor(cursor)`. It returns the position the cursor must move to, or
`None` if it can stay where it is.

`handle_key(key, modifiers, cursor)` handles a single key press. It returns
`(consume, command)`. `tab_complete()` runs one step of tab completion
directly.

### Other members

- `write(data)` appends a line of output, even when the user typed nothing.
- `prompt()` draws a fresh prompt.
- `clear()` empties the screen.
- `history()` returns a copy of the command history, oldest first.
- `load_history(history)` replaces the history. It takes a string of lines
  or an iterable of strings.
- `clear_history()` empties the history.
- `last_line()` is the text typed after the prompt.
- `command_table()` is the list of command names used for completion. You
  can change the list in place.
- The read-only properties are `text`, `current_prompt`, `history_cursor`,
  `searching`, `tab_quoted` and `id`.
- `history_size`, `scrollback_size` and `tab_quote` can be set directly.
- `to_dict()` and `ConsoleWindow.from_dict(data)` save and restore state.
  This covers the settings, the prompt, the history and the command table,
  but not the screen text.

### Building blocks

The line buffer and the completion helpers can be used on their own.

`consolewin.buffer.TextBuffer` holds the scrollback text and the prompt. It
provides:

- `write`
- `draw_prompt`
- `last_line`
- `last_line_offset`
- `search_text`
- `truncate_scroll_back`
- `replace_last_line`
- `truncate_to_last_line`
- `clear`

`consolewin.tab` provides:

- `digest_line(line)` splits a line into arguments. Quoted arguments stay
  together and keep their quotes. A trailing space yields a final empty
  argument.
- `cmd_tab_complete(search, nth, commands)` returns the nth command that
  starts with `search`, or `None`.
- `fs_tab_complete(search, nth)` returns the nth file-system path that
  starts with `search`, or `None`. Entries are sorted by name, and without
  regard to case on Windows.

## Demo

A small shell runs the console on standard input and output:

```
consolewin-demo
consolewin-demo --state console.json
```

With `--state FILE`, the console state is loaded from `FILE` if it exists
and written back on exit.

| Command | Aliases | What it does |
| --- | --- | --- |
| `cd DIR` | | Changes the working directory and prints it. |
| `dir [filter]` | | Lists the current directory, keeping paths that contain `filter`. |
| `history` | | Prints the numbered command history. |
| `clear_history` | `clh` | Empties the command history. |
| `clear_screen` | `cls` | Empties the console text. |
| `dark` | | Records a dark display setting. |
| `light` | | Records a light display setting. |
| `quit` | `exit`, `q` | Ends the shell; so does end of input. |

Parse errors and failed file operations are printed as messages. They do
not end the shell.

The same command handling is available in code:

- `consolewin.demo.ConsoleDemo` has `dispatch(line)`, which returns the
  output text or raises `CommandError`.
- `ConsoleDemo` also has `run_command(command)`, which writes the output to
  the console and re-prompts.
- `build_parser()` returns the command parser.
- `command_names()` lists the commands.

## What it does not do

`consolewin` keeps the console's state and its keyboard logic. It does not
draw anything, open a window or read keys from a GUI toolkit. Rendering the
text, showing the cursor and delivering key events are left to the
application that hosts it.

The demo's `dark` and `light` commands only record the chosen setting. They
do not change how the terminal looks. The terminal demo reads whole lines,
so arrow keys, Ctrl-R and Tab reach the console only in an application that
forwards them as `KeyEvent` values.

## Running the tests

```
pip install -e ".[test]"
pytest
```