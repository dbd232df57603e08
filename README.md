# clikit

Building blocks for command line applications: a tree of commands, flag
lookup through a command's ancestors, typed positional arguments and the
grouping of commands and flags into categories.

## Installing

    pip install .

Add the `test` extra to get pytest for running the test suite:

    pip install ".[test]"
    pytest

## Positional arguments (`clikit.args`)

Each argument type turns command-line text into a Python value. Some take a
single value (`StringArg`, `IntArg`, `UintArg`, `FloatArg`, `TimestampArg`),
others take several (`StringArgs`, `IntArgs`, `UintArgs`, `FloatArgs`,
`TimestampArgs`).

`parse(values)` consumes what the argument needs and returns the values left
over; `get()` returns the parsed value, or the default before parsing;
`usage()` returns the text for help output. A `destination` callable, if
given, is called with the parsed value.

For arguments that take several values, `min` and `max` set how many are
accepted; a `max` of `-1` means no upper limit. Fewer than `min` values raises
`ArgumentCountError`. A value that cannot be converted raises `ValueError`.

```python
from clikit.args import IntArgs, StringArg

name = StringArg(name="name")
rest = name.parse(["alice", "1", "2"])   # ["1", "2"]
name.get()                                # "alice"

numbers = IntArgs(name="n", min=1, max=-1)
numbers.parse(rest)                       # []
numbers.get()                             # [1, 2]
numbers.usage()                           # "n [n ...]"
```

`Args` is the read-only list of leftover positional values, with `get(n)`,
`first()`, `tail()`, `present()` and `slice()`. `any_arguments()` returns an
argument list that accepts any number of strings.

## Commands (`clikit.command`)

A `Command` holds flags, sub-commands and positional arguments. Sub-commands
passed in `commands`, or attached with `add_command()`, get the command as
their parent.

- `root()`, `lineage()`, `full_name()`, `command(name)`, `names()` and `has_name()` walk the tree.
- `visible_commands()` returns sub-commands that are not hidden; `visible_categories()` returns, by name, the command categories holding a visible command.
- `visible_flags()`, `visible_flag_categories()` and `visible_persistent_flags()` list flags for help output.
- `lookup_flag()`, `value()`, `is_set()`, `set()`, `count()`, `num_flags()`, `local_flag_names()` and `flag_names()` look flags up in the command and then its ancestors. An unknown name calls the nearest `invalid_flag_access_handler`; `set()` on an unknown name raises `LookupError`.
- `check_required_flags()` raises `RequiredFlagsError` for the first command in the lineage with required flags not set.
- `arg_value(name)` reads an argument back by name. The typed helpers (`string_arg`, `int_args`, `timestamp_arg` and so on) return the argument's value when it is of the matching type, and otherwise an empty string, `0`, `0.0`, `None` or an empty list.
- `args()` and `narg()` give the leftover positional values.

Flags are duck-typed: any object with `names()`, `set(name, value)`,
`is_set()` and `get()` will do; `is_required()`, `is_local()`, `is_visible()`,
`count()` and a `category` attribute are used when present.

## Categories (`clikit.category`)

`CommandCategories` keeps command categories in the order first seen;
`FlagCategories` and `flag_categories_from_flags()` group visible flags by
category, sorted by name.

## Tracing (`clikit.tracing`)

`tracef()` writes diagnostic lines to standard error when tracing is on.
Tracing starts on when the environment variable `CLIKIT_TRACING` is `on`,
and `set_tracing()` / `tracing_enabled()` switch and report it from code:

```python
from clikit.tracing import set_tracing, tracef

set_tracing(True)
tracef("parsed %s", ["a", "b"])
```

## What the package does not do

There is no `run` entry point: the package does not parse a full command
line, dispatch to sub-commands, run actions or before/after hooks, or print
help or version text. It ships no flag classes of its own; flags are objects
you supply. There is no command-line program installed.