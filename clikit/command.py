"""The command tree: sub-commands, flag lookup through ancestors and positional arguments."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Iterable

from .args import (
    Args,
    Argument,
    FloatArg,
    FloatArgs,
    IntArg,
    IntArgs,
    StringArg,
    StringArgs,
    TimestampArg,
    TimestampArgs,
    UintArg,
    UintArgs,
)
from .category import (
    CommandCategories,
    CommandCategory,
    VisibleFlagCategory,
    _is_visible,
    flag_categories_from_flags,
)
from .tracing import tracef

HELP_NAME = "help"


class RequiredFlagsError(ValueError):
    """Raised when required flags have not been set."""

    def __init__(self, missing_flags: Iterable[str]):
        self.missing_flags = list(missing_flags)
        if len(self.missing_flags) == 1:
            message = f'Required flag "{self.missing_flags[0]}" not set'
        else:
            message = f'Required flags "{", ".join(self.missing_flags)}" not set'
        super().__init__(message)


def _is_required(flag: Any) -> bool:
    is_required = getattr(flag, "is_required", None)
    return bool(is_required()) if callable(is_required) else False


def _is_local(flag: Any) -> bool | None:
    is_local = getattr(flag, "is_local", None)
    return bool(is_local()) if callable(is_local) else None


InvalidFlagAccessHandler = Callable[["Command", str], None]


@dataclass(eq=False)
class Command:
    """A command with flags, positional arguments and sub-commands.

    Flags are duck-typed objects offering ``names()``, ``set(name, value)``,
    ``is_set()`` and ``get()``; ``is_required()``, ``is_local()``,
    ``is_visible()``, ``count()`` and a ``category`` attribute are optional.
    """

    name: str = ""
    aliases: list[str] = field(default_factory=list)
    usage: str = ""
    usage_text: str = ""
    args_usage: str = ""
    version: str = ""
    description: str = ""
    category: str = ""
    commands: list[Command] = field(default_factory=list)
    flags: list[Any] = field(default_factory=list)
    mutually_exclusive_flags: list[Any] = field(default_factory=list)
    arguments: list[Argument] = field(default_factory=list)
    hidden: bool = False
    hide_help: bool = False
    use_short_option_handling: bool = False
    metadata: dict[str, Any] = field(default_factory=dict)
    invalid_flag_access_handler: InvalidFlagAccessHandler | None = None
    parent: Command | None = field(default=None, repr=False)
    _parsed_args: Args = field(default_factory=Args, init=False, repr=False)

    def __post_init__(self) -> None:
        for command in self.commands:
            command.parent = self

    # --- tree -------------------------------------------------------------

    def full_name(self) -> str:
        """Return the names of all ancestors and this command, space separated."""
        if self.parent is not None:
            return f"{self.parent.full_name()} {self.name}"
        return self.name

    def command(self, name: str) -> Command | None:
        """Return the sub-command known by ``name``, or None."""
        return next((sub for sub in self.commands if sub.has_name(name)), None)

    def names(self) -> list[str]:
        """Return the name followed by the aliases."""
        return [self.name, *self.aliases]

    def has_name(self, name: str) -> bool:
        """Return whether the command is known by ``name``."""
        return name in self.names()

    def add_command(self, command: Command) -> None:
        """Attach a sub-command, unless it is already attached."""
        if not any(existing is command for existing in self.commands):
            command.parent = self
            self.commands.append(command)

    def root(self) -> Command:
        """Return the command at the top of the tree."""
        return self if self.parent is None else self.parent.root()

    def lineage(self) -> list[Command]:
        """Return this command and its ancestors, child first."""
        result = [self]
        if self.parent is not None:
            result.extend(self.parent.lineage())
        return result

    def _use_short_option_handling(self) -> bool:
        return any(command.use_short_option_handling for command in self.lineage())

    # --- visibility -------------------------------------------------------

    def visible_categories(self) -> list[CommandCategory]:
        """Return the command categories, by name, that hold a visible command."""
        categories = CommandCategories()
        for command in self.commands:
            categories.add_command(command.category, command)
        ordered = sorted(categories.categories(), key=lambda category: category.name)
        return [category for category in ordered if category.visible_commands()]

    def visible_commands(self) -> list[Command]:
        """Return the sub-commands that are neither hidden nor the help command."""
        return [c for c in self.commands if not c.hidden and c.name != HELP_NAME]

    def _all_flags(self) -> list[Any]:
        flags = list(self.flags)
        for group in self.mutually_exclusive_flags:
            for option in group.flags:
                flags.extend(option)
        return flags

    def visible_flag_categories(self) -> list[VisibleFlagCategory]:
        """Return the visible flag categories with the flags they hold."""
        return flag_categories_from_flags(self._all_flags()).visible_categories()

    def visible_flags(self) -> list[Any]:
        """Return the flags that are not hidden."""
        return [flag for flag in self._all_flags() if _is_visible(flag)]

    def visible_persistent_flags(self) -> list[Any]:
        """Return the root's visible flags that are inherited by sub-commands."""
        return [
            flag
            for flag in self.root().flags
            if _is_local(flag) is False and _is_visible(flag)
        ]

    # --- flags ------------------------------------------------------------

    def _local_flag(self, name: str) -> Any:
        for flag in self._all_flags():
            if name in flag.names():
                tracef("flag found for name %r (cmd=%r)", name, self.name)
                return flag
        return None

    def _on_invalid_flag(self, name: str) -> None:
        for command in self.lineage():
            if command.invalid_flag_access_handler is not None:
                command.invalid_flag_access_handler(command, name)
                return

    def lookup_flag(self, name: str) -> Any:
        """Return the flag named ``name`` here or in an ancestor, or None."""
        for command in self.lineage():
            flag = command._local_flag(name)
            if flag is not None:
                return flag
        tracef("flag NOT found for name %r (cmd=%r)", name, self.name)
        self._on_invalid_flag(name)
        return None

    def set(self, name: str, value: str) -> None:
        """Set a flag's value; raise LookupError if there is no such flag."""
        flag = self.lookup_flag(name)
        if flag is None:
            raise LookupError(f"no such flag -{name}")
        flag.set(name, value)

    def is_set(self, name: str) -> bool:
        """Return whether the flag was set; unknown flags are not set."""
        flag = self.lookup_flag(name)
        if flag is None:
            return False
        return bool(flag.is_set())

    def num_flags(self) -> int:
        """Return how many of this command's flags are set."""
        return sum(1 for flag in self._all_flags() if flag.is_set())

    def local_flag_names(self) -> list[str]:
        """Return every name of every set flag of this command, without repeats."""
        names: dict[str, None] = {}
        for flag in self._all_flags():
            if flag.is_set():
                names.update(dict.fromkeys(flag.names()))
        return list(names)

    def flag_names(self) -> list[str]:
        """Return the set flag names of the ancestors followed by this command's."""
        names = self.local_flag_names()
        if self.parent is not None:
            names = self.parent.flag_names() + names
        return names

    def count(self, name: str) -> int:
        """Return how often a countable flag occurred, or 0."""
        counter = getattr(self.lookup_flag(name), "count", None)
        return int(counter()) if callable(counter) else 0

    def value(self, name: str) -> Any:
        """Return the value of the flag named ``name``, or None."""
        flag = self.lookup_flag(name)
        if flag is None:
            return None
        return flag.get()

    def check_required_flags(self) -> None:
        """Raise RequiredFlagsError for the first command in the lineage missing required flags."""
        for command in self.lineage():
            missing = [
                flag.names()[0]
                for flag in command._all_flags()
                if _is_required(flag) and not flag.is_set()
            ]
            if missing:
                tracef("found missing required flags %r (cmd=%r)", missing, command.name)
                raise RequiredFlagsError(missing)

    # --- positional arguments ----------------------------------------------

    def _apply_arguments(self, values: Iterable[str]) -> Args:
        remaining = list(values)
        for argument in self.arguments:
            remaining = argument.parse(remaining)
        self._parsed_args = Args(remaining)
        return self._parsed_args

    def args(self) -> Args:
        """Return the positional arguments left after parsing."""
        return self._parsed_args

    def narg(self) -> int:
        """Return the number of positional arguments left after parsing."""
        return len(self._parsed_args)

    def _find_argument(self, name: str) -> Argument | None:
        return next((a for a in self.arguments if a.has_name(name)), None)

    def arg_value(self, name: str) -> Any:
        """Return the value of the argument named ``name``, or None."""
        argument = self._find_argument(name)
        if argument is None:
            tracef("command %s did not find args %s", self.name, name)
            return None
        return argument.get()

    def _typed(self, name: str, kind: type, default: Any) -> Any:
        argument = self._find_argument(name)
        if isinstance(argument, kind):
            return argument.get()
        return default

    def string_arg(self, name: str) -> str:
        """Return a string argument's value, or an empty string."""
        return self._typed(name, StringArg, "")

    def string_args(self, name: str) -> list[str]:
        """Return a string list argument's values, or an empty list."""
        return self._typed(name, StringArgs, [])

    def int_arg(self, name: str) -> int:
        """Return an integer argument's value, or 0."""
        return self._typed(name, IntArg, 0)

    def int_args(self, name: str) -> list[int]:
        """Return an integer list argument's values, or an empty list."""
        return self._typed(name, IntArgs, [])

    def uint_arg(self, name: str) -> int:
        """Return an unsigned integer argument's value, or 0."""
        return self._typed(name, UintArg, 0)

    def uint_args(self, name: str) -> list[int]:
        """Return an unsigned integer list argument's values, or an empty list."""
        return self._typed(name, UintArgs, [])

    def float_arg(self, name: str) -> float:
        """Return a float argument's value, or 0.0."""
        return self._typed(name, FloatArg, 0.0)

    def float_args(self, name: str) -> list[float]:
        """Return a float list argument's values, or an empty list."""
        return self._typed(name, FloatArgs, [])

    def timestamp_arg(self, name: str) -> datetime | None:
        """Return a timestamp argument's value, or None."""
        return self._typed(name, TimestampArg, None)

    def timestamp_args(self, name: str) -> list[datetime]:
        """Return a timestamp list argument's values, or an empty list."""
        return self._typed(name, TimestampArgs, [])