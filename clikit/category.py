"""Grouping of commands and flags into named categories for help output."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Iterator


@dataclass
class CommandCategory:
    """A named group of commands."""

    name: str
    commands: list = field(default_factory=list)

    def visible_commands(self) -> list:
        """Return the commands in this category that are not hidden."""
        return [command for command in self.commands if not command.hidden]


class CommandCategories:
    """Command categories kept in the order they were first seen."""

    def __init__(self) -> None:
        self._categories: list[CommandCategory] = []

    def add_command(self, category: str, command: Any) -> None:
        """Add a command to a category, creating the category if needed."""
        for existing in self._categories:
            if existing.name == category:
                existing.commands.append(command)
                return
        self._categories.append(CommandCategory(category, [command]))

    def categories(self) -> list[CommandCategory]:
        """Return all categories."""
        return list(self._categories)

    def __len__(self) -> int:
        return len(self._categories)

    def __iter__(self) -> Iterator[CommandCategory]:
        return iter(list(self._categories))


def _category_of(flag: Any) -> str | None:
    category = getattr(flag, "category", None)
    return category if isinstance(category, str) else None


def _is_visible(flag: Any) -> bool:
    is_visible = getattr(flag, "is_visible", None)
    if callable(is_visible):
        return bool(is_visible())
    hidden = getattr(flag, "hidden", None)
    if hidden is not None:
        return not hidden
    return False


class VisibleFlagCategory:
    """A named group of flags, keyed by their string form."""

    def __init__(self, name: str) -> None:
        self.name = name
        self._flags: dict[str, Any] = {}

    def _add(self, flag: Any) -> None:
        self._flags[str(flag)] = flag

    def flags(self) -> list:
        """Return the visible flags, sorted by their string form."""
        return [self._flags[key] for key in sorted(self._flags) if _is_visible(self._flags[key])]

    def __repr__(self) -> str:
        return f"VisibleFlagCategory({self.name!r})"


class FlagCategories:
    """Flag categories, listed by name."""

    def __init__(self) -> None:
        self._categories: dict[str, VisibleFlagCategory] = {}

    def add_flag(self, category: str, flag: Any) -> None:
        """Add a flag to a category, creating the category if needed."""
        self._categories.setdefault(category, VisibleFlagCategory(category))._add(flag)

    def visible_categories(self) -> list[VisibleFlagCategory]:
        """Return the categories sorted by name."""
        return [self._categories[name] for name in sorted(self._categories)]


def flag_categories_from_flags(flags: Iterable[Any]) -> FlagCategories:
    """Group visible flags by category.

    Uncategorised visible flags go under the empty name, but only when at
    least one visible flag has a category.
    """
    flags = list(flags)
    result = FlagCategories()
    categorized = False

    for flag in flags:
        category = _category_of(flag)
        if category and _is_visible(flag):
            result.add_flag(category, flag)
            categorized = True

    if categorized:
        for flag in flags:
            if _category_of(flag) == "" and _is_visible(flag):
                result.add_flag("", flag)

    return result