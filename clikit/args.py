"""Positional arguments: the parsed argument list and typed argument parsers."""

from __future__ import annotations

import warnings
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, tzinfo
from typing import Any, Callable, Iterable, Iterator, Sequence

from .tracing import tracef

RFC3339 = "%Y-%m-%dT%H:%M:%S%z"
DATETIME = "%Y-%m-%d %H:%M:%S"

_INT_MIN = -(1 << 63)
_INT_MAX = (1 << 63) - 1
_UINT_MAX = (1 << 64) - 1

_UNSET = object()


class Args:
    """An immutable view of the positional arguments left after parsing."""

    __slots__ = ("_values",)

    def __init__(self, values: Iterable[str] = ()):
        self._values = list(values)

    def get(self, n: int) -> str:
        """Return the nth argument, or an empty string."""
        if 0 <= n < len(self._values):
            return self._values[n]
        return ""

    def first(self) -> str:
        """Return the first argument, or an empty string."""
        return self.get(0)

    def tail(self) -> list[str]:
        """Return every argument but the first."""
        if len(self._values) >= 2:
            return self._values[1:]
        return []

    def present(self) -> bool:
        """Return whether there is at least one argument."""
        return bool(self._values)

    def slice(self) -> list[str]:
        """Return a copy of all arguments."""
        return list(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._values))

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Args):
            return self._values == other._values
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Args({self._values!r})"


class ArgumentCountError(ValueError):
    """Raised when fewer values than an argument's minimum were given."""


def _syntax_error(text: str) -> ValueError:
    return ValueError(f'parsing "{text}": invalid syntax')


def _range_error(text: str) -> ValueError:
    return ValueError(f'parsing "{text}": value out of range')


def _parse_int(text: str, base: int, signed: bool) -> int:
    if not text or text != text.strip():
        raise _syntax_error(text)
    if not signed and text.startswith(("-", "+")):
        raise _syntax_error(text)
    try:
        if base == 0:
            body = text.lstrip("+-")
            sign = text[: len(text) - len(body)]
            if len(body) > 1 and body[0] == "0" and body[1].isdigit():
                result = int(sign + body[1:], 8)
            else:
                result = int(text, 0)
        else:
            result = int(text, base)
    except ValueError:
        raise _syntax_error(text) from None
    low, high = (_INT_MIN, _INT_MAX) if signed else (0, _UINT_MAX)
    if not low <= result <= high:
        raise _range_error(text)
    return result


def _parse_float(text: str) -> float:
    if not text or text != text.strip() or "_" in text:
        raise _syntax_error(text)
    try:
        return float(text)
    except ValueError:
        pass
    if "0x" in text.lower():
        try:
            return float.fromhex(text)
        except ValueError:
            pass
    raise _syntax_error(text)


def _parse_string(text: str, trim_space: bool) -> str:
    return text.strip() if trim_space else text


def _parse_timestamp(text: str, layouts: Sequence[str], timezone: tzinfo | None) -> datetime:
    parsed: datetime | None = None
    if layouts:
        for layout in layouts:
            try:
                parsed = datetime.strptime(text, layout)
                break
            except ValueError:
                continue
    else:
        try:
            iso = text[:-1] + "+00:00" if text.endswith("Z") else text
            parsed = datetime.fromisoformat(iso)
        except ValueError:
            parsed = None
    if parsed is None:
        raise ValueError(f'parsing time "{text}": no matching layout')
    if parsed.tzinfo is None and timezone is not None:
        parsed = parsed.replace(tzinfo=timezone)
    return parsed


class Argument(ABC):
    """A positional argument that consumes values from the command line."""

    name: str = ""

    def has_name(self, name: str) -> bool:
        """Return whether this argument is known by ``name``."""
        return name == self.name

    @abstractmethod
    def parse(self, args: Sequence[str]) -> list[str]:
        """Consume values from ``args`` and return the ones left over."""

    @abstractmethod
    def usage(self) -> str:
        """Return the text shown for this argument in help output."""

    @abstractmethod
    def get(self) -> Any:
        """Return the parsed value, or the default before parsing."""


@dataclass(kw_only=True, eq=False)
class ArgumentBase(Argument):
    """An argument that takes at most one value."""

    name: str = ""
    value: Any = None
    destination: Callable[[Any], None] | None = None
    usage_text: str = ""
    _parsed: Any = field(default=_UNSET, init=False, repr=False)

    @abstractmethod
    def _convert(self, text: str) -> Any:
        """Turn one command-line string into a value."""

    def usage(self) -> str:
        return self.usage_text or self.name

    def parse(self, args: Sequence[str]) -> list[str]:
        tracef("parsing argument %s with %r", self.name, list(args))
        self._parsed = self.value
        if args:
            self._parsed = self._convert(args[0])
            tracef("argument %s set to %r", self.name, self._parsed)
        if self.destination is not None:
            self.destination(self._parsed)
        return list(args[1:])

    def get(self) -> Any:
        if self._parsed is not _UNSET:
            return self._parsed
        return self.value


@dataclass(kw_only=True, eq=False)
class ArgumentsBase(Argument):
    """An argument that takes between ``min`` and ``max`` values; ``max=-1`` is unlimited."""

    name: str = ""
    destination: Callable[[list], None] | None = None
    usage_text: str = ""
    min: int = 0
    max: int = 0
    _values: list | None = field(default=None, init=False, repr=False)

    @abstractmethod
    def _convert(self, text: str) -> Any:
        """Turn one command-line string into a value."""

    def usage(self) -> str:
        if self.usage_text:
            return self.usage_text
        if self.min == 0:
            if self.max == 1:
                return f"[{self.name}]"
            return f"[{self.name} ...]"
        return f"{self.name} [{self.name} ...]"

    def parse(self, args: Sequence[str]) -> list[str]:
        tracef("parsing arguments %s with %r", self.name, list(args))
        if self.max == 0:
            warnings.warn(
                f"args {self.name} has max 0, not parsing argument", RuntimeWarning, stacklevel=2
            )
            return list(args)
        if self.max != -1 and self.min > self.max:
            warnings.warn(
                f"args {self.name} has min[{self.min}] > max[{self.max}], not parsing argument",
                RuntimeWarning,
                stacklevel=2,
            )
            return list(args)

        self._values = []
        for text in args:
            self._values.append(self._convert(text))
            if self.max > -1 and len(self._values) >= self.max:
                break

        count = len(self._values)
        if count < self.min:
            raise ArgumentCountError(
                f"sufficient count of arg {self.name} not provided, given {count} expected {self.min}"
            )

        if self.destination is not None:
            self.destination(list(self._values))
        return list(args[count:])

    def get(self) -> list:
        if self._values is not None:
            return list(self._values)
        return []


@dataclass(kw_only=True, eq=False)
class StringArg(ArgumentBase):
    """A single string argument."""

    value: str = ""
    trim_space: bool = False

    def _convert(self, text: str) -> str:
        return _parse_string(text, self.trim_space)


@dataclass(kw_only=True, eq=False)
class IntArg(ArgumentBase):
    """A single signed 64-bit integer argument."""

    value: int = 0
    base: int = 0

    def _convert(self, text: str) -> int:
        return _parse_int(text, self.base, signed=True)


@dataclass(kw_only=True, eq=False)
class UintArg(ArgumentBase):
    """A single unsigned 64-bit integer argument."""

    value: int = 0
    base: int = 0

    def _convert(self, text: str) -> int:
        return _parse_int(text, self.base, signed=False)


@dataclass(kw_only=True, eq=False)
class FloatArg(ArgumentBase):
    """A single floating-point argument."""

    value: float = 0.0

    def _convert(self, text: str) -> float:
        return _parse_float(text)


@dataclass(kw_only=True, eq=False)
class TimestampArg(ArgumentBase):
    """A single timestamp argument parsed with ``strptime`` layouts."""

    value: datetime | None = None
    layouts: Sequence[str] = ()
    timezone: tzinfo | None = None

    def _convert(self, text: str) -> datetime:
        return _parse_timestamp(text, self.layouts, self.timezone)


@dataclass(kw_only=True, eq=False)
class StringArgs(ArgumentsBase):
    """Several string arguments."""

    trim_space: bool = False

    def _convert(self, text: str) -> str:
        return _parse_string(text, self.trim_space)


@dataclass(kw_only=True, eq=False)
class IntArgs(ArgumentsBase):
    """Several signed integer arguments."""

    base: int = 0

    def _convert(self, text: str) -> int:
        return _parse_int(text, self.base, signed=True)


@dataclass(kw_only=True, eq=False)
class UintArgs(ArgumentsBase):
    """Several unsigned integer arguments."""

    base: int = 0

    def _convert(self, text: str) -> int:
        return _parse_int(text, self.base, signed=False)


@dataclass(kw_only=True, eq=False)
class FloatArgs(ArgumentsBase):
    """Several floating-point arguments."""

    def _convert(self, text: str) -> float:
        return _parse_float(text)


@dataclass(kw_only=True, eq=False)
class TimestampArgs(ArgumentsBase):
    """Several timestamp arguments."""

    layouts: Sequence[str] = ()
    timezone: tzinfo | None = None

    def _convert(self, text: str) -> datetime:
        return _parse_timestamp(text, self.layouts, self.timezone)


def any_arguments() -> list[Argument]:
    """Return an argument list that accepts any number of strings."""
    return [StringArgs(max=-1)]