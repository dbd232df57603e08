"""Opt-in diagnostic tracing written to standard error."""

from __future__ import annotations

import inspect
import os
import sys

_enabled = os.environ.get("CLIKIT_TRACING") == "on"


def tracing_enabled() -> bool:
    """Return whether trace output is currently switched on."""
    return _enabled


def set_tracing(enabled: bool) -> None:
    """Switch trace output on or off."""
    global _enabled
    _enabled = bool(enabled)


def _format(fmt: str, args: tuple) -> str:
    if not args:
        return fmt
    try:
        return fmt % args
    except (TypeError, ValueError):
        return " ".join([fmt, *(repr(a) for a in args)])


def tracef(fmt: str, *args) -> None:
    """Write one trace line, tagged with the caller's location, if tracing is on."""
    if not _enabled:
        return

    message = _format(fmt, args)
    if not message.endswith("\n"):
        message += "\n"

    frame = inspect.currentframe()
    caller = frame.f_back if frame is not None else None
    if caller is not None:
        location = f"{caller.f_code.co_filename}:{caller.f_lineno} ({caller.f_code.co_name})"
    else:
        location = "<unknown>:0 (<unknown>)"
    del frame, caller

    sys.stderr.write(f"## CLIKIT TRACE {location} {message}")