"""Command tree, flag lookup, typed positional arguments and categories for command line tools."""

__version__ = "0.1.0"
__all__ = ["args", "category", "command", "tracing"]