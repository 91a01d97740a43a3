"""Diagnostics on stderr. Stdout is reserved for the generated statements."""

from __future__ import annotations

import os
import sys
from typing import TextIO


# ── ANSI color constants ────────────────────────────────────

GRAY = "\033[90m"
YELLOW = "\033[33m"
RED = "\033[31m"
BOLD = "\033[1m"
RESET = "\033[0m"


def _color_enabled(stream: TextIO) -> bool:
    """Check whether colored output should be used on `stream`."""
    if os.environ.get("NO_COLOR") or os.environ.get("SHELLPIPE_NO_COLOR"):
        return False
    return hasattr(stream, "isatty") and stream.isatty()


def _debug_enabled() -> bool:
    return bool(os.environ.get("SHELLPIPE_DEBUG"))


def colorize(text: str, color: str) -> str:
    """Wrap text in ANSI color codes."""
    return f"{color}{text}{RESET}"


class Diagnostics:
    """Prefixed, optionally colored messages written to stderr."""

    def __init__(self, debug: bool = False, stream: TextIO | None = None):
        self.stream = stream if stream is not None else sys.stderr
        self.debug_enabled = debug or _debug_enabled()
        self._use_color = _color_enabled(self.stream)

    def _emit(self, label: str, color: str, message: str) -> None:
        prefix = f"pipe: {label}:"
        if self._use_color:
            prefix = colorize(prefix, color)
        print(f"{prefix} {message}", file=self.stream, flush=True)

    def error(self, message: str) -> None:
        self._emit("error", RED, message)

    def warn(self, message: str) -> None:
        self._emit("warning", YELLOW, message)

    def debug(self, message: str) -> None:
        if self.debug_enabled:
            self._emit("debug", GRAY, message)
