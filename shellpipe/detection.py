"""Discovery of the shell that invoked us."""

from __future__ import annotations

import os

from shellpipe.shells import FALLBACK_SHELL


def parent_executable() -> str | None:
    """Return the executable path of the parent process, if it can be read."""
    try:
        return os.readlink(f"/proc/{os.getppid()}/exe")
    except OSError:
        return None


def env_shell() -> str:
    """Return $SHELL, or /bin/sh when it is unset or empty."""
    return os.environ.get("SHELL", "").strip() or FALLBACK_SHELL


def detect_shell() -> str:
    """Return the parent process executable, else $SHELL, else /bin/sh."""
    return parent_executable() or env_shell()
