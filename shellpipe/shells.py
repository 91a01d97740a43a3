"""Shell dialect resolution: invocation flags per shell basename."""

from __future__ import annotations

import os

from shellpipe.models import ShellDialect, ShellInvocation

FALLBACK_SHELL = "/bin/sh"

_DIALECTS: dict[str, ShellDialect] = {
    "sh": ShellDialect.POSIX,
    "zsh": ShellDialect.POSIX,
    "bash": ShellDialect.LOGIN,
    "fish": ShellDialect.LOGIN,
    "nu": ShellDialect.LOGIN,
    "csh": ShellDialect.CSH,
    "tcsh": ShellDialect.CSH,
}

_FLAGS: dict[ShellDialect, tuple[str, ...]] = {
    ShellDialect.POSIX: ("-c",),
    ShellDialect.LOGIN: ("-l", "-c"),
    ShellDialect.CSH: ("-d", "-e", "-c"),
    ShellDialect.UNKNOWN: ("-c",),
}


def shell_name(shell_path: str) -> str | None:
    """Return the final path component of a shell path, or None if there is none."""
    if not shell_path:
        return None
    name = os.path.basename(shell_path)
    if not name or name in (".", ".."):
        return None
    return name


def classify_shell(shell_path: str) -> ShellDialect:
    name = shell_name(shell_path)
    if name is None:
        return ShellDialect.UNKNOWN
    return _DIALECTS.get(name, ShellDialect.UNKNOWN)


def resolve_shell(shell_path: str) -> ShellInvocation:
    """Map a shell path to the executable, flags and dialect used to run `-c` commands.

    Unknown shells (and paths without a basename) run under /bin/sh.
    """
    dialect = classify_shell(shell_path)
    executable = FALLBACK_SHELL if dialect is ShellDialect.UNKNOWN else shell_path
    return ShellInvocation(
        executable=executable,
        flags=list(_FLAGS[dialect]),
        dialect=dialect,
    )
