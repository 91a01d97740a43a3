"""Shell statements that assign (and optionally export) a variable."""

from __future__ import annotations

import re

from shellpipe.errors import QuotingError
from shellpipe.shells import shell_name

# Characters that never need quoting in sh, fish or csh words.
_UNSAFE = re.compile(r"[^\w@%+=:,./-]", re.ASCII)

# basename → (export template, plain template)
_TEMPLATES: dict[str, tuple[str, str]] = {
    "sh": ("export {name}={value}", "{name}={value}"),
    "zsh": ("export {name}={value}", "{name}={value}"),
    "bash": ("export {name}={value}", "{name}={value}"),
    "fish": ("set -gx {name} {value}", "set {name} {value}"),
    "csh": ("setenv {name} {value}", "set {name} {value}"),
    "tcsh": ("setenv {name} {value}", "set {name} {value}"),
}


def quote_value(value: str, shell: str | None = None) -> str:
    """Quote a value as a single shell word.

    Safe values are returned as-is, everything else is wrapped in single
    quotes with embedded quotes written as '\\''. fish also interprets
    backslashes inside single quotes, so they are doubled for fish.
    """
    if "\0" in value:
        raise QuotingError("cannot quote a value containing a NUL byte")
    if not value:
        return "''"
    if _UNSAFE.search(value) is None:
        return value
    if shell is not None and shell_name(shell) == "fish":
        value = value.replace("\\", "\\\\")
    return "'" + value.replace("'", "'\\''") + "'"


def format_assignment(shell: str, export: bool, name: str, value: str) -> str:
    """Return a statement assigning `value` to `name` in the given shell's syntax.

    `shell` is a shell path or bare name. Shells without a known assignment
    syntax yield an empty statement. Raises QuotingError for unquotable values.
    """
    quoted = quote_value(value, shell)
    templates = _TEMPLATES.get(shell_name(shell) or "")
    if templates is None:
        return ""
    template = templates[0] if export else templates[1]
    return template.format(name=name, value=quoted)
