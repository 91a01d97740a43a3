"""Data classes for shell invocations and capture results."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class ShellDialect(str, Enum):
    """How a shell is invoked for a one-line command."""

    POSIX = "posix"       # sh, zsh
    LOGIN = "login"       # bash, fish, nu (login shell: -l -c)
    CSH = "csh"           # csh, tcsh
    UNKNOWN = "unknown"   # anything else; runs under /bin/sh


@dataclass(frozen=True)
class ShellInvocation:
    executable: str               # path actually executed (may be substituted)
    flags: list[str]              # flags placed before the command string
    dialect: ShellDialect


@dataclass(frozen=True)
class CaptureResult:
    stdout: str
    stderr: str
    exit_code: int


@dataclass
class PipeDefaults:
    """Defaults for command-line flags, loaded from the YAML config."""
    export: bool = False
    capture: bool = True
    capture_out: bool | None = None   # None → follow `capture`
    capture_err: bool | None = None   # None → follow `capture`
    sh: bool = False
    shell: str | None = None


@dataclass
class PipeConfig:
    version: str
    defaults: PipeDefaults = field(default_factory=PipeDefaults)
    source: str | None = None     # path the config was loaded from
