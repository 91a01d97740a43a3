"""Error types raised while capturing a command and formatting its output."""

from __future__ import annotations


class PipeError(Exception):
    pass


class ArgumentTokenizationError(PipeError):
    """The command string could not be split into shell words."""


class SpawnError(PipeError):
    """The operating system refused to start the command."""

    def __init__(self, executable: str, reason: str):
        super().__init__(f"failed to spawn '{executable}': {reason}")
        self.executable = executable
        self.reason = reason


class StreamCaptureError(PipeError):
    pass


class StreamJoinError(StreamCaptureError):
    """A capture worker for one stream did not finish cleanly."""

    def __init__(self, stream: str, worker: str, cause: BaseException):
        super().__init__(f"{stream} {worker} failed: {cause}")
        self.stream = stream
        self.worker = worker
        self.cause = cause


class QuotingError(PipeError):
    """A value cannot be written as a shell-quoted literal."""
