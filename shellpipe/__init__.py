"""Capture a command's stdout, stderr and exit code as shell variable assignments."""

__version__ = "0.1.0"
