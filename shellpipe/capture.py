"""Stream capture pipeline: runs a command and collects stdout/stderr concurrently.

Each output stream gets two threads: a reader that pulls one line at a time
from the pipe (echoing it to the terminal when asked) and an accumulator
that joins the forwarded lines into the final string. Both pipes are drained
at the same time, so a child that fills one pipe buffer before writing to the
other cannot deadlock us. The calling thread only waits for the child to exit.
"""

from __future__ import annotations

import queue
import subprocess
import sys
import threading
from typing import BinaryIO, TextIO

from shellpipe.errors import SpawnError, StreamJoinError
from shellpipe.models import CaptureResult
from shellpipe.progress import Diagnostics

# Marks the end of a reader → accumulator channel.
_CLOSED = None


def _read_lines(pipe: BinaryIO, channel: queue.SimpleQueue, echo_to: TextIO | None,
                result: dict) -> None:
    """Read `pipe` line by line, echoing to `echo_to` and forwarding each line.

    A failed echo disables echoing for the rest of the stream but reading
    continues, so the child never blocks on a full pipe.
    """
    try:
        for raw in iter(pipe.readline, b""):
            line = raw.decode("utf-8", errors="replace")
            if echo_to is not None:
                try:
                    echo_to.write(line)
                    echo_to.flush()
                except (OSError, ValueError) as e:
                    result["echo_error"] = e
                    echo_to = None
            channel.put(line)
    except Exception as e:
        result["error"] = e
    finally:
        channel.put(_CLOSED)
        pipe.close()


def _accumulate(channel: queue.SimpleQueue, result: dict) -> None:
    """Concatenate every non-empty line from `channel` until it is closed."""
    parts: list[str] = []
    try:
        while (line := channel.get()) is not _CLOSED:
            if not line:
                continue
            parts.append(line)
        result["output"] = "".join(parts)
    except Exception as e:
        result["error"] = e


def _exit_code(returncode: int) -> int:
    # Negative return codes mean the child was killed by a signal.
    return returncode if returncode >= 0 else 1


def run_capture(executable: str, args: list[str], echo_stdout: bool, echo_stderr: bool,
                echo_stream: TextIO | None = None,
                reporter: Diagnostics | None = None) -> CaptureResult:
    """Run `executable` with `args` and return its captured output and exit code.

    Lines from a stream whose echo flag is set are also written to
    `echo_stream` (stderr by default) as they arrive; they are accumulated
    either way. Raises SpawnError if the process cannot be started. A
    capture worker that fails is reported through `reporter` and its
    stream's text is replaced with "".
    """
    echo_to = echo_stream if echo_stream is not None else sys.stderr
    reporter = reporter if reporter is not None else Diagnostics()

    try:
        proc = subprocess.Popen(
            [executable, *args],
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,   # separate pipes, not merged
        )
    except (OSError, ValueError) as e:
        reason = getattr(e, "strerror", None) or str(e)
        raise SpawnError(executable, reason) from e

    streams = {
        "stdout": (proc.stdout, echo_stdout),
        "stderr": (proc.stderr, echo_stderr),
    }
    readers: dict[str, tuple[threading.Thread, dict]] = {}
    accumulators: dict[str, tuple[threading.Thread, dict]] = {}

    for name, (pipe, echo) in streams.items():
        channel: queue.SimpleQueue = queue.SimpleQueue()
        reader_result: dict = {"error": None, "echo_error": None}
        acc_result: dict = {"output": None, "error": None}
        reader = threading.Thread(
            target=_read_lines,
            args=(pipe, channel, echo_to if echo else None, reader_result),
            name=f"pipe-{name}-reader",
            daemon=True,
        )
        accumulator = threading.Thread(
            target=_accumulate,
            args=(channel, acc_result),
            name=f"pipe-{name}-accumulator",
            daemon=True,
        )
        reader.start()
        accumulator.start()
        readers[name] = (reader, reader_result)
        accumulators[name] = (accumulator, acc_result)

    exit_code = _exit_code(proc.wait())
    reporter.debug(f"child exited: exit_code={exit_code}")

    for name, (thread, result) in readers.items():
        thread.join()
        if result["echo_error"] is not None:
            reporter.warn(f"stopped echoing {name}: {result['echo_error']}")
        if result["error"] is not None:
            reporter.warn(str(StreamJoinError(name, "reader", result["error"])))

    outputs: dict[str, str] = {}
    for name, (thread, result) in accumulators.items():
        thread.join()
        if result["error"] is not None or result["output"] is None:
            cause = result["error"] or RuntimeError("no output produced")
            reporter.warn(str(StreamJoinError(name, "accumulator", cause)))
            outputs[name] = ""
        else:
            outputs[name] = result["output"]

    return CaptureResult(
        stdout=outputs["stdout"],
        stderr=outputs["stderr"],
        exit_code=exit_code,
    )
