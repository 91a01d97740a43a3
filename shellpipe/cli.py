"""CLI entry point: pipe OUT ERR [--exit-code CODE] -- command ..."""

from __future__ import annotations

import argparse
import shlex
import sys

from shellpipe import __version__
from shellpipe.assign import format_assignment
from shellpipe.capture import run_capture
from shellpipe.config import ConfigError, load_config
from shellpipe.detection import detect_shell
from shellpipe.errors import ArgumentTokenizationError, QuotingError, SpawnError
from shellpipe.models import PipeDefaults, ShellInvocation
from shellpipe.progress import Diagnostics
from shellpipe.shells import resolve_shell


def build_parser(defaults: PipeDefaults | None = None) -> argparse.ArgumentParser:
    defaults = defaults or PipeDefaults()
    parser = argparse.ArgumentParser(
        prog="pipe",
        description="Capture the standard output and error of a command "
                    "as shell variable assignments",
        epilog='example: eval "$(pipe OUT ERR --exit-code CODE -- make test)"',
    )
    parser.add_argument("--version", "-V", action="version",
                        version=f"%(prog)s {__version__}")
    parser.add_argument("stdout", help="Variable to store the standard output in")
    parser.add_argument("stderr", help="Variable to store the standard error in")
    parser.add_argument("command", nargs="*",
                        help="The command to run (separate it with -- if it has flags)")
    parser.add_argument("--exit-code", metavar="NAME", default=None,
                        help="Variable to store the exit code in (not captured if omitted)")
    parser.add_argument("-x", "--export", action="store_true", default=defaults.export,
                        help="Export the variables instead of just setting them")
    parser.add_argument("-c", "--capture", action="store_false", default=defaults.capture,
                        help="Also pass the command's output through to the terminal")
    parser.add_argument("-o", "--capture-out", action="store_false",
                        default=defaults.capture_out,
                        help="Also pass standard output through to the terminal "
                             "(defaults to the --capture setting)")
    parser.add_argument("-e", "--capture-err", action="store_false",
                        default=defaults.capture_err,
                        help="Also pass standard error through to the terminal "
                             "(defaults to the --capture setting)")
    parser.add_argument("-s", "--sh", action="store_true", default=defaults.sh,
                        help="Run the command through the shell instead of directly")
    parser.add_argument("--shell", default=defaults.shell,
                        help="Shell used for --sh and for the assignment syntax "
                             "(default: parent process, then $SHELL, then /bin/sh)")
    parser.add_argument("--config", default=None,
                        help="YAML file with default settings")
    parser.add_argument("--debug", action="store_true",
                        help="Print diagnostics to standard error")
    return parser


def split_command(argv: list[str]) -> tuple[list[str], list[str]]:
    """Split argv at the first `--` into (pipe's own arguments, command words).

    argparse fills a trailing `*` positional as soon as the variable names
    are seen, so words after `--` are attached to `command` here instead.
    """
    if "--" not in argv:
        return argv, []
    idx = argv.index("--")
    return argv[:idx], argv[idx + 1:]


def _preparse(argv: list[str]) -> argparse.Namespace:
    """Pick out --config and --debug before the full parser is built."""
    pre = argparse.ArgumentParser(add_help=False)
    pre.add_argument("--config", default=None)
    pre.add_argument("--debug", action="store_true")
    args, _ = pre.parse_known_args(argv)
    return args


def tokenize_command(words: list[str]) -> list[str]:
    """Split a single command string into shell words; several words are taken as-is."""
    if len(words) == 1:
        try:
            tokens = shlex.split(words[0])
        except ValueError as e:
            raise ArgumentTokenizationError(
                f"failed to parse command arguments {words[0]!r}: {e}"
            ) from e
    else:
        tokens = list(words)
    if not tokens:
        raise ArgumentTokenizationError("no command given")
    return tokens


def build_argv(words: list[str], tokens: list[str], sh: bool,
               invocation: ShellInvocation) -> list[str]:
    """Return the child argv: the tokens, or the shell wrapping the command string."""
    if sh:
        command = words[0] if len(words) == 1 else " ".join(words)
        return [invocation.executable, *invocation.flags, command]
    return tokens


def main(argv: list[str] | None = None) -> int:
    argv = list(sys.argv[1:] if argv is None else argv)
    argv, trailing = split_command(argv)
    pre = _preparse(argv)
    diagnostics = Diagnostics(debug=pre.debug)

    try:
        config = load_config(pre.config)
    except ConfigError as e:
        diagnostics.error(f"config error: {e}")
        return 1
    if config.source:
        diagnostics.debug(f"config: {config.source}")

    args = build_parser(config.defaults).parse_args(argv)
    args.command = [*args.command, *trailing]
    capture_out = args.capture if args.capture_out is None else args.capture_out
    capture_err = args.capture if args.capture_err is None else args.capture_err

    try:
        tokens = tokenize_command(args.command)
    except ArgumentTokenizationError as e:
        diagnostics.error(str(e))
        return 1

    shell_path = args.shell or detect_shell()
    invocation = resolve_shell(shell_path)
    diagnostics.debug(
        f"shell: {shell_path} → {invocation.executable} "
        f"{' '.join(invocation.flags)} ({invocation.dialect.value})"
    )

    child_argv = build_argv(args.command, tokens, args.sh, invocation)
    diagnostics.debug(f"running: {shlex.join(child_argv)}")

    try:
        result = run_capture(
            child_argv[0],
            child_argv[1:],
            echo_stdout=not capture_out,
            echo_stderr=not capture_err,
            reporter=diagnostics,
        )
    except SpawnError as e:
        diagnostics.error(str(e))
        return 1

    assignments = [(args.stdout, result.stdout), (args.stderr, result.stderr)]
    if args.exit_code:
        assignments.append((args.exit_code, str(result.exit_code)))

    for name, value in assignments:
        try:
            statement = format_assignment(invocation.executable, args.export, name, value)
        except QuotingError as e:
            diagnostics.error(f"failed to quote {name}: {e}")
            return 1
        if statement:
            print(f"{statement};", flush=True)
        else:
            diagnostics.debug(f"no assignment syntax for {invocation.executable}; skipped {name}")

    return 0


def entrypoint() -> None:
    """Console script entrypoint."""
    try:
        code = main()
    except KeyboardInterrupt:
        code = 130
    raise SystemExit(code)


if __name__ == "__main__":
    entrypoint()
