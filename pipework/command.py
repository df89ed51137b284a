"""Command facade: passthrough runs and captured-text runs built on the engine."""
import io
import subprocess
import sys
import warnings
from typing import Iterator

from pipework.errors import CommandWarning, SpawnFailure
from pipework.runner import check_status, execute, reap
from pipework.state import RunState


def run(state: RunState, label: str, argv) -> None:
    """
    Run a command on the caller's own stdin/stdout/stderr (no capture).
    A single string is a shell command line, so pipes and redirections work;
    a sequence is executed directly.
    """
    shell = isinstance(argv, str)
    cmdline = (argv,) if shell else tuple(str(a) for a in argv)
    if state.verbose:
        print(f"cmd running: {' '.join(cmdline)}", file=sys.stderr)
    try:
        if not cmdline:
            raise ValueError("empty command line")
        proc = subprocess.Popen(argv if shell else list(cmdline), shell=shell, close_fds=True)
    except (OSError, ValueError) as exc:
        state.record(label, cmdline, error=str(exc))
        raise SpawnFailure(f"failed to execute {label} command: {exc}", label, cmdline) from exc
    status = reap(proc)
    state.record(label, cmdline, status)
    check_status(label, cmdline, status)


def _lines(text: str) -> Iterator[str]:
    """Yield lines without newlines; trailing empty lines are dropped."""
    blanks = 0
    for line in io.StringIO(text):
        line = line.rstrip("\n")
        if not line:
            blanks += 1
            continue
        yield from [""] * blanks
        blanks = 0
        yield line


def capture(state: RunState, label: str, argv, lines: bool = False, input=None):
    """
    Run argv and return its output with one trailing newline removed,
    or a lazy iterator of lines when lines=True.
    Error text from a successful command is reported as a CommandWarning.
    """
    out, err = execute(state, label, argv, input=input)
    if err:
        warnings.warn(f"{label} had error output:\n{err}", CommandWarning, stacklevel=2)
    if lines:
        return _lines(out)
    return out[:-1] if out.endswith("\n") else out
