"""Subprocess engine: spawn a child on three pipes, feed input, drain output and error, decode status."""
import os
import selectors
import subprocess
import sys
from dataclasses import dataclass

from pipework.config import READ_CHUNK, TEXT_ENCODING
from pipework.errors import AbnormalExit, SignalTermination, SpawnFailure, StreamWriteFailure
from pipework.state import RunState


@dataclass(frozen=True)
class ExitStatus:
    """Decoded wait status: exactly one of code/signal is set."""
    code: int | None = None
    signal: int | None = None
    coredump: bool = False

    @classmethod
    def from_wait_status(cls, raw: int) -> "ExitStatus":
        if os.WIFSIGNALED(raw):
            return cls(signal=os.WTERMSIG(raw), coredump=os.WCOREDUMP(raw))
        return cls(code=os.WEXITSTATUS(raw))

    @property
    def success(self) -> bool:
        return self.signal is None and self.code == 0


@dataclass(frozen=True)
class Invocation:
    label: str
    argv: tuple[str, ...]
    input: tuple[str, ...] | None = None

    @classmethod
    def build(cls, label: str, argv, input=None) -> "Invocation":
        if isinstance(input, str):
            input = (input,)
        return cls(
            label=label,
            argv=tuple(str(a) for a in argv),
            input=tuple(input) if input is not None else None,
        )


@dataclass(frozen=True)
class ExecResult:
    """Status plus captured text; None means the stream was not captured, "" means it was empty."""
    status: ExitStatus
    out: str | None
    err: str | None


def reap(proc: subprocess.Popen) -> ExitStatus:
    """Wait for proc and decode its raw status (Popen.wait drops the core-dump flag)."""
    _pid, raw = os.waitpid(proc.pid, 0)
    proc.returncode = os.waitstatus_to_exitcode(raw)
    return ExitStatus.from_wait_status(raw)


def check_status(label: str, argv, status: ExitStatus) -> None:
    """Raise SignalTermination or AbnormalExit unless status is success."""
    if status.signal is not None:
        raise SignalTermination(
            f"{label} command died with signal {status.signal}, "
            f"{'with' if status.coredump else 'without'} coredump",
            label, argv, status,
        )
    if status.code != 0:
        raise AbnormalExit(f"{label} command exited with value {status.code}", label, argv, status)


def _spawn(inv: Invocation) -> subprocess.Popen:
    if not inv.argv:
        raise ValueError("empty command line")
    # Popen closes the child's copies of the parent ends and the parent's copies of the child ends
    return subprocess.Popen(
        list(inv.argv),
        stdin=subprocess.PIPE,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        bufsize=0,
        close_fds=True,
    )


def _encode_input(lines: tuple[str, ...] | None) -> bytes | None:
    """Join input lines with newlines, add a final newline and encode; None means no input."""
    if lines is None:
        return None
    return ("\n".join(str(line) for line in lines) + "\n").encode(TEXT_ENCODING)


def _feed(proc: subprocess.Popen, payload: bytes | None) -> OSError | None:
    """
    Write all input in one blocking write, then close the write end so the child sees EOF.
    The child must take its input before filling the output pipe; large input paired
    with large output is not supported.
    """
    try:
        if payload is not None:
            data = memoryview(payload)
            while data:
                written = proc.stdin.write(data)
                data = data[written:]
    except OSError as exc:
        return exc
    finally:
        proc.stdin.close()
    return None


def _read_available(fd: int, buf: bytearray) -> bool:
    """Read everything available on non-blocking fd into buf; return True on hang-up."""
    while True:
        try:
            chunk = os.read(fd, READ_CHUNK)
        except BlockingIOError:
            return False
        if not chunk:
            return True
        buf.extend(chunk)


def _drain(proc: subprocess.Popen) -> tuple[bytes, bytes]:
    """Collect stdout and stderr together until both hang up."""
    out_fd, err_fd = proc.stdout.fileno(), proc.stderr.fileno()
    buffers = {out_fd: bytearray(), err_fd: bytearray()}
    try:
        with selectors.DefaultSelector() as selector:
            for stream in (proc.stdout, proc.stderr):
                os.set_blocking(stream.fileno(), False)
                selector.register(stream, selectors.EVENT_READ)
            while selector.get_map():
                for key, _events in selector.select():
                    # Linux may report only a hang-up once the writer closes, so read on any event
                    if _read_available(key.fd, buffers[key.fd]):
                        selector.unregister(key.fileobj)
                        key.fileobj.close()
    finally:
        proc.stdout.close()
        proc.stderr.close()
    return bytes(buffers[out_fd]), bytes(buffers[err_fd])


def _decode(data: bytes) -> str:
    return data.decode(TEXT_ENCODING, errors="replace")


def execute_invocation(state: RunState, inv: Invocation) -> ExecResult:
    """
    Run inv with captured output and error, log it, and return the result.
    Raises SpawnFailure, StreamWriteFailure, SignalTermination or AbnormalExit.
    """
    if state.verbose:
        print(f"execute running: {' '.join(inv.argv)}", file=sys.stderr)
    try:
        payload = _encode_input(inv.input)
    except UnicodeError as exc:
        message = f"{inv.label}: failed to encode child process input: {exc}"
        state.record(inv.label, inv.argv, error=message)
        raise StreamWriteFailure(message, inv.label, inv.argv) from exc

    try:
        proc = _spawn(inv)
    except (OSError, ValueError) as exc:
        state.record(inv.label, inv.argv, error=str(exc))
        raise SpawnFailure(f"failed to execute {inv.label} command: {exc}", inv.label, inv.argv) from exc

    try:
        write_error = _feed(proc, payload)
        out, err = _drain(proc)
    finally:
        status = reap(proc)
    result = ExecResult(status=status, out=_decode(out), err=_decode(err))

    write_message = None
    if write_error is not None:
        write_message = f"{inv.label}: failed to write child process input: {write_error}"
    state.record(inv.label, inv.argv, status, result.out, result.err, error=write_message)

    if write_message is not None:
        raise StreamWriteFailure(write_message, inv.label, inv.argv, status) from write_error
    check_status(inv.label, inv.argv, status)
    return result


def execute(state: RunState, label: str, argv, input=None) -> tuple[str, str]:
    """Run argv, optionally feeding input lines; return (output, error) text."""
    result = execute_invocation(state, Invocation.build(label, argv, input))
    return result.out, result.err

