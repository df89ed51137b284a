"""Exception types raised while locating and running external commands."""


class PipeworkError(Exception):
    """Base error; str() is the human-readable message."""

    def __init__(self, message: str, label: str | None = None, argv=None, status=None):
        super().__init__(message)
        self.message = message
        self.label = label
        self.argv = tuple(argv) if argv is not None else None
        self.status = status

    def __str__(self) -> str:
        return self.message


class SpawnFailure(PipeworkError):
    """The OS could not create the child process."""


class AbnormalExit(PipeworkError):
    """The child exited with a nonzero code."""

    @property
    def code(self) -> int:
        return self.status.code


class SignalTermination(PipeworkError):
    """The child was killed by a signal."""

    @property
    def signal(self) -> int:
        return self.status.signal

    @property
    def coredump(self) -> bool:
        return self.status.coredump


class StreamWriteFailure(PipeworkError):
    """Writing the child's input failed, usually because it exited early."""


class UnresolvedProgram(PipeworkError):
    """No executable was found for a logical program name."""

    def __init__(self, name: str, envvar: str):
        super().__init__(f"unknown secure location for {name} - install it or set {envvar} to point to it")
        self.name = name
        self.envvar = envvar


class CommandWarning(UserWarning):
    """A command succeeded but wrote to its error stream."""
