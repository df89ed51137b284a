"""Run state: flags, program path cache and execution log for one program run."""
import sys
from dataclasses import dataclass, field, fields, is_dataclass

from pipework import config
from pipework.logs import ExecutionLog, LogEntry


@dataclass
class RunState:
    verbose: bool = False
    logging: bool = False
    programs: dict[str, str] = field(default_factory=dict)
    exec_log: ExecutionLog = field(default_factory=ExecutionLog)

    @classmethod
    def from_env(cls, verbose: bool | None = None, logging: bool | None = None) -> "RunState":
        """Build a state from PIPEWORK_VERBOSE/PIPEWORK_LOGGING unless overridden."""
        return cls(
            verbose=config.VERBOSE if verbose is None else verbose,
            logging=config.LOGGING if logging is None else logging,
        )

    @property
    def log_enabled(self) -> bool:
        return self.verbose or self.logging

    def record(self, label: str, argv, status=None, out=None, err=None, error=None) -> None:
        """Append a log entry when verbose or logging mode is on; verbose also prints its summary."""
        if not self.log_enabled:
            return
        entry = LogEntry(
            label=label,
            argv=tuple(argv),
            returncode=status.code if status is not None else None,
            signal=status.signal if status is not None else None,
            coredump=status.coredump if status is not None else False,
            out=out,
            err=err,
            error=error,
        )
        self.exec_log.append(entry)
        if self.verbose:
            print("\n".join(entry.summary_lines()), file=sys.stderr)

    def dump(self) -> str:
        return odump(
            {
                "flags": {"verbose": self.verbose, "logging": self.logging},
                "programs": self.programs,
                "log": {"cmd": list(self.exec_log)},
            },
            0,
        )


def odump(obj, level: int = 0) -> str:
    """
    Render nested dicts, lists and dataclasses as indented text, four spaces per level.
    Dict keys are sorted case-insensitively; None renders as "undef".
    """
    indent = "    " * level
    if obj is None:
        return ""
    if is_dataclass(obj) and not isinstance(obj, type):
        obj = {f.name: getattr(obj, f.name) for f in fields(obj)}
    if isinstance(obj, dict):
        out = ""
        for key in sorted(obj, key=lambda k: str(k).lower()):
            value = obj[key]
            if isinstance(value, (dict, list, tuple)) or is_dataclass(value):
                out += f"{indent}{key}:\n"
                out += odump(value, level + 1)
            else:
                out += f"{indent}{key}: {'undef' if value is None else value}\n"
        return out
    if isinstance(obj, (list, tuple)):
        out = ""
        for item in obj:
            if isinstance(item, (dict, list, tuple)) or is_dataclass(item):
                out += odump(item, level + 1)
            else:
                out += f"{indent}{item}\n"
        return out
    return f"{indent}[value]{obj}\n"
