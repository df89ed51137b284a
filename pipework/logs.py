"""Execution log: in-memory record of every command, and helpers to save it."""
import json
from dataclasses import asdict, dataclass
from pathlib import Path

from pipework.config import LOG_DIR


def ensure_log_dir(log_dir: Path = LOG_DIR) -> Path:
    """Create pipework_logs if needed; return the directory."""
    log_dir.mkdir(parents=True, exist_ok=True)
    return log_dir


@dataclass(frozen=True)
class LogEntry:
    label: str
    argv: tuple[str, ...]
    returncode: int | None = None
    signal: int | None = None
    coredump: bool = False
    out: str | None = None
    err: str | None = None
    error: str | None = None

    def summary_lines(self) -> list[str]:
        lines = [f"{self.label}: {' '.join(self.argv)}"]
        if self.error:
            lines.append(f"  error: {self.error}")
        if self.signal is not None:
            lines.append(f"  signal {self.signal}{' with coredump' if self.coredump else ''}")
        elif self.returncode is not None:
            lines.append(f"  returncode {self.returncode}")
        return lines


class ExecutionLog:
    """Append-only list of LogEntry records."""

    def __init__(self) -> None:
        self._entries: list[LogEntry] = []

    def append(self, entry: LogEntry) -> None:
        self._entries.append(entry)

    @property
    def entries(self) -> tuple[LogEntry, ...]:
        return tuple(self._entries)

    def last(self) -> LogEntry | None:
        return self._entries[-1] if self._entries else None

    def __iter__(self):
        return iter(tuple(self._entries))

    def __len__(self) -> int:
        return len(self._entries)


def save_exec_log(log: ExecutionLog, log_path: Path) -> None:
    """Write the execution log to log_path as a JSON list."""
    ensure_log_dir(log_path.parent)
    payload = [asdict(entry) for entry in log]
    log_path.write_text(json.dumps(payload, indent=2) + "\n", encoding="utf-8")
