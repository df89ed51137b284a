import types
import warnings
from pathlib import Path

import pytest

from pipework.command import capture, run
from pipework.errors import AbnormalExit, CommandWarning, SignalTermination, SpawnFailure


def test_run_success_logs_without_text(state, sh) -> None:
    run(state, "noop", [sh, "-c", "exit 0"])
    entry = state.exec_log.last()
    assert entry.label == "noop"
    assert entry.returncode == 0
    assert entry.out is None
    assert entry.err is None


def test_run_inherits_caller_streams(state, echo, capfd) -> None:
    run(state, "passthrough", [echo, "straight to the terminal"])
    assert "straight to the terminal" in capfd.readouterr().out


def test_run_shell_command_line(state, tmp_path: Path) -> None:
    target = tmp_path / "piped.txt"
    run(state, "pipeline", f"echo type=c | tr a-z A-Z > {target}")
    assert target.read_text() == "TYPE=C\n"
    assert state.exec_log.last().argv == (f"echo type=c | tr a-z A-Z > {target}",)


def test_run_nonzero_exit(state) -> None:
    with pytest.raises(AbnormalExit) as excinfo:
        run(state, "shell-fail", "exit 4")
    assert excinfo.value.code == 4
    assert state.exec_log.last().returncode == 4


def test_run_signal(state, sh) -> None:
    with pytest.raises(SignalTermination) as excinfo:
        run(state, "shell-signal", [sh, "-c", "kill -KILL $$"])
    assert excinfo.value.signal == 9
    assert state.exec_log.last().signal == 9


def test_run_spawn_failure(state, tmp_path: Path) -> None:
    with pytest.raises(SpawnFailure):
        run(state, "missing", [str(tmp_path / "nope")])
    assert state.exec_log.last().error


def test_capture_strips_one_trailing_newline(state, sh) -> None:
    assert capture(state, "one", [sh, "-c", "echo hello"]) == "hello"
    assert capture(state, "two", [sh, "-c", "printf 'a\\n\\n'"]) == "a\n"
    assert capture(state, "none", [sh, "-c", "printf abc"]) == "abc"


def test_capture_warns_on_error_text(state, sh) -> None:
    with pytest.warns(CommandWarning, match="noisy had error output:\nsomething odd"):
        out = capture(state, "noisy", [sh, "-c", "echo result; echo something odd >&2"])
    assert out == "result"


def test_capture_silent_without_error_text(state, echo) -> None:
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        assert capture(state, "clean", [echo, "fine"]) == "fine"


def test_capture_lines_is_lazy(state, sh) -> None:
    result = capture(state, "listing", [sh, "-c", "printf 'sda disk\\nsda1 part\\nsda2 part\\n'"], lines=True)
    assert isinstance(result, types.GeneratorType)
    assert next(result) == "sda disk"
    assert [line for line in result if line.endswith("part")] == ["sda1 part", "sda2 part"]


def test_capture_with_input(state, cat) -> None:
    assert capture(state, "filter", [cat], input=["type=c"]) == "type=c"


def test_capture_propagates_failure(state, sh) -> None:
    with pytest.raises(AbnormalExit):
        capture(state, "broken", [sh, "-c", "exit 9"])


def test_capture_lines_drops_trailing_blank_lines(state, sh) -> None:
    result = capture(state, "blanks", [sh, "-c", "printf 'a\\n\\nb\\n\\n\\n'"], lines=True)
    assert list(result) == ["a", "", "b"]
