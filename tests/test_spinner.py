import io

import pytest

from pipework.spinner import run_with_spinner


class FakeTty(io.StringIO):
    def isatty(self) -> bool:
        return True


def test_returns_result_without_tty() -> None:
    stream = io.StringIO()
    assert run_with_spinner("work ", lambda a, b: a + b, 2, 3, stream=stream) == 5
    assert stream.getvalue() == ""


def test_spins_on_tty() -> None:
    import time

    stream = FakeTty()
    assert run_with_spinner("flashing ", lambda: time.sleep(0.3) or "done", stream=stream) == "done"
    assert "flashing |" in stream.getvalue()


def test_reraises_worker_exception() -> None:
    def boom():
        raise RuntimeError("worker failed")

    with pytest.raises(RuntimeError, match="worker failed"):
        run_with_spinner("x ", boom, stream=io.StringIO())
