import pytest

from pipework.locator import resolve
from pipework.state import RunState


@pytest.fixture
def state() -> RunState:
    return RunState(logging=True)


@pytest.fixture
def quiet_state() -> RunState:
    return RunState()


@pytest.fixture
def sh(state: RunState) -> str:
    return resolve(state, "sh")


@pytest.fixture
def echo(state: RunState) -> str:
    return resolve(state, "echo")


@pytest.fixture
def cat(state: RunState) -> str:
    return resolve(state, "cat")
