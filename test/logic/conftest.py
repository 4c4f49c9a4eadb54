from datetime import datetime
from typing import Iterable, Optional

import pytest

from k2000.types import SessionConfig

START = datetime(2026, 10, 18, 12, 0, 0)
STOP = datetime(2026, 10, 18, 13, 0, 0)


class FakeClock:
    """Monotonic clock that only moves when told to.

    `step` seconds are added on every read, `sleep` adds its argument.
    """

    def __init__(self, step: float = 0.0):
        self.t = 0.0
        self.step = step
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        now = self.t
        self.t += self.step
        return now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.t += seconds


class FakeTerminal:
    """Stands in for TerminalController, hands out scripted key presses."""

    def __init__(self, keys: Optional[Iterable[Optional[str]]] = None):
        self.keys = list(keys or [])
        self.acquired = 0
        self.released = 0
        self.polls = 0

    def acquire(self):
        self.acquired += 1
        return ["saved"]

    def release(self):
        self.released += 1

    def poll_key(self):
        self.polls += 1
        if self.keys:
            key = self.keys.pop(0)
            if isinstance(key, BaseException):
                raise key
            return key
        return None


class FakeNow:
    def __init__(self):
        self.times = [START, STOP]

    def __call__(self) -> datetime:
        return self.times.pop(0) if len(self.times) > 1 else self.times[0]


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def make_config(tmp_path):
    def _make(**kwargs) -> SessionConfig:
        kwargs.setdefault("output", tmp_path / "run.dat")
        kwargs.setdefault("interval", 0.0)
        kwargs.setdefault("graphics", False)
        return SessionConfig(**kwargs)

    return _make


@pytest.fixture
def make_terminal():
    return FakeTerminal


@pytest.fixture
def fake_now():
    return FakeNow()
