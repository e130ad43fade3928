"""
Shared test doubles.
"""
import random

import pytest

from src.web.room_manager import RoomManager


class ScriptedRandom:
    """
    Random source whose random() calls return preset values.

    Values below 0.5 mean "X" for seat assignment and "swap" for a reshuffle.
    Room codes still come from a seeded generator.
    """

    def __init__(self, values=None, seed=0):
        self.values = list(values or [])
        self.codes = random.Random(seed)

    def random(self):
        if self.values:
            return self.values.pop(0)
        return 0.9

    def choice(self, seq):
        return self.codes.choice(seq)


class FakeClock:
    """Manually advanced clock."""

    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


class FakeConnection:
    """In-memory stand-in for a PlayerConnection."""

    def __init__(self, name=""):
        self.name = name
        self.sent = []
        self.is_open = True

    def send(self, message):
        self.sent.append(message)

    def of_type(self, msg_type):
        return [m for m in self.sent if m["type"] == msg_type]

    def last(self, msg_type):
        messages = self.of_type(msg_type)
        return messages[-1] if messages else None

    def clear(self):
        self.sent = []

    def __repr__(self):
        return f"FakeConnection({self.name!r})"


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def rng():
    return ScriptedRandom()


@pytest.fixture
def room_manager(rng, clock):
    return RoomManager(rng=rng, clock=clock)

