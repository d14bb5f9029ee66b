"""Shared fixtures for the veto tests."""
from unittest.mock import AsyncMock

import pytest

import veto
from state import SessionStore


class FakeClock:
    def __init__(self, now: float = 1_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class ForcedRng:
    """Stands in for random.Random; the coin always lands on ``face``."""

    def __init__(self, face: str):
        self.face = face

    def choice(self, seq):
        assert self.face in seq
        return self.face


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(clock):
    return SessionStore(clock=clock)


@pytest.fixture
def session(store):
    """A freshly flipped session: team 111 won the coin, format not chosen yet."""
    return store.create(
        999,
        team_a_id=111,
        team_b_id=222,
        team_a_name="Alpha",
        team_b_name="Bravo",
        map_pool=list(veto.ALL_MAPS),
    )


@pytest.fixture
def presenter():
    p = AsyncMock()
    p.team_name.return_value = None
    return p
