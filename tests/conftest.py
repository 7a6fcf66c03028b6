# tests/conftest.py
import datetime
import random

import pytest

from presencekit.presence.resolver import ConfigResolver
from presencekit.testing.fake_discord import FakeSink


class StepClock:
    """Returns a new instant, one second later, on every call."""

    def __init__(self):
        self.calls = 0

    def __call__(self):
        self.calls += 1
        return datetime.datetime(2024, 1, 1, tzinfo=datetime.timezone.utc) + datetime.timedelta(seconds=self.calls)


@pytest.fixture
def clock():
    return StepClock()


@pytest.fixture
def sink():
    return FakeSink()


@pytest.fixture
def make_resolver(sink, clock):
    def _make(config=None):
        return ConfigResolver(config, sink=sink, rng=random.Random(1234), clock=clock)
    return _make
