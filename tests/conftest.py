# conftest.py
"""Shared fixtures for the collision simulator tests."""
import logging

import pytest

from rng import RandomSource


class ScriptedRandom:
    """
    A RandomSource stand-in that replays fixed draws.

    `integers` feeds integer() and `booleans` feeds boolean(), in order.
    Every call is recorded so tests can assert the exact draw sequence.
    """
    def __init__(self, integers=(), booleans=()):
        self.integers = list(integers)
        self.booleans = list(booleans)
        self.calls = []

    def integer(self, low, high):
        value = self.integers.pop(0)
        assert low <= value < high, f"scripted {value} outside [{low}, {high})"
        self.calls.append(('integer', low, high, value))
        return value

    def boolean(self):
        value = self.booleans.pop(0)
        self.calls.append(('boolean', value))
        return value


@pytest.fixture
def rng():
    return RandomSource(seed=1234)


@pytest.fixture
def scripted_rng():
    return ScriptedRandom


@pytest.fixture
def restore_root_logger():
    """Undoes setup_logging() on the root logger after the test."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)
