"""
Shared pytest fixtures and configuration for nectar tests.
"""

import pytest

from nectar import Observable, prop, registry


@pytest.fixture(autouse=True)
def reset_registry():
    """Reset the shared attribute registry before each test to prevent state leakage."""
    registry.reset()


@pytest.fixture
def point_class():
    """Provide a fresh two-attribute observable class."""

    class Point(Observable):
        x = prop(0)
        y = prop(0)

    return Point


@pytest.fixture
def recorder():
    """Provide a callable that records the arguments of every call."""

    class Recorder:
        def __init__(self):
            self.calls = []

        def __call__(self, *args):
            self.calls.append(args)

        @property
        def count(self):
            return len(self.calls)

    return Recorder()
