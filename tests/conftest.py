"""Shared fixtures for the tagdeck test suite."""

from __future__ import annotations

import random

import pytest

from tagdeck.core.playback import PlaybackController
from tests.fakes import FakeOutput, make_tracks


@pytest.fixture
def output() -> FakeOutput:
    return FakeOutput()


@pytest.fixture
def make_controller(output: FakeOutput):
    """Build a controller over `count` tracks with a seeded shuffle."""

    def factory(count: int = 3, seed: int = 1234, **kwargs) -> PlaybackController:
        controller = PlaybackController(output, rng=random.Random(seed), **kwargs)
        if count:
            controller.add_tracks(make_tracks(count))
        return controller

    return factory
