"""Unit tests for loading an embedded world by reference."""

from __future__ import annotations

import pytest

from cloud_tasks_world.engine import load_embedded_world

from ..conftest import RecordingWorld

SHARED_WORLD = RecordingWorld()
NOT_A_WORLD = object()


def test_loads_instance() -> None:
    assert load_embedded_world("tests.unit.test_engine:SHARED_WORLD") is SHARED_WORLD


def test_calls_factory() -> None:
    assert isinstance(load_embedded_world("tests.conftest:RecordingWorld"), RecordingWorld)


@pytest.mark.parametrize("target", ["tests.conftest", ":RecordingWorld", "tests.conftest:"])
def test_rejects_malformed_reference(target: str) -> None:
    with pytest.raises(ValueError):
        load_embedded_world(target)


def test_rejects_non_world() -> None:
    with pytest.raises(TypeError):
        load_embedded_world("tests.unit.test_engine:NOT_A_WORLD")
