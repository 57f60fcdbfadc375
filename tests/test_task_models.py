# tests/test_task_models.py

from __future__ import annotations

import dataclasses
import json

import pytest

from pocket_todo.tasks.task_errors import PersistenceReadError
from pocket_todo.tasks.task_ids import TaskIdGenerator
from pocket_todo.tasks.task_models import Task, decode_task_list, encode_task_list

from .fakes import FakeClock


def test_task_defaults_to_not_completed() -> None:
    assert Task(id=1, title="x").completed is False


def test_task_is_frozen() -> None:
    task = Task(id=1, title="x")
    with pytest.raises(dataclasses.FrozenInstanceError):
        task.title = "y"  # type: ignore[misc]


def test_encode_produces_expected_shape() -> None:
    blob = encode_task_list([Task(id=1, title="Café", completed=True)])
    assert json.loads(blob) == [{"id": 1, "title": "Café", "completed": True}]


def test_decode_ignores_unknown_keys() -> None:
    blob = json.dumps([{"id": 5, "title": "a", "completed": False, "color": "red"}])
    assert decode_task_list(blob) == [Task(id=5, title="a", completed=False)]


def test_decode_empty_array() -> None:
    assert decode_task_list("[]") == []


@pytest.mark.parametrize(
    "raw",
    [
        {"id": True, "title": "a", "completed": False},
        {"id": 1.5, "title": "a", "completed": False},
        {"id": 1, "title": None, "completed": False},
        {"id": 1, "title": "a", "completed": "no"},
        {"title": "a", "completed": False},
    ],
)
def test_decode_rejects_malformed_items(raw: dict) -> None:
    with pytest.raises(PersistenceReadError):
        decode_task_list(json.dumps([raw]))


def test_id_generator_is_strictly_increasing_within_one_tick() -> None:
    gen = TaskIdGenerator(FakeClock(1_000))
    ids = [gen.next_id() for _ in range(5)]
    assert ids == [1_000, 1_001, 1_002, 1_003, 1_004]


def test_id_generator_survives_clock_going_back() -> None:
    clock = FakeClock(5_000)
    gen = TaskIdGenerator(clock)
    first = gen.next_id()
    clock.now_ms = 4_000
    assert gen.next_id() > first


def test_id_generator_follows_clock_when_it_moves_ahead() -> None:
    clock = FakeClock(1_000)
    gen = TaskIdGenerator(clock)
    gen.next_id()
    clock.now_ms = 2_000
    assert gen.next_id() == 2_000


def test_id_generator_observe_skips_past_existing_ids() -> None:
    gen = TaskIdGenerator(FakeClock(10))
    gen.observe(500)
    gen.observe(20)
    assert gen.next_id() == 501


def test_default_id_generator_uses_wall_clock_milliseconds() -> None:
    nid = TaskIdGenerator().next_id()
    # Roughly "now" in ms since the epoch (after 2020-01-01).
    assert nid > 1_577_836_800_000
