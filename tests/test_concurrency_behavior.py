"""Behavior tests for spies shared by interleaved asyncio tasks."""

from __future__ import annotations

import asyncio

import pytest

from leakspy import LeakDetector
from leakspy.stream import Observable, never


@pytest.mark.asyncio
async def test_global_spies_pick_up_subscriptions_from_other_tasks():
    source = never()
    sizes: dict[str, int] = {}

    async def worker(name: str) -> None:
        detector = LeakDetector()
        spy = detector.spy()
        await asyncio.sleep(0)
        source.subscribe()
        await asyncio.sleep(0)
        spy.disable()
        sizes[name] = len(detector.snapshot())

    original = Observable.__dict__["subscribe"]

    await asyncio.gather(worker("a"), worker("b"))

    assert sizes == {"a": 2, "b": 2}
    assert Observable.__dict__["subscribe"] is original


@pytest.mark.asyncio
async def test_scoped_spies_keep_interleaved_tasks_apart():
    source = never()
    sizes: dict[str, int] = {}

    async def worker(name: str) -> None:
        detector = LeakDetector()
        spy = detector.scoped_spy(name)
        await asyncio.sleep(0)
        spy.run(source.subscribe)
        await asyncio.sleep(0)
        spy.disable()
        sizes[name] = len(detector.snapshot())

    original = Observable.__dict__["subscribe"]

    await asyncio.gather(worker("a"), worker("b"))

    assert sizes == {"a": 1, "b": 1}
    assert Observable.__dict__["subscribe"] is original


@pytest.mark.asyncio
async def test_scoped_spy_follows_a_task_across_suspension_points():
    source = never()
    sizes: dict[str, int] = {}

    async def body(count: int) -> None:
        for _ in range(count):
            await asyncio.sleep(0)
            source.subscribe()

    async def worker(name: str, count: int) -> None:
        detector = LeakDetector()
        with detector.scoped_spy(name) as spy:
            await spy.run(asyncio.create_task, body(count))
        sizes[name] = len(detector.snapshot())

    await asyncio.gather(worker("a", 1), worker("b", 3))

    assert sizes == {"a": 1, "b": 3}


@pytest.mark.asyncio
async def test_one_detector_shared_by_tasks_numbers_calls_in_order():
    source = never()
    detector = LeakDetector()
    order: list[str] = []

    async def worker(name: str) -> None:
        for _ in range(2):
            source.subscribe()
            order.append(name)
            await asyncio.sleep(0)

    with detector.spy():
        await asyncio.gather(worker("a"), worker("b"))

    sequences = [entry.sequence[0] for entry in detector.snapshot().entries]
    assert order == ["a", "b", "a", "b"]
    assert sequences == [1, 2, 3, 4]


@pytest.mark.asyncio
async def test_release_from_another_task_clears_the_record():
    detector = LeakDetector()
    with detector.spy():
        subscription = never().subscribe()

    async def release() -> None:
        await asyncio.sleep(0)
        subscription.unsubscribe()

    await asyncio.create_task(release())

    assert len(detector.snapshot()) == 0
