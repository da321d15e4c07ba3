"""
Tests for the polling loop
"""

import asyncio

import pytest

from qa_console.services.poller import Poller

async def wait_until(condition, attempts=50):
    for _ in range(attempts):
        if condition():
            return
        await asyncio.sleep(0.01)

async def test_first_tick_runs_immediately():
    ticks = []

    async def tick():
        ticks.append(1)

    poller = Poller("test", 60.0, tick)
    poller.start()
    await wait_until(lambda: ticks)
    await poller.stop()

    assert ticks == [1]
    assert not poller.running

async def test_trigger_wakes_the_loop_early():
    ticks = []

    async def tick():
        ticks.append(1)

    poller = Poller("test", 60.0, tick)
    poller.start()
    await wait_until(lambda: len(ticks) == 1)

    poller.trigger()
    await wait_until(lambda: len(ticks) == 2)
    await poller.stop()

    assert len(ticks) == 2

async def test_failing_tick_does_not_stop_the_loop():
    ticks = []

    async def tick():
        ticks.append(1)
        raise RuntimeError("backend down")

    poller = Poller("test", 0.01, tick)
    poller.start()
    await wait_until(lambda: len(ticks) >= 3)
    await poller.stop()

    assert len(ticks) >= 3

async def test_stop_cancels_tick_in_flight():
    started = asyncio.Event()
    finished = []

    async def tick():
        started.set()
        await asyncio.sleep(60)
        finished.append(1)

    poller = Poller("test", 60.0, tick)
    poller.start()
    await started.wait()
    await poller.stop()

    assert finished == []

async def test_start_is_idempotent():
    async def tick():
        pass

    poller = Poller("test", 60.0, tick)
    poller.start()
    task = poller._task
    poller.start()

    assert poller._task is task
    await poller.stop()

async def test_stop_right_after_trigger_completes():
    """A pending wake-up must not keep the loop alive once stopped"""
    ticks = []

    async def tick():
        ticks.append(1)

    poller = Poller("test", 60.0, tick)
    poller.start()
    await wait_until(lambda: ticks)

    poller.trigger()
    await asyncio.wait_for(poller.stop(), 1)

    assert poller.running is False
    await asyncio.sleep(0.05)
    assert len(ticks) <= 2

async def test_stop_during_tick_after_trigger_completes():
    started = asyncio.Event()

    async def tick():
        started.set()
        await asyncio.sleep(60)

    poller = Poller("test", 60.0, tick)
    poller.start()
    await started.wait()

    poller.trigger()
    await asyncio.wait_for(poller.stop(), 1)

    assert not poller.running

async def test_cancelling_the_caller_of_stop_propagates():
    """stop() only absorbs the poller's own cancellation"""
    release = asyncio.Event()

    async def stubborn_tick():
        try:
            await asyncio.sleep(60)
        except asyncio.CancelledError:
            await release.wait()
            raise

    poller = Poller("test", 60.0, stubborn_tick)
    poller.start()
    await asyncio.sleep(0.01)

    stopping = asyncio.create_task(poller.stop())
    await asyncio.sleep(0.01)
    stopping.cancel()

    with pytest.raises(asyncio.CancelledError):
        await stopping
    release.set()
    await asyncio.sleep(0.01)
