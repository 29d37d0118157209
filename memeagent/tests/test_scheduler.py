import asyncio

import pytest

from memeagent.scheduler import SingleFlightScheduler


@pytest.mark.asyncio
async def test_overlapping_tick_is_dropped():
    release = asyncio.Event()
    runs = []

    async def job():
        runs.append("start")
        await release.wait()

    scheduler = SingleFlightScheduler(job, interval=60)
    first = asyncio.create_task(scheduler.tick())
    await asyncio.sleep(0)

    assert await scheduler.tick() is False
    assert scheduler.ticks_dropped == 1

    release.set()
    assert await first is True
    assert runs == ["start"]
    assert scheduler.ticks_run == 1

    # once the first run finished the next tick goes through
    assert await scheduler.tick() is True
    assert scheduler.ticks_run == 2


@pytest.mark.asyncio
async def test_job_errors_are_contained():
    async def job():
        raise RuntimeError("cycle blew up")

    scheduler = SingleFlightScheduler(job, interval=60)

    assert await scheduler.tick() is True
    assert await scheduler.tick() is True
    assert scheduler.ticks_run == 2


@pytest.mark.asyncio
async def test_runs_immediately_then_on_interval():
    runs = []

    async def job():
        runs.append(asyncio.get_running_loop().time())

    scheduler = SingleFlightScheduler(job, interval=0.05)
    scheduler.start()
    await asyncio.sleep(0.01)
    assert len(runs) == 1

    await asyncio.sleep(0.12)
    await scheduler.stop()

    assert len(runs) >= 2
    assert not scheduler.running


@pytest.mark.asyncio
async def test_stop_cancels_inflight_job():
    started = asyncio.Event()
    cancelled = []

    async def job():
        started.set()
        try:
            await asyncio.sleep(10)
        except asyncio.CancelledError:
            cancelled.append(True)
            raise

    scheduler = SingleFlightScheduler(job, interval=60)
    scheduler.start()
    await asyncio.wait_for(started.wait(), timeout=1)

    await scheduler.stop()

    assert cancelled == [True]


def test_interval_must_be_positive():
    with pytest.raises(ValueError):
        SingleFlightScheduler(lambda: None, interval=0)
