import asyncio
from datetime import datetime, timedelta

import pytest

from hq_sales.services.refresh import (
    RefreshScheduler,
    next_trigger_at,
    seconds_until_next_trigger,
)


@pytest.mark.parametrize("now,expected", [
    (datetime(2024, 6, 1, 10, 0, 0), datetime(2024, 6, 1, 10, 5, 2)),
    (datetime(2024, 6, 1, 10, 5, 1), datetime(2024, 6, 1, 10, 5, 2)),
    (datetime(2024, 6, 1, 10, 5, 2), datetime(2024, 6, 1, 10, 35, 2)),
    (datetime(2024, 6, 1, 10, 20, 0), datetime(2024, 6, 1, 10, 35, 2)),
    (datetime(2024, 6, 1, 10, 40, 0), datetime(2024, 6, 1, 11, 5, 2)),
    (datetime(2024, 6, 1, 23, 50, 0), datetime(2024, 6, 2, 0, 5, 2)),
])
def test_next_trigger_at(now, expected):
    assert next_trigger_at(now, (5, 35), buffer_seconds=2) == expected


def test_next_trigger_ignores_offset_order_and_duplicates():
    now = datetime(2024, 6, 1, 10, 20, 0)
    assert next_trigger_at(now, [35, 5, 35]) == datetime(2024, 6, 1, 10, 35, 2)


def test_next_trigger_requires_offsets():
    with pytest.raises(ValueError):
        next_trigger_at(datetime(2024, 6, 1), [])


def test_seconds_until_next_trigger():
    assert seconds_until_next_trigger(datetime(2024, 6, 1, 10, 4, 0), (5, 35)) == 62
    # never returns less than the minimum delay
    assert seconds_until_next_trigger(datetime(2024, 6, 1, 10, 5, 1, 500000), (5, 35)) == 1.0


class FakeClock:
    def __init__(self, start: datetime):
        self.now = start
        self.sleeps = []

    def __call__(self) -> datetime:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += timedelta(seconds=seconds)


def test_scheduler_runs_at_each_trigger():
    clock = FakeClock(datetime(2024, 6, 1, 10, 0, 0))
    fired = []

    async def job():
        fired.append(clock.now)

    scheduler = RefreshScheduler(job, minutes=(5, 35), buffer_seconds=2, clock=clock, sleep=clock.sleep)
    asyncio.run(scheduler.run(max_runs=3))

    assert fired == [
        datetime(2024, 6, 1, 10, 5, 2),
        datetime(2024, 6, 1, 10, 35, 2),
        datetime(2024, 6, 1, 11, 5, 2),
    ]
    assert scheduler.runs == 3


def test_scheduler_waits_for_slow_job_before_rescheduling():
    clock = FakeClock(datetime(2024, 6, 1, 10, 0, 0))
    fired = []

    async def slow_job():
        fired.append(clock.now)
        # job outlives the next offset
        clock.now += timedelta(minutes=40)

    scheduler = RefreshScheduler(slow_job, minutes=(5, 35), clock=clock, sleep=clock.sleep)
    asyncio.run(scheduler.run(max_runs=2))

    assert fired == [datetime(2024, 6, 1, 10, 5, 2), datetime(2024, 6, 1, 11, 5, 2)]


def test_scheduler_keeps_running_after_job_failure():
    clock = FakeClock(datetime(2024, 6, 1, 10, 0, 0))
    calls = []

    def flaky():
        calls.append(clock.now)
        if len(calls) == 1:
            raise RuntimeError("storage unreachable")

    scheduler = RefreshScheduler(flaky, minutes=(5, 35), clock=clock, sleep=clock.sleep)
    asyncio.run(scheduler.run(max_runs=2))

    assert len(calls) == 2
    assert scheduler.runs == 2


def test_scheduler_stop_cancels_pending_wait():
    fired = []

    async def main():
        scheduler = RefreshScheduler(lambda: fired.append(1), minutes=(5, 35), name="test")
        task = scheduler.start()
        await asyncio.sleep(0)
        assert scheduler.running
        scheduler.stop()
        with pytest.raises(asyncio.CancelledError):
            await task
        assert not scheduler.running

    asyncio.run(main())
    assert fired == []
