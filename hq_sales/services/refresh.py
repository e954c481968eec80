"""
Refresh trigger aligned to fixed minute offsets within each hour.

The upstream export lands on a fixed cadence; refreshing a few seconds after
each landing (the buffer) keeps figures fresh without continuous polling.
next_trigger_at() is pure; RefreshScheduler runs a job at each trigger,
waiting for the job to finish before computing the next instant, so two runs
of the same job never overlap. Clock and sleep are injectable.
"""
import asyncio
import inspect
import logging
from datetime import datetime, timedelta
from typing import Awaitable, Callable, Iterable, Optional, Union

logger = logging.getLogger(__name__)

MIN_DELAY_SECONDS = 1.0

Job = Callable[[], Union[Awaitable[object], object]]


def next_trigger_at(now: datetime, minutes: Iterable[int], buffer_seconds: float = 2) -> datetime:
    """First instant (offset minute + buffer) strictly after now."""
    offsets = sorted(set(minutes))
    if not offsets:
        raise ValueError("at least one minute offset is required")
    hour = now.replace(minute=0, second=0, microsecond=0)
    buffer = timedelta(seconds=buffer_seconds)
    for hours_ahead in (0, 1):
        base = hour + timedelta(hours=hours_ahead)
        for m in offsets:
            candidate = base + timedelta(minutes=m) + buffer
            if candidate > now:
                return candidate
    # buffer larger than an hour; fall back to the first offset after that
    return hour + timedelta(hours=2, minutes=offsets[0]) + buffer


def seconds_until_next_trigger(
    now: datetime,
    minutes: Iterable[int],
    buffer_seconds: float = 2,
    min_delay: float = MIN_DELAY_SECONDS,
) -> float:
    wait = (next_trigger_at(now, minutes, buffer_seconds) - now).total_seconds()
    return max(min_delay, wait)


class RefreshScheduler:
    def __init__(
        self,
        job: Job,
        minutes: Iterable[int] = (5, 35),
        buffer_seconds: float = 2,
        clock: Callable[[], datetime] = datetime.now,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        name: str = "refresh",
    ):
        self.job = job
        self.minutes = tuple(sorted(set(minutes)))
        self.buffer_seconds = buffer_seconds
        self.clock = clock
        self.sleep = sleep
        self.name = name
        self.runs = 0
        self._task: Optional[asyncio.Task] = None
        self._stopped = False

    async def _invoke(self) -> None:
        if inspect.iscoroutinefunction(self.job):
            await self.job()
        else:
            result = await asyncio.to_thread(self.job)
            if inspect.isawaitable(result):
                await result

    async def run(self, max_runs: Optional[int] = None) -> None:
        """Schedule → wait → run → reschedule, until stopped or max_runs reached."""
        self._stopped = False
        while not self._stopped and (max_runs is None or self.runs < max_runs):
            wait = seconds_until_next_trigger(self.clock(), self.minutes, self.buffer_seconds)
            logger.debug("%s: next run in %.1fs", self.name, wait)
            await self.sleep(wait)
            if self._stopped:
                break
            try:
                await self._invoke()
            except Exception:
                # one failed run does not stop the schedule
                logger.exception("%s: scheduled run failed", self.name)
            self.runs += 1

    def start(self) -> asyncio.Task:
        if self._task is None or self._task.done():
            self._task = asyncio.get_running_loop().create_task(self.run())
        return self._task

    def stop(self) -> None:
        self._stopped = True
        if self._task is not None and not self._task.done():
            self._task.cancel()

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()
