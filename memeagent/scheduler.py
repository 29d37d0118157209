import asyncio
from typing import Any, Awaitable, Callable, Optional, Set

from loguru import logger

Job = Callable[[], Awaitable[Any]]


class SingleFlightScheduler:
    """Runs an async job immediately and then every `interval` seconds.

    At most one invocation is in flight. A tick that fires while the previous
    invocation is still running is dropped, not queued.
    """

    def __init__(self, job: Job, interval: float, name: str = "cycle") -> None:
        if interval <= 0:
            raise ValueError("interval must be positive")
        self._job = job
        self._interval = float(interval)
        self._name = name
        self._lock = asyncio.Lock()
        self._loop_task: Optional[asyncio.Task] = None
        self._inflight: Set[asyncio.Task] = set()
        self.ticks_run = 0
        self.ticks_dropped = 0

    @property
    def running(self) -> bool:
        return self._loop_task is not None and not self._loop_task.done()

    async def tick(self) -> bool:
        """Run the job once unless an invocation is already in flight.

        Returns True if the job ran (even if it raised), False if dropped.
        """
        if self._lock.locked():
            self.ticks_dropped += 1
            logger.warning(
                "Previous {} still running; dropping this tick", self._name
            )
            return False
        async with self._lock:
            self.ticks_run += 1
            try:
                await self._job()
            except asyncio.CancelledError:
                raise
            except Exception:
                logger.exception("Scheduled {} failed", self._name)
        return True

    def _spawn_tick(self) -> None:
        task = asyncio.create_task(self.tick())
        self._inflight.add(task)
        task.add_done_callback(self._inflight.discard)

    async def _run(self) -> None:
        logger.info(
            "Scheduler started for {} every {}s", self._name, self._interval
        )
        while True:
            self._spawn_tick()
            await asyncio.sleep(self._interval)

    def start(self) -> asyncio.Task:
        if self.running:
            return self._loop_task
        self._loop_task = asyncio.create_task(self._run())
        return self._loop_task

    async def stop(self) -> None:
        """Cancel the loop and any in-flight invocation."""
        tasks = list(self._inflight)
        if self._loop_task is not None:
            tasks.append(self._loop_task)
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        self._loop_task = None
        logger.info("Scheduler for {} stopped", self._name)
