from __future__ import annotations

import asyncio
import functools
import logging
from collections.abc import Awaitable, Callable
from uuid import UUID

from openport.api.models import RunSnapshot
from openport.controller import RunController
from openport.core.models import RunPhase

logger = logging.getLogger(__name__)

OnTick = Callable[[RunSnapshot], Awaitable[None]]


async def run_ticker(controller: RunController, *, interval: float, on_tick: OnTick | None = None) -> RunSnapshot:
    """Feed `tick()` into the controller every `interval` seconds while the run is playing.

    Returns the final snapshot once the run leaves `playing`. Cancelling the task is
    the only other way out.
    """

    snap = controller.snapshot()
    while snap.phase == RunPhase.playing:
        await asyncio.sleep(interval)
        snap = controller.tick()
        if on_tick is not None:
            await on_tick(snap)
    logger.debug("Ticker for run %s stopped in phase %s", controller.run_id, snap.phase.value)
    return snap


class TickerSet:
    """One background ticker task per run id.

    Finished tasks drop out on their own. A ticker that dies with an exception is logged.
    """

    def __init__(self) -> None:
        self._tasks: dict[UUID, asyncio.Task[RunSnapshot]] = {}

    def __len__(self) -> int:
        return len(self._tasks)

    def ensure(self, controller: RunController, *, interval: float, on_tick: OnTick | None = None) -> bool:
        """Start a ticker for `controller` unless one is already running. Returns True if started."""

        task = self._tasks.get(controller.run_id)
        if task is not None and not task.done():
            return False
        task = asyncio.create_task(
            run_ticker(controller, interval=interval, on_tick=on_tick),
            name=f"ticker:{controller.run_id}",
        )
        task.add_done_callback(functools.partial(self._on_done, controller.run_id))
        self._tasks[controller.run_id] = task
        return True

    def _on_done(self, run_id: UUID, task: asyncio.Task[RunSnapshot]) -> None:
        if self._tasks.get(run_id) is task:
            del self._tasks[run_id]
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Ticker for run %s failed; time no longer advances", run_id, exc_info=exc)

    def cancel(self, run_id: UUID) -> None:
        task = self._tasks.pop(run_id, None)
        if task is not None and not task.done():
            task.cancel()

    async def cancel_all(self) -> None:
        """Cancel every ticker and wait for the tasks to finish."""

        tasks = list(self._tasks.values())
        self._tasks.clear()
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)


tickers = TickerSet()
