"""Periodic local flush of the workflow draft."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Self, final

import anyio
import anyio.abc
import structlog

if TYPE_CHECKING:
    from structlog.typing import FilteringBoundLogger

    from ideaflow.idea._workflow import IdeaWorkflow

DEFAULT_INTERVAL = 30.0


@final
class Autosaver:
    """Calls ``save_to_local_storage`` every ``interval`` seconds.

    Unordered with explicit saves; whichever write lands last wins.
    """

    __slots__: tuple[str, ...] = (
        "_interval",
        "_logger",
        "_stop_event",
        "_workflow",
        "saves",
    )

    def __init__(
        self,
        workflow: "IdeaWorkflow",
        interval: float = DEFAULT_INTERVAL,
        *,
        logger: "FilteringBoundLogger | None" = None,
    ) -> None:
        if interval <= 0:
            msg = f"Autosave interval must be positive, got {interval}"
            raise ValueError(msg)
        self._workflow = workflow
        self._interval = interval
        self._logger: "FilteringBoundLogger" = logger or structlog.get_logger("ideaflow.autosave")
        self._stop_event: anyio.Event | None = None
        self.saves = 0

    @property
    def interval(self) -> float:
        return self._interval

    def tick(self) -> bool:
        """Flush once."""
        saved = self._workflow.save_to_local_storage()
        self.saves += 1
        self._logger.debug("autosave", saved=saved, count=self.saves)
        return saved

    async def run(
        self,
        *,
        task_status: anyio.abc.TaskStatus[None] = anyio.TASK_STATUS_IGNORED,
    ) -> None:
        """Flush on every interval until ``stop`` is called or the task is cancelled."""
        self._stop_event = anyio.Event()
        task_status.started()
        while True:
            with anyio.move_on_after(self._interval):
                await self._stop_event.wait()
            if self._stop_event.is_set():
                break
            _ = self.tick()

    def stop(self) -> None:
        """Ask a running loop to exit before its next flush."""
        if self._stop_event is not None:
            self._stop_event.set()

    @asynccontextmanager
    async def running(self) -> AsyncIterator[Self]:
        """Run the loop in a task group for the duration of the block."""
        async with anyio.create_task_group() as tg:
            await tg.start(self.run)
            try:
                yield self
            finally:
                self.stop()
