import asyncio
from collections.abc import Coroutine
from functools import partial
from typing import Any

from portfolio_review.logging.logger import Log
from portfolio_review.pipeline.exceptions import DuplicateTaskError


class BackgroundTaskRunner:
    """Runs one detached asyncio task per session and keeps track of them.

    The registry holds strong references until a task finishes, which keeps
    fire-and-forget tasks from being garbage collected mid-flight.
    """

    def __init__(self) -> None:
        self._tasks: dict[str, asyncio.Task[None]] = {}

    @property
    def active(self) -> int:
        return len(self._tasks)

    def is_running(self, key: str) -> bool:
        return key in self._tasks

    def submit(self, key: str, work: Coroutine[Any, Any, None]) -> asyncio.Task[None]:
        """Schedule ``work`` on the running loop and return immediately.

        Raises:
            DuplicateTaskError: if a task for ``key`` is still running.
        """
        if key in self._tasks:
            work.close()
            raise DuplicateTaskError(f"A task is already running for {key}")
        task = asyncio.create_task(work, name=f"analysis-{key}")
        self._tasks[key] = task
        task.add_done_callback(partial(self._on_done, key))
        Log.debug("Background task submitted", key=key, active=len(self._tasks))
        return task

    async def wait_all(self) -> None:
        """Wait until every submitted task, including late submissions, is done."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks.values()), return_exceptions=True)

    async def shutdown(self) -> None:
        """Cancel in-flight tasks. Their sessions stay non-terminal."""
        tasks = list(self._tasks.values())
        if tasks:
            Log.warning(f"Cancelling {len(tasks)} in-flight analysis tasks")
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)

    def _on_done(self, key: str, task: asyncio.Task[None]) -> None:
        if self._tasks.get(key) is task:
            del self._tasks[key]
        if task.cancelled():
            Log.warning("Background task cancelled", key=key)
            return
        exc = task.exception()
        if exc is not None:
            Log.error(f"Background task crashed: {exc!r}", key=key)
