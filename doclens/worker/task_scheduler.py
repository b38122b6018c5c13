import asyncio
from collections.abc import Awaitable, Callable

from doclens.logging.logger import Log


class TaskScheduler:
    """Runs background coroutines on the event loop, at most one per key.

    A task's exceptions are logged and swallowed; they never reach the caller
    that scheduled it. Strong references are kept until each task finishes.
    """

    def __init__(self) -> None:
        self._tasks: dict[str, asyncio.Task[None]] = {}

    def is_running(self, key: str) -> bool:
        task = self._tasks.get(key)
        return task is not None and not task.done()

    def schedule(self, key: str, job: Callable[[], Awaitable[None]]) -> bool:
        """Start ``job`` in the background without awaiting it.

        Returns:
            False if a task for ``key`` is still running; nothing is started then.
        """
        if self.is_running(key):
            return False
        task = asyncio.get_running_loop().create_task(
            self._guard(key, job), name=f"doclens:{key}"
        )
        self._tasks[key] = task
        task.add_done_callback(lambda done: self._forget(key, done))
        return True

    async def drain(self) -> None:
        """Wait until every scheduled task has finished."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks.values()), return_exceptions=True)

    async def _guard(self, key: str, job: Callable[[], Awaitable[None]]) -> None:
        try:
            await job()
        except asyncio.CancelledError:
            Log.warning("Background task cancelled", task=key)
            raise
        except Exception as exc:
            Log.exception(f"Background task crashed: {exc}", task=key)

    def _forget(self, key: str, task: asyncio.Task[None]) -> None:
        if self._tasks.get(key) is task:
            del self._tasks[key]
