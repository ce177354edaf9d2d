"""Utilities for safe background task management.

Auto-translation runs detached from the write that triggered it. The store
depends on the TaskSpawner protocol rather than on asyncio directly, so the
scheduling strategy can be swapped:

- BackgroundTaskSpawner: fire-and-forget asyncio tasks (production)
- InlineTaskSpawner: runs the job to completion before returning (tests, scripts)

Both share the same error boundary: failures are logged and never reach the
caller that submitted the job.
"""

import asyncio
from collections.abc import Awaitable, Callable, Coroutine
from typing import Any, Protocol, TypeVar

from localization.core.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

Job = Callable[[], Awaitable[Any]]


async def run_safely(coro: Awaitable[T], task_name: str) -> T | None:
    """Await a coroutine, logging instead of propagating its failure.

    CancelledError is re-raised so shutdown still works.
    """
    try:
        result = await coro
    except asyncio.CancelledError:
        logger.info("background_task_cancelled", task=task_name)
        raise
    except Exception as e:
        logger.exception(
            "background_task_failed",
            task=task_name,
            error=str(e),
            error_type=type(e).__name__,
        )
        return None
    else:
        logger.debug("background_task_completed", task=task_name)
        return result


def create_safe_task(
    coro: Coroutine[Any, Any, T],
    task_name: str,
) -> asyncio.Task[T | None]:
    """Create a background task with proper error handling.

    Unlike raw asyncio.create_task(), errors are logged with full context
    instead of surfacing as "Task exception was never retrieved".
    """
    task = asyncio.create_task(run_safely(coro, task_name), name=task_name)
    logger.debug("background_task_created", task=task_name)
    return task


class TaskSpawner(Protocol):
    async def submit(self, job: Job, *, name: str) -> None: ...


class BackgroundTaskSpawner:
    """Schedules jobs as detached asyncio tasks and returns immediately.

    Keeps a strong reference to every pending task so the event loop cannot
    garbage-collect it mid-flight.
    """

    def __init__(self) -> None:
        self._tasks: set[asyncio.Task[Any]] = set()

    async def submit(self, job: Job, *, name: str) -> None:
        task = create_safe_task(_as_coroutine(job), name)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    @property
    def pending(self) -> int:
        return len(self._tasks)

    async def drain(self) -> None:
        """Wait for every job submitted so far (and any they submit)."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)


class InlineTaskSpawner:
    """Runs each job to completion inside submit()."""

    async def submit(self, job: Job, *, name: str) -> None:
        await run_safely(_as_coroutine(job), name)


async def _as_coroutine(job: Job) -> Any:
    return await job()
