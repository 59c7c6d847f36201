# ============================================================================
# TASK GROUP EXECUTOR
# ============================================================================
# EPOCH: 1 - CLUSTER CARE
# STATUS: Infrastructure - Parallel evaluation with timeouts
# PURPOSE: Run independent evaluators/queries, join all, then decide
# CREATED: 19 OCT 2026
# ============================================================================
"""
Task Group Executor

Runs a group of independent coroutines with:
- Bounded parallelism (semaphore)
- Per-task timeouts
- One overall deadline for the whole group
- Join-all semantics: every task ends in a TaskOutcome, in input order

No task's failure cancels its siblings. Callers apply their precedence
rules (e.g. error > firing > healthy) over the collected outcomes, so the
result never depends on which task happened to finish first.
"""

import asyncio
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, List, Optional, Sequence, Tuple

from core.logging import ComponentType, get_logger

logger = get_logger(__name__, ComponentType.ORCHESTRATOR)

TaskFn = Callable[[], Awaitable[Any]]


class TaskTimeoutError(asyncio.TimeoutError):
    """A task exceeded its own timeout or the group deadline."""


@dataclass
class TaskOutcome:
    """Result of one task in a group."""
    name: str
    value: Any = None
    error: Optional[BaseException] = None
    duration_ms: float = 0.0

    @property
    def ok(self) -> bool:
        return self.error is None


def first_error(outcomes: Sequence[TaskOutcome]) -> Optional[TaskOutcome]:
    """First failed outcome in input order."""
    for outcome in outcomes:
        if not outcome.ok:
            return outcome
    return None


class TaskGroupExecutor:
    """
    Executes named tasks in parallel and joins all of them.

    Args:
        overall_timeout: Deadline for a whole group (None: no deadline)
        max_parallel: Max tasks running at once
    """

    def __init__(
        self,
        overall_timeout: Optional[float] = 60.0,
        max_parallel: int = 10,
    ):
        if max_parallel < 1:
            raise ValueError("max_parallel must be at least 1")
        self.overall_timeout = overall_timeout
        self.max_parallel = max_parallel

    async def run_all(
        self,
        tasks: Sequence[Tuple[str, TaskFn]],
        task_timeout: Optional[float] = None,
        deadline: Optional[float] = None,
    ) -> List[TaskOutcome]:
        """
        Run all tasks and return their outcomes in input order.

        Args:
            tasks: (name, coroutine factory) pairs
            task_timeout: Per-task timeout in seconds
            deadline: Absolute time.monotonic() deadline shared with
                other groups; the earlier of it and overall_timeout applies
        """
        if not tasks:
            return []

        timeout = self.overall_timeout
        if deadline is not None:
            remaining = max(deadline - time.monotonic(), 0.0)
            timeout = remaining if timeout is None else min(timeout, remaining)

        semaphore = asyncio.Semaphore(self.max_parallel)

        async def run_with_semaphore(name: str, fn: TaskFn) -> TaskOutcome:
            async with semaphore:
                return await self._execute(name, fn, task_timeout)

        pending_tasks = [
            asyncio.create_task(run_with_semaphore(name, fn))
            for name, fn in tasks
        ]

        try:
            done, pending = await asyncio.wait(
                pending_tasks,
                timeout=timeout,
                return_when=asyncio.ALL_COMPLETED,
            )
        except asyncio.CancelledError:
            # Cancellation of the caller reaches every child
            for task in pending_tasks:
                task.cancel()
            await asyncio.gather(*pending_tasks, return_exceptions=True)
            raise

        for task in pending:
            task.cancel()
        if pending:
            logger.warning(
                f"Task group deadline exceeded, "
                f"cancelled {len(pending)} of {len(pending_tasks)} task(s)"
            )
            await asyncio.gather(*pending, return_exceptions=True)

        outcomes: List[TaskOutcome] = []
        for (name, _), task in zip(tasks, pending_tasks):
            if task in done:
                outcomes.append(task.result())
            else:
                outcomes.append(TaskOutcome(
                    name=name,
                    error=TaskTimeoutError(
                        f"{name}: deadline exceeded after {timeout:.1f}s"
                    ),
                ))

        return outcomes

    async def _execute(
        self,
        name: str,
        fn: TaskFn,
        task_timeout: Optional[float],
    ) -> TaskOutcome:
        """Execute a single task with timeout; never raises Exception."""
        start_time = time.monotonic()

        try:
            if task_timeout is None:
                value = await fn()
            else:
                value = await asyncio.wait_for(fn(), timeout=task_timeout)

            return TaskOutcome(
                name=name,
                value=value,
                duration_ms=(time.monotonic() - start_time) * 1000,
            )

        except asyncio.TimeoutError as e:
            if task_timeout is None:
                error: BaseException = e
            else:
                logger.warning(f"Task {name} timed out after {task_timeout}s")
                error = TaskTimeoutError(f"timed out after {task_timeout}s")
            return TaskOutcome(
                name=name,
                error=error,
                duration_ms=(time.monotonic() - start_time) * 1000,
            )

        except Exception as e:
            logger.debug(f"Task {name} failed: {e}")
            return TaskOutcome(
                name=name,
                error=e,
                duration_ms=(time.monotonic() - start_time) * 1000,
            )


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "TaskGroupExecutor",
    "TaskOutcome",
    "TaskTimeoutError",
    "first_error",
]
