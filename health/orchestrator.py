# ============================================================================
# HEALTH ORCHESTRATOR
# ============================================================================
# EPOCH: 1 - CLUSTER CARE
# STATUS: Core - One reconciliation pass over all aspects
# PURPOSE: Fetch snapshots, evaluate aspects concurrently, isolate failures
# CREATED: 19 OCT 2026
# ============================================================================
"""
Health Orchestrator

One pass:
1. Fetch every snapshot the aspects require (concurrently). An aspect
   whose snapshot failed becomes Unknown with the fetch error and is not
   evaluated.
2. Evaluate the remaining aspects concurrently under one deadline.
   Within an aspect, sub-checks run in priority order and the first
   verdict wins; no verdict means the aspect is True.
3. Any exception or timeout inside an aspect becomes Unknown for that
   aspect only.
4. Conditions are returned in aspect order, each advanced exactly once.

Snapshots are read-only during a pass. Each aspect writes only its own
result slot; results are collected after all tasks joined.
"""

import inspect
import time
import uuid
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Awaitable, Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from __version__ import __version__
from core.contracts import ConditionStatus
from core.logging import ComponentType, get_logger, log_checkpoint, log_context
from core.models import Condition
from health.checker import CheckerConfig
from health.conditions import ConditionUpdater
from health.core import Verdict
from health.executor import TaskGroupExecutor

logger = get_logger(__name__, ComponentType.ORCHESTRATOR)

Snapshots = Mapping[str, Any]
SubCheck = Callable[[Condition, Snapshots], Union[Verdict, Awaitable[Verdict]]]
SnapshotFetcher = Callable[[], Awaitable[Any]]


class SnapshotFetchError(Exception):
    """A snapshot required by an aspect could not be fetched."""

    def __init__(self, name: str, error: BaseException):
        self.name = name
        self.error = error
        super().__init__(str(error) or f"fetching snapshot {name} failed")


@dataclass(frozen=True)
class Aspect:
    """
    A named health dimension and how to evaluate it.

    Attributes:
        condition_type: Type of the produced condition
        checks: Sub-checks in priority order
        requires: Names of the snapshots the checks read
        success_reason: Reason when no sub-check has a verdict
        success_message: Message when no sub-check has a verdict
    """
    condition_type: str
    checks: Sequence[SubCheck]
    requires: Tuple[str, ...] = ()
    success_reason: str = "Healthy"
    success_message: str = ""


@dataclass
class PassResult:
    """Conditions produced by one pass, in aspect order."""
    pass_id: str
    conditions: List[Condition]
    duration_ms: float
    errors: Dict[str, str] = field(default_factory=dict)

    def get(self, condition_type: str) -> Optional[Condition]:
        for condition in self.conditions:
            if condition.type == condition_type:
                return condition
        return None


class HealthOrchestrator:
    """
    Runs passes over a fixed set of aspects.

    Args:
        config: Resolved options (clock, thresholds, pass timeout, parallelism)
        snapshots: Snapshot name -> async fetcher
        aspects: Aspects in output order
        executor: Task group bounding parallelism and the pass deadline
            (built from config if None)

    Attributes:
        last_result: PassResult of the most recent pass
    """

    def __init__(
        self,
        config: CheckerConfig,
        snapshots: Mapping[str, SnapshotFetcher],
        aspects: Sequence[Aspect],
        executor: Optional[TaskGroupExecutor] = None,
    ):
        types = [a.condition_type for a in aspects]
        if len(set(types)) != len(types):
            raise ValueError(f"duplicate aspect condition types: {types}")
        for aspect in aspects:
            unknown = [name for name in aspect.requires if name not in snapshots]
            if unknown:
                raise ValueError(
                    f"aspect {aspect.condition_type} requires unknown snapshot(s): {unknown}"
                )

        self.config = config
        self.aspects = list(aspects)
        self.snapshots = dict(snapshots)
        self.updater = ConditionUpdater(
            clock=config.clock,
            thresholds=config.condition_thresholds,
        )
        self.executor = executor or TaskGroupExecutor(
            overall_timeout=config.pass_timeout,
            max_parallel=config.max_parallel,
        )
        self.last_result: Optional[PassResult] = None

    async def run_pass(self, conditions: Iterable[Condition] = ()) -> List[Condition]:
        """
        Evaluate every aspect once.

        Args:
            conditions: Current conditions (from the status); missing
                aspects are initialized as Unknown

        Returns:
            One condition per aspect, in aspect order
        """
        pass_id = uuid.uuid4().hex[:12]
        start_time = time.monotonic()
        deadline = None
        if self.executor.overall_timeout is not None:
            deadline = start_time + self.executor.overall_timeout

        current = list(conditions)
        previous = {
            a.condition_type: self.updater.get_or_init(current, a.condition_type)
            for a in self.aspects
        }

        with log_context(pass_id=pass_id, operation="care_pass"):
            snapshots, snapshot_errors = await self._fetch_snapshots(deadline)

            results: Dict[str, Condition] = {}
            errors: Dict[str, str] = {}
            runnable: List[Aspect] = []

            for aspect in self.aspects:
                failed = next((n for n in aspect.requires if n in snapshot_errors), None)
                if failed is None:
                    runnable.append(aspect)
                    continue
                error = snapshot_errors[failed]
                results[aspect.condition_type] = self.updater.unknown_error(
                    previous[aspect.condition_type], error,
                )
                errors[aspect.condition_type] = str(error)

            read_only = MappingProxyType(snapshots)
            outcomes = await self.executor.run_all(
                [
                    (aspect.condition_type, _bind(self._evaluate_aspect, aspect, previous[aspect.condition_type], read_only))
                    for aspect in runnable
                ],
                deadline=deadline,
            )

            for aspect, outcome in zip(runnable, outcomes):
                old = previous[aspect.condition_type]
                if outcome.ok:
                    results[aspect.condition_type] = self.updater.new_or_error(old, outcome.value)
                else:
                    logger.warning(
                        f"Aspect {aspect.condition_type} could not be evaluated: {outcome.error}"
                    )
                    results[aspect.condition_type] = self.updater.unknown_error(old, outcome.error)
                    errors[aspect.condition_type] = str(outcome.error)

            result = PassResult(
                pass_id=pass_id,
                conditions=[results[a.condition_type] for a in self.aspects],
                duration_ms=(time.monotonic() - start_time) * 1000,
                errors=errors,
            )

            log_checkpoint("care_pass_completed", {
                "version": __version__,
                "duration_ms": round(result.duration_ms, 2),
                "statuses": {c.type: c.status.value for c in result.conditions},
                "errors": len(errors),
            })

        self.last_result = result
        return result.conditions

    async def _fetch_snapshots(
        self,
        deadline: Optional[float],
    ) -> Tuple[Dict[str, Any], Dict[str, SnapshotFetchError]]:
        needed: List[str] = []
        for aspect in self.aspects:
            for name in aspect.requires:
                if name not in needed:
                    needed.append(name)

        outcomes = await self.executor.run_all(
            [(name, self.snapshots[name]) for name in needed],
            deadline=deadline,
        )

        snapshots: Dict[str, Any] = {}
        errors: Dict[str, SnapshotFetchError] = {}
        for outcome in outcomes:
            if outcome.ok:
                snapshots[outcome.name] = outcome.value
            else:
                logger.warning(f"Snapshot {outcome.name} could not be fetched: {outcome.error}")
                errors[outcome.name] = SnapshotFetchError(outcome.name, outcome.error)
        return snapshots, errors

    async def _evaluate_aspect(
        self,
        aspect: Aspect,
        previous: Condition,
        snapshots: Snapshots,
    ) -> Condition:
        with log_context(aspect=aspect.condition_type):
            for check in aspect.checks:
                verdict = check(previous, snapshots)
                if inspect.isawaitable(verdict):
                    verdict = await verdict
                if not isinstance(verdict, Verdict):
                    raise TypeError(
                        f"sub-check of {aspect.condition_type} returned "
                        f"{type(verdict).__name__}, expected Verdict"
                    )
                if verdict.present:
                    logger.debug(
                        f"Aspect {aspect.condition_type}: {verdict.condition.status.value} "
                        f"({verdict.condition.reason})"
                    )
                    return verdict.condition

            return self.updater.updated(
                previous, ConditionStatus.TRUE, aspect.success_reason, aspect.success_message,
            )


def _bind(fn, *args):
    """Freeze arguments for a task factory."""
    async def call():
        return await fn(*args)
    return call


__all__ = [
    "Aspect",
    "HealthOrchestrator",
    "PassResult",
    "SnapshotFetchError",
    "SubCheck",
]
