# ============================================================================
# ALERT QUERY EVALUATOR
# ============================================================================
# EPOCH: 1 - CLUSTER CARE
# STATUS: Evaluator - Firing health alerts in referenced Prometheus instances
# PURPOSE: Query every replica concurrently; error > firing > healthy
# CREATED: 19 OCT 2026
# ============================================================================
"""
Alert Query Evaluator

For every Prometheus referenced by a sub-resource (skipping owners that
fail the filter or carry the ignore annotation):

1. Resolve the instance from the Signal Store. Failure -> Unknown
   (ConditionCheckError): retry next pass, not a health failure.
2. Build one target per replica with the endpoint builder.
3. Query all replicas concurrently, each with its own timeout, and join.
4. Precedence over the joined results, in replica order:
   - any error       -> Unknown (ConditionCheckError)
   - any firing      -> False (PrometheusHealthAlertsFiring)
   - all zero        -> no verdict, continue with the next reference

The first reference producing a verdict wins.
"""

from dataclasses import dataclass
from functools import partial
from typing import Awaitable, Callable, Iterable, List, Optional, Sequence, Tuple

from core.contracts import ConditionStatus, Reason
from core.logging import ComponentType, get_logger, log_context
from core.models import Condition, MonitoringInstance, MonitoringKind, SubResourceStatus
from health.conditions import ConditionUpdater
from health.core import Verdict
from health.executor import TaskGroupExecutor, first_error
from health.store import NotFoundError, SignalStore

logger = get_logger(__name__, ComponentType.EVALUATOR)

HealthAlertsChecker = Callable[[str, int], Awaitable[bool]]
EndpointBuilder = Callable[[MonitoringInstance, int], Tuple[str, int]]
ResourceFilter = Callable[[SubResourceStatus], bool]


@dataclass(frozen=True)
class MonitoringReference:
    """A Prometheus instance referenced by a sub-resource."""
    name: str
    namespace: str
    owner: SubResourceStatus

    @property
    def identity(self) -> str:
        return f"{self.namespace}/{self.name}"


def monitoring_references(resources: Iterable[SubResourceStatus]) -> List[MonitoringReference]:
    """Collect Prometheus references from sub-resources, in order."""
    references = []
    for resource in resources:
        for ref in resource.references:
            if ref.kind != MonitoringKind.PROMETHEUS.value:
                continue
            references.append(MonitoringReference(
                name=ref.name,
                namespace=ref.namespace or resource.namespace,
                owner=resource,
            ))
    return references


class AlertQueryEvaluator:
    """
    Checks referenced Prometheus instances for firing health alerts.

    Args:
        store: Signal Store used to resolve instances
        updater: Condition transitions
        executor: Task group running the replica queries
        health_alerts_checker: async (endpoint, port) -> firing?
        endpoint_builder: (instance, replica) -> (endpoint, port)
        query_timeout: Per-query timeout in seconds
        ignore_annotation: Owner annotation key; "true" skips the owner
    """

    def __init__(
        self,
        store: SignalStore,
        updater: ConditionUpdater,
        executor: TaskGroupExecutor,
        health_alerts_checker: HealthAlertsChecker,
        endpoint_builder: EndpointBuilder,
        query_timeout: float,
        ignore_annotation: str,
    ):
        self.store = store
        self.updater = updater
        self.executor = executor
        self.health_alerts_checker = health_alerts_checker
        self.endpoint_builder = endpoint_builder
        self.query_timeout = query_timeout
        self.ignore_annotation = ignore_annotation

    async def evaluate(
        self,
        previous: Condition,
        references: Sequence[MonitoringReference],
        resource_filter: Optional[ResourceFilter] = None,
    ) -> Verdict:
        """Check references in order; the first verdict wins."""
        for reference in references:
            if resource_filter is not None and not resource_filter(reference.owner):
                continue
            if reference.owner.annotations.get(self.ignore_annotation) == "true":
                logger.debug(f"Skipping Prometheus {reference.identity}: owner is ignored")
                continue

            verdict = await self.check_instance(previous, reference)
            if verdict.present:
                return verdict

        return Verdict.abstain()

    async def check_instance(
        self,
        previous: Condition,
        reference: MonitoringReference,
    ) -> Verdict:
        """Query every replica of one referenced instance."""
        with log_context(instance=reference.identity):
            return await self._query_instance(previous, reference)

    async def _query_instance(
        self,
        previous: Condition,
        reference: MonitoringReference,
    ) -> Verdict:
        try:
            instance = await self.store.get_monitoring_instance(reference.namespace, reference.name)
        except NotFoundError:
            logger.warning(f"Prometheus {reference.identity} not found")
            return self._check_error(previous, f'Prometheus "{reference.identity}" not found')
        except Exception as e:
            logger.warning(f"Fetching Prometheus {reference.identity} failed: {e}")
            return self._check_error(previous, f'failed checking Prometheus "{reference.identity}": {e}')

        tasks = []
        for replica in range(instance.desired_replicas):
            endpoint, port = self.endpoint_builder(instance, replica)
            tasks.append((
                f"{reference.identity}/{replica}",
                partial(self.health_alerts_checker, endpoint, port),
            ))

        outcomes = await self.executor.run_all(tasks, task_timeout=self.query_timeout)

        failed = first_error(outcomes)
        if failed is not None:
            logger.warning(f"Querying Prometheus replica {failed.name} failed: {failed.error}")
            return self._check_error(
                previous,
                f'Querying Prometheus "{reference.identity}" for health alerts '
                f"returned an error: {failed.error}",
            )

        if any(outcome.value for outcome in outcomes):
            return Verdict.of(self.updater.failed(
                previous,
                Reason.PROMETHEUS_HEALTH_ALERTS_FIRING,
                f'There are firing health alerts in Prometheus "{reference.identity}". '
                f'Access Prometheus UI and check for firing ALERTS with type="health".',
            ))

        return Verdict.abstain()

    def _check_error(self, previous: Condition, message: str) -> Verdict:
        return Verdict.of(self.updater.updated(
            previous, ConditionStatus.UNKNOWN, Reason.CONDITION_CHECK_ERROR, message,
        ))


__all__ = [
    "AlertQueryEvaluator",
    "MonitoringReference",
    "monitoring_references",
    "HealthAlertsChecker",
    "EndpointBuilder",
]
