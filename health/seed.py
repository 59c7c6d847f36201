# ============================================================================
# SEED HEALTH
# ============================================================================
# EPOCH: 1 - CLUSTER CARE
# STATUS: Aspects - Seed cluster system and observability components
# PURPOSE: Wire the evaluators into the two seed-cluster aspects
# CREATED: 19 OCT 2026
# ============================================================================
"""
Seed Health

Two aspects over the ManagedResources of the seed's garden and
istio-system namespaces (only resources with a class are considered):

    SystemComponentsHealthy
        Resources whose care label is not ObservabilityComponentsHealthy.
        Success reason: SystemComponentsRunning

    ObservabilityComponentsHealthy
        Resources labelled ObservabilityComponentsHealthy. Sub-checks, in
        order: required monitoring workloads (when configured), resource
        conditions, firing health alerts of referenced Prometheus
        instances.
        Success reason: ObservabilityComponentsRunning

Usage:
    checker = HealthChecker(store, CheckerConfig.from_defaults())
    seed = SeedHealth(checker)
    conditions = await seed.check(current_conditions)
"""

from typing import AbstractSet, Dict, List, Optional, Sequence

from core.contracts import ConditionType, LABEL_CARE_CONDITION_TYPE, Reason
from core.logging import ComponentType, get_logger
from core.models import Condition, SubResourceStatus
from health.checker import HealthChecker
from health.checks.alerts import monitoring_references
from health.core import Verdict
from health.orchestrator import Aspect, HealthOrchestrator, Snapshots
from health.store import SignalStoreError

logger = get_logger(__name__, ComponentType.ORCHESTRATOR)

GARDEN_NAMESPACE = "garden"
ISTIO_SYSTEM_NAMESPACE = "istio-system"
SEED_NAMESPACES = (GARDEN_NAMESPACE, ISTIO_SYSTEM_NAMESPACE)

MANAGED_RESOURCES = "managed_resources"


def is_observability_resource(resource: SubResourceStatus) -> bool:
    return (
        resource.labels.get(LABEL_CARE_CONDITION_TYPE)
        == ConditionType.SEED_OBSERVABILITY_COMPONENTS_HEALTHY
    )


def is_system_resource(resource: SubResourceStatus) -> bool:
    return not is_observability_resource(resource)


class SeedHealth:
    """
    Health of a seed cluster's own components.

    Args:
        checker: Evaluators bound to the Signal Store
        namespaces: Namespaces listed for ManagedResources
        monitoring_namespace: Namespace of the required monitoring workloads
        required_monitoring_workloads: Deployment names that must exist and
            be available (empty: workload check disabled)
        workload_selector: Label selector scoping the workload inventory
    """

    def __init__(
        self,
        checker: HealthChecker,
        namespaces: Sequence[str] = SEED_NAMESPACES,
        monitoring_namespace: str = GARDEN_NAMESPACE,
        required_monitoring_workloads: AbstractSet[str] = frozenset(),
        workload_selector: Optional[Dict[str, str]] = None,
    ):
        self.checker = checker
        self.namespaces = tuple(namespaces)
        self.monitoring_namespace = monitoring_namespace
        self.required_monitoring_workloads = frozenset(required_monitoring_workloads)
        self.workload_selector = dict(workload_selector or {})

        self.orchestrator = HealthOrchestrator(
            config=checker.config,
            snapshots={MANAGED_RESOURCES: self.list_managed_resources},
            aspects=self.aspects(),
        )

    def aspects(self) -> List[Aspect]:
        return [
            Aspect(
                condition_type=ConditionType.SEED_SYSTEM_COMPONENTS_HEALTHY,
                requires=(MANAGED_RESOURCES,),
                checks=[self._check_system_resources],
                success_reason=Reason.SYSTEM_COMPONENTS_RUNNING,
                success_message="All system components are healthy.",
            ),
            Aspect(
                condition_type=ConditionType.SEED_OBSERVABILITY_COMPONENTS_HEALTHY,
                requires=(MANAGED_RESOURCES,),
                checks=[
                    self._check_monitoring_workloads,
                    self._check_observability_resources,
                    self._check_health_alerts,
                ],
                success_reason=Reason.OBSERVABILITY_COMPONENTS_RUNNING,
                success_message="All observability components are healthy.",
            ),
        ]

    async def check(self, conditions: Sequence[Condition] = ()) -> List[Condition]:
        """Run one pass; returns both seed conditions in aspect order."""
        return await self.orchestrator.run_pass(conditions)

    async def list_managed_resources(self) -> List[SubResourceStatus]:
        """
        List classed ManagedResources of all seed namespaces.

        Raises:
            SignalStoreError: If any namespace cannot be listed
        """
        resources: List[SubResourceStatus] = []
        for namespace in self.namespaces:
            try:
                listed = await self.checker.store.list_sub_resources(namespace)
            except Exception as e:
                logger.warning(f"Listing ManagedResources in namespace {namespace} failed: {e}")
                raise SignalStoreError(
                    f"failed listing ManagedResources in namespace {namespace}: {e}"
                ) from e
            resources.extend(r for r in listed if r.resource_class)
        return resources

    # ------------------------------------------------------------------
    # Sub-checks
    # ------------------------------------------------------------------

    def _check_system_resources(self, previous: Condition, snapshots: Snapshots) -> Verdict:
        resources = [r for r in snapshots[MANAGED_RESOURCES] if is_system_resource(r)]
        return self.checker.resources.check(
            previous, resources, self.checker.config.progressing_threshold,
        )

    async def _check_monitoring_workloads(self, previous: Condition, snapshots: Snapshots) -> Verdict:
        return await self.checker.workloads.evaluate(
            previous,
            self.monitoring_namespace,
            self.required_monitoring_workloads,
            self.workload_selector,
        )

    def _check_observability_resources(self, previous: Condition, snapshots: Snapshots) -> Verdict:
        resources = [r for r in snapshots[MANAGED_RESOURCES] if is_observability_resource(r)]
        return self.checker.resources.check(
            previous, resources, self.checker.config.progressing_threshold,
        )

    async def _check_health_alerts(self, previous: Condition, snapshots: Snapshots) -> Verdict:
        references = monitoring_references(snapshots[MANAGED_RESOURCES])
        return await self.checker.alerts.evaluate(
            previous, references, resource_filter=is_observability_resource,
        )


__all__ = [
    "SeedHealth",
    "SEED_NAMESPACES",
    "is_observability_resource",
    "is_system_resource",
]
