# ============================================================================
# WORKLOAD PRESENCE EVALUATOR
# ============================================================================
# EPOCH: 1 - CLUSTER CARE
# STATUS: Evaluator - Required workloads
# PURPOSE: Verify required deployments exist and are available
# CREATED: 19 OCT 2026
# ============================================================================
"""
Workload Presence Evaluator

Lists workloads matching a label selector and checks a set of required
names against them:
- any required name missing -> False (DeploymentMissing)
- a required workload not available -> False (DeploymentUnhealthy)
- all present and available -> abstain

A failed listing raises WorkloadFetchError instead of producing a
condition; the orchestrator turns it into Unknown.
"""

from typing import AbstractSet, Dict, List, Optional

from core.contracts import ConditionType, Reason
from core.logging import ComponentType, get_logger
from core.models import Condition, Workload
from health.conditions import ConditionUpdater
from health.core import Verdict
from health.store import SignalStore, SignalStoreError

logger = get_logger(__name__, ComponentType.EVALUATOR)


class WorkloadFetchError(SignalStoreError):
    """Listing workloads failed."""


class WorkloadPresenceEvaluator:
    """Checks required workloads for presence and availability."""

    def __init__(self, store: SignalStore, updater: ConditionUpdater):
        self.store = store
        self.updater = updater

    async def evaluate(
        self,
        previous: Condition,
        namespace: str,
        required_names: AbstractSet[str],
        selector: Optional[Dict[str, str]] = None,
    ) -> Verdict:
        """
        Check required workloads in a namespace.

        Raises:
            WorkloadFetchError: If the inventory cannot be listed
        """
        if not required_names:
            return Verdict.abstain()

        try:
            inventory = await self.store.list_workloads(namespace, selector or {})
        except Exception as e:
            logger.warning(f"Listing deployments in namespace {namespace} failed: {e}")
            raise WorkloadFetchError(
                f"failed listing deployments in namespace {namespace}: {e}"
            ) from e

        return self.check(previous, required_names, inventory)

    def check(
        self,
        previous: Condition,
        required_names: AbstractSet[str],
        inventory: List[Workload],
    ) -> Verdict:
        """Pure check of an already listed inventory."""
        by_name = {w.name: w for w in inventory}

        missing = sorted(name for name in required_names if name not in by_name)
        if missing:
            return Verdict.of(self.updater.failed(
                previous,
                Reason.DEPLOYMENT_MISSING,
                f"Missing required deployments: [{', '.join(missing)}]",
            ))

        for name in sorted(required_names):
            workload = by_name[name]
            if not workload.is_available:
                return Verdict.of(self.updater.failed(
                    previous,
                    Reason.DEPLOYMENT_UNHEALTHY,
                    f'Deployment "{workload.identity}" is unhealthy: {_unavailable_detail(workload)}',
                ))

        return Verdict.abstain()


def _unavailable_detail(workload: Workload) -> str:
    condition = workload.availability
    if condition is None:
        return f'condition "{ConditionType.AVAILABLE}" is missing'

    detail = f'condition "{ConditionType.AVAILABLE}" has invalid status {condition.status.value} (expected True)'
    if condition.reason:
        detail += f" due to {condition.reason}"
    if condition.message:
        detail += f": {condition.message}"
    return detail


__all__ = [
    "WorkloadPresenceEvaluator",
    "WorkloadFetchError",
]
