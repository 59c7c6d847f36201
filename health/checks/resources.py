# ============================================================================
# RESOURCE CONDITION EVALUATOR
# ============================================================================
# EPOCH: 1 - CLUSTER CARE
# STATUS: Evaluator - Sub-resource condition aggregation
# PURPOSE: Merge N sub-resource condition sets into one aspect verdict
# CREATED: 19 OCT 2026
# ============================================================================
"""
Resource Condition Evaluator

Per resource, in order:
1. Outdated: observed_generation < generation -> False (fail fast)
2. Missing: a required condition type is absent -> False
3. Stuck rollout: the progressing condition has been True for longer
   than the threshold, measured from its own last_transition_time -> False
4. First failure: required types in order (primary first); False or
   Unknown is reported with the condition's own reason and message

check() abstains when every resource passes, so it can be composed with
other sub-evaluators. evaluate() is the standalone form and turns an
abstention into a True condition.
"""

from datetime import timedelta
from typing import Iterable, Optional

from core.contracts import ConditionStatus, Reason
from core.logging import ComponentType, get_logger, log_context
from core.models import Condition, SubResourceStatus, find_condition
from health.conditions import ConditionUpdater
from health.core import Verdict, format_duration

logger = get_logger(__name__, ComponentType.EVALUATOR)

DEFAULT_SUCCESS_REASON = "ResourcesHealthy"


class ResourceConditionEvaluator:
    """Aggregates sub-resource conditions into one aspect condition."""

    def __init__(self, updater: ConditionUpdater):
        self.updater = updater

    def evaluate(
        self,
        previous: Condition,
        resources: Iterable[SubResourceStatus],
        progressing_threshold: Optional[timedelta] = None,
        success_reason: str = DEFAULT_SUCCESS_REASON,
        success_message: Optional[str] = None,
    ) -> Verdict:
        """
        Evaluate resources; report True when none of them fails.

        Only call this for aspects that apply: an empty resource list is
        vacuously healthy.
        """
        verdict = self.check(previous, resources, progressing_threshold)
        if verdict.present:
            return verdict

        if success_message is None:
            success_message = f"All resources of {previous.type} are healthy."
        return Verdict.of(self.updater.updated(
            previous, ConditionStatus.TRUE, success_reason, success_message,
        ))

    def check(
        self,
        previous: Condition,
        resources: Iterable[SubResourceStatus],
        progressing_threshold: Optional[timedelta] = None,
    ) -> Verdict:
        """Return the first failing resource's verdict, or abstain."""
        for resource in resources:
            with log_context(resource=resource.identity):
                verdict = self.check_resource(previous, resource, progressing_threshold)
                if verdict.present:
                    logger.debug(
                        f"{resource.kind} {resource.identity} fails {previous.type}: "
                        f"{verdict.condition.reason}"
                    )
                    return verdict
        return Verdict.abstain()

    def check_resource(
        self,
        previous: Condition,
        resource: SubResourceStatus,
        progressing_threshold: Optional[timedelta] = None,
    ) -> Verdict:
        """Evaluate a single resource."""
        if resource.is_outdated:
            return self._failed(previous, resource.outdated_reason, "outdated")

        missing = self._first_missing(resource)
        if missing is not None:
            # No conditions at all: the resource has not been processed yet
            message = missing if resource.conditions else ""
            return self._failed(previous, resource.missing_condition_reason, message)

        if progressing_threshold is not None and resource.progressing_condition_type:
            stuck = self._check_progressing(previous, resource, progressing_threshold)
            if stuck.present:
                return stuck

        for condition_type in resource.required_condition_types:
            condition = find_condition(resource.conditions, condition_type)
            if condition.status in (ConditionStatus.FALSE, ConditionStatus.UNKNOWN):
                return self._failed(previous, condition.reason, condition.message)

        return Verdict.abstain()

    def _first_missing(self, resource: SubResourceStatus) -> Optional[str]:
        for condition_type in resource.required_condition_types:
            if find_condition(resource.conditions, condition_type) is None:
                return condition_type
        return None

    def _check_progressing(
        self,
        previous: Condition,
        resource: SubResourceStatus,
        threshold: timedelta,
    ) -> Verdict:
        condition = find_condition(resource.conditions, resource.progressing_condition_type)
        if condition is None or condition.status != ConditionStatus.TRUE:
            return Verdict.abstain()

        elapsed = self.updater.clock.since(condition.last_transition_time)
        if elapsed <= threshold:
            return Verdict.abstain()

        return self._failed(
            previous,
            Reason.PROGRESSING_ROLLOUT_STUCK,
            f"{resource.kind} {resource.identity} is progressing for more than "
            f"{format_duration(threshold)} (elapsed {format_duration(elapsed)})",
        )

    def _failed(self, previous: Condition, reason: str, message: str) -> Verdict:
        return Verdict.of(self.updater.failed(previous, reason, message))


__all__ = [
    "ResourceConditionEvaluator",
    "DEFAULT_SUCCESS_REASON",
]
