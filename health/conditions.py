# ============================================================================
# CONDITION TRANSITIONS
# ============================================================================
# EPOCH: 1 - CLUSTER CARE
# STATUS: Infrastructure - Condition model rules
# PURPOSE: Advance conditions with correct timestamps and debouncing
# CREATED: 19 OCT 2026
# ============================================================================
"""
Condition Transitions

All condition changes go through ConditionUpdater so the timestamp rules
hold everywhere:
- last_transition_time changes only when status changes
- last_update_time changes whenever status, reason, message or codes change

failed() adds threshold debouncing for aspects with a configured
threshold: True -> Progressing -> (after threshold) False.
"""

from datetime import timedelta
from typing import Dict, Iterable, List, Optional

from core.contracts import ConditionStatus, Reason
from core.logging import ComponentType, get_logger
from core.models import Condition, find_condition
from health.core import Clock

logger = get_logger(__name__, ComponentType.ORCHESTRATOR)

INITIALIZED_MESSAGE = "The condition has been initialized but its semantic check has not been performed yet."


class ConditionUpdater:
    """
    Builds successor conditions.

    Args:
        clock: Time source
        thresholds: Per condition type, how long a failing aspect is
            reported Progressing before it turns False
    """

    def __init__(
        self,
        clock: Optional[Clock] = None,
        thresholds: Optional[Dict[str, timedelta]] = None,
    ):
        self.clock = clock or Clock()
        self.thresholds = dict(thresholds or {})

    def init(self, condition_type: str) -> Condition:
        """Create a fresh Unknown condition."""
        now = self.clock.now()
        return Condition(
            type=condition_type,
            status=ConditionStatus.UNKNOWN,
            reason=Reason.CONDITION_INITIALIZED,
            message=INITIALIZED_MESSAGE,
            last_transition_time=now,
            last_update_time=now,
        )

    def get_or_init(self, conditions: Iterable[Condition], condition_type: str) -> Condition:
        """Return the existing condition of the type or initialize one."""
        existing = find_condition(list(conditions), condition_type)
        if existing is not None:
            return existing
        return self.init(condition_type)

    def updated(
        self,
        condition: Condition,
        status: ConditionStatus,
        reason: str,
        message: str,
        codes: Optional[List[str]] = None,
    ) -> Condition:
        """Return the successor of condition with the given values."""
        now = self.clock.now()
        status = ConditionStatus(status)
        reason = reason or Reason.UNSPECIFIED
        codes = list(codes or [])

        transition_time = condition.last_transition_time
        if status != condition.status:
            transition_time = now

        update_time = condition.last_update_time
        if (
            status != condition.status
            or reason != condition.reason
            or message != condition.message
            or codes != condition.codes
        ):
            update_time = now

        return condition.model_copy(update={
            "status": status,
            "reason": reason,
            "message": message,
            "codes": codes,
            "last_transition_time": transition_time,
            "last_update_time": update_time,
        })

    def unknown_error(self, condition: Condition, error: BaseException) -> Condition:
        """Mark the condition Unknown because checking it failed."""
        return self.updated(
            condition,
            ConditionStatus.UNKNOWN,
            Reason.CONDITION_CHECK_ERROR,
            str(error) or type(error).__name__,
        )

    def new_or_error(
        self,
        old: Condition,
        new: Optional[Condition],
        error: Optional[BaseException] = None,
    ) -> Condition:
        """Pick the new condition unless the check failed."""
        if error is not None:
            return self.unknown_error(old, error)
        if new is None:
            return self.unknown_error(old, RuntimeError("no condition was computed"))
        return new

    def failed(
        self,
        condition: Condition,
        reason: str,
        message: str,
        codes: Optional[List[str]] = None,
    ) -> Condition:
        """
        Report a failure, debounced by the condition type's threshold.

        Without a threshold the result is False right away.
        """
        threshold = self.thresholds.get(condition.type)
        if threshold is None:
            return self.updated(condition, ConditionStatus.FALSE, reason, message, codes)

        if condition.status == ConditionStatus.TRUE:
            return self.updated(condition, ConditionStatus.PROGRESSING, reason, message, codes)

        if condition.status == ConditionStatus.PROGRESSING:
            if self.clock.since(condition.last_transition_time) <= threshold:
                return self.updated(condition, ConditionStatus.PROGRESSING, reason, message, codes)
            logger.debug(
                f"Condition {condition.type} exceeded threshold {threshold}, reporting False"
            )
            return self.updated(condition, ConditionStatus.FALSE, reason, message, codes)

        if condition.status == ConditionStatus.FALSE and reason != condition.reason:
            return self.updated(condition, ConditionStatus.PROGRESSING, reason, message, codes)

        return self.updated(condition, ConditionStatus.FALSE, reason, message, codes)


__all__ = [
    "ConditionUpdater",
    "INITIALIZED_MESSAGE",
]
