# ============================================================================
# CONDITION MODEL
# ============================================================================
# EPOCH: 1 - CLUSTER CARE
# STATUS: Core model - One typed, timestamped health verdict
# PURPOSE: Value type for aspect conditions and observed sub-resource conditions
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: Condition
# DEPENDENCIES: pydantic
# ============================================================================
"""
Condition Model

A Condition is the verdict for one named health aspect. The same shape is
used for conditions observed on sub-resources and for the conditions this
system produces.

Transition rules live in health.conditions.ConditionUpdater:
- last_transition_time moves only when status changes
- last_update_time moves whenever status, reason, message or codes change
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from core.contracts import ConditionStatus


def _epoch() -> datetime:
    return datetime(1970, 1, 1, tzinfo=timezone.utc)


class Condition(BaseModel):
    """A typed verdict for one aspect."""

    model_config = {"frozen": True}

    type: str = Field(..., min_length=1)
    status: ConditionStatus = Field(default=ConditionStatus.UNKNOWN)
    reason: str = ""
    message: str = ""
    last_transition_time: datetime = Field(default_factory=_epoch)
    last_update_time: datetime = Field(default_factory=_epoch)
    codes: List[str] = Field(default_factory=list)

    # Only set on monitoring-instance conditions
    observed_generation: Optional[int] = None

    @property
    def is_true(self) -> bool:
        return self.status == ConditionStatus.TRUE

    def to_dict(self) -> Dict[str, Any]:
        """Render the shape handed to the status writer."""
        result = {
            "type": self.type,
            "status": self.status.value,
            "reason": self.reason,
            "message": self.message,
            "lastTransitionTime": self.last_transition_time.isoformat(),
            "lastUpdateTime": self.last_update_time.isoformat(),
        }
        if self.codes:
            result["codes"] = list(self.codes)
        return result


def find_condition(conditions: List[Condition], condition_type: str) -> Optional[Condition]:
    """Return the first condition of the given type, if any."""
    for condition in conditions:
        if condition.type == condition_type:
            return condition
    return None


__all__ = [
    "Condition",
    "find_condition",
]
