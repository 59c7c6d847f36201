# ============================================================================
# WORKLOAD MODEL
# ============================================================================
# EPOCH: 1 - CLUSTER CARE
# STATUS: Core model - Required workload inventory entry
# PURPOSE: Label-scoped deployment snapshot with availability signal
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: Workload
# DEPENDENCIES: pydantic
# ============================================================================
"""
Workload Model

A deployment as listed from the Signal Store. Availability is the
workload's own Available condition.
"""

from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from core.contracts import ConditionStatus, ConditionType
from core.models.condition import Condition, find_condition


class Workload(BaseModel):
    """A deployment-like workload."""

    model_config = {"frozen": True}

    name: str
    namespace: str = ""
    labels: Dict[str, str] = Field(default_factory=dict)
    conditions: List[Condition] = Field(default_factory=list)
    replicas: int = Field(default=1, ge=0)
    available_replicas: int = Field(default=0, ge=0)

    @property
    def identity(self) -> str:
        return f"{self.namespace}/{self.name}"

    @property
    def availability(self) -> Optional[Condition]:
        return find_condition(self.conditions, ConditionType.AVAILABLE)

    @property
    def is_available(self) -> bool:
        condition = self.availability
        return condition is not None and condition.status == ConditionStatus.TRUE

    def matches(self, selector: Dict[str, str]) -> bool:
        """Check the workload's labels against an equality selector."""
        return all(self.labels.get(key) == value for key, value in selector.items())


__all__ = ["Workload"]
