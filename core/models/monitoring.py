# ============================================================================
# MONITORING INSTANCE MODEL
# ============================================================================
# EPOCH: 1 - CLUSTER CARE
# STATUS: Core model - Prometheus / Alertmanager instance snapshot
# PURPOSE: Replica layout and status of a referenced monitoring instance
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: MonitoringKind, MonitoringInstance
# DEPENDENCIES: pydantic
# ============================================================================
"""
Monitoring Instance Model

Prometheus and Alertmanager instances share the fields needed for health
checks: desired/available/updated replicas, the headless service name used
to address replicas, and Available/Reconciled conditions carrying their own
observed generation.
"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

from core.models.condition import Condition


class MonitoringKind(str, Enum):
    """Monitoring instance kinds."""
    PROMETHEUS = "Prometheus"
    ALERTMANAGER = "Alertmanager"


class MonitoringInstance(BaseModel):
    """A monitoring instance resource."""

    model_config = {"frozen": True}

    kind: MonitoringKind = MonitoringKind.PROMETHEUS
    name: str
    namespace: str = ""
    generation: int = Field(default=0, ge=0)

    # Desired state
    replicas: Optional[int] = Field(default=None, ge=0)
    service_name: Optional[str] = None

    # Status
    available_replicas: int = Field(default=0, ge=0)
    updated_replicas: int = Field(default=0, ge=0)
    conditions: List[Condition] = Field(default_factory=list)

    @property
    def identity(self) -> str:
        return f"{self.namespace}/{self.name}"

    @property
    def desired_replicas(self) -> int:
        """Desired replica count (unset means one)."""
        return 1 if self.replicas is None else self.replicas


__all__ = [
    "MonitoringKind",
    "MonitoringInstance",
]
