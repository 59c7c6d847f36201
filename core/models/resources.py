# ============================================================================
# SUB-RESOURCE STATUS MODEL
# ============================================================================
# EPOCH: 1 - CLUSTER CARE
# STATUS: Core model - Observed health of one sub-resource
# PURPOSE: Read-only snapshot of a sub-resource's conditions and generations
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: ObjectReference, SubResourceStatus
# DEPENDENCIES: pydantic
# ============================================================================
"""
Sub-Resource Status Model

One unit of observed health handed over by the Signal Store. The evaluator
never mutates these.

Two kinds are built in via factories:
- managed_resource(): ResourcesApplied + ResourcesHealthy required
- controller_installation(): Valid + Installed + Healthy required

required_condition_types is ordered: the structural ("primary") types come
first, so a structural failure outranks a content failure.
"""

from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from core.contracts import ConditionType, Reason
from core.models.condition import Condition


class ObjectReference(BaseModel):
    """Reference to an object managed by a sub-resource."""

    model_config = {"frozen": True}

    kind: str
    name: str
    namespace: str = ""


class SubResourceStatus(BaseModel):
    """Observed status of one sub-resource."""

    model_config = {"frozen": True}

    # Identity
    kind: str = "ManagedResource"
    name: str = ""
    namespace: str = ""
    labels: Dict[str, str] = Field(default_factory=dict)
    annotations: Dict[str, str] = Field(default_factory=dict)
    resource_class: Optional[str] = None

    # Condition expectations
    required_condition_types: List[str] = Field(default_factory=list)
    progressing_condition_type: Optional[str] = None
    conditions: List[Condition] = Field(default_factory=list)

    # Generation tracking
    generation: int = Field(default=0, ge=0)
    observed_generation: int = Field(default=0, ge=0)

    # Objects this resource manages
    references: List[ObjectReference] = Field(default_factory=list)

    # Reason codes reported for this kind
    missing_condition_reason: str = Reason.MISSING_MANAGED_RESOURCE_CONDITION
    outdated_reason: str = Reason.OUTDATED_STATUS_ERROR

    @property
    def identity(self) -> str:
        if self.namespace:
            return f"{self.namespace}/{self.name}"
        return self.name

    @property
    def is_outdated(self) -> bool:
        return self.observed_generation < self.generation

    @classmethod
    def managed_resource(cls, name: str = "", namespace: str = "", **kwargs) -> "SubResourceStatus":
        """Build the status of a ManagedResource."""
        kwargs.setdefault("required_condition_types", [
            ConditionType.RESOURCES_APPLIED,
            ConditionType.RESOURCES_HEALTHY,
        ])
        kwargs.setdefault("progressing_condition_type", ConditionType.RESOURCES_PROGRESSING)
        return cls(kind="ManagedResource", name=name, namespace=namespace, **kwargs)

    @classmethod
    def controller_installation(cls, name: str = "", namespace: str = "", **kwargs) -> "SubResourceStatus":
        """
        Build the status of a ControllerInstallation.

        An installation whose registration reference is behind the
        registration's current version is passed with observed_generation
        below generation.
        """
        kwargs.setdefault("required_condition_types", [
            ConditionType.CONTROLLER_INSTALLATION_VALID,
            ConditionType.CONTROLLER_INSTALLATION_INSTALLED,
            ConditionType.CONTROLLER_INSTALLATION_HEALTHY,
        ])
        kwargs.setdefault("progressing_condition_type", ConditionType.CONTROLLER_INSTALLATION_PROGRESSING)
        kwargs.setdefault("missing_condition_reason", Reason.MISSING_CONTROLLER_INSTALLATION_CONDITION)
        kwargs.setdefault("outdated_reason", Reason.OUTDATED_CONTROLLER_REGISTRATION)
        return cls(kind="ControllerInstallation", name=name, namespace=namespace, **kwargs)


__all__ = [
    "ObjectReference",
    "SubResourceStatus",
]
