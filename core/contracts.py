# ============================================================================
# BASE CONTRACTS & ENUMS
# ============================================================================
# EPOCH: 1 - CLUSTER CARE
# STATUS: Foundation - Condition status enum and stable string constants
# PURPOSE: Define condition statuses, condition types and canonical reasons
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: ConditionStatus, ConditionType, Reason
# DEPENDENCIES: enum
# ============================================================================
"""
Base contracts for cluster health evaluation.

Condition types and reasons are matched on by downstream consumers,
so every string here is part of the external contract. Change them
only together with the consumers.
"""

from enum import Enum
from typing import Iterable


# ============================================================================
# STATUS ENUM
# ============================================================================

class ConditionStatus(str, Enum):
    """
    Condition status values.

    Severity (worst wins):
        True < Progressing < Unknown < False
    """
    TRUE = "True"
    FALSE = "False"
    UNKNOWN = "Unknown"
    PROGRESSING = "Progressing"

    @property
    def severity(self) -> int:
        """Rank used for 'worst wins' merging."""
        order = {
            ConditionStatus.TRUE: 0,
            ConditionStatus.PROGRESSING: 1,
            ConditionStatus.UNKNOWN: 2,
            ConditionStatus.FALSE: 3,
        }
        return order[self]

    def is_worse_than(self, other: "ConditionStatus") -> bool:
        return self.severity > other.severity

    @classmethod
    def aggregate(cls, statuses: Iterable["ConditionStatus"]) -> "ConditionStatus":
        """Aggregate multiple statuses (worst wins)."""
        return max(statuses, key=lambda s: s.severity, default=cls.TRUE)


# ============================================================================
# CONDITION TYPES
# ============================================================================

class ConditionType:
    """Condition types observed on sub-resources and produced for aspects."""

    # Aspects of a seed cluster
    SEED_SYSTEM_COMPONENTS_HEALTHY = "SystemComponentsHealthy"
    SEED_OBSERVABILITY_COMPONENTS_HEALTHY = "ObservabilityComponentsHealthy"

    # Managed resources
    RESOURCES_APPLIED = "ResourcesApplied"
    RESOURCES_HEALTHY = "ResourcesHealthy"
    RESOURCES_PROGRESSING = "ResourcesProgressing"

    # Controller installations
    CONTROLLER_INSTALLATION_VALID = "Valid"
    CONTROLLER_INSTALLATION_INSTALLED = "Installed"
    CONTROLLER_INSTALLATION_HEALTHY = "Healthy"
    CONTROLLER_INSTALLATION_PROGRESSING = "Progressing"

    # Workloads and monitoring instances
    AVAILABLE = "Available"
    RECONCILED = "Reconciled"


# ============================================================================
# REASONS
# ============================================================================

class Reason:
    """Canonical condition reasons."""

    CONDITION_INITIALIZED = "ConditionInitialized"
    CONDITION_CHECK_ERROR = "ConditionCheckError"
    UNSPECIFIED = "Unspecified"

    OUTDATED_STATUS_ERROR = "OutdatedStatusError"
    OUTDATED_CONTROLLER_REGISTRATION = "OutdatedControllerRegistration"
    MISSING_MANAGED_RESOURCE_CONDITION = "MissingManagedResourceCondition"
    MISSING_CONTROLLER_INSTALLATION_CONDITION = "MissingControllerInstallationCondition"
    PROGRESSING_ROLLOUT_STUCK = "ProgressingRolloutStuck"

    DEPLOYMENT_MISSING = "DeploymentMissing"
    DEPLOYMENT_UNHEALTHY = "DeploymentUnhealthy"

    PROMETHEUS_HEALTH_ALERTS_FIRING = "PrometheusHealthAlertsFiring"

    # Suffixes appended to an extension's source type
    UNHEALTHY_REPORT = "UnhealthyReport"
    UNKNOWN_REPORT = "UnknownReport"
    PROGRESSING_REPORT = "ProgressingReport"
    OUTDATED_HEALTH_CHECK_REPORT = "OutdatedHealthCheckReport"
    MISSING_HEALTH_CHECK_REPORT = "MissingHealthCheckReport"

    SYSTEM_COMPONENTS_RUNNING = "SystemComponentsRunning"
    OBSERVABILITY_COMPONENTS_RUNNING = "ObservabilityComponentsRunning"


# Label on managed resources selecting the aspect they belong to
LABEL_CARE_CONDITION_TYPE = "care.gardener.cloud/condition-type"

# Annotation excluding a managed resource from alert checking
ANNOTATION_IGNORE = "resources.gardener.cloud/ignore"


__all__ = [
    "ConditionStatus",
    "ConditionType",
    "Reason",
    "LABEL_CARE_CONDITION_TYPE",
    "ANNOTATION_IGNORE",
]
