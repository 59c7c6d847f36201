# ============================================================================
# CORE MODULE
# ============================================================================
# EPOCH: 1 - CLUSTER CARE
# STATUS: Core module initialization
# PURPOSE: Export core contracts and models
# LAST_REVIEWED: 19 OCT 2026
# ============================================================================

from core.contracts import ConditionStatus, ConditionType, Reason
from core.models import (
    Condition,
    ObjectReference,
    SubResourceStatus,
    ExtensionReport,
    Workload,
    MonitoringKind,
    MonitoringInstance,
)

__all__ = [
    # Enums and constants
    "ConditionStatus",
    "ConditionType",
    "Reason",
    # Models
    "Condition",
    "ObjectReference",
    "SubResourceStatus",
    "ExtensionReport",
    "Workload",
    "MonitoringKind",
    "MonitoringInstance",
]
