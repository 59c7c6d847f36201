# ============================================================================
# MODELS MODULE
# ============================================================================
# EPOCH: 1 - CLUSTER CARE
# STATUS: Model exports
# PURPOSE: Central export point for all Pydantic models
# LAST_REVIEWED: 19 OCT 2026
# ============================================================================
"""
Models Module - Central Export Point

All Pydantic models handed between the Signal Store and the evaluators.
Every model is frozen: a pass reads a snapshot and never mutates it.
"""

from core.models.condition import Condition, find_condition
from core.models.resources import ObjectReference, SubResourceStatus
from core.models.extension import ExtensionReport
from core.models.workload import Workload
from core.models.monitoring import MonitoringKind, MonitoringInstance

__all__ = [
    # Conditions
    "Condition",
    "find_condition",
    # Sub-resources
    "ObjectReference",
    "SubResourceStatus",
    # Extensions
    "ExtensionReport",
    # Workloads
    "Workload",
    # Monitoring
    "MonitoringKind",
    "MonitoringInstance",
]
