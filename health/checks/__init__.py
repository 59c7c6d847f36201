# ============================================================================
# HEALTH EVALUATORS
# ============================================================================
# EPOCH: 1 - CLUSTER CARE
# STATUS: Evaluators - Signal-specific verdicts
# PURPOSE: Turn one kind of raw signal into a verdict for an aspect
# CREATED: 19 OCT 2026
# ============================================================================
"""
Health Evaluators

Each evaluator handles one kind of signal and returns a Verdict:

- ResourceConditionEvaluator: sub-resource condition sets (sync, pure)
- ExtensionReportEvaluator: heartbeat-tagged extension reports (sync, pure)
- WorkloadPresenceEvaluator: required workloads (async, lists the store)
- AlertQueryEvaluator: firing health alerts in Prometheus (async, queries)

The orchestrator composes them per aspect in priority order.
"""

from health.checks.resources import ResourceConditionEvaluator
from health.checks.extensions import ExtensionReportEvaluator
from health.checks.workloads import WorkloadPresenceEvaluator, WorkloadFetchError
from health.checks.alerts import (
    AlertQueryEvaluator,
    MonitoringReference,
    monitoring_references,
)

__all__ = [
    "ResourceConditionEvaluator",
    "ExtensionReportEvaluator",
    "WorkloadPresenceEvaluator",
    "WorkloadFetchError",
    "AlertQueryEvaluator",
    "MonitoringReference",
    "monitoring_references",
]
