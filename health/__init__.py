# ============================================================================
# HEALTH MODULE
# ============================================================================
# EPOCH: 1 - CLUSTER CARE
# STATUS: Core - Condition aggregation and health evaluation
# PURPOSE: Turn raw cluster signals into stable status conditions
# CREATED: 19 OCT 2026
# ============================================================================
"""
Health Module

Condition aggregation engine for a managed cluster:
- ConditionUpdater: condition transitions and threshold debouncing
- Evaluators: sub-resource conditions, extension reports, required
  workloads, firing health alerts
- HealthOrchestrator: concurrent aspects with per-aspect failure isolation
- SeedHealth: system and observability components of a seed cluster

Usage:
    from health import CheckerConfig, HealthChecker, SeedHealth

    checker = HealthChecker(store, CheckerConfig.from_defaults())
    conditions = await SeedHealth(checker).check(current_conditions)
"""

from health.core import Verdict, Clock, FakeClock, format_duration
from health.conditions import ConditionUpdater
from health.executor import TaskGroupExecutor, TaskOutcome, TaskTimeoutError
from health.store import (
    SignalStore,
    SignalStoreError,
    NotFoundError,
    InMemorySignalStore,
)
from health.monitoring import (
    MonitoringInstanceUnhealthy,
    PrometheusQueryError,
    check_monitoring_instance,
    has_prometheus_health_alerts,
    is_monitoring_instance_progressing,
)
from health.checker import CheckerConfig, HealthChecker
from health.orchestrator import Aspect, HealthOrchestrator, PassResult
from health.seed import SeedHealth

__all__ = [
    # Core types
    "Verdict",
    "Clock",
    "FakeClock",
    "format_duration",
    "ConditionUpdater",
    # Executor
    "TaskGroupExecutor",
    "TaskOutcome",
    "TaskTimeoutError",
    # Signal Store
    "SignalStore",
    "SignalStoreError",
    "NotFoundError",
    "InMemorySignalStore",
    # Monitoring
    "PrometheusQueryError",
    "MonitoringInstanceUnhealthy",
    "has_prometheus_health_alerts",
    "check_monitoring_instance",
    "is_monitoring_instance_progressing",
    # Wiring
    "CheckerConfig",
    "HealthChecker",
    "Aspect",
    "HealthOrchestrator",
    "PassResult",
    "SeedHealth",
]
