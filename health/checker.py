# ============================================================================
# HEALTH CHECKER
# ============================================================================
# EPOCH: 1 - CLUSTER CARE
# STATUS: Infrastructure - Configuration and evaluator wiring
# PURPOSE: Resolve options once; hand evaluators their collaborators
# CREATED: 19 OCT 2026
# ============================================================================
"""
Health Checker

CheckerConfig enumerates every recognized option, resolved once at
construction:

    progressing_threshold         Progressing=True longer than this is stuck
    extension_outdated_threshold  Heartbeat age limit (None: disabled)
    condition_thresholds          Per aspect type: Progressing grace period
    alert_query_timeout           Per replica query timeout (seconds)
    ignore_annotation             Owner annotation skipping alert checks
    pass_timeout                  Deadline for one orchestrator pass
    max_parallel                  Concurrency bound for task groups
    health_alerts_checker         async (endpoint, port) -> firing?
    endpoint_builder              (instance, replica) -> (endpoint, port)
    clock                         Time source

The two strategies are injected collaborators; there are no module-level
hooks to patch.

HealthChecker wires the evaluators against one Signal Store.
"""

from dataclasses import dataclass, field
from datetime import timedelta
from functools import partial
from typing import Dict, Optional

from core.config.defaults import Defaults, MonitoringDefaults, get_defaults
from core.contracts import ANNOTATION_IGNORE
from core.logging import ComponentType, get_logger
from health.checks.alerts import AlertQueryEvaluator, EndpointBuilder, HealthAlertsChecker
from health.checks.extensions import ExtensionReportEvaluator
from health.checks.resources import ResourceConditionEvaluator
from health.checks.workloads import WorkloadPresenceEvaluator
from health.conditions import ConditionUpdater
from health.core import Clock
from health.executor import TaskGroupExecutor
from health.monitoring import (
    has_prometheus_health_alerts,
    prometheus_endpoint_from_headless_service,
)
from health.store import SignalStore

logger = get_logger(__name__, ComponentType.ORCHESTRATOR)


@dataclass
class CheckerConfig:
    """Options for evaluators and the orchestrator."""
    progressing_threshold: Optional[timedelta] = timedelta(minutes=5)
    extension_outdated_threshold: Optional[timedelta] = None
    condition_thresholds: Dict[str, timedelta] = field(default_factory=dict)
    alert_query_timeout: float = 5.0
    ignore_annotation: str = ANNOTATION_IGNORE
    pass_timeout: Optional[float] = 60.0
    max_parallel: int = 10
    monitoring: MonitoringDefaults = field(default_factory=MonitoringDefaults)
    health_alerts_checker: Optional[HealthAlertsChecker] = None
    endpoint_builder: Optional[EndpointBuilder] = None
    clock: Clock = field(default_factory=Clock)

    def __post_init__(self):
        if self.alert_query_timeout <= 0:
            raise ValueError("alert_query_timeout must be positive")
        if self.max_parallel < 1:
            raise ValueError("max_parallel must be at least 1")

        if self.health_alerts_checker is None:
            self.health_alerts_checker = partial(
                has_prometheus_health_alerts,
                timeout=self.alert_query_timeout,
                query=self.monitoring.health_alerts_query,
            )
        if self.endpoint_builder is None:
            self.endpoint_builder = partial(
                prometheus_endpoint_from_headless_service,
                defaults=self.monitoring,
            )

    @classmethod
    def from_defaults(
        cls,
        defaults: Optional[Defaults] = None,
        **overrides,
    ) -> "CheckerConfig":
        """
        Build a config from environment-backed defaults.

        Args:
            defaults: Defaults to use (global defaults if None)
            **overrides: Field values taking precedence
        """
        defaults = defaults or get_defaults()
        care = defaults.care

        outdated = care.extension_outdated_threshold_seconds
        values = dict(
            progressing_threshold=timedelta(seconds=care.progressing_threshold_seconds),
            extension_outdated_threshold=None if outdated is None else timedelta(seconds=outdated),
            condition_thresholds={
                condition_type: timedelta(seconds=seconds)
                for condition_type, seconds in care.condition_thresholds.items()
            },
            alert_query_timeout=defaults.monitoring.query_timeout_seconds,
            ignore_annotation=care.ignore_annotation,
            pass_timeout=care.pass_timeout_seconds,
            max_parallel=care.max_parallel,
            monitoring=defaults.monitoring,
        )
        values.update(overrides)
        return cls(**values)


class HealthChecker:
    """
    Evaluators bound to one Signal Store and one config.

    Attributes:
        conditions: ConditionUpdater shared by all evaluators
        resources: ResourceConditionEvaluator
        extensions: ExtensionReportEvaluator
        workloads: WorkloadPresenceEvaluator
        alerts: AlertQueryEvaluator
    """

    def __init__(self, store: SignalStore, config: Optional[CheckerConfig] = None):
        self.store = store
        self.config = config or CheckerConfig.from_defaults()

        self.conditions = ConditionUpdater(
            clock=self.config.clock,
            thresholds=self.config.condition_thresholds,
        )
        # Replica queries are bounded by their own timeout and by the
        # deadline of the pass that awaits them.
        self.query_executor = TaskGroupExecutor(
            overall_timeout=None,
            max_parallel=self.config.max_parallel,
        )

        self.resources = ResourceConditionEvaluator(self.conditions)
        self.extensions = ExtensionReportEvaluator(
            self.conditions,
            outdated_threshold=self.config.extension_outdated_threshold,
        )
        self.workloads = WorkloadPresenceEvaluator(store, self.conditions)
        self.alerts = AlertQueryEvaluator(
            store=store,
            updater=self.conditions,
            executor=self.query_executor,
            health_alerts_checker=self.config.health_alerts_checker,
            endpoint_builder=self.config.endpoint_builder,
            query_timeout=self.config.alert_query_timeout,
            ignore_annotation=self.config.ignore_annotation,
        )

        logger.debug(
            f"Health checker configured: progressing threshold {self.config.progressing_threshold}, "
            f"alert query timeout {self.config.alert_query_timeout}s, "
            f"max parallel {self.config.max_parallel}"
        )

    @property
    def clock(self) -> Clock:
        return self.config.clock


__all__ = [
    "CheckerConfig",
    "HealthChecker",
]
