# ============================================================================
# CONFIGURATION DEFAULTS
# ============================================================================
# EPOCH: 1 - CLUSTER CARE
# STATUS: Core - Default configuration values
# PURPOSE: Centralized defaults for thresholds, timeouts and monitoring access
# CREATED: 19 OCT 2026
# ============================================================================
"""
Configuration Defaults

Provides defaults for health evaluation. These can be overridden via
environment variables or passed explicitly to CheckerConfig.

Design:
- Immutable dataclasses for defaults
- Environment variable overrides
- Durations are kept in seconds here and turned into timedelta by
  CheckerConfig
"""

import os
from dataclasses import dataclass, field
from typing import Dict, Optional

from core.contracts import ANNOTATION_IGNORE


def _optional_float(value: Optional[str]) -> Optional[float]:
    if value is None or value.strip() == "":
        return None
    return float(value)


def parse_thresholds(value: Optional[str]) -> Dict[str, float]:
    """
    Parse per-condition thresholds.

    Format: "SystemComponentsHealthy=60,ObservabilityComponentsHealthy=120"
    """
    thresholds: Dict[str, float] = {}
    if not value:
        return thresholds

    for entry in value.split(","):
        entry = entry.strip()
        if not entry:
            continue
        condition_type, sep, seconds = entry.partition("=")
        if not sep or not condition_type.strip():
            raise ValueError(f"invalid condition threshold entry: {entry!r}")
        thresholds[condition_type.strip()] = float(seconds)

    return thresholds


@dataclass(frozen=True)
class CareDefaults:
    """
    Defaults for aspect evaluation.

    Controls debouncing, staleness and pass budgets.
    """
    # Progressing=True longer than this is a stuck rollout
    progressing_threshold_seconds: float = 300.0

    # None disables heartbeat staleness checks for extension reports
    extension_outdated_threshold_seconds: Optional[float] = None

    # Per condition type: how long a failing aspect stays Progressing
    condition_thresholds: Dict[str, float] = field(default_factory=dict)

    # Deadline shared by every evaluator of one pass
    pass_timeout_seconds: float = 60.0
    max_parallel: int = 10

    ignore_annotation: str = ANNOTATION_IGNORE

    @classmethod
    def from_env(cls) -> "CareDefaults":
        """Create from environment variables."""
        return cls(
            progressing_threshold_seconds=float(os.getenv("CARE_PROGRESSING_THRESHOLD_SECONDS", 300)),
            extension_outdated_threshold_seconds=_optional_float(
                os.getenv("CARE_EXTENSION_OUTDATED_THRESHOLD_SECONDS")
            ),
            condition_thresholds=parse_thresholds(os.getenv("CARE_CONDITION_THRESHOLDS")),
            pass_timeout_seconds=float(os.getenv("CARE_PASS_TIMEOUT_SECONDS", 60)),
            max_parallel=int(os.getenv("CARE_MAX_PARALLEL", 10)),
            ignore_annotation=os.getenv("CARE_IGNORE_ANNOTATION", ANNOTATION_IGNORE),
        )


@dataclass(frozen=True)
class MonitoringDefaults:
    """
    Defaults for querying monitoring instances.

    Replicas are addressed through the instance's headless service:
    <service_prefix>-<instance>-<replica>.<service_name>.<namespace>.<cluster_domain>
    """
    query_timeout_seconds: float = 5.0

    service_prefix: str = "prometheus"
    service_name: str = "prometheus-operated"
    port: int = 9090
    cluster_domain: str = "svc.cluster.local"

    health_alerts_query: str = 'count(ALERTS{alertstate="firing", type="health"}) or vector(0)'

    @classmethod
    def from_env(cls) -> "MonitoringDefaults":
        """Create from environment variables."""
        return cls(
            query_timeout_seconds=float(os.getenv("PROMETHEUS_QUERY_TIMEOUT_SECONDS", 5)),
            service_name=os.getenv("PROMETHEUS_SERVICE_NAME", "prometheus-operated"),
            port=int(os.getenv("PROMETHEUS_PORT", 9090)),
            cluster_domain=os.getenv("CLUSTER_DOMAIN", "svc.cluster.local"),
        )


# ============================================================================
# GLOBAL DEFAULTS INSTANCE
# ============================================================================

@dataclass
class Defaults:
    """Container for all default configurations."""
    care: CareDefaults = field(default_factory=CareDefaults)
    monitoring: MonitoringDefaults = field(default_factory=MonitoringDefaults)

    @classmethod
    def from_env(cls) -> "Defaults":
        """Create all defaults from environment variables."""
        return cls(
            care=CareDefaults.from_env(),
            monitoring=MonitoringDefaults.from_env(),
        )


_defaults: Optional[Defaults] = None


def get_defaults() -> Defaults:
    """Get global defaults instance."""
    global _defaults
    if _defaults is None:
        _defaults = Defaults.from_env()
    return _defaults


def reset_defaults() -> None:
    """Reset defaults (for testing)."""
    global _defaults
    _defaults = None


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "CareDefaults",
    "MonitoringDefaults",
    "Defaults",
    "get_defaults",
    "reset_defaults",
    "parse_thresholds",
]
