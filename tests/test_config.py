# ============================================================================
# CONFIGURATION TESTS
# ============================================================================
# EPOCH: 1 - CLUSTER CARE
# STATUS: Tests - Defaults, environment overrides and CheckerConfig
# PURPOSE: Verify options are resolved once and validated
# CREATED: 19 OCT 2026
# ============================================================================
"""
Configuration Tests

Covers:
1. Built-in defaults
2. Environment overrides (CARE_*, PROMETHEUS_*, CLUSTER_DOMAIN)
3. Per-condition threshold parsing
4. CheckerConfig.from_defaults and validation
5. Injected strategies

Run with:
    pytest tests/test_config.py -v
"""

from datetime import timedelta
from unittest.mock import AsyncMock

import pytest

from core.config.defaults import (
    CareDefaults,
    Defaults,
    MonitoringDefaults,
    get_defaults,
    parse_thresholds,
    reset_defaults,
)
from core.contracts import ANNOTATION_IGNORE
from core.models import MonitoringInstance
from health.checker import CheckerConfig, HealthChecker
from health.store import InMemorySignalStore


@pytest.fixture(autouse=True)
def fresh_defaults():
    reset_defaults()
    yield
    reset_defaults()


class TestDefaults:

    def test_builtin_values(self):
        defaults = Defaults()

        assert defaults.care.progressing_threshold_seconds == 300
        assert defaults.care.extension_outdated_threshold_seconds is None
        assert defaults.care.ignore_annotation == ANNOTATION_IGNORE
        assert defaults.monitoring.query_timeout_seconds == 5
        assert defaults.monitoring.port == 9090

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("CARE_PROGRESSING_THRESHOLD_SECONDS", "120")
        monkeypatch.setenv("CARE_EXTENSION_OUTDATED_THRESHOLD_SECONDS", "600")
        monkeypatch.setenv("CARE_CONDITION_THRESHOLDS", "SystemComponentsHealthy=60")
        monkeypatch.setenv("CARE_MAX_PARALLEL", "4")
        monkeypatch.setenv("PROMETHEUS_QUERY_TIMEOUT_SECONDS", "2.5")
        monkeypatch.setenv("CLUSTER_DOMAIN", "cluster.example")

        defaults = get_defaults()

        assert defaults.care.progressing_threshold_seconds == 120
        assert defaults.care.extension_outdated_threshold_seconds == 600
        assert defaults.care.condition_thresholds == {"SystemComponentsHealthy": 60}
        assert defaults.care.max_parallel == 4
        assert defaults.monitoring.query_timeout_seconds == 2.5
        assert defaults.monitoring.cluster_domain == "cluster.example"

    def test_defaults_are_cached(self):
        assert get_defaults() is get_defaults()

    def test_parse_thresholds(self):
        assert parse_thresholds("A=60, B=1.5,") == {"A": 60.0, "B": 1.5}
        assert parse_thresholds("") == {}
        with pytest.raises(ValueError):
            parse_thresholds("A60")


class TestCheckerConfig:

    def test_from_defaults(self):
        defaults = Defaults(
            care=CareDefaults(
                progressing_threshold_seconds=60,
                extension_outdated_threshold_seconds=300,
                condition_thresholds={"SystemComponentsHealthy": 30},
            ),
            monitoring=MonitoringDefaults(query_timeout_seconds=2),
        )

        config = CheckerConfig.from_defaults(defaults)

        assert config.progressing_threshold == timedelta(minutes=1)
        assert config.extension_outdated_threshold == timedelta(minutes=5)
        assert config.condition_thresholds == {"SystemComponentsHealthy": timedelta(seconds=30)}
        assert config.alert_query_timeout == 2

    def test_overrides_win(self):
        config = CheckerConfig.from_defaults(Defaults(), max_parallel=3)

        assert config.max_parallel == 3

    @pytest.mark.parametrize("kwargs", [
        {"alert_query_timeout": 0},
        {"max_parallel": 0},
    ])
    def test_validation(self, kwargs):
        with pytest.raises(ValueError):
            CheckerConfig(**kwargs)

    def test_default_endpoint_builder_uses_monitoring_defaults(self):
        config = CheckerConfig(monitoring=MonitoringDefaults(port=9091))
        instance = MonitoringInstance(name="seed", namespace="garden")

        assert config.endpoint_builder(instance, 0) == (
            "prometheus-seed-0.prometheus-operated.garden.svc.cluster.local", 9091,
        )

    def test_injected_checker(self):
        checker = AsyncMock(return_value=False)
        config = CheckerConfig(health_alerts_checker=checker)

        health = HealthChecker(InMemorySignalStore(), config)

        assert health.alerts.health_alerts_checker is checker
        assert health.conditions.clock is config.clock
