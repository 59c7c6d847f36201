# ============================================================================
# RESOURCE CONDITION EVALUATOR TESTS
# ============================================================================
# EPOCH: 1 - CLUSTER CARE
# STATUS: Tests - Sub-resource condition aggregation
# PURPOSE: Verify outdated, missing, stuck-rollout and first-false rules
# CREATED: 19 OCT 2026
# ============================================================================
"""
Resource Condition Evaluator Tests

Covers:
1. Vacuous success (no resources)
2. Outdated generation short-circuits
3. Missing required conditions
4. Progressing debounce and its boundary
5. First-false rule with primary-type preference
6. Unknown passthrough
7. ControllerInstallation reasons

Run with:
    pytest tests/test_resource_checks.py -v
"""

from datetime import datetime, timedelta, timezone

import pytest

from core.contracts import ConditionStatus, ConditionType, Reason
from core.models import Condition, SubResourceStatus
from health.checks.resources import ResourceConditionEvaluator
from health.conditions import ConditionUpdater
from health.core import FakeClock


NOW = datetime(2026, 10, 1, 12, 0, 0, tzinfo=timezone.utc)
THRESHOLD = timedelta(minutes=5)


def _cond(condition_type, status, reason="", message="", since=NOW):
    return Condition(
        type=condition_type,
        status=status,
        reason=reason,
        message=message,
        last_transition_time=since,
        last_update_time=since,
    )


def _healthy_conditions():
    return [
        _cond(ConditionType.RESOURCES_APPLIED, ConditionStatus.TRUE),
        _cond(ConditionType.RESOURCES_HEALTHY, ConditionStatus.TRUE),
        _cond(ConditionType.RESOURCES_PROGRESSING, ConditionStatus.FALSE),
    ]


def _mr(name="foo", conditions=None, **kwargs):
    return SubResourceStatus.managed_resource(
        name=name,
        namespace="garden",
        conditions=_healthy_conditions() if conditions is None else conditions,
        **kwargs,
    )


@pytest.fixture
def clock():
    return FakeClock(NOW)


@pytest.fixture
def evaluator(clock):
    return ResourceConditionEvaluator(ConditionUpdater(clock=clock))


@pytest.fixture
def previous(evaluator):
    return evaluator.updater.init("SystemComponentsHealthy")


# ============================================================================
# SUCCESS
# ============================================================================

class TestSuccess:

    def test_no_resources_is_true(self, evaluator, previous):
        verdict = evaluator.evaluate(previous, [], THRESHOLD)

        assert verdict.present
        assert verdict.condition.status == ConditionStatus.TRUE
        assert verdict.condition.reason == "ResourcesHealthy"

    def test_no_required_types_is_true(self, evaluator, previous):
        resource = SubResourceStatus(name="foo", namespace="garden")

        verdict = evaluator.evaluate(previous, [resource])

        assert verdict.condition.status == ConditionStatus.TRUE

    def test_healthy_resources(self, evaluator, previous):
        verdict = evaluator.evaluate(
            previous, [_mr("foo"), _mr("bar")], THRESHOLD,
            success_reason="SystemComponentsRunning",
            success_message="All system components are healthy.",
        )

        assert verdict.condition.status == ConditionStatus.TRUE
        assert verdict.condition.reason == "SystemComponentsRunning"
        assert verdict.condition.message == "All system components are healthy."

    def test_check_abstains_when_healthy(self, evaluator, previous):
        assert evaluator.check(previous, [_mr()], THRESHOLD).abstained


# ============================================================================
# OUTDATED
# ============================================================================

class TestOutdated:

    def test_outdated_generation(self, evaluator, previous):
        resource = _mr(generation=2, observed_generation=1)

        verdict = evaluator.evaluate(previous, [resource], THRESHOLD)

        assert verdict.condition.status == ConditionStatus.FALSE
        assert verdict.condition.reason == Reason.OUTDATED_STATUS_ERROR
        assert verdict.condition.message == "outdated"

    def test_outdated_wins_over_false_condition(self, evaluator, previous):
        resource = _mr(
            generation=2,
            observed_generation=1,
            conditions=[
                _cond(ConditionType.RESOURCES_APPLIED, ConditionStatus.FALSE, "fooFailed"),
                _cond(ConditionType.RESOURCES_HEALTHY, ConditionStatus.TRUE),
            ],
        )

        verdict = evaluator.evaluate(previous, [resource], THRESHOLD)

        assert verdict.condition.reason == Reason.OUTDATED_STATUS_ERROR

    def test_outdated_controller_registration(self, evaluator, previous):
        installation = SubResourceStatus.controller_installation(
            name="foo-abc12",
            generation=3,
            observed_generation=2,
        )

        verdict = evaluator.evaluate(previous, [installation])

        assert verdict.condition.reason == Reason.OUTDATED_CONTROLLER_REGISTRATION


# ============================================================================
# MISSING CONDITIONS
# ============================================================================

class TestMissing:

    def test_missing_required_type(self, evaluator, previous):
        resource = _mr(conditions=[
            _cond(ConditionType.RESOURCES_APPLIED, ConditionStatus.FALSE, "fooFailed"),
        ])

        verdict = evaluator.evaluate(previous, [resource], THRESHOLD)

        assert verdict.condition.status == ConditionStatus.FALSE
        assert verdict.condition.reason == Reason.MISSING_MANAGED_RESOURCE_CONDITION
        assert verdict.condition.message == ConditionType.RESOURCES_HEALTHY

    def test_no_conditions_reported(self, evaluator, previous):
        verdict = evaluator.evaluate(previous, [_mr(conditions=[])], THRESHOLD)

        assert verdict.condition.reason == Reason.MISSING_MANAGED_RESOURCE_CONDITION
        assert verdict.condition.message == ""

    def test_missing_controller_installation_condition(self, evaluator, previous):
        installation = SubResourceStatus.controller_installation(
            name="foo-abc12",
            conditions=[
                _cond(ConditionType.CONTROLLER_INSTALLATION_VALID, ConditionStatus.TRUE),
                _cond(ConditionType.CONTROLLER_INSTALLATION_INSTALLED, ConditionStatus.TRUE),
            ],
        )

        verdict = evaluator.evaluate(previous, [installation])

        assert verdict.condition.reason == Reason.MISSING_CONTROLLER_INSTALLATION_CONDITION
        assert verdict.condition.message == ConditionType.CONTROLLER_INSTALLATION_HEALTHY


# ============================================================================
# PROGRESSING
# ============================================================================

class TestProgressing:

    def _progressing_resource(self, since):
        return _mr(conditions=[
            _cond(ConditionType.RESOURCES_APPLIED, ConditionStatus.TRUE),
            _cond(ConditionType.RESOURCES_HEALTHY, ConditionStatus.TRUE),
            _cond(ConditionType.RESOURCES_PROGRESSING, ConditionStatus.TRUE, since=since),
        ])

    def test_under_threshold_is_healthy(self, evaluator, previous):
        resource = self._progressing_resource(NOW - timedelta(minutes=1))

        verdict = evaluator.evaluate(previous, [resource], THRESHOLD)

        assert verdict.condition.status == ConditionStatus.TRUE

    def test_exactly_at_threshold_is_not_stuck(self, evaluator, previous):
        resource = self._progressing_resource(NOW - THRESHOLD)

        verdict = evaluator.evaluate(previous, [resource], THRESHOLD)

        assert verdict.condition.status == ConditionStatus.TRUE

    def test_one_tick_past_threshold_is_stuck(self, evaluator, previous, clock):
        resource = self._progressing_resource(NOW - THRESHOLD)
        clock.step(timedelta(seconds=1))

        verdict = evaluator.evaluate(previous, [resource], THRESHOLD)

        assert verdict.condition.status == ConditionStatus.FALSE
        assert verdict.condition.reason == Reason.PROGRESSING_ROLLOUT_STUCK
        assert verdict.condition.message == (
            "ManagedResource garden/foo is progressing for more than 5m0s (elapsed 5m1s)"
        )

    def test_without_threshold_progressing_is_ignored(self, evaluator, previous):
        resource = self._progressing_resource(NOW - timedelta(hours=3))

        verdict = evaluator.evaluate(previous, [resource], None)

        assert verdict.condition.status == ConditionStatus.TRUE

    def test_stuck_is_idempotent(self, evaluator, previous):
        resource = self._progressing_resource(NOW - timedelta(minutes=10))

        first = evaluator.evaluate(previous, [resource], THRESHOLD).condition
        second = evaluator.evaluate(first, [resource], THRESHOLD).condition

        assert first == second


# ============================================================================
# FIRST FALSE / UNKNOWN
# ============================================================================

class TestFirstFalse:

    def test_primary_type_preferred(self, evaluator, previous):
        resource = _mr(conditions=[
            _cond(ConditionType.RESOURCES_HEALTHY, ConditionStatus.FALSE, "barFailed", "bar is unhealthy"),
            _cond(ConditionType.RESOURCES_APPLIED, ConditionStatus.FALSE, "fooFailed", "foo is unhealthy"),
        ])

        verdict = evaluator.evaluate(previous, [resource], THRESHOLD)

        assert verdict.condition.status == ConditionStatus.FALSE
        assert verdict.condition.reason == "fooFailed"
        assert verdict.condition.message == "foo is unhealthy"

    def test_healthy_false(self, evaluator, previous):
        resource = _mr(conditions=[
            _cond(ConditionType.RESOURCES_APPLIED, ConditionStatus.TRUE),
            _cond(ConditionType.RESOURCES_HEALTHY, ConditionStatus.FALSE, "barFailed", "bar is unhealthy"),
        ])

        verdict = evaluator.evaluate(previous, [resource], THRESHOLD)

        assert verdict.condition.reason == "barFailed"
        assert verdict.condition.message == "bar is unhealthy"

    def test_unknown_keeps_own_reason(self, evaluator, previous):
        resource = _mr(conditions=[
            _cond(ConditionType.RESOURCES_APPLIED, ConditionStatus.TRUE),
            _cond(ConditionType.RESOURCES_HEALTHY, ConditionStatus.UNKNOWN, "Probing", "probe pending"),
        ])

        verdict = evaluator.evaluate(previous, [resource], THRESHOLD)

        assert verdict.condition.status == ConditionStatus.FALSE
        assert verdict.condition.reason == "Probing"
        assert verdict.condition.message == "probe pending"

    def test_empty_reason_is_unspecified(self, evaluator, previous):
        resource = _mr(conditions=[
            _cond(ConditionType.RESOURCES_APPLIED, ConditionStatus.FALSE, "", "no reason given"),
            _cond(ConditionType.RESOURCES_HEALTHY, ConditionStatus.TRUE),
        ])

        verdict = evaluator.evaluate(previous, [resource], THRESHOLD)

        assert verdict.condition.reason == Reason.UNSPECIFIED

    def test_first_failing_resource_wins(self, evaluator, previous):
        broken = _mr("bar", conditions=[
            _cond(ConditionType.RESOURCES_APPLIED, ConditionStatus.FALSE, "barFailed"),
            _cond(ConditionType.RESOURCES_HEALTHY, ConditionStatus.TRUE),
        ])
        missing = _mr("baz", conditions=[])

        verdict = evaluator.evaluate(previous, [_mr("foo"), broken, missing], THRESHOLD)

        assert verdict.condition.reason == "barFailed"

    def test_failure_is_debounced_by_aspect_threshold(self, clock):
        updater = ConditionUpdater(clock=clock, thresholds={"SystemComponentsHealthy": THRESHOLD})
        evaluator = ResourceConditionEvaluator(updater)
        healthy = updater.updated(
            updater.init("SystemComponentsHealthy"), ConditionStatus.TRUE, "Fine", "",
        )
        resource = _mr(conditions=[
            _cond(ConditionType.RESOURCES_APPLIED, ConditionStatus.FALSE, "fooFailed"),
            _cond(ConditionType.RESOURCES_HEALTHY, ConditionStatus.TRUE),
        ])

        verdict = evaluator.evaluate(healthy, [resource], THRESHOLD)

        assert verdict.condition.status == ConditionStatus.PROGRESSING
        assert verdict.condition.reason == "fooFailed"
