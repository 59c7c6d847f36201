# ============================================================================
# CONDITION MODEL TESTS
# ============================================================================
# EPOCH: 1 - CLUSTER CARE
# STATUS: Tests - Condition transitions and threshold debouncing
# PURPOSE: Verify transition/update times and failure debouncing
# CREATED: 19 OCT 2026
# ============================================================================
"""
Condition Model Tests

Covers:
1. init / get_or_init
2. last_transition_time moves only on status change
3. last_update_time moves on reason/message/codes change
4. unknown_error and new_or_error
5. failed() debouncing with per-type thresholds
6. Status severity and aggregation
7. Rendering for the status writer

Run with:
    pytest tests/test_conditions.py -v
"""

from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from core.contracts import ConditionStatus, Reason
from core.models import Condition
from health.conditions import ConditionUpdater, INITIALIZED_MESSAGE
from health.core import FakeClock, Verdict, format_duration


T0 = datetime(2026, 10, 1, 12, 0, 0, tzinfo=timezone.utc)


def _updater(thresholds=None):
    clock = FakeClock(T0)
    return ConditionUpdater(clock=clock, thresholds=thresholds), clock


# ============================================================================
# INIT
# ============================================================================

class TestInit:

    def test_init_is_unknown(self):
        updater, _ = _updater()
        condition = updater.init("SystemComponentsHealthy")

        assert condition.status == ConditionStatus.UNKNOWN
        assert condition.reason == Reason.CONDITION_INITIALIZED
        assert condition.message == INITIALIZED_MESSAGE
        assert condition.last_transition_time == T0
        assert condition.last_update_time == T0

    def test_get_or_init_returns_existing(self):
        updater, _ = _updater()
        existing = Condition(type="A", status=ConditionStatus.TRUE, reason="Fine")

        assert updater.get_or_init([existing], "A") is existing

    def test_get_or_init_initializes_missing(self):
        updater, _ = _updater()
        existing = Condition(type="A", status=ConditionStatus.TRUE)

        condition = updater.get_or_init([existing], "B")
        assert condition.type == "B"
        assert condition.status == ConditionStatus.UNKNOWN


# ============================================================================
# UPDATED
# ============================================================================

class TestUpdated:

    def test_status_change_moves_both_times(self):
        updater, clock = _updater()
        condition = updater.init("A")
        clock.step(timedelta(minutes=1))

        updated = updater.updated(condition, ConditionStatus.TRUE, "Fine", "all good")

        assert updated.status == ConditionStatus.TRUE
        assert updated.last_transition_time == T0 + timedelta(minutes=1)
        assert updated.last_update_time == T0 + timedelta(minutes=1)

    def test_message_change_moves_only_update_time(self):
        updater, clock = _updater()
        condition = updater.updated(updater.init("A"), ConditionStatus.FALSE, "Broken", "one")
        clock.step(timedelta(minutes=2))

        updated = updater.updated(condition, ConditionStatus.FALSE, "Broken", "two")

        assert updated.last_transition_time == T0
        assert updated.last_update_time == T0 + timedelta(minutes=2)

    def test_same_values_keep_both_times(self):
        updater, clock = _updater()
        condition = updater.updated(updater.init("A"), ConditionStatus.FALSE, "Broken", "one")
        clock.step(timedelta(minutes=2))

        updated = updater.updated(condition, ConditionStatus.FALSE, "Broken", "one")

        assert updated == condition

    def test_codes_change_moves_update_time(self):
        updater, clock = _updater()
        condition = updater.updated(updater.init("A"), ConditionStatus.FALSE, "Broken", "one")
        clock.step(timedelta(seconds=30))

        updated = updater.updated(
            condition, ConditionStatus.FALSE, "Broken", "one", codes=["ERR_INFRA_QUOTA_EXCEEDED"],
        )

        assert updated.codes == ["ERR_INFRA_QUOTA_EXCEEDED"]
        assert updated.last_update_time == T0 + timedelta(seconds=30)
        assert updated.last_transition_time == T0

    def test_empty_reason_becomes_unspecified(self):
        updater, _ = _updater()
        updated = updater.updated(updater.init("A"), ConditionStatus.FALSE, "", "broken")

        assert updated.reason == Reason.UNSPECIFIED

    def test_input_condition_is_not_mutated(self):
        updater, _ = _updater()
        condition = updater.init("A")

        updater.updated(condition, ConditionStatus.TRUE, "Fine", "")

        assert condition.status == ConditionStatus.UNKNOWN

    def test_conditions_are_frozen(self):
        condition = Condition(type="A")
        with pytest.raises(ValidationError):
            condition.status = ConditionStatus.TRUE


# ============================================================================
# ERRORS
# ============================================================================

class TestErrorConditions:

    def test_unknown_error(self):
        updater, _ = _updater()
        condition = updater.unknown_error(updater.init("A"), RuntimeError("boom"))

        assert condition.status == ConditionStatus.UNKNOWN
        assert condition.reason == Reason.CONDITION_CHECK_ERROR
        assert condition.message == "boom"

    def test_new_or_error_prefers_error(self):
        updater, _ = _updater()
        old = updater.init("A")
        new = updater.updated(old, ConditionStatus.TRUE, "Fine", "")

        result = updater.new_or_error(old, new, ValueError("listing failed"))

        assert result.status == ConditionStatus.UNKNOWN
        assert result.message == "listing failed"

    def test_new_or_error_without_error(self):
        updater, _ = _updater()
        old = updater.init("A")
        new = updater.updated(old, ConditionStatus.TRUE, "Fine", "")

        assert updater.new_or_error(old, new) is new

    def test_new_or_error_without_condition(self):
        updater, _ = _updater()
        result = updater.new_or_error(updater.init("A"), None)

        assert result.status == ConditionStatus.UNKNOWN
        assert result.reason == Reason.CONDITION_CHECK_ERROR


# ============================================================================
# FAILED (THRESHOLD DEBOUNCE)
# ============================================================================

class TestFailed:

    def test_without_threshold_is_false(self):
        updater, _ = _updater()
        healthy = updater.updated(updater.init("A"), ConditionStatus.TRUE, "Fine", "")

        failed = updater.failed(healthy, "Broken", "something broke")

        assert failed.status == ConditionStatus.FALSE
        assert failed.reason == "Broken"
        assert failed.message == "something broke"

    def test_true_becomes_progressing(self):
        updater, _ = _updater({"A": timedelta(minutes=5)})
        healthy = updater.updated(updater.init("A"), ConditionStatus.TRUE, "Fine", "")

        assert updater.failed(healthy, "Broken", "").status == ConditionStatus.PROGRESSING

    def test_progressing_within_threshold_stays_progressing(self):
        updater, clock = _updater({"A": timedelta(minutes=5)})
        healthy = updater.updated(updater.init("A"), ConditionStatus.TRUE, "Fine", "")
        progressing = updater.failed(healthy, "Broken", "")

        clock.step(timedelta(minutes=5))
        still = updater.failed(progressing, "Broken", "")

        assert still.status == ConditionStatus.PROGRESSING
        assert still.last_transition_time == T0

    def test_progressing_past_threshold_becomes_false(self):
        updater, clock = _updater({"A": timedelta(minutes=5)})
        healthy = updater.updated(updater.init("A"), ConditionStatus.TRUE, "Fine", "")
        progressing = updater.failed(healthy, "Broken", "")

        clock.step(timedelta(minutes=5, seconds=1))
        failed = updater.failed(progressing, "Broken", "")

        assert failed.status == ConditionStatus.FALSE
        assert failed.last_transition_time == clock.now()

    def test_false_with_new_reason_goes_back_to_progressing(self):
        updater, _ = _updater({"A": timedelta(minutes=5)})
        failed = updater.updated(updater.init("A"), ConditionStatus.FALSE, "Broken", "")

        again = updater.failed(failed, "OtherwiseBroken", "")

        assert again.status == ConditionStatus.PROGRESSING
        assert again.reason == "OtherwiseBroken"

    def test_false_with_same_reason_stays_false(self):
        updater, _ = _updater({"A": timedelta(minutes=5)})
        failed = updater.updated(updater.init("A"), ConditionStatus.FALSE, "Broken", "")

        assert updater.failed(failed, "Broken", "new message").status == ConditionStatus.FALSE

    def test_unknown_becomes_false(self):
        updater, _ = _updater({"A": timedelta(minutes=5)})

        assert updater.failed(updater.init("A"), "Broken", "").status == ConditionStatus.FALSE

    def test_threshold_applies_per_type(self):
        updater, _ = _updater({"A": timedelta(minutes=5)})
        healthy = updater.updated(updater.init("B"), ConditionStatus.TRUE, "Fine", "")

        assert updater.failed(healthy, "Broken", "").status == ConditionStatus.FALSE


# ============================================================================
# STATUS AND RENDERING
# ============================================================================

class TestStatus:

    def test_severity_order(self):
        assert ConditionStatus.FALSE.is_worse_than(ConditionStatus.UNKNOWN)
        assert ConditionStatus.UNKNOWN.is_worse_than(ConditionStatus.PROGRESSING)
        assert ConditionStatus.PROGRESSING.is_worse_than(ConditionStatus.TRUE)
        assert not ConditionStatus.TRUE.is_worse_than(ConditionStatus.TRUE)

    def test_aggregate(self):
        statuses = [ConditionStatus.TRUE, ConditionStatus.UNKNOWN, ConditionStatus.PROGRESSING]
        assert ConditionStatus.aggregate(statuses) == ConditionStatus.UNKNOWN
        assert ConditionStatus.aggregate([]) == ConditionStatus.TRUE

    def test_to_dict(self):
        condition = Condition(
            type="A",
            status=ConditionStatus.FALSE,
            reason="Broken",
            message="m",
            last_transition_time=T0,
            last_update_time=T0,
        )

        rendered = condition.to_dict()

        assert rendered["status"] == "False"
        assert rendered["lastTransitionTime"] == "2026-10-01T12:00:00+00:00"
        assert "codes" not in rendered

    def test_verdict(self):
        condition = Condition(type="A")

        assert Verdict.of(condition).present
        assert Verdict.abstain().abstained
        assert not Verdict.abstain()
        with pytest.raises(ValueError):
            Verdict.of(None)

    @pytest.mark.parametrize("delta, expected", [
        (timedelta(minutes=5), "5m0s"),
        (timedelta(hours=1, minutes=2, seconds=3), "1h2m3s"),
        (timedelta(seconds=30), "30s"),
    ])
    def test_format_duration(self, delta, expected):
        assert format_duration(delta) == expected
