# ============================================================================
# HEALTH EVALUATION CORE TYPES
# ============================================================================
# EPOCH: 1 - CLUSTER CARE
# STATUS: Infrastructure - Base types for evaluators
# PURPOSE: Verdict result type and injectable clocks
# CREATED: 19 OCT 2026
# ============================================================================
"""
Health Evaluation Core Types

Every evaluator answers with a Verdict:
- Verdict.of(condition): the evaluator has an opinion, use this condition
- Verdict.abstain(): no opinion, leave the previous condition unchanged

Abstaining is never expressed through a condition status, so "no opinion"
cannot be confused with a real True/False/Unknown.

Time is read from a Clock so that debouncing and staleness are testable.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from core.models import Condition


@dataclass(frozen=True)
class Verdict:
    """Result of an evaluator: a condition, or abstention."""
    condition: Optional[Condition] = None

    @classmethod
    def of(cls, condition: Condition) -> "Verdict":
        if condition is None:
            raise ValueError("Verdict.of() requires a condition; use Verdict.abstain()")
        return cls(condition=condition)

    @classmethod
    def abstain(cls) -> "Verdict":
        return NO_VERDICT

    @property
    def abstained(self) -> bool:
        return self.condition is None

    @property
    def present(self) -> bool:
        return self.condition is not None

    def __bool__(self) -> bool:
        return self.present


NO_VERDICT = Verdict()


class Clock:
    """Wall clock returning timezone-aware UTC."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)

    def since(self, moment: datetime) -> timedelta:
        return self.now() - _as_utc(moment)


class FakeClock(Clock):
    """Clock that only moves when told to."""

    def __init__(self, now: Optional[datetime] = None):
        self._now = _as_utc(now) if now is not None else datetime.now(timezone.utc)

    def now(self) -> datetime:
        return self._now

    def step(self, delta: timedelta) -> None:
        self._now = self._now + delta

    def set(self, now: datetime) -> None:
        self._now = _as_utc(now)


def _as_utc(moment: datetime) -> datetime:
    """Treat naive datetimes as UTC."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


def format_duration(delta: timedelta) -> str:
    """
    Render a duration the way status messages spell it: 5m0s, 1h2m3s, 30s.

    Sub-second remainders are dropped.
    """
    total = int(delta.total_seconds())
    sign = "-" if total < 0 else ""
    total = abs(total)
    hours, rest = divmod(total, 3600)
    minutes, seconds = divmod(rest, 60)
    if hours:
        return f"{sign}{hours}h{minutes}m{seconds}s"
    if minutes:
        return f"{sign}{minutes}m{seconds}s"
    return f"{sign}{seconds}s"


__all__ = [
    "Verdict",
    "NO_VERDICT",
    "Clock",
    "FakeClock",
    "format_duration",
]
