# ============================================================================
# EXTENSION REPORT EVALUATOR
# ============================================================================
# EPOCH: 1 - CLUSTER CARE
# STATUS: Evaluator - Extension heartbeat reports
# PURPOSE: Merge extension health reports into one verdict
# CREATED: 19 OCT 2026
# ============================================================================
"""
Extension Report Evaluator

Staleness (only with an outdated threshold):
- heartbeat older than now - threshold -> Unknown
- no heartbeat, but the report names its extension -> Unknown

Merging (worst wins, ties go to the earliest report):
    False > Unknown > Progressing > True

The merged reason is the extension type followed by the report's reason
("Worker" + "Bar" -> "WorkerBar"); the message is taken verbatim.
When every report is True the evaluator abstains.
"""

from dataclasses import dataclass
from datetime import timedelta
from typing import Iterable, Optional

from core.contracts import ConditionStatus, Reason
from core.logging import ComponentType, get_logger
from core.models import Condition, ExtensionReport
from health.conditions import ConditionUpdater
from health.core import Verdict, format_duration

logger = get_logger(__name__, ComponentType.EVALUATOR)

DEFAULT_FAILURE_MESSAGE = "failing health check"

_DEFAULT_REASONS = {
    ConditionStatus.FALSE: Reason.UNHEALTHY_REPORT,
    ConditionStatus.UNKNOWN: Reason.UNKNOWN_REPORT,
    ConditionStatus.PROGRESSING: Reason.PROGRESSING_REPORT,
}


@dataclass(frozen=True)
class _Finding:
    status: ConditionStatus
    reason: str
    message: str


class ExtensionReportEvaluator:
    """Merges extension reports into one aspect verdict."""

    def __init__(
        self,
        updater: ConditionUpdater,
        outdated_threshold: Optional[timedelta] = None,
    ):
        self.updater = updater
        self.outdated_threshold = outdated_threshold

    def evaluate(
        self,
        previous: Condition,
        reports: Iterable[ExtensionReport],
        outdated_threshold: Optional[timedelta] = None,
    ) -> Verdict:
        """
        Evaluate reports.

        Args:
            previous: The aspect's current condition
            reports: Extension reports in input order
            outdated_threshold: Heartbeat age limit; None falls back to the
                evaluator's own limit (None there disables staleness)
        """
        if outdated_threshold is None:
            outdated_threshold = self.outdated_threshold

        worst: Optional[_Finding] = None

        for report in reports:
            finding = self._stale_finding(report, outdated_threshold)
            if finding is None:
                finding = self._reported_finding(report)
            if finding is None:
                continue
            if worst is None or finding.status.is_worse_than(worst.status):
                worst = finding

        if worst is None:
            return Verdict.abstain()

        logger.debug(f"Extension reports merged to {worst.status.value} ({worst.reason})")

        if worst.status == ConditionStatus.FALSE:
            return Verdict.of(self.updater.failed(previous, worst.reason, worst.message))
        return Verdict.of(self.updater.updated(previous, worst.status, worst.reason, worst.message))

    def _stale_finding(
        self,
        report: ExtensionReport,
        threshold: Optional[timedelta],
    ) -> Optional[_Finding]:
        if threshold is None:
            return None

        if report.last_heartbeat_time is None:
            if not report.has_identity:
                return None
            return _Finding(
                status=ConditionStatus.UNKNOWN,
                reason=f"{report.source_type}{Reason.MISSING_HEALTH_CHECK_REPORT}",
                message=(
                    f"{report.source_type} extension ({report.identity}) has not "
                    f"reported a health check heartbeat."
                ),
            )

        age = self.updater.clock.since(report.last_heartbeat_time)
        if age <= threshold:
            return None

        return _Finding(
            status=ConditionStatus.UNKNOWN,
            reason=f"{report.source_type}{Reason.OUTDATED_HEALTH_CHECK_REPORT}",
            message=(
                f"{report.source_type} extension ({report.identity}) reports an outdated "
                f"health status (last updated: {format_duration(age)} ago at "
                f"{report.last_heartbeat_time.isoformat()})."
            ),
        )

    def _reported_finding(self, report: ExtensionReport) -> Optional[_Finding]:
        status = report.condition.status
        if status == ConditionStatus.TRUE:
            return None

        reason = report.condition.reason or _DEFAULT_REASONS[status]
        message = report.condition.message
        if not message and status != ConditionStatus.PROGRESSING:
            message = DEFAULT_FAILURE_MESSAGE

        return _Finding(
            status=status,
            reason=f"{report.source_type}{reason}",
            message=message,
        )


__all__ = [
    "ExtensionReportEvaluator",
    "DEFAULT_FAILURE_MESSAGE",
]
