# ============================================================================
# MONITORING BACKEND
# ============================================================================
# EPOCH: 1 - CLUSTER CARE
# STATUS: Infrastructure - Prometheus health-alert queries
# PURPOSE: Query replicas for firing health alerts; check instance health
# CREATED: 19 OCT 2026
# ============================================================================
"""
Monitoring Backend

Health alerts are counted on each Prometheus replica with

    count(ALERTS{alertstate="firing", type="health"}) or vector(0)

sent to http://<endpoint>:<port>/api/v1/query. The query fails closed:
anything but a non-empty vector without warnings is an error, never a
healthy answer.

check_monitoring_instance and is_monitoring_instance_progressing inspect a
Prometheus or Alertmanager resource itself (Available / Reconciled
condition, observed generation, replica counts). No seed aspect calls
them: they are entry points for callers that health-check monitoring
resources directly, e.g. a ManagedResource health controller.
"""

import math
from typing import Optional, Tuple

import httpx

from core.config.defaults import MonitoringDefaults
from core.contracts import ConditionStatus, ConditionType
from core.logging import ComponentType, get_logger
from core.models import MonitoringInstance, find_condition

logger = get_logger(__name__, ComponentType.MONITORING)

HEALTH_ALERTS_QUERY = 'count(ALERTS{alertstate="firing", type="health"}) or vector(0)'
QUERY_PATH = "/api/v1/query"
DEFAULT_QUERY_TIMEOUT = 5.0


class PrometheusQueryError(Exception):
    """The health-alert query did not produce a usable answer."""


class MonitoringInstanceUnhealthy(Exception):
    """A Prometheus or Alertmanager instance is not healthy."""


# ============================================================================
# ENDPOINTS
# ============================================================================

def prometheus_endpoint_from_headless_service(
    instance: MonitoringInstance,
    replica: int,
    defaults: Optional[MonitoringDefaults] = None,
) -> Tuple[str, int]:
    """
    Address one replica through the instance's headless service.

    Returns:
        (endpoint, port), e.g.
        ("prometheus-seed-0.prometheus-operated.garden.svc.cluster.local", 9090)
    """
    defaults = defaults or MonitoringDefaults()
    service_name = instance.service_name or defaults.service_name
    endpoint = (
        f"{defaults.service_prefix}-{instance.name}-{replica}."
        f"{service_name}.{instance.namespace}.{defaults.cluster_domain}"
    )
    return endpoint, defaults.port


# ============================================================================
# HEALTH ALERT QUERY
# ============================================================================

async def has_prometheus_health_alerts(
    endpoint: str,
    port: int,
    timeout: float = DEFAULT_QUERY_TIMEOUT,
    query: str = HEALTH_ALERTS_QUERY,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> bool:
    """
    Check whether health alerts are firing on one Prometheus replica.

    Args:
        endpoint: Replica host name
        port: Replica port
        timeout: Per-call timeout in seconds
        query: PromQL expression returning the firing count
        transport: Optional httpx transport (tests use httpx.MockTransport)

    Returns:
        True if the firing count is greater than zero

    Raises:
        PrometheusQueryError: On transport failure, timeout, or any
            response that is not a non-empty vector without warnings
    """
    url = f"http://{endpoint}:{port}{QUERY_PATH}"

    try:
        async with httpx.AsyncClient(timeout=timeout, transport=transport) as client:
            response = await client.post(url, data={"query": query})
    except httpx.TimeoutException as e:
        raise PrometheusQueryError(f"query timed out after {timeout}s") from e
    except httpx.HTTPError as e:
        raise PrometheusQueryError(f"query failed: {e}") from e

    try:
        body = response.json()
    except ValueError as e:
        raise PrometheusQueryError(
            f"query returned an unparsable response (HTTP {response.status_code})"
        ) from e

    if not isinstance(body, dict):
        raise PrometheusQueryError("query returned an unparsable response")

    if body.get("status") != "success":
        error = body.get("error") or f"HTTP {response.status_code}"
        raise PrometheusQueryError(f"query failed: {error}")

    if response.status_code >= 400:
        raise PrometheusQueryError(f"query failed: HTTP {response.status_code}")

    if body.get("warnings"):
        raise PrometheusQueryError("query returned warnings")

    data = body.get("data")
    if not isinstance(data, dict) or data.get("resultType") != "vector":
        raise PrometheusQueryError("query returned an unexpected result type")

    result = data.get("result")
    if not isinstance(result, list):
        raise PrometheusQueryError("query returned an unexpected result type")
    if len(result) == 0:
        raise PrometheusQueryError("query returned empty vector")

    try:
        count = float(result[0]["value"][1])
    except (KeyError, IndexError, TypeError, ValueError) as e:
        raise PrometheusQueryError("query returned an unparsable sample value") from e

    if not math.isfinite(count):
        raise PrometheusQueryError("query returned an unparsable sample value")

    logger.debug(f"Prometheus {endpoint}:{port} reports {count:g} firing health alert(s)")
    return count > 0


# ============================================================================
# INSTANCE HEALTH
# ============================================================================

def _check_instance_condition(
    instance: MonitoringInstance,
    condition_type: str,
) -> None:
    condition = find_condition(instance.conditions, condition_type)
    if condition is None:
        raise MonitoringInstanceUnhealthy(f'condition "{condition_type}" is missing')

    observed = condition.observed_generation or 0
    if observed < instance.generation:
        raise MonitoringInstanceUnhealthy(
            f"observed generation outdated ({observed}/{instance.generation})"
        )

    if condition.status != ConditionStatus.TRUE:
        detail = f'condition "{condition_type}" has invalid status {condition.status.value} (expected True)'
        if condition.reason:
            detail += f" due to {condition.reason}"
        if condition.message:
            detail += f": {condition.message}"
        raise MonitoringInstanceUnhealthy(detail)


def check_monitoring_instance(instance: MonitoringInstance) -> None:
    """
    Check whether a Prometheus or Alertmanager instance is healthy.

    Raises:
        MonitoringInstanceUnhealthy: With the first problem found
    """
    _check_instance_condition(instance, ConditionType.AVAILABLE)

    desired = instance.desired_replicas
    if instance.available_replicas < desired:
        raise MonitoringInstanceUnhealthy(
            f"not enough available replicas ({instance.available_replicas}/{desired})"
        )


def is_monitoring_instance_progressing(instance: MonitoringInstance) -> Tuple[bool, str]:
    """
    Check whether an instance is still rolling out.

    Returns:
        (progressing, reason)
    """
    try:
        _check_instance_condition(instance, ConditionType.RECONCILED)
    except MonitoringInstanceUnhealthy as e:
        return True, str(e)

    desired = instance.desired_replicas
    if instance.updated_replicas < desired:
        return True, f"{instance.updated_replicas} of {desired} replica(s) have been updated"

    return False, f"{instance.kind.value} is fully rolled out"


__all__ = [
    "HEALTH_ALERTS_QUERY",
    "PrometheusQueryError",
    "MonitoringInstanceUnhealthy",
    "prometheus_endpoint_from_headless_service",
    "has_prometheus_health_alerts",
    "check_monitoring_instance",
    "is_monitoring_instance_progressing",
]
