# ============================================================================
# SIGNAL STORE
# ============================================================================
# EPOCH: 1 - CLUSTER CARE
# STATUS: Infrastructure - Read surface consumed by the evaluators
# PURPOSE: Signal Store interface, typed errors, in-memory implementation
# CREATED: 19 OCT 2026
# ============================================================================
"""
Signal Store

The evaluators only read from the Signal Store; persistence and the
cluster client behind it are external. SignalStore is the boundary:

- list_sub_resources(namespace, labels, resource_class)
- list_workloads(namespace, selector)
- get_monitoring_instance(namespace, name)
- list_extension_reports(namespace)

Failures surface as SignalStoreError (NotFoundError when an object is
absent) so evaluators can tell infrastructure problems from health
problems.

InMemorySignalStore keeps everything in dictionaries; it backs the test
suite and local runs.
"""

from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Tuple

from core.models import (
    ExtensionReport,
    MonitoringInstance,
    SubResourceStatus,
    Workload,
)


class SignalStoreError(Exception):
    """Reading from the Signal Store failed."""


class NotFoundError(SignalStoreError):
    """The requested object does not exist."""

    def __init__(self, kind: str, namespace: str, name: str):
        self.kind = kind
        self.namespace = namespace
        self.name = name
        super().__init__(f'{kind} "{namespace}/{name}" not found')


class SignalStore(ABC):
    """Read-only query surface over cluster signals."""

    @abstractmethod
    async def list_sub_resources(
        self,
        namespace: str,
        labels: Optional[Dict[str, str]] = None,
        resource_class: Optional[str] = None,
    ) -> List[SubResourceStatus]:
        """List sub-resource statuses in a namespace."""

    @abstractmethod
    async def list_workloads(
        self,
        namespace: str,
        selector: Optional[Dict[str, str]] = None,
    ) -> List[Workload]:
        """List workloads in a namespace matching an equality selector."""

    @abstractmethod
    async def get_monitoring_instance(
        self,
        namespace: str,
        name: str,
    ) -> MonitoringInstance:
        """Fetch a monitoring instance; raises NotFoundError if absent."""

    @abstractmethod
    async def list_extension_reports(self, namespace: str) -> List[ExtensionReport]:
        """List extension health reports for a namespace."""


class InMemorySignalStore(SignalStore):
    """
    Signal Store backed by dictionaries.

    fail_with maps an operation name ("list_sub_resources", "list_workloads",
    "get_monitoring_instance", "list_extension_reports") to an exception
    raised on every call of that operation.
    """

    def __init__(self):
        self.sub_resources: List[SubResourceStatus] = []
        self.workloads: List[Workload] = []
        self.monitoring_instances: Dict[Tuple[str, str], MonitoringInstance] = {}
        self.extension_reports: Dict[str, List[ExtensionReport]] = {}
        self.fail_with: Dict[str, Exception] = {}

    # ------------------------------------------------------------------
    # Population
    # ------------------------------------------------------------------

    def add_sub_resource(self, resource: SubResourceStatus) -> None:
        self.sub_resources.append(resource)

    def add_workload(self, workload: Workload) -> None:
        self.workloads.append(workload)

    def add_monitoring_instance(self, instance: MonitoringInstance) -> None:
        self.monitoring_instances[(instance.namespace, instance.name)] = instance

    def remove_monitoring_instance(self, namespace: str, name: str) -> None:
        self.monitoring_instances.pop((namespace, name), None)

    def add_extension_report(self, namespace: str, report: ExtensionReport) -> None:
        self.extension_reports.setdefault(namespace, []).append(report)

    # ------------------------------------------------------------------
    # SignalStore
    # ------------------------------------------------------------------

    def _raise_if_failing(self, operation: str) -> None:
        error = self.fail_with.get(operation)
        if error is not None:
            raise error

    async def list_sub_resources(
        self,
        namespace: str,
        labels: Optional[Dict[str, str]] = None,
        resource_class: Optional[str] = None,
    ) -> List[SubResourceStatus]:
        self._raise_if_failing("list_sub_resources")
        return [
            r for r in self.sub_resources
            if r.namespace == namespace
            and all(r.labels.get(k) == v for k, v in (labels or {}).items())
            and (resource_class is None or r.resource_class == resource_class)
        ]

    async def list_workloads(
        self,
        namespace: str,
        selector: Optional[Dict[str, str]] = None,
    ) -> List[Workload]:
        self._raise_if_failing("list_workloads")
        return [
            w for w in self.workloads
            if w.namespace == namespace and w.matches(selector or {})
        ]

    async def get_monitoring_instance(self, namespace: str, name: str) -> MonitoringInstance:
        self._raise_if_failing("get_monitoring_instance")
        instance = self.monitoring_instances.get((namespace, name))
        if instance is None:
            raise NotFoundError("Prometheus", namespace, name)
        return instance

    async def list_extension_reports(self, namespace: str) -> List[ExtensionReport]:
        self._raise_if_failing("list_extension_reports")
        return list(self.extension_reports.get(namespace, []))


__all__ = [
    "SignalStore",
    "SignalStoreError",
    "NotFoundError",
    "InMemorySignalStore",
]
