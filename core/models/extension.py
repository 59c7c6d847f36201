# ============================================================================
# EXTENSION REPORT MODEL
# ============================================================================
# EPOCH: 1 - CLUSTER CARE
# STATUS: Core model - Heartbeat-tagged extension health report
# PURPOSE: Health reports pushed by pluggable extensions
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: ExtensionReport
# DEPENDENCIES: pydantic
# ============================================================================
"""
Extension Report Model

Extensions report a condition and, optionally, when they last checked.
A report without heartbeat is fresh unless an outdated threshold is
configured and the report carries identity metadata.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from core.models.condition import Condition


class ExtensionReport(BaseModel):
    """One health report from an extension."""

    model_config = {"frozen": True}

    source_type: str = ""
    source_name: str = ""
    source_namespace: str = ""
    condition: Condition
    last_heartbeat_time: Optional[datetime] = None

    @property
    def has_identity(self) -> bool:
        return bool(self.source_type or self.source_name or self.source_namespace)

    @property
    def identity(self) -> str:
        return f"{self.source_namespace}/{self.source_name}"


__all__ = ["ExtensionReport"]
