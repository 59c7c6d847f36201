# ============================================================================
# CONFIGURATION MODULE
# ============================================================================
# EPOCH: 1 - CLUSTER CARE
# STATUS: Core - Configuration and defaults
# PURPOSE: Centralized configuration management
# CREATED: 19 OCT 2026
# ============================================================================
"""
Configuration Module

Provides centralized configuration and defaults for health evaluation.
"""

from core.config.defaults import (
    CareDefaults,
    MonitoringDefaults,
    Defaults,
    get_defaults,
    reset_defaults,
)

__all__ = [
    "CareDefaults",
    "MonitoringDefaults",
    "Defaults",
    "get_defaults",
    "reset_defaults",
]
