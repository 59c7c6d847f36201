# ============================================================================
# VERSION - CLUSTER CARE
# ============================================================================
# EPOCH: 1 - CLUSTER CARE
# ============================================================================
"""
Version information for Cluster Care.

Read by pyproject.toml and written into every care_pass_completed
checkpoint. Updated manually for each release.
"""
__version__ = "0.1.0"
