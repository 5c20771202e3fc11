"""Data models for Acteedog."""

from .activity import Activity, Context, ENRICHMENT_PARAMS_KEY

__all__ = [
    "Activity",
    "Context",
    "ENRICHMENT_PARAMS_KEY",
]
