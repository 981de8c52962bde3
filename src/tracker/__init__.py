"""
Client side of the analytics service: a persisted visitor identity and a
best-effort tracker posting events to the ingestion endpoint.
"""

from .client import AnalyticsTracker
from .visitor_identity import VisitorIdentity

__all__ = ["AnalyticsTracker", "VisitorIdentity"]
