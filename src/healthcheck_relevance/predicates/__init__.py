"""Relevance predicates, one per watched kind."""

from .base import RelevancePredicate  # noqa: F401
from .clusters import ClusterPredicate  # noqa: F401
from .machines import MachinePredicate  # noqa: F401
from .sveltos import (  # noqa: F401
    ClusterSummaryPredicate,
    HealthCheckPredicate,
    HealthCheckReportPredicate,
)

__all__ = [
    "ClusterPredicate",
    "ClusterSummaryPredicate",
    "HealthCheckPredicate",
    "HealthCheckReportPredicate",
    "MachinePredicate",
    "RelevancePredicate",
]
