"""Relevance of ClusterSummary, HealthCheckReport and HealthCheck changes."""

from __future__ import annotations

from typing import Optional

from ..entities import (
    ClusterSummarySnapshot,
    HealthCheckReportSnapshot,
    HealthCheckSnapshot,
)
from ..equality import deep_equal
from .base import RelevancePredicate


class ClusterSummaryPredicate(RelevancePredicate):
    """React to feature summary changes; a fresh summary is not actionable yet."""

    name = "clustersummary"

    def create(self, obj: ClusterSummarySnapshot) -> bool:
        return False

    def update(
        self, old: Optional[ClusterSummarySnapshot], new: ClusterSummarySnapshot
    ) -> bool:
        if old is None:
            return True
        return not deep_equal(old.feature_summaries, new.feature_summaries)

    def delete(self, obj: ClusterSummarySnapshot) -> bool:
        return True


class HealthCheckReportPredicate(RelevancePredicate):
    name = "healthcheckreport"

    def create(self, obj: HealthCheckReportSnapshot) -> bool:
        return True

    def update(
        self, old: Optional[HealthCheckReportSnapshot], new: HealthCheckReportSnapshot
    ) -> bool:
        if old is None:
            return True
        return not deep_equal(old.spec, new.spec)

    def delete(self, obj: HealthCheckReportSnapshot) -> bool:
        return True


class HealthCheckPredicate(RelevancePredicate):
    name = "healthcheck"

    def create(self, obj: HealthCheckSnapshot) -> bool:
        return True

    def update(self, old: Optional[HealthCheckSnapshot], new: HealthCheckSnapshot) -> bool:
        if old is None:
            return True
        return not deep_equal(old.spec, new.spec)

    def delete(self, obj: HealthCheckSnapshot) -> bool:
        return True
