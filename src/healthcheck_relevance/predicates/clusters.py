"""Relevance of Cluster and SveltosCluster changes."""

from __future__ import annotations

from typing import Optional

from ..entities import ClusterSnapshot
from ..equality import labels_equal
from .base import RelevancePredicate


class ClusterPredicate(RelevancePredicate):
    """Shared by the generic Cluster kind and SveltosCluster.

    Paused clusters are ignored until they are unpaused. Label changes can
    move a cluster in or out of a ClusterHealthCheck selector, so they always
    count. Readiness is only consulted when both snapshots carry it.
    """

    name = "cluster"

    def create(self, obj: ClusterSnapshot) -> bool:
        return not obj.paused

    def update(self, old: Optional[ClusterSnapshot], new: ClusterSnapshot) -> bool:
        if old is None:
            return True

        if old.paused and not new.paused:
            return True

        if old.ready is not None and new.ready is not None:
            if not old.ready and new.ready:
                return True

        return not labels_equal(old.labels, new.labels)

    def delete(self, obj: ClusterSnapshot) -> bool:
        return True
