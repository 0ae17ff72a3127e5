"""Notification primitives consumed by the predicate registry."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class Kind(str, Enum):
    """Entity kinds watched on behalf of ClusterHealthCheck.

    The value matches the ``kind`` field of the corresponding Kubernetes
    object so manifests can be mapped back with ``Kind(manifest["kind"])``.
    """

    CLUSTER = "Cluster"
    SVELTOS_CLUSTER = "SveltosCluster"
    MACHINE = "Machine"
    CLUSTER_SUMMARY = "ClusterSummary"
    HEALTH_CHECK_REPORT = "HealthCheckReport"
    HEALTH_CHECK = "HealthCheck"

    @property
    def namespaced(self) -> bool:
        return self is not Kind.HEALTH_CHECK

    def __str__(self) -> str:
        return self.value


class Operation(str, Enum):
    CREATE = "Create"
    UPDATE = "Update"
    DELETE = "Delete"
    GENERIC = "Generic"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Identity:
    """Namespace/name pair used for logging and queue keys only."""

    name: str
    namespace: Optional[str] = None

    def __str__(self) -> str:
        if self.namespace:
            return f"{self.namespace}/{self.name}"
        return self.name


@dataclass(frozen=True)
class Notification:
    """One watch callback, normalised.

    ``old_state`` is ``None`` when the watch layer has no prior snapshot.
    That is a valid input: predicates treat it as relevant on update.
    On delete ``new_state`` carries the last known state of the object.
    """

    kind: Kind
    operation: Operation
    new_state: Any
    old_state: Any = None

    @property
    def identity(self) -> Optional[Identity]:
        state = self.new_state if self.new_state is not None else self.old_state
        return getattr(state, "identity", None)

    @classmethod
    def create(cls, kind: Kind, obj: Any) -> "Notification":
        return cls(kind, Operation.CREATE, obj)

    @classmethod
    def update(cls, kind: Kind, old: Any, new: Any) -> "Notification":
        return cls(kind, Operation.UPDATE, new, old)

    @classmethod
    def delete(cls, kind: Kind, obj: Any) -> "Notification":
        return cls(kind, Operation.DELETE, obj)

    @classmethod
    def generic(cls, kind: Kind, obj: Any) -> "Notification":
        return cls(kind, Operation.GENERIC, obj)
