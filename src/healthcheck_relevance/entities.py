"""Typed snapshots of the objects ClusterHealthCheck depends on.

The schemas of these objects belong to other projects. The snapshots below
carry only the fields the relevance predicates read, and ``from_manifest``
is the one place that knows where those fields live in a Kubernetes style
manifest (``metadata`` / ``spec`` / ``status``). If an upstream schema moves
a field, only this module has to follow.

All snapshots are frozen and their nested payloads are converted to
read-only containers on construction.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple, Type

from .equality import freeze
from .events import Identity, Kind


class MachinePhase(str, Enum):
    """Lifecycle phases reported in ``Machine.status.phase``."""

    PENDING = "Pending"
    PROVISIONING = "Provisioning"
    PROVISIONED = "Provisioned"
    RUNNING = "Running"
    DELETING = "Deleting"
    DELETED = "Deleted"
    FAILED = "Failed"
    UNKNOWN = "Unknown"

    @classmethod
    def parse(cls, value: Optional[str]) -> "MachinePhase":
        """Map a raw phase string to a member; anything unrecognised is UNKNOWN."""

        if isinstance(value, MachinePhase):
            return value
        if not value:
            return cls.UNKNOWN
        lowered = str(value).strip().lower()
        for member in cls:
            if member.value.lower() == lowered:
                return member
        return cls.UNKNOWN


def _section(manifest: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    value = manifest.get(name) or {}
    if not isinstance(value, Mapping):
        raise ValueError(f"'{name}' must be a mapping, got {type(value).__name__}")
    return value


def _identity(manifest: Mapping[str, Any], kind: Kind) -> Identity:
    metadata = _section(manifest, "metadata")
    name = metadata.get("name")
    if not name:
        raise ValueError("manifest missing 'metadata.name'")
    namespace = metadata.get("namespace") if kind.namespaced else None
    return Identity(name=str(name), namespace=str(namespace) if namespace else None)


def _labels(manifest: Mapping[str, Any]) -> Mapping[str, str]:
    labels = _section(manifest, "metadata").get("labels") or {}
    if not isinstance(labels, Mapping):
        raise ValueError("'metadata.labels' must be a mapping")
    return {str(key): str(value) for key, value in labels.items()}


def _freeze_fields(snapshot: Any, *names: str, empty: Any = None) -> None:
    for name in names:
        value = getattr(snapshot, name)
        object.__setattr__(snapshot, name, freeze(empty if value is None else value))


@dataclass(frozen=True)
class ClusterSnapshot:
    """A generic Cluster or a SveltosCluster.

    Only SveltosCluster exposes readiness: its ``ready`` is always a bool
    (missing means not ready), while a generic Cluster always has
    ``ready=None``.
    """

    identity: Identity
    paused: bool = False
    ready: Optional[bool] = None
    labels: Mapping[str, str] = field(default_factory=dict)
    kind: Kind = Kind.CLUSTER

    def __post_init__(self) -> None:
        kind = Kind(self.kind)
        if kind not in (Kind.CLUSTER, Kind.SVELTOS_CLUSTER):
            raise ValueError(f"'{kind}' is not a cluster kind")
        if kind is Kind.SVELTOS_CLUSTER:
            object.__setattr__(self, "ready", bool(self.ready))
        elif self.ready is not None:
            raise ValueError(f"kind '{kind}' exposes no readiness flag")
        object.__setattr__(self, "kind", kind)
        _freeze_fields(self, "labels", empty={})

    @classmethod
    def from_manifest(cls, manifest: Mapping[str, Any]) -> "ClusterSnapshot":
        kind = Kind.CLUSTER
        ready: Optional[bool] = None
        if manifest.get("kind") == Kind.SVELTOS_CLUSTER.value:
            kind = Kind.SVELTOS_CLUSTER
            ready = bool(_section(manifest, "status").get("ready", False))
        return cls(
            identity=_identity(manifest, kind),
            paused=bool(_section(manifest, "spec").get("paused", False)),
            ready=ready,
            labels=_labels(manifest),
            kind=kind,
        )


@dataclass(frozen=True)
class MachineSnapshot:
    identity: Identity
    phase: MachinePhase = MachinePhase.UNKNOWN
    labels: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "phase", MachinePhase.parse(self.phase))
        _freeze_fields(self, "labels", empty={})

    @property
    def running(self) -> bool:
        return self.phase is MachinePhase.RUNNING

    @classmethod
    def from_manifest(cls, manifest: Mapping[str, Any]) -> "MachineSnapshot":
        return cls(
            identity=_identity(manifest, Kind.MACHINE),
            phase=MachinePhase.parse(_section(manifest, "status").get("phase")),
            labels=_labels(manifest),
        )


@dataclass(frozen=True)
class ClusterSummarySnapshot:
    """Per-cluster rollup of the add-on features deployed there."""

    identity: Identity
    feature_summaries: Sequence[Mapping[str, Any]] = ()

    def __post_init__(self) -> None:
        _freeze_fields(self, "feature_summaries", empty=())

    @classmethod
    def from_manifest(cls, manifest: Mapping[str, Any]) -> "ClusterSummarySnapshot":
        return cls(
            identity=_identity(manifest, Kind.CLUSTER_SUMMARY),
            feature_summaries=_section(manifest, "status").get("featureSummaries"),
        )


@dataclass(frozen=True)
class HealthCheckReportSnapshot:
    identity: Identity
    spec: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        _freeze_fields(self, "spec", empty={})

    @classmethod
    def from_manifest(cls, manifest: Mapping[str, Any]) -> "HealthCheckReportSnapshot":
        return cls(
            identity=_identity(manifest, Kind.HEALTH_CHECK_REPORT),
            spec=_section(manifest, "spec"),
        )


@dataclass(frozen=True)
class HealthCheckSnapshot:
    """The cluster-scoped HealthCheck policy object."""

    identity: Identity
    spec: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        _freeze_fields(self, "spec", empty={})

    @classmethod
    def from_manifest(cls, manifest: Mapping[str, Any]) -> "HealthCheckSnapshot":
        return cls(
            identity=_identity(manifest, Kind.HEALTH_CHECK),
            spec=_section(manifest, "spec"),
        )


SNAPSHOT_TYPES: Dict[Kind, Type[Any]] = {
    Kind.CLUSTER: ClusterSnapshot,
    Kind.SVELTOS_CLUSTER: ClusterSnapshot,
    Kind.MACHINE: MachineSnapshot,
    Kind.CLUSTER_SUMMARY: ClusterSummarySnapshot,
    Kind.HEALTH_CHECK_REPORT: HealthCheckReportSnapshot,
    Kind.HEALTH_CHECK: HealthCheckSnapshot,
}


def snapshot_from_manifest(manifest: Mapping[str, Any]) -> Tuple[Kind, Any]:
    """Return ``(kind, snapshot)`` for a decoded manifest.

    Raises ``ValueError`` if the manifest's ``kind`` is not watched.
    """

    raw_kind = manifest.get("kind")
    try:
        kind = Kind(raw_kind)
    except ValueError:
        raise ValueError(f"unsupported kind '{raw_kind}'") from None
    return kind, SNAPSHOT_TYPES[kind].from_manifest(manifest)
