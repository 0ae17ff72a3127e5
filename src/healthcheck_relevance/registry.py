"""Kind to predicate bindings used to gate ClusterHealthCheck reconciliation."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional

from .entities import SNAPSHOT_TYPES
from .events import Kind, Notification
from .exceptions import DuplicatePredicateError, RegistryFrozenError, UnknownKindError
from .predicates import (
    ClusterPredicate,
    ClusterSummaryPredicate,
    HealthCheckPredicate,
    HealthCheckReportPredicate,
    MachinePredicate,
    RelevancePredicate,
)

LOG = logging.getLogger(__name__)


@dataclass(frozen=True)
class PredicateFuncs:
    """Per-operation callables for one watched kind.

    This is what a watch gets wired with: each callback wraps the raw object
    in a :class:`Notification` and routes it through the registry, so the
    verdict is logged the same way whichever entry point is used.
    """

    kind: Kind
    registry: "PredicateRegistry"

    def create(self, obj: Any) -> bool:
        return self.registry.evaluate(Notification.create(self.kind, obj))

    def update(self, old: Optional[Any], new: Any) -> bool:
        return self.registry.evaluate(Notification.update(self.kind, old, new))

    def delete(self, obj: Any) -> bool:
        return self.registry.evaluate(Notification.delete(self.kind, obj))

    def generic(self, obj: Any) -> bool:
        return self.registry.evaluate(Notification.generic(self.kind, obj))


class PredicateRegistry:
    """Dispatch notifications to the predicate registered for their kind.

    Registration happens at start-up. Once :meth:`freeze` is called the
    mapping is read-only and :meth:`evaluate` may be called from any number
    of threads without locking.

    Parameters
    ----------
    strict:
        When ``True`` a notification for an unregistered kind raises
        :class:`UnknownKindError`. Otherwise it is logged as an error and
        treated as relevant, so events are never silently dropped.
    """

    def __init__(self, strict: bool = False) -> None:
        self._strict = strict
        self._predicates: Mapping[Kind, RelevancePredicate] = {}
        self._frozen = False

    @property
    def strict(self) -> bool:
        return self._strict

    @property
    def frozen(self) -> bool:
        return self._frozen

    def register(self, kind: Kind, predicate: RelevancePredicate) -> None:
        if self._frozen:
            raise RegistryFrozenError(
                f"cannot register '{kind}': registry is frozen"
            )
        if kind in self._predicates:
            raise DuplicatePredicateError(kind)
        self._predicates[kind] = predicate  # type: ignore[index]

    def freeze(self) -> "PredicateRegistry":
        if not self._frozen:
            self._predicates = MappingProxyType(dict(self._predicates))
            self._frozen = True
        return self

    def kinds(self) -> List[Kind]:
        return list(self._predicates)

    def predicate_for(self, kind: Kind) -> Optional[RelevancePredicate]:
        return self._predicates.get(kind)

    def watch_predicates(self) -> Dict[Kind, PredicateFuncs]:
        return {kind: PredicateFuncs(kind, self) for kind in self._predicates}

    def evaluate(self, notification: Notification) -> bool:
        predicate = self._predicates.get(notification.kind)
        if predicate is None:
            if self._strict:
                raise UnknownKindError(notification.kind)
            LOG.error(
                "No predicate registered for kind '%s' (%s %s); "
                "reconciling ClusterHealthChecks anyway",
                notification.kind,
                notification.operation,
                notification.identity,
            )
            return True

        self._validate(notification)
        verdict = predicate(
            notification.operation, notification.old_state, notification.new_state
        )
        if verdict:
            LOG.debug(
                "%s %s %s: will attempt to reconcile associated ClusterHealthChecks",
                notification.kind,
                notification.operation,
                notification.identity,
            )
        else:
            LOG.debug(
                "%s %s %s: did not match expected conditions, skipping",
                notification.kind,
                notification.operation,
                notification.identity,
            )
        return verdict

    @staticmethod
    def _validate(notification: Notification) -> None:
        if notification.new_state is None:
            raise ValueError(
                f"{notification.kind} {notification.operation} notification carries no object"
            )
        expected = SNAPSHOT_TYPES.get(notification.kind)
        if expected is None:
            return
        for label, state in (
            ("new", notification.new_state),
            ("old", notification.old_state),
        ):
            if state is not None and not isinstance(state, expected):
                raise TypeError(
                    f"{label} state for kind '{notification.kind}' must be "
                    f"{expected.__name__}, got {type(state).__name__}"
                )
            # Both cluster kinds share one snapshot type, which records its kind.
            state_kind = getattr(state, "kind", notification.kind)
            if state is not None and state_kind != notification.kind:
                raise TypeError(
                    f"{label} state is a '{state_kind}' snapshot, "
                    f"notification is for '{notification.kind}'"
                )


def build_registry(strict: bool = False) -> PredicateRegistry:
    """Return a frozen registry wired with every kind ClusterHealthCheck watches."""

    registry = PredicateRegistry(strict=strict)
    cluster = ClusterPredicate()
    registry.register(Kind.CLUSTER, cluster)
    registry.register(Kind.SVELTOS_CLUSTER, cluster)
    registry.register(Kind.MACHINE, MachinePredicate())
    registry.register(Kind.CLUSTER_SUMMARY, ClusterSummaryPredicate())
    registry.register(Kind.HEALTH_CHECK_REPORT, HealthCheckReportPredicate())
    registry.register(Kind.HEALTH_CHECK, HealthCheckPredicate())
    return registry.freeze()
