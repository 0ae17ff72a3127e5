"""Change-relevance engine for the ClusterHealthCheck controller.

ClusterHealthCheck reconciliation is expensive, so the controller only
re-runs it when a watched change can actually affect the outcome. This
package holds the pieces that make that call:

* :mod:`.events` normalises each watch callback into a :class:`Notification`;
* :mod:`.entities` gives each watched kind a typed, read-only snapshot;
* :mod:`.predicates` holds one pure decision table per kind; and
* :mod:`.registry` binds kinds to predicates and dispatches notifications.

Predicates never log or raise. The registry logs verdicts after the fact and
surfaces wiring mistakes loudly.
"""

from .events import Identity, Kind, Notification, Operation  # noqa: F401
from .registry import PredicateRegistry, build_registry  # noqa: F401

__all__ = [
    "Identity",
    "Kind",
    "Notification",
    "Operation",
    "PredicateRegistry",
    "build_registry",
]
