"""Abstract interface shared by every relevance predicate."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Optional

from ..events import Operation


class RelevancePredicate(ABC):
    """Decide whether a change may require ClusterHealthCheck reconciliation.

    Implementations are stateless and side-effect free: they never log,
    never mutate their arguments and never raise. When a change cannot be
    proven immaterial they answer ``True``.
    """

    name: str = "predicate"

    @abstractmethod
    def create(self, obj: Any) -> bool:
        """Verdict for a newly observed object."""

    @abstractmethod
    def update(self, old: Optional[Any], new: Any) -> bool:
        """Verdict for a change from ``old`` (possibly absent) to ``new``."""

    @abstractmethod
    def delete(self, obj: Any) -> bool:
        """Verdict for the removal of ``obj``."""

    def generic(self, obj: Any) -> bool:
        # Resync carries no new information.
        return False

    def __call__(self, operation: Operation, old: Optional[Any], new: Any) -> bool:
        if operation is Operation.CREATE:
            return self.create(new)
        if operation is Operation.UPDATE:
            return self.update(old, new)
        if operation is Operation.DELETE:
            return self.delete(new)
        if operation is Operation.GENERIC:
            return self.generic(new)
        raise ValueError(f"Unsupported operation: {operation!r}")

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name}>"
