"""Reconcile queue fed by positive relevance verdicts."""

from __future__ import annotations

import logging
from collections import OrderedDict
from threading import Condition
from typing import Iterable, List, Optional, Sequence

from healthcheck_relevance import Notification

LOG = logging.getLogger(__name__)


class ReconcileQueue:
    """FIFO queue of ClusterHealthCheck keys that collapses duplicates.

    A key already waiting in the queue is not added again, so a burst of
    relevant changes results in a single reconciliation per key.
    """

    def __init__(self) -> None:
        self._cond = Condition()
        self._pending: "OrderedDict[str, None]" = OrderedDict()

    def add(self, key: str) -> bool:
        with self._cond:
            if key in self._pending:
                return False
            self._pending[key] = None
            self._cond.notify()
            return True

    def get(self, timeout: Optional[float] = None) -> Optional[str]:
        with self._cond:
            if not self._cond.wait_for(lambda: bool(self._pending), timeout):
                return None
            key, _ = self._pending.popitem(last=False)
            return key

    def drain(self) -> List[str]:
        with self._cond:
            keys = list(self._pending)
            self._pending.clear()
            return keys

    def __len__(self) -> int:
        with self._cond:
            return len(self._pending)


class ReconcileTrigger:
    """Enqueue every configured ClusterHealthCheck key for a relevant change."""

    def __init__(self, queue: ReconcileQueue, keys: Iterable[str]) -> None:
        self._queue = queue
        self._keys: Sequence[str] = tuple(keys)

    @property
    def keys(self) -> Sequence[str]:
        return self._keys

    def __call__(self, notification: Notification) -> None:
        added = [key for key in self._keys if self._queue.add(key)]
        LOG.debug(
            "%s %s %s queued reconcile for %s",
            notification.kind,
            notification.operation,
            notification.identity,
            added or "nothing new",
        )
