"""File-based object watcher."""

from __future__ import annotations

import logging
from pathlib import Path
from threading import Event, Thread
from typing import Any, Callable, Dict, Iterator, Mapping, Tuple

import yaml

from healthcheck_relevance import Notification, PredicateRegistry
from healthcheck_relevance.entities import snapshot_from_manifest

from .utils import ObjectKey, manifest_key, object_key, watched_kind

LOG = logging.getLogger(__name__)

State = Dict[ObjectKey, Tuple[Mapping[str, Any], Any]]


def _extract_state(payload: dict, previous: State) -> State:
    """Index the watched objects in ``payload`` by key.

    A malformed item is skipped on its own. If it was seen before, its last
    good state is carried over so it is not reported as deleted.
    """

    items = payload.get("items")
    if items is None:
        raise ValueError("objects file missing 'items' key")
    if not isinstance(items, list):
        raise ValueError("'items' must be a list")

    state: State = {}
    for manifest in items:
        if not isinstance(manifest, dict):
            LOG.warning("skipping non-mapping entry in 'items': %r", manifest)
            continue
        kind = watched_kind(manifest)
        if kind is None:
            LOG.debug("ignoring object of unwatched kind %r", manifest.get("kind"))
            continue
        try:
            kind, snapshot = snapshot_from_manifest(manifest)
        except ValueError as exc:
            key = manifest_key(kind, manifest)
            LOG.warning(
                "skipping invalid %s %s: %s",
                kind,
                "/".join(part for part in key[1:] if part) if key else "<unnamed>",
                exc,
            )
            if key is not None and key in previous:
                state[key] = previous[key]
            continue
        state[object_key(kind, snapshot)] = (manifest, snapshot)
    return state


class FileObjectWatcher(Thread):
    """Poll a YAML/JSON object list and feed changes through the registry.

    The first poll reports every object as created, like an informer's
    initial list. Later polls report creates, updates and deletes by
    comparing manifests, and every ``resync_every`` polls the unchanged
    objects are re-delivered as generic notifications.
    """

    def __init__(
        self,
        registry: PredicateRegistry,
        trigger: Callable[[Notification], None],
        path: Path,
        interval: float,
        stop_event: Event,
        resync_every: int = 0,
    ) -> None:
        super().__init__(daemon=True)
        self._registry = registry
        self._trigger = trigger
        self._path = Path(path)
        self._interval = interval
        self._stop_event = stop_event
        self._resync_every = resync_every
        self._polls = 0
        self._state: State = {}

    def run(self) -> None:
        while not self._stop_event.is_set():
            try:
                self.poll()
            except Exception:  # pragma: no cover - logged below
                LOG.exception("file watcher encountered an error")
            self._stop_event.wait(self._interval)

    def poll(self) -> int:
        """Process one read of the file; return how many changes were relevant."""

        if not self._path.exists():
            LOG.debug("objects file %s does not exist yet", self._path)
            return 0

        try:
            payload = yaml.safe_load(self._path.read_text())
        except yaml.YAMLError as exc:
            LOG.warning("failed to parse objects file %s: %s", self._path, exc)
            return 0

        if not isinstance(payload, dict):
            LOG.warning("invalid objects file %s: not a mapping", self._path)
            return 0

        try:
            desired = _extract_state(payload, self._state)
        except ValueError as exc:
            LOG.warning("invalid objects file %s: %s", self._path, exc)
            return 0

        relevant = 0
        for notification in self._diff(desired):
            if self._registry.evaluate(notification):
                self._trigger(notification)
                relevant += 1

        # State advances only once the whole batch has been delivered.
        self._state = desired
        self._polls += 1
        return relevant

    def _resync_due(self) -> bool:
        return bool(
            self._resync_every and self._polls and self._polls % self._resync_every == 0
        )

    def _diff(self, desired: State) -> Iterator[Notification]:
        resync = self._resync_due()
        for key, (manifest, snapshot) in desired.items():
            kind = key[0]
            previous = self._state.get(key)
            if previous is None:
                LOG.debug("%s %s created", kind, snapshot.identity)
                yield Notification.create(kind, snapshot)
            elif previous[0] != manifest:
                LOG.debug("%s %s updated", kind, snapshot.identity)
                yield Notification.update(kind, previous[1], snapshot)
            elif resync:
                yield Notification.generic(kind, snapshot)

        for key in [key for key in self._state if key not in desired]:
            kind = key[0]
            last_known = self._state[key][1]
            LOG.debug("%s %s removed", kind, last_known.identity)
            yield Notification.delete(kind, last_known)
