"""Entry point for the standalone relevance agent."""

from __future__ import annotations

import argparse
import logging
import signal
import sys
from pathlib import Path
from threading import Event

from healthcheck_relevance import build_registry

from .config import load_config
from .sink import ReconcileQueue, ReconcileTrigger
from .watchers import FileObjectWatcher

LOG = logging.getLogger(__name__)


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
    )


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Run the relevance agent")
    parser.add_argument(
        "--config",
        type=Path,
        default=Path("/etc/healthcheck-relevance/agent.yaml"),
        help="Path to the agent configuration file",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--once",
        action="store_true",
        help="Poll every watcher once, print the queued keys and exit",
    )

    args = parser.parse_args(argv)
    _setup_logging(args.verbose)

    config = load_config(args.config)
    if not config.reconcile_keys:
        LOG.warning("no reconcile_keys configured; relevant changes will queue nothing")

    # Watchers only deliver watched kinds, so the unknown-kind policy is moot here.
    registry = build_registry()
    queue = ReconcileQueue()
    trigger = ReconcileTrigger(queue, config.reconcile_keys)

    stop_event = Event()

    watchers = []
    for watcher_cfg in config.watchers:
        watcher = FileObjectWatcher(
            registry=registry,
            trigger=trigger,
            path=watcher_cfg.path,
            interval=watcher_cfg.interval,
            stop_event=stop_event,
            resync_every=watcher_cfg.resync_every,
        )
        # Perform an initial poll so we react immediately
        try:
            watcher.poll()
        except Exception:  # pragma: no cover - logged inside watcher
            LOG.exception("initial poll failed for watcher %s", watcher_cfg.path)
        watchers.append(watcher)

    if args.once:
        for key in queue.drain():
            print(key)
        return 0

    if not watchers:
        LOG.warning("no watchers configured; agent will idle")

    for watcher in watchers:
        watcher.start()

    def _shutdown(signum, frame):  # pragma: no cover - signal handler
        LOG.info("received signal %s, shutting down", signum)
        stop_event.set()

    signal.signal(signal.SIGINT, _shutdown)
    signal.signal(signal.SIGTERM, _shutdown)

    try:
        while not stop_event.is_set():
            key = queue.get(timeout=1.0)
            if key is not None:
                LOG.info("reconcile requested for ClusterHealthCheck %s", key)
    except KeyboardInterrupt:  # pragma: no cover - fallback if signal not set
        stop_event.set()

    for watcher in watchers:
        watcher.join()

    LOG.info("relevance agent stopped")
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
