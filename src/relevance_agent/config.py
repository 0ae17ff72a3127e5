"""YAML configuration loader for the relevance agent."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Sequence

import yaml

SUPPORTED_WATCHERS = ("file",)


@dataclass
class WatcherConfig:
    type: str
    path: Path
    interval: float = 5.0
    options: dict = field(default_factory=dict)

    @property
    def resync_every(self) -> int:
        return int(self.options.get("resync_every", 0))


@dataclass
class AgentConfig:
    reconcile_keys: Sequence[str]
    watchers: Sequence[WatcherConfig] = field(default_factory=list)


def _parse_reconcile_keys(entries) -> List[str]:
    if not isinstance(entries, list):
        raise ValueError("'reconcile_keys' must be a list of ClusterHealthCheck names")
    keys = [str(entry).strip() for entry in entries]
    if not all(keys):
        raise ValueError("'reconcile_keys' entries cannot be empty")
    return list(dict.fromkeys(keys))


def _parse_watchers(entries: Iterable[dict]) -> List[WatcherConfig]:
    watchers: List[WatcherConfig] = []
    for entry in entries:
        watcher_type = str(entry["type"])
        if watcher_type not in SUPPORTED_WATCHERS:
            raise ValueError(f"unsupported watcher type '{watcher_type}'")
        options = entry.get("options", {})
        if not isinstance(options, dict):
            raise ValueError("watcher 'options' must be a mapping if provided")
        watcher = WatcherConfig(
            type=watcher_type,
            path=Path(entry.get("path", "objects.yaml")),
            interval=float(entry.get("interval", entry.get("poll_interval", 5.0))),
            options=options,
        )
        if watcher.resync_every < 0:
            raise ValueError("watcher 'resync_every' cannot be negative")
        watchers.append(watcher)
    return watchers


def load_config(path: Path) -> AgentConfig:
    data = yaml.safe_load(path.read_text())
    if not isinstance(data, dict):
        raise ValueError("Agent configuration must be a mapping")
    if "registry" in data:
        raise ValueError(
            "'registry' section is not supported by the agent; "
            "set relevance_strict_registry through oslo.config instead"
        )

    reconcile_keys = _parse_reconcile_keys(data.get("reconcile_keys", []))

    watchers_section = data.get("watchers", [])
    if not isinstance(watchers_section, list):
        raise ValueError("'watchers' section must be a list")
    watchers = _parse_watchers(watchers_section)

    return AgentConfig(reconcile_keys=reconcile_keys, watchers=watchers)
