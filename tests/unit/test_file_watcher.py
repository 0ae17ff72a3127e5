import logging
from pathlib import Path
from threading import Event

import pytest
import yaml

from healthcheck_relevance import Kind, Operation, build_registry
from relevance_agent.watchers.file import FileObjectWatcher


class RecordingRegistry:
    """Delegate to the real registry while keeping every notification seen."""

    def __init__(self):
        self._registry = build_registry()
        self.seen = []

    def evaluate(self, notification):
        self.seen.append(notification)
        return self._registry.evaluate(notification)


class RecordingTrigger:
    def __init__(self):
        self.notifications = []

    def __call__(self, notification):
        self.notifications.append(notification)


def cluster(paused=False, labels=None):
    return {
        "apiVersion": "lib.projectsveltos.io/v1beta1",
        "kind": "SveltosCluster",
        "metadata": {"name": "edge-1", "namespace": "fleet", "labels": labels or {"env": "prod"}},
        "spec": {"paused": paused},
        "status": {"ready": True},
    }


def machine(phase, annotations=None):
    return {
        "kind": "Machine",
        "metadata": {"name": "edge-1-md-0", "namespace": "fleet", "annotations": annotations or {}},
        "status": {"phase": phase},
    }


def summary(note="initial"):
    return {
        "kind": "ClusterSummary",
        "metadata": {"name": "edge-1-summary", "namespace": "fleet", "annotations": {"note": note}},
        "status": {"featureSummaries": [{"featureID": "Helm", "status": "Provisioned"}]},
    }


HEALTHCHECK = {
    "kind": "HealthCheck",
    "metadata": {"name": "deployment-replicas"},
    "spec": {"resourceSelectors": [{"group": "apps", "kind": "Deployment"}]},
}

SECRET = {"kind": "Secret", "metadata": {"name": "token", "namespace": "fleet"}}


def write(path: Path, *items):
    path.write_text(yaml.safe_dump({"items": list(items)}))


def build_watcher(path: Path, resync_every: int = 0):
    registry = RecordingRegistry()
    trigger = RecordingTrigger()
    watcher = FileObjectWatcher(
        registry=registry,
        trigger=trigger,
        path=path,
        interval=0.1,
        stop_event=Event(),
        resync_every=resync_every,
    )
    return watcher, registry, trigger


def summarize(notifications):
    return [(n.kind, n.operation, n.identity.name) for n in notifications]


def test_file_watcher_reports_relevant_changes(tmp_path: Path):
    objects = tmp_path / "objects.yaml"
    write(objects, cluster(), machine("Pending"), summary(), HEALTHCHECK, SECRET)
    watcher, registry, trigger = build_watcher(objects)

    assert watcher.poll() == 2
    assert summarize(trigger.notifications) == [
        (Kind.SVELTOS_CLUSTER, Operation.CREATE, "edge-1"),
        (Kind.HEALTH_CHECK, Operation.CREATE, "deployment-replicas"),
    ]
    assert len(registry.seen) == 4

    trigger.notifications.clear()
    write(objects, cluster(), machine("Running"), summary("touched"), HEALTHCHECK)

    assert watcher.poll() == 1
    assert summarize(trigger.notifications) == [
        (Kind.MACHINE, Operation.UPDATE, "edge-1-md-0"),
    ]
    summary_update = registry.seen[-1]
    assert summary_update.kind is Kind.CLUSTER_SUMMARY
    assert summary_update.operation is Operation.UPDATE

    trigger.notifications.clear()
    write(objects, machine("Running", annotations={"a": "b"}), summary("touched"), HEALTHCHECK)

    assert watcher.poll() == 1
    assert summarize(trigger.notifications) == [
        (Kind.SVELTOS_CLUSTER, Operation.DELETE, "edge-1"),
    ]


def test_file_watcher_label_change_triggers(tmp_path: Path):
    objects = tmp_path / "objects.yaml"
    write(objects, cluster(paused=True))
    watcher, _, trigger = build_watcher(objects)

    assert watcher.poll() == 0

    write(objects, cluster(paused=True, labels={"env": "staging"}))

    assert watcher.poll() == 1
    assert trigger.notifications[0].old_state.labels["env"] == "prod"


def test_file_watcher_resync_emits_generic(tmp_path: Path):
    objects = tmp_path / "objects.yaml"
    write(objects, cluster(), HEALTHCHECK)
    watcher, registry, trigger = build_watcher(objects, resync_every=2)

    watcher.poll()
    watcher.poll()
    registry.seen.clear()

    assert watcher.poll() == 0
    assert [n.operation for n in registry.seen] == [Operation.GENERIC, Operation.GENERIC]
    assert len(trigger.notifications) == 2


def test_file_watcher_tolerates_missing_and_invalid_files(tmp_path: Path):
    objects = tmp_path / "objects.yaml"
    watcher, registry, _ = build_watcher(objects)

    assert watcher.poll() == 0

    objects.write_text("items: [unterminated")
    assert watcher.poll() == 0

    objects.write_text("kind: List\n")
    assert watcher.poll() == 0

    objects.write_text(yaml.safe_dump({"items": [{"kind": "Machine", "metadata": {}}]}))
    assert watcher.poll() == 0

    objects.write_text("items:\n  - just-a-string\n")
    assert watcher.poll() == 0

    assert registry.seen == []


def test_file_watcher_skips_invalid_item_and_delivers_siblings(tmp_path: Path):
    objects = tmp_path / "objects.yaml"
    write(objects, cluster(paused=True))
    watcher, _, trigger = build_watcher(objects)

    assert watcher.poll() == 0

    write(objects, cluster(paused=False), {"kind": "HealthCheck", "metadata": {}})

    assert watcher.poll() == 1
    assert summarize(trigger.notifications) == [
        (Kind.SVELTOS_CLUSTER, Operation.UPDATE, "edge-1"),
    ]


def test_file_watcher_keeps_last_good_state_of_invalid_item(tmp_path: Path, caplog):
    objects = tmp_path / "objects.yaml"
    write(objects, cluster(), HEALTHCHECK)
    watcher, registry, trigger = build_watcher(objects)
    watcher.poll()
    registry.seen.clear()
    trigger.notifications.clear()

    broken = dict(HEALTHCHECK, spec=["not", "a", "mapping"])
    write(objects, cluster(), broken)

    with caplog.at_level(logging.WARNING, logger="relevance_agent.watchers.file"):
        assert watcher.poll() == 0

    assert registry.seen == []
    assert "skipping invalid HealthCheck deployment-replicas" in caplog.text

    repaired = dict(HEALTHCHECK, spec={"resourceSelectors": [{"group": "apps", "kind": "DaemonSet"}]})
    write(objects, cluster(), repaired)

    assert watcher.poll() == 1
    update = trigger.notifications[0]
    assert update.operation is Operation.UPDATE
    assert update.old_state.spec["resourceSelectors"][0]["kind"] == "Deployment"


class FailingOnceTrigger(RecordingTrigger):
    def __init__(self):
        super().__init__()
        self.failed = False

    def __call__(self, notification):
        if not self.failed:
            self.failed = True
            raise RuntimeError("queue unavailable")
        super().__call__(notification)


def test_file_watcher_redelivers_batch_after_trigger_failure(tmp_path: Path):
    objects = tmp_path / "objects.yaml"
    write(objects, cluster(), HEALTHCHECK)
    registry = RecordingRegistry()
    trigger = FailingOnceTrigger()
    watcher = FileObjectWatcher(
        registry=registry,
        trigger=trigger,
        path=objects,
        interval=0.1,
        stop_event=Event(),
    )

    with pytest.raises(RuntimeError):
        watcher.poll()

    assert watcher.poll() == 2
    assert summarize(trigger.notifications) == [
        (Kind.SVELTOS_CLUSTER, Operation.CREATE, "edge-1"),
        (Kind.HEALTH_CHECK, Operation.CREATE, "deployment-replicas"),
    ]
