from pathlib import Path

import yaml

from relevance_agent.main import main


def test_main_once_prints_queued_keys(tmp_path: Path, capsys):
    objects = tmp_path / "objects.yaml"
    objects.write_text(
        yaml.safe_dump(
            {
                "items": [
                    {
                        "kind": "HealthCheckReport",
                        "metadata": {"name": "edge-1-replicas", "namespace": "fleet"},
                        "spec": {"clusterName": "edge-1"},
                    }
                ]
            }
        )
    )
    config = tmp_path / "agent.yaml"
    config.write_text(
        yaml.safe_dump(
            {
                "reconcile_keys": ["production-health", "staging-health"],
                "watchers": [{"type": "file", "path": str(objects)}],
            }
        )
    )

    assert main(["--config", str(config), "--once"]) == 0

    assert capsys.readouterr().out.splitlines() == ["production-health", "staging-health"]


def test_main_once_without_relevant_changes(tmp_path: Path, capsys):
    objects = tmp_path / "objects.yaml"
    objects.write_text(
        yaml.safe_dump(
            {
                "items": [
                    {
                        "kind": "Machine",
                        "metadata": {"name": "edge-1-md-0", "namespace": "fleet"},
                        "status": {"phase": "Provisioning"},
                    }
                ]
            }
        )
    )
    config = tmp_path / "agent.yaml"
    config.write_text(
        yaml.safe_dump(
            {
                "reconcile_keys": ["production-health"],
                "watchers": [{"type": "file", "path": str(objects)}],
            }
        )
    )

    assert main(["--config", str(config), "--once"]) == 0

    assert capsys.readouterr().out == ""
