import pytest
from oslo_config import cfg

from healthcheck_relevance import Notification
from healthcheck_relevance.config_extensions import (
    reconcile_keys_from_conf,
    register_relevance_opts,
    registry_from_conf,
)
from healthcheck_relevance.exceptions import UnknownKindError


@pytest.fixture
def conf():
    conf = cfg.ConfigOpts()
    register_relevance_opts(conf)
    conf(args=[], default_config_files=[], default_config_dirs=[])
    return conf


def test_defaults(conf):
    assert conf.relevance_strict_registry is False
    assert reconcile_keys_from_conf(conf) == []

    registry = registry_from_conf(conf)
    assert registry.frozen
    assert not registry.strict


def test_overrides(conf):
    conf.set_override("relevance_strict_registry", True)
    conf.set_override("relevance_reconcile_keys", ["prod", " ", "staging "])

    registry = registry_from_conf(conf)

    assert registry.strict
    assert reconcile_keys_from_conf(conf) == ["prod", "staging"]
    with pytest.raises(UnknownKindError):
        registry.evaluate(Notification("ClusterClass", "Create", object()))
