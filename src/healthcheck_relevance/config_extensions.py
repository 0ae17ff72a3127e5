"""oslo.config options for controllers embedding the relevance engine.

A host process that already uses oslo.config registers these next to its
own options and builds the registry from them with :func:`registry_from_conf`.
"""

from oslo_config import cfg

from .registry import build_registry

relevance_opts = [
    cfg.BoolOpt('relevance_strict_registry',
                default=False,
                help='Raise on notifications for kinds without a registered '
                     'predicate instead of logging an error and treating '
                     'them as relevant.'),
    cfg.ListOpt('relevance_reconcile_keys',
                default=[],
                help='ClusterHealthCheck names enqueued whenever a watched '
                     'change is judged relevant. '
                     'Example: ["production-health", "staging-health"]'),
]


def register_relevance_opts(conf=None):
    """Register the relevance options on ``conf`` (the global CONF by default).

    Options go to the DEFAULT group, next to the host's own options.
    """
    conf = cfg.CONF if conf is None else conf
    conf.register_opts(relevance_opts)
    return conf


def registry_from_conf(conf=None):
    """Build a frozen predicate registry honouring the registered options."""
    conf = cfg.CONF if conf is None else conf
    return build_registry(strict=conf.relevance_strict_registry)


def reconcile_keys_from_conf(conf=None):
    conf = cfg.CONF if conf is None else conf
    return [key.strip() for key in conf.relevance_reconcile_keys if key.strip()]
