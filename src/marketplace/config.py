"""Read-only access to the ``[custom]`` section of ``domain.toml``."""

from protean.utils.globals import current_domain

_DEFAULTS = {
    "currency": "usd",
    "order_number_prefix": "ORD",
    "default_commission_rate": 10.0,
    "resync_batch_size": 100,
}


def setting(name):
    custom = current_domain.config.get("custom") or {}
    return custom.get(name, _DEFAULTS[name])
