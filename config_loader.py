import json
from types import SimpleNamespace

from data_stream_name import validate_data_stream_name
from data_stream_bootstrap import default_policy_name, default_template_name

DEFAULT_TIMESTAMP_KEY = '@timestamp'
DEFAULT_TIME_PRECISION = 3
MAX_TIME_PRECISION = 9


def load_config(path):
    with open(path) as f:
        raw_cfg = json.load(f)

    return SimpleNamespace(**raw_cfg)


def validate_config(cfg):
    """Check ``cfg`` in place and fill the optional keys with their defaults."""
    cfg.data_stream_name = validate_data_stream_name(getattr(cfg, 'data_stream_name', None))

    if not getattr(cfg, 'data_stream_ilm_name', None):
        cfg.data_stream_ilm_name = default_policy_name(cfg.data_stream_name)
    if not getattr(cfg, 'data_stream_template_name', None):
        cfg.data_stream_template_name = default_template_name(cfg.data_stream_name)

    policy = getattr(cfg, 'data_stream_ilm_policy', None)
    if policy is not None and not isinstance(policy, dict):
        raise TypeError("'data_stream_ilm_policy' must be a JSON object")
    cfg.data_stream_ilm_policy = policy

    cfg.timestamp_key = getattr(cfg, 'timestamp_key', None) or DEFAULT_TIMESTAMP_KEY

    precision = getattr(cfg, 'time_precision', DEFAULT_TIME_PRECISION)
    if isinstance(precision, bool) or not isinstance(precision, int):
        raise TypeError(f"'time_precision' must be an integer: <{precision!r}>")
    if precision < 0 or precision > MAX_TIME_PRECISION:
        raise ValueError(f"'time_precision' must be between 0 and {MAX_TIME_PRECISION}: <{precision}>")
    cfg.time_precision = precision

    cfg.es_url = getattr(cfg, 'es_url', None)
    return cfg
