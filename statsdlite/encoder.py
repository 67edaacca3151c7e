"""
StatsD line encoding

  <prefix><name>:<value>|<type>[|@<rate>]\n

See https://github.com/b/statsd_spec for the metric types.  Gauge values
prefixed with '+' or '-' are sent verbatim and adjust the gauge instead of
setting it.

"""
from .errors import ValidationError
from .types import METRIC_KINDS, MetricKind
from typing import Any, Optional


def format_value(value: Any) -> str:
    if isinstance(value, float):
        if value.is_integer():
            return str(int(value))
        return repr(value)
    return str(value)


def encode(prefix: str, name: str, kind: MetricKind, value: Any, rate: Optional[float] = None) -> bytes:
    suffix = METRIC_KINDS[MetricKind(kind)].suffix
    value_str = format_value(value)
    if "\n" in name or "\n" in value_str or "\n" in prefix:
        raise ValidationError("Metric name and value must not contain newlines: {!r}:{!r}".format(name, value_str))

    line = "{}{}:{}|{}".format(prefix, name, value_str, suffix)
    if rate is not None and rate < 1:
        line += "|@{}".format(format_value(rate))
    return (line + "\n").encode("utf-8")
