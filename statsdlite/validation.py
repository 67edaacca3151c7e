"""
Value checks for each metric kind

The checks can be disabled for the whole process by setting the environment
variable STATSDLITE_STRICT to 0 before statsdlite is imported.  Values are then
passed to the encoder as-is.

"""
from .errors import ValidationError
from .types import METRIC_KINDS, MetricKind
from typing import Any, Callable, Dict, Optional

import math
import numbers
import os
import re

GAUGE_RE = re.compile(r"\A[-+]?[0-9]+\Z")


def _strict_mode_from_env(environ=os.environ) -> bool:
    return environ.get("STATSDLITE_STRICT", "1").strip().lower() not in {"0", "false", "no", "off"}


STRICT = _strict_mode_from_env()


def _is_int(value: Any) -> bool:
    return isinstance(value, numbers.Integral) and not isinstance(value, bool)


def _is_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        return False
    return math.isfinite(value)


def _check_integer(value: Any) -> bool:
    return _is_int(value)


def _check_non_negative_integer(value: Any) -> bool:
    return _is_int(value) and value >= 0


def _check_non_negative_number(value: Any) -> bool:
    return _is_number(value) and value >= 0


def _check_gauge(value: Any) -> bool:
    if isinstance(value, str):
        return GAUGE_RE.match(value) is not None
    return _check_non_negative_integer(value)


def _check_set_member(value: Any) -> bool:
    return isinstance(value, str) or _is_int(value)


VALUE_CHECKS: Dict[MetricKind, Callable[[Any], bool]] = {
    MetricKind.COUNTER: _check_integer,
    MetricKind.GAUGE: _check_gauge,
    MetricKind.TIMING: _check_non_negative_number,
    MetricKind.HISTOGRAM: _check_non_negative_number,
    MetricKind.METER: _check_non_negative_integer,
    MetricKind.SET: _check_set_member,
}

VALUE_DESCRIPTIONS = {
    MetricKind.COUNTER: "an integer",
    MetricKind.GAUGE: "a non-negative integer or a string like '+5' or '-5'",
    MetricKind.TIMING: "a non-negative number",
    MetricKind.HISTOGRAM: "a non-negative number",
    MetricKind.METER: "a non-negative integer",
    MetricKind.SET: "a string",
}


def validate_rate(rate: Any) -> None:
    if not _is_number(rate) or not 0 <= rate <= 1:
        raise ValidationError("Sample rate must be a number between 0 and 1, got {!r}".format(rate))


def validate(kind: MetricKind, value: Any, rate: Optional[float] = None, *, strict: bool = STRICT) -> None:
    """Raise ValidationError if value (or rate) is outside the domain of kind.

    A rate given for a kind that does not support sampling is always an error,
    strict mode only controls the value and rate domain checks.
    """
    kind = MetricKind(kind)
    if rate is not None and not METRIC_KINDS[kind].accepts_rate:
        raise ValidationError("Metric kind {} does not accept a sample rate".format(kind))

    if not strict:
        return

    if not VALUE_CHECKS[kind](value):
        raise ValidationError("Invalid {} value {!r}: must be {}".format(kind, value, VALUE_DESCRIPTIONS[kind]))
    if rate is not None:
        validate_rate(rate)
