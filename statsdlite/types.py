"""statsdlite internal types"""

from typing import NamedTuple

import enum


class StrEnum(str, enum.Enum):
    def __str__(self):
        return str(self.value)


class Protocol(StrEnum):
    TCP = "tcp"
    UDP = "udp"


class MetricKind(StrEnum):
    COUNTER = "counter"
    GAUGE = "gauge"
    TIMING = "timing"
    HISTOGRAM = "histogram"
    METER = "meter"
    SET = "set"


class KindInfo(NamedTuple):
    suffix: str
    accepts_rate: bool


# Wire suffix and sampling support per metric kind; the value domains live in
# statsdlite.validation
METRIC_KINDS = {
    MetricKind.COUNTER: KindInfo(suffix="c", accepts_rate=True),
    MetricKind.GAUGE: KindInfo(suffix="g", accepts_rate=False),
    MetricKind.TIMING: KindInfo(suffix="ms", accepts_rate=True),
    MetricKind.HISTOGRAM: KindInfo(suffix="h", accepts_rate=False),
    MetricKind.METER: KindInfo(suffix="m", accepts_rate=False),
    MetricKind.SET: KindInfo(suffix="s", accepts_rate=False),
}
