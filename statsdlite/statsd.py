"""
StatsD client

Supports the metric types of the StatsD Metrics Export Specification v0.1:

  https://github.com/b/statsd_spec

plus the gauge increment/decrement extension.  With autoflush (the default)
every metric is sent as its own packet.  Without it, metrics are buffered and
sent as multi-metric packets of at most max_buffer_size bytes, and flush() must
be called at the end of each unit of work (or the client closed).

"""
from .buffer import MetricBuffer
from .config import ClientConfig, DEFAULT_HOST, DEFAULT_MAX_BUFFER_SIZE, DEFAULT_PORT
from .encoder import encode
from .transport import StatsdTransport
from .types import MetricKind, Protocol
from .validation import validate
from typing import Any, Callable, Mapping, Optional, Union

import dataclasses
import functools
import logging
import random
import sys
import time

GaugeValue = Union[int, str]


class _Timer:
    """Context manager and decorator recording the elapsed time as a timing, in milliseconds"""

    def __init__(self, client: "StatsClient", metric: str, rate: Optional[float] = None) -> None:
        self.client = client
        self.metric = metric
        self.rate = rate
        self.ms: Optional[int] = None
        self._start: Optional[float] = None

    def __call__(self, func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            with _Timer(self.client, self.metric, self.rate):
                return func(*args, **kwargs)

        return wrapper

    def __enter__(self) -> "_Timer":
        self._start = time.monotonic()
        return self

    def __exit__(self, exc_type, exc_value, tb) -> None:
        self.ms = int(round(1000 * (time.monotonic() - self._start)))
        self.client.timing(self.metric, self.ms, self.rate)


class StatsClient:
    def __init__(
        self,
        host: str = DEFAULT_HOST,
        port: int = DEFAULT_PORT,
        proto: Union[Protocol, str] = Protocol.UDP,
        prefix: str = "",
        autoflush: bool = True,
        max_buffer_size: int = DEFAULT_MAX_BUFFER_SIZE,
        *,
        raise_on_oversize: bool = False,
        socket_factory: Optional[Callable] = None,
    ) -> None:
        self.log = logging.getLogger("StatsClient")
        self.config = ClientConfig(
            host=host,
            port=port,
            proto=proto,
            prefix=prefix,
            autoflush=autoflush,
            max_buffer_size=max_buffer_size,
            raise_on_oversize=raise_on_oversize,
        )
        self._transport = StatsdTransport(
            host=self.config.host, port=self.config.port, proto=self.config.proto, socket_factory=socket_factory
        )
        self._buffer = MetricBuffer(
            max_buffer_size=self.config.max_buffer_size,
            send=self._transport.send,
            autoflush=self.config.autoflush,
            raise_on_oversize=self.config.raise_on_oversize,
        )
        self.log.debug("Initialized %s for %s://%s:%s", self.__class__.__name__, self.config.proto, host, port)

    @classmethod
    def from_config(
        cls, config: Union[ClientConfig, Mapping[str, Any]], *, socket_factory: Optional[Callable] = None
    ) -> "StatsClient":
        if not isinstance(config, ClientConfig):
            config = ClientConfig.from_dict(config)
        return cls(**dataclasses.asdict(config), socket_factory=socket_factory)

    @property
    def buffer(self) -> MetricBuffer:
        return self._buffer

    def __enter__(self) -> "StatsClient":
        return self

    def __exit__(self, exc_type, exc_value, tb) -> None:
        self.close()

    def __del__(self):
        # Module globals may already be gone during interpreter shutdown
        if sys.is_finalizing():
            return
        buffer = getattr(self, "_buffer", None)
        if buffer is None:
            return
        try:
            buffer.flush()
        except Exception as ex:  # pylint: disable=broad-except
            self.log.warning("Failed to flush metrics on teardown: %r", ex)
        finally:
            self._transport.close()

    def record(self, kind: Union[MetricKind, str], metric: str, value: Any, rate: Optional[float] = None) -> bool:
        """Validate, sample and encode a metric, then hand it to the buffer.

        Returns False if the metric was sampled out or dropped for not fitting
        in the buffer.
        """
        kind = MetricKind(kind)
        validate(kind, value, rate)
        if rate is not None and rate < 1 and random.random() > rate:
            return False
        return self._buffer.record(encode(self.config.prefix, metric, kind, value, rate))

    def counter(self, metric: str, value: int, rate: Optional[float] = None) -> None:
        self.record(MetricKind.COUNTER, metric, value, rate)

    # Compatibility with other statsd clients
    update = counter

    def increment(self, metric: str, rate: Optional[float] = None) -> None:
        self.counter(metric, 1, rate)

    def decrement(self, metric: str, rate: Optional[float] = None) -> None:
        self.counter(metric, -1, rate)

    def gauge(self, metric: str, value: GaugeValue) -> None:
        """Set a gauge, or adjust it when value is a string prefixed with '+' or '-'"""
        self.record(MetricKind.GAUGE, metric, value)

    def timing(self, metric: str, value: float, rate: Optional[float] = None) -> None:
        self.record(MetricKind.TIMING, metric, value, rate)

    timing_ms = timing

    def histogram(self, metric: str, value: float) -> None:
        self.record(MetricKind.HISTOGRAM, metric, value)

    def meter(self, metric: str, value: int) -> None:
        self.record(MetricKind.METER, metric, value)

    def set_add(self, metric: str, value: str) -> None:
        self.record(MetricKind.SET, metric, value)

    def timer(self, metric: str, rate: Optional[float] = None) -> _Timer:
        return _Timer(self, metric, rate)

    def flush(self) -> int:
        return self._buffer.flush()

    def close(self) -> None:
        try:
            self._buffer.flush()
        finally:
            self._transport.close()
