from .config import ClientConfig, load_config
from .errors import (
    ConfigurationError, OversizeDataError, OversizeDataWarning, StatsdError, TransportError, ValidationError
)
from .statsd import StatsClient
from .types import MetricKind, Protocol

__version__ = "0.1.0"

__all__ = [
    "ClientConfig",
    "ConfigurationError",
    "load_config",
    "MetricKind",
    "OversizeDataError",
    "OversizeDataWarning",
    "Protocol",
    "StatsClient",
    "StatsdError",
    "TransportError",
    "ValidationError",
]
