"""
Client configuration

The configuration can be given as keyword arguments, as a dict (for example the
"statsd" section of an application's JSON config file) or loaded from a JSON
file:

  {
      "statsd": {
          "host": "127.0.0.1",
          "port": 8125,
          "proto": "udp",
          "prefix": "myapp.",
          "autoflush": false,
          "max_buffer_size": 1432
      }
  }

"""
from .errors import ConfigurationError
from .types import Protocol
from dataclasses import dataclass
from typing import Any, Dict, Mapping

import json
import numbers

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8125
DEFAULT_MAX_BUFFER_SIZE = 512


@dataclass(frozen=True)
class ClientConfig:
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    proto: Protocol = Protocol.UDP
    prefix: str = ""
    autoflush: bool = True
    max_buffer_size: int = DEFAULT_MAX_BUFFER_SIZE
    raise_on_oversize: bool = False

    def __post_init__(self) -> None:
        if not isinstance(self.host, str) or not self.host:
            raise ConfigurationError("host must be a non-empty string, got {!r}".format(self.host))
        if not _is_int(self.port) or not 0 <= self.port <= 65535:
            raise ConfigurationError("port must be an integer between 0 and 65535, got {!r}".format(self.port))
        try:
            proto = Protocol(self.proto.lower() if isinstance(self.proto, str) else self.proto)
        except ValueError as ex:
            raise ConfigurationError("proto must be 'tcp' or 'udp', got {!r}".format(self.proto)) from ex
        # frozen dataclass, normalize through object.__setattr__
        object.__setattr__(self, "proto", proto)
        if not isinstance(self.prefix, str):
            raise ConfigurationError("prefix must be a string, got {!r}".format(self.prefix))
        if not _is_int(self.max_buffer_size) or self.max_buffer_size <= 0:
            raise ConfigurationError("max_buffer_size must be a positive integer, got {!r}".format(self.max_buffer_size))
        for flag in ("autoflush", "raise_on_oversize"):
            if not isinstance(getattr(self, flag), bool):
                raise ConfigurationError("{} must be a boolean, got {!r}".format(flag, getattr(self, flag)))

    @classmethod
    def from_dict(cls, config: Mapping[str, Any]) -> "ClientConfig":
        return cls(
            host=config.get("host", DEFAULT_HOST),
            port=config.get("port", DEFAULT_PORT),
            proto=config.get("proto", config.get("protocol", Protocol.UDP)),
            prefix=config.get("prefix", ""),
            autoflush=config.get("autoflush", True),
            max_buffer_size=config.get("max_buffer_size", DEFAULT_MAX_BUFFER_SIZE),
            raise_on_oversize=config.get("raise_on_oversize", False),
        )


def _is_int(value: Any) -> bool:
    return isinstance(value, numbers.Integral) and not isinstance(value, bool)


def load_config(config_path: str) -> Dict[str, Any]:
    """Read a JSON config file. Client settings are read from its "statsd" section if it has one."""
    try:
        with open(config_path) as fp:
            config = json.load(fp)
    except FileNotFoundError as ex:
        raise ConfigurationError("Cannot load json config file at {!r}".format(config_path)) from ex
    except ValueError as ex:
        raise ConfigurationError("Invalid json config file {!r}: {}".format(config_path, ex)) from ex

    if not isinstance(config, dict):
        raise ConfigurationError("Config file {!r} must contain a json object".format(config_path))
    if not isinstance(config.get("statsd", {}), dict):
        raise ConfigurationError("'statsd' section in {!r} must be a json object".format(config_path))
    return config


def client_section(config: Mapping[str, Any]) -> Mapping[str, Any]:
    return config.get("statsd", config)
