# Copyright 2024, Aiven, https://aiven.io/
#
# This file is under the Apache License, Version 2.0.
# See the file `LICENSE` for details.
"""
statsdlite - send a single metric from the command line

  statsdlite --prefix myapp. counter requests 1
  statsdlite --config /etc/myapp.json gauge queue.length +3

"""
from . import __version__
from .config import client_section, ClientConfig, load_config
from .errors import StatsdError, ValidationError
from .statsd import StatsClient
from .types import MetricKind

import argparse
import logging
import os
import sys

LOG_FORMAT = "%(asctime)s\t%(name)s\t%(levelname)s\t%(message)s"


def parse_value(kind, text):
    """Convert a command line value to the type the metric kind expects"""
    kind = MetricKind(kind)
    try:
        if kind == MetricKind.SET:
            return text
        if kind == MetricKind.GAUGE and text[:1] in {"+", "-"}:
            return text
        if kind in {MetricKind.TIMING, MetricKind.HISTOGRAM}:
            try:
                return int(text)
            except ValueError:
                return float(text)
        return int(text)
    except ValueError as ex:
        raise ValidationError("Invalid {} value {!r}".format(kind, text)) from ex


def build_parser():
    parser = argparse.ArgumentParser(prog="statsdlite", description="Send a metric to a statsd daemon")
    parser.add_argument("--version", action="version", help="show program version", version=__version__)
    parser.add_argument("--config", help="json config file", default=os.environ.get("STATSDLITE_CONFIG"))
    parser.add_argument("--host", help="statsd daemon address")
    parser.add_argument("--port", help="statsd daemon port", type=int)
    parser.add_argument("--proto", help="network protocol", choices=["udp", "tcp"])
    parser.add_argument("--prefix", help="prefix prepended to the metric name")
    parser.add_argument("--rate", help="sample rate for counters and timings", type=float)
    parser.add_argument("--log-level", help="logging level", default=None)
    parser.add_argument("kind", help="metric kind", choices=[str(kind) for kind in MetricKind])
    parser.add_argument("metric", help="metric name")
    parser.add_argument("value", help="metric value")
    return parser


def run(args=None):
    args = build_parser().parse_args(args)

    file_config = load_config(args.config) if args.config else {}
    log_level = args.log_level or file_config.get("log_level", logging.WARNING)
    if isinstance(log_level, str):
        log_level = log_level.upper()
    logging.basicConfig(level=log_level, format=LOG_FORMAT)

    config = dict(client_section(file_config))
    for key in ("host", "port", "proto", "prefix"):
        if getattr(args, key) is not None:
            config[key] = getattr(args, key)

    with StatsClient.from_config(ClientConfig.from_dict(config)) as client:
        client.record(args.kind, args.metric, parse_value(args.kind, args.value), args.rate)
    return 0


def main(args=None):
    try:
        return run(args)
    except KeyboardInterrupt:
        print("*** interrupted by keyboard ***")
        return 1
    except StatsdError as ex:
        logging.getLogger("statsdlite").error("FATAL: %s: %s", ex.__class__.__name__, ex)
        return 1


if __name__ == "__main__":
    sys.exit(main() or 0)
