# Copyright 2024, Aiven, https://aiven.io/
#
# This file is under the Apache License, Version 2.0.
# See the file `LICENSE` for details.
from .errors import TransportError
from .types import Protocol

import logging
import socket

SOCKET_TYPES = {
    Protocol.UDP: socket.SOCK_DGRAM,
    Protocol.TCP: socket.SOCK_STREAM,
}


def create_socket(host, port, proto):
    """Return a socket connected to host:port, trying each address getaddrinfo returns"""
    socket_type = SOCKET_TYPES[Protocol(proto)]
    last_connection_error = None
    for addr_info in socket.getaddrinfo(host, port, socket.AF_UNSPEC, socket_type):
        family, sock_type, sock_proto, _, sock_addr = addr_info
        sock = None
        try:
            sock = socket.socket(family, sock_type, sock_proto)
            sock.connect(sock_addr)
            return sock
        except OSError as ex:
            if sock is not None:
                sock.close()
            last_connection_error = ex

    if last_connection_error is None:
        raise OSError("No addresses found for {}:{}".format(host, port))
    raise last_connection_error


class StatsdTransport:
    """Lazily connected socket to the statsd daemon.

    Failed sends are not retried: the socket is closed and the next send
    connects again.
    """

    def __init__(self, *, host, port, proto=Protocol.UDP, socket_factory=None):
        self.log = logging.getLogger("StatsdTransport")
        self.host = host
        self.port = port
        self.proto = Protocol(proto)
        self.socket_factory = socket_factory or create_socket
        self.socket = None

    @property
    def connected(self):
        return self.socket is not None

    def _connect(self):
        try:
            self.socket = self.socket_factory(self.host, self.port, self.proto)
        except OSError as ex:
            raise TransportError(
                "Failed to initialize {} socket to {}:{}: {}".format(self.proto, self.host, self.port, ex)
            ) from ex
        self.log.debug("Connected %s socket to %s:%s", self.proto, self.host, self.port)

    def close(self):
        if self.socket is None:
            return
        try:
            self.socket.close()
        except OSError:
            pass
        finally:
            self.socket = None

    def send(self, data):
        if self.socket is None:
            self._connect()

        try:
            if self.proto == Protocol.TCP:
                self.socket.sendall(data)
                return len(data)
            return self.socket.send(data)
        except OSError as ex:
            self.close()
            raise TransportError("Failed to send {} bytes to {}:{}: {}".format(len(data), self.host, self.port, ex)) from ex
