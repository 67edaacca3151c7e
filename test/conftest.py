from .util import FakeSocketFactory, TcpServer, UdpServer
from typing import Iterator

import pytest


@pytest.fixture(name="udp_server")
def fixture_udp_server() -> Iterator[UdpServer]:
    with UdpServer() as udp_server:
        yield udp_server


@pytest.fixture(name="tcp_server")
def fixture_tcp_server() -> Iterator[TcpServer]:
    with TcpServer() as tcp_server:
        yield tcp_server


@pytest.fixture(name="fake_sockets")
def fixture_fake_sockets() -> FakeSocketFactory:
    return FakeSocketFactory()
