from statsdlite.types import Protocol
from types import TracebackType
from typing import List, Optional, Tuple, Type

import re
import selectors
import socket
import threading
import time

# Independent of statsdlite.encoder so round trips actually check the wire format
LINE_RE = re.compile(r"\A(?P<name>[^:\n]+):(?P<value>[^|\n]+)\|(?P<type>c|g|ms|h|m|s)(?:\|@(?P<rate>[0-9.eE+-]+))?\n\Z")
TYPE_TOKENS = {"c": "counter", "g": "gauge", "ms": "timing", "h": "histogram", "m": "meter", "s": "set"}


def parse_line(line: bytes) -> Tuple[str, str, str, Optional[float]]:
    match = LINE_RE.match(line.decode("utf-8"))
    if match is None:
        raise ValueError("Not a statsd line: {!r}".format(line))
    rate = match.group("rate")
    return (
        match.group("name"),
        TYPE_TOKENS[match.group("type")],
        match.group("value"),
        float(rate) if rate is not None else None,
    )


class UdpServer:
    def __init__(self, host: str = "127.0.0.1") -> None:
        self.host = host
        self.port = 0
        self.socket = socket.socket(family=socket.AF_INET, type=socket.SOCK_DGRAM)

    def __enter__(self) -> "UdpServer":
        self.socket.bind((self.host, 0))
        self.port = self.socket.getsockname()[1]
        return self

    def __exit__(self, exc_type: Type, exc_val: BaseException, exc_tb: TracebackType) -> None:
        self.socket.close()

    def has_message(self, timeout: float = 0.1) -> bool:
        selector = selectors.DefaultSelector()
        selector.register(self.socket, selectors.EVENT_READ)
        try:
            return len(selector.select(timeout=timeout)) > 0
        finally:
            selector.unregister(self.socket)
            selector.close()

    def get_message(self, timeout: float = 2.0) -> str:
        self.socket.settimeout(timeout)
        return self.socket.recv(65535).decode()


class TcpServer:
    """Accepts connections one at a time and collects everything received"""

    def __init__(self, host: str = "127.0.0.1") -> None:
        self.host = host
        self.port = 0
        self.socket = socket.socket(family=socket.AF_INET, type=socket.SOCK_STREAM)
        self.connections = 0
        self._received = bytearray()
        self._lock = threading.Lock()
        self._thread = threading.Thread(target=self._serve, daemon=True)

    def __enter__(self) -> "TcpServer":
        self.socket.bind((self.host, 0))
        self.socket.listen(5)
        self.port = self.socket.getsockname()[1]
        self._thread.start()
        return self

    def __exit__(self, exc_type: Type, exc_val: BaseException, exc_tb: TracebackType) -> None:
        try:
            self.socket.shutdown(socket.SHUT_RDWR)
        except OSError:
            pass
        self.socket.close()

    def _serve(self) -> None:
        while True:
            try:
                conn, _ = self.socket.accept()
            except OSError:
                return
            with conn:
                self.connections += 1
                while True:
                    try:
                        data = conn.recv(4096)
                    except OSError:
                        break
                    if not data:
                        break
                    with self._lock:
                        self._received += data

    def get_data(self, size: int, timeout: float = 2.0) -> str:
        deadline = time.monotonic() + timeout
        while time.monotonic() < deadline:
            with self._lock:
                if len(self._received) >= size:
                    break
            time.sleep(0.01)
        with self._lock:
            return bytes(self._received).decode()


class FakeSocket:
    def __init__(self, fail_with: Optional[BaseException] = None) -> None:
        self.fail_with = fail_with
        self.sent: List[bytes] = []
        self.closed = False

    def send(self, data: bytes) -> int:
        if self.fail_with is not None:
            raise self.fail_with
        self.sent.append(bytes(data))
        return len(data)

    def sendall(self, data: bytes) -> None:
        self.send(data)

    def close(self) -> None:
        self.closed = True


class FakeSocketFactory:
    """Socket factory handing out FakeSockets, usable as StatsClient(socket_factory=...)"""

    def __init__(self) -> None:
        self.sockets: List[FakeSocket] = []
        self.calls: List[Tuple[str, int, Protocol]] = []
        self.connect_error: Optional[OSError] = None
        self.send_error: Optional[OSError] = None

    def __call__(self, host: str, port: int, proto: Protocol) -> FakeSocket:
        self.calls.append((host, port, proto))
        if self.connect_error is not None:
            raise self.connect_error
        sock = FakeSocket(fail_with=self.send_error)
        self.sockets.append(sock)
        return sock

    @property
    def sent(self) -> List[bytes]:
        return [packet for sock in self.sockets for packet in sock.sent]
