"""
Shared fixtures: a scripted httpcore network backend standing in for the
AMEE REST API.
"""

from typing import List, Optional, Union

import httpcore
import pytest

from amee_api import AMEEClient, AMEEConfig


AUTH_OK = (
    b"HTTP/1.1 200 OK\r\n"
    b"Content-Type: application/json\r\n"
    b"authToken: XYZ\r\n"
    b"\r\n"
    b'{"user":{"uid":"ABCDEF012345"}}\r\n'
)

AUTH_NO_TOKEN = (
    b"HTTP/1.1 200 OK\r\n"
    b"Content-Type: application/json\r\n"
    b"\r\n"
    b'{"user":{}}\r\n'
)

UNAUTHORIZED = (
    b"HTTP/1.1 401 UNAUTHORIZED\r\n"
    b"Content-Length: 0\r\n"
    b"\r\n"
)


def ok(payload: bytes) -> bytes:
    return b"HTTP/1.1 200 OK\r\nContent-Type: application/json\r\n\r\n" + payload + b"\r\n"


class FakeStream(httpcore.NetworkStream):
    """Records everything written and replays a canned response."""

    def __init__(self, response: bytes, short_write: bool = False, read_error: Optional[Exception] = None):
        self._chunks = [response[i:i + 16] for i in range(0, len(response), 16)]
        self._short_write = short_write
        self._read_error = read_error
        self.written = b""
        self.tls = False
        self.closed = False

    def write(self, buffer: bytes, timeout: Optional[float] = None):
        if self._short_write:
            self.written += buffer[:-1]
            return len(buffer) - 1
        self.written += buffer
        return None

    def read(self, max_bytes: int, timeout: Optional[float] = None) -> bytes:
        if self._read_error is not None:
            raise self._read_error
        if not self._chunks:
            return b""
        return self._chunks.pop(0)

    def start_tls(self, ssl_context, server_hostname=None, timeout=None):
        self.tls = True
        return self

    def close(self) -> None:
        self.closed = True


Scripted = Union[bytes, Exception, FakeStream]


class FakeBackend(httpcore.NetworkBackend):
    """Hands out one scripted stream per connection, in order."""

    def __init__(self, script: Optional[List[Scripted]] = None):
        self.script: List[Scripted] = list(script or [])
        self.connections: List[tuple] = []
        self.streams: List[FakeStream] = []

    def connect_tcp(self, host, port, timeout=None, local_address=None, socket_options=None):
        self.connections.append((host, port))
        if not self.script:
            raise AssertionError(f"unexpected connection to {host}:{port}")
        item = self.script.pop(0)
        if isinstance(item, Exception):
            raise item
        stream = item if isinstance(item, FakeStream) else FakeStream(item)
        self.streams.append(stream)
        return stream

    @property
    def requests(self) -> List[str]:
        return [s.written.decode("utf-8") for s in self.streams]


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def config(backend: FakeBackend) -> AMEEConfig:
    """Valid configuration for testing."""
    return AMEEConfig(
        project_key="k",
        project_password="p",
        host="stage.amee.com",
        network_backend=backend,
        debug=True,
    )


@pytest.fixture
def client(config: AMEEConfig) -> AMEEClient:
    return AMEEClient(config)
