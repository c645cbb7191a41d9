"""
AMEE API Transport

One short-lived byte-stream connection per request, opened through an
httpcore network backend. httpcore exceptions are translated into the
client's own error classes here.
"""

import logging
import ssl
from typing import Optional

import httpcore

from .errors import ConnectionError, TransmissionError


logger = logging.getLogger("amee_api")

READ_CHUNK_SIZE = 64 * 1024


def _log(debug: bool, message: str, *args: object) -> None:
    """Log debug message."""
    if debug:
        logger.debug(f"[AMEE] {message}", *args)


class Connection:
    """A single open stream to the API host."""

    def __init__(
        self,
        stream: httpcore.NetworkStream,
        timeout: Optional[float] = None,
        debug: bool = False,
    ) -> None:
        self._stream = stream
        self._timeout = timeout
        self._debug = debug
        self._closed = False

    def send(self, data: bytes) -> int:
        """Write data, returning the number of bytes handed to the stream."""
        try:
            written = self._stream.write(data, timeout=self._timeout)
        except httpcore.TimeoutException as e:
            raise TransmissionError(
                "Error sending the AMEE REST API request: timeout",
                {"timeout": self._timeout},
            ) from e
        except httpcore.NetworkError as e:
            raise TransmissionError(f"Error sending the AMEE REST API request: {e}") from e
        # httpcore streams write everything or raise
        return len(data) if written is None else written

    def receive_all(self) -> bytes:
        """Read until the peer closes the stream."""
        chunks = []
        try:
            while True:
                chunk = self._stream.read(READ_CHUNK_SIZE, timeout=self._timeout)
                if not chunk:
                    break
                chunks.append(chunk)
        except httpcore.TimeoutException as e:
            raise TransmissionError(
                "Error reading the AMEE REST API response: timeout",
                {"timeout": self._timeout},
            ) from e
        except httpcore.NetworkError as e:
            raise TransmissionError(f"Error reading the AMEE REST API response: {e}") from e
        return b"".join(chunks)

    def close(self) -> None:
        if not self._closed:
            self._closed = True
            self._stream.close()
            _log(self._debug, "Connection closed")

    def __enter__(self) -> "Connection":
        return self

    def __exit__(self, *args: object) -> None:
        self.close()


class Transport:
    """Opens plain or TLS connections to the API host."""

    def __init__(
        self,
        backend: Optional[httpcore.NetworkBackend] = None,
        ssl_context: Optional[ssl.SSLContext] = None,
        timeout: Optional[float] = None,
        debug: bool = False,
    ) -> None:
        self._backend = backend if backend is not None else httpcore.SyncBackend()
        self._ssl_context = ssl_context
        self._timeout = timeout
        self._debug = debug

    def open(self, host: str, port: int, use_tls: bool = False) -> Connection:
        """
        Open a connection.

        Raises:
            ConnectionError: If the host cannot be reached or TLS fails
        """
        _log(self._debug, f"Opening {'TLS' if use_tls else 'plain'} connection to {host}:{port}")
        try:
            stream = self._backend.connect_tcp(host, port, timeout=self._timeout)
        except (httpcore.ConnectError, httpcore.ConnectTimeout, OSError) as e:
            raise ConnectionError(
                f"Unable to connect to the AMEE REST API: {e}",
                {"host": host, "port": port},
            ) from e

        if not use_tls:
            return Connection(stream, self._timeout, self._debug)

        if self._ssl_context is None:
            self._ssl_context = httpcore.default_ssl_context()
        try:
            stream = stream.start_tls(self._ssl_context, server_hostname=host, timeout=self._timeout)
        except (httpcore.ConnectError, httpcore.ConnectTimeout, OSError) as e:
            stream.close()
            raise ConnectionError(
                f"Unable to connect to the AMEE REST API: {e}",
                {"host": host, "port": port, "tls": True},
            ) from e
        return Connection(stream, self._timeout, self._debug)
