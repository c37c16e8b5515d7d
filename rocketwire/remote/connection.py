"""A TCP connection to a broker or name server."""

from __future__ import annotations

import socket
import threading
from typing import Any, Optional

_DEFAULT_HOST = "127.0.0.1"
_RECV_CHUNK = 64 * 1024


def _parse_addr(addr: str) -> tuple[str, int]:
    host, sep, port = addr.rpartition(":")
    if not sep or not port:
        raise ValueError(f"missing port in address: {addr!r}")
    host = host.strip("[]") or _DEFAULT_HOST
    try:
        return host, int(port)
    except ValueError as exc:
        raise ValueError(f"invalid port in address: {addr!r}") from exc


class TcpConnection:
    """A connected socket with a write lock and a closed flag."""

    def __init__(self, sock: socket.socket, addr: Optional[str] = None) -> None:
        self._sock = sock
        self.addr = addr
        self.lock = threading.Lock()
        self._closed = threading.Event()
        try:
            self.remote_addr: Any = sock.getpeername()
        except OSError:
            self.remote_addr = addr

    def write(self, data: bytes) -> None:
        """Send all of ``data``."""
        self._sock.sendall(bytes(data))

    def read_exactly(self, size: int) -> bytes:
        """Read exactly ``size`` bytes; raise EOFError if the peer closes first."""
        if size < 0:
            raise ValueError(f"negative read size: {size}")
        chunks = []
        remaining = size
        while remaining > 0:
            chunk = self._sock.recv(min(remaining, _RECV_CHUNK))
            if not chunk:
                raise EOFError("connection closed by peer")
            chunks.append(chunk)
            remaining -= len(chunk)
        return b"".join(chunks)

    def destroy(self) -> None:
        """Mark the connection closed and close the socket."""
        self._closed.set()
        try:
            self._sock.shutdown(socket.SHUT_RDWR)
        except OSError:
            pass
        self._sock.close()

    def is_closed(self) -> bool:
        """Whether ``destroy`` has been called."""
        return self._closed.is_set()

    def __enter__(self) -> "TcpConnection":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.destroy()


def open_connection(addr: str, timeout: Optional[float] = None) -> TcpConnection:
    """Connect to ``addr`` ("host:port"; an empty host means localhost)."""
    host, port = _parse_addr(addr)
    sock = socket.create_connection((host, port), timeout=timeout)
    sock.settimeout(None)
    try:
        sock.setsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY, 1)
    except OSError:
        pass
    return TcpConnection(sock, addr)