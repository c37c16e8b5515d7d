"""Local address discovery helpers."""

from __future__ import annotations

import ipaddress
import socket
import time
from typing import Iterable, Iterator, Sequence

# Documentation-only address: connecting a UDP socket to it sends no traffic.
_PROBE_ADDRESS = ("192.0.2.1", 9)


def _outbound_address() -> Iterator[str]:
    try:
        with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as sock:
            sock.connect(_PROBE_ADDRESS)
            yield sock.getsockname()[0]
    except OSError:
        return


def _host_addresses() -> Iterator[str]:
    try:
        infos = socket.getaddrinfo(socket.gethostname(), None, socket.AF_INET)
    except OSError:
        return
    for info in infos:
        yield info[4][0]


def _first_usable(candidates: Iterable[str]) -> bytes | None:
    for candidate in candidates:
        try:
            addr = ipaddress.IPv4Address(candidate)
        except ValueError:
            continue
        if not addr.is_loopback and not addr.is_unspecified:
            return addr.packed
    return None


def client_ip4() -> bytes:
    """Return the four bytes of a non-loopback IPv4 address of this host.

    Raises OSError when no such address is found.
    """
    for source in (_outbound_address, _host_addresses):
        found = _first_usable(source())
        if found is not None:
            return found
    raise OSError("unknown IP address")


def local_ip() -> str:
    """Return this host's IPv4 address in dotted form, or "" if unknown."""
    try:
        return get_address_by_bytes(client_ip4())
    except OSError:
        return ""


def fake_ip() -> bytes:
    """Return four ASCII digits taken from the current millisecond timestamp."""
    millis = time.time_ns() // 1_000_000
    return str(millis).encode()[4:8]


def get_address_by_bytes(data: Sequence[int]) -> str:
    """Format the first four bytes of ``data`` as a dotted IPv4 address."""
    return str(ipaddress.IPv4Address(bytes(data[:4])))