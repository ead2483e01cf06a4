"""Discovery of the host's IPv4 address."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable

import psutil

logger = logging.getLogger(__name__)

_IPV4_PREFIX = re.compile(
    r"^((25[0-5]|2[0-4][0-9]|1[0-9][0-9]|[1-9]?[0-9])\.){3}"
    r"(25[0-5]|2[0-4][0-9]|1[0-9][0-9]|[1-9]?[0-9])"
)


def first_ipv4_address(addresses: Iterable[str]) -> str:
    """Pick the non-loopback IPv4 address out of ``addresses``.

    Addresses may carry a ``/prefix`` suffix, which is removed. Every IPv4
    address is logged; when several qualify the last one listed wins. An empty
    string is returned when none qualifies.
    """
    chosen = ""
    for address in addresses:
        if not _IPV4_PREFIX.match(address):
            continue
        logger.info(address)
        if address.startswith("127.0."):
            continue
        host, slash, _ = address.partition("/")
        chosen = host if slash and host else address
    return chosen


def local_ip_address() -> str:
    """Log the host's network addresses and return its non-loopback IPv4 address."""
    try:
        interfaces = psutil.net_if_addrs()
    except OSError as exc:
        logger.error("%s", exc)
        return "Error"
    return first_ipv4_address(
        entry.address for entries in interfaces.values() for entry in entries
    )