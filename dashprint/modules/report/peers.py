"""Caller allow-list."""

import ipaddress
import socket
from collections.abc import Iterable

from dashprint.shared.errors import AddressParseError, UnauthorizedPeerError
from dashprint.shared.logging import get_logger

logger = get_logger(__name__)

IPNetwork = ipaddress.IPv4Network | ipaddress.IPv6Network


def split_host_port(address: str) -> tuple[str, str]:
    """
    Split "host:port" or "[v6host]:port" into host and port.

    Raises:
        AddressParseError: the address has no port or is malformed
    """
    if address.startswith("["):
        end = address.find("]")
        if end < 0:
            raise AddressParseError(address, f"address {address}: missing ']' in address")
        host, rest = address[1:end], address[end + 1:]
        if not rest.startswith(":"):
            raise AddressParseError(address, f"address {address}: missing port in address")
        port = rest[1:]
    else:
        host, sep, port = address.rpartition(":")
        if not sep:
            raise AddressParseError(address, f"address {address}: missing port in address")
        if ":" in host:
            raise AddressParseError(address, f"address {address}: too many colons in address")

    if "[" in port or "]" in port:
        raise AddressParseError(address, f"address {address}: unexpected bracket in address")

    return host, port


def format_address(host: str, port: int | str) -> str:
    """Inverse of split_host_port."""
    if ":" in host:
        return f"[{host}]:{port}"
    return f"{host}:{port}"


def _resolve(name: str) -> list[IPNetwork]:
    try:
        infos = socket.getaddrinfo(name, None)
    except socket.gaierror as e:
        logger.warning(f"Cannot resolve allowed peer '{name}': {e}")
        return []
    addrs = {info[4][0].split("%")[0] for info in infos}
    return [ipaddress.ip_network(addr) for addr in sorted(addrs)]


class AllowedPeers:
    """
    Peers permitted to request reports.

    Entries are IP addresses, CIDR networks, or host names. Host names are
    resolved once, at construction, and also match the literal peer name.
    """

    def __init__(self, entries: Iterable[str]) -> None:
        self._networks: list[IPNetwork] = []
        self._names: set[str] = set()

        for entry in entries:
            try:
                self._networks.append(ipaddress.ip_network(entry, strict=False))
            except ValueError:
                self._names.add(entry.lower())
                self._networks.extend(_resolve(entry))

    @property
    def empty(self) -> bool:
        return not self._networks and not self._names

    def check(self, host: str) -> bool:
        if self.empty:
            return True
        if host.lower() in self._names:
            return True

        try:
            ip = ipaddress.ip_address(host.split("%")[0])
        except ValueError:
            return False

        candidates = [ip]
        if isinstance(ip, ipaddress.IPv6Address) and ip.ipv4_mapped is not None:
            candidates.append(ip.ipv4_mapped)

        return any(addr in net for addr in candidates for net in self._networks)


def authorize_peer(address: str, peers: AllowedPeers) -> str:
    """
    Check the caller's remote address against the allow-list.

    Returns:
        The caller host with the port removed

    Raises:
        AddressParseError: address cannot be split
        UnauthorizedPeerError: host is not allowed
    """
    host, _ = split_host_port(address)
    if not peers.check(host):
        raise UnauthorizedPeerError(address)
    return host
