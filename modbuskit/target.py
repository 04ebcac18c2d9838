"""Parse target descriptors of the form ``host[:port[:serverID]]``."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Callable, Optional

from modbuskit.ipaddress_value import NIL_ADDR, IPAddress
from modbuskit.tcp_client import TcpClient

DEFAULT_PORT = 502
DEFAULT_SERVER_ID = 1

_IP_PATTERN = re.compile(
    r"((\d{1,3})\.(\d{1,3})\.(\d{1,3})\.(\d{1,3}))(:(\d{1,5})(:(\d{1,3}))?)?",
    re.ASCII,
)
_HOST_PATTERN = re.compile(
    r"(([a-zA-Z0-9][a-zA-Z0-9\-]*)(\.[a-zA-Z0-9][a-zA-Z0-9\-]*)*)"
    r"(:(\d{1,5})(:(\d{1,3}))?)?",
    re.ASCII,
)


class TargetError(ValueError):
    """A target descriptor that cannot be used; ``code`` tells why."""

    UNKNOWN_HOST = -1
    BAD_PORT = -2
    BAD_SERVER_ID = -3

    def __init__(self, code: int, message: str) -> None:
        super().__init__(message)
        self.code = code


@dataclass
class Target:
    """A Modbus TCP server: address, port and server ID."""

    ip: IPAddress = field(default_factory=IPAddress)
    port: int = DEFAULT_PORT
    server_id: int = DEFAULT_SERVER_ID


def _dotted_ip(source: str) -> Optional[re.Match]:
    match = _IP_PATTERN.fullmatch(source)
    if match is None:
        return None
    if any(not 0 < int(match.group(i)) <= 255 for i in range(2, 6)):
        return None
    return match


def parse_target(
    source: str, resolver: Optional[Callable[[str], IPAddress]] = None
) -> Target:
    """Parse ``IP[:port[:serverID]]`` or ``hostname[:port[:serverID]]``.

    Host names are turned into addresses by ``resolver`` (DNS by default).
    Raises TargetError for an unknown host, a port outside 1..65535 or a
    server ID outside 1..247. Port and server ID default to 502 and 1.
    """
    resolve = resolver if resolver is not None else TcpClient.hostname_to_ip
    port_group = 0

    match = _dotted_ip(source)
    if match is not None:
        ip = IPAddress.parse(match.group(1))
        if match.group(7):
            port_group = 7
    else:
        match = _HOST_PATTERN.fullmatch(source)
        if match is None:
            raise TargetError(
                TargetError.UNKNOWN_HOST, f"invalid target descriptor {source!r}"
            )
        ip = resolve(match.group(1))
        if ip == NIL_ADDR:
            raise TargetError(
                TargetError.UNKNOWN_HOST, f"no address for host {match.group(1)!r}"
            )
        if match.group(5):
            port_group = 5

    target = Target(ip=ip)
    if port_group:
        port = int(match.group(port_group))
        if not 0 < port < 65536:
            raise TargetError(TargetError.BAD_PORT, f"invalid port {port}")
        target.port = port
        server_text = match.group(port_group + 2)
        if server_text:
            server_id = int(server_text)
            if not 0 < server_id < 248:
                raise TargetError(
                    TargetError.BAD_SERVER_ID, f"invalid server ID {server_id}"
                )
            target.server_id = server_id
    return target