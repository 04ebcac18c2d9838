"""A small blocking TCP client with a byte-stream interface."""

from __future__ import annotations

import logging
import socket
import time
from typing import Optional, Union

from modbuskit.ipaddress_value import NIL_ADDR, IPAddress

_log = logging.getLogger(__name__)

_DRAIN_SECONDS = 2.0
_DRAIN_CHUNK = 256
_PEEK_LIMIT = 256


class TcpClient:
    """A TCP connection to one host, addressed by IPv4 address or host name."""

    def __init__(
        self, host: Union[IPAddress, str, None] = None, port: int = 0
    ) -> None:
        self._sock: Optional[socket.socket] = None
        self._host = IPAddress()
        self._port = 0
        self._no_delay = False
        if host is not None:
            self.connect(host, port)

    @property
    def host(self) -> IPAddress:
        """Address of the connected host, or 0.0.0.0 when not connected."""
        return IPAddress(*(self._host[i] for i in range(4)))

    @property
    def port(self) -> int:
        """The peer's TCP service number, or 0 when not connected."""
        return self._port

    def connect(self, host: Union[IPAddress, str], port: int) -> None:
        """Connect to ``host`` (an address or a host name) on ``port``.

        Any existing connection is closed first. Raises ConnectionError if
        a host name cannot be resolved and OSError if the connection fails.
        """
        if not 0 <= port <= 0xFFFF:
            raise ValueError(f"port must be 0..65535, got {port!r}")
        if self._sock is not None:
            self.disconnect()

        if isinstance(host, str):
            address = self.hostname_to_ip(host)
            if address == NIL_ADDR:
                raise ConnectionError(f"no such host {host!r}")
        else:
            address = host

        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        try:
            sock.connect((str(address), port))
        except OSError as exc:
            sock.close()
            _log.error("error connecting to %s:%d - %s", address, port, exc)
            raise
        if self._no_delay:
            sock.setsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY, 1)
        _log.debug("connected to %s:%d", address, port)
        self._sock = sock
        self._host = IPAddress(*(address[i] for i in range(4)))
        self._port = port

    def disconnect(self) -> None:
        """Drain pending input for at most two seconds, then close the connection."""
        if self._sock is not None:
            deadline = time.monotonic() + _DRAIN_SECONDS
            try:
                while time.monotonic() < deadline:
                    chunk = self._recv_nowait(_DRAIN_CHUNK)
                    if not chunk:
                        break
                    _log.debug("discarded %d bytes on close", len(chunk))
            except OSError:
                pass
            self._sock.close()
            self._sock = None
        self._host = IPAddress()
        self._port = 0

    def _require_socket(self) -> socket.socket:
        if self._sock is None:
            raise ConnectionError("not connected")
        return self._sock

    def _recv_nowait(self, size: int, flags: int = 0) -> Optional[bytes]:
        """Receive without blocking; None means no data is waiting yet."""
        sock = self._require_socket()
        timeout = sock.gettimeout()
        sock.setblocking(False)
        try:
            return sock.recv(size, flags)
        except BlockingIOError:
            return None
        finally:
            sock.settimeout(timeout)

    def write(self, data: Union[bytes, bytearray, int]) -> int:
        """Send ``data`` (or one byte given as an int); return the number of bytes sent."""
        sock = self._require_socket()
        payload = bytes([data]) if isinstance(data, int) else bytes(data)
        try:
            sock.sendall(payload)
        except OSError as exc:
            _log.error("error sending: %s", exc)
            raise
        return len(payload)

    def available(self) -> int:
        """Number of bytes waiting to be read (at most 256); 0 if none or not connected."""
        if self._sock is None:
            return 0
        try:
            data = self._recv_nowait(_PEEK_LIMIT, socket.MSG_PEEK)
        except OSError:
            return 0
        return len(data) if data else 0

    def read(self, size: int = 1) -> bytes:
        """Read up to ``size`` bytes, blocking until some arrive; b"" at end of stream."""
        return self._require_socket().recv(size)

    def peek(self) -> Optional[int]:
        """Return the next byte without consuming it, or None if nothing is waiting."""
        if self._sock is None:
            return None
        try:
            data = self._recv_nowait(1, socket.MSG_PEEK)
        except OSError:
            return None
        return data[0] if data else None

    def flush(self) -> None:
        """Nothing is buffered on this side, so there is nothing to flush."""

    def stop(self) -> None:
        """Close the connection if it is still open."""
        if self._sock is not None:
            self.disconnect()

    def set_no_delay(self, flag: bool) -> None:
        """Switch the Nagle algorithm off (True) or on; kept for later connections."""
        self._no_delay = bool(flag)
        if self._sock is not None:
            self._sock.setsockopt(
                socket.IPPROTO_TCP, socket.TCP_NODELAY, 1 if self._no_delay else 0
            )

    def connected(self) -> bool:
        """True while the peer has not closed the connection."""
        if self._sock is None:
            return False
        try:
            data = self._recv_nowait(1, socket.MSG_PEEK)
        except OSError:
            return False
        if data is None:
            return True
        return bool(data)

    def __bool__(self) -> bool:
        return self.connected()

    def __enter__(self) -> "TcpClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()

    @staticmethod
    def hostname_to_ip(hostname: str) -> IPAddress:
        """Resolve ``hostname`` to its first IPv4 address; 0.0.0.0 if there is none."""
        try:
            infos = socket.getaddrinfo(
                hostname, None, socket.AF_UNSPEC, socket.SOCK_STREAM
            )
        except (socket.gaierror, UnicodeError) as exc:
            _log.error("getaddrinfo: %s", exc)
            return IPAddress()
        for family, _type, _proto, _name, sockaddr in infos:
            if family != socket.AF_INET:
                continue
            address = IPAddress.parse(sockaddr[0])
            if address != NIL_ADDR:
                _log.debug("host %r = %s", hostname, address)
                return address
        _log.debug("no IP for %r found", hostname)
        return IPAddress()