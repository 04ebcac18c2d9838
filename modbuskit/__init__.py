"""Modbus helpers: coil storage, log levels and hex dumps, IPv4 values, a TCP client and target parsing."""

__version__ = "0.1.0"
__all__ = ["coils", "logging_utils", "ipaddress_value", "tcp_client", "target"]