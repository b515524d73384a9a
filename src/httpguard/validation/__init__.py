"""Client address validation for IpFilter."""

from .ip import IpValidator, InvalidRangeError, NETWORKS, parse_address

__all__ = [
    "IpValidator",
    "InvalidRangeError",
    "NETWORKS",
    "parse_address",
]
