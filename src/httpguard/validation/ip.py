"""
=============================================================================
IP RANGE VALIDATION
=============================================================================

Decides whether a client address is inside a configured list of ranges.
IpFilter only needs a callable ``address -> bool``; IpValidator is the
implementation shipped with the package.

=============================================================================
RANGE SYNTAX
=============================================================================

    ┌──────────────────────┬──────────────────────────────────────────────┐
    │ Entry                │ Matches                                      │
    ├──────────────────────┼──────────────────────────────────────────────┤
    │ 192.168.1.10         │ exactly that address                         │
    │ 10.0.0.0/8           │ the network (host bits are ignored)          │
    │ 2001:db8::/32        │ IPv6 networks work the same way              │
    │ !10.0.0.13           │ negation: a match DENIES                     │
    │ private              │ an alias, see NETWORKS below                 │
    │ !system              │ negated alias                                │
    └──────────────────────┴──────────────────────────────────────────────┘

Entries are checked in order and the FIRST matching entry decides:

    ["!10.0.0.13", "10.0.0.0/8"]   10.0.0.13 denied, rest of 10/8 allowed
    ["10.0.0.0/8", "!10.0.0.13"]   10.0.0.13 allowed (first entry wins)

An address no entry matches is denied, and so is every address when the
list is empty.

=============================================================================
"""

from typing import Dict, Iterable, List, Optional, Sequence, Tuple, Union
import ipaddress


IPAddress = Union[ipaddress.IPv4Address, ipaddress.IPv6Address]
IPNetwork = Union[ipaddress.IPv4Network, ipaddress.IPv6Network]

NEGATION = "!"

# Aliases may refer to other aliases
NETWORKS: Dict[str, Tuple[str, ...]] = {
    "*": ("any",),
    "any": ("0.0.0.0/0", "::/0"),
    "private": ("10.0.0.0/8", "172.16.0.0/12", "192.168.0.0/16", "fd00::/8"),
    "multicast": ("224.0.0.0/4", "ff00::/8"),
    "linklocal": ("169.254.0.0/16", "fe80::/10"),
    "localhost": ("127.0.0.0/8", "::1"),
    "documentation": ("192.0.2.0/24", "198.51.100.0/24", "203.0.113.0/24", "2001:db8::/32"),
    "system": ("multicast", "linklocal", "localhost", "documentation"),
}


class InvalidRangeError(ValueError):
    """Raised for a range entry that is neither an address, a network nor an alias."""

    def __init__(self, entry: str):
        super().__init__(f"Invalid IP range: {entry!r}")
        self.entry = entry


class IpValidator:
    """
    Validates addresses against an ordered list of ranges.

    Usage:
        validator = IpValidator(["!10.0.0.13", "private"])
        validator("10.1.2.3")        # True
        validator("8.8.8.8")         # False

        ipv4_only = validator.with_ipv6(False)

    Instances are immutable; ranges(), with_ipv4() and with_ipv6() return
    new validators.

    Raises:
        InvalidRangeError: At construction, for an unparseable entry
    """

    def __init__(
        self,
        ranges: Iterable[str] = (),
        allow_ipv4: bool = True,
        allow_ipv6: bool = True,
    ):
        self._ranges = tuple(str(entry).strip() for entry in ranges)
        self.allow_ipv4 = allow_ipv4
        self.allow_ipv6 = allow_ipv6
        self._rules: List[Tuple[bool, IPNetwork]] = [
            (negated, network)
            for entry in self._ranges
            for negated, network in _compile(entry)
        ]

    def ranges(self, ranges: Iterable[str]) -> "IpValidator":
        return IpValidator(ranges, self.allow_ipv4, self.allow_ipv6)

    def with_ipv4(self, allow: bool = True) -> "IpValidator":
        return IpValidator(self._ranges, allow, self.allow_ipv6)

    def with_ipv6(self, allow: bool = True) -> "IpValidator":
        return IpValidator(self._ranges, self.allow_ipv4, allow)

    @property
    def configured_ranges(self) -> Sequence[str]:
        return self._ranges

    def is_allowed(self, address) -> bool:
        """
        Check an address.

        Unparseable input (None, "", "not-an-ip") is denied rather than
        raising.
        """
        ip = parse_address(address)
        if ip is None:
            return False
        if ip.version == 4 and not self.allow_ipv4:
            return False
        if ip.version == 6 and not self.allow_ipv6:
            return False

        for negated, network in self._rules:
            if ip.version == network.version and ip in network:
                return not negated
        return False

    def __call__(self, address) -> bool:
        return self.is_allowed(address)

    def __repr__(self) -> str:
        return f"IpValidator({list(self._ranges)!r})"


def parse_address(value) -> Optional[IPAddress]:
    """
    Parse a client address.

    Accepts bracketed IPv6 ("[::1]", "[::1]:8080") and IPv4 with a port
    ("1.2.3.4:80"). Returns None for anything else that is not an address.
    """
    if not isinstance(value, str):
        return None

    token = value.strip()
    if not token:
        return None
    if token.startswith("[") and "]" in token:
        token = token[1:token.find("]")]
    elif token.count(":") == 1 and "." in token:
        host, port = token.rsplit(":", 1)
        if port.isdigit():
            token = host

    try:
        return ipaddress.ip_address(token)
    except ValueError:
        return None


def _compile(entry: str, negated: bool = False, seen: Tuple[str, ...] = ()) -> List[Tuple[bool, IPNetwork]]:
    """Expand one range entry into (negated, network) rules."""
    original = entry
    if entry.startswith(NEGATION):
        negated = not negated
        entry = entry[1:].strip()

    if not entry:
        raise InvalidRangeError(original)

    alias = entry.lower()
    if alias in NETWORKS:
        if alias in seen:
            raise InvalidRangeError(original)
        return [
            rule
            for member in NETWORKS[alias]
            for rule in _compile(member, negated, seen + (alias,))
        ]

    try:
        network = ipaddress.ip_network(entry.strip("[]"), strict=False)
    except ValueError as exc:
        raise InvalidRangeError(original) from exc
    return [(negated, network)]
