"""
=============================================================================
MEDIA TYPE PATTERNS
=============================================================================

Parses and validates media type patterns such as those used to bind error
renderers and those found in the Accept request header.

=============================================================================
GRAMMAR
=============================================================================

    pattern   = range *( OWS ";" OWS parameter )
    range     = "*/*" / ( type "/" "*" ) / ( type "/" subtype )
    parameter = token "=" ( token / quoted-string )

    ┌────────────────────────────┬──────────────────────────────────────┐
    │ Pattern                    │ Meaning                              │
    ├────────────────────────────┼──────────────────────────────────────┤
    │ text/html                  │ exactly HTML                         │
    │ text/html;version=2        │ HTML, and only version 2             │
    │ text/*                     │ any text type                        │
    │ */*                        │ anything (a bare "*" means the same) │
    └────────────────────────────┴──────────────────────────────────────┘

Rejected: "text", "*/html", "text/html;", "invalid pattern", "a/b c".

Type, subtype and parameter names are case-insensitive (RFC 7231) and are
normalized to lowercase. Parameter values keep their case.

=============================================================================
SPECIFICITY
=============================================================================

Negotiation prefers the most specific pattern:

    3  text/html;version=2     concrete type with parameters
    2  text/html               concrete type
    1  text/*                  subtype wildcard
    0  */*                     full wildcard

=============================================================================
"""

from dataclasses import dataclass
from typing import Tuple
import re


class InvalidPatternError(ValueError):
    """
    Raised when a media type pattern does not follow the grammar.

    Registration code raises this eagerly, so a misspelled pattern fails at
    startup instead of silently never matching at request time.
    """

    def __init__(self, pattern: str):
        super().__init__(f"Invalid media type pattern: {pattern!r}")
        self.pattern = pattern


# RFC 7230 tchar, minus "*" which is only valid as a whole wildcard segment.
_TOKEN = r"[A-Za-z0-9!#$%&'+.^_`|~-]+"
_QUOTED = r'"(?:[^"\\]|\\.)*"'
_PARAM = rf"\s*;\s*({_TOKEN})\s*=\s*({_TOKEN}|{_QUOTED})"

MEDIA_TYPE_PATTERN = re.compile(
    rf"^(\*|{_TOKEN})/(\*|{_TOKEN})((?:{_PARAM})*)\s*$"
)
PARAM_PATTERN = re.compile(_PARAM)

WILDCARD = "*"


@dataclass(frozen=True)
class MediaType:
    """
    A parsed media type or media range.

    Instances are immutable and hashable; two patterns that differ only in
    case, whitespace or parameter order compare equal.

        MediaType.parse("Text/HTML; Version=2") == MediaType.parse("text/html;version=2")
    """

    type: str
    subtype: str
    params: Tuple[Tuple[str, str], ...] = ()

    @classmethod
    def parse(cls, value: str) -> "MediaType":
        """
        Parse a media type pattern.

        Args:
            value: Pattern string, e.g. "application/json" or "text/*"

        Returns:
            The parsed MediaType

        Raises:
            InvalidPatternError: If the value does not follow the grammar
        """
        if not isinstance(value, str):
            raise InvalidPatternError(repr(value))

        text = value.strip()
        if text == WILDCARD:
            text = "*/*"

        match = MEDIA_TYPE_PATTERN.match(text)
        if not match:
            raise InvalidPatternError(value)

        main_type, subtype, raw_params = match.groups()[:3]
        if main_type == WILDCARD and subtype != WILDCARD:
            # "*/html" names no real range
            raise InvalidPatternError(value)

        params = tuple(sorted(
            (name.lower(), _unquote(param_value))
            for name, param_value in PARAM_PATTERN.findall(raw_params)
        ))
        return cls(main_type.lower(), subtype.lower(), params)

    @property
    def essence(self) -> str:
        """type/subtype without parameters."""
        return f"{self.type}/{self.subtype}"

    @property
    def is_full_wildcard(self) -> bool:
        return self.type == WILDCARD

    @property
    def is_subtype_wildcard(self) -> bool:
        return self.type != WILDCARD and self.subtype == WILDCARD

    @property
    def is_concrete(self) -> bool:
        return self.subtype != WILDCARD

    @property
    def specificity(self) -> int:
        if self.is_full_wildcard:
            return 0
        if self.is_subtype_wildcard:
            return 1
        return 3 if self.params else 2

    def without_params(self) -> "MediaType":
        return MediaType(self.type, self.subtype)

    def __str__(self) -> str:
        params = "".join(f";{name}={_quote(value)}" for name, value in self.params)
        return f"{self.essence}{params}"


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] == '"':
        return re.sub(r"\\(.)", r"\1", value[1:-1])
    return value


def _quote(value: str) -> str:
    if re.fullmatch(_TOKEN, value):
        return value
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'
