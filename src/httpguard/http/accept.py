"""
=============================================================================
ACCEPT HEADER NEGOTIATION
=============================================================================

Parses the Accept request header into ranked preferences.

=============================================================================
ACCEPT HEADER ANATOMY
=============================================================================

    Accept: text/html, application/json;q=0.9, text/*;q=0.5, */*;q=0.1
            ───┬─────  ──────────┬───────────  ─────┬──────  ────┬─────
               │                 │                  │            │
          q=1.0 (default)     q=0.9            q=0.5 range   q=0.1 range

Each comma-separated element is a MEDIA RANGE, optionally followed by
media type parameters, then a "q" weight, then extension parameters:

    text/html;level=1;q=0.7;ext=x
    ───────── ─────── ───── ─────
     range    param   weight ignored

=============================================================================
RANKING
=============================================================================

Entries are ordered by:

    1. quality weight       higher first
    2. specificity          text/html;v=2 > text/html > text/* > */*
    3. header position      earlier first

So "text/html, text/html;version=2" ranks version=2 FIRST: both have
q=1.0 and the parameterized one is more specific.

=============================================================================
LENIENCY
=============================================================================

Clients send all sorts of Accept headers. Parsing never fails:

    - missing or blank header       → a single */* entry
    - several header lines          → joined as one comma list
    - malformed q ("q=abc", "q=2")  → weight 1.0
    - malformed range ("html")      → element skipped
    - q=0                           → "not acceptable", element dropped

=============================================================================
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence, Union
import logging

from .media_types import MediaType, InvalidPatternError


logger = logging.getLogger(__name__)

DEFAULT_QUALITY = 1.0


@dataclass(frozen=True)
class AcceptEntry:
    """
    One ranked preference from an Accept header.

    Attributes:
        media_range: The parsed range, parameters included (q excluded)
        quality:     Weight between 0.0 and 1.0
        position:    Index of the element in the header
    """

    media_range: MediaType
    quality: float = DEFAULT_QUALITY
    position: int = 0

    @property
    def specificity(self) -> int:
        return self.media_range.specificity

    @property
    def sort_key(self) -> tuple:
        return (-self.quality, -self.specificity, self.position)


def parse_accept(header: Union[str, Sequence[str], None]) -> List[AcceptEntry]:
    """
    Parse an Accept header into entries ranked best-first.

    Args:
        header: Raw header value, a list of values (one per header line),
                or None if the client sent no header

    Returns:
        Entries sorted by quality, specificity, then header order.
        Never empty for a missing/blank header; may be empty when every
        element was malformed or had q=0.
    """
    header = join_values(header)
    if header is None or not header.strip():
        return [AcceptEntry(MediaType("*", "*"))]

    entries = []
    for position, element in enumerate(header.split(",")):
        element = element.strip()
        if not element:
            continue

        entry = _parse_element(element, position)
        if entry is None:
            continue
        if entry.quality == 0.0:
            continue

        entries.append(entry)

    return sorted(entries, key=lambda e: e.sort_key)


def _parse_element(element: str, position: int) -> Optional[AcceptEntry]:
    """
    Parse a single Accept element into an entry.

    The range and its media type parameters come before "q"; anything
    after "q" is an accept extension and is dropped.
    """
    range_part, *param_parts = element.split(";")

    media_params = []
    quality = DEFAULT_QUALITY
    for part in param_parts:
        name, _, value = part.partition("=")
        if name.strip().lower() == "q":
            quality = _parse_quality(value)
            break
        media_params.append(part)

    try:
        media_range = MediaType.parse(";".join([range_part, *media_params]))
    except InvalidPatternError:
        logger.debug(f"Skipping malformed Accept element: {element!r}")
        return None

    return AcceptEntry(media_range, quality, position)


def _parse_quality(value: str) -> float:
    """q value as float; malformed or out-of-range values mean 1.0."""
    try:
        quality = float(value.strip())
    except ValueError:
        return DEFAULT_QUALITY

    if not 0.0 <= quality <= 1.0:
        return DEFAULT_QUALITY
    return quality


def join_values(header: Union[str, Sequence[str], None]) -> Optional[str]:
    """Collapse repeated header lines into a single comma-separated value."""
    if header is None or isinstance(header, str):
        return header
    return ", ".join(str(value) for value in header)
