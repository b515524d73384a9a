"""
=============================================================================
RENDERER REGISTRY
=============================================================================

Maps media type patterns to renderer keys and picks the binding that best
satisfies a client's Accept preferences.

=============================================================================
BINDINGS
=============================================================================

    ┌────────────────────────────┬──────────────┐
    │ Pattern                    │ Renderer key │
    ├────────────────────────────┼──────────────┤
    │ application/json           │ "json"       │
    │ application/xml            │ "xml"        │
    │ text/xml                   │ "xml"        │
    │ text/plain                 │ "plain"      │
    │ text/html                  │ "html"       │
    │ */*                        │ "html"       │  ← fallback
    └────────────────────────────┴──────────────┘

Bindings are kept in registration order. Registering a pattern again
replaces its binding and moves it to the end, so it counts as the most
recently registered one.

The registry is a value: register(), register_exclusive() and clear()
return a NEW registry and leave the original untouched. A middleware
holding a registry can therefore be shared between threads without locks.

=============================================================================
MATCHING
=============================================================================

Accept entries are walked best-first. For each entry:

    Entry                  Bindings tried (first hit wins)
    ─────────────────────  ──────────────────────────────────────────────
    text/html;version=2    text/html;version=2 → text/html → text/*
    text/html              text/html → text/*
    text/*                 text/* → newest of text/html, text/plain, ...
    */*                    (nothing here, see fallback)

Parameterized bindings only ever match an identical entry: a binding for
"text/html;version=2" is NOT picked for a plain "text/html" request.

If the walk finds nothing, the "*/*" binding is used when registered. It
only wins when nothing more specific matches ANY entry. Otherwise the
result is None and the caller falls back to the default error handler.

=============================================================================
INTERVIEW INSIGHT: WHY NOT A SINGLE SORT?
=============================================================================

Q: "Why walk the client's preferences instead of scoring every binding?"
A: "The client's ranking is the primary order. A q=0.9 exact match must
   lose to a q=1.0 wildcard match. Scoring bindings first would let the
   server's specificity override the client's stated preference."

=============================================================================
"""

from dataclasses import dataclass
from typing import Dict, Hashable, Iterable, Iterator, List, Optional, Sequence, Union
import logging

from .container import RendererNotFoundError
from .renderers import ThrowableRenderer
from ..http.accept import AcceptEntry, parse_accept
from ..http.media_types import MediaType, WILDCARD


logger = logging.getLogger(__name__)

FALLBACK = MediaType(WILDCARD, WILDCARD)


@dataclass(frozen=True)
class RendererBinding:
    """A media type pattern bound to a renderer key."""

    pattern: MediaType
    key: Hashable

    def __str__(self) -> str:
        return f"{self.pattern} -> {self.key}"


class RendererRegistry:
    """
    Immutable, ordered set of renderer bindings.

    Args:
        source:   Object with has(key)/get(key), e.g. ServiceContainer
        bindings: Initial (pattern, key) pairs; patterns are validated
                  and keys checked against the source

    Raises:
        InvalidPatternError: A pattern does not follow the grammar
        RendererNotFoundError: A key is unknown to the source
    """

    def __init__(self, source, bindings: Iterable = ()):
        self._source = source
        self._bindings: Dict[MediaType, Hashable] = {}
        for pattern, key in bindings:
            self._put(self._bindings, pattern, key)

    # =========================================================================
    # CONFIGURATION
    # =========================================================================

    def register(self, pattern: str, key: Hashable) -> "RendererRegistry":
        """Return a registry with the binding added or replaced."""
        bindings = dict(self._bindings)
        self._put(bindings, pattern, key)
        return self._copy(bindings)

    def register_exclusive(self, pattern: str, key: Hashable) -> "RendererRegistry":
        """Return a registry holding only this binding."""
        bindings: Dict[MediaType, Hashable] = {}
        self._put(bindings, pattern, key)
        return self._copy(bindings)

    def clear(self, *patterns: str) -> "RendererRegistry":
        """
        Return a registry without the given patterns, or empty when called
        without arguments.

        Patterns are validated; patterns that are not bound are ignored.
        """
        if not patterns:
            return self._copy({})

        removed = {MediaType.parse(pattern) for pattern in patterns}
        return self._copy({
            media_type: key
            for media_type, key in self._bindings.items()
            if media_type not in removed
        })

    def _put(self, bindings: Dict[MediaType, Hashable], pattern, key: Hashable) -> None:
        media_type = pattern if isinstance(pattern, MediaType) else MediaType.parse(pattern)
        if not self._source.has(key):
            raise RendererNotFoundError(key)

        # Re-insert so a replaced binding moves to the end of the order
        bindings.pop(media_type, None)
        bindings[media_type] = key

    def _copy(self, bindings: Dict[MediaType, Hashable]) -> "RendererRegistry":
        registry = RendererRegistry(self._source)
        registry._bindings = bindings
        return registry

    # =========================================================================
    # LOOKUP
    # =========================================================================

    def resolve(self, key: Hashable) -> ThrowableRenderer:
        """
        Get the renderer behind a key from the renderer source.

        Raises:
            RendererNotFoundError: If the source does not know the key
        """
        if not self._source.has(key):
            raise RendererNotFoundError(key)
        return self._source.get(key)

    def negotiate(self, accept: Union[str, Sequence[str], None]) -> Optional[RendererBinding]:
        """Match a raw Accept header value, or one value per header line."""
        return self.match(parse_accept(accept))

    def match(self, entries: List[AcceptEntry]) -> Optional[RendererBinding]:
        """
        Find the binding for ranked Accept entries.

        Args:
            entries: Accept entries, best first (as parse_accept returns them)

        Returns:
            The winning binding, or None when nothing matches and no
            "*/*" binding is registered
        """
        for entry in entries:
            pattern = self._match_entry(entry.media_range)
            if pattern is not None:
                return RendererBinding(pattern, self._bindings[pattern])

        if FALLBACK in self._bindings:
            return RendererBinding(FALLBACK, self._bindings[FALLBACK])

        logger.debug(f"No renderer binding for {len(entries)} Accept entries")
        return None

    def _match_entry(self, media_range: MediaType) -> Optional[MediaType]:
        if media_range.is_full_wildcard:
            return None

        if media_range in self._bindings:
            return media_range

        if media_range.is_concrete:
            candidates = (media_range.without_params(), MediaType(media_range.type, WILDCARD))
            for candidate in candidates:
                if candidate in self._bindings:
                    return candidate
            return None

        # type/* entry: newest concrete parameterless binding of that type
        for pattern in reversed(list(self._bindings)):
            if pattern.type == media_range.type and pattern.is_concrete and not pattern.params:
                return pattern
        return None

    # =========================================================================
    # INSPECTION
    # =========================================================================

    @property
    def bindings(self) -> List[RendererBinding]:
        return [RendererBinding(pattern, key) for pattern, key in self._bindings.items()]

    def __contains__(self, pattern: str) -> bool:
        return MediaType.parse(pattern) in self._bindings

    def __len__(self) -> int:
        return len(self._bindings)

    def __iter__(self) -> Iterator[RendererBinding]:
        return iter(self.bindings)

    def __repr__(self) -> str:
        return f"RendererRegistry({', '.join(map(str, self.bindings))})"
