"""
=============================================================================
RENDERER CONTAINER
=============================================================================

A keyed lookup of renderers: the "renderer source" the registry resolves
renderer keys through.

=============================================================================
WHY KEYS INSTEAD OF INSTANCES?
=============================================================================

ErrorCatcher bindings map a media type pattern to a KEY, not to a
renderer object:

    catcher.with_renderer("application/json", "json")

The key is looked up here when the binding is registered (so a typo fails
at startup) and again when an error is rendered. That lets an application
swap the implementation behind "json" for every binding at once, and lets
factories build renderers lazily.

Any object with has(key) and get(key) can stand in for ServiceContainer,
e.g. an adapter over a dependency-injection framework.

=============================================================================
"""

from typing import Any, Callable, Dict, Hashable, Union

from .renderers import (
    ThrowableRenderer,
    PlainTextRenderer,
    HtmlRenderer,
    JsonRenderer,
    XmlRenderer,
)


class RendererNotFoundError(LookupError):
    """Raised when a renderer key cannot be resolved."""

    def __init__(self, key: Any):
        super().__init__(f'The renderer "{key}" cannot be found.')
        self.key = key


RendererFactory = Callable[[], ThrowableRenderer]


class ServiceContainer:
    """
    Immutable mapping of renderer keys to renderers or renderer factories.

    Usage:
        container = ServiceContainer.with_defaults()
        container = container.set("problem+json", ProblemJsonRenderer())

        container.has("json")   # True
        container.get("json")   # JsonRenderer instance
    """

    def __init__(self, definitions: Dict[Hashable, Union[ThrowableRenderer, RendererFactory]] = None):
        self._definitions = dict(definitions or {})

    @classmethod
    def with_defaults(cls) -> "ServiceContainer":
        """Container holding the four built-in renderers."""
        return cls({
            "plain": PlainTextRenderer(),
            "html": HtmlRenderer(),
            "json": JsonRenderer(),
            "xml": XmlRenderer(),
        })

    def has(self, key: Hashable) -> bool:
        """True if the key is defined. Unhashable keys are never defined."""
        try:
            return key in self._definitions
        except TypeError:
            return False

    def get(self, key: Hashable) -> ThrowableRenderer:
        """
        Resolve a key.

        Instances are returned as-is; factories (callables that are not
        renderers) are called on every lookup.

        Raises:
            RendererNotFoundError: If the key is unknown
        """
        try:
            definition = self._definitions[key]
        except (KeyError, TypeError):
            raise RendererNotFoundError(key) from None

        if isinstance(definition, ThrowableRenderer):
            return definition
        return definition()

    def set(self, key: Hashable, definition: Union[ThrowableRenderer, RendererFactory]) -> "ServiceContainer":
        """Return a new container with the key added or replaced."""
        return ServiceContainer({**self._definitions, key: definition})

    def __contains__(self, key: Hashable) -> bool:
        return self.has(key)

    def __len__(self) -> int:
        return len(self._definitions)
