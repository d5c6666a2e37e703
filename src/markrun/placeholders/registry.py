"""Placeholder protocol and the registry that maps ``namespace:key`` to handlers."""

from __future__ import annotations

import threading
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Protocol

from ..exceptions import PlaceholderConflictError, RegistrationError
from ..logger import get_logger
from .context import DEFAULT_CONTEXT, ContextSet

logger = get_logger()


@dataclass(frozen=True, slots=True)
class PlaceholderRequest:
    """A parsed placeholder reference handed to Placeholder.resolve().

    Attributes:
        qualified_key: Lowercase ``namespace:key``
        context_name: Lowercase context tag, ``default`` when the token named none
        args: Pipe-separated arguments, blanks dropped
        raw_token: The original bracketed text, e.g. ``<ph:town:name@claims|x>``
    """

    qualified_key: str
    context_name: str = DEFAULT_CONTEXT
    args: tuple[str, ...] = field(default_factory=tuple)
    raw_token: str = ""

    def __post_init__(self) -> None:
        if not self.qualified_key or not self.qualified_key.strip():
            raise ValueError("qualified_key cannot be blank")
        if not self.context_name or not self.context_name.strip():
            object.__setattr__(self, "context_name", DEFAULT_CONTEXT)
        object.__setattr__(self, "args", tuple(self.args))

    @property
    def namespace(self) -> str:
        return self.qualified_key.partition(":")[0]

    @property
    def key(self) -> str:
        return self.qualified_key.partition(":")[2]


class Placeholder(Protocol):
    """A single resolvable placeholder.

    Implementations must always return a string; return ``""`` when the
    value cannot be resolved.
    """

    @property
    def key(self) -> str:
        """Unqualified key, e.g. ``town_name`` (registered as ``towns:town_name``)."""
        ...

    def resolve(self, request: PlaceholderRequest, contexts: ContextSet) -> str:
        """Resolve the request using the available contexts."""
        ...


PlaceholderFunc = Callable[[PlaceholderRequest, ContextSet], str]


@dataclass(frozen=True, slots=True)
class FunctionPlaceholder:
    """Placeholder backed by a plain function."""

    key: str
    func: PlaceholderFunc

    def resolve(self, request: PlaceholderRequest, contexts: ContextSet) -> str:
        return self.func(request, contexts)


class PlaceholderRegistry:
    """Registry of placeholders by fully-qualified, lowercase ``namespace:key``.

    Registration is append-only and happens at startup; lookups afterwards
    are lock-free.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._placeholders: dict[str, Placeholder] = {}

    def register(self, namespace: str, placeholder: Placeholder) -> str:
        """Register a placeholder under namespace.

        Args:
            namespace: Owning namespace, e.g. ``towns``
            placeholder: Placeholder whose key is unqualified

        Returns:
            The qualified key it was registered under

        Raises:
            RegistrationError: If the namespace or key is blank, or the key contains ':'
            PlaceholderConflictError: If the qualified key is already registered
        """
        if not namespace or not namespace.strip():
            raise RegistrationError("namespace cannot be blank")

        key = placeholder.key
        if not key or not key.strip():
            raise RegistrationError("placeholder key cannot be blank")
        if ":" in key:
            raise RegistrationError(f"placeholder key must be unqualified (do not include ':'): {key}")

        qualified = qualify(namespace, key)
        with self._lock:
            if qualified in self._placeholders:
                raise PlaceholderConflictError(f"Placeholder already registered: {qualified}")
            self._placeholders[qualified] = placeholder

        logger.scopes(f"Registered placeholder {qualified}")
        return qualified

    def placeholder(self, namespace: str, key: str) -> Callable[[PlaceholderFunc], PlaceholderFunc]:
        """Decorator registering a function as a placeholder.

        Example:
            @registry.placeholder("towns", "name")
            def town_name(request, contexts):
                ctx = contexts.get_or_default(request.context_name)
                town = ctx.get(TOWN) if ctx else None
                return town.name if town else ""
        """

        def decorator(func: PlaceholderFunc) -> PlaceholderFunc:
            self.register(namespace, FunctionPlaceholder(key, func))
            return func

        return decorator

    def get(self, qualified_key: str | None) -> Placeholder | None:
        """Look up a placeholder by qualified key (case-insensitive), or None."""
        if qualified_key is None or not qualified_key.strip():
            return None
        return self._placeholders.get(qualified_key.strip().lower())

    def keys(self) -> list[str]:
        """All registered qualified keys, sorted."""
        return sorted(self._placeholders)

    def __contains__(self, qualified_key: object) -> bool:
        return isinstance(qualified_key, str) and self.get(qualified_key) is not None

    def __len__(self) -> int:
        return len(self._placeholders)

    def clear(self) -> None:
        """Drop every registration (test isolation only)."""
        with self._lock:
            self._placeholders.clear()


def qualify(namespace: str, key: str) -> str:
    """Join and normalize a namespace and key into ``namespace:key``."""
    return f"{namespace.strip()}:{key.strip()}".lower()


_default_registry = PlaceholderRegistry()


def get_registry() -> PlaceholderRegistry:
    """Get the process-wide placeholder registry (singleton)."""
    return _default_registry


def placeholder(namespace: str, key: str) -> Callable[[PlaceholderFunc], PlaceholderFunc]:
    """Register a function into the process-wide registry.

    Plugin modules use this at import time:

        @placeholder("towns", "name")
        def town_name(request, contexts):
            return "Frostholm"
    """
    return _default_registry.placeholder(namespace, key)


def clear_registrations() -> None:
    """Clear the process-wide registry (called between tests)."""
    _default_registry.clear()
