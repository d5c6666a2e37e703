"""Typed values handed to placeholders at resolution time.

A ContextKey is a long-lived handle naming one value and its expected type.
PlaceholderContext is a frozen bag of such values, and ContextSet names
several contexts so a token can pick one with ``@context``.
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from typing import Any, Generic, TypeVar

from ..exceptions import ContextTypeError, MissingContextError

T = TypeVar("T")

DEFAULT_CONTEXT = "default"


class ContextKey(Generic[T]):
    """Typed key for a PlaceholderContext value.

    Keys compare by identity: declare them once at module level and reuse
    them everywhere, never construct one per lookup.

    Example:
        TOWN = ContextKey("town", Town)
        ctx = PlaceholderContext.builder().put(TOWN, town).build()
        ctx.get(TOWN)
    """

    __slots__ = ("name", "type")

    def __init__(self, name: str, type_: type[T]) -> None:
        if not name or not name.strip():
            raise ValueError("ContextKey name cannot be blank")
        self.name = name
        self.type = type_

    def cast(self, value: object) -> T:
        """Return value typed as T, or raise ContextTypeError if it is not one."""
        if not isinstance(value, self.type):
            raise ContextTypeError(
                f"Context key {self.name!r} expects {self.type.__name__}, "
                f"got {type(value).__name__}"
            )
        return value

    def __repr__(self) -> str:
        return f"ContextKey({self.name!r}, {self.type.__name__})"


class PlaceholderContext:
    """Immutable mapping from ContextKey to value. Build with builder()."""

    __slots__ = ("_values",)

    def __init__(self, values: Mapping[ContextKey[Any], object] | None = None) -> None:
        self._values: Mapping[ContextKey[Any], object] = MappingProxyType(dict(values or {}))

    @staticmethod
    def builder() -> PlaceholderContextBuilder:
        return PlaceholderContextBuilder()

    @classmethod
    def empty(cls) -> PlaceholderContext:
        return cls()

    def get(self, key: ContextKey[T] | None) -> T | None:
        """Return the value stored under key, or None if absent."""
        if key is None:
            return None
        value = self._values.get(key)
        if value is None:
            return None
        return key.cast(value)

    def get_or_raise(self, key: ContextKey[T]) -> T:
        """Return the value stored under key.

        Raises:
            MissingContextError: If no value was supplied for key
        """
        value = self._values.get(key)
        if value is None:
            raise MissingContextError(f"Missing context key: {key.name}")
        return key.cast(value)

    def __contains__(self, key: object) -> bool:
        return key in self._values

    def __len__(self) -> int:
        return len(self._values)


class PlaceholderContextBuilder:
    """Accumulates values for a PlaceholderContext; None values are dropped."""

    def __init__(self) -> None:
        self._values: dict[ContextKey[Any], object] = {}

    def put(self, key: ContextKey[T], value: T | None) -> PlaceholderContextBuilder:
        if value is not None:
            self._values[key] = key.cast(value)
        return self

    def build(self) -> PlaceholderContext:
        return PlaceholderContext(self._values)


class ContextSet:
    """Named PlaceholderContexts, looked up case-insensitively.

    The reserved name ``default`` is the fallback a placeholder consults when
    the token did not name a context. Blank names and None contexts are skipped.
    """

    __slots__ = ("_contexts",)

    def __init__(self, contexts: Mapping[str, PlaceholderContext | None] | None = None) -> None:
        normalized: dict[str, PlaceholderContext] = {}
        for name, context in (contexts or {}).items():
            if not name or not name.strip() or context is None:
                continue
            normalized[name.strip().lower()] = context
        self._contexts: Mapping[str, PlaceholderContext] = MappingProxyType(normalized)

    @classmethod
    def of_default(cls, context: PlaceholderContext) -> ContextSet:
        """A set holding only the default context."""
        return cls({DEFAULT_CONTEXT: context})

    def get(self, name: str | None) -> PlaceholderContext | None:
        if name is None or not name.strip():
            return None
        return self._contexts.get(name.strip().lower())

    def get_default(self) -> PlaceholderContext | None:
        return self._contexts.get(DEFAULT_CONTEXT)

    def get_or_default(self, name: str | None) -> PlaceholderContext | None:
        """The named context if present, otherwise the default context."""
        context = self.get(name)
        return context if context is not None else self.get_default()

    def names(self) -> frozenset[str]:
        return frozenset(self._contexts)
