"""Placeholder token parsing and resolution against a registry.

Supported tag bodies (case-insensitive):

    ph:key
    ph:namespace:key
    ph:namespace:key@context
    ph:namespace:key@context|arg1|arg2
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from ..logger import debug_enabled, get_logger
from .context import DEFAULT_CONTEXT, ContextSet
from .registry import PlaceholderRegistry, PlaceholderRequest

logger = get_logger()

PLACEHOLDER_PREFIX = "ph:"


def is_placeholder_tag(body: str | None) -> bool:
    """Check whether a tag body starts with the ``ph:`` prefix."""
    if not body:
        return False
    return body[: len(PLACEHOLDER_PREFIX)].lower() == PLACEHOLDER_PREFIX


@dataclass(frozen=True, slots=True)
class PlaceholderToken:
    """A placeholder reference parsed from a tag body.

    Attributes:
        key: Key as written, possibly ``namespace:key``; qualified later by the engine
        context_tag: Lowercase context tag
        args: Pipe-separated arguments with blank pieces dropped
        raw_token: Original bracketed text for literal fallback
    """

    key: str
    context_tag: str = DEFAULT_CONTEXT
    args: tuple[str, ...] = field(default_factory=tuple)
    raw_token: str = ""

    @classmethod
    def parse(cls, body: str, default_context: str | None = None) -> PlaceholderToken | None:
        """Parse a ``ph:`` tag body (text between the angle brackets).

        Args:
            body: Tag body including the ``ph:`` prefix
            default_context: Context tag used when the token names none

        Returns:
            The token, or None if the body is not a placeholder or has no key
        """
        if not is_placeholder_tag(body):
            return None

        raw_token = f"<{body}>"
        rest = body[len(PLACEHOLDER_PREFIX) :].strip()
        if not rest:
            return None

        head, pipe, arg_part = rest.partition("|")
        head = head.strip()
        args = _split_args(arg_part) if pipe else ()

        context_tag = default_context if default_context and default_context.strip() else DEFAULT_CONTEXT
        key, at, context_part = head.partition("@")
        key = key.strip()
        if at and context_part.strip():
            context_tag = context_part.strip()

        if not key:
            return None

        return cls(key=key, context_tag=context_tag.strip().lower(), args=args, raw_token=raw_token)


def _split_args(arg_part: str) -> tuple[str, ...]:
    return tuple(piece.strip() for piece in arg_part.split("|") if piece.strip())


class PlaceholderEngine:
    """Resolves already-parsed placeholder references to strings.

    Unknown placeholders never raise: the raw token is returned when one is
    available, otherwise the empty string.
    """

    def __init__(self, registry: PlaceholderRegistry, default_namespace: str) -> None:
        """Create an engine.

        Args:
            registry: Registry to look placeholders up in
            default_namespace: Namespace prepended to keys written without one

        Raises:
            ValueError: If default_namespace is blank
        """
        if not default_namespace or not default_namespace.strip():
            raise ValueError("default_namespace cannot be blank")
        self._registry = registry
        self._default_namespace = default_namespace.strip().lower()

    @property
    def registry(self) -> PlaceholderRegistry:
        return self._registry

    @property
    def default_namespace(self) -> str:
        return self._default_namespace

    def qualify(self, key: str | None) -> str:
        """Normalize a key and prepend the default namespace if it has none."""
        if key is None or not key.strip():
            return ""
        normalized = key.strip().lower()
        if ":" not in normalized:
            return f"{self._default_namespace}:{normalized}"
        return normalized

    def resolve(  # noqa: PLR0913 - mirrors the token fields
        self,
        key: str | None,
        context_tag: str | None,
        args: Sequence[str] | None,
        raw_token: str | None,
        contexts: ContextSet,
    ) -> str:
        """Resolve a placeholder to a string (never None).

        Args:
            key: Unqualified or qualified key
            context_tag: Context tag; blank means ``default``
            args: Placeholder arguments
            raw_token: Original bracketed text, returned for unknown placeholders
            contexts: Contexts available to the placeholder

        Returns:
            Resolved text, the raw token for unknown keys, or "" if neither applies
        """
        fallback = raw_token if raw_token is not None else ""

        qualified = self.qualify(key)
        if not qualified:
            return fallback

        placeholder = self._registry.get(qualified)
        if placeholder is None:
            logger.tags(f"Unknown placeholder {qualified}; emitting {fallback!r}")
            return fallback

        context_name = (
            context_tag.strip().lower() if context_tag and context_tag.strip() else DEFAULT_CONTEXT
        )
        request = PlaceholderRequest(
            qualified_key=qualified,
            context_name=context_name,
            args=tuple(args or ()),
            raw_token=fallback,
        )
        if debug_enabled():
            logger.debug(f"Resolving {request}")

        resolved = placeholder.resolve(request, contexts)
        return resolved if resolved is not None else ""

    def resolve_token(self, token: PlaceholderToken, contexts: ContextSet) -> str:
        return self.resolve(token.key, token.context_tag, token.args, token.raw_token, contexts)


def try_resolve_placeholder_tag(
    body: str,
    engine: PlaceholderEngine | None,
    contexts: ContextSet | None,
    default_context: str | None = DEFAULT_CONTEXT,
) -> str | None:
    """Resolve a tag body if it is a placeholder.

    Returns:
        The resolved text, or None when the body is not a ``ph:`` tag, has no
        key, or no engine/context set was supplied (the caller then treats the
        tag as literal text)
    """
    if not is_placeholder_tag(body):
        return None
    if engine is None or contexts is None:
        return None

    token = PlaceholderToken.parse(body, default_context)
    if token is None:
        return None
    return engine.resolve_token(token, contexts)
