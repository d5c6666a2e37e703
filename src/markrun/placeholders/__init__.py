"""Placeholder registration, context values, and resolution."""

from .builtins import CORE_NAMESPACE, VARIABLES, register_builtins
from .context import (
    DEFAULT_CONTEXT,
    ContextKey,
    ContextSet,
    PlaceholderContext,
    PlaceholderContextBuilder,
)
from .engine import (
    PLACEHOLDER_PREFIX,
    PlaceholderEngine,
    PlaceholderToken,
    is_placeholder_tag,
    try_resolve_placeholder_tag,
)
from .registry import (
    FunctionPlaceholder,
    Placeholder,
    PlaceholderRegistry,
    PlaceholderRequest,
    clear_registrations,
    get_registry,
    placeholder,
)

__all__ = [
    "CORE_NAMESPACE",
    "DEFAULT_CONTEXT",
    "PLACEHOLDER_PREFIX",
    "VARIABLES",
    "ContextKey",
    "ContextSet",
    "FunctionPlaceholder",
    "Placeholder",
    "PlaceholderContext",
    "PlaceholderContextBuilder",
    "PlaceholderEngine",
    "PlaceholderRegistry",
    "PlaceholderRequest",
    "PlaceholderToken",
    "clear_registrations",
    "get_registry",
    "is_placeholder_tag",
    "placeholder",
    "register_builtins",
    "try_resolve_placeholder_tag",
]
