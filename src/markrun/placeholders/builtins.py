"""Placeholders shipped with markrun under the ``core`` namespace."""

from __future__ import annotations

from typing import Any

from .context import ContextKey, ContextSet
from .registry import FunctionPlaceholder, PlaceholderRegistry, PlaceholderRequest

CORE_NAMESPACE = "core"

# Free-form name -> value mapping consulted by <ph:core:var|name>
VARIABLES: ContextKey[dict[str, Any]] = ContextKey("variables", dict)


def resolve_variable(request: PlaceholderRequest, contexts: ContextSet) -> str:
    """``<ph:var|name>``: look name up in the requested (or default) context's VARIABLES."""
    if not request.args:
        return ""

    context = contexts.get_or_default(request.context_name)
    if context is None:
        return ""

    variables = context.get(VARIABLES)
    if not variables:
        return ""

    value = variables.get(request.args[0])
    return "" if value is None else str(value)


def register_builtins(registry: PlaceholderRegistry) -> None:
    """Register the ``core`` placeholders into registry."""
    registry.register(CORE_NAMESPACE, FunctionPlaceholder("var", resolve_variable))
