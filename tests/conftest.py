"""Pytest configuration and fixtures for markrun tests."""

from __future__ import annotations

import pytest

from markrun import logger
from markrun.aliases import default_aliases
from markrun.placeholders import (
    ContextKey,
    ContextSet,
    FunctionPlaceholder,
    PlaceholderContext,
    PlaceholderEngine,
    PlaceholderRegistry,
    PlaceholderRequest,
    clear_registrations,
)

TOWN_NAME: ContextKey[str] = ContextKey("town_name", str)


@pytest.fixture(autouse=True)
def isolate_global_state() -> None:
    """Clear process-wide registrations and aliases before each test for isolation."""
    clear_registrations()
    default_aliases().reset()
    logger.reset_logger()


@pytest.fixture
def registry() -> PlaceholderRegistry:
    """A registry with a ``test:name`` placeholder reading TOWN_NAME from the requested context."""

    def town_name(request: PlaceholderRequest, contexts: ContextSet) -> str:
        context = contexts.get_or_default(request.context_name)
        if context is None:
            return ""
        return context.get(TOWN_NAME) or ""

    reg = PlaceholderRegistry()
    reg.register("test", FunctionPlaceholder("name", town_name))
    return reg


@pytest.fixture
def engine(registry: PlaceholderRegistry) -> PlaceholderEngine:
    return PlaceholderEngine(registry, "test")


@pytest.fixture
def contexts() -> ContextSet:
    """Default context names Frostholm; the claims context names Icereach."""
    return ContextSet(
        {
            "default": PlaceholderContext.builder().put(TOWN_NAME, "Frostholm").build(),
            "Claims": PlaceholderContext.builder().put(TOWN_NAME, "Icereach").build(),
        }
    )


@pytest.fixture
def town_key() -> ContextKey[str]:
    """The key the ``test:name`` placeholder reads."""
    return TOWN_NAME
