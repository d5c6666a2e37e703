"""Named color aliases shared across an application.

Aliases are registered once at startup and read by every parse call. The
table tolerates late writes: writers serialize on a lock, readers never take it.
"""

from __future__ import annotations

import threading
from collections.abc import Mapping

from .color import is_hex_color
from .exceptions import InvalidColorError, RegistrationError
from .logger import get_logger

logger = get_logger()

DEFAULT_COLORS: dict[str, str] = {
    "success": "#34d399",
    "info": "#60a5fa",
    "warning": "#f59e0b",
    "error": "#ef4444",
    "white": "#ffffff",
    "black": "#000000",
    "gray": "#6b7280",
}


def normalize_alias(alias: str) -> str:
    """Trim and lowercase an alias key.

    Raises:
        RegistrationError: If the alias is blank
    """
    normalized = alias.strip().lower()
    if not normalized:
        raise RegistrationError("Color alias cannot be blank")
    return normalized


class ColorAliasTable:
    """Thread-safe alias -> hex color store, seeded with DEFAULT_COLORS."""

    def __init__(self, extra: Mapping[str, str] | None = None) -> None:
        self._lock = threading.Lock()
        self._colors: dict[str, str] = dict(DEFAULT_COLORS)
        if extra:
            for alias, value in extra.items():
                self.register(alias, value)

    def resolve(self, value: str | None) -> str | None:
        """Resolve an alias or literal hex color.

        Aliases are checked first. Otherwise a literal ``#RRGGBB`` or
        ``#RRGGBBAA`` is accepted after every character is validated.

        Returns:
            Lowercase hex string, or None if the value is neither
        """
        if value is None:
            return None
        normalized = value.strip().lower()
        if not normalized:
            return None

        alias = self._colors.get(normalized)
        if alias is not None:
            return alias

        if normalized.startswith("#") and is_hex_color(normalized):
            return normalized
        return None

    def register(self, alias: str, value: str) -> None:
        """Register (or replace) an alias.

        The value may itself be an alias; it is stored resolved.

        Raises:
            RegistrationError: If the alias is blank
            InvalidColorError: If the value does not resolve to a hex color
        """
        key = normalize_alias(alias)
        resolved = self.resolve(value)
        if resolved is None or not resolved.startswith("#"):
            raise InvalidColorError(f"Invalid hex color: {value!r}")

        with self._lock:
            self._colors[key] = resolved
        logger.scopes(f"Registered color alias {key} -> {resolved}")

    def unregister(self, alias: str) -> str | None:
        """Remove an alias, returning its hex value or None if it was absent."""
        key = normalize_alias(alias)
        with self._lock:
            return self._colors.pop(key, None)

    def reset(self) -> None:
        """Restore the default aliases, dropping everything registered since."""
        with self._lock:
            self._colors = dict(DEFAULT_COLORS)

    def snapshot(self) -> dict[str, str]:
        """Return a copy of the current alias mapping."""
        with self._lock:
            return dict(self._colors)

    def __contains__(self, alias: object) -> bool:
        return isinstance(alias, str) and alias.strip().lower() in self._colors


_default_table = ColorAliasTable()


def default_aliases() -> ColorAliasTable:
    """Get the process-wide alias table used when none is injected."""
    return _default_table


def register_color(alias: str, value: str) -> None:
    """Register a color alias on the process-wide table."""
    _default_table.register(alias, value)


def unregister_color(alias: str) -> str | None:
    """Remove a color alias from the process-wide table."""
    return _default_table.unregister(alias)


def resolve_color(value: str | None) -> str | None:
    """Resolve an alias or hex color against the process-wide table."""
    return _default_table.resolve(value)
