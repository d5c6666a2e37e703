"""Custom exceptions for markrun.

Markup content never raises: malformed tags degrade to literal text. The
exceptions here signal host misconfiguration (registration, context wiring,
configuration files) and are surfaced at the call site.
"""


class MarkrunError(Exception):
    """Base exception for all markrun errors."""

    pass


class RegistrationError(MarkrunError):
    """Raised when a placeholder or alias registration is given invalid arguments."""

    pass


class PlaceholderConflictError(RegistrationError):
    """Raised when a qualified placeholder key is already registered."""

    pass


class InvalidColorError(MarkrunError, ValueError):
    """Raised when a string is not a valid hex color or color alias."""

    pass


class MissingContextError(MarkrunError, LookupError):
    """Raised when a required context value was not supplied."""

    pass


class ContextTypeError(MarkrunError, TypeError):
    """Raised when a context value does not match its key's declared type."""

    pass


class ConfigError(MarkrunError):
    """Raised when a configuration file cannot be loaded or validated."""

    pass
