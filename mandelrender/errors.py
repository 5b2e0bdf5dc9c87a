"""Exceptions raised by the rendering core."""


class ConfigurationError(ValueError):
    """Raised when render settings are invalid, before any pixel work starts."""
