"""Exception types for object-reflector."""

from __future__ import annotations


class ReflectorError(Exception):
    """Base class for all object-reflector errors."""


class ConfigurationError(ReflectorError):
    """Raised when a Reflector is configured with invalid input.

    Raised synchronously by the constructor, link_properties() and
    create_reflection(), always before any record is instrumented.

    Attributes:
        field: Name of the offending input ("options", "parent",
               "property_names" or "child").
    """

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message)
        self.field = field
