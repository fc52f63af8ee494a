"""Centralized exception classes for spike-studio.

This module provides a hierarchy of exceptions for the catalog, synthesis
and matching layers. The service layer translates them into structured
failure payloads so callers never have to catch them.
"""


class SpikeStudioError(Exception):
    """Base exception for all spike-studio errors.

    All custom exceptions should inherit from this class.
    """

    def __init__(self, message: str, details: str | None = None):
        """Initialize the exception.

        Args:
            message: User-friendly error message.
            details: Additional technical details for debugging.
        """
        super().__init__(message)
        self.message = message
        self.details = details

    def __str__(self) -> str:
        if self.details:
            return f"{self.message}\n  Details: {self.details}"
        return self.message


class ConfigurationError(SpikeStudioError):
    """Raised when configuration is missing or invalid."""

    pass


class SpikeNotFoundError(SpikeStudioError, ValueError):
    """Raised when an identifier has no override and is not synthesizable."""

    pass


class MalformedIdentifierError(SpikeStudioError, ValueError):
    """Raised when an identifier has fewer than four decodable segments."""

    pass


class UnknownIdentifierError(SpikeStudioError, ValueError):
    """Raised when synthesis is asked for an id outside the generated space."""

    pass


class SpikeLoadError(SpikeStudioError, ValueError):
    """Raised when a persisted spike definition cannot be parsed."""

    pass


class StorageError(SpikeStudioError, ValueError):
    """Raised when override store operations fail."""

    pass
