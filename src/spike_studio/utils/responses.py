"""Structured response payloads for the operation surface."""

from dataclasses import asdict, dataclass
from typing import Any

__all__ = ["ServiceResponse", "service_ok", "service_error"]


@dataclass
class ServiceResponse:
    """Standard response format for service operations."""

    success: bool
    data: Any = None
    error: str | None = None

    def to_dict(self) -> dict:
        return asdict(self)


def service_ok(data: Any = None) -> dict:
    """Return a success response."""
    return ServiceResponse(success=True, data=data).to_dict()


def service_error(error: str) -> dict:
    """Return an error response."""
    return ServiceResponse(success=False, error=error).to_dict()
