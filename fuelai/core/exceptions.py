"""
Domain errors raised by the service layer.

Each error carries the HTTP status the API layer answers with; the handlers
registered in ``fuelai.main`` turn them into ``{"detail": ...}`` responses.
"""
from typing import Any, Dict, Optional
from fastapi import status


class FuelAIError(Exception):
    """Base class for errors surfaced verbatim to the caller"""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class NotFoundError(FuelAIError):
    """Referenced plan, meal, slot or task does not exist or is not owned by the caller"""

    status_code = status.HTTP_404_NOT_FOUND


class ValidationError(FuelAIError, ValueError):
    """Value outside a fixed enumeration, unknown meal, or malformed date"""

    status_code = 422


class UnauthorizedError(FuelAIError):
    """Ownership check failed for an existing record"""

    status_code = status.HTTP_403_FORBIDDEN
