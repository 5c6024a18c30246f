"""
Application errors.

Errors raised to callers carry an HTTP-equivalent status code so the
surrounding layer (HTTP, CLI, ...) can map them without inspecting messages.
"""

from typing import Any, Optional


class AppError(Exception):
    """Base exception for errors surfaced to the caller."""

    def __init__(
        self,
        message: str,
        status_code: int = 400,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.details = details or {}


class ValidationError(AppError):
    """User input rejected (invalid type, insufficient balance)."""
    pass
