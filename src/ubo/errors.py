"""Error types raised by UBO extraction."""

from __future__ import annotations

from typing import Optional


class UboError(Exception):
    """Base error for UBO extraction and mapping."""


class UboConfigurationError(UboError, ValueError):
    """Invalid configuration, e.g. a non-positive maximum UBO count."""


class UboValidationError(UboError, ValueError):
    def __init__(self, message: str, ubo_number: Optional[int] = None, field: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.ubo_number = ubo_number
        self.field = field


class MappingConflictError(UboError):
    """A shareholder mapping already exists with a different code."""
