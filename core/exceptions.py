"""
Custom exceptions for Role Audit Browser.

This module defines application-specific exceptions that provide
clear error messages and context for different types of failures.
"""

from typing import Optional, Any


class RoleBrowserError(Exception):
    """Base exception for all Role Audit Browser errors."""

    def __init__(self, message: str, context: Optional[dict] = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} (Context: {context_str})"
        return self.message


class ConfigurationError(RoleBrowserError):
    """Raised when there are issues with configuration loading or validation."""

    def __init__(self, message: str, config_file: Optional[str] = None, field: Optional[str] = None):
        context = {}
        if config_file:
            context['config_file'] = config_file
        if field:
            context['field'] = field
        super().__init__(message, context)


class ApiError(RoleBrowserError):
    """Raised when a backend request fails or returns an unusable response."""

    def __init__(self, message: str, url: Optional[str] = None, status_code: Optional[int] = None):
        context = {}
        if url:
            context['url'] = url
        if status_code is not None:
            context['status_code'] = status_code
        super().__init__(message, context)
        self.url = url
        self.status_code = status_code


class NotFoundError(ApiError):
    """Raised when the backend reports that an entity does not exist."""


class ValidationError(RoleBrowserError):
    """Raised when an intent or parameter value is outside its domain."""

    def __init__(self, message: str, field: Optional[str] = None, value: Optional[Any] = None):
        context = {}
        if field:
            context['field'] = field
        if value is not None:
            context['value'] = str(value)
        super().__init__(message, context)
