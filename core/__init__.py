"""
Core infrastructure module for Role Audit Browser.

This module provides the foundational components including configuration
management, logging setup, and custom exceptions.
"""

from .config import ApiConfig, UIConfig, StateConfig, LoggingConfig, Config
from .exceptions import RoleBrowserError, ConfigurationError, ApiError, NotFoundError, ValidationError
from .logging_config import setup_logging

__all__ = [
    # Configuration
    'ApiConfig',
    'UIConfig',
    'StateConfig',
    'LoggingConfig',
    'Config',

    # Exceptions
    'RoleBrowserError',
    'ConfigurationError',
    'ApiError',
    'NotFoundError',
    'ValidationError',

    # Logging
    'setup_logging',
]

# Version info
__version__ = "1.0.0"
