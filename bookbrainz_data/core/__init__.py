"""
BookBrainz Data - Core Module

Error hierarchy shared by the store, the commands and the configuration
layer.
"""
from bookbrainz_data.core.errors import (
    BookBrainzError,
    ConfigError,
    ConstraintViolationError,
    ErrorContext,
    ErrorSeverity,
    InvalidUpdateError,
    NotFoundError,
    classify_error,
)

__all__ = [
    "BookBrainzError",
    "ConfigError",
    "ConstraintViolationError",
    "ErrorContext",
    "ErrorSeverity",
    "InvalidUpdateError",
    "NotFoundError",
    "classify_error",
]
