"""depcache Error Handling Module

This module defines the error handling system for depcache, providing
structured error classes with context information.

The error hierarchy follows these principles:
- One Source of Truth: All error codes are defined in ErrorCode enum
- Structured Context: ErrorContext provides additional information
- Proper Exception Chaining: Original exceptions are preserved

Only one condition is recovered inside the library (a dependency file that
no longer exists). Everything else raised here reaches the caller.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from pathlib import PurePath
from typing import Any, Union

# Type alias for primitive context values (str, int, float, bool only)
PrimitiveContextValue = Union[str, int, float, bool]


class ErrorCode(str, Enum):
    """Error codes for depcache.

    This enum serves as the single source of truth for all error codes
    used throughout the library.
    """

    # File System Errors
    FILE_NOT_FOUND = "FILE_NOT_FOUND"
    PERMISSION_DENIED = "PERMISSION_DENIED"
    FILE_ACCESS_ERROR = "FILE_ACCESS_ERROR"

    # Validation Errors
    VALIDATION_ERROR = "VALIDATION_ERROR"

    # Cache Errors
    CACHE_ERROR = "CACHE_ERROR"
    CACHE_READ_FAILED = "CACHE_READ_FAILED"
    CACHE_WRITE_FAILED = "CACHE_WRITE_FAILED"
    CACHE_KEY_ERROR = "CACHE_KEY_ERROR"

    # Configuration Errors
    CONFIG_ERROR = "CONFIG_ERROR"
    CONFIG_INVALID = "CONFIG_INVALID"
    CONFIG_MISSING = "CONFIG_MISSING"


def _coerce_primitives(value: Any | None) -> dict[str, PrimitiveContextValue] | None:
    """Coerce additional_data values to primitives.

    Converts Path, Enum, Decimal to primitive types.

    Args:
        value: Input dictionary or None

    Returns:
        Dictionary with primitive values only, or None

    Raises:
        TypeError: If value is not a dict or contains unconvertible types
    """
    if value is None:
        return None

    if not isinstance(value, dict):
        error_msg = f"additional_data must be dict, got {type(value).__name__}"
        raise TypeError(error_msg)

    coerced: dict[str, PrimitiveContextValue] = {}
    for key, val in value.items():
        if isinstance(val, (str, int, float, bool)):
            coerced[key] = val
        elif isinstance(val, PurePath):
            coerced[key] = str(val)
        elif isinstance(val, Enum):
            coerced[key] = val.value
        elif isinstance(val, Decimal):
            coerced[key] = float(val)
        else:
            error_msg = (
                f"Cannot coerce {type(val).__name__} to primitive type. "
                f"Only str, int, float, bool, Path, Enum, Decimal are allowed."
            )
            raise TypeError(error_msg)

    return coerced


@dataclass(frozen=True)
class ErrorContext:
    """Context information for errors.

    Only primitive types (str, int, float, bool) are allowed in
    additional_data so the context is always safe to serialize into logs.

    Attributes:
        file_path: Optional file path associated with the error
        operation: Optional operation name that caused the error
        additional_data: Optional dict with primitive values only
    """

    file_path: str | None = None
    operation: str | None = None
    additional_data: dict[str, PrimitiveContextValue] | None = None

    def __post_init__(self) -> None:
        """Post-initialization coercion of additional_data."""
        if self.additional_data is not None:
            coerced = _coerce_primitives(self.additional_data)
            object.__setattr__(self, "additional_data", coerced)

    def safe_dict(self) -> dict[str, Any]:
        """Export context as a dict for logging.

        Returns:
            Dictionary with the set fields and a guaranteed additional_data key.

        Example:
            >>> ErrorContext(file_path="/test").safe_dict()
            {'file_path': '/test', 'additional_data': {}}
        """
        data: dict[str, Any] = {}
        if self.file_path is not None:
            data["file_path"] = self.file_path
        if self.operation is not None:
            data["operation"] = self.operation
        data["additional_data"] = dict(self.additional_data or {})
        return data


class DepCacheError(Exception):
    """Base exception class for all depcache errors."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        context: ErrorContext | None = None,
        original_error: BaseException | None = None,
    ) -> None:
        """Initialize DepCacheError.

        Args:
            code: Error code from ErrorCode enum
            message: Human-readable error message
            context: Additional context information
            original_error: Original exception that caused this error
        """
        self.code = code
        self.message = message
        self.context = context or ErrorContext()
        self.original_error = original_error

        super().__init__(f"{code.value}: {message}")

    def __str__(self) -> str:
        """Return string representation of the error."""
        return f"{self.code.value}: {self.message}"

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging.

        Returns:
            Dictionary representation of the error with code, message,
            context, and original_error (if present)
        """
        return {
            "code": self.code.value,
            "message": self.message,
            "context": self.context.safe_dict(),
            "original_error": str(self.original_error) if self.original_error else None,
        }


class DomainError(DepCacheError):
    """Domain-specific errors.

    Raised when caller input breaks a rule of the cache itself.

    Examples:
    - Cache arguments that cannot be serialized into a key
    - A Cache constructed without any storage tiers
    """


class InfrastructureError(DepCacheError):
    """Infrastructure-related errors.

    These errors occur when interacting with the file system or a
    storage backend.

    Examples:
    - Dependency file not found
    - Permission denied while reading a timestamp
    - A storage tier that lost an item it just accepted
    """


class ApplicationError(DepCacheError):
    """Application-level errors, typically configuration problems."""


# Convenience functions for common error scenarios
def create_file_not_found_error(
    file_path: str,
    operation: str | None = None,
    original_error: BaseException | None = None,
) -> InfrastructureError:
    """Create a file not found error with context."""
    context = ErrorContext(
        file_path=file_path,
        operation=operation,
    )
    return InfrastructureError(
        ErrorCode.FILE_NOT_FOUND,
        f"File not found: {file_path}",
        context,
        original_error,
    )


def create_permission_denied_error(
    path: str,
    operation: str | None = None,
    original_error: BaseException | None = None,
) -> InfrastructureError:
    """Create a permission denied error with context."""
    context = ErrorContext(
        file_path=path,
        operation=operation,
    )
    return InfrastructureError(
        ErrorCode.PERMISSION_DENIED,
        f"Permission denied: {path}",
        context,
        original_error,
    )


def create_file_access_error(
    path: str,
    operation: str | None = None,
    original_error: BaseException | None = None,
) -> InfrastructureError:
    """Create a generic file access error with context."""
    context = ErrorContext(
        file_path=path,
        operation=operation,
    )
    return InfrastructureError(
        ErrorCode.FILE_ACCESS_ERROR,
        f"Cannot access file: {path}",
        context,
        original_error,
    )


def create_validation_error(
    message: str,
    field: str | None = None,
    operation: str | None = None,
    original_error: BaseException | None = None,
) -> DomainError:
    """Create a validation error with context."""
    additional_data: dict[str, PrimitiveContextValue] | None = (
        {"field": field} if field else None
    )
    context = ErrorContext(
        operation=operation,
        additional_data=additional_data,
    )
    return DomainError(
        ErrorCode.VALIDATION_ERROR,
        message,
        context,
        original_error,
    )


def create_config_error(
    message: str,
    code: ErrorCode = ErrorCode.CONFIG_ERROR,
    config_path: str | None = None,
    operation: str | None = None,
    original_error: BaseException | None = None,
) -> ApplicationError:
    """Create a configuration error with context."""
    context = ErrorContext(
        file_path=config_path,
        operation=operation,
    )
    return ApplicationError(
        code,
        message,
        context,
        original_error,
    )


def is_file_not_found(error: BaseException) -> bool:
    """Return True if ``error`` reports a path that does not exist.

    Accepts both the wrapped form raised by :func:`depcache.utils.files.mtime`
    and a bare ``FileNotFoundError`` from a custom timestamp lookup.
    """
    if isinstance(error, DepCacheError):
        return error.code == ErrorCode.FILE_NOT_FOUND
    return isinstance(error, FileNotFoundError)
