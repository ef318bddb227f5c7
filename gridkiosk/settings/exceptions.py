"""
Settings-specific exceptions for gridkiosk settings management.

This module defines the exceptions raised while loading and validating the
player settings file and environment overrides.
"""

from typing import Any, Optional


class SettingsError(Exception):
    """Base exception for all settings-related errors.

    Args:
        message: Human-readable error description
        details: Optional dictionary containing additional error context

    Example:
        >>> raise SettingsError("Settings file unreadable", {"path": "/etc/gridkiosk.yaml"})
    """

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message}: {self.details}"
        return self.message


class SettingsValidationError(SettingsError):
    """Exception raised when settings validation fails.

    Args:
        message: Human-readable validation error description
        field_name: Name of the field that failed validation
        field_value: The invalid value that caused the error
        validation_errors: List of specific validation error messages
        details: Additional context about the validation failure

    Example:
        >>> raise SettingsValidationError(
        ...     "Unknown display source",
        ...     field_name="detection.sources",
        ...     field_value="wayland",
        ...     validation_errors=["Must be one of: screeninfo, xrandr, extended"]
        ... )
    """

    def __init__(
        self,
        message: str,
        field_name: Optional[str] = None,
        field_value: Optional[Any] = None,
        validation_errors: Optional[list[str]] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        self.field_name = field_name
        self.field_value = field_value
        self.validation_errors = validation_errors or []

        error_details = details or {}
        if field_name:
            error_details["field_name"] = field_name
        if field_value is not None:
            error_details["field_value"] = str(field_value)
        if self.validation_errors:
            error_details["validation_errors"] = self.validation_errors

        super().__init__(message, error_details)
