"""Layout system exceptions."""

from typing import Optional


class LayoutError(Exception):
    """Base exception for layout system errors."""


class LayoutValidationError(LayoutError):
    """Raised when a layout document is invalid.

    Attributes:
        message: Error description
        errors: Individual validation problems, one per offending field
    """

    def __init__(self, message: str, errors: Optional[list[str]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.errors = errors or []

    def __str__(self) -> str:
        if self.errors:
            return f"{self.message}: {'; '.join(self.errors)}"
        return self.message


class ConfigurationRetrievalFailure(LayoutError):
    """Raised when the configuration document cannot be read or fetched.

    Attributes:
        message: Error description
        location: Path or URL that failed
    """

    def __init__(self, message: str, location: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.location = location
