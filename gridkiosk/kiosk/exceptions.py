"""Exceptions raised by the presentation layer and the kiosk browser."""

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .browser_manager import BrowserState


class PresentationError(Exception):
    """Base exception for presentation errors.

    Attributes:
        message: Error description
        display_index: Display the presentation targeted, if known
    """

    def __init__(self, message: str, display_index: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        self.display_index = display_index


class PresentationAcquisitionFailure(PresentationError):
    """The host refused or failed to grant exclusive full-screen presentation."""


class BrowserError(Exception):
    """Exception raised for browser-related errors.

    Attributes:
        message: Error description
        error_code: Optional error code for categorization
        browser_state: Browser state when error occurred
    """

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        browser_state: Optional["BrowserState"] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.browser_state = browser_state
