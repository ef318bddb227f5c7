"""Display topology exceptions."""

from typing import Optional


class DisplayError(Exception):
    """Base exception for display topology errors."""


class CapabilityUnavailable(DisplayError):
    """Raised by a topology source when the host lacks the capability it probes.

    The resolver treats this as "try the next source"; it is never surfaced
    to callers of ``resolve()``.

    Attributes:
        message: Error description
        source: Name of the topology source that gave up
    """

    def __init__(self, message: str, source: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.source = source
