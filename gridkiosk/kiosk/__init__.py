"""Kiosk presentation: the full-screen state machine and the Chromium surface."""

from .browser_manager import BrowserConfig, BrowserManager, BrowserState, BrowserStatus
from .exceptions import BrowserError, PresentationAcquisitionFailure, PresentationError
from .presentation import (
    PresentationController,
    PresentationPhase,
    PresentationState,
    PresentationSurface,
)
from .surface import BrowserPresentationSurface

__all__ = [
    "BrowserConfig",
    "BrowserError",
    "BrowserManager",
    "BrowserPresentationSurface",
    "BrowserState",
    "BrowserStatus",
    "PresentationAcquisitionFailure",
    "PresentationController",
    "PresentationError",
    "PresentationPhase",
    "PresentationState",
    "PresentationSurface",
]
