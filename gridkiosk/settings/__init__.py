"""Player settings: pydantic models, YAML loading and exceptions."""

from .exceptions import SettingsError, SettingsValidationError
from .models import (
    BrowserSettings,
    DetectionSettings,
    LoggingSettings,
    PlayerSettings,
    ServerSettings,
    ViewportSettings,
    load_settings,
)

__all__ = [
    "BrowserSettings",
    "DetectionSettings",
    "LoggingSettings",
    "PlayerSettings",
    "ServerSettings",
    "SettingsError",
    "SettingsValidationError",
    "ViewportSettings",
    "load_settings",
]
