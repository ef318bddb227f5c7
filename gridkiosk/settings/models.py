"""
Player settings models using Pydantic for validation and type safety.

Settings come from three places, later ones winning: defaults, ``GRIDKIOSK_``
environment variables (``__`` separates nested sections, e.g.
``GRIDKIOSK_SERVER__PORT=9000``), and the YAML settings file.

Example:
    >>> settings = load_settings(Path("/etc/gridkiosk/settings.yaml"))
    >>> settings.server.port
    8080
"""

import logging
import os
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..display.sources import DEFAULT_SOURCE_ORDER, SOURCE_TYPES
from .exceptions import SettingsError, SettingsValidationError

logger = logging.getLogger(__name__)

VALID_LOG_LEVELS = ("DEBUG", "VERBOSE", "INFO", "WARNING", "ERROR", "CRITICAL")


class ViewportSettings(BaseModel):
    """Size of the primary viewport, used when no display can be detected.

    Attributes:
        width: Viewport width in pixels
        height: Viewport height in pixels
    """

    width: int = Field(default=1920, ge=1, le=16384, description="Viewport width in pixels")
    height: int = Field(default=1080, ge=1, le=16384, description="Viewport height in pixels")


class DetectionSettings(BaseModel):
    """Display detection configuration.

    Attributes:
        sources: Topology sources in the order they are tried
        x_display: X display the probes and the browser talk to
    """

    sources: list[str] = Field(
        default_factory=lambda: list(DEFAULT_SOURCE_ORDER),
        description="Display detection sources, highest rank first",
    )
    x_display: str = Field(
        default_factory=lambda: os.environ.get("DISPLAY", ":0"),
        description="X display used for probing and presentation",
    )

    @field_validator("sources")
    @classmethod
    def validate_sources(cls, v: list[str]) -> list[str]:
        """Validate detection source names.

        Raises:
            SettingsValidationError: If a name is unknown or repeated
        """
        unknown = [name for name in v if name not in SOURCE_TYPES]
        if unknown:
            raise SettingsValidationError(
                f"Unknown display source(s): {', '.join(unknown)}",
                field_name="detection.sources",
                field_value=v,
                validation_errors=[f"Must be one of: {', '.join(SOURCE_TYPES)}"],
            )
        if len(set(v)) != len(v):
            raise SettingsValidationError(
                "Display sources listed more than once",
                field_name="detection.sources",
                field_value=v,
            )
        return v


class BrowserSettings(BaseModel):
    """Chromium kiosk browser configuration.

    Attributes:
        executable_path: Path to the Chromium executable
        startup_delay: Delay before launching the browser
        startup_timeout: Seconds the process must stay alive to count as started
        shutdown_timeout: Maximum seconds to wait for graceful shutdown
        extra_flags: Additional Chromium command line flags
        disable_gpu: Pass ``--disable-gpu`` (helps on small ARM boards)
        memory_limit_mb: Memory usage reported as unhealthy
    """

    executable_path: str = Field(
        default="chromium-browser", description="Path to Chromium executable"
    )
    startup_delay: int = Field(
        default=0, ge=0, le=60, description="Delay in seconds before launching the browser"
    )
    startup_timeout: int = Field(
        default=3, ge=1, le=120, description="Seconds the browser must survive after launch"
    )
    shutdown_timeout: int = Field(
        default=10, ge=1, le=30, description="Maximum seconds to wait for graceful shutdown"
    )
    extra_flags: list[str] = Field(
        default_factory=list, description="Additional Chromium command line flags"
    )
    disable_gpu: bool = Field(default=False, description="Disable GPU acceleration")
    memory_limit_mb: int = Field(
        default=512, ge=64, le=16384, description="Browser memory usage considered unhealthy"
    )


class ServerSettings(BaseModel):
    """Control server configuration.

    Attributes:
        host: Interface the server binds to
        port: First port tried; the next ones are tried when it is in use
        poll_interval: Seconds between layout polls in the kiosk page
    """

    host: str = Field(default="127.0.0.1", description="Bind address")
    port: int = Field(default=8080, ge=1, le=65535, description="Server port")
    poll_interval: float = Field(
        default=2.0, gt=0, le=60, description="Page layout poll interval in seconds"
    )


class LoggingSettings(BaseModel):
    """Logging configuration settings."""

    console_enabled: bool = Field(default=True, description="Enable console logging")
    console_level: str = Field(
        default="INFO",
        description="Console log level: DEBUG, VERBOSE, INFO, WARNING, ERROR, CRITICAL",
    )
    console_colors: bool = Field(
        default=True, description="Enable colored console output (auto-detected)"
    )
    file_enabled: bool = Field(default=False, description="Enable file logging")
    file_level: str = Field(default="DEBUG", description="File log level")
    file_directory: Optional[str] = Field(default=None, description="Log directory")
    file_prefix: str = Field(default="gridkiosk", description="Log file prefix")
    max_log_files: int = Field(default=5, ge=1, description="Maximum number of log files to keep")
    third_party_level: str = Field(
        default="WARNING", description="Log level for third-party libraries"
    )

    @field_validator("console_level", "file_level", "third_party_level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Validate a log level name.

        Raises:
            SettingsValidationError: If the level is not recognised
        """
        level = v.upper()
        if level not in VALID_LOG_LEVELS:
            raise SettingsValidationError(
                f"Invalid log level: {v}",
                field_name="logging",
                field_value=v,
                validation_errors=[f"Must be one of: {', '.join(VALID_LOG_LEVELS)}"],
            )
        return level


class PlayerSettings(BaseSettings):
    """Application settings with environment variable support."""

    config_path: str = Field(
        default="config.json", description="Layout configuration document (path or URL)"
    )
    config_fetch_timeout: float = Field(
        default=30.0, gt=0, description="Timeout in seconds for remote configuration retrieval"
    )
    initial_monitor: Optional[int] = Field(
        default=None, ge=0, description="Display index to present on at startup"
    )
    start_fullscreen: bool = Field(default=False, description="Enter fullscreen at startup")

    viewport: ViewportSettings = Field(default_factory=ViewportSettings)
    detection: DetectionSettings = Field(default_factory=DetectionSettings)
    browser: BrowserSettings = Field(default_factory=BrowserSettings)
    server: ServerSettings = Field(default_factory=ServerSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    model_config = SettingsConfigDict(
        env_prefix="GRIDKIOSK_",
        env_nested_delimiter="__",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


def _read_yaml_settings(path: Path) -> dict[str, Any]:
    try:
        with path.open(encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except FileNotFoundError:
        logger.warning(f"Settings file not found: {path}, using defaults")
        return {}
    except (OSError, yaml.YAMLError) as e:
        raise SettingsError(f"Could not load settings from {path}", {"error": str(e)}) from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise SettingsError(f"Settings file {path} must contain a mapping")
    return data


def load_settings(path: Optional[Path] = None, **overrides: Any) -> PlayerSettings:
    """Build player settings from defaults, environment, YAML and overrides.

    Args:
        path: Optional YAML settings file
        **overrides: Top-level values that win over everything else

    Returns:
        Validated settings

    Raises:
        SettingsError: If the settings file cannot be parsed
        SettingsValidationError: If a value is invalid
    """
    data: dict[str, Any] = _read_yaml_settings(path) if path is not None else {}
    data.update({key: value for key, value in overrides.items() if value is not None})

    try:
        return PlayerSettings(**data)
    except ValidationError as e:
        errors = [
            f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
            for error in e.errors()
        ]
        raise SettingsValidationError(
            "Invalid settings", validation_errors=errors, details={"path": str(path)}
        ) from e
