"""
Browser manager for the Chromium process that presents the grid page.

The browser is launched in kiosk mode with its window placed on the target
display geometry, which is how full-screen presentation is pinned to a
specific display under X11.

Classes:
    BrowserState: Browser process state enumeration
    BrowserStatus: Browser health and status information
    BrowserConfig: Browser launch configuration
    BrowserManager: Chromium process lifecycle management

Example:
    >>> manager = BrowserManager(BrowserConfig(x_display=":0"))
    >>> success = await manager.start_browser("http://127.0.0.1:8080/", Rect(1920, 0, 1920, 1080))
    >>> status = manager.get_browser_status()
    >>> print(f"Browser state: {status.state}, Memory: {status.memory_usage_mb}MB")
    >>> await manager.stop_browser()
"""

import asyncio
import logging
import os
import subprocess
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from typing import TYPE_CHECKING, Any, Optional

import psutil

from ..display.models import Rect
from .exceptions import BrowserError

if TYPE_CHECKING:
    from ..settings.models import BrowserSettings

logger = logging.getLogger(__name__)


class BrowserState(Enum):
    """Browser process states for lifecycle management.

    Attributes:
        STOPPED: Browser is not running
        STARTING: Browser is in the process of starting up
        RUNNING: Browser is running and operational
        CRASHED: Browser process has exited unexpectedly
        FAILED: Browser failed to start
    """

    STOPPED = "stopped"
    STARTING = "starting"
    RUNNING = "running"
    CRASHED = "crashed"
    FAILED = "failed"


@dataclass
class BrowserStatus:
    """Browser health and status information for monitoring.

    Attributes:
        state: Current browser state
        pid: Process ID of browser (None if not running)
        start_time: When browser was started (None if not running)
        uptime: How long browser has been running (None if not running)
        url: URL the browser was started with
        geometry: Window geometry the browser was started with
        memory_usage_mb: Current memory usage in megabytes
        cpu_usage_percent: Current CPU usage percentage
        crash_count: Number of unexpected exits observed
        is_responsive: Whether browser is currently healthy
        last_error: Last error message (None if no errors)
        error_time: When last error occurred (None if no errors)
    """

    state: BrowserState
    pid: Optional[int]
    start_time: Optional[datetime]
    uptime: Optional[timedelta]
    url: Optional[str]
    geometry: Optional[Rect]

    # Performance metrics
    memory_usage_mb: int
    cpu_usage_percent: float

    # Reliability metrics
    crash_count: int
    is_responsive: bool

    # Error tracking
    last_error: Optional[str]
    error_time: Optional[datetime]

    def to_dict(self) -> dict[str, Any]:
        return {
            "state": self.state.value,
            "pid": self.pid,
            "uptime_seconds": self.uptime.total_seconds() if self.uptime else None,
            "url": self.url,
            "memory_usage_mb": self.memory_usage_mb,
            "cpu_usage_percent": self.cpu_usage_percent,
            "crash_count": self.crash_count,
            "is_responsive": self.is_responsive,
            "last_error": self.last_error,
        }


@dataclass
class BrowserConfig:
    """Browser launch configuration.

    Attributes:
        executable_path: Path to Chromium executable
        x_display: X display the browser window opens on
        startup_delay: Delay in seconds before starting browser
        startup_timeout: Seconds the process must stay alive to count as started
        shutdown_timeout: Maximum seconds to wait for graceful shutdown
        memory_limit_mb: Memory usage above which the browser is reported unhealthy
        disable_gpu: Pass ``--disable-gpu``
        extra_flags: Additional command line flags
    """

    executable_path: str = "chromium-browser"
    x_display: str = ":0"
    startup_delay: int = 0
    startup_timeout: int = 3
    shutdown_timeout: int = 10
    memory_limit_mb: int = 512
    disable_gpu: bool = False
    extra_flags: list[str] = field(default_factory=list)

    @classmethod
    def from_settings(cls, settings: "BrowserSettings", x_display: str) -> "BrowserConfig":
        return cls(
            executable_path=settings.executable_path,
            x_display=x_display,
            startup_delay=settings.startup_delay,
            startup_timeout=settings.startup_timeout,
            shutdown_timeout=settings.shutdown_timeout,
            memory_limit_mb=settings.memory_limit_mb,
            disable_gpu=settings.disable_gpu,
            extra_flags=list(settings.extra_flags),
        )


class BrowserManager:
    """Chromium browser process management for kiosk presentation.

    Features:
        - Process lifecycle management (start, stop)
        - Window placement on a target display geometry
        - Memory and CPU usage tracking through psutil

    Example:
        >>> manager = BrowserManager(BrowserConfig())
        >>> if await manager.start_browser("http://127.0.0.1:8080/"):
        ...     print(manager.get_browser_status().pid)
        >>> await manager.stop_browser()
    """

    def __init__(self, config: BrowserConfig) -> None:
        self.config = config
        self.logger = logging.getLogger(f"{__name__}.BrowserManager")

        self._process: Optional[subprocess.Popen] = None
        self._metrics: Optional[psutil.Process] = None
        self._state = BrowserState.STOPPED
        self._current_url: Optional[str] = None
        self._current_geometry: Optional[Rect] = None

        self._start_time: Optional[datetime] = None
        self._crash_count = 0

        self._last_error: Optional[str] = None
        self._error_time: Optional[datetime] = None

    @property
    def state(self) -> BrowserState:
        return self._state

    @property
    def pid(self) -> Optional[int]:
        return self._process.pid if self._process else None

    def is_running(self) -> bool:
        return (
            self._state == BrowserState.RUNNING
            and self._process is not None
            and self._process.poll() is None
        )

    async def start_browser(
        self, url: str, geometry: Optional[Rect] = None, kiosk: bool = True
    ) -> bool:
        """Start Chromium showing ``url``, placed on ``geometry``.

        A browser that is already running is stopped first.

        Args:
            url: URL to load
            geometry: Window position and size in desktop coordinates
            kiosk: Launch in kiosk (full-screen, chromeless) mode

        Returns:
            True if browser started successfully, False otherwise

        Raises:
            BrowserError: If the URL is empty
        """
        if not url or not url.strip():
            raise BrowserError("URL cannot be empty", "INVALID_URL", self._state)

        try:
            if self._state != BrowserState.STOPPED:
                self.logger.info(f"Browser already in state {self._state.value}, stopping first")
                await self.stop_browser()

            self.logger.info(f"Starting Chromium browser for URL: {url}")
            self._state = BrowserState.STARTING
            self._current_url = url
            self._current_geometry = geometry

            if self.config.startup_delay > 0:
                self.logger.info(f"Applying startup delay: {self.config.startup_delay}s")
                await asyncio.sleep(self.config.startup_delay)

            cmd_args = self._build_chromium_args(url, geometry, kiosk)
            self._process = await self._launch_process(cmd_args)

            if self._process:
                self._start_time = datetime.now()
                self._state = BrowserState.RUNNING
                self._prime_metrics()

                if await self._wait_for_responsive(timeout=self.config.startup_timeout):
                    self.logger.info(f"Browser started successfully (PID: {self._process.pid})")
                    return True
                self._handle_startup_failure("Browser exited during startup")
                return False
            self._handle_startup_failure("Failed to launch browser process")
            return False

        except Exception as e:
            self._handle_startup_failure(f"Browser startup error: {e}")
            return False

    async def stop_browser(self, timeout: Optional[int] = None) -> bool:
        """Stop browser gracefully, forcing termination after ``timeout``.

        Args:
            timeout: Maximum seconds to wait for graceful shutdown (config default if None)

        Returns:
            True if browser stopped successfully, False otherwise
        """
        if timeout is None:
            timeout = self.config.shutdown_timeout

        try:
            if not self._process:
                self._state = BrowserState.STOPPED
                return True

            self.logger.info("Stopping Chromium browser")
            try:
                self._process.terminate()
                await asyncio.wait_for(self._wait_for_process_exit(), timeout=timeout)
                self.logger.info("Browser stopped gracefully")
            except asyncio.TimeoutError:
                self.logger.warning("Browser did not stop gracefully, forcing shutdown")
                self._process.kill()
                await asyncio.sleep(1)

            self._cleanup_process_state()
            return True

        except Exception:
            self.logger.exception("Error stopping browser")
            self._cleanup_process_state()
            return False

    def is_browser_healthy(self) -> bool:
        """Check the process is alive and within its memory limit."""
        try:
            if self._state != BrowserState.RUNNING or not self._process:
                return False

            if self._process.poll() is not None:
                self.logger.warning("Browser process has exited")
                self._state = BrowserState.CRASHED
                self._crash_count += 1
                return False

            memory_usage = self._get_memory_usage()
            if memory_usage > self.config.memory_limit_mb:
                self.logger.warning(f"Browser memory usage too high: {memory_usage}MB")
                return False

            return True

        except Exception:
            self.logger.exception("Error checking browser health")
            return False

    def get_browser_status(self) -> BrowserStatus:
        """Get browser status and process metrics."""
        try:
            uptime = None
            if self._start_time and self._state == BrowserState.RUNNING:
                uptime = datetime.now() - self._start_time

            return BrowserStatus(
                state=self._state,
                pid=self.pid,
                start_time=self._start_time,
                uptime=uptime,
                url=self._current_url,
                geometry=self._current_geometry,
                memory_usage_mb=self._get_memory_usage(),
                cpu_usage_percent=self._get_cpu_usage(),
                crash_count=self._crash_count,
                is_responsive=self.is_browser_healthy(),
                last_error=self._last_error,
                error_time=self._error_time,
            )

        except Exception as e:
            self.logger.exception("Error getting browser status")
            return BrowserStatus(
                state=BrowserState.FAILED,
                pid=None,
                start_time=None,
                uptime=None,
                url=self._current_url,
                geometry=self._current_geometry,
                memory_usage_mb=0,
                cpu_usage_percent=0.0,
                crash_count=self._crash_count,
                is_responsive=False,
                last_error=str(e),
                error_time=datetime.now(),
            )

    def _build_chromium_args(
        self, url: str, geometry: Optional[Rect] = None, kiosk: bool = True
    ) -> list[str]:
        """Build Chromium command line arguments.

        Args:
            url: Target URL to load
            geometry: Window position and size
            kiosk: Whether to add the kiosk flags

        Returns:
            Command line, executable first and URL last
        """
        args = [self.config.executable_path]

        if kiosk:
            args.extend(["--kiosk", "--start-fullscreen"])
        if geometry is not None:
            args.append(f"--window-position={int(geometry.left)},{int(geometry.top)}")
            args.append(f"--window-size={int(geometry.width)},{int(geometry.height)}")

        args.extend(
            [
                # Embedded content comes from arbitrary origins
                "--disable-web-security",
                "--autoplay-policy=no-user-gesture-required",
                # Kiosk behavior
                "--no-first-run",
                "--no-default-browser-check",
                "--disable-session-crashed-bubble",
                "--disable-infobars",
                "--disable-restore-session-state",
                "--disable-translate",
                "--disable-features=TranslateUI",
                "--disable-component-update",
                "--disable-dev-shm-usage",
                "--noerrdialogs",
            ]
        )
        if self.config.disable_gpu:
            args.append("--disable-gpu")
        args.extend(self.config.extra_flags)
        args.append(url)

        return [arg for arg in args if arg]

    async def _launch_process(self, cmd_args: list[str]) -> Optional[subprocess.Popen]:
        """Launch the Chromium process on the configured X display.

        Returns:
            Process handle or None if launch failed
        """
        try:
            env = os.environ.copy()
            env["DISPLAY"] = self.config.x_display

            process = subprocess.Popen(
                cmd_args,
                env=env,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                start_new_session=True,
            )

            await asyncio.sleep(1)

            if process.poll() is None:
                return process
            self.logger.error("Browser process exited immediately")
            return None

        except Exception:
            self.logger.exception("Failed to launch browser")
            return None

    async def _wait_for_responsive(self, timeout: int) -> bool:
        """Wait ``timeout`` seconds and check the process is still alive."""
        for _ in range(timeout):
            if self._process and self._process.poll() is None:
                await asyncio.sleep(1)
            else:
                return False

        return bool(self._process and self._process.poll() is None)

    def _get_memory_usage(self) -> int:
        """Browser resident memory in MB, 0 if unknown."""
        if not self._process:
            return 0
        try:
            return int(self._metrics_process().memory_info().rss / 1024 / 1024)
        except psutil.Error:
            self.logger.debug("Could not read browser memory usage")
            return 0

    def _get_cpu_usage(self) -> float:
        """Browser CPU usage percentage, 0.0 if unknown."""
        if not self._process:
            return 0.0
        try:
            return self._metrics_process().cpu_percent()
        except psutil.Error:
            self.logger.debug("Could not read browser CPU usage")
            return 0.0

    def _prime_metrics(self) -> None:
        try:
            self._metrics_process()
        except psutil.Error:
            self.logger.debug("Could not attach process metrics to browser")

    def _metrics_process(self) -> psutil.Process:
        """psutil handle for the browser process, reused between samples.

        A new handle's first cpu_percent() call only starts the measurement
        interval, so the handle is primed once when it is created.
        """
        if self._metrics is None or self._metrics.pid != self._process.pid:
            self._metrics = psutil.Process(self._process.pid)
            self._metrics.cpu_percent()
        return self._metrics

    async def _wait_for_process_exit(self) -> None:
        if self._process:
            while self._process.poll() is None:
                await asyncio.sleep(0.1)

    def _cleanup_process_state(self) -> None:
        self._process = None
        self._metrics = None
        self._state = BrowserState.STOPPED
        self._start_time = None

    def _handle_startup_failure(self, error_msg: str) -> None:
        self.logger.error(error_msg)
        self._last_error = error_msg
        self._error_time = datetime.now()
        if self._process and self._process.poll() is None:
            self._process.kill()
        self._cleanup_process_state()
        self._state = BrowserState.FAILED
