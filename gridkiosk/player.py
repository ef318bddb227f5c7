"""
Grid player - the owned instance that wires display detection, layout and presentation.

Classes:
    PlayerStatus: Player status snapshot for the control API
    GridPlayer: Public operations of the multi-display grid player

Example:
    >>> player = GridPlayer(load_settings())
    >>> player.start()
    >>> await player.load_configuration("config.json")
    True
    >>> await player.wait_for_displays()
    >>> await player.enter_fullscreen(1)
    True
    >>> await player.stop()
"""

import asyncio
import contextlib
import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any, Optional, Union

from .display.models import DisplayTopology
from .display.resolver import DisplayTopologyResolver
from .display.sources import build_sources
from .kiosk.browser_manager import BrowserConfig, BrowserManager, BrowserStatus
from .kiosk.presentation import PresentationController, PresentationState, PresentationSurface
from .kiosk.surface import BrowserPresentationSurface
from .layout.composer import LayoutComposer
from .layout.exceptions import ConfigurationRetrievalFailure, LayoutError
from .layout.loader import ConfigurationLoader
from .layout.registry import ContentRegionRegistry
from .layout.surfaces import FrameSurface, SurfaceFactory
from .settings.models import PlayerSettings

logger = logging.getLogger(__name__)


@dataclass
class PlayerStatus:
    """Player status snapshot.

    Attributes:
        start_time: When :meth:`GridPlayer.start` was called
        uptime: Time since start
        displays_resolved: Whether display detection has completed
        topology: Current display topology
        presentation: Current presentation state
        region_ids: Live region ids in document order
        revision: Registry revision
        config_location: Location of the applied configuration document
        browser_status: Kiosk browser status, when a browser is managed
        last_error: Last error message
        error_time: When the last error occurred
    """

    start_time: Optional[datetime]
    uptime: Optional[timedelta]
    displays_resolved: bool
    topology: DisplayTopology
    presentation: PresentationState
    region_ids: list[str] = field(default_factory=list)
    revision: int = 0
    config_location: Optional[str] = None
    browser_status: Optional[BrowserStatus] = None
    last_error: Optional[str] = None
    error_time: Optional[datetime] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "uptime_seconds": self.uptime.total_seconds() if self.uptime else None,
            "displays_resolved": self.displays_resolved,
            "monitor_count": len(self.topology),
            "topology": self.topology.to_dict(),
            "presentation": self.presentation.to_dict(),
            "regions": self.region_ids,
            "revision": self.revision,
            "config": self.config_location,
            "browser": self.browser_status.to_dict() if self.browser_status else None,
            "last_error": self.last_error,
            "error_time": self.error_time.isoformat() if self.error_time else None,
        }


class GridPlayer:
    """Multi-display grid content player.

    Owns the resolver, loader, composer, registry and presentation
    controller. Display detection runs once, in the background, from
    :meth:`start`; until it finishes the player behaves as if a single
    viewport-sized display were attached.
    """

    def __init__(
        self,
        settings: Optional[PlayerSettings] = None,
        resolver: Optional[DisplayTopologyResolver] = None,
        loader: Optional[ConfigurationLoader] = None,
        surface: Optional[PresentationSurface] = None,
        surface_factory: SurfaceFactory = FrameSurface,
    ) -> None:
        """Initialize the player.

        Args:
            settings: Player settings (defaults plus environment when omitted)
            resolver: Display topology resolver (built from settings when omitted)
            loader: Configuration loader (built from settings when omitted)
            surface: Presentation surface (a managed Chromium window when omitted)
            surface_factory: Factory for the content surface of each region
        """
        self.settings = settings or PlayerSettings()
        self.logger = logging.getLogger(f"{__name__}.GridPlayer")

        viewport = (self.settings.viewport.width, self.settings.viewport.height)
        detection = self.settings.detection

        self.resolver = resolver or DisplayTopologyResolver(
            build_sources(detection.sources, detection.x_display), viewport=viewport
        )
        self.loader = loader or ConfigurationLoader(timeout=self.settings.config_fetch_timeout)
        self.registry = ContentRegionRegistry()
        self.composer = LayoutComposer(self.registry, surface_factory)

        self.page_url = f"http://{self.settings.server.host}:{self.settings.server.port}/"
        self.browser_manager: Optional[BrowserManager] = None
        if surface is None:
            self.browser_manager = BrowserManager(
                BrowserConfig.from_settings(self.settings.browser, detection.x_display)
            )
            surface = BrowserPresentationSurface(
                self.browser_manager, lambda: self.page_url, detection.x_display
            )
        self.controller = PresentationController(surface, self.composer, viewport=viewport)

        self._resolution_task: Optional[asyncio.Task] = None
        self._displays_resolved = False
        self._start_time: Optional[datetime] = None
        self._config_location: Optional[str] = None
        self._last_error: Optional[str] = None
        self._error_time: Optional[datetime] = None

    def start(self) -> None:
        """Begin display detection in the background. Calling again is a no-op."""
        if self._resolution_task is not None:
            return
        self._start_time = datetime.now()
        self._resolution_task = asyncio.create_task(self._resolve_displays())

    async def wait_for_displays(self) -> DisplayTopology:
        """Wait for display detection started by :meth:`start` to finish."""
        if self._resolution_task is not None:
            await self._resolution_task
        return self.controller.topology

    async def load_configuration(self, location: Union[str, Path, None] = None) -> bool:
        """Retrieve a layout document and apply it.

        Args:
            location: File path or URL (defaults to the configured ``config_path``)

        Returns:
            True if applied; False if it could not be retrieved (layout unchanged)

        Raises:
            LayoutValidationError: If the document is not a valid layout
            LayoutError: If regions could not be created (layout left empty)
        """
        location = str(location or self.settings.config_path)
        self.logger.info(f"Loading configuration from {location}")

        try:
            document = await self.loader.load_document(location)
        except ConfigurationRetrievalFailure as e:
            self.logger.error(f"Configuration retrieval failed: {e.message}")
            self._record_error(e.message)
            return False
        except LayoutError as e:
            self._record_error(str(e))
            raise

        try:
            self.composer.apply(document)
        except LayoutError as e:
            self._config_location = None
            self._record_error(str(e))
            raise

        self._config_location = location
        return True

    def update_screen(self, region_id: str, content_uri: str) -> bool:
        """Point one region at new content.

        Returns:
            False when no region has ``region_id``
        """
        return self.registry.update(region_id, content_uri)

    async def enter_fullscreen(self, monitor_index: Optional[int] = None) -> bool:
        return await self.controller.enter_fullscreen(monitor_index)

    async def exit_fullscreen(self) -> None:
        await self.controller.exit_fullscreen()

    def set_monitor(self, index: int) -> bool:
        return self.controller.set_monitor(index)

    def get_monitor_count(self) -> int:
        return self.controller.get_monitor_count()

    def get_status(self) -> PlayerStatus:
        uptime = datetime.now() - self._start_time if self._start_time else None
        browser_status = (
            self.browser_manager.get_browser_status() if self.browser_manager else None
        )
        return PlayerStatus(
            start_time=self._start_time,
            uptime=uptime,
            displays_resolved=self._displays_resolved,
            topology=self.controller.topology,
            presentation=self.controller.state,
            region_ids=self.registry.ids(),
            revision=self.registry.revision,
            config_location=self._config_location,
            browser_status=browser_status,
            last_error=self._last_error,
            error_time=self._error_time,
        )

    async def stop(self) -> None:
        """Leave presentation, cancel detection and tear down the layout."""
        self.logger.info("Stopping grid player")
        # Stopped first so leaving full-screen does not reopen a window
        if self.browser_manager is not None:
            await self.browser_manager.stop_browser()
        await self.controller.exit_fullscreen()

        if self._resolution_task is not None and not self._resolution_task.done():
            self._resolution_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._resolution_task

        self.composer.clear()

    async def _resolve_displays(self) -> None:
        topology = await self.resolver.resolve()
        self.controller.update_topology(topology)
        self._displays_resolved = True

        initial = self.settings.initial_monitor
        if initial is not None and not self.controller.set_monitor(initial):
            self.logger.warning(f"Configured initial monitor {initial} is not available")

    def _record_error(self, message: str) -> None:
        self._last_error = message
        self._error_time = datetime.now()
