"""Chromium-backed presentation surface."""

import logging
from typing import Callable, Optional, Union

from ..display.models import Rect
from ..display.sources import run_probe_command
from .browser_manager import BrowserManager
from .exceptions import PresentationAcquisitionFailure
from .presentation import PresentationSurface

logger = logging.getLogger(__name__)


class BrowserPresentationSurface(PresentationSurface):
    """Present the grid page in a kiosk-mode Chromium window.

    Full-screen is acquired by (re)launching the browser with its window
    placed on the target geometry; an existing window is moved with
    ``xdotool`` on a best-effort basis. Leaving full-screen relaunches the page
    in a normal window on the same geometry, unless the browser has already
    been stopped.

    Args:
        browser_manager: Manager owning the Chromium process
        url: Page URL, or a callable returning it once the server is bound
        x_display: X display used for ``xdotool``
    """

    def __init__(
        self,
        browser_manager: BrowserManager,
        url: Union[str, Callable[[], str]],
        x_display: str = ":0",
    ) -> None:
        self.browser_manager = browser_manager
        self._url = url
        self.x_display = x_display
        self._geometry: Optional[Rect] = None
        self.logger = logging.getLogger(f"{__name__}.BrowserPresentationSurface")

    @property
    def url(self) -> str:
        return self._url() if callable(self._url) else self._url

    async def move_to(self, geometry: Rect) -> None:
        """Move and resize the browser's windows.

        Raises:
            CapabilityUnavailable: If ``xdotool`` is missing or fails
        """
        pid = self.browser_manager.pid
        if pid is None or not self.browser_manager.is_running():
            return

        output = await run_probe_command(
            ["xdotool", "search", "--pid", str(pid)], self.x_display
        )
        x, y = str(int(geometry.left)), str(int(geometry.top))
        width, height = str(int(geometry.width)), str(int(geometry.height))
        for window_id in output.split():
            await run_probe_command(["xdotool", "windowmove", window_id, x, y], self.x_display)
            await run_probe_command(
                ["xdotool", "windowsize", window_id, width, height], self.x_display
            )
        self.logger.debug(f"Moved browser window(s) to {geometry}")

    async def request_fullscreen(self, geometry: Rect) -> None:
        self._geometry = geometry
        if not await self.browser_manager.start_browser(self.url, geometry, kiosk=True):
            status = self.browser_manager.get_browser_status()
            raise PresentationAcquisitionFailure(
                f"Browser could not be started: {status.last_error or 'unknown error'}"
            )

    async def exit_fullscreen(self) -> None:
        """Swap the kiosk window for a normal window showing the same page.

        Raises:
            PresentationAcquisitionFailure: If the windowed browser cannot be started
        """
        if not self.browser_manager.is_running():
            return

        if not await self.browser_manager.start_browser(self.url, self._geometry, kiosk=False):
            status = self.browser_manager.get_browser_status()
            raise PresentationAcquisitionFailure(
                f"Windowed browser could not be started: {status.last_error or 'unknown error'}"
            )
