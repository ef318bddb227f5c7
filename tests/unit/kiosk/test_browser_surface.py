"""Unit tests for BrowserPresentationSurface."""

from unittest.mock import AsyncMock, Mock, call, patch

import pytest

from gridkiosk.display.exceptions import CapabilityUnavailable
from gridkiosk.display.models import Rect
from gridkiosk.kiosk.exceptions import PresentationAcquisitionFailure
from gridkiosk.kiosk.surface import BrowserPresentationSurface


@pytest.fixture
def browser_manager() -> Mock:
    manager = Mock()
    manager.pid = 4242
    manager.is_running.return_value = True
    manager.start_browser = AsyncMock(return_value=True)
    manager.stop_browser = AsyncMock(return_value=True)
    return manager


class TestBrowserPresentationSurface:
    """Test full-screen acquisition through the kiosk browser."""

    def test_url_when_callable_then_resolved_on_access(self, browser_manager: Mock) -> None:
        urls = iter(["http://127.0.0.1:8080/", "http://127.0.0.1:8081/"])
        surface = BrowserPresentationSurface(browser_manager, lambda: next(urls))

        assert surface.url == "http://127.0.0.1:8080/"
        assert surface.url == "http://127.0.0.1:8081/"

    @pytest.mark.asyncio
    async def test_request_fullscreen_when_browser_starts_then_launched_on_geometry(
        self, browser_manager: Mock
    ) -> None:
        surface = BrowserPresentationSurface(browser_manager, "http://127.0.0.1:8080/")

        await surface.request_fullscreen(Rect(1920, 0, 1920, 1080))

        browser_manager.start_browser.assert_awaited_once_with(
            "http://127.0.0.1:8080/", Rect(1920, 0, 1920, 1080), kiosk=True
        )

    @pytest.mark.asyncio
    async def test_request_fullscreen_when_browser_fails_then_acquisition_failure(
        self, browser_manager: Mock
    ) -> None:
        browser_manager.start_browser.return_value = False
        browser_manager.get_browser_status.return_value = Mock(last_error="no display")
        surface = BrowserPresentationSurface(browser_manager, "http://127.0.0.1:8080/")

        with pytest.raises(PresentationAcquisitionFailure, match="no display"):
            await surface.request_fullscreen(Rect(0, 0, 1920, 1080))

    @pytest.mark.asyncio
    async def test_exit_fullscreen_when_presenting_then_relaunched_windowed_on_same_geometry(
        self, browser_manager: Mock
    ) -> None:
        surface = BrowserPresentationSurface(browser_manager, "http://127.0.0.1:8080/")
        await surface.request_fullscreen(Rect(1920, 0, 1920, 1080))

        await surface.exit_fullscreen()

        assert browser_manager.start_browser.await_args_list[-1] == call(
            "http://127.0.0.1:8080/", Rect(1920, 0, 1920, 1080), kiosk=False
        )
        browser_manager.stop_browser.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_exit_fullscreen_when_browser_stopped_then_nothing_relaunched(
        self, browser_manager: Mock
    ) -> None:
        browser_manager.is_running.return_value = False
        surface = BrowserPresentationSurface(browser_manager, "http://127.0.0.1:8080/")

        await surface.exit_fullscreen()

        browser_manager.start_browser.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_exit_fullscreen_when_windowed_launch_fails_then_acquisition_failure(
        self, browser_manager: Mock
    ) -> None:
        browser_manager.start_browser.return_value = False
        browser_manager.get_browser_status.return_value = Mock(last_error="no display")
        surface = BrowserPresentationSurface(browser_manager, "http://127.0.0.1:8080/")

        with pytest.raises(PresentationAcquisitionFailure, match="Windowed browser"):
            await surface.exit_fullscreen()

    @pytest.mark.asyncio
    async def test_move_to_when_running_then_each_window_moved_and_resized(
        self, browser_manager: Mock
    ) -> None:
        probe = AsyncMock(side_effect=["101\n102\n", "", "", "", ""])
        surface = BrowserPresentationSurface(browser_manager, "http://x/", x_display=":3")

        with patch("gridkiosk.kiosk.surface.run_probe_command", probe):
            await surface.move_to(Rect(1920, 0, 1280, 1024))

        assert probe.await_args_list == [
            call(["xdotool", "search", "--pid", "4242"], ":3"),
            call(["xdotool", "windowmove", "101", "1920", "0"], ":3"),
            call(["xdotool", "windowsize", "101", "1280", "1024"], ":3"),
            call(["xdotool", "windowmove", "102", "1920", "0"], ":3"),
            call(["xdotool", "windowsize", "102", "1280", "1024"], ":3"),
        ]

    @pytest.mark.asyncio
    async def test_move_to_when_browser_not_running_then_nothing_probed(
        self, browser_manager: Mock
    ) -> None:
        browser_manager.is_running.return_value = False
        probe = AsyncMock()
        surface = BrowserPresentationSurface(browser_manager, "http://x/")

        with patch("gridkiosk.kiosk.surface.run_probe_command", probe):
            await surface.move_to(Rect(0, 0, 1920, 1080))

        probe.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_move_to_when_xdotool_missing_then_capability_unavailable(
        self, browser_manager: Mock
    ) -> None:
        probe = AsyncMock(side_effect=CapabilityUnavailable("xdotool not found", "xdotool"))
        surface = BrowserPresentationSurface(browser_manager, "http://x/")

        with patch("gridkiosk.kiosk.surface.run_probe_command", probe):
            with pytest.raises(CapabilityUnavailable):
                await surface.move_to(Rect(0, 0, 1920, 1080))
