"""Unit tests for the display topology sources."""

from types import SimpleNamespace
from unittest.mock import AsyncMock, Mock, patch

import pytest
import screeninfo

from gridkiosk.display.exceptions import CapabilityUnavailable
from gridkiosk.display.sources import (
    DEFAULT_SOURCE_ORDER,
    ExtendedDesktopSource,
    ScreenInfoSource,
    XrandrMonitorSource,
    build_sources,
    parse_desktop_dimensions,
    parse_workarea,
    parse_xrandr_monitors,
    run_probe_command,
    synthesize_extended_topology,
)

XRANDR_TWO_MONITORS = """Monitors: 2
 0: +*HDMI-1 1920/527x1080/296+0+0  HDMI-1
 1: +DP-1 1280/338x1024/270+1920+0  DP-1
"""

XDPYINFO_OUTPUT = """name of display:    :0
screen #0:
  dimensions:    3840x1080 pixels (1016x285 millimeters)
  resolution:    96x96 dots per inch
"""

WORKAREA_OUTPUT = "_NET_WORKAREA(CARDINAL) = 0, 0, 1920, 1040, 0, 0, 1920, 1040\n"


def _monitor(
    x: int, y: int, width: int, height: int, primary: bool, name: str
) -> SimpleNamespace:
    return SimpleNamespace(x=x, y=y, width=width, height=height, is_primary=primary, name=name)


class TestRunProbeCommand:
    """Test host probe execution."""

    @pytest.mark.asyncio
    async def test_run_probe_command_when_binary_missing_then_capability_unavailable(
        self,
    ) -> None:
        with patch(
            "asyncio.create_subprocess_exec", AsyncMock(side_effect=FileNotFoundError())
        ):
            with pytest.raises(CapabilityUnavailable) as exc_info:
                await run_probe_command(["xrandr", "--listmonitors"])

        assert exc_info.value.source == "xrandr"

    @pytest.mark.asyncio
    async def test_run_probe_command_when_nonzero_exit_then_capability_unavailable(
        self,
    ) -> None:
        process = Mock(returncode=1)
        process.communicate = AsyncMock(return_value=(b"", b"Can't open display"))

        with patch("asyncio.create_subprocess_exec", AsyncMock(return_value=process)):
            with pytest.raises(CapabilityUnavailable, match="Can't open display"):
                await run_probe_command(["xdpyinfo"])

    @pytest.mark.asyncio
    async def test_run_probe_command_when_success_then_stdout_and_display_env(self) -> None:
        process = Mock(returncode=0)
        process.communicate = AsyncMock(return_value=(b"output", b""))
        create = AsyncMock(return_value=process)

        with patch("asyncio.create_subprocess_exec", create):
            result = await run_probe_command(["xdpyinfo"], x_display=":7")

        assert result == "output"
        assert create.call_args.kwargs["env"]["DISPLAY"] == ":7"


class TestScreenInfoSource:
    """Test the screeninfo-backed source."""

    @pytest.mark.asyncio
    async def test_try_detect_when_monitors_listed_then_displays_with_host_primary(
        self,
    ) -> None:
        monitors = [
            _monitor(0, 0, 1920, 1080, False, "HDMI-1"),
            _monitor(1920, 0, 2560, 1440, True, "DP-1"),
        ]

        with patch("screeninfo.get_monitors", return_value=monitors):
            topology = await ScreenInfoSource().try_detect()

        assert topology is not None
        assert len(topology) == 2
        assert topology.source == "screeninfo"
        assert topology[0].is_primary is False
        assert topology[1].is_primary is True
        assert (topology[1].left, topology[1].width, topology[1].height) == (1920, 2560, 1440)

    @pytest.mark.asyncio
    async def test_try_detect_when_no_monitors_then_none(self) -> None:
        with patch("screeninfo.get_monitors", return_value=[]):
            assert await ScreenInfoSource().try_detect() is None

    @pytest.mark.asyncio
    async def test_try_detect_when_enumerator_fails_then_capability_unavailable(self) -> None:
        with patch(
            "screeninfo.get_monitors", side_effect=screeninfo.ScreenInfoError("no enumerators")
        ):
            with pytest.raises(CapabilityUnavailable):
                await ScreenInfoSource().try_detect()


class TestXrandrMonitorSource:
    """Test xrandr monitor segment parsing and detection."""

    def test_parse_xrandr_monitors_when_two_segments_then_first_is_primary(self) -> None:
        displays = parse_xrandr_monitors(XRANDR_TWO_MONITORS)

        assert len(displays) == 2
        assert displays[0].is_primary is True
        assert displays[1].is_primary is False
        assert (displays[1].left, displays[1].top) == (1920, 0)
        assert (displays[1].width, displays[1].height) == (1280, 1024)
        assert displays[1].name == "DP-1"

    def test_parse_xrandr_monitors_when_negative_offset_then_kept(self) -> None:
        output = " 0: +HDMI-1 1920/527x1080/296-1920+0  HDMI-1\n"

        displays = parse_xrandr_monitors(output)

        assert displays[0].left == -1920

    def test_parse_xrandr_monitors_when_header_only_then_empty(self) -> None:
        assert parse_xrandr_monitors("Monitors: 0\n") == []

    @pytest.mark.asyncio
    async def test_try_detect_when_segments_listed_then_topology(self) -> None:
        with patch(
            "gridkiosk.display.sources.run_probe_command",
            AsyncMock(return_value=XRANDR_TWO_MONITORS),
        ) as probe:
            topology = await XrandrMonitorSource(x_display=":1").try_detect()

        probe.assert_awaited_once_with(["xrandr", "--listmonitors"], ":1")
        assert topology is not None
        assert len(topology) == 2
        assert topology.source == "xrandr"

    @pytest.mark.asyncio
    async def test_try_detect_when_no_segments_then_none(self) -> None:
        with patch(
            "gridkiosk.display.sources.run_probe_command",
            AsyncMock(return_value="Monitors: 0\n"),
        ):
            assert await XrandrMonitorSource().try_detect() is None


class TestExtendedDesktopSource:
    """Test the extended desktop approximation."""

    def test_parse_desktop_dimensions_when_xdpyinfo_output_then_size(self) -> None:
        assert parse_desktop_dimensions(XDPYINFO_OUTPUT) == (3840, 1080)

    def test_parse_desktop_dimensions_when_missing_then_none(self) -> None:
        assert parse_desktop_dimensions("nothing here") is None

    def test_parse_workarea_when_xprop_output_then_first_area(self) -> None:
        assert parse_workarea(WORKAREA_OUTPUT) == (0, 0, 1920, 1040)

    def test_parse_workarea_when_not_set_then_none(self) -> None:
        assert parse_workarea("_NET_WORKAREA:  not found.") is None

    def test_synthesize_when_desktop_wider_than_workarea_then_two_displays(self) -> None:
        topology = synthesize_extended_topology((3840, 1080), (0, 0, 1920, 1040))

        assert topology is not None
        primary, secondary = topology.displays
        assert primary.is_primary is True
        assert (primary.left, primary.top, primary.width, primary.height) == (0, 0, 1920, 1040)
        assert secondary.is_primary is False
        assert (secondary.left, secondary.top) == (1920, 0)
        assert (secondary.width, secondary.height) == (1920, 1080)

    def test_synthesize_when_desktop_not_extended_then_single_display_of_desktop_size(
        self,
    ) -> None:
        topology = synthesize_extended_topology((2560, 1440), (0, 0, 2560, 1400))

        assert len(topology) == 1
        only = topology[0]
        assert only.is_primary is True
        assert (only.left, only.top, only.width, only.height) == (0, 0, 2560, 1440)
        assert topology.source == "extended"

    @pytest.mark.asyncio
    async def test_try_detect_when_hint_present_then_two_displays(self) -> None:
        probe = AsyncMock(side_effect=[XDPYINFO_OUTPUT, WORKAREA_OUTPUT])

        with patch("gridkiosk.display.sources.run_probe_command", probe):
            topology = await ExtendedDesktopSource().try_detect()

        assert topology is not None
        assert len(topology) == 2
        assert topology.source == "extended"

    @pytest.mark.asyncio
    async def test_try_detect_when_single_desktop_then_measured_size_not_viewport(
        self,
    ) -> None:
        single_desktop = XDPYINFO_OUTPUT.replace("3840x1080", "2560x1440")
        workarea = "_NET_WORKAREA(CARDINAL) = 0, 0, 2560, 1400\n"
        probe = AsyncMock(side_effect=[single_desktop, workarea])

        with patch("gridkiosk.display.sources.run_probe_command", probe):
            topology = await ExtendedDesktopSource().try_detect()

        assert topology is not None
        assert len(topology) == 1
        assert (topology[0].width, topology[0].height) == (2560, 1440)

    @pytest.mark.asyncio
    async def test_try_detect_when_hint_unreadable_then_capability_unavailable(self) -> None:
        probe = AsyncMock(side_effect=[XDPYINFO_OUTPUT, "_NET_WORKAREA:  not found."])

        with patch("gridkiosk.display.sources.run_probe_command", probe):
            with pytest.raises(CapabilityUnavailable):
                await ExtendedDesktopSource().try_detect()


class TestBuildSources:
    """Test source construction from names."""

    def test_build_sources_when_default_then_ranked_order(self) -> None:
        sources = build_sources()

        assert [source.name for source in sources] == list(DEFAULT_SOURCE_ORDER)
        assert isinstance(sources[0], ScreenInfoSource)

    def test_build_sources_when_custom_order_then_respected(self) -> None:
        sources = build_sources(["extended", "xrandr"], x_display=":2")

        assert [source.name for source in sources] == ["extended", "xrandr"]
        assert all(source.x_display == ":2" for source in sources)

    def test_build_sources_when_unknown_name_then_key_error(self) -> None:
        with pytest.raises(KeyError):
            build_sources(["wayland"])
