"""
Topology source strategies for display detection.

Each source probes one host capability and either returns a
:class:`DisplayTopology`, returns ``None`` when the capability is present but
has nothing to report, or raises :class:`CapabilityUnavailable` when the host
lacks the capability altogether. The resolver tries them in rank order.

Classes:
    TopologySource: Base class for detection strategies
    ScreenInfoSource: Rich multi-display enumeration through ``screeninfo``
    XrandrMonitorSource: Monitor segments reported by ``xrandr --listmonitors``
    ExtendedDesktopSource: Two-display approximation from the extended desktop hint

Example:
    >>> sources = build_sources(["screeninfo", "xrandr", "extended"])
    >>> topology = await sources[0].try_detect()
"""

import asyncio
import logging
import os
import re
from abc import ABC, abstractmethod
from typing import Optional, Sequence

from .exceptions import CapabilityUnavailable
from .models import Display, DisplayTopology

logger = logging.getLogger(__name__)

DEFAULT_X_DISPLAY = ":0"

_XRANDR_MONITOR_RE = re.compile(
    r"^\s*\d+:\s+[+*]*(?P<name>\S+)\s+"
    r"(?P<width>\d+)/\d+x(?P<height>\d+)/\d+"
    r"(?P<left>[+-]\d+)(?P<top>[+-]\d+)"
)
_XDPYINFO_DIMENSIONS_RE = re.compile(r"dimensions:\s+(\d+)x(\d+)\s+pixels")
_WORKAREA_RE = re.compile(r"_NET_WORKAREA\(CARDINAL\)\s*=\s*(.+)")


async def run_probe_command(args: Sequence[str], x_display: str = DEFAULT_X_DISPLAY) -> str:
    """Run a host probe command and return its stdout.

    No timeout is applied; a hung probe blocks the caller.

    Args:
        args: Command and arguments
        x_display: X display the probe should talk to

    Returns:
        Decoded standard output

    Raises:
        CapabilityUnavailable: If the tool is missing or exits non-zero
    """
    env = os.environ.copy()
    env["DISPLAY"] = x_display

    try:
        process = await asyncio.create_subprocess_exec(
            *args,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            env=env,
        )
    except FileNotFoundError as e:
        raise CapabilityUnavailable(f"{args[0]} is not installed", source=args[0]) from e

    stdout, stderr = await process.communicate()
    if process.returncode != 0:
        detail = stderr.decode(errors="replace").strip()
        raise CapabilityUnavailable(
            f"{args[0]} exited with status {process.returncode}: {detail}", source=args[0]
        )
    return stdout.decode(errors="replace")


class TopologySource(ABC):
    """Base class for a ranked display detection strategy."""

    name: str = "source"

    def __init__(self, x_display: str = DEFAULT_X_DISPLAY) -> None:
        self.x_display = x_display

    @abstractmethod
    async def try_detect(self) -> Optional[DisplayTopology]:
        """Probe the host capability.

        Returns:
            Detected topology, or None when the capability reports nothing

        Raises:
            CapabilityUnavailable: If the host does not offer this capability
        """

    def __repr__(self) -> str:
        return f"{type(self).__name__}(x_display={self.x_display!r})"


class ScreenInfoSource(TopologySource):
    """Enumerate every monitor with its host-reported primary flag."""

    name = "screeninfo"

    async def try_detect(self) -> Optional[DisplayTopology]:
        try:
            import screeninfo
        except ImportError as e:
            raise CapabilityUnavailable("screeninfo is not installed", source=self.name) from e

        try:
            monitors = await asyncio.to_thread(screeninfo.get_monitors)
        except screeninfo.ScreenInfoError as e:
            raise CapabilityUnavailable(str(e), source=self.name) from e

        if not monitors:
            return None

        displays = tuple(
            Display(
                index=i,
                left=monitor.x,
                top=monitor.y,
                width=monitor.width,
                height=monitor.height,
                is_primary=bool(monitor.is_primary),
                name=monitor.name,
            )
            for i, monitor in enumerate(monitors)
        )
        return DisplayTopology(displays=displays, source=self.name)


class XrandrMonitorSource(TopologySource):
    """Treat each monitor segment listed by xrandr as a display.

    The first segment is marked primary regardless of xrandr's own flag.
    """

    name = "xrandr"

    async def try_detect(self) -> Optional[DisplayTopology]:
        output = await run_probe_command(["xrandr", "--listmonitors"], self.x_display)
        segments = parse_xrandr_monitors(output)
        if not segments:
            return None
        return DisplayTopology(displays=tuple(segments), source=self.name)


def parse_xrandr_monitors(output: str) -> list[Display]:
    """Parse ``xrandr --listmonitors`` output into displays, first one primary."""
    displays: list[Display] = []
    for line in output.splitlines():
        match = _XRANDR_MONITOR_RE.match(line)
        if not match:
            continue
        displays.append(
            Display(
                index=len(displays),
                left=int(match.group("left")),
                top=int(match.group("top")),
                width=int(match.group("width")),
                height=int(match.group("height")),
                is_primary=not displays,
                name=match.group("name"),
            )
        )
    return displays


class ExtendedDesktopSource(TopologySource):
    """Synthesise two displays from the extended desktop hint.

    When the X root window is wider than the primary work area, the desktop is
    assumed to extend onto a second display to the right. The primary display
    is the work area; the secondary occupies the remaining width at full
    desktop height. This is an approximation, not a measurement: a secondary
    display placed left of or below the primary is reported wrongly. A desktop
    that does not extend past the work area is reported as one display of the
    measured desktop size.
    """

    name = "extended"

    async def try_detect(self) -> Optional[DisplayTopology]:
        dimensions_output = await run_probe_command(["xdpyinfo"], self.x_display)
        workarea_output = await run_probe_command(
            ["xprop", "-root", "_NET_WORKAREA"], self.x_display
        )

        desktop = parse_desktop_dimensions(dimensions_output)
        workarea = parse_workarea(workarea_output)
        if desktop is None or workarea is None:
            raise CapabilityUnavailable("Extended desktop hint not readable", source=self.name)

        return synthesize_extended_topology(desktop, workarea, source=self.name)


def parse_desktop_dimensions(output: str) -> Optional[tuple[int, int]]:
    """Extract the root window size from ``xdpyinfo`` output."""
    match = _XDPYINFO_DIMENSIONS_RE.search(output)
    if not match:
        return None
    return int(match.group(1)), int(match.group(2))


def parse_workarea(output: str) -> Optional[tuple[int, int, int, int]]:
    """Extract the first work area (left, top, width, height) from ``xprop`` output."""
    match = _WORKAREA_RE.search(output)
    if not match:
        return None
    try:
        values = [int(v.strip()) for v in match.group(1).split(",")]
    except ValueError:
        return None
    if len(values) < 4:
        return None
    return values[0], values[1], values[2], values[3]


def synthesize_extended_topology(
    desktop: tuple[int, int],
    workarea: tuple[int, int, int, int],
    source: str = "extended",
) -> DisplayTopology:
    """Build the two-display approximation.

    When the desktop does not extend past the work area, a single primary
    display covering the whole desktop is returned instead.
    """
    desktop_width, desktop_height = desktop
    avail_left, avail_top, avail_width, avail_height = workarea

    secondary_left = avail_left + avail_width
    remaining_width = desktop_width - secondary_left
    if remaining_width <= 0:
        only = Display(0, 0, 0, desktop_width, desktop_height, is_primary=True)
        return DisplayTopology(displays=(only,), source=source)

    primary = Display(0, avail_left, avail_top, avail_width, avail_height, is_primary=True)
    secondary = Display(1, secondary_left, 0, remaining_width, desktop_height, is_primary=False)
    return DisplayTopology(displays=(primary, secondary), source=source)


SOURCE_TYPES: dict[str, type[TopologySource]] = {
    ScreenInfoSource.name: ScreenInfoSource,
    XrandrMonitorSource.name: XrandrMonitorSource,
    ExtendedDesktopSource.name: ExtendedDesktopSource,
}

DEFAULT_SOURCE_ORDER = (
    ScreenInfoSource.name,
    XrandrMonitorSource.name,
    ExtendedDesktopSource.name,
)


def build_sources(
    names: Sequence[str] = DEFAULT_SOURCE_ORDER, x_display: str = DEFAULT_X_DISPLAY
) -> list[TopologySource]:
    """Instantiate topology sources in rank order.

    Raises:
        KeyError: If a name does not match a known source
    """
    return [SOURCE_TYPES[name](x_display=x_display) for name in names]
