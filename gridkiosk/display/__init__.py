"""Display topology detection: models, ranked sources and the resolver."""

from .exceptions import CapabilityUnavailable, DisplayError
from .models import Display, DisplayTopology, Rect
from .resolver import DisplayTopologyResolver
from .sources import (
    DEFAULT_SOURCE_ORDER,
    ExtendedDesktopSource,
    ScreenInfoSource,
    TopologySource,
    XrandrMonitorSource,
    build_sources,
)

__all__ = [
    "DEFAULT_SOURCE_ORDER",
    "CapabilityUnavailable",
    "Display",
    "DisplayError",
    "DisplayTopology",
    "DisplayTopologyResolver",
    "ExtendedDesktopSource",
    "Rect",
    "ScreenInfoSource",
    "TopologySource",
    "XrandrMonitorSource",
    "build_sources",
]
