"""Display topology resolution with graceful degradation to a single display."""

import logging
from typing import Optional, Sequence

from ..utils.logging import VERBOSE
from .exceptions import CapabilityUnavailable
from .models import DisplayTopology
from .sources import TopologySource, build_sources

logger = logging.getLogger(__name__)


class DisplayTopologyResolver:
    """Resolve the display topology through a ranked chain of sources.

    The first source returning a non-empty topology wins. Missing
    capabilities and probe errors downgrade to the next source; when every
    source gives up, a single primary display sized to the viewport is
    returned. ``resolve()`` never raises and does not touch global state, so
    it may be called repeatedly.

    Example:
        >>> resolver = DisplayTopologyResolver(build_sources(), viewport=(1920, 1080))
        >>> topology = await resolver.resolve()
        >>> print(f"{len(topology)} displays via {topology.source}")
    """

    def __init__(
        self,
        sources: Optional[Sequence[TopologySource]] = None,
        viewport: tuple[float, float] = (1920, 1080),
    ) -> None:
        """Initialize the resolver.

        Args:
            sources: Topology sources in rank order (defaults to every known source)
            viewport: Width and height of the fallback display
        """
        self.sources = list(sources) if sources is not None else build_sources()
        self.viewport = viewport
        self.logger = logging.getLogger(f"{__name__}.DisplayTopologyResolver")

    def fallback_topology(self) -> DisplayTopology:
        """Single primary display covering the viewport."""
        width, height = self.viewport
        return DisplayTopology.single(width, height)

    async def resolve(self) -> DisplayTopology:
        """Detect the current display topology.

        Returns:
            Topology from the first applicable source, or the viewport fallback
        """
        log_verbose = self.logger.verbose  # type: ignore[attr-defined]
        if self.logger.isEnabledFor(VERBOSE):
            order = ", ".join(source.name for source in self.sources) or "none"
            log_verbose(f"Display source order: {order}")

        for source in self.sources:
            log_verbose(f"Probing display source '{source.name}'")
            try:
                topology = await source.try_detect()
            except CapabilityUnavailable as e:
                self.logger.debug(f"Display source '{source.name}' unavailable: {e.message}")
                continue
            except Exception as e:
                self.logger.warning(f"Display source '{source.name}' failed: {e}")
                continue

            if topology is not None and len(topology) > 0:
                self.logger.info(f"Detected {len(topology)} display(s) via '{source.name}'")
                return topology

            self.logger.debug(f"Display source '{source.name}' reported no displays")

        self.logger.warning("Multi-display detection not available, assuming a single display")
        return self.fallback_topology()
