"""Registry of live content regions for targeted content updates."""

import logging
from dataclasses import dataclass
from typing import Iterable, Iterator, Optional

from .grid import GridPlacement
from .surfaces import ContentSurface

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class ContentRegion:
    """Runtime counterpart of a region declaration; owns one surface."""

    id: str
    placement: GridPlacement
    stack_order: int
    surface: ContentSurface

    @property
    def content_uri(self) -> str:
        return self.surface.source

    @property
    def grid_area(self) -> str:
        return self.placement.css

    def teardown(self) -> None:
        """Close the surface. Safe to call more than once."""
        if not self.surface.closed:
            self.surface.close()

    def to_dict(self) -> dict[str, object]:
        return {
            "id": self.id,
            "content": self.content_uri,
            "gridArea": self.grid_area,
            "zIndex": self.stack_order,
        }


class ContentRegionRegistry:
    """Live mapping from region id to its content region.

    Only the layout composer replaces or clears the registry wholesale; only
    :meth:`update` re-points a single region. Iteration follows document order.

    Attributes:
        revision: Counter bumped on every change, for change polling
    """

    def __init__(self) -> None:
        self._regions: dict[str, ContentRegion] = {}
        self.revision = 0

    def get(self, region_id: str) -> Optional[ContentRegion]:
        """Look up a region by id.

        Args:
            region_id: Region identifier

        Returns:
            The region, or None if it is not registered
        """
        return self._regions.get(region_id)

    def update(self, region_id: str, content_uri: str) -> bool:
        """Re-point an existing region's surface at new content.

        The region and its surface are kept, so in-surface state survives.
        Unknown ids are ignored; no region is created.

        Args:
            region_id: Region identifier
            content_uri: New content URI

        Returns:
            True if the region exists and was updated, False otherwise
        """
        region = self._regions.get(region_id)
        if region is None:
            logger.debug(f"Ignoring update for unknown region '{region_id}'")
            return False

        region.surface.navigate(content_uri)
        self.revision += 1
        logger.info(f"Region '{region_id}' now shows {content_uri}")
        return True

    def replace(self, regions: Iterable[ContentRegion]) -> None:
        """Install a new set of regions; the caller has torn down the old ones."""
        self._regions = {region.id: region for region in regions}
        self.revision += 1

    def clear(self) -> list[ContentRegion]:
        """Tear down and drop every region.

        Returns:
            The regions that were removed
        """
        removed = list(self._regions.values())
        for region in removed:
            region.teardown()
        self._regions = {}
        self.revision += 1
        return removed

    def ids(self) -> list[str]:
        return list(self._regions)

    def __len__(self) -> int:
        return len(self._regions)

    def __iter__(self) -> Iterator[ContentRegion]:
        return iter(list(self._regions.values()))

    def __contains__(self, region_id: object) -> bool:
        return region_id in self._regions
