"""
Layout composer: turns a layout document into a container and content regions.

Classes:
    LayoutContainer: Composed container descriptor (grid templates, size, clipping)
    LayoutComposer: Applies layout documents to a content region registry

Example:
    >>> registry = ContentRegionRegistry()
    >>> composer = LayoutComposer(registry)
    >>> regions = composer.apply(document)
    >>> composer.container.grid_template_columns
    '1fr 1fr'
"""

import logging
from dataclasses import dataclass, replace
from typing import Any, Optional

from ..display.models import Rect
from .exceptions import LayoutError
from .models import LayoutDocument
from .registry import ContentRegion, ContentRegionRegistry
from .surfaces import FrameSurface, SurfaceFactory

logger = logging.getLogger(__name__)

SINGLE_DISPLAY_WIDTH = "100vw"
SINGLE_DISPLAY_HEIGHT = "100vh"
DEFAULT_SPAN_WIDTH = "200vw"
DEFAULT_SPAN_HEIGHT = "100vh"


@dataclass(frozen=True)
class LayoutContainer:
    """Composed container descriptor.

    Attributes:
        grid_template_columns: Column tracks joined with spaces
        grid_template_rows: Row tracks joined with spaces
        width: CSS width of the container
        height: CSS height of the container
        overflow: CSS overflow; ``hidden`` clips a spanning container
        spanning: Whether the container spans several displays
        viewport: Pixel geometry handed down by the presentation controller
    """

    grid_template_columns: str = ""
    grid_template_rows: str = ""
    width: str = SINGLE_DISPLAY_WIDTH
    height: str = SINGLE_DISPLAY_HEIGHT
    overflow: str = "visible"
    spanning: bool = False
    viewport: Optional[Rect] = None

    def to_dict(self) -> dict[str, Any]:
        viewport = None
        if self.viewport is not None:
            viewport = {
                "left": self.viewport.left,
                "top": self.viewport.top,
                "width": self.viewport.width,
                "height": self.viewport.height,
            }
        return {
            "gridTemplateColumns": self.grid_template_columns,
            "gridTemplateRows": self.grid_template_rows,
            "width": self.width,
            "height": self.height,
            "overflow": self.overflow,
            "spanning": self.spanning,
            "viewport": viewport,
        }


class LayoutComposer:
    """Apply layout documents to the content region registry.

    Every apply replaces the whole region set: prior regions are torn down
    before new ones are created. Validation happens when the document is
    built, so an invalid document never reaches the teardown step.
    """

    def __init__(
        self,
        registry: ContentRegionRegistry,
        surface_factory: SurfaceFactory = FrameSurface,
    ) -> None:
        """Initialize the composer.

        Args:
            registry: Registry that owns the live regions
            surface_factory: Creates a surface for a content URI
        """
        self.registry = registry
        self.surface_factory = surface_factory
        self._container = LayoutContainer()
        self._document: Optional[LayoutDocument] = None
        self.logger = logging.getLogger(f"{__name__}.LayoutComposer")

    @property
    def container(self) -> LayoutContainer:
        return self._container

    @property
    def document(self) -> Optional[LayoutDocument]:
        """Document applied most recently, if any."""
        return self._document

    def apply(self, document: LayoutDocument) -> tuple[ContentRegion, ...]:
        """Replace the current regions with those declared in ``document``.

        Args:
            document: Validated layout document

        Returns:
            The new regions in document order

        Raises:
            LayoutError: If a surface cannot be created; the registry is left empty
        """
        self.registry.clear()

        regions: list[ContentRegion] = []
        try:
            for spec in document.regions:
                surface = self.surface_factory(spec.content_uri)
                regions.append(
                    ContentRegion(
                        id=spec.id,
                        placement=document.placement_for(spec),
                        stack_order=spec.effective_stack_order,
                        surface=surface,
                    )
                )
        except Exception as e:
            for region in regions:
                region.teardown()
            self._document = None
            self._container = LayoutContainer()
            self.registry.clear()
            raise LayoutError(f"Failed to create content regions: {e}") from e

        self._container = self._compose_container(document)
        self._document = document
        self.registry.replace(regions)

        self.logger.info(
            f"Applied layout: {len(document.columns)}x{len(document.rows)} grid, "
            f"{len(regions)} region(s)"
            + (", spanning displays" if self._container.spanning else "")
        )
        return tuple(regions)

    def clear(self) -> None:
        """Tear down every region and reset the container."""
        self.registry.clear()
        self._container = LayoutContainer()
        self._document = None

    def fit_to_geometry(self, geometry: Rect) -> LayoutContainer:
        """Record the pixel geometry the container is presented at.

        Args:
            geometry: Target display rectangle, or the span of several displays

        Returns:
            Updated container
        """
        self._container = replace(self._container, viewport=geometry)
        self.logger.debug(
            f"Container fitted to {geometry.width}x{geometry.height} at "
            f"({geometry.left}, {geometry.top})"
        )
        return self._container

    def snapshot(self) -> dict[str, Any]:
        """JSON-able description of the container and regions."""
        return {
            "revision": self.registry.revision,
            "container": self._container.to_dict(),
            "regions": [region.to_dict() for region in self.registry],
        }

    def _compose_container(self, document: LayoutDocument) -> LayoutContainer:
        columns = " ".join(token.strip() for token in document.columns)
        rows = " ".join(token.strip() for token in document.rows)
        presentation = document.presentation

        if presentation.span_monitors:
            return LayoutContainer(
                grid_template_columns=columns,
                grid_template_rows=rows,
                width=presentation.total_width or DEFAULT_SPAN_WIDTH,
                height=presentation.total_height or DEFAULT_SPAN_HEIGHT,
                overflow="hidden",
                spanning=True,
                viewport=self._container.viewport,
            )

        return LayoutContainer(
            grid_template_columns=columns,
            grid_template_rows=rows,
            viewport=self._container.viewport,
        )
