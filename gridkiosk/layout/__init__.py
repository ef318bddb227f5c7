"""Layout composition: documents, grid parsing, regions and the composer."""

from .composer import LayoutComposer, LayoutContainer
from .exceptions import ConfigurationRetrievalFailure, LayoutError, LayoutValidationError
from .grid import GridPlacement, is_valid_track_token, parse_grid_placement
from .loader import ConfigurationLoader
from .models import LayoutDocument, PresentationSettings, RegionSpec
from .registry import ContentRegion, ContentRegionRegistry
from .surfaces import ContentSurface, FrameSurface

__all__ = [
    "ConfigurationLoader",
    "ConfigurationRetrievalFailure",
    "ContentRegion",
    "ContentRegionRegistry",
    "ContentSurface",
    "FrameSurface",
    "GridPlacement",
    "LayoutComposer",
    "LayoutContainer",
    "LayoutDocument",
    "LayoutError",
    "LayoutValidationError",
    "PresentationSettings",
    "RegionSpec",
    "is_valid_track_token",
    "parse_grid_placement",
]
