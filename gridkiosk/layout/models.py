"""
Layout document models using Pydantic for validation.

The configuration document keeps its wire names (``screens``, ``content``,
``gridArea``, ``zIndex``, ``settings``); the models expose Python names
(``regions``, ``content_uri``, ``grid_placement``, ``stack_order``,
``presentation``) and accept either form.

Example:
    >>> document = LayoutDocument.from_mapping({
    ...     "layout": {"columns": ["1fr", "1fr"], "rows": ["1fr"]},
    ...     "screens": [
    ...         {"id": "a", "content": "https://example.com/a", "gridArea": "1 / 1 / 2 / 2"},
    ...         {"id": "b", "content": "https://example.com/b", "gridArea": "1 / 2 / 2 / 3"},
    ...     ],
    ... })
    >>> [region.id for region in document.regions]
    ['a', 'b']
"""

import logging
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from .exceptions import LayoutValidationError
from .grid import GridPlacement, invalid_track_tokens, parse_grid_placement

logger = logging.getLogger(__name__)

DEFAULT_STACK_ORDER = 1


class PresentationSettings(BaseModel):
    """Spanning settings of a layout document.

    Attributes:
        span_monitors: Oversize the container so it spans adjacent displays
        total_width: CSS width of the spanning container (default ``200vw``)
        total_height: CSS height of the spanning container (default ``100vh``)
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    span_monitors: bool = Field(default=False, alias="spanMonitors")
    total_width: Optional[str] = Field(default=None, alias="totalWidth")
    total_height: Optional[str] = Field(default=None, alias="totalHeight")


class RegionSpec(BaseModel):
    """Declaration of one content region.

    Attributes:
        id: Identifier, unique within the document
        content_uri: URI loaded into the region's surface
        grid_placement: CSS grid-area value
        stack_order: Stacking order (z-index); 1 when absent
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: str = Field(min_length=1)
    content_uri: str = Field(alias="content")
    grid_placement: str = Field(alias="gridArea")
    stack_order: Optional[int] = Field(default=None, alias="zIndex")

    @property
    def effective_stack_order(self) -> int:
        return DEFAULT_STACK_ORDER if self.stack_order is None else self.stack_order


class LayoutDocument(BaseModel):
    """Grid definition, regions and presentation settings for one configuration cycle."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    columns: tuple[str, ...]
    rows: tuple[str, ...]
    regions: tuple[RegionSpec, ...] = Field(default=(), alias="screens")
    presentation: PresentationSettings = Field(
        default_factory=PresentationSettings, alias="settings"
    )

    @model_validator(mode="before")
    @classmethod
    def flatten_layout_section(cls, data: Any) -> Any:
        """Lift ``layout.columns``/``layout.rows`` to the top level."""
        if not isinstance(data, dict) or "layout" not in data:
            return data

        layout = data["layout"]
        if not isinstance(layout, dict):
            raise ValueError("'layout' must be an object with 'columns' and 'rows'")

        flattened = {key: value for key, value in data.items() if key != "layout"}
        for key in ("columns", "rows"):
            if key in layout:
                flattened.setdefault(key, layout[key])
        return flattened

    @field_validator("columns", "rows", mode="before")
    @classmethod
    def validate_tracks(cls, v: Any) -> Any:
        """Require a non-empty sequence of valid track-size tokens.

        Raises:
            ValueError: If the sequence is empty or holds an invalid token
        """
        if isinstance(v, str) or not isinstance(v, (list, tuple)):
            raise ValueError("must be a list of track sizes")
        if not v:
            raise ValueError("must define at least one track")
        invalid = invalid_track_tokens(v)
        if invalid:
            raise ValueError(f"invalid track size(s): {', '.join(invalid)}")
        return v

    @model_validator(mode="after")
    def validate_regions(self) -> "LayoutDocument":
        """Reject duplicate region ids and grid areas outside the grid."""
        seen: set[str] = set()
        for region in self.regions:
            if region.id in seen:
                raise ValueError(f"duplicate region id {region.id!r}")
            seen.add(region.id)
            try:
                self.placement_for(region)
            except ValueError as e:
                raise ValueError(f"region {region.id!r}: {e}") from e
        return self

    def placement_for(self, region: RegionSpec) -> GridPlacement:
        """Resolve ``region``'s grid area against this document's tracks."""
        return parse_grid_placement(region.grid_placement, len(self.columns), len(self.rows))

    @classmethod
    def from_mapping(cls, data: Any) -> "LayoutDocument":
        """Build a document from a decoded configuration mapping.

        Raises:
            LayoutValidationError: If the mapping is not a valid layout document
        """
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            errors = [
                f"{'.'.join(str(part) for part in error['loc']) or 'document'}: {error['msg']}"
                for error in e.errors()
            ]
            raise LayoutValidationError("Invalid layout document", errors) from e
