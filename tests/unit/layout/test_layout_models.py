"""Unit tests for layout document models."""

from typing import Any

import pytest

from gridkiosk.layout.exceptions import LayoutError, LayoutValidationError
from gridkiosk.layout.models import LayoutDocument, RegionSpec


class TestLayoutDocument:
    """Test layout document validation."""

    def test_from_mapping_when_valid_then_regions_in_document_order(
        self, layout_mapping: dict[str, Any]
    ) -> None:
        document = LayoutDocument.from_mapping(layout_mapping)

        assert document.columns == ("1fr", "1fr")
        assert document.rows == ("1fr",)
        assert [region.id for region in document.regions] == ["a", "b"]
        assert document.regions[1].content_uri == "https://example.com/b"
        assert document.regions[1].grid_placement == "1 / 2 / 2 / 3"
        assert document.presentation.span_monitors is False

    def test_from_mapping_when_settings_present_then_presentation_parsed(
        self, layout_mapping: dict[str, Any]
    ) -> None:
        layout_mapping["settings"] = {
            "spanMonitors": True,
            "totalWidth": "300vw",
            "totalHeight": "50vh",
        }

        document = LayoutDocument.from_mapping(layout_mapping)

        assert document.presentation.span_monitors is True
        assert document.presentation.total_width == "300vw"
        assert document.presentation.total_height == "50vh"

    def test_from_mapping_when_no_screens_then_empty_regions(self) -> None:
        document = LayoutDocument.from_mapping({"layout": {"columns": ["1fr"], "rows": ["1fr"]}})

        assert document.regions == ()

    def test_document_when_built_with_python_names_then_accepted(self) -> None:
        document = LayoutDocument(
            columns=["1fr"],
            rows=["1fr"],
            regions=[RegionSpec(id="a", content_uri="about:blank", grid_placement="1 / 1")],
        )

        assert document.regions[0].content_uri == "about:blank"

    def test_from_mapping_when_duplicate_ids_then_validation_error(
        self, layout_mapping: dict[str, Any]
    ) -> None:
        layout_mapping["screens"][1]["id"] = "a"

        with pytest.raises(LayoutValidationError) as exc_info:
            LayoutDocument.from_mapping(layout_mapping)

        assert "duplicate region id 'a'" in str(exc_info.value)

    def test_from_mapping_when_bad_track_token_then_validation_error(
        self, layout_mapping: dict[str, Any]
    ) -> None:
        layout_mapping["layout"]["columns"] = ["1fr", "wide"]

        with pytest.raises(LayoutValidationError) as exc_info:
            LayoutDocument.from_mapping(layout_mapping)

        assert "'wide'" in str(exc_info.value)

    def test_from_mapping_when_no_tracks_then_validation_error(
        self, layout_mapping: dict[str, Any]
    ) -> None:
        layout_mapping["layout"]["rows"] = []

        with pytest.raises(LayoutValidationError):
            LayoutDocument.from_mapping(layout_mapping)

    def test_from_mapping_when_grid_area_outside_grid_then_validation_error(
        self, layout_mapping: dict[str, Any]
    ) -> None:
        layout_mapping["screens"][1]["gridArea"] = "1 / 3 / 2 / 4"

        with pytest.raises(LayoutValidationError) as exc_info:
            LayoutDocument.from_mapping(layout_mapping)

        assert "region 'b'" in str(exc_info.value)

    def test_from_mapping_when_region_missing_content_then_validation_error(
        self, layout_mapping: dict[str, Any]
    ) -> None:
        del layout_mapping["screens"][0]["content"]

        with pytest.raises(LayoutValidationError) as exc_info:
            LayoutDocument.from_mapping(layout_mapping)

        assert exc_info.value.errors

    @pytest.mark.parametrize("data", [[], "layout", None, {"layout": "2x2"}])
    def test_from_mapping_when_not_a_layout_object_then_validation_error(
        self, data: Any
    ) -> None:
        with pytest.raises(LayoutValidationError):
            LayoutDocument.from_mapping(data)

    def test_validation_error_when_raised_then_is_layout_error(
        self, layout_mapping: dict[str, Any]
    ) -> None:
        layout_mapping["layout"]["columns"] = "1fr 1fr"

        with pytest.raises(LayoutError):
            LayoutDocument.from_mapping(layout_mapping)

    def test_placement_for_when_region_then_resolved_against_tracks(
        self, layout_document: LayoutDocument
    ) -> None:
        placement = layout_document.placement_for(layout_document.regions[1])

        assert placement.column_start == 2
        assert placement.column_span == 1


class TestRegionSpec:
    """Test region declarations."""

    def test_effective_stack_order_when_absent_then_one(self) -> None:
        region = RegionSpec(id="a", content="about:blank", gridArea="1 / 1")

        assert region.stack_order is None
        assert region.effective_stack_order == 1

    def test_effective_stack_order_when_zero_then_zero(self) -> None:
        region = RegionSpec(id="a", content="about:blank", gridArea="1 / 1", zIndex=0)

        assert region.effective_stack_order == 0

    def test_region_when_empty_id_then_rejected(self, layout_mapping: dict[str, Any]) -> None:
        layout_mapping["screens"][0]["id"] = ""

        with pytest.raises(LayoutValidationError):
            LayoutDocument.from_mapping(layout_mapping)
