# tests/test_geo_reference.py
"""
Test the geographic reference table.

Region boxes must enclose exactly their member states.
"""

import pytest

from metarmap.geo.reference import (
    DEFAULT_AIRPORTS,
    REGION_TABLE,
    BoundingBox,
    bbox_to_param,
    build_reference,
)


class TestRegionBoxes:
    """Region boxes are derived from member states."""

    def test_every_region_box_encloses_its_states(self, reference):
        """Region bbox equals min of mins / max of maxes over member states."""
        for region in reference.regions.values():
            boxes = [reference.states[code].bbox for code in region.states]
            assert region.bbox.south == min(b.south for b in boxes)
            assert region.bbox.west == min(b.west for b in boxes)
            assert region.bbox.north == max(b.north for b in boxes)
            assert region.bbox.east == max(b.east for b in boxes)

    def test_every_region_state_exists(self, reference):
        """All member codes are in the state table."""
        for region in reference.regions.values():
            for code in region.states:
                assert code in reference.states

    def test_single_state_region_matches_state(self, reference):
        """Alaska region box is the Alaska state box."""
        assert reference.region("alaska").bbox == reference.state("AK").bbox

    def test_unknown_region_state_rejected(self):
        """Building with a region that names a missing state fails."""
        with pytest.raises(ValueError, match="XX"):
            build_reference(region_table={**REGION_TABLE, "bogus": ("Bogus", ("NY", "XX"))})


class TestLookups:
    """Case-insensitive lookups and combination helpers."""

    def test_state_lookup_case_insensitive(self, reference):
        assert reference.state("ri").name == "Rhode Island"
        assert reference.state(" NY ").code == "NY"

    def test_region_lookup_case_insensitive(self, reference):
        assert reference.region("NorthEast").name == "Northeast"

    def test_unknown_lookups_return_none(self, reference):
        assert reference.state("ZZ") is None
        assert reference.region("atlantis") is None

    def test_combine_single_state(self, reference):
        """One state combines to its own box."""
        assert reference.combine_state_bboxes(["RI"]) == (41.15, -71.86, 42.02, -71.12)

    def test_combine_skips_unknown_codes(self, reference):
        """Unknown codes do not affect the combined box."""
        assert reference.combine_state_bboxes(["RI", "ZZ"]) == reference.state("RI").bbox

    def test_combine_no_known_codes(self, reference):
        assert reference.combine_state_bboxes(["ZZ"]) is None
        assert reference.combine_state_bboxes([]) is None

    def test_airports_for_states_dedupes_in_order(self, reference):
        """Repeated states contribute their airports once."""
        airports = reference.airports_for_states(["RI", "ri", "CT"])
        assert airports == list(reference.state("RI").airports) + list(reference.state("CT").airports)

    def test_default_airports(self, reference):
        assert reference.default_airports == DEFAULT_AIRPORTS
        assert len(reference.default_airports) == 20
        assert reference.default_airports[0] == "KJFK"

    def test_tables_read_only(self, reference):
        with pytest.raises(TypeError):
            reference.states["XX"] = reference.state("NY")


class TestBoundingBox:
    """BoundingBox helpers."""

    def test_as_param(self):
        assert BoundingBox(41.15, -71.86, 42.02, -71.12).as_param() == "41.15,-71.86,42.02,-71.12"

    def test_bbox_to_param_accepts_lists(self):
        assert bbox_to_param([1, 2, 3, 4]) == "1,2,3,4"

    def test_enclosing(self):
        box = BoundingBox.enclosing([
            BoundingBox(10, -20, 15, -10),
            BoundingBox(5, -15, 20, -12),
        ])
        assert box == (5, -20, 20, -10)

    def test_enclosing_empty(self):
        assert BoundingBox.enclosing([]) is None
