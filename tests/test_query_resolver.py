# tests/test_query_resolver.py
"""
Test query precedence and resolution.
"""

import pytest

from metarmap.geo.reference import BoundingBox
from metarmap.query.models import (
    ByBoundingBox,
    ByIdentifiers,
    ByRegion,
    ByStates,
    DefaultQuery,
    QueryKind,
    query_from_params,
)
from metarmap.query.resolver import InvalidInput, QueryResolver, normalize_identifiers, parse_bbox


class TestPrecedence:
    """ids > states > region > bbox > default."""

    def test_ids_win_over_everything(self):
        query = query_from_params(ids="KJFK", states="NY", region="west", bbox="1,2,3,4")
        assert query == ByIdentifiers(raw="KJFK")

    def test_states_win_over_region_and_bbox(self):
        query = query_from_params(states="NY,NJ", region="west", bbox="1,2,3,4")
        assert query == ByStates(codes=("NY", "NJ"))

    def test_region_wins_over_bbox(self):
        assert query_from_params(region="west", bbox="1,2,3,4") == ByRegion(key="west")

    def test_bbox(self):
        assert query_from_params(bbox="1,2,3,4") == ByBoundingBox(raw="1,2,3,4")

    def test_nothing_is_default(self):
        assert query_from_params() == DefaultQuery()

    def test_blank_values_count_as_absent(self):
        """Whitespace-only parameters fall through to the next discriminant."""
        assert query_from_params(ids="  ", states=[" ", ""], region="west") == ByRegion(key="west")

    def test_states_accept_repeated_and_comma_values(self):
        assert query_from_params(states=["NY,NJ", "CT"]) == ByStates(codes=("NY", "NJ", "CT"))

    def test_kind_discriminant(self):
        assert query_from_params(ids="KJFK").kind == QueryKind.IDENTIFIERS
        assert query_from_params().kind == QueryKind.DEFAULT


class TestIdentifiers:
    """Identifier list normalization."""

    def test_trim_uppercase_dedupe(self):
        assert normalize_identifiers("kjfk, KJFK ,kord") == ["KJFK", "KORD"]

    def test_first_occurrence_order_kept(self):
        assert normalize_identifiers("KORD,KJFK,kord,KLAX") == ["KORD", "KJFK", "KLAX"]

    def test_empty_tokens_ignored(self):
        assert normalize_identifiers(",KJFK,,") == ["KJFK"]

    def test_resolve_identifiers(self, resolver):
        resolved = resolver.resolve(ByIdentifiers(raw="kjfk, KJFK ,kord"))
        assert resolved.kind == QueryKind.IDENTIFIERS
        assert resolved.ids == ("KJFK", "KORD")
        assert resolved.bbox is None
        assert not resolved.us_only

    def test_only_separators_rejected(self, resolver):
        with pytest.raises(InvalidInput):
            resolver.resolve(ByIdentifiers(raw=" , ,"))


class TestStates:
    """State resolution in both modes."""

    def test_single_state_box_unchanged(self, resolver):
        resolved = resolver.resolve(ByStates(codes=("RI",)))
        assert resolved.bbox == (41.15, -71.86, 42.02, -71.12)
        assert resolved.ids == ()

    def test_states_combine_boxes(self, resolver):
        resolved = resolver.resolve(ByStates(codes=("ri", "CT")))
        assert resolved.bbox == BoundingBox(40.95, -73.73, 42.05, -71.12)

    def test_unknown_states_dropped(self, resolver):
        resolved = resolver.resolve(ByStates(codes=("RI", "ZZ")))
        assert resolved.bbox == (41.15, -71.86, 42.02, -71.12)

    def test_all_unknown_states_rejected(self, resolver):
        with pytest.raises(InvalidInput):
            resolver.resolve(ByStates(codes=("ZZ", "QQ")))

    def test_airport_mode_concatenates_lists(self, reference):
        resolver = QueryResolver(reference, state_resolution="airports")
        resolved = resolver.resolve(ByStates(codes=("RI", "VT", "RI")))
        assert resolved.ids == reference.state("RI").airports + reference.state("VT").airports
        assert resolved.bbox is None

    def test_airport_mode_unknown_states_rejected(self, reference):
        resolver = QueryResolver(reference, state_resolution="airports")
        with pytest.raises(InvalidInput):
            resolver.resolve(ByStates(codes=("ZZ",)))

    def test_unknown_mode_rejected(self, reference):
        with pytest.raises(ValueError):
            QueryResolver(reference, state_resolution="counties")


class TestRegion:
    """Region resolution."""

    def test_region_resolves_to_region_box(self, resolver, reference):
        resolved = resolver.resolve(ByRegion(key="West"))
        assert resolved.kind == QueryKind.REGION
        assert resolved.bbox == reference.region("west").bbox

    def test_unknown_region_is_invalid_input(self, resolver):
        """Unknown region raises, never an empty success."""
        with pytest.raises(InvalidInput, match="atlantis"):
            resolver.resolve(ByRegion(key="atlantis"))

    def test_region_airport_mode(self, reference):
        resolver = QueryResolver(reference, state_resolution="airports")
        resolved = resolver.resolve(ByRegion(key="hawaii"))
        assert resolved.ids == reference.state("HI").airports


class TestBoundingBox:
    """Bounding box parsing."""

    def test_parse(self):
        assert parse_bbox("41.15, -71.86,42.02,-71.12") == (41.15, -71.86, 42.02, -71.12)

    def test_no_range_clamp(self):
        """Out-of-range coordinates pass through."""
        assert parse_bbox("-100,-200,100,200") == (-100, -200, 100, 200)

    def test_too_few_tokens(self):
        with pytest.raises(InvalidInput):
            parse_bbox("1,2,3")

    def test_non_numeric(self):
        with pytest.raises(InvalidInput):
            parse_bbox("1,2,north,4")

    def test_non_finite(self):
        with pytest.raises(InvalidInput):
            parse_bbox("1,2,nan,4")

    def test_resolved_bbox_is_us_only(self, resolver):
        resolved = resolver.resolve(ByBoundingBox(raw="1,2,3,4"))
        assert resolved.kind == QueryKind.BBOX
        assert resolved.us_only


class TestDefault:
    """Default query."""

    def test_default_airports_in_order(self, resolver, reference):
        resolved = resolver.resolve(DefaultQuery())
        assert resolved.ids == reference.default_airports
