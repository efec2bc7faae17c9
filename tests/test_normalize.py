# tests/test_normalize.py
"""
Test record normalization, US filtering and deduplication.
"""

from metarmap.observations.category import (
    FlightCategory,
    derive_category,
    parse_category,
    visibility_miles,
)
from metarmap.observations.normalize import (
    is_us_airport,
    normalize_payload,
    parse_record,
)

from conftest import make_record


class TestUsFilter:
    """Box queries keep only US prefixes."""

    def test_prefixes(self):
        assert is_us_airport("KJFK")
        assert is_us_airport("PHNL")
        assert is_us_airport("TJSJ")
        assert is_us_airport("TIST")
        assert not is_us_airport("CYYZ")
        assert not is_us_airport("MMMX")
        assert not is_us_airport("TNCM")

    def test_box_payload_filtered(self):
        payload = [make_record(i) for i in ("KJFK", "CYYZ", "TJSJ", "MMMX")]
        assert [o.icao for o in normalize_payload(payload, us_only=True)] == ["KJFK", "TJSJ"]

    def test_identifier_payload_not_filtered(self):
        payload = [make_record(i) for i in ("KJFK", "CYYZ")]
        assert [o.icao for o in normalize_payload(payload)] == ["KJFK", "CYYZ"]


class TestDedupe:
    """Identifier is the merge key; first occurrence wins."""

    def test_first_occurrence_wins(self):
        payload = [
            make_record("KJFK", temp=10),
            make_record("KORD"),
            make_record("kjfk", temp=20),
        ]
        observations = normalize_payload(payload)
        assert [o.icao for o in observations] == ["KJFK", "KORD"]
        assert observations[0].temp_c == 10


class TestPermissiveMapping:
    """Missing or malformed fields become None, not failures."""

    def test_non_list_payload_is_empty(self):
        assert normalize_payload({"error": "oops"}) == []
        assert normalize_payload(None) == []
        assert normalize_payload("KJFK") == []

    def test_records_without_identifier_skipped(self):
        payload = [{"name": "nowhere"}, "junk", 42, make_record("KBOS")]
        assert [o.icao for o in normalize_payload(payload)] == ["KBOS"]

    def test_minimal_record(self):
        obs = parse_record({"icaoId": "KXYZ"})
        assert obs.icao == "KXYZ"
        assert obs.name is None
        assert obs.lat is None
        assert obs.temp_c is None
        assert obs.wind_direction is None
        assert obs.visibility is None
        assert obs.altimeter is None
        assert obs.obs_time is None
        assert obs.clouds == []
        assert obs.flight_category is None

    def test_full_record(self):
        obs = parse_record(make_record("KJFK", wgst=18, clouds=[
            {"cover": "BKN", "base": 2500},
            {"cover": "OVC", "base": None},
        ]))
        assert obs.name == "KJFK Airport"
        assert obs.lat == 40.0
        assert obs.wind_gust == 18
        assert obs.visibility == "10+"
        assert obs.altimeter == 1013.2
        assert obs.obs_time == 1700000000
        assert [(c.cover, c.base) for c in obs.clouds] == [("BKN", 2500), ("OVC", None)]
        assert obs.ceiling_feet == 2500

    def test_variable_wind_direction_kept(self):
        assert parse_record(make_record("KJFK", wdir="VRB")).wind_direction == "VRB"

    def test_mistyped_numbers(self):
        obs = parse_record(make_record("KJFK", temp="warm", lat="40.5", wspd=True))
        assert obs.temp_c is None
        assert obs.lat == 40.5
        assert obs.wind_speed is None

    def test_to_dict_uses_upstream_names(self):
        data = parse_record(make_record("KJFK")).to_dict()
        assert data["icaoId"] == "KJFK"
        assert data["fltCat"] == "VFR"
        assert data["visib"] == "10+"
        assert data["clouds"] == [{"cover": "FEW", "base": 25000}]
        assert set(data) == {
            "icaoId", "name", "lat", "lon", "temp", "dewp", "wdir", "wspd",
            "wgst", "visib", "altim", "fltCat", "rawOb", "obsTime", "clouds",
        }


class TestFlightCategory:
    """Upstream category, and derivation when it is missing."""

    def test_upstream_category_used(self):
        assert parse_record(make_record("KJFK", fltCat="ifr")).flight_category == FlightCategory.IFR

    def test_unknown_category_string(self):
        assert parse_category("SUNNY") is None
        assert parse_category(None) is None

    def test_derived_when_missing(self):
        obs = parse_record(make_record(
            "KJFK", fltCat=None, visib=2, clouds=[{"cover": "OVC", "base": 800}],
        ))
        assert obs.flight_category == FlightCategory.IFR

    def test_derivation_thresholds(self):
        assert derive_category(400, 10) == FlightCategory.LIFR
        assert derive_category(None, 0.5) == FlightCategory.LIFR
        assert derive_category(500, 10) == FlightCategory.IFR
        assert derive_category(5000, 2.5) == FlightCategory.IFR
        assert derive_category(1000, 10) == FlightCategory.MVFR
        assert derive_category(3000, 10) == FlightCategory.MVFR
        assert derive_category(None, 5) == FlightCategory.MVFR
        assert derive_category(3100, 6) == FlightCategory.VFR
        assert derive_category(None, None) is None

    def test_few_and_scattered_are_not_ceilings(self):
        obs = parse_record(make_record(
            "KJFK", fltCat=None, visib="10+",
            clouds=[{"cover": "FEW", "base": 300}, {"cover": "SCT", "base": 800}],
        ))
        assert obs.ceiling_feet is None
        assert obs.flight_category == FlightCategory.VFR

    def test_visibility_parsing(self):
        assert visibility_miles("10+") == 10.0
        assert visibility_miles("1/2") == 0.5
        assert visibility_miles("1 1/2") == 1.5
        assert visibility_miles(3) == 3.0
        assert visibility_miles("P6SM") is None
        assert visibility_miles(None) is None
