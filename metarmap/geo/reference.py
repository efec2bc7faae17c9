# metarmap/geo/reference.py
"""
Geographic reference table.

US states with bounding boxes and representative airports, regions built
from member states, and the default airport set for the initial map view.

Bounding boxes are (south, west, north, east) in decimal degrees.
A region's box is never stored: it is derived by enclosing its member
states' boxes when the reference is built.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, NamedTuple, Optional, Sequence, Tuple


class BoundingBox(NamedTuple):
    """Rectangular area as south/west/north/east extremes."""
    south: float
    west: float
    north: float
    east: float

    def as_param(self) -> str:
        """Upstream `bbox` parameter: minLat,minLon,maxLat,maxLon."""
        return f"{self.south},{self.west},{self.north},{self.east}"

    @classmethod
    def enclosing(cls, boxes: Iterable["BoundingBox"]) -> Optional["BoundingBox"]:
        """Smallest box containing every box, or None for no boxes."""
        boxes = list(boxes)
        if not boxes:
            return None
        return cls(
            south=min(b.south for b in boxes),
            west=min(b.west for b in boxes),
            north=max(b.north for b in boxes),
            east=max(b.east for b in boxes),
        )


def bbox_to_param(bbox: Sequence[float]) -> str:
    """Format any 4-sequence as the upstream `bbox` parameter."""
    return BoundingBox(*bbox).as_param()


@dataclass(frozen=True)
class State:
    """A US state: code, display name, box and representative airports."""
    code: str
    name: str
    bbox: BoundingBox
    airports: Tuple[str, ...] = ()


@dataclass(frozen=True)
class Region:
    """A named group of states with the box enclosing all of them."""
    key: str
    name: str
    states: Tuple[str, ...]
    bbox: BoundingBox


# code: (name, (south, west, north, east), representative airports)
STATE_TABLE: Dict[str, Tuple[str, Tuple[float, float, float, float], Tuple[str, ...]]] = {
    "AL": ("Alabama", (30.22, -88.47, 35.01, -84.89), ("KBHM", "KHSV", "KMOB", "KMGM")),
    "AK": ("Alaska", (51.21, -179.15, 71.39, -129.98), ("PANC", "PAFA", "PAJN", "PAKT", "PADQ", "PABE")),
    "AZ": ("Arizona", (31.33, -114.81, 37.00, -109.04), ("KPHX", "KTUS", "KFLG", "KPRC", "KIWA")),
    "AR": ("Arkansas", (33.00, -94.62, 36.50, -89.64), ("KLIT", "KXNA", "KFSM", "KTXK")),
    "CA": ("California", (32.53, -124.48, 42.01, -114.13), ("KLAX", "KSFO", "KSAN", "KSJC", "KOAK", "KSMF", "KBUR", "KONT", "KSNA", "KFAT")),
    "CO": ("Colorado", (36.99, -109.06, 41.00, -102.04), ("KDEN", "KCOS", "KASE", "KEGE", "KGJT")),
    "CT": ("Connecticut", (40.95, -73.73, 42.05, -71.79), ("KBDL", "KHVN", "KGON", "KBDR")),
    "DE": ("Delaware", (38.45, -75.79, 39.84, -75.05), ("KILG", "KDOV", "KGED")),
    "FL": ("Florida", (24.40, -87.63, 31.00, -80.03), ("KMIA", "KMCO", "KTPA", "KFLL", "KJAX", "KRSW", "KPBI", "KTLH", "KPNS", "KEYW")),
    "GA": ("Georgia", (30.36, -85.61, 35.00, -80.84), ("KATL", "KSAV", "KAGS", "KMCN", "KCSG")),
    "HI": ("Hawaii", (18.91, -160.25, 22.24, -154.81), ("PHNL", "PHOG", "PHKO", "PHTO", "PHLI")),
    "ID": ("Idaho", (41.99, -117.24, 49.00, -111.04), ("KBOI", "KIDA", "KSUN", "KLWS", "KPIH")),
    "IL": ("Illinois", (36.97, -91.51, 42.51, -87.02), ("KORD", "KMDW", "KPIA", "KSPI", "KMLI", "KRFD")),
    "IN": ("Indiana", (37.77, -88.10, 41.76, -84.78), ("KIND", "KFWA", "KSBN", "KEVV")),
    "IA": ("Iowa", (40.38, -96.64, 43.50, -90.14), ("KDSM", "KCID", "KDBQ", "KSUX", "KALO")),
    "KS": ("Kansas", (36.99, -102.05, 40.00, -94.59), ("KICT", "KMHK", "KFOE", "KGCK")),
    "KY": ("Kentucky", (36.50, -89.57, 39.15, -81.96), ("KSDF", "KCVG", "KLEX", "KPAH")),
    "LA": ("Louisiana", (28.93, -94.04, 33.02, -88.82), ("KMSY", "KBTR", "KSHV", "KLFT", "KMLU")),
    "ME": ("Maine", (43.06, -71.08, 47.46, -66.95), ("KPWM", "KBGR", "KAUG", "KPQI")),
    "MD": ("Maryland", (37.91, -79.49, 39.72, -75.05), ("KBWI", "KSBY", "KHGR", "KMTN")),
    "MA": ("Massachusetts", (41.24, -73.50, 42.89, -69.93), ("KBOS", "KORH", "KACK", "KMVY", "KHYA")),
    "MI": ("Michigan", (41.70, -90.42, 48.19, -82.41), ("KDTW", "KGRR", "KLAN", "KFNT", "KTVC", "KMQT")),
    "MN": ("Minnesota", (43.50, -97.24, 49.38, -89.49), ("KMSP", "KDLH", "KRST", "KSTC", "KINL")),
    "MS": ("Mississippi", (30.17, -91.66, 35.00, -88.10), ("KJAN", "KGPT", "KTUP", "KGTR")),
    "MO": ("Missouri", (35.99, -95.77, 40.61, -89.10), ("KSTL", "KMCI", "KSGF", "KCOU")),
    "MT": ("Montana", (44.36, -116.05, 49.00, -104.04), ("KBZN", "KMSO", "KBIL", "KGTF", "KHLN")),
    "NE": ("Nebraska", (40.00, -104.05, 43.00, -95.31), ("KOMA", "KLNK", "KGRI", "KLBF")),
    "NV": ("Nevada", (35.00, -120.01, 42.00, -114.04), ("KLAS", "KRNO", "KELY", "KEKO")),
    "NH": ("New Hampshire", (42.70, -72.56, 45.31, -70.70), ("KMHT", "KPSM", "KCON", "KLEB")),
    "NJ": ("New Jersey", (38.93, -75.56, 41.36, -73.89), ("KEWR", "KTTN", "KACY", "KTEB", "KMMU")),
    "NM": ("New Mexico", (31.33, -109.05, 37.00, -103.00), ("KABQ", "KSAF", "KROW", "KFMN")),
    "NY": ("New York", (40.50, -79.76, 45.02, -71.86), ("KJFK", "KLGA", "KBUF", "KALB", "KROC", "KSYR", "KISP", "KHPN")),
    "NC": ("North Carolina", (33.84, -84.32, 36.59, -75.46), ("KCLT", "KRDU", "KGSO", "KAVL", "KILM")),
    "ND": ("North Dakota", (45.94, -104.05, 49.00, -96.55), ("KFAR", "KBIS", "KGFK", "KMOT")),
    "OH": ("Ohio", (38.40, -84.82, 42.00, -80.52), ("KCLE", "KCMH", "KCAK", "KDAY", "KTOL")),
    "OK": ("Oklahoma", (33.62, -103.00, 37.00, -94.43), ("KOKC", "KTUL", "KLAW", "KSWO")),
    "OR": ("Oregon", (41.99, -124.57, 46.29, -116.46), ("KPDX", "KEUG", "KMFR", "KRDM", "KOTH")),
    "PA": ("Pennsylvania", (39.72, -80.52, 42.27, -74.69), ("KPHL", "KPIT", "KABE", "KMDT", "KAVP", "KERI")),
    "RI": ("Rhode Island", (41.15, -71.86, 42.02, -71.12), ("KPVD", "KWST", "KOQU", "KBID")),
    "SC": ("South Carolina", (32.03, -83.35, 35.22, -78.54), ("KCHS", "KCAE", "KGSP", "KMYR")),
    "SD": ("South Dakota", (42.48, -104.06, 45.95, -96.44), ("KFSD", "KRAP", "KABR", "KPIR")),
    "TN": ("Tennessee", (34.98, -90.31, 36.68, -81.65), ("KBNA", "KMEM", "KTYS", "KCHA", "KTRI")),
    "TX": ("Texas", (25.84, -106.65, 36.50, -93.51), ("KDFW", "KIAH", "KAUS", "KSAT", "KHOU", "KDAL", "KELP", "KLBB", "KCRP", "KMAF")),
    "UT": ("Utah", (36.99, -114.05, 42.00, -109.04), ("KSLC", "KOGD", "KPVU", "KCDC", "KSGU")),
    "VT": ("Vermont", (42.73, -73.44, 45.02, -71.46), ("KBTV", "KMPV", "KRUT")),
    "VA": ("Virginia", (36.54, -83.68, 39.47, -75.24), ("KIAD", "KDCA", "KRIC", "KORF", "KROA")),
    "WA": ("Washington", (45.54, -124.85, 49.00, -116.92), ("KSEA", "KGEG", "KPAE", "KBFI", "KBLI", "KPSC")),
    "WV": ("West Virginia", (37.20, -82.64, 40.64, -77.72), ("KCRW", "KHTS", "KCKB", "KMGW", "KLWB")),
    "WI": ("Wisconsin", (42.49, -92.89, 47.08, -86.25), ("KMKE", "KMSN", "KGRB", "KATW", "KCWA")),
    "WY": ("Wyoming", (40.99, -111.06, 45.01, -104.05), ("KCYS", "KJAC", "KCPR", "KRKS", "KSHR")),
}

# key: (name, member state codes)
REGION_TABLE: Dict[str, Tuple[str, Tuple[str, ...]]] = {
    "northeast": ("Northeast", ("CT", "DE", "MA", "MD", "ME", "NH", "NJ", "NY", "PA", "RI", "VT")),
    "southeast": ("Southeast", ("AL", "FL", "GA", "KY", "MS", "NC", "SC", "TN", "VA", "WV")),
    "midwest": ("Midwest", ("IA", "IL", "IN", "KS", "MI", "MN", "MO", "ND", "NE", "OH", "SD", "WI")),
    "southwest": ("Southwest", ("AZ", "NM", "OK", "TX")),
    "west": ("West", ("CA", "CO", "ID", "MT", "NV", "OR", "UT", "WA", "WY")),
    "alaska": ("Alaska", ("AK",)),
    "hawaii": ("Hawaii", ("HI",)),
}

# Popular airports for the default view (fast initial load)
DEFAULT_AIRPORTS: Tuple[str, ...] = (
    "KJFK", "KLAX", "KORD", "KATL", "KDFW",
    "KDEN", "KSFO", "KLAS", "KMIA", "KSEA",
    "KBOS", "KMSP", "KDTW", "KPHL", "KPHX",
    "KIAH", "KMCO", "KEWR", "KSLC", "KSAN",
)


class GeoReference:
    """
    Read-only lookup of states, regions and default airports.

    Built once at startup and shared by reference. Lookups are
    case-insensitive; unknown keys return None.
    """

    def __init__(
        self,
        states: Mapping[str, State],
        regions: Mapping[str, Region],
        default_airports: Sequence[str],
    ):
        self._states = MappingProxyType(dict(states))
        self._regions = MappingProxyType(dict(regions))
        self._default_airports = tuple(default_airports)

    @property
    def states(self) -> Mapping[str, State]:
        return self._states

    @property
    def regions(self) -> Mapping[str, Region]:
        return self._regions

    @property
    def default_airports(self) -> Tuple[str, ...]:
        return self._default_airports

    def state(self, code: str) -> Optional[State]:
        return self._states.get(code.strip().upper())

    def region(self, key: str) -> Optional[Region]:
        return self._regions.get(key.strip().lower())

    def known_states(self, codes: Iterable[str]) -> List[State]:
        """Resolve state codes in input order, dropping unknown ones."""
        found = []
        for code in codes:
            state = self.state(code)
            if state is not None:
                found.append(state)
        return found

    def combine_state_bboxes(self, codes: Iterable[str]) -> Optional[BoundingBox]:
        """Box enclosing every known state; None if no code is known."""
        return BoundingBox.enclosing(s.bbox for s in self.known_states(codes))

    def airports_for_states(self, codes: Iterable[str]) -> List[str]:
        """Concatenated airport lists of known states, first occurrence kept."""
        seen = set()
        airports = []
        for state in self.known_states(codes):
            for icao in state.airports:
                if icao not in seen:
                    seen.add(icao)
                    airports.append(icao)
        return airports


def build_reference(
    state_table: Mapping[str, Tuple[str, Tuple[float, float, float, float], Tuple[str, ...]]] = STATE_TABLE,
    region_table: Mapping[str, Tuple[str, Tuple[str, ...]]] = REGION_TABLE,
    default_airports: Sequence[str] = DEFAULT_AIRPORTS,
) -> GeoReference:
    """
    Build a GeoReference from raw tables.

    Raises:
        ValueError: If a region references a state missing from the table
    """
    states = {
        code.upper(): State(
            code=code.upper(),
            name=name,
            bbox=BoundingBox(*bbox),
            airports=tuple(a.upper() for a in airports),
        )
        for code, (name, bbox, airports) in state_table.items()
    }

    regions = {}
    for key, (name, members) in region_table.items():
        missing = [code for code in members if code.upper() not in states]
        if missing:
            raise ValueError(f"Region {key!r} references unknown states: {', '.join(missing)}")
        member_codes = tuple(code.upper() for code in members)
        regions[key.lower()] = Region(
            key=key.lower(),
            name=name,
            states=member_codes,
            bbox=BoundingBox.enclosing(states[code].bbox for code in member_codes),
        )

    return GeoReference(states, regions, default_airports)


# Singleton instance
_reference: Optional[GeoReference] = None


def get_reference() -> GeoReference:
    """Get or build the process-wide GeoReference."""
    global _reference
    if _reference is None:
        _reference = build_reference()
    return _reference
