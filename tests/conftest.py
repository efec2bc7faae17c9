# tests/conftest.py
"""
Pytest configuration and fixtures.

No test touches the network: upstream calls go through FakeUpstream,
which answers from canned records and can fail chosen calls.
"""

from typing import Any, Callable, Dict, List, Optional

import pytest

from metarmap.geo.reference import build_reference
from metarmap.ingestion.aviationweather import AviationWeatherClient
from metarmap.ingestion.cache import ResponseCache
from metarmap.ingestion.http import HttpStatusError
from metarmap.query.resolver import QueryResolver
from metarmap.service import MetarService


def make_record(icao: str, **overrides: Any) -> Dict[str, Any]:
    """Upstream-shaped METAR record."""
    record = {
        "icaoId": icao,
        "name": f"{icao} Airport",
        "lat": 40.0,
        "lon": -75.0,
        "temp": 12.2,
        "dewp": 5.6,
        "wdir": 270,
        "wspd": 10,
        "wgst": None,
        "visib": "10+",
        "altim": 1013.2,
        "fltCat": "VFR",
        "rawOb": f"{icao} 121651Z 27010KT 10SM FEW250 12/06 A2992",
        "obsTime": 1700000000,
        "clouds": [{"cover": "FEW", "base": 25000}],
    }
    record.update(overrides)
    return record


class FakeUpstream:
    """
    Stand-in for HttpClient.

    Answers `ids` requests with one record per requested id, and `bbox`
    requests with `bbox_records`. Calls listed in `fail_calls` (0-based
    call numbers) raise HttpStatusError(503).
    """

    def __init__(
        self,
        bbox_records: Optional[List[Dict[str, Any]]] = None,
        fail_calls: Optional[set] = None,
        fail_when: Optional[Callable[[Dict[str, Any]], bool]] = None,
        payload: Any = None,
    ):
        self.bbox_records = bbox_records or []
        self.fail_calls = fail_calls or set()
        self.fail_when = fail_when
        self.payload = payload
        self.calls: List[Dict[str, Any]] = []

    def get_json(self, path: str = "", params: Optional[Dict[str, Any]] = None, headers=None) -> Any:
        params = dict(params or {})
        call_number = len(self.calls)
        self.calls.append(params)

        if call_number in self.fail_calls or (self.fail_when and self.fail_when(params)):
            raise HttpStatusError(503, "Service Unavailable")

        if self.payload is not None:
            return self.payload
        if "bbox" in params:
            return list(self.bbox_records)
        return [make_record(icao) for icao in params["ids"].split(",")]


@pytest.fixture
def reference():
    return build_reference()


@pytest.fixture
def resolver(reference):
    return QueryResolver(reference)


@pytest.fixture
def upstream():
    return FakeUpstream()


def make_client(upstream: FakeUpstream, **kwargs: Any) -> AviationWeatherClient:
    """Client over a fake upstream with caching disabled."""
    kwargs.setdefault("cache", ResponseCache(ttl_seconds=0))
    return AviationWeatherClient(http_client=upstream, **kwargs)


@pytest.fixture
def client(upstream):
    return make_client(upstream, max_parallel_chunks=1)


@pytest.fixture
def service(resolver, client):
    return MetarService(resolver, client)
