# metarmap/ingestion/aviationweather.py
"""
AviationWeather.gov METAR fetching.

Source:
- METAR: https://aviationweather.gov/api/data/metar?ids={icao,...}&format=json
         https://aviationweather.gov/api/data/metar?bbox={s,w,n,e}&format=json

Identifier lists are split into chunks of at most 50 ids and fetched in
parallel. A chunk that fails (timeout, network error, non-2xx) is logged
and contributes nothing; the remaining chunks still count. Bounding box
queries are always a single call.
"""

from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, List, Optional, Sequence, Tuple

from ..geo.reference import BoundingBox
from ..logging import get_ingestion_logger
from ..query.models import ResolvedQuery
from .batch import MAX_IDS_PER_REQUEST, BatchResult, ChunkOutcome, chunk_ids
from .cache import DEFAULT_MAX_ENTRIES, ResponseCache
from .http import DEFAULT_MAX_ATTEMPTS, HttpClient, HttpClientError, HttpStatusError

logger = get_ingestion_logger()

# AviationWeather API endpoint
METAR_URL = "https://aviationweather.gov/api/data/metar"

DEFAULT_USER_AGENT = "metarmap/0.1.0"
CACHE_MAX_AGE_SECONDS = 300


class UpstreamUnavailable(HttpClientError):
    """Raised when no upstream call of a batch succeeded."""

    def __init__(self, message: str, failures: Optional[List[ChunkOutcome]] = None):
        self.failures = failures or []
        super().__init__(message)


class AviationWeatherClient:
    """
    Client for the AviationWeather.gov METAR endpoint.

    Returns raw upstream records; normalization happens elsewhere.

    Usage:
        client = AviationWeatherClient()
        result = client.fetch_ids(["KJFK", "KORD"])
        records = result.records
    """

    def __init__(
        self,
        base_url: str = METAR_URL,
        timeout: float = 10.0,
        user_agent: str = DEFAULT_USER_AGENT,
        cache_max_age: int = CACHE_MAX_AGE_SECONDS,
        cache_max_entries: int = DEFAULT_MAX_ENTRIES,
        max_ids_per_request: int = MAX_IDS_PER_REQUEST,
        max_parallel_chunks: int = 4,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        http_client: Optional[HttpClient] = None,
        cache: Optional[ResponseCache] = None,
    ):
        self.max_ids_per_request = max_ids_per_request
        self.max_parallel_chunks = max(1, max_parallel_chunks)
        self.client = http_client or HttpClient(
            base_url=base_url,
            timeout=timeout,
            headers={
                "User-Agent": user_agent,
                "Accept": "application/json",
                "Cache-Control": f"max-age={cache_max_age}",
            },
            max_attempts=max_attempts,
        )
        self.cache = cache if cache is not None else ResponseCache(
            ttl_seconds=cache_max_age, max_entries=cache_max_entries,
        )

    def fetch(self, query: ResolvedQuery) -> BatchResult:
        """Fetch records for a resolved query (box or identifier list)."""
        if query.bbox is not None:
            return self.fetch_bbox(query.bbox)
        return self.fetch_ids(query.ids)

    def fetch_bbox(self, bbox: BoundingBox) -> BatchResult:
        """Fetch all stations inside a box with a single call."""
        result = BatchResult()
        result.add(self._fetch_chunk(0, (), {"bbox": bbox.as_param(), "format": "json"}))
        self._log_batch(result)
        return result

    def fetch_ids(self, ids: Sequence[str]) -> BatchResult:
        """
        Fetch METARs for identifiers in chunks.

        Args:
            ids: ICAO codes, already normalized

        Returns:
            BatchResult with one outcome per chunk, in chunk order
        """
        result = BatchResult()
        chunks = chunk_ids(list(ids), self.max_ids_per_request)
        if not chunks:
            return result

        if len(chunks) == 1:
            result.add(self._fetch_ids_chunk(0, chunks[0]))
        else:
            # Chunks are independent; each call opens its own httpx client.
            workers = min(self.max_parallel_chunks, len(chunks))
            with ThreadPoolExecutor(max_workers=workers) as executor:
                futures = [
                    executor.submit(self._fetch_ids_chunk, index, chunk)
                    for index, chunk in enumerate(chunks)
                ]
                for index, future in enumerate(futures):
                    try:
                        result.add(future.result())
                    except Exception as e:
                        # _fetch_chunk handles client errors; anything else still
                        # only costs this chunk
                        logger.warning(
                            "metar_chunk_failed",
                            chunk_index=index,
                            ids=",".join(chunks[index]),
                            error=f"Parallel fetch error: {e}",
                        )
                        result.add(ChunkOutcome(
                            index=index,
                            ids=chunks[index],
                            success=False,
                            error=f"Parallel fetch error: {e}",
                        ))

        self._log_batch(result)
        return result

    def _fetch_ids_chunk(self, index: int, ids: Tuple[str, ...]) -> ChunkOutcome:
        return self._fetch_chunk(index, ids, {"ids": ",".join(ids), "format": "json"})

    def _fetch_chunk(self, index: int, ids: Tuple[str, ...], params: Dict[str, Any]) -> ChunkOutcome:
        cached = self.cache.get(params)
        if cached is not None:
            return ChunkOutcome(index=index, ids=ids, success=True, records=list(cached))

        try:
            payload = self.client.get_json(params=params)
        except HttpClientError as e:
            logger.warning(
                "metar_chunk_failed",
                chunk_index=index,
                ids=params.get("ids") or params.get("bbox"),
                error=str(e),
            )
            return ChunkOutcome(
                index=index,
                ids=ids,
                success=False,
                error=str(e),
                status_code=e.status_code if isinstance(e, HttpStatusError) else None,
            )

        records = self._as_records(payload, params)
        self.cache.put(params, records)
        return ChunkOutcome(index=index, ids=ids, success=True, records=list(records))

    @staticmethod
    def _as_records(payload: Any, params: Dict[str, Any]) -> List[Dict[str, Any]]:
        """Upstream returns a JSON array; anything else counts as no records."""
        if payload is None:
            return []
        if not isinstance(payload, list):
            logger.warning(
                "metar_unexpected_payload",
                payload_type=type(payload).__name__,
                params=params,
            )
            return []
        return payload

    @staticmethod
    def _log_batch(result: BatchResult) -> None:
        logger.info(
            "metar_batch_complete",
            chunks=result.chunk_count,
            failed_chunks=len(result.failures),
            records=len(result.records),
        )
