# Ingestion module - upstream METAR fetching
from .http import HttpClient, HttpClientError, HttpStatusError, HttpTimeoutError, fetch_with_retry
from .batch import BatchResult, ChunkOutcome, chunk_ids, MAX_IDS_PER_REQUEST
from .cache import ResponseCache
from .aviationweather import AviationWeatherClient, UpstreamUnavailable

__all__ = [
    "HttpClient",
    "HttpClientError",
    "HttpStatusError",
    "HttpTimeoutError",
    "fetch_with_retry",
    "BatchResult",
    "ChunkOutcome",
    "chunk_ids",
    "MAX_IDS_PER_REQUEST",
    "ResponseCache",
    "AviationWeatherClient",
    "UpstreamUnavailable",
]
