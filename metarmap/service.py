# metarmap/service.py
"""
One query cycle: resolve -> fetch -> normalize.

Error policy:
- InvalidInput: raised by the resolver before any upstream call
- UpstreamUnavailable: raised only when every upstream call failed;
  partial failures are logged and the surviving chunks are returned
- NoDataFound: an explicit identifier search returned nothing
"""

from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from .geo.reference import GeoReference, get_reference
from .ingestion.aviationweather import AviationWeatherClient, UpstreamUnavailable
from .ingestion.batch import BatchResult, ChunkOutcome
from .logging import get_logger
from .observations.normalize import MetarObservation, normalize_payload
from .query.models import QueryKind, QuerySpec, ResolvedQuery
from .query.resolver import QueryResolver
from .settings import Settings, settings as default_settings

logger = get_logger(__name__)


class NoDataFound(Exception):
    """An identifier search resolved and fetched fine but matched nothing."""

    def __init__(self, ids: Sequence[str]):
        self.ids = list(ids)
        super().__init__(f"No data found for {','.join(self.ids)}")


@dataclass
class CycleResult:
    """Observations of one cycle plus what it took to get them."""
    query: ResolvedQuery
    observations: List[MetarObservation]
    batch: BatchResult = field(default_factory=BatchResult)

    @property
    def failures(self) -> List[ChunkOutcome]:
        return self.batch.failures

    @property
    def partial(self) -> bool:
        return bool(self.batch.failures)


class MetarService:
    """
    Resolves a query, fetches METARs and normalizes the result.

    Usage:
        service = get_service()
        result = service.run(query_from_params(ids="KJFK,KORD"))
    """

    def __init__(self, resolver: QueryResolver, client: AviationWeatherClient):
        self.resolver = resolver
        self.client = client

    @property
    def reference(self) -> GeoReference:
        return self.resolver.reference

    def run(self, query: QuerySpec) -> CycleResult:
        """
        Run a full cycle.

        Raises:
            InvalidInput: Query cannot be resolved
            UpstreamUnavailable: Every upstream call failed
            NoDataFound: Identifier search with no results
        """
        resolved = self.resolver.resolve(query)
        batch = self.client.fetch(resolved)

        if batch.all_failed:
            raise UpstreamUnavailable(
                f"Weather service unavailable ({batch.failure_summary()})",
                failures=batch.failures,
            )

        if batch.failures:
            logger.warning(
                "metar_partial_result",
                query_kind=resolved.kind.value,
                chunks=batch.chunk_count,
                failed_chunks=len(batch.failures),
            )

        observations = normalize_payload(batch.records, us_only=resolved.us_only)

        if not observations and resolved.kind == QueryKind.IDENTIFIERS:
            raise NoDataFound(resolved.ids)

        return CycleResult(query=resolved, observations=observations, batch=batch)


def build_service(config: Optional[Settings] = None) -> MetarService:
    """Wire resolver and client from settings."""
    config = config or default_settings
    resolver = QueryResolver(get_reference(), state_resolution=config.state_resolution)
    client = AviationWeatherClient(
        base_url=config.awc_base_url,
        timeout=config.upstream_timeout_seconds,
        user_agent=config.user_agent,
        cache_max_age=config.cache_max_age_seconds,
        cache_max_entries=config.cache_max_entries,
        max_ids_per_request=config.max_ids_per_request,
        max_parallel_chunks=config.max_parallel_chunks,
    )
    return MetarService(resolver, client)


# Singleton instance
_service: Optional[MetarService] = None


def get_service() -> MetarService:
    """Get or create the process-wide MetarService."""
    global _service
    if _service is None:
        _service = build_service()
    return _service
