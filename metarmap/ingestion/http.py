# metarmap/ingestion/http.py
"""
HTTP client with retry logic for upstream API calls.

Uses httpx for HTTP and tenacity for retries. Only transient failures
(timeouts, connection errors, 429 and 5xx responses) are retried; other
4xx responses fail immediately.
"""

from typing import Any, Dict, Optional

import httpx
from tenacity import (
    retry,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

# Default timeout for HTTP requests (seconds)
DEFAULT_TIMEOUT = 10.0

# Default retry configuration
DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_WAIT_MIN = 1
DEFAULT_WAIT_MAX = 10


class HttpClientError(Exception):
    """Base exception for HTTP client errors."""
    pass


class HttpTimeoutError(HttpClientError):
    """Raised when request times out."""
    pass


class HttpNetworkError(HttpClientError):
    """Raised when the connection fails before a response arrives."""
    pass


class HttpStatusError(HttpClientError):
    """Raised when response has non-2xx status."""
    def __init__(self, status_code: int, message: str):
        self.status_code = status_code
        super().__init__(f"HTTP {status_code}: {message}")


def _is_transient(exc: BaseException) -> bool:
    if isinstance(exc, httpx.TransportError):
        return True
    if isinstance(exc, httpx.HTTPStatusError):
        status = exc.response.status_code
        return status == 429 or status >= 500
    return False


@retry(
    stop=stop_after_attempt(DEFAULT_MAX_ATTEMPTS),
    wait=wait_exponential(
        multiplier=1,
        min=DEFAULT_WAIT_MIN,
        max=DEFAULT_WAIT_MAX
    ),
    retry=retry_if_exception(_is_transient),
    reraise=True,
)
def _fetch_with_retry_inner(
    url: str,
    method: str = "GET",
    params: Optional[Dict[str, Any]] = None,
    headers: Optional[Dict[str, str]] = None,
    timeout: float = DEFAULT_TIMEOUT,
    transport: Optional[httpx.BaseTransport] = None,
) -> httpx.Response:
    """
    Inner retry function - lets exceptions bubble for tenacity to catch and retry.
    """
    with httpx.Client(timeout=timeout, transport=transport) as client:
        response = client.request(
            method=method,
            url=url,
            params=params,
            headers=headers,
        )
        response.raise_for_status()
        return response


def fetch_with_retry(
    url: str,
    method: str = "GET",
    params: Optional[Dict[str, Any]] = None,
    headers: Optional[Dict[str, str]] = None,
    timeout: float = DEFAULT_TIMEOUT,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    transport: Optional[httpx.BaseTransport] = None,
) -> httpx.Response:
    """
    Fetch URL with automatic retry on transient failures.

    Args:
        url: URL to fetch
        method: HTTP method
        params: Query parameters
        headers: HTTP headers
        timeout: Request timeout in seconds
        max_attempts: Total attempts including the first
        transport: Optional httpx transport (tests inject a MockTransport)

    Returns:
        httpx.Response object

    Raises:
        HttpTimeoutError: After all retries exhausted due to timeout
        HttpNetworkError: After all retries exhausted due to connection failure,
            or a request that failed otherwise (e.g. undecodable body)
        HttpStatusError: On a non-retryable status, or after retries exhausted
    """
    fetch = _fetch_with_retry_inner
    if max_attempts != DEFAULT_MAX_ATTEMPTS:
        fetch = _fetch_with_retry_inner.retry_with(stop=stop_after_attempt(max_attempts))

    try:
        # Exceptions only reach here AFTER all retries are exhausted
        return fetch(url, method, params, headers, timeout, transport)
    except httpx.TimeoutException as e:
        raise HttpTimeoutError(f"Timeout fetching {url} after {max_attempts} attempts: {e}") from e
    except httpx.HTTPStatusError as e:
        raise HttpStatusError(e.response.status_code, f"HTTP error fetching {url}: {e}") from e
    except httpx.TransportError as e:
        raise HttpNetworkError(f"Network error fetching {url}: {e}") from e
    except httpx.RequestError as e:
        # e.g. DecodingError for a corrupt compressed body; not retried
        raise HttpNetworkError(f"Request error fetching {url}: {e}") from e


class HttpClient:
    """
    HTTP client for upstream API calls.

    Every request carries the client's default headers (client identifier,
    cache freshness) merged with any per-call headers.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT,
        headers: Optional[Dict[str, str]] = None,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        """
        Initialize HTTP client.

        Args:
            base_url: Base URL for all requests
            timeout: Default timeout in seconds
            headers: Default headers for all requests
            max_attempts: Attempts per request for transient failures
            transport: Optional httpx transport
        """
        self.base_url = base_url or ""
        self.timeout = timeout
        self.headers = headers or {}
        self.max_attempts = max_attempts
        self.transport = transport

    def get(
        self,
        path: str = "",
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> httpx.Response:
        """GET request with retry."""
        url = f"{self.base_url}{path}" if self.base_url else path
        merged_headers = {**self.headers, **(headers or {})}
        return fetch_with_retry(
            url=url,
            method="GET",
            params=params,
            headers=merged_headers,
            timeout=self.timeout,
            max_attempts=self.max_attempts,
            transport=self.transport,
        )

    def get_json(
        self,
        path: str = "",
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> Any:
        """
        GET request returning parsed JSON.

        An empty body parses as None.

        Raises:
            HttpClientError: If the body is not valid JSON
        """
        response = self.get(path, params, headers)
        if not response.content.strip():
            return None
        try:
            return response.json()
        except ValueError as e:
            raise HttpClientError(f"Invalid JSON response: {e}") from e
