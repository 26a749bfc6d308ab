"""
Base adapter for upstream JSON APIs.

The base adapter provides:
- A lazily created ``httpx.AsyncClient`` with an explicit per-adapter timeout
- Uniform error mapping (timeouts, network errors, HTTP status, bad JSON)
- Success/failure metrics labelled with the adapter name

No retries and no caching: every call goes to the upstream provider once.

Usage:
    class CustomAdapter(BaseAPIAdapter):
        name = "custom"

        def __init__(self, client=None):
            super().__init__("https://api.example.com", timeout=5.0, client=client)

        async def fetch_thing(self):
            return await self._get_json("/thing")
"""
from typing import Any, Dict, Optional

import httpx

from hoopforecast.core.exceptions import ParseError, UpstreamTransportError
from hoopforecast.core.logging import get_logger
from hoopforecast.core.metrics import record_upstream_failure, record_upstream_success

logger = get_logger(__name__)

DEFAULT_HEADERS = {
    "User-Agent": "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7)",
    "Accept": "application/json",
}


class BaseAPIAdapter:
    """
    Base class for adapters that fetch JSON from one upstream provider.

    Attributes:
        name: Adapter name used in error messages and metric labels
        base_url: Prefix for relative request paths
        timeout: Request timeout in seconds
    """

    name = "upstream"

    def __init__(
        self,
        base_url: str,
        timeout: float,
        headers: Optional[Dict[str, str]] = None,
        client: Optional[httpx.AsyncClient] = None
    ):
        """
        Initialize the adapter.

        Args:
            base_url: Provider base URL
            timeout: Request timeout in seconds
            headers: Extra headers sent with every request
            client: Pre-built client (tests inject one backed by MockTransport)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.headers = {**DEFAULT_HEADERS, **(headers or {})}
        self._client = client

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            limits = httpx.Limits(max_keepalive_connections=5, max_connections=10)
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout),
                limits=limits,
                headers=self.headers,
            )
        return self._client

    async def close(self):
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    def _url(self, path: str) -> str:
        if path.startswith("http://") or path.startswith("https://"):
            return path
        return f"{self.base_url}/{path.lstrip('/')}"

    async def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> httpx.Response:
        """
        GET a path and return the response, raising on any transport failure.

        Raises:
            UpstreamTransportError: timeout, network error or non-2xx status
        """
        url = self._url(path)
        client = await self._get_client()

        try:
            response = await client.get(url, params=params, headers=self.headers, timeout=self.timeout)
            response.raise_for_status()
        except httpx.TimeoutException as e:
            record_upstream_failure(self.name, "timeout")
            logger.warning(f"[{self.name}] Timed out after {self.timeout}s: {url}")
            raise UpstreamTransportError(
                self.name, f"timed out after {self.timeout}s", timed_out=True
            ) from e
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            record_upstream_failure(self.name, f"http_{status}")
            logger.warning(f"[{self.name}] HTTP {status} from {url}")
            raise UpstreamTransportError(self.name, f"HTTP {status}", status=status) from e
        except httpx.RequestError as e:
            record_upstream_failure(self.name, "network")
            logger.warning(f"[{self.name}] Request failed for {url}: {e}")
            raise UpstreamTransportError(self.name, f"request failed: {e}") from e

        return response

    async def _get_json(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """
        GET a path and decode its JSON body.

        Raises:
            UpstreamTransportError: transport failure
            ParseError: body is not valid JSON
        """
        response = await self._get(path, params)
        try:
            data = response.json()
        except ValueError as e:
            record_upstream_failure(self.name, "parse")
            raise ParseError(self.name, f"invalid JSON ({e})") from e

        record_upstream_success(self.name)
        return data
