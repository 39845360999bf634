"""NewsData.io client for technology headlines."""

import json
import logging
import time
from typing import Any

import httpx

from focusedu.core.config import Settings, get_settings
from focusedu.observability import get_metrics_backend

logger = logging.getLogger(__name__)

LATEST_NEWS_URL = "https://newsdata.io/api/1/latest"


class NewsParseError(Exception):
    """Raised when the news API returns a body that is not valid JSON."""


class NewsClient:
    """Fetches the latest technology news."""

    def __init__(
        self,
        settings: Settings | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self._client = client

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(timeout=self.settings.http_timeout_seconds)
        return self._client

    async def close(self) -> None:
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()

    async def latest_technology_news(self) -> dict[str, Any]:
        """Return the raw NewsData.io payload.

        Raises:
            NewsParseError: If the response body is not valid JSON.
            httpx.HTTPError: On transport failures.
        """
        params = {
            "apikey": self.settings.newsdata_api_key or "",
            "category": "technology",
            "language": "en",
        }

        metrics = get_metrics_backend()
        start_time = time.perf_counter()
        status_code = 500
        try:
            client = await self._get_client()
            response = await client.get(LATEST_NEWS_URL, params=params)
            status_code = response.status_code
        finally:
            duration_ms = (time.perf_counter() - start_time) * 1000
            metrics.observe_external_api("newsdata", "latest", status_code, duration_ms)

        text = response.text
        if not text:
            return {}
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            logger.error(f"Failed to parse News API response: {e}")
            raise NewsParseError("Invalid response from News API") from e

        if not isinstance(data, dict):
            raise NewsParseError("Invalid response from News API")
        return data
