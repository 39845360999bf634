"""Tests for the technology news proxy."""

from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
from httpx import AsyncClient

from focusedu.api.deps import get_news_client
from focusedu.core.config import Settings
from focusedu.services.news import NewsClient, NewsParseError


def _news_client(handler) -> NewsClient:
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return NewsClient(Settings(newsdata_api_key="news-key"), client=http)


class TestNewsClient:
    """Tests for NewsClient."""

    async def test_returns_payload_and_sends_filters(self):
        captured: dict = {}

        def handler(request: httpx.Request) -> httpx.Response:
            captured.update(request.url.params)
            return httpx.Response(200, json={"status": "success", "results": [{"title": "AI"}]})

        news = _news_client(handler)

        data = await news.latest_technology_news()

        assert data["results"][0]["title"] == "AI"
        assert captured == {"apikey": "news-key", "category": "technology", "language": "en"}
        await news.close()

    async def test_empty_body_returns_empty_dict(self):
        news = _news_client(lambda request: httpx.Response(200, content=b""))

        assert await news.latest_technology_news() == {}
        await news.close()

    async def test_invalid_json_raises(self):
        news = _news_client(lambda request: httpx.Response(200, content=b"<html>"))

        with pytest.raises(NewsParseError):
            await news.latest_technology_news()
        await news.close()


class TestNewsEndpoint:
    """Tests for GET /api/v1/news."""

    @pytest.fixture
    def news(self, app):
        news = MagicMock(spec=NewsClient)
        news.latest_technology_news = AsyncMock(return_value={"results": []})
        app.dependency_overrides[get_news_client] = lambda: news
        return news

    async def test_proxies_payload(self, client: AsyncClient, news):
        response = await client.get("/api/v1/news")

        assert response.status_code == 200
        assert response.json() == {"results": []}

    async def test_invalid_upstream_json_returns_502(self, client: AsyncClient, news):
        news.latest_technology_news.side_effect = NewsParseError("Invalid response from News API")

        response = await client.get("/api/v1/news")

        assert response.status_code == 502
        assert response.json() == {"detail": "Invalid response from News API"}

    async def test_transport_error_returns_500(self, client: AsyncClient, news):
        news.latest_technology_news.side_effect = httpx.ConnectError("unreachable")

        response = await client.get("/api/v1/news")

        assert response.status_code == 500
