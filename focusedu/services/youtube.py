"""YouTube Data API client for tutorial video search."""

import logging
import time
from typing import Optional

import httpx
from pydantic import BaseModel

from focusedu.core.config import Settings, get_settings
from focusedu.observability import get_metrics_backend

logger = logging.getLogger(__name__)

SEARCH_URL = "https://www.googleapis.com/youtube/v3/search"

LEVEL_PREFIXES = {
    "beginner": "tutorial for beginners",
    "intermediate": "intermediate guide",
    "advanced": "advanced concepts",
}
DEFAULT_LEVEL_PREFIX = "tutorial"


class YouTubeVideo(BaseModel):
    """A single video search result."""

    id: str
    title: str
    description: str
    thumbnail: Optional[str] = None
    channel_title: str
    published_at: str
    url: str


def build_search_query(topic: str, skill_level: str) -> str:
    """Combine the topic with a skill-level specific phrase."""
    return f"{topic} {LEVEL_PREFIXES.get(skill_level, DEFAULT_LEVEL_PREFIX)}"


def parse_search_items(items: list[dict]) -> list[YouTubeVideo]:
    """Map YouTube search items to YouTubeVideo models."""
    videos: list[YouTubeVideo] = []
    for item in items:
        snippet = item["snippet"]
        thumbnails = snippet.get("thumbnails", {})
        thumbnail = (thumbnails.get("high") or thumbnails.get("medium") or {}).get("url")
        video_id = item["id"]["videoId"]
        videos.append(
            YouTubeVideo(
                id=video_id,
                title=snippet["title"],
                description=snippet.get("description", ""),
                thumbnail=thumbnail,
                channel_title=snippet.get("channelTitle", ""),
                published_at=snippet.get("publishedAt", ""),
                url=f"https://www.youtube.com/watch?v={video_id}",
            )
        )
    return videos


class YouTubeClient:
    """Searches YouTube for tutorial videos."""

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

    async def search_videos(self, topic: str, skill_level: str) -> list[YouTubeVideo]:
        """Search medium-length embeddable videos for a topic.

        Returns an empty list on any failure.
        """
        params = {
            "part": "snippet",
            "q": build_search_query(topic, skill_level),
            "type": "video",
            "maxResults": self.settings.youtube_max_results,
            "order": "relevance",
            "videoDuration": "medium",
            "videoEmbeddable": "true",
            "key": self.settings.youtube_api_key or "",
        }

        metrics = get_metrics_backend()
        start_time = time.perf_counter()
        status_code = 500
        try:
            client = await self._get_client()
            response = await client.get(SEARCH_URL, params=params)
            status_code = response.status_code
            response.raise_for_status()
            return parse_search_items(response.json().get("items", []))
        except Exception as e:
            logger.error(f"YouTube API error: {e}")
            return []
        finally:
            duration_ms = (time.perf_counter() - start_time) * 1000
            metrics.observe_external_api("youtube", "search", status_code, duration_ms)
