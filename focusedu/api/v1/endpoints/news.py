"""Technology news proxy."""

import logging
from typing import Annotated, Any

import httpx
from fastapi import APIRouter, Depends, HTTPException, status

from focusedu.api.deps import get_news_client
from focusedu.services.news import NewsClient, NewsParseError

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("")
async def latest_news(
    news: Annotated[NewsClient, Depends(get_news_client)],
) -> dict[str, Any]:
    """Latest English technology headlines from NewsData.io."""
    try:
        return await news.latest_technology_news()
    except NewsParseError as e:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=str(e),
        ) from e
    except httpx.HTTPError as e:
        logger.error(f"News API error: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(e) or "News API request failed",
        ) from e
