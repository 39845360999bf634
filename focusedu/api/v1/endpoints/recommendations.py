"""Course and video recommendation endpoints."""

import asyncio
import logging
from typing import Annotated, Literal

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, ConfigDict, Field

from focusedu.api.deps import get_course_advisor, get_youtube_client
from focusedu.services.course_advisor import Course, CourseAdvisor, StarredCourse
from focusedu.services.youtube import YouTubeClient, YouTubeVideo

router = APIRouter()
logger = logging.getLogger(__name__)

SkillLevel = Literal["beginner", "intermediate", "advanced"]


class RecommendationRequest(BaseModel):
    """Request for learning recommendations."""

    topic: str = ""
    skill_level: SkillLevel = Field("beginner", alias="skillLevel")
    history: list[str] = Field(default_factory=list)
    starred_courses: list[StarredCourse] = Field(
        default_factory=list, alias="starredCourses"
    )

    model_config = ConfigDict(populate_by_name=True)


class RecommendationResponse(BaseModel):
    """YouTube videos plus AI-suggested courses."""

    youtube_videos: list[YouTubeVideo]
    udemy_courses: list[Course]
    ai_insights: str


@router.post("", response_model=RecommendationResponse)
async def get_recommendations(
    request: RecommendationRequest,
    youtube: Annotated[YouTubeClient, Depends(get_youtube_client)],
    advisor: Annotated[CourseAdvisor, Depends(get_course_advisor)],
) -> RecommendationResponse:
    """Fetch videos and AI course suggestions for a topic concurrently."""
    topic = request.topic.strip()
    if not topic:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Topic is required",
        )

    try:
        videos, recommendations = await asyncio.gather(
            youtube.search_videos(topic, request.skill_level),
            advisor.recommend(
                topic,
                request.skill_level,
                history=request.history,
                starred_courses=request.starred_courses,
            ),
        )
    except Exception as e:
        logger.exception("Recommendation request failed")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch recommendations",
        ) from e

    return RecommendationResponse(
        youtube_videos=videos,
        udemy_courses=recommendations.courses,
        ai_insights=recommendations.insights,
    )
