"""AI course advisor and resume reviewer (OpenAI chat completions)."""

import json
import logging
import time
from typing import Any, Optional
from urllib.parse import quote

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from focusedu.core.ai_constants import (
    AI_RECOMMENDATIONS_UNAVAILABLE,
    COURSE_ADVISOR_SYSTEM_PROMPT,
    RECOMMENDED_COURSE_COUNT,
    RESUME_REVIEWER_SYSTEM_PROMPT,
)
from focusedu.core.config import Settings, get_settings
from focusedu.observability import get_metrics_backend

logger = logging.getLogger(__name__)


class AIServiceError(Exception):
    """Raised when the AI completion call fails."""


class Course(BaseModel):
    """AI-suggested course."""

    id: str
    title: str
    description: str = ""
    instructor: str = ""
    level: str = ""
    url: str = ""
    rating: Optional[float] = None
    is_ai_generated: bool = Field(True, alias="isAiGenerated")

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> Any:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value


class StarredCourse(BaseModel):
    """A course the user starred in the browser."""

    id: str
    title: str
    type: str = "udemy"  # youtube | udemy


class CourseRecommendations(BaseModel):
    """Parsed course recommendations."""

    courses: list[Course] = Field(default_factory=list)
    insights: str = ""


# Left unescaped in query components; "/" is escaped
URL_COMPONENT_SAFE = "!'()*"


def udemy_search_url(topic: str) -> str:
    return f"https://www.udemy.com/courses/search/?q={quote(topic, safe=URL_COMPONENT_SAFE)}"


def build_recommendation_prompt(
    topic: str,
    skill_level: str,
    history: list[str],
    starred_courses: list[StarredCourse],
) -> str:
    """Build the user prompt for course recommendations."""
    history_context = (
        f"The user has recently searched for: {', '.join(history)}." if history else ""
    )
    starred_context = (
        "The user has starred courses related to: "
        f"{', '.join(c.title for c in starred_courses)}."
        if starred_courses
        else ""
    )

    return f"""
As an education advisor, recommend {RECOMMENDED_COURSE_COUNT} Udemy courses for learning "{topic}" at {skill_level} level.

Context:
{history_context}
{starred_context}

Provide your response as a JSON object with this exact structure:
{{
  "courses": [
    {{
      "id": "unique-id-1",
      "title": "Course Title",
      "description": "Brief 2-sentence description of what the course covers",
      "instructor": "Typical instructor expertise (e.g., 'Industry Expert' or 'Senior Developer')",
      "level": "{skill_level}",
      "url": "{udemy_search_url(topic)}",
      "rating": 4.5,
      "isAiGenerated": true
    }}
  ],
  "insights": "A brief 2-3 sentence personalized insight about the user's learning path based on their topic, skill level, and history."
}}

Important:
- All URLs should point to Udemy's search page for the topic since we don't have direct course links
- Make recommendations realistic and relevant to {skill_level} learners
- Course titles should sound professional and realistic
- If user history shows progression, acknowledge that in insights
- Keep descriptions concise and actionable
""".strip()


def parse_recommendations(raw: str | None) -> CourseRecommendations:
    """Parse the model's JSON answer into CourseRecommendations."""
    data: dict[str, Any] = json.loads(raw or "{}")
    courses = []
    for index, item in enumerate(data.get("courses") or []):
        try:
            courses.append(Course.model_validate(item))
        except ValidationError as e:
            logger.warning(f"Skipping invalid course #{index}: {e.error_count()} validation errors")
    return CourseRecommendations(courses=courses, insights=data.get("insights") or "")


class CourseAdvisor:
    """Generates course recommendations and resume reviews."""

    def __init__(self, settings: Settings | None = None, client: Any = None) -> None:
        self.settings = settings or get_settings()
        self._client = client

    def _get_client(self) -> Any:
        if self._client is None:
            from openai import AsyncOpenAI

            self._client = AsyncOpenAI(api_key=self.settings.openai_api_key)
        return self._client

    async def _complete(
        self,
        operation: str,
        messages: list[dict[str, str]],
        **kwargs: Any,
    ) -> str | None:
        metrics = get_metrics_backend()
        start_time = time.perf_counter()
        status_code = 500
        try:
            response = await self._get_client().chat.completions.create(
                model=self.settings.openai_model,
                messages=messages,
                temperature=self.settings.openai_temperature,
                max_tokens=self.settings.openai_max_tokens,
                **kwargs,
            )
            status_code = 200
        finally:
            duration_ms = (time.perf_counter() - start_time) * 1000
            metrics.observe_external_api("openai", operation, status_code, duration_ms)
            logger.info(
                "OpenAI API %s status=%s duration_ms=%.2f",
                operation,
                status_code,
                duration_ms,
            )
        return response.choices[0].message.content

    async def recommend(
        self,
        topic: str,
        skill_level: str,
        history: list[str] | None = None,
        starred_courses: list[StarredCourse] | None = None,
    ) -> CourseRecommendations:
        """Recommend courses for a topic.

        Degrades to an empty list and a canned insight on any failure.
        """
        prompt = build_recommendation_prompt(
            topic, skill_level, history or [], starred_courses or []
        )
        try:
            content = await self._complete(
                "recommendations",
                [
                    {"role": "system", "content": COURSE_ADVISOR_SYSTEM_PROMPT},
                    {"role": "user", "content": prompt},
                ],
                response_format={"type": "json_object"},
            )
            return parse_recommendations(content)
        except Exception as e:
            logger.error(f"Course recommendation failed: {e}")
            return CourseRecommendations(courses=[], insights=AI_RECOMMENDATIONS_UNAVAILABLE)

    async def analyze_resume(self, resume_text: str, context: str) -> str:
        """Review a resume against the retrieved market standards.

        Raises:
            AIServiceError: If the completion call fails or returns nothing.
        """
        try:
            content = await self._complete(
                "resume_analysis",
                [
                    {"role": "system", "content": RESUME_REVIEWER_SYSTEM_PROMPT},
                    {"role": "system", "content": context},
                    {"role": "user", "content": f"Resume:\n\n{resume_text}"},
                ],
            )
        except Exception as e:
            raise AIServiceError(f"Resume analysis failed: {e}") from e

        if not content:
            raise AIServiceError("Resume analysis returned an empty response")
        return content
