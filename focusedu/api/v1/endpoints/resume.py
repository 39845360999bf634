"""Resume analysis grounded on retrieved market standards."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel

from focusedu.api.deps import get_context_assembler, get_course_advisor
from focusedu.knowledge import ContextAssembler, ContextSource
from focusedu.services.course_advisor import AIServiceError, CourseAdvisor

router = APIRouter()
logger = logging.getLogger(__name__)


class ResumeAnalysisRequest(BaseModel):
    resume_text: str


class ResumeAnalysisResponse(BaseModel):
    analysis: str
    context_source: ContextSource


@router.post("/analyze", response_model=ResumeAnalysisResponse)
async def analyze_resume(
    request: ResumeAnalysisRequest,
    assembler: Annotated[ContextAssembler, Depends(get_context_assembler)],
    advisor: Annotated[CourseAdvisor, Depends(get_course_advisor)],
) -> ResumeAnalysisResponse:
    """Review a resume with the knowledge base context as grounding."""
    if not request.resume_text.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Resume text is required",
        )

    context = assembler.build_context(request.resume_text)
    if context.is_fallback:
        logger.warning("Resume analysis is using fallback context")

    try:
        analysis = await advisor.analyze_resume(request.resume_text, context.text)
    except AIServiceError as e:
        logger.error(str(e))
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="AI analysis is unavailable",
        ) from e

    return ResumeAnalysisResponse(analysis=analysis, context_source=context.source)
