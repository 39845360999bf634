"""FastAPI dependencies shared by the v1 endpoints.

The knowledge base and service clients live on ``app.state``; they are set
up by the application lifespan and created on first use otherwise.
"""

import logging

from fastapi import Depends, Request

from focusedu.core.config import get_settings
from focusedu.knowledge import (
    ContextAssembler,
    KnowledgeBase,
    KnowledgeBaseError,
    KnowledgeRetriever,
    load_knowledge_base,
)
from focusedu.services.course_advisor import CourseAdvisor
from focusedu.services.news import NewsClient
from focusedu.services.youtube import YouTubeClient

logger = logging.getLogger(__name__)


def build_retriever(knowledge_base_path: str | None = None) -> KnowledgeRetriever:
    """Load the knowledge base and wrap it in a retriever.

    A knowledge base that fails to load is logged and replaced by an empty
    one, so context assembly still answers with fallback text.
    """
    try:
        knowledge_base = load_knowledge_base(knowledge_base_path)
    except KnowledgeBaseError as e:
        logger.error(f"Knowledge base unavailable, starting empty: {e}")
        knowledge_base = KnowledgeBase()
    return KnowledgeRetriever(knowledge_base)


def get_retriever(request: Request) -> KnowledgeRetriever:
    state = request.app.state
    if getattr(state, "retriever", None) is None:
        state.retriever = build_retriever(get_settings().knowledge_base_path)
    return state.retriever


def get_context_assembler(
    retriever: KnowledgeRetriever = Depends(get_retriever),
) -> ContextAssembler:
    return ContextAssembler(retriever)


def get_youtube_client(request: Request) -> YouTubeClient:
    state = request.app.state
    if getattr(state, "youtube_client", None) is None:
        state.youtube_client = YouTubeClient()
    return state.youtube_client


def get_course_advisor(request: Request) -> CourseAdvisor:
    state = request.app.state
    if getattr(state, "course_advisor", None) is None:
        state.course_advisor = CourseAdvisor()
    return state.course_advisor


def get_news_client(request: Request) -> NewsClient:
    state = request.app.state
    if getattr(state, "news_client", None) is None:
        state.news_client = NewsClient()
    return state.news_client
