"""Pytest configuration and fixtures for backend tests."""

from typing import AsyncGenerator

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from focusedu.api.deps import get_retriever
from focusedu.knowledge import Category, KnowledgeBase, KnowledgeItem, KnowledgeRetriever
from focusedu.main import app as main_app


# -------------------------------------------------------------------------
# Knowledge Base Fixtures
# -------------------------------------------------------------------------


@pytest.fixture
def resume_knowledge_base() -> KnowledgeBase:
    """Two-item knowledge base used by the ranking scenarios."""
    return KnowledgeBase(
        [
            KnowledgeItem(
                content="Use action verbs and quantify achievements",
                category=Category.ACHIEVEMENTS,
            ),
            KnowledgeItem(
                content="Keep resumes to one page",
                category=Category.RESUME_FORMAT,
            ),
        ]
    )


@pytest.fixture
def mixed_knowledge_base() -> KnowledgeBase:
    """Small knowledge base spanning several categories."""
    return KnowledgeBase(
        [
            KnowledgeItem(
                content="Quantify achievements with revenue, latency and user counts.",
                category=Category.ACHIEVEMENTS,
            ),
            KnowledgeItem(
                content="Keep resumes to one page with a clean single column layout.",
                category=Category.RESUME_FORMAT,
            ),
            KnowledgeItem(
                content="Mirror job description keywords to pass ATS filters.",
                category=Category.ATS,
            ),
            KnowledgeItem(
                content="Kubernetes, Terraform and Docker are in demand for cloud roles.",
                category=Category.TECHNICAL_SKILLS,
            ),
            KnowledgeItem(
                content="Learn Python basics before moving to Django or FastAPI.",
                category=Category.LEARNING_PATHS,
            ),
        ]
    )


@pytest.fixture
def retriever(mixed_knowledge_base: KnowledgeBase) -> KnowledgeRetriever:
    return KnowledgeRetriever(mixed_knowledge_base)


@pytest.fixture
def corrupt_retriever() -> KnowledgeRetriever:
    """Retriever whose knowledge base holds an entry that cannot be tokenized."""
    return KnowledgeRetriever(
        KnowledgeBase(
            [
                KnowledgeItem(content="Keep resumes to one page", category=Category.RESUME_FORMAT),
                KnowledgeItem.model_construct(content=12345, category=Category.ATS),
            ]
        )
    )


# -------------------------------------------------------------------------
# App Fixtures
# -------------------------------------------------------------------------


@pytest.fixture
def app(retriever: KnowledgeRetriever) -> FastAPI:
    """FastAPI app using the test knowledge base."""
    main_app.dependency_overrides[get_retriever] = lambda: retriever
    yield main_app
    main_app.dependency_overrides.clear()


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Create an async HTTP client for testing."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac
