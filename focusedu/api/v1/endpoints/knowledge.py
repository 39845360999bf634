"""Knowledge base retrieval endpoints."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field

from focusedu.api.deps import get_context_assembler, get_retriever
from focusedu.knowledge import (
    ContextAssembler,
    ContextSource,
    KnowledgeRetriever,
    RetrievalError,
    UnknownCategoryError,
)
from focusedu.knowledge.retriever import DEFAULT_TOP_K

router = APIRouter()
logger = logging.getLogger(__name__)


# -------------------------------------------------------------------------
# Request/Response Models
# -------------------------------------------------------------------------


class SearchRequest(BaseModel):
    """Search the whole knowledge base."""

    query: str
    top_k: int = Field(DEFAULT_TOP_K, ge=0)


class CategorySearchRequest(SearchRequest):
    """Search only the given categories."""

    categories: list[str]


class SearchResultItem(BaseModel):
    content: str
    category: str
    score: float


class SearchResponse(BaseModel):
    results: list[SearchResultItem]


class ContextRequest(BaseModel):
    """Text to build retrieval context for (resume, topic phrase)."""

    text: str


class ContextResponse(BaseModel):
    context: str
    source: ContextSource
    result_count: int


class CategoriesResponse(BaseModel):
    total: int
    categories: dict[str, int]


def _to_response(results) -> SearchResponse:
    return SearchResponse(
        results=[
            SearchResultItem(content=r.content, category=r.category.value, score=r.score)
            for r in results
        ]
    )


# -------------------------------------------------------------------------
# Endpoints
# -------------------------------------------------------------------------


@router.post("/search", response_model=SearchResponse)
async def search(
    request: SearchRequest,
    retriever: Annotated[KnowledgeRetriever, Depends(get_retriever)],
) -> SearchResponse:
    """Rank the whole knowledge base against a query."""
    try:
        results = retriever.search(request.query, top_k=request.top_k)
    except RetrievalError as e:
        logger.error(f"Knowledge search failed: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Knowledge search failed",
        ) from e
    return _to_response(results)


@router.post("/search-by-category", response_model=SearchResponse)
async def search_by_category(
    request: CategorySearchRequest,
    retriever: Annotated[KnowledgeRetriever, Depends(get_retriever)],
) -> SearchResponse:
    """Rank only the items in the requested categories.

    Unknown category names are rejected with 422.
    """
    try:
        results = retriever.search_by_category(
            request.query,
            request.categories,
            top_k=request.top_k,
        )
    except UnknownCategoryError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(e),
        ) from e
    except RetrievalError as e:
        logger.error(f"Knowledge category search failed: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Knowledge search failed",
        ) from e
    return _to_response(results)


@router.post("/context", response_model=ContextResponse)
async def build_context(
    request: ContextRequest,
    assembler: Annotated[ContextAssembler, Depends(get_context_assembler)],
) -> ContextResponse:
    """Assemble the retrieved-reference block for a document. Always 200."""
    result = assembler.build_context(request.text)
    return ContextResponse(
        context=result.text,
        source=result.source,
        result_count=len(result.results),
    )


@router.get("/categories", response_model=CategoriesResponse)
async def list_categories(
    retriever: Annotated[KnowledgeRetriever, Depends(get_retriever)],
) -> CategoriesResponse:
    """Item counts per category."""
    counts = retriever.knowledge_base.categories()
    return CategoriesResponse(
        total=retriever.item_count,
        categories={category.value: count for category, count in counts.items()},
    )
