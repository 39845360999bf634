"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager
from typing import Annotated, AsyncIterator

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from focusedu.api.deps import build_retriever, get_retriever
from focusedu.api.v1.router import api_router
from focusedu.core.config import get_settings
from focusedu.knowledge import KnowledgeRetriever
from focusedu.observability import RequestLoggingMiddleware, get_metrics_backend

settings = get_settings()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan events."""
    # Startup: the knowledge base is loaded once and never mutated
    app.state.retriever = build_retriever(settings.knowledge_base_path)
    logger.info(f"Retriever ready with {app.state.retriever.item_count} knowledge items")
    yield
    # Shutdown
    for name in ("youtube_client", "news_client"):
        client = getattr(app.state, name, None)
        if client is not None:
            await client.close()


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    openapi_url=f"{settings.api_prefix}/openapi.json",
    docs_url=f"{settings.api_prefix}/docs",
    redoc_url=f"{settings.api_prefix}/redoc",
    lifespan=lifespan,
)

metrics_backend = get_metrics_backend()

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(RequestLoggingMiddleware, metrics=metrics_backend)

app.include_router(api_router, prefix=settings.api_prefix)


@app.get("/health")
async def health_check(
    retriever: Annotated[KnowledgeRetriever, Depends(get_retriever)],
) -> dict[str, str | int]:
    """Health check endpoint."""
    return {
        "status": "healthy",
        "version": settings.app_version,
        "knowledge_items": retriever.item_count,
    }


@app.get("/metrics", include_in_schema=False)
async def metrics() -> PlainTextResponse:
    """Prometheus-style metrics endpoint."""
    return PlainTextResponse(metrics_backend.render_prometheus())
