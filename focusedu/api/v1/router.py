"""API v1 router aggregating all endpoint routers.

Knowledge:
  /api/v1/knowledge/search, /search-by-category, /context, /categories

Recommendations:
  /api/v1/recommendations

Resume:
  /api/v1/resume/analyze

News:
  /api/v1/news
"""

from fastapi import APIRouter

from focusedu.api.v1.endpoints import knowledge, news, recommendations, resume

api_router = APIRouter()

# -------------------------------------------------------------------------
# Knowledge base retrieval
# -------------------------------------------------------------------------
api_router.include_router(knowledge.router, prefix="/knowledge", tags=["knowledge"])

# -------------------------------------------------------------------------
# Recommendations (YouTube + AI courses)
# -------------------------------------------------------------------------
api_router.include_router(
    recommendations.router, prefix="/recommendations", tags=["recommendations"]
)

# -------------------------------------------------------------------------
# Resume analysis
# -------------------------------------------------------------------------
api_router.include_router(resume.router, prefix="/resume", tags=["resume"])

# -------------------------------------------------------------------------
# News
# -------------------------------------------------------------------------
api_router.include_router(news.router, prefix="/news", tags=["news"])
