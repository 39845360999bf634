"""Context assembly for AI prompts.

Combines best-practice guidance with content-specific matches into a single
deduplicated text block. Failures never propagate: the caller always gets
usable text, either assembled from the knowledge base or the static fallback.
"""

import logging
from typing import Iterable

from focusedu.knowledge.models import Category, ContextResult, ContextSource, ScoredResult
from focusedu.knowledge.retriever import KnowledgeRetriever
from focusedu.observability import get_metrics_backend

logger = logging.getLogger(__name__)

BEST_PRACTICES_QUERY = "resume format structure best practices"
BEST_PRACTICES_CATEGORIES: frozenset[Category] = frozenset(
    {Category.RESUME_FORMAT, Category.ACHIEVEMENTS, Category.ATS}
)
BEST_PRACTICES_TOP_K = 3
CONTENT_TOP_K = 4
DEDUP_PREFIX_LENGTH = 50
CONTEXT_SEPARATOR = "\n\n---\n\n"
CONTEXT_HEADER = "## Retrieved Market Standards:\n\n"

FALLBACK_CONTEXT_VERSION = "2024-2025"
FALLBACK_CONTEXT = f"""## Market Standards ({FALLBACK_CONTEXT_VERSION}):

### In-Demand Technical Skills:
- Frontend: React, Next.js, TypeScript, Tailwind CSS
- Backend: Node.js, Python, Go, GraphQL, REST APIs
- Cloud: AWS, Azure, GCP, Docker, Kubernetes, Terraform
- Data/AI: Python, SQL, TensorFlow, PyTorch, LangChain

### Resume Best Practices:
- Use action verbs: Led, Developed, Implemented, Optimized
- Quantify achievements with metrics (%, $, numbers)
- Keep to 1-2 pages
- Include: Contact, Summary, Experience, Skills, Education
- Tailor keywords for ATS systems

### Soft Skills in Demand:
- Leadership & team collaboration
- Communication (written/verbal)
- Problem-solving
- Agile/Scrum methodologies"""


def dedupe_results(
    results: Iterable[ScoredResult],
    prefix_length: int = DEDUP_PREFIX_LENGTH,
) -> list[str]:
    """Keep the first result for each content prefix, skipping empty content."""
    seen: set[str] = set()
    unique: list[str] = []
    for result in results:
        key = result.content[:prefix_length]
        if key in seen or not result.content:
            continue
        seen.add(key)
        unique.append(result.content)
    return unique


class ContextAssembler:
    """Builds the retrieved-reference block for a query document."""

    def __init__(
        self,
        retriever: KnowledgeRetriever,
        best_practices_query: str = BEST_PRACTICES_QUERY,
        best_practices_categories: Iterable[Category] = BEST_PRACTICES_CATEGORIES,
        best_practices_top_k: int = BEST_PRACTICES_TOP_K,
        content_top_k: int = CONTENT_TOP_K,
        fallback_text: str = FALLBACK_CONTEXT,
    ) -> None:
        self.retriever = retriever
        self.best_practices_query = best_practices_query
        self.best_practices_categories = frozenset(best_practices_categories)
        self.best_practices_top_k = best_practices_top_k
        self.content_top_k = content_top_k
        self.fallback_text = fallback_text

    def build_context(self, query_document: str) -> ContextResult:
        """Assemble context for ``query_document``.

        Never raises. Any failure yields the fallback block with
        ``source=ContextSource.FALLBACK``.
        """
        try:
            format_results = self.retriever.search_by_category(
                self.best_practices_query,
                self.best_practices_categories,
                top_k=self.best_practices_top_k,
            )
            content_results = self.retriever.search(
                query_document,
                top_k=self.content_top_k,
            )

            combined = [*format_results, *content_results]
            context = CONTEXT_SEPARATOR.join(dedupe_results(combined))

            result = ContextResult(
                text=f"{CONTEXT_HEADER}{context}",
                source=ContextSource.ASSEMBLED,
                results=tuple(combined),
            )
        except Exception:
            logger.exception("Error retrieving context from knowledge base")
            result = self.fallback()

        get_metrics_backend().observe_context(result.source.value)
        return result

    def fallback(self) -> ContextResult:
        """Return the static fallback context."""
        return ContextResult(text=self.fallback_text, source=ContextSource.FALLBACK)


def get_relevant_context(retriever: KnowledgeRetriever, query_document: str) -> str:
    """Return only the context text for ``query_document``."""
    return ContextAssembler(retriever).build_context(query_document).text
