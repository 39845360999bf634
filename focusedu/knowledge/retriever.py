"""TF-IDF knowledge retriever.

Linear-scan search over an immutable in-memory knowledge base.
"""

import logging
import time
from typing import Iterable

from focusedu.knowledge.errors import RetrievalError
from focusedu.knowledge.models import Category, KnowledgeBase, ScoredResult
from focusedu.knowledge.scoring import score_documents
from focusedu.observability import get_metrics_backend

logger = logging.getLogger(__name__)

DEFAULT_TOP_K = 5


class KnowledgeRetriever:
    """Ranks knowledge base items against a query.

    The knowledge base is injected at construction and never mutated, so a
    single retriever can serve concurrent requests without locking.
    """

    def __init__(self, knowledge_base: KnowledgeBase) -> None:
        self._knowledge_base = knowledge_base

    @property
    def knowledge_base(self) -> KnowledgeBase:
        return self._knowledge_base

    @property
    def item_count(self) -> int:
        """Number of items in the knowledge base."""
        return len(self._knowledge_base)

    def search(self, query: str, top_k: int = DEFAULT_TOP_K) -> list[ScoredResult]:
        """Search the whole knowledge base.

        Args:
            query: Query text (resume, topic phrase).
            top_k: Maximum number of results to return.

        Returns:
            Results sorted by score (highest first), ties in knowledge base order.

        Raises:
            ValueError: If top_k is negative.
            RetrievalError: If the knowledge base cannot be scored.
        """
        return self._rank("search", query, self._knowledge_base, top_k)

    def search_by_category(
        self,
        query: str,
        categories: Iterable[str | Category],
        top_k: int = DEFAULT_TOP_K,
    ) -> list[ScoredResult]:
        """Search only the items in the given categories.

        The collection is filtered before scoring, so IDF statistics reflect
        the filtered items only.

        Raises:
            UnknownCategoryError: If a category name is not known.
            ValueError: If top_k is negative.
            RetrievalError: If the filtered collection cannot be scored.
        """
        filtered = self._knowledge_base.filter(categories)
        return self._rank("search_by_category", query, filtered, top_k)

    def _rank(
        self,
        operation: str,
        query: str,
        collection: KnowledgeBase,
        top_k: int,
    ) -> list[ScoredResult]:
        if top_k < 0:
            raise ValueError(f"top_k must be >= 0, got {top_k}")
        if top_k == 0 or len(collection) == 0:
            return []

        start = time.perf_counter()
        try:
            scores = score_documents(query, [item.content for item in collection])
            ranked = sorted(
                zip(collection, scores),
                key=lambda pair: pair[1],
                reverse=True,
            )
            results = [
                ScoredResult(content=item.content, category=item.category, score=score)
                for item, score in ranked[:top_k]
            ]
        except Exception as e:
            get_metrics_backend().observe_retrieval(
                operation, False, (time.perf_counter() - start) * 1000
            )
            raise RetrievalError(f"Failed to score knowledge base: {e}") from e

        duration_ms = (time.perf_counter() - start) * 1000
        get_metrics_backend().observe_retrieval(operation, True, duration_ms)
        logger.debug(
            "%s query=%r collection=%d results=%d duration_ms=%.2f",
            operation,
            (query or "")[:50],
            len(collection),
            len(results),
            duration_ms,
        )
        return results
