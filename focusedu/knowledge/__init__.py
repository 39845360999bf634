"""Knowledge base module for TF-IDF retrieval.

This module loads the curated career and learning snippets, ranks them
against resumes or topic phrases, and assembles the context block used to
ground AI recommendations.
"""

from focusedu.knowledge.context import (
    FALLBACK_CONTEXT,
    ContextAssembler,
    get_relevant_context,
)
from focusedu.knowledge.errors import KnowledgeBaseError, RetrievalError, UnknownCategoryError
from focusedu.knowledge.loader import load_knowledge_base
from focusedu.knowledge.models import (
    Category,
    ContextResult,
    ContextSource,
    KnowledgeBase,
    KnowledgeItem,
    ScoredResult,
)
from focusedu.knowledge.retriever import KnowledgeRetriever
from focusedu.knowledge.scoring import document_frequency, score_documents, tokenize

__all__ = [
    "Category",
    "ContextAssembler",
    "ContextResult",
    "ContextSource",
    "FALLBACK_CONTEXT",
    "KnowledgeBase",
    "KnowledgeBaseError",
    "KnowledgeItem",
    "KnowledgeRetriever",
    "RetrievalError",
    "ScoredResult",
    "UnknownCategoryError",
    "document_frequency",
    "get_relevant_context",
    "load_knowledge_base",
    "score_documents",
    "tokenize",
]
