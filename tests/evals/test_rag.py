"""RAG retrieval quality tests.

These tests verify the TF-IDF retriever finds relevant snippets in the
bundled knowledge base for typical resume and topic queries.
"""

import pytest

from focusedu.knowledge import ContextAssembler, ContextSource, KnowledgeRetriever, load_knowledge_base
from focusedu.knowledge.context import CONTEXT_HEADER, CONTEXT_SEPARATOR
from tests.evals.graders.code_graders import (
    grade_category_precision,
    grade_must_include_criteria,
    grade_unique_prefixes,
)


@pytest.fixture(scope="module")
def bundled_retriever() -> KnowledgeRetriever:
    return KnowledgeRetriever(load_knowledge_base())


class TestRAGRetrieval:
    """Tests for retrieval quality on the bundled knowledge base."""

    @pytest.mark.rag
    def test_ats_keyword_retrieval(self, bundled_retriever):
        """Test retrieval for an ATS keyword query."""
        results = bundled_retriever.search("ATS keyword filters job description", top_k=3)

        assert results[0].category.value == "ats"
        grade = grade_must_include_criteria(results[0].content, ["job description", "keyword filters"])
        assert grade["passed"], grade["message"]

    @pytest.mark.rag
    def test_machine_learning_retrieval(self, bundled_retriever):
        """Test retrieval for a machine learning topic."""
        results = bundled_retriever.search("python pytorch tensorflow machine learning", top_k=2)

        grade = grade_category_precision(
            [r.category.value for r in results],
            {"technical_skills", "learning_paths"},
        )
        assert grade["passed"], grade["message"]

        contents = " ".join(r.content for r in results)
        grade = grade_must_include_criteria(contents, ["PyTorch", "Machine learning"])
        assert grade["passed"], grade["message"]

    @pytest.mark.rag
    def test_soft_skills_category_retrieval(self, bundled_retriever):
        """Test category-restricted retrieval for soft skills."""
        results = bundled_retriever.search_by_category(
            "leadership communication", ["soft_skills"], top_k=2
        )

        grade = grade_category_precision([r.category.value for r in results], {"soft_skills"})
        assert grade["passed"], grade["message"]

        contents = " ".join(r.content for r in results)
        grade = grade_must_include_criteria(contents, ["Leadership", "Communication"])
        assert grade["passed"], grade["message"]

    @pytest.mark.rag
    def test_scores_are_non_negative(self, bundled_retriever):
        """Test that every knowledge base item gets a non-negative score."""
        results = bundled_retriever.search("senior python developer", top_k=1000)

        assert len(results) == bundled_retriever.item_count
        assert all(r.score >= 0 for r in results)


class TestRAGContext:
    """Tests for assembled context on the bundled knowledge base."""

    @pytest.mark.rag
    def test_resume_context(self, bundled_retriever):
        """Test context assembly for a cloud engineering resume."""
        resume = "Senior backend engineer: Python, Go, Kubernetes, Terraform, Docker on AWS."

        result = ContextAssembler(bundled_retriever).build_context(resume)

        assert result.source is ContextSource.ASSEMBLED
        sections = result.text[len(CONTEXT_HEADER) :].split(CONTEXT_SEPARATOR)
        assert 1 <= len(sections) <= 7

        grade = grade_unique_prefixes(sections)
        assert grade["passed"], grade["message"]

        grade = grade_must_include_criteria(result.text, ["Terraform", "Kubernetes"])
        assert grade["passed"], grade["message"]
