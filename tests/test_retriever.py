"""Tests for KnowledgeRetriever."""

import math

import pytest

from focusedu.knowledge import (
    Category,
    KnowledgeBase,
    KnowledgeItem,
    KnowledgeRetriever,
    RetrievalError,
    UnknownCategoryError,
)

QUERY = "quantify achievements with numbers"


class TestSearch:
    """Tests for unrestricted search."""

    def test_ranks_overlapping_item_first(self, resume_knowledge_base):
        retriever = KnowledgeRetriever(resume_knowledge_base)

        results = retriever.search(QUERY, 2)

        assert [r.content for r in results] == [
            "Use action verbs and quantify achievements",
            "Keep resumes to one page",
        ]
        assert results[0].score == pytest.approx(2 * (1 / 6) * math.log(2))
        assert results[1].score == 0.0
        assert results[0].category is Category.ACHIEVEMENTS

    def test_top_k_zero_returns_empty(self, retriever):
        assert retriever.search(QUERY, top_k=0) == []

    def test_top_k_larger_than_collection_returns_all(self, retriever):
        results = retriever.search(QUERY, top_k=100)

        assert len(results) == retriever.item_count

    def test_negative_top_k_rejected(self, retriever):
        with pytest.raises(ValueError):
            retriever.search(QUERY, top_k=-1)

    def test_default_top_k_is_five(self):
        knowledge_base = KnowledgeBase(
            KnowledgeItem(content=f"snippet number {i}", category=Category.ATS) for i in range(8)
        )

        assert len(KnowledgeRetriever(knowledge_base).search("snippet")) == 5

    def test_sorted_descending(self, retriever):
        results = retriever.search("kubernetes terraform python achievements", top_k=5)
        scores = [r.score for r in results]

        assert scores == sorted(scores, reverse=True)

    def test_ties_keep_knowledge_base_order(self, mixed_knowledge_base, retriever):
        results = retriever.search("nothing matches this", top_k=5)

        assert [r.content for r in results] == [i.content for i in mixed_knowledge_base]
        assert all(r.score == 0.0 for r in results)

    def test_empty_query_is_valid(self, retriever):
        results = retriever.search("", top_k=3)

        assert len(results) == 3
        assert all(r.score == 0.0 for r in results)

    def test_empty_knowledge_base(self):
        assert KnowledgeRetriever(KnowledgeBase()).search(QUERY) == []

    def test_is_deterministic(self, retriever):
        assert retriever.search(QUERY) == retriever.search(QUERY)

    def test_corrupt_entry_raises_retrieval_error(self, corrupt_retriever):
        with pytest.raises(RetrievalError):
            corrupt_retriever.search(QUERY)


class TestSearchByCategory:
    """Tests for category-filtered search."""

    def test_singleton_collection_scores_zero(self, resume_knowledge_base):
        retriever = KnowledgeRetriever(resume_knowledge_base)

        results = retriever.search_by_category(QUERY, ["resume_format"], 5)

        assert len(results) == 1
        assert results[0].content == "Keep resumes to one page"
        assert results[0].score == 0.0

    def test_only_requested_categories(self, retriever):
        wanted = {Category.ACHIEVEMENTS, Category.ATS}

        results = retriever.search_by_category(QUERY, wanted, top_k=10)

        assert results
        assert {r.category for r in results} <= wanted

    def test_accepts_category_names(self, retriever):
        by_name = retriever.search_by_category(QUERY, ["ats", "achievements"])
        by_enum = retriever.search_by_category(QUERY, [Category.ATS, Category.ACHIEVEMENTS])

        assert by_name == by_enum

    def test_statistics_reflect_filtered_collection(self):
        knowledge_base = KnowledgeBase(
            [
                KnowledgeItem(content="python testing", category=Category.ACHIEVEMENTS),
                KnowledgeItem(content="python deployment", category=Category.ACHIEVEMENTS),
                KnowledgeItem(content="java testing", category=Category.ATS),
            ]
        )
        retriever = KnowledgeRetriever(knowledge_base)

        unfiltered = retriever.search("python", top_k=3)
        filtered = retriever.search_by_category("python", ["achievements"], top_k=3)

        assert unfiltered[0].score == pytest.approx(0.5 * math.log(3 / 2))
        # python appears in every filtered document, so its idf is ln(2/2) = 0
        assert [r.score for r in filtered] == [0.0, 0.0]

    def test_no_items_in_category_returns_empty(self, resume_knowledge_base):
        retriever = KnowledgeRetriever(resume_knowledge_base)

        assert retriever.search_by_category(QUERY, ["soft_skills"]) == []

    def test_empty_category_set_returns_empty(self, retriever):
        assert retriever.search_by_category(QUERY, []) == []

    def test_unknown_category_rejected(self, retriever):
        with pytest.raises(UnknownCategoryError) as exc_info:
            retriever.search_by_category(QUERY, ["achievements", "astrology"])

        assert exc_info.value.category == "astrology"

    def test_top_k_zero_returns_empty(self, retriever):
        assert retriever.search_by_category(QUERY, ["ats"], top_k=0) == []


class TestKnowledgeBase:
    """Tests for the immutable KnowledgeBase container."""

    def test_is_immutable(self, mixed_knowledge_base):
        with pytest.raises(AttributeError):
            mixed_knowledge_base._items = ()

    def test_items_are_frozen(self, mixed_knowledge_base):
        with pytest.raises(Exception):
            mixed_knowledge_base.items[0].content = "changed"

    def test_filter_keeps_order(self, mixed_knowledge_base):
        filtered = mixed_knowledge_base.filter(["learning_paths", "achievements"])

        assert [i.category for i in filtered] == [
            Category.ACHIEVEMENTS,
            Category.LEARNING_PATHS,
        ]

    def test_category_counts(self, mixed_knowledge_base):
        counts = mixed_knowledge_base.categories()

        assert counts[Category.ATS] == 1
        assert sum(counts.values()) == len(mixed_knowledge_base)
