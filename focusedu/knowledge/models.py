"""Data models for knowledge base entries and retrieval results."""

from collections import Counter
from enum import Enum
from typing import Iterable, Iterator

from pydantic import BaseModel, ConfigDict, Field

from focusedu.knowledge.errors import UnknownCategoryError


class Category(str, Enum):
    """Known knowledge base categories."""

    RESUME_FORMAT = "resume_format"
    ACHIEVEMENTS = "achievements"
    ATS = "ats"
    TECHNICAL_SKILLS = "technical_skills"
    SOFT_SKILLS = "soft_skills"
    CAREER_GROWTH = "career_growth"
    LEARNING_PATHS = "learning_paths"

    @classmethod
    def parse(cls, value: "str | Category") -> "Category":
        """Convert a category name to a Category.

        Raises:
            UnknownCategoryError: If the name is not a known category.
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise UnknownCategoryError(str(value)) from None


class KnowledgeItem(BaseModel):
    """A single categorized snippet of the knowledge base."""

    model_config = ConfigDict(frozen=True)

    content: str = Field(..., description="Snippet text")
    category: Category


class ScoredResult(BaseModel):
    """A knowledge item with its relevance score for one retrieval call.

    Scores are only comparable within the call that produced them.
    """

    model_config = ConfigDict(frozen=True)

    content: str
    category: Category
    score: float = Field(..., ge=0.0, description="TF-IDF score")


class ContextSource(str, Enum):
    """How a context block was produced."""

    ASSEMBLED = "assembled"
    FALLBACK = "fallback"


class ContextResult(BaseModel):
    """Context block handed to the AI completion step."""

    model_config = ConfigDict(frozen=True)

    text: str
    source: ContextSource
    results: tuple[ScoredResult, ...] = ()

    @property
    def is_fallback(self) -> bool:
        return self.source is ContextSource.FALLBACK

    def __str__(self) -> str:
        return self.text


class KnowledgeBase:
    """Immutable, ordered collection of knowledge items.

    Built once at startup and passed to the retriever. Item order is the
    tie-break for equal scores.
    """

    __slots__ = ("_items",)

    def __init__(self, items: Iterable[KnowledgeItem] = ()) -> None:
        object.__setattr__(self, "_items", tuple(items))

    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError("KnowledgeBase is immutable")

    @property
    def items(self) -> tuple[KnowledgeItem, ...]:
        return self._items

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[KnowledgeItem]:
        return iter(self._items)

    def __repr__(self) -> str:
        return f"KnowledgeBase({len(self._items)} items)"

    def filter(self, categories: Iterable["str | Category"]) -> "KnowledgeBase":
        """Return the items whose category is in ``categories``, order kept."""
        wanted = {Category.parse(c) for c in categories}
        return KnowledgeBase(item for item in self._items if item.category in wanted)

    def categories(self) -> dict[Category, int]:
        """Count items per category."""
        return dict(Counter(item.category for item in self._items))
