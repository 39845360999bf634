"""Exceptions raised by the knowledge base and retrieval layer."""


class KnowledgeBaseError(Exception):
    """Raised when the knowledge base file cannot be loaded or parsed."""


class UnknownCategoryError(ValueError):
    """Raised when a category name is not one of the known categories."""

    def __init__(self, category: str) -> None:
        self.category = category
        super().__init__(f"Unknown knowledge category: {category!r}")


class RetrievalError(Exception):
    """Raised when scoring the knowledge base fails."""
