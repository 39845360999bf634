"""Code-based graders for retrieval evaluation."""

from tests.evals.graders.code_graders import (
    grade_category_precision,
    grade_must_include_criteria,
    grade_unique_prefixes,
)

__all__ = [
    "grade_category_precision",
    "grade_must_include_criteria",
    "grade_unique_prefixes",
]
