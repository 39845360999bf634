"""TF-IDF scoring over a small in-memory document collection.

Statistics are computed per call from the collection passed in, so a
category-filtered collection gets its own document frequencies and IDF
values. Scores are only comparable within a single call.
"""

import math
import re
from collections import Counter
from typing import Sequence

# ASCII word characters only; accented letters separate terms
_SPLIT_PATTERN = re.compile(r"\W+", re.ASCII)
MIN_TERM_LENGTH = 3


def tokenize(text: str | None) -> list[str]:
    """Split text into lower-cased index terms.

    Any run of non-word characters separates terms; terms shorter than
    three characters are dropped.
    """
    if not text:
        return []
    return [t for t in _SPLIT_PATTERN.split(text.lower()) if len(t) >= MIN_TERM_LENGTH]


def document_frequency(documents: Sequence[str]) -> dict[str, int]:
    """Count how many documents contain each term at least once."""
    df: Counter[str] = Counter()
    for doc in documents:
        df.update(set(tokenize(doc)))
    return dict(df)


def score_documents(query: str, documents: Sequence[str]) -> list[float]:
    """Score every document against the query.

    Args:
        query: Query text; repeated query terms count once.
        documents: Collection to score. Also defines the IDF statistics.

    Returns:
        One non-negative score per document, in input order.
    """
    query_terms = set(tokenize(query))
    if not documents:
        return []

    df = document_frequency(documents)
    total_docs = len(documents)

    scores: list[float] = []
    for doc in documents:
        terms = tokenize(doc)
        if not terms or not query_terms:
            scores.append(0.0)
            continue

        counts = Counter(terms)
        score = 0.0
        for term in query_terms:
            count = counts.get(term)
            if not count:
                continue
            tf = count / len(terms)
            idf = math.log(total_docs / df[term])
            score += tf * idf
        scores.append(score)

    return scores
