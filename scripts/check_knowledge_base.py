#!/usr/bin/env python3
"""Validate the knowledge base and preview retrieval.

Loads the configured knowledge base, prints the number of items per
category and optionally ranks a query and shows the assembled context.

Usage:
    python scripts/check_knowledge_base.py
    python scripts/check_knowledge_base.py --path my_kb.json
    python scripts/check_knowledge_base.py --query "quantify achievements" --top-k 3

Environment variables:
    KNOWLEDGE_BASE_PATH: Knowledge base file or markdown directory
"""

import argparse
import logging
import sys
from pathlib import Path

# Add project root to path for imports
project_dir = Path(__file__).parent.parent
sys.path.insert(0, str(project_dir))

from focusedu.core.config import get_settings  # noqa: E402
from focusedu.knowledge import (  # noqa: E402
    ContextAssembler,
    KnowledgeBaseError,
    KnowledgeRetriever,
    load_knowledge_base,
)


def main() -> None:
    parser = argparse.ArgumentParser(description="Check the FocusEdu knowledge base")
    parser.add_argument("--path", help="Knowledge base JSON file or markdown directory")
    parser.add_argument("--query", help="Query to rank against the knowledge base")
    parser.add_argument("--top-k", type=int, default=5, help="Number of results to show")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    path = args.path or get_settings().knowledge_base_path
    try:
        knowledge_base = load_knowledge_base(path)
    except KnowledgeBaseError as e:
        print(f"Error: {e}")
        sys.exit(1)

    print(f"Loaded {len(knowledge_base)} items")
    print("\nItems per category:")
    for category, count in sorted(knowledge_base.categories().items(), key=lambda kv: kv[0].value):
        print(f"  {category.value}: {count}")

    if not args.query:
        return

    retriever = KnowledgeRetriever(knowledge_base)
    print(f"\nTop {args.top_k} results for: {args.query!r}")
    for rank, result in enumerate(retriever.search(args.query, top_k=args.top_k), 1):
        print(f"  {rank}. [{result.category.value}] {result.score:.4f}  {result.content[:70]}")

    context = ContextAssembler(retriever).build_context(args.query)
    print(f"\nContext ({context.source.value}):\n")
    print(context.text)


if __name__ == "__main__":
    main()
