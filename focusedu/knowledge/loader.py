"""Knowledge base loader.

Reads the curated snippets once at startup. Two formats are supported:

- a JSON array of ``{"content": ..., "category": ...}`` objects
- a directory of markdown files where each ``## <category>`` section holds
  one snippet per bullet line
"""

import json
import logging
import re
from pathlib import Path

from pydantic import ValidationError

from focusedu.knowledge.errors import KnowledgeBaseError, UnknownCategoryError
from focusedu.knowledge.models import Category, KnowledgeBase, KnowledgeItem

logger = logging.getLogger(__name__)

DEFAULT_KNOWLEDGE_BASE_PATH = Path(__file__).parent / "documents" / "knowledge_base.json"


def load_knowledge_base(path: Path | str | None = None) -> KnowledgeBase:
    """Load the knowledge base from a JSON file or a markdown directory.

    Args:
        path: JSON file or directory of markdown files.
            Defaults to the bundled ``documents/knowledge_base.json``.

    Returns:
        The loaded KnowledgeBase, in file order.

    Raises:
        KnowledgeBaseError: If the path is missing or an entry is invalid.
    """
    path = Path(path) if path is not None else DEFAULT_KNOWLEDGE_BASE_PATH

    if not path.exists():
        raise KnowledgeBaseError(f"Knowledge base not found at {path}")

    if path.is_dir():
        items = _load_markdown_dir(path)
    else:
        items = _load_json_file(path)

    knowledge_base = KnowledgeBase(items)
    logger.info(f"Knowledge base loaded: {len(knowledge_base)} items from {path}")
    return knowledge_base


def parse_entries(entries: object) -> list[KnowledgeItem]:
    """Validate raw ``{"content", "category"}`` entries.

    Raises:
        KnowledgeBaseError: If the payload is not a list or an entry is invalid.
    """
    if not isinstance(entries, list):
        raise KnowledgeBaseError("Knowledge base must be a JSON array of entries")

    items: list[KnowledgeItem] = []
    for idx, entry in enumerate(entries):
        if not isinstance(entry, dict):
            raise KnowledgeBaseError(f"Entry {idx} is not an object")
        try:
            category = Category.parse(entry.get("category", ""))
            items.append(KnowledgeItem(content=entry.get("content"), category=category))
        except UnknownCategoryError as e:
            raise KnowledgeBaseError(f"Entry {idx}: {e}") from e
        except ValidationError as e:
            raise KnowledgeBaseError(f"Entry {idx} is invalid: {e}") from e
    return items


def _load_json_file(file_path: Path) -> list[KnowledgeItem]:
    try:
        entries = json.loads(file_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise KnowledgeBaseError(f"Invalid JSON in {file_path}: {e}") from e
    return parse_entries(entries)


def _load_markdown_dir(documents_dir: Path) -> list[KnowledgeItem]:
    items: list[KnowledgeItem] = []
    for md_file in sorted(documents_dir.glob("*.md")):
        if md_file.name.startswith("_") or md_file.name == "README.md":
            continue
        items.extend(_parse_markdown_file(md_file))
    return items


def _parse_markdown_file(file_path: Path) -> list[KnowledgeItem]:
    """Parse ``## <category>`` sections with one bullet per snippet."""
    content = file_path.read_text(encoding="utf-8")
    items: list[KnowledgeItem] = []

    sections = re.split(r"\n(?=## )", content)
    for section in sections:
        title_match = re.match(r"^##\s+(.+?)(?:\n|$)", section.strip())
        if not title_match:
            # Text before the first category heading is ignored
            continue

        try:
            category = Category.parse(title_match.group(1).strip())
        except UnknownCategoryError as e:
            raise KnowledgeBaseError(f"{file_path.name}: {e}") from e

        body = section.strip()[title_match.end() :]
        for line in body.splitlines():
            bullet = re.match(r"^\s*[-*]\s+(.+)$", line)
            if bullet:
                items.append(KnowledgeItem(content=bullet.group(1).strip(), category=category))

    return items
