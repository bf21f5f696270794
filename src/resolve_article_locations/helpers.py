"""Helper functions for resolve_article_locations CLI."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Any

from common.cli_helpers import load_jsonl
from common.serialization import serialize_focus_result, serialize_resolved_location
from resolve_article_locations.reference_tables import ReferenceTables
from resolve_article_locations.resolve_article_locations import ArticleLocations

logger = logging.getLogger(__name__)


def parse_resolve_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse CLI arguments for resolve_article_locations."""

    parser = argparse.ArgumentParser(
        description="Resolve location mentions in articles and pick each article's focus"
    )

    # Input options
    parser.add_argument(
        "--input",
        required=True,
        help="Plain text file (one article) or JSONL file with id/text per line",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Config name in configs/ or path to a YAML file (default: RESOLVER_CONFIG or 'default')",
    )

    # Output options
    parser.add_argument("--load-local", action="store_true", help="Save results to local file")
    parser.add_argument("--verbose", action="store_true", help="Log pass-level decisions")

    return parser.parse_args(argv)


def load_article_texts(path: str | Path) -> dict[str, str]:
    """
    Load articles to process.

    Returns:
        {article_id: text}. A plain text file is a single article keyed by
        its file stem; JSONL rows without text are skipped.
    """
    path = Path(path)
    if path.suffix != ".jsonl":
        return {path.stem: path.read_text(encoding="utf-8")}

    articles: dict[str, str] = {}
    for index, row in enumerate(load_jsonl(path)):
        text = row.get("text")
        if not text:
            logger.warning("Skipping row %d of %s: no text", index, path)
            continue
        article_id = str(row.get("id") or index)
        articles[article_id] = text
    return articles


def build_article_record(
    article: ArticleLocations, tables: ReferenceTables | None = None
) -> dict[str, Any]:
    return {
        "article_id": article.article_id,
        "locations": [serialize_resolved_location(loc, tables) for loc in article.resolved],
        "focus": serialize_focus_result(article.focus, tables),
    }
