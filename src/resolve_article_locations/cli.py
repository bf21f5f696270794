"""CLI for resolving article locations and their focus."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from dotenv import load_dotenv

from common.cli_helpers import save_jsonl_local, setup_logging
from extract_locations.demonyms import DemonymMap
from extract_locations.extract_locations import SpacyLocationExtractor
from focus_locations.focus import FrequencyOfMentionFocusStrategy
from resolve_article_locations.config import load_config, set_config
from resolve_article_locations.helpers import (
    build_article_record,
    load_article_texts,
    parse_resolve_args,
)
from resolve_article_locations.reference_tables import ReferenceTables
from resolve_article_locations.resolve_article_locations import (
    LocationResolver,
    build_gazetteer,
    resolve_article_locations,
)

setup_logging()
logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> None:
    args = parse_resolve_args(argv)
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    load_dotenv()

    config = load_config(args.config)
    set_config(config)

    article_texts = load_article_texts(args.input)
    if not article_texts:
        logger.warning("No articles to process")
        return

    gazetteer = build_gazetteer(config)
    tables = ReferenceTables.from_config(config, gazetteer)
    demonyms = DemonymMap.from_file() if config.replace_demonyms else None
    extractor = SpacyLocationExtractor(config.spacy_model, demonyms=demonyms)
    resolver = LocationResolver.from_config(config, gazetteer)
    strategy = FrequencyOfMentionFocusStrategy(tables)

    results = resolve_article_locations(article_texts, extractor, resolver, strategy)

    for article in results:
        focus = article.focus
        logger.info(
            "%s: %d locations; country=%s state=%s city=%s",
            article.article_id,
            len(article.resolved),
            focus.primary_country.record.name if focus.primary_country else None,
            focus.primary_state.record.name if focus.primary_state else None,
            focus.primary_city.record.name if focus.primary_city else None,
        )

    resolver.log_stats()
    logger.info(
        "Resolved %d locations across %d articles",
        sum(len(article.resolved) for article in results),
        len(results),
    )

    if args.load_local:
        now = datetime.now(timezone.utc)
        records = [build_article_record(article, tables) for article in results]
        filepath = save_jsonl_local(records, "article_locations", now, config.output_dir)
        logger.info("Saved %d articles to %s", len(records), filepath)


if __name__ == "__main__":
    main()
