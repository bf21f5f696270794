"""Resolve location mentions to gazetteer places and pick each article's focus."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Protocol, Sequence

from focus_locations.focus import FrequencyOfMentionFocusStrategy
from focus_locations.models import FocusResult
from resolve_article_locations.candidates import MAX_HIT_DEPTH, build_candidate_lists
from resolve_article_locations.gazetteer import Gazetteer, GeoNamesGazetteer, InMemoryGazetteer
from resolve_article_locations.heuristics import to_resolved
from resolve_article_locations.models import LocationOccurrence, ResolvedLocation
from resolve_article_locations.pass_chain import PassChain
from resolve_article_locations.passes import default_passes

logger = logging.getLogger(__name__)


class LocationExtractor(Protocol):
    def extract(self, text: str) -> list[LocationOccurrence]: ...


@dataclass
class ArticleLocations:
    article_id: str
    text: str
    resolved: list[ResolvedLocation] = field(default_factory=list)
    focus: FocusResult = field(default_factory=FocusResult)


def build_gazetteer(config) -> Gazetteer:
    """Create the gazetteer client named by the config."""
    if config.gazetteer == "geonames":
        logger.info("Using GeoNames web service gazetteer")
        return GeoNamesGazetteer(config.geonames_username)
    logger.info("Loading local gazetteer from %s", config.gazetteer_path)
    return InMemoryGazetteer.from_geonames_dump(config.gazetteer_path)


class LocationResolver:
    """
    Turns a document's location mentions into resolved places.

    Builds one candidate list per mention, then runs the disambiguation
    chain. With max_hit_depth=1 the chain is skipped and every mention takes
    the gazetteer's top hit.
    """

    def __init__(
        self,
        gazetteer: Gazetteer | None,
        max_hit_depth: int = MAX_HIT_DEPTH,
        fuzzy: bool = False,
        chain: PassChain | None = None,
    ):
        if max_hit_depth < 1:
            raise ValueError(f"max_hit_depth must be >= 1, got {max_hit_depth}")
        self.gazetteer = gazetteer
        self.max_hit_depth = max_hit_depth
        self.fuzzy = fuzzy
        self.chain = chain or PassChain()

    @classmethod
    def from_config(cls, config, gazetteer: Gazetteer | None) -> LocationResolver:
        passes = default_passes(
            mega_city_population=config.mega_city_population,
            fallback_to_population=config.fallback_to_population,
        )
        return cls(
            gazetteer,
            max_hit_depth=config.max_hit_depth,
            fuzzy=config.fuzzy,
            chain=PassChain(passes),
        )

    def resolve(self, occurrences: Sequence[LocationOccurrence]) -> list[ResolvedLocation]:
        """
        Resolve mentions to places.

        Args:
            occurrences: Location mentions in document order

        Returns:
            Resolved locations, in the order the passes chose them. Mentions
            nothing could resolve are left out.
        """
        candidate_lists = build_candidate_lists(
            list(occurrences), self.gazetteer, self.max_hit_depth, self.fuzzy
        )

        if self.max_hit_depth == 1:
            resolved = [to_resolved(c.top) for c in candidate_lists if c.has_records]
        else:
            resolved = self.chain.run(candidate_lists).resolved

        logger.debug("Resolved %d of %d mentions", len(resolved), len(candidate_lists))
        return resolved

    def log_stats(self) -> None:
        self.chain.log_pass_trigger_stats()


def resolve_article_locations(
    article_texts: dict[str, str],
    extractor: LocationExtractor,
    resolver: LocationResolver,
    strategy: FrequencyOfMentionFocusStrategy,
) -> list[ArticleLocations]:
    """
    Extract, resolve and focus the locations of each article.

    Args:
        article_texts: Mapping of article_id to article text
        extractor: Finds location mentions in text
        resolver: Resolves mentions to places
        strategy: Picks the countries/states/cities an article is about

    Returns:
        One ArticleLocations per article, in input order
    """
    results = []
    for article_id, text in article_texts.items():
        occurrences = extractor.extract(text)
        resolved = resolver.resolve(occurrences)
        focus = strategy.select(resolved)
        logger.debug(
            "Article %s: %d mentions, %d resolved",
            article_id,
            len(occurrences),
            len(resolved),
        )
        results.append(
            ArticleLocations(article_id=article_id, text=text, resolved=resolved, focus=focus)
        )

    return results
