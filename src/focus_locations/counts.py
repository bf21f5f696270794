"""Mention counts over resolved locations.

Counters keep keys in first-seen order, so callers that need a stable
tie order only have to pass locations in document order.
"""

from __future__ import annotations

import logging
from collections import Counter
from typing import Hashable, Iterable, TypeVar

from resolve_article_locations.models import FeatureClass, ResolvedLocation
from resolve_article_locations.reference_tables import Admin1Lookup

logger = logging.getLogger(__name__)

K = TypeVar("K", bound=Hashable)

LEDE_FRACTION = 10


def country_counts(resolved: Iterable[ResolvedLocation]) -> Counter[str]:
    """Mentions per ISO country code; locations without a country are skipped."""
    counts: Counter[str] = Counter()
    for location in resolved:
        country_code = location.record.country_code
        if country_code:
            counts[country_code] += 1
    return counts


def state_counts(resolved: Iterable[ResolvedLocation], admin1: Admin1Lookup) -> Counter[str]:
    """
    Mentions per "{country}.{adm1}" key.

    Keys missing from the ADM1 table are not real states (country records
    carry "00", some places carry stale codes) and are left out.
    """
    counts: Counter[str] = Counter()
    for location in resolved:
        key = location.record.admin1_key
        if key is None:
            continue
        if not admin1.is_valid(key):
            logger.debug("Skipping invalid ADM1 key %s for %s", key, location.record.name)
            continue
        counts[key] += 1
    return counts


def city_counts(resolved: Iterable[ResolvedLocation]) -> Counter[int]:
    """Mentions per populated place, keyed by GeoName id."""
    counts: Counter[int] = Counter()
    for location in resolved:
        if location.record.feature_class is FeatureClass.POPULATED_PLACE:
            counts[location.record.geoname_id] += 1
    return counts


def scored_state_counts(resolved: Iterable[ResolvedLocation], text: str) -> Counter[str]:
    """
    State counts weighted towards the lede.

    A mention in the first tenth of the text scores 2, any other mention 1.
    """
    lede_end = len(text) // LEDE_FRACTION
    counts: Counter[str] = Counter()
    for location in resolved:
        key = location.record.admin1_key
        if key is None:
            continue
        counts[key] += 2 if location.occurrence.position <= lede_end else 1
    return counts


def top_keys(counts: Counter[K]) -> list[K]:
    """The first key with the highest count, followed by every key tied with it."""
    if not counts:
        return []
    best = max(counts.values())
    return [key for key, count in counts.items() if count == best]
