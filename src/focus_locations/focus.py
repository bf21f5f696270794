"""Pick the countries, states and cities a document is about."""

from __future__ import annotations

import logging
from collections import Counter
from typing import Callable, Sequence

from focus_locations.counts import (
    city_counts,
    country_counts,
    scored_state_counts,
    state_counts,
    top_keys,
)
from focus_locations.models import FocusLocation, FocusResult
from resolve_article_locations.models import FeatureClass, GeoRecord, ResolvedLocation
from resolve_article_locations.reference_tables import ReferenceTables

logger = logging.getLogger(__name__)


def _in_document_order(resolved: Sequence[ResolvedLocation]) -> list[ResolvedLocation]:
    return sorted(resolved, key=lambda location: location.occurrence.position)


class FrequencyOfMentionFocusStrategy:
    """
    Aboutness by frequency of mention.

    The most mentioned country, state and city are primary. Countries and
    states also return everything tied with the primary. Cities return the
    primary plus any other city tied with it or mentioned more than once.
    Ties keep the order of first mention in the document. A country missing
    from the reference table is represented by a resolved record in it,
    preferring a country-level record.
    """

    def __init__(self, tables: ReferenceTables):
        self.tables = tables

    def _focus_locations(
        self,
        keys: list[str],
        counts: Counter[str],
        lookup: Callable[[str], GeoRecord | None],
        kind: str,
    ) -> list[FocusLocation]:
        results = []
        for key in keys:
            record = lookup(key)
            if record is None:
                logger.warning("No reference record for %s %s, skipping", kind, key)
                continue
            results.append(FocusLocation(record=record, score=counts[key]))
        return results

    def _country_record(
        self, country_code: str, resolved: Sequence[ResolvedLocation]
    ) -> GeoRecord | None:
        record = self.tables.countries.lookup(country_code)
        if record is not None:
            return record

        in_country = [loc.record for loc in resolved if loc.record.country_code == country_code]
        if not in_country:
            return None
        fallback = next(
            (r for r in in_country if r.feature_class is FeatureClass.COUNTRY), in_country[0]
        )
        logger.warning(
            "No reference record for country %s, using resolved %s (%d)",
            country_code,
            fallback.name,
            fallback.geoname_id,
        )
        return fallback

    def select_countries(self, resolved: Sequence[ResolvedLocation]) -> list[FocusLocation]:
        ordered = _in_document_order(resolved)
        counts = country_counts(ordered)
        keys = top_keys(counts)
        if not keys:
            return []
        logger.info("Found primary country %s", keys[0])
        return self._focus_locations(
            keys, counts, lambda key: self._country_record(key, ordered), "country"
        )

    def select_states(self, resolved: Sequence[ResolvedLocation]) -> list[FocusLocation]:
        counts = state_counts(_in_document_order(resolved), self.tables.admin1)
        keys = top_keys(counts)
        if not keys:
            return []
        logger.info("Found primary state %s", keys[0])
        return self._focus_locations(keys, counts, self.tables.admin1.lookup, "state")

    def select_cities(self, resolved: Sequence[ResolvedLocation]) -> list[FocusLocation]:
        ordered = _in_document_order(resolved)
        counts = city_counts(ordered)
        if not counts:
            return []

        records = {}
        for location in ordered:
            records.setdefault(location.record.geoname_id, location.record)

        primary = top_keys(counts)[0]
        best = counts[primary]
        logger.info("Found primary city %s (%d)", records[primary].name, primary)

        results = [FocusLocation(record=records[primary], score=best)]
        for geoname_id, count in counts.items():
            if geoname_id == primary:
                continue
            # cities mentioned twice or more surface even below the top count
            if count == best or count > 1:
                results.append(FocusLocation(record=records[geoname_id], score=count))
        return results

    def select_lede_states(
        self, resolved: Sequence[ResolvedLocation], text: str
    ) -> list[FocusLocation]:
        """States weighted towards the first tenth of the text, with ties."""
        counts = scored_state_counts(_in_document_order(resolved), text)
        counts = Counter({k: v for k, v in counts.items() if self.tables.admin1.is_valid(k)})
        keys = top_keys(counts)
        if not keys:
            return []
        logger.info("Found primary lede state %s", keys[0])
        return self._focus_locations(keys, counts, self.tables.admin1.lookup, "state")

    def select(self, resolved: Sequence[ResolvedLocation]) -> FocusResult:
        return FocusResult(
            countries=self.select_countries(resolved),
            states=self.select_states(resolved),
            cities=self.select_cities(resolved),
        )
