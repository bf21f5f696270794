"""Tests for focus_locations.counts module."""

from __future__ import annotations

from collections import Counter
from unittest.mock import MagicMock

from focus_locations.counts import (
    city_counts,
    country_counts,
    scored_state_counts,
    state_counts,
    top_keys,
)
from resolve_article_locations.models import (
    FeatureClass,
    GeoRecord,
    LocationOccurrence,
    ResolvedLocation,
)


def _located(
    geoname_id: int,
    country_code: str | None = None,
    admin1_code: str | None = None,
    position: int = 0,
    feature_class: FeatureClass = FeatureClass.POPULATED_PLACE,
) -> ResolvedLocation:
    record = GeoRecord(
        geoname_id,
        f"place-{geoname_id}",
        0.0,
        0.0,
        population=100,
        feature_class=feature_class,
        country_code=country_code,
        admin1_code=admin1_code,
    )
    return ResolvedLocation(record, LocationOccurrence(record.name, position), exact_match=True)


def _admin1(valid: set[str]) -> MagicMock:
    admin1 = MagicMock()
    admin1.is_valid.side_effect = lambda key: key in valid
    return admin1


class TestCountryCounts:
    def test_counts_in_first_seen_order(self) -> None:
        resolved = [_located(1, "DE"), _located(2, "FR"), _located(3, "DE"), _located(4)]
        counts = country_counts(resolved)

        assert counts == Counter({"DE": 2, "FR": 1})
        assert list(counts) == ["DE", "FR"]

    def test_empty(self) -> None:
        assert country_counts([]) == Counter()


class TestStateCounts:
    def test_only_valid_keys(self) -> None:
        resolved = [
            _located(1, "US", "TX"),
            _located(2, "US", "ZZ"),
            _located(3, "US", "ZZ"),
            _located(4, "US", "00", feature_class=FeatureClass.COUNTRY),
            _located(5, "US"),
        ]
        counts = state_counts(resolved, _admin1({"US.TX"}))

        assert counts == Counter({"US.TX": 1})

    def test_same_adm1_in_different_countries(self) -> None:
        resolved = [_located(1, "FR", "11"), _located(2, "IT", "11"), _located(3, "FR", "11")]
        counts = state_counts(resolved, _admin1({"FR.11", "IT.11"}))

        assert counts == Counter({"FR.11": 2, "IT.11": 1})


class TestCityCounts:
    def test_counts_by_id_not_name(self) -> None:
        resolved = [_located(1, "FR"), _located(2, "US"), _located(1, "FR")]
        assert city_counts(resolved) == Counter({1: 2, 2: 1})

    def test_only_populated_places(self) -> None:
        resolved = [_located(1, "US", "TX", feature_class=FeatureClass.ADMIN_REGION), _located(2, "US")]
        assert city_counts(resolved) == Counter({2: 1})


class TestScoredStateCounts:
    def test_lede_mentions_score_double(self) -> None:
        text = "x" * 100
        resolved = [
            _located(1, "US", "TX", position=5),
            _located(2, "US", "TX", position=10),
            _located(3, "US", "TX", position=11),
            _located(4, "US", "OK", position=80),
        ]
        assert scored_state_counts(resolved, text) == Counter({"US.TX": 5, "US.OK": 1})

    def test_skips_records_without_adm1(self) -> None:
        assert scored_state_counts([_located(1, "US", position=0)], "some text") == Counter()

    def test_short_text(self) -> None:
        # len // 10 == 0, so only position 0 is in the lede
        resolved = [_located(1, "US", "TX", position=0), _located(2, "US", "TX", position=3)]
        assert scored_state_counts(resolved, "Texas") == Counter({"US.TX": 3})


class TestTopKeys:
    def test_primary_then_ties(self) -> None:
        counts = Counter({"FR": 3, "IT": 1})
        counts["DE"] = 3
        assert top_keys(counts) == ["FR", "DE"]

    def test_empty(self) -> None:
        assert top_keys(Counter()) == []
