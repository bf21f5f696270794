"""Tests for focus_locations.focus module."""

from __future__ import annotations

import pytest

from focus_locations.focus import FrequencyOfMentionFocusStrategy
from focus_locations.models import FocusResult
from resolve_article_locations.gazetteer import InMemoryGazetteer
from resolve_article_locations.models import (
    FeatureClass,
    GeoRecord,
    LocationOccurrence,
    ResolvedLocation,
)
from resolve_article_locations.reference_tables import DATA_DIR, ReferenceTables


@pytest.fixture(scope="module")
def strategy() -> FrequencyOfMentionFocusStrategy:
    gazetteer = InMemoryGazetteer.from_geonames_dump(DATA_DIR / "sample_gazetteer.txt")
    return FrequencyOfMentionFocusStrategy(ReferenceTables(gazetteer))


def _located(
    geoname_id: int,
    country_code: str | None,
    admin1_code: str | None = None,
    position: int = 0,
    name: str | None = None,
    feature_class: FeatureClass = FeatureClass.POPULATED_PLACE,
) -> ResolvedLocation:
    record = GeoRecord(
        geoname_id,
        name or f"city-{geoname_id}",
        0.0,
        0.0,
        population=1000,
        feature_class=feature_class,
        country_code=country_code,
        admin1_code=admin1_code,
    )
    return ResolvedLocation(record, LocationOccurrence(record.name, position), exact_match=True)


def _names(locations) -> list[tuple[str, int]]:
    return [(location.record.name, location.score) for location in locations]


class TestSelectCountries:
    def test_ties_are_kept(self, strategy: FrequencyOfMentionFocusStrategy) -> None:
        resolved = [
            _located(1, "FR", position=0),
            _located(2, "DE", position=10),
            _located(3, "FR", position=20),
            _located(4, "IT", position=30),
            _located(5, "DE", position=40),
            _located(6, "FR", position=50),
            _located(7, "DE", position=60),
        ]
        assert _names(strategy.select_countries(resolved)) == [("France", 3), ("Germany", 3)]

    def test_first_mentioned_is_primary(self, strategy: FrequencyOfMentionFocusStrategy) -> None:
        # resolution order differs from document order
        resolved = [_located(1, "DE", position=50), _located(2, "FR", position=5)]
        countries = strategy.select_countries(resolved)

        assert countries[0].record.name == "France"
        assert _names(countries) == [("France", 1), ("Germany", 1)]

    def test_single_winner(self, strategy: FrequencyOfMentionFocusStrategy) -> None:
        resolved = [_located(1, "IT"), _located(2, "IT", position=5), _located(3, "ES", position=9)]
        assert _names(strategy.select_countries(resolved)) == [("Italy", 2)]

    def test_no_countries(self, strategy: FrequencyOfMentionFocusStrategy) -> None:
        assert strategy.select_countries([_located(1, None)]) == []
        assert strategy.select_countries([]) == []

    def test_country_missing_from_table_uses_resolved_place(
        self, strategy: FrequencyOfMentionFocusStrategy
    ) -> None:
        resolved = [_located(1850147, "JP", position=i * 10, name="Tokyo") for i in range(3)]
        assert _names(strategy.select_countries(resolved)) == [("Tokyo", 3)]

    def test_country_missing_from_table_prefers_country_record(
        self, strategy: FrequencyOfMentionFocusStrategy
    ) -> None:
        resolved = [
            _located(1850147, "JP", position=0, name="Tokyo"),
            _located(1861060, "JP", "00", position=10, name="Japan", feature_class=FeatureClass.COUNTRY),
            _located(2, "FR", position=20),
        ]
        countries = strategy.select_countries(resolved)

        assert _names(countries) == [("Japan", 2)]
        assert countries[0].record.geoname_id == 1861060

    def test_missing_country_keeps_tie_order(self, strategy: FrequencyOfMentionFocusStrategy) -> None:
        resolved = [_located(1, "JP", name="Osaka"), _located(2, "FR", position=4)]
        assert _names(strategy.select_countries(resolved)) == [("Osaka", 1), ("France", 1)]


class TestSelectStates:
    def test_counts_valid_states(self, strategy: FrequencyOfMentionFocusStrategy) -> None:
        resolved = [
            _located(1, "US", "TX", position=0),
            _located(2, "US", "TX", position=10),
            _located(3, "US", "OK", position=20),
        ]
        assert _names(strategy.select_states(resolved)) == [("Texas", 2)]

    def test_invalid_adm1_is_excluded(self, strategy: FrequencyOfMentionFocusStrategy) -> None:
        resolved = [_located(1, "US", "TX", position=0)] + [
            _located(10 + i, "US", "ZZ", position=10 + i) for i in range(5)
        ]

        assert _names(strategy.select_states(resolved)) == [("Texas", 1)]
        assert _names(strategy.select_countries(resolved)) == [("United States", 6)]

    def test_country_records_do_not_count_as_states(self, strategy: FrequencyOfMentionFocusStrategy) -> None:
        resolved = [_located(3017382, "FR", "00", name="France", feature_class=FeatureClass.COUNTRY)]
        assert strategy.select_states(resolved) == []

    def test_ties(self, strategy: FrequencyOfMentionFocusStrategy) -> None:
        resolved = [_located(1, "FR", "84", position=0), _located(2, "FR", "11", position=5)]
        assert _names(strategy.select_states(resolved)) == [
            ("Auvergne-Rhone-Alpes", 1),
            ("Ile-de-France", 1),
        ]


class TestSelectCities:
    def test_repeated_cities_surface_below_the_top(self, strategy: FrequencyOfMentionFocusStrategy) -> None:
        order = ["A", "B", "C", "A", "B", "C", "C", "D"]
        ids = {"A": 1, "B": 2, "C": 3, "D": 4}
        resolved = [
            _located(ids[name], "US", "TX", position=i * 10, name=f"City{name}")
            for i, name in enumerate(order)
        ]

        assert _names(strategy.select_cities(resolved)) == [("CityC", 3), ("CityA", 2), ("CityB", 2)]

    def test_all_single_mentions_tie(self, strategy: FrequencyOfMentionFocusStrategy) -> None:
        resolved = [_located(1, "FR", name="Paris"), _located(2, "FR", position=9, name="Lyon")]
        assert _names(strategy.select_cities(resolved)) == [("Paris", 1), ("Lyon", 1)]

    def test_same_name_different_places(self, strategy: FrequencyOfMentionFocusStrategy) -> None:
        resolved = [
            _located(2988507, "FR", position=0, name="Paris"),
            _located(4717560, "US", position=10, name="Paris"),
            _located(2988507, "FR", position=20, name="Paris"),
        ]
        cities = strategy.select_cities(resolved)

        assert [(c.record.geoname_id, c.score) for c in cities] == [(2988507, 2)]

    def test_ignores_non_cities(self, strategy: FrequencyOfMentionFocusStrategy) -> None:
        resolved = [_located(1, "US", "TX", feature_class=FeatureClass.ADMIN_REGION)]
        assert strategy.select_cities(resolved) == []


class TestSelectLedeStates:
    def test_lede_mention_outweighs_later_one(self, strategy: FrequencyOfMentionFocusStrategy) -> None:
        text = "x" * 200
        resolved = [_located(1, "US", "OK", position=5), _located(2, "US", "TX", position=150)]

        assert _names(strategy.select_lede_states(resolved, text)) == [("Oklahoma", 2)]

    def test_invalid_keys_are_ignored(self, strategy: FrequencyOfMentionFocusStrategy) -> None:
        resolved = [_located(1, "US", "ZZ", position=0)]
        assert strategy.select_lede_states(resolved, "x" * 100) == []


class TestSelect:
    def test_combines_all_axes(self, strategy: FrequencyOfMentionFocusStrategy) -> None:
        resolved = [
            _located(2988507, "FR", "11", position=0, name="Paris"),
            _located(2996944, "FR", "84", position=20, name="Lyon"),
            _located(2988507, "FR", "11", position=40, name="Paris"),
        ]
        result = strategy.select(resolved)

        assert result.primary_country.record.name == "France"
        assert result.primary_state.record.name == "Ile-de-France"
        assert result.primary_city.record.name == "Paris"
        assert _names(result.cities) == [("Paris", 2)]

    def test_empty(self, strategy: FrequencyOfMentionFocusStrategy) -> None:
        result = strategy.select([])

        assert result == FocusResult()
        assert result.primary_country is None
        assert result.primary_state is None
        assert result.primary_city is None
