"""Tests for common.serialization module."""

import json

import pytest

from common.serialization import (
    get_country_name,
    serialize_focus_result,
    serialize_geo_record,
    serialize_resolved_location,
)
from focus_locations.models import FocusLocation, FocusResult
from resolve_article_locations.gazetteer import InMemoryGazetteer
from resolve_article_locations.models import (
    FeatureClass,
    GeoRecord,
    LocationOccurrence,
    ResolvedLocation,
)
from resolve_article_locations.reference_tables import DATA_DIR, ReferenceTables

PARIS = GeoRecord(
    2988507,
    "Paris",
    48.85341,
    2.3488,
    population=2138551,
    feature_class=FeatureClass.POPULATED_PLACE,
    country_code="FR",
    admin1_code="11",
    feature_code="PPLC",
)


@pytest.fixture(scope="module")
def tables() -> ReferenceTables:
    gazetteer = InMemoryGazetteer.from_geonames_dump(DATA_DIR / "sample_gazetteer.txt")
    return ReferenceTables(gazetteer)


class TestGetCountryName:
    def test_known_code(self) -> None:
        assert get_country_name("FR") == "France"

    def test_unknown_code(self) -> None:
        assert get_country_name("QQ") is None

    def test_missing_code(self) -> None:
        assert get_country_name(None) is None
        assert get_country_name("") is None


class TestSerializeGeoRecord:
    def test_without_tables(self) -> None:
        result = serialize_geo_record(PARIS)

        assert result == {
            "id": 2988507,
            "name": "Paris",
            "lat": 48.85341,
            "lon": 2.3488,
            "population": 2138551,
            "featureClass": "populated_place",
            "featureCode": "PPLC",
            "countryCode": "FR",
            "countryName": "France",
            "countryGeoNameId": None,
            "stateCode": "11",
            "stateGeoNameId": None,
        }

    def test_with_tables_fills_parent_ids(self, tables: ReferenceTables) -> None:
        result = serialize_geo_record(PARIS, tables)

        assert result["countryGeoNameId"] == 3017382
        assert result["stateGeoNameId"] == 3012874

    def test_country_record_has_no_state(self, tables: ReferenceTables) -> None:
        france = GeoRecord(
            3017382, "France", 46.0, 2.0, feature_class=FeatureClass.COUNTRY,
            country_code="FR", admin1_code="00",
        )
        result = serialize_geo_record(france, tables)

        assert result["countryGeoNameId"] == 3017382
        assert result["stateGeoNameId"] is None

    def test_is_json_serializable(self, tables: ReferenceTables) -> None:
        json.dumps(serialize_geo_record(PARIS, tables))


class TestSerializeResolvedLocation:
    def test_adds_source_and_exact_match(self) -> None:
        location = ResolvedLocation(PARIS, LocationOccurrence("Paris", 42), exact_match=True)
        result = serialize_resolved_location(location)

        assert result["source"] == {"string": "Paris", "charIndex": 42}
        assert result["exactMatch"] is True

    def test_includes_sentence_id(self) -> None:
        location = ResolvedLocation(PARIS, LocationOccurrence("Paris", 3, "s-12"), exact_match=False)
        result = serialize_resolved_location(location)

        assert result["source"]["storySentencesId"] == "s-12"
        assert result["exactMatch"] is False


class TestSerializeFocusResult:
    def test_all_axes(self) -> None:
        result = serialize_focus_result(
            FocusResult(cities=[FocusLocation(record=PARIS, score=3)])
        )

        assert result["countries"] == []
        assert result["states"] == []
        assert [(c["name"], c["score"]) for c in result["cities"]] == [("Paris", 3)]
