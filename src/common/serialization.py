"""Serialization utilities for resolved and focus locations."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import pycountry

if TYPE_CHECKING:
    from focus_locations.models import FocusLocation, FocusResult
    from resolve_article_locations.models import GeoRecord, ResolvedLocation
    from resolve_article_locations.reference_tables import ReferenceTables

logger = logging.getLogger(__name__)


def get_country_name(alpha2: str | None) -> str | None:
    """Get the common country name for an ISO alpha-2 code."""
    if not alpha2:
        return None
    try:
        country = pycountry.countries.get(alpha_2=alpha2)
    except (KeyError, LookupError):
        return None
    if country is None:
        return None
    if hasattr(country, "common_name"):
        return country.common_name
    return country.name


def serialize_geo_record(
    record: GeoRecord, tables: ReferenceTables | None = None
) -> dict[str, Any]:
    """
    Serialize a GeoRecord to a JSON-ready dict.

    With reference tables, the GeoName ids of the record's country and state
    are filled in as well.
    """
    data: dict[str, Any] = {
        "id": record.geoname_id,
        "name": record.name,
        "lat": record.latitude,
        "lon": record.longitude,
        "population": record.population,
        "featureClass": record.feature_class.value,
        "featureCode": record.feature_code,
        "countryCode": record.country_code,
        "countryName": get_country_name(record.country_code),
        "countryGeoNameId": None,
        "stateCode": record.admin1_code,
        "stateGeoNameId": None,
    }

    if tables is not None:
        if record.country_code:
            country = tables.countries.lookup(record.country_code)
            if country is not None:
                data["countryGeoNameId"] = country.geoname_id
        if record.admin1_key:
            state = tables.admin1.lookup(record.admin1_key)
            if state is not None:
                data["stateGeoNameId"] = state.geoname_id

    return data


def serialize_resolved_location(
    location: ResolvedLocation, tables: ReferenceTables | None = None
) -> dict[str, Any]:
    data = serialize_geo_record(location.record, tables)
    source: dict[str, Any] = {
        "string": location.occurrence.text,
        "charIndex": location.occurrence.position,
    }
    if location.occurrence.sentence_id is not None:
        source["storySentencesId"] = location.occurrence.sentence_id
    data["source"] = source
    data["exactMatch"] = location.exact_match
    return data


def serialize_focus_location(
    location: FocusLocation, tables: ReferenceTables | None = None
) -> dict[str, Any]:
    data = serialize_geo_record(location.record, tables)
    data["score"] = location.score
    return data


def serialize_focus_result(
    result: FocusResult, tables: ReferenceTables | None = None
) -> dict[str, list[dict[str, Any]]]:
    return {
        "countries": [serialize_focus_location(loc, tables) for loc in result.countries],
        "states": [serialize_focus_location(loc, tables) for loc in result.states],
        "cities": [serialize_focus_location(loc, tables) for loc in result.cities],
    }
