"""
Heuristic primitives shared by the disambiguation passes.

Every predicate is False for a placeholder candidate. Name comparisons are
case-insensitive equality of the whole string; the gazetteer's own
confidence values are never consulted.
"""

from __future__ import annotations

from typing import Sequence

from resolve_article_locations.models import (
    COUNTRY_ADMIN1_CODE,
    Candidate,
    FeatureClass,
    GeoRecord,
    ResolvedLocation,
)

ADMIN1_FEATURE_CODE = "ADM1"

# GeoNames feature codes for territories too large to compete with a town
LARGE_AREA_FEATURE_CODES = frozenset(
    {"CONT", "OCN", "SEA", "GULF", "BAY", "RGN", "RGNE", "TERR", "ZN", "DSRT", "MTS", "PEN", "ISLS", "PLN", "PLAT"}
)


def _equals_ignore_case(a: str | None, b: str | None) -> bool:
    if a is None or b is None:
        return False
    return a.casefold() == b.casefold()


def is_exact_match(candidate: Candidate) -> bool:
    if candidate.record is None:
        return False
    return _equals_ignore_case(candidate.record.name, candidate.occurrence.text)


def is_exact_admin1_match(candidate: Candidate) -> bool:
    if candidate.record is None:
        return False
    return _equals_ignore_case(candidate.record.admin1_code, candidate.occurrence.text)


def is_populated(candidate: Candidate) -> bool:
    return candidate.record is not None and candidate.record.population > 0


def is_city(candidate: Candidate) -> bool:
    return is_populated(candidate) and candidate.record.feature_class is FeatureClass.POPULATED_PLACE


def is_admin_region(candidate: Candidate) -> bool:
    return is_populated(candidate) and candidate.record.feature_class is FeatureClass.ADMIN_REGION


def is_admin1(candidate: Candidate) -> bool:
    """A first-level admin region; records without a feature code count as ADM1."""
    if not is_admin_region(candidate):
        return False
    feature_code = candidate.record.feature_code
    return feature_code is None or feature_code == ADMIN1_FEATURE_CODE


def is_country(candidate: Candidate) -> bool:
    return is_populated(candidate) and candidate.record.admin1_code == COUNTRY_ADMIN1_CODE


def is_terrain(candidate: Candidate) -> bool:
    return candidate.record is not None and candidate.record.feature_class is FeatureClass.TERRAIN


def is_large_area(candidate: Candidate) -> bool:
    """Terrain features and very large territories (continents, oceans, regions)."""
    if candidate.record is None:
        return False
    return is_terrain(candidate) or (candidate.record.feature_code or "") in LARGE_AREA_FEATURE_CODES


def in_same_country(a: GeoRecord | None, b: GeoRecord | None) -> bool:
    if a is None or b is None or a.country_code is None:
        return False
    return a.country_code == b.country_code


def in_same_country_and_adm1(a: GeoRecord | None, b: GeoRecord | None) -> bool:
    if not in_same_country(a, b) or a.admin1_code is None:
        return False
    return a.admin1_code == b.admin1_code


def is_colocated(candidate: Candidate, resolved: Sequence[ResolvedLocation]) -> bool:
    """True if the candidate shares a country with anything already resolved."""
    return any(in_same_country(candidate.record, r.record) for r in resolved)


def shares_admin1(candidate: Candidate, resolved: Sequence[ResolvedLocation]) -> bool:
    """True if the candidate lies in the same country and ADM1 as anything resolved."""
    return any(in_same_country_and_adm1(candidate.record, r.record) for r in resolved)


def exact_or_admin1_matches(candidates: Sequence[Candidate]) -> list[Candidate]:
    return [c for c in candidates if is_exact_match(c) or is_exact_admin1_match(c)]


def colocated_with(
    candidates: Sequence[Candidate],
    resolved: Sequence[ResolvedLocation],
    cities_only: bool = False,
    exact_matches_only: bool = False,
    populated_only: bool = False,
) -> list[Candidate]:
    """Candidates in the same country as any resolved location, optionally filtered."""
    return [
        c
        for c in candidates
        if is_colocated(c, resolved)
        and (not cities_only or is_city(c))
        and (not exact_matches_only or is_exact_match(c))
        and (not populated_only or is_populated(c))
    ]


def first_city(candidates: Sequence[Candidate], exact_match_required: bool = False) -> Candidate | None:
    for candidate in candidates:
        if is_city(candidate) and (not exact_match_required or is_exact_match(candidate)):
            return candidate
    return None


def first_admin_region(
    candidates: Sequence[Candidate], exact_match_required: bool = False
) -> Candidate | None:
    for candidate in candidates:
        if is_admin_region(candidate) and (not exact_match_required or is_exact_match(candidate)):
            return candidate
    return None


def choose_city_over_admin(city: Candidate | None, admin: Candidate | None) -> bool:
    """
    Compare the best city with the best admin region.

    The city wins when it is more populated, or when both are in the same
    country (Paris the city over Paris the district). Otherwise the admin
    region wins.
    """
    if city is None:
        return False
    if admin is None:
        return True
    return city.record.population > admin.record.population or in_same_country(
        city.record, admin.record
    )


def to_resolved(candidate: Candidate) -> ResolvedLocation:
    if candidate.record is None:
        raise ValueError(f"Cannot resolve placeholder for {candidate.occurrence.text!r}")
    return ResolvedLocation(
        record=candidate.record,
        occurrence=candidate.occurrence,
        exact_match=is_exact_match(candidate),
    )
