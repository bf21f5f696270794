"""
Disambiguation passes.

A pass looks at every pending candidate list and, where its policy applies,
picks one candidate. Passes never modify their inputs: ``execute`` returns the
new picks together with the lists they settle, and the chain runner works out
what is still pending.

Passes depend on their order. TOP_ADMIN_POPULATED on its own prefers a city
over an admin region in the same country, so "Washington" alone would go to
Washington, D.C.; in the chain EXACT_ADMIN1_MATCH settles it as the state
first.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Sequence

from resolve_article_locations.heuristics import (
    choose_city_over_admin,
    colocated_with,
    exact_or_admin1_matches,
    first_admin_region,
    first_city,
    is_admin1,
    is_city,
    is_colocated,
    is_country,
    is_exact_match,
    is_large_area,
    is_populated,
    is_terrain,
    shares_admin1,
    to_resolved,
)
from resolve_article_locations.models import (
    Candidate,
    CandidateList,
    FeatureClass,
    ResolvedLocation,
)

logger = logging.getLogger(__name__)

MEGA_CITY_POPULATION = 300_000


class PassKind(Enum):
    LARGE_AREAS = "large_areas"
    FUZZY_MATCHED_COUNTRIES = "fuzzy_matched_countries"
    EXACT_ADMIN1_MATCH = "exact_admin1_match"
    EXACT_COLOCATIONS = "exact_colocations"
    TOP_COLOCATIONS = "top_colocations"
    TOP_ADMIN_POPULATED = "top_admin_populated"
    TOP_PREFERRING_COLOCATED = "top_preferring_colocated"
    GREATEST_POPULATION = "greatest_population"


DESCRIPTIONS: dict[PassKind, str] = {
    PassKind.LARGE_AREAS: "Pick continents, oceans and other large areas named exactly",
    PassKind.FUZZY_MATCHED_COUNTRIES: "Pick countries that might not be an exact match",
    PassKind.EXACT_ADMIN1_MATCH: "Pick states (ADM1) that are an exact match to help colocation",
    PassKind.EXACT_COLOCATIONS: (
        "Pick populated cities named exactly that share a country/state with places found so far"
    ),
    PassKind.TOP_COLOCATIONS: (
        "Pick the top admin region or populated place in a country found so far"
    ),
    PassKind.TOP_ADMIN_POPULATED: "Pick the top populated city or admin region",
    PassKind.TOP_PREFERRING_COLOCATED: (
        "Pick the top candidate, preferring one in a state found so far"
    ),
    PassKind.GREATEST_POPULATION: "Pick the most populated candidate",
}

DEFAULT_PASS_ORDER: tuple[PassKind, ...] = (
    PassKind.LARGE_AREAS,
    PassKind.FUZZY_MATCHED_COUNTRIES,
    PassKind.EXACT_ADMIN1_MATCH,
    PassKind.EXACT_COLOCATIONS,
    PassKind.TOP_COLOCATIONS,
    PassKind.TOP_ADMIN_POPULATED,
    PassKind.TOP_PREFERRING_COLOCATED,
)


@dataclass(frozen=True)
class PassResult:
    resolved: list[ResolvedLocation] = field(default_factory=list)
    done: list[CandidateList] = field(default_factory=list)


@dataclass(frozen=True)
class DisambiguationPass:
    """One step of the disambiguation chain."""

    kind: PassKind
    mega_city_population: int = MEGA_CITY_POPULATION

    @property
    def description(self) -> str:
        return DESCRIPTIONS[self.kind]

    def execute(
        self,
        pending: Sequence[CandidateList],
        resolved: Sequence[ResolvedLocation],
    ) -> PassResult:
        """
        Run this pass over the pending lists.

        Args:
            pending: Candidate lists not settled by earlier passes
            resolved: Locations picked by earlier passes

        Returns:
            PassResult with the new picks and the lists they settle. A list
            whose evaluation raises is logged and left pending.
        """
        if not pending:
            return PassResult()
        if self.kind is PassKind.EXACT_COLOCATIONS and not resolved:
            # nothing to be colocated with yet
            return PassResult()

        select = _SELECTORS[self.kind]
        context = list(resolved)
        result = PassResult()

        for candidate_list in pending:
            try:
                choice = select(self, candidate_list, context)
                if choice is None:
                    continue
                location = to_resolved(choice)
            except Exception:
                logger.exception(
                    "%s pass failed on %s@%d; leaving it for later passes",
                    self.kind.value,
                    candidate_list.occurrence.text,
                    candidate_list.occurrence.position,
                )
                continue

            _log_pick(self.kind, location)
            context.append(location)
            result.resolved.append(location)
            result.done.append(candidate_list)

        return result


def _log_pick(kind: PassKind, location: ResolvedLocation) -> None:
    record = location.record
    logger.debug(
        "  PICKED (%s): %s@%d -> %d %s, %s, %s / %d / %s (exact=%s)",
        kind.value,
        location.occurrence.text,
        location.occurrence.position,
        record.geoname_id,
        record.name,
        record.admin1_code,
        record.country_code,
        record.population,
        record.feature_class.value,
        location.exact_match,
    )


def _select_large_area(
    p: DisambiguationPass, candidate_list: CandidateList, context: list[ResolvedLocation]
) -> Candidate | None:
    top = candidate_list.top
    if not is_exact_match(top) or not is_large_area(top):
        return None
    for other in candidate_list.candidates[1:]:
        if is_exact_match(other) and is_populated(other):
            return None
    return top


def _select_fuzzy_country(
    p: DisambiguationPass, candidate_list: CandidateList, context: list[ResolvedLocation]
) -> Candidate | None:
    for candidate in candidate_list.candidates:
        # large territories often rank ahead of countries (ie. Indian Subcontinent)
        if is_terrain(candidate):
            continue
        if is_country(candidate):
            return candidate
        return None
    return None


def _select_exact_admin1(
    p: DisambiguationPass, candidate_list: CandidateList, context: list[ResolvedLocation]
) -> Candidate | None:
    candidates = candidate_list.candidates
    for candidate in candidates:
        # a well known city beats the state it shares a name with (Oklahoma, Sao Paulo)
        if (
            is_city(candidate)
            and is_exact_match(candidate)
            and candidate.record.population > p.mega_city_population
        ):
            return None
    for candidate in exact_or_admin1_matches(candidates):
        if is_admin1(candidate):
            return candidate
    return None


def _select_exact_colocation(
    p: DisambiguationPass, candidate_list: CandidateList, context: list[ResolvedLocation]
) -> Candidate | None:
    colocated = colocated_with(
        candidate_list.candidates,
        context,
        cities_only=True,
        exact_matches_only=True,
        populated_only=True,
    )
    logger.debug("  Found %d colocations for %s", len(colocated), candidate_list.occurrence.text)
    if not colocated:
        return None
    if len(colocated) == 1:
        return colocated[0]
    for candidate in colocated:
        if shares_admin1(candidate, context):
            return candidate
    return colocated[0]


def _select_top_colocation(
    p: DisambiguationPass, candidate_list: CandidateList, context: list[ResolvedLocation]
) -> Candidate | None:
    for candidate in candidate_list.candidates:
        if candidate.record is None:
            continue
        if candidate.record.feature_class not in (
            FeatureClass.ADMIN_REGION,
            FeatureClass.POPULATED_PLACE,
        ):
            continue
        if is_colocated(candidate, context):
            return candidate
    return None


def _select_top_admin_populated(
    p: DisambiguationPass, candidate_list: CandidateList, context: list[ResolvedLocation]
) -> Candidate | None:
    city = first_city(candidate_list.candidates)
    admin = first_admin_region(candidate_list.candidates)
    if choose_city_over_admin(city, admin):
        return city
    return admin


def _select_top_preferring_colocated(
    p: DisambiguationPass, candidate_list: CandidateList, context: list[ResolvedLocation]
) -> Candidate | None:
    real = [c for c in candidate_list.candidates if c.record is not None]
    if not real:
        return None
    first = real[0]
    tied = [
        c
        for c in real
        if c.record.name.casefold() == first.record.name.casefold()
        and c.record.feature_class is first.record.feature_class
    ]
    for candidate in tied:
        if shares_admin1(candidate, context):
            return candidate
    return first


def _select_greatest_population(
    p: DisambiguationPass, candidate_list: CandidateList, context: list[ResolvedLocation]
) -> Candidate | None:
    real = [c for c in candidate_list.candidates if c.record is not None]
    if not real:
        return None
    return max(real, key=lambda c: c.record.population)


_Selector = Callable[[DisambiguationPass, CandidateList, list[ResolvedLocation]], "Candidate | None"]

_SELECTORS: dict[PassKind, _Selector] = {
    PassKind.LARGE_AREAS: _select_large_area,
    PassKind.FUZZY_MATCHED_COUNTRIES: _select_fuzzy_country,
    PassKind.EXACT_ADMIN1_MATCH: _select_exact_admin1,
    PassKind.EXACT_COLOCATIONS: _select_exact_colocation,
    PassKind.TOP_COLOCATIONS: _select_top_colocation,
    PassKind.TOP_ADMIN_POPULATED: _select_top_admin_populated,
    PassKind.TOP_PREFERRING_COLOCATED: _select_top_preferring_colocated,
    PassKind.GREATEST_POPULATION: _select_greatest_population,
}


def default_passes(
    mega_city_population: int = MEGA_CITY_POPULATION,
    fallback_to_population: bool = False,
) -> list[DisambiguationPass]:
    """
    Build the standard pass order.

    Args:
        mega_city_population: City size above which an exact-match city blocks
            the exact ADM1 pass
        fallback_to_population: Append a final pass that picks the most
            populated candidate for anything still unresolved

    Returns:
        List of passes in execution order
    """
    kinds = list(DEFAULT_PASS_ORDER)
    if fallback_to_population:
        kinds.append(PassKind.GREATEST_POPULATION)
    return [DisambiguationPass(kind, mega_city_population=mega_city_population) for kind in kinds]
