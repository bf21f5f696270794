"""Build per-mention candidate lists from a gazetteer."""

from __future__ import annotations

import logging

from resolve_article_locations.gazetteer import Gazetteer
from resolve_article_locations.models import Candidate, CandidateList, LocationOccurrence

logger = logging.getLogger(__name__)

MAX_HIT_DEPTH = 10


def build_candidate_lists(
    occurrences: list[LocationOccurrence],
    gazetteer: Gazetteer | None,
    max_hit_depth: int = MAX_HIT_DEPTH,
    fuzzy: bool = False,
) -> list[CandidateList]:
    """
    Query the gazetteer once per mention and collect ranked candidates.

    Args:
        occurrences: Location mentions in document order
        gazetteer: Gazetteer client, or None when no gazetteer is available
        max_hit_depth: Maximum number of candidates kept per mention
        fuzzy: Whether the gazetteer may return non-exact name matches

    Returns:
        One CandidateList per occurrence, in the same order. Mentions without
        any gazetteer hit get a placeholder-only list.
    """
    if max_hit_depth < 1:
        raise ValueError(f"max_hit_depth must be >= 1, got {max_hit_depth}")

    if gazetteer is None:
        logger.warning("No gazetteer available, %d mentions get placeholders", len(occurrences))

    candidate_lists: list[CandidateList] = []
    for occurrence in occurrences:
        records = []
        if gazetteer is not None:
            records = gazetteer.query_candidates(occurrence.text, max_hit_depth, fuzzy)[:max_hit_depth]

        if not records:
            logger.debug("No candidates for %s@%d", occurrence.text, occurrence.position)
            candidate_lists.append(CandidateList.placeholder(occurrence))
            continue

        candidate_lists.append(
            CandidateList(
                occurrence=occurrence,
                candidates=tuple(Candidate(record, occurrence) for record in records),
            )
        )

    logger.debug(
        "Built %d candidate lists (%d placeholders)",
        len(candidate_lists),
        sum(1 for c in candidate_lists if not c.has_records),
    )
    return candidate_lists
