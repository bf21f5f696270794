"""Run the disambiguation passes in order over a document's candidate lists."""

from __future__ import annotations

import logging
import threading
from collections import Counter
from dataclasses import dataclass, field
from typing import Sequence

from resolve_article_locations.models import CandidateList, ResolvedLocation
from resolve_article_locations.passes import DisambiguationPass, PassKind, default_passes

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChainResult:
    """
    Outcome of one chain run.

    resolved holds picks in the order passes made them; unresolved holds the
    lists no pass could settle.
    """

    resolved: list[ResolvedLocation]
    unresolved: list[CandidateList]
    trigger_counts: dict[PassKind, int] = field(default_factory=dict)


class PassChain:
    def __init__(self, passes: Sequence[DisambiguationPass] | None = None):
        self.passes: tuple[DisambiguationPass, ...] = tuple(
            passes if passes is not None else default_passes()
        )
        self._stats_lock = threading.Lock()
        self._runs = 0
        self._triggers: Counter[PassKind] = Counter()

    def run(self, candidate_lists: Sequence[CandidateList]) -> ChainResult:
        """
        Resolve as many candidate lists as the passes allow.

        Args:
            candidate_lists: One list per mention, as built for a document

        Returns:
            ChainResult with resolved locations, leftover lists and per-pass
            trigger counts for this run
        """
        pending = list(candidate_lists)
        resolved: list[ResolvedLocation] = []
        trigger_counts: dict[PassKind, int] = {}

        for disambiguation_pass in self.passes:
            if not pending:
                break
            result = disambiguation_pass.execute(pending, resolved)
            done_ids = {id(candidate_list) for candidate_list in result.done}
            pending = [c for c in pending if id(c) not in done_ids]
            resolved.extend(result.resolved)
            trigger_counts[disambiguation_pass.kind] = len(result.resolved)
            logger.debug(
                "Pass %s resolved %d lists (%d pending): %s",
                disambiguation_pass.kind.value,
                len(result.resolved),
                len(pending),
                disambiguation_pass.description,
            )

        if pending:
            logger.debug(
                "Dropping %d unresolved mentions: %s",
                len(pending),
                ", ".join(c.occurrence.text for c in pending),
            )

        with self._stats_lock:
            self._runs += 1
            self._triggers.update(trigger_counts)

        return ChainResult(resolved=resolved, unresolved=pending, trigger_counts=trigger_counts)

    def trigger_stats(self) -> dict[PassKind, int]:
        """Cumulative number of lists each pass has resolved across runs."""
        with self._stats_lock:
            return {p.kind: self._triggers.get(p.kind, 0) for p in self.passes}

    def log_pass_trigger_stats(self) -> None:
        with self._stats_lock:
            runs = self._runs
            triggers = dict(self._triggers)
        logger.info("Pass trigger stats over %d runs:", runs)
        for disambiguation_pass in self.passes:
            logger.info(
                "  %s = %d",
                disambiguation_pass.description,
                triggers.get(disambiguation_pass.kind, 0),
            )
