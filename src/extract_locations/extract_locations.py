"""Find location mentions in text using spaCy."""

from __future__ import annotations

import logging
import re
from typing import Any

import spacy

from extract_locations.demonyms import DemonymMap
from resolve_article_locations.models import LocationOccurrence

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "en_core_web_sm"
LOCATION_LABELS = {"GPE", "LOC"}

# short forms the gazetteer does not index
MANUAL_ALIASES = {
    "U.S.": "United States",
    "U.S.A.": "United States",
    "U.K.": "United Kingdom",
}

_POSSESSIVE = re.compile(r"['’]s?$")
_TRAILING = re.compile(r"[^\w]+$")


def _clean_mention(text: str) -> tuple[str, int]:
    """
    Tidy an entity span for gazetteer lookup.

    Returns:
        The cleaned mention and how many characters were dropped from its start
    """
    cleaned = text.replace("\n", " ")
    stripped = cleaned.lstrip()
    offset = len(cleaned) - len(stripped)
    if stripped.lower().startswith("the "):
        offset += 4
        stripped = stripped[4:]
    if stripped.endswith("&apos;s"):
        stripped = stripped[:-7]
    stripped = _POSSESSIVE.sub("", stripped).strip()
    if stripped in MANUAL_ALIASES:
        return MANUAL_ALIASES[stripped], offset
    return _TRAILING.sub("", stripped).strip(), offset


class SpacyLocationExtractor:
    """
    Location mentions from spaCy GPE/LOC entities.

    With a demonym map, demonyms are swapped for country names before the
    text is parsed, and positions refer to the substituted text.
    """

    def __init__(
        self,
        model: str = DEFAULT_MODEL,
        demonyms: DemonymMap | None = None,
        batch_size: int = 32,
    ):
        self.model = model
        self.demonyms = demonyms
        self.batch_size = batch_size
        self._nlp: Any = None

    @property
    def nlp(self) -> Any:
        if self._nlp is None:
            logger.info("Loading spaCy model: %s", self.model)
            self._nlp = spacy.load(self.model)
        return self._nlp

    def _prepare(self, text: str) -> str:
        if self.demonyms is None:
            return text
        return self.demonyms.replace_all(text)

    def _occurrences(self, doc: Any, sentence_id: str | None = None) -> list[LocationOccurrence]:
        occurrences = []
        for ent in doc.ents:
            if ent.label_ not in LOCATION_LABELS:
                continue
            mention, offset = _clean_mention(ent.text)
            if not mention:
                continue
            occurrences.append(
                LocationOccurrence(
                    text=mention,
                    position=ent.start_char + offset,
                    sentence_id=sentence_id,
                )
            )
        return occurrences

    def extract(self, text: str) -> list[LocationOccurrence]:
        """Location mentions in text, in document order."""
        if not text:
            return []
        occurrences = self._occurrences(self.nlp(self._prepare(text)))
        logger.debug("Extracted %d location mentions", len(occurrences))
        return occurrences

    def extract_from_sentences(self, sentences: list[dict[str, Any]]) -> list[LocationOccurrence]:
        """
        Location mentions from pre-split sentences.

        Args:
            sentences: Dicts with "id" and "sentence" keys

        Returns:
            Mentions tagged with their sentence id; positions are offsets
            within the sentence
        """
        rows = [s for s in sentences if s.get("sentence")]
        if not rows:
            logger.warning("No sentences to extract locations from")
            return []

        texts = [self._prepare(row["sentence"]) for row in rows]
        occurrences: list[LocationOccurrence] = []
        for row, doc in zip(rows, self.nlp.pipe(texts, batch_size=self.batch_size), strict=True):
            sentence_id = str(row["id"]) if row.get("id") is not None else None
            occurrences.extend(self._occurrences(doc, sentence_id))

        logger.info(
            "Extracted %d location mentions from %d sentences", len(occurrences), len(rows)
        )
        return occurrences
