"""Replace demonyms ("French", "Germans") with the country they refer to."""

from __future__ import annotations

import logging
import re
from pathlib import Path

logger = logging.getLogger(__name__)

DEMONYMS_PATH = Path(__file__).parent / "data" / "demonyms.tsv"

_WORD = re.compile(r"\w+")


class DemonymMap:
    """Case-sensitive demonym -> country name substitutions."""

    def __init__(self, mapping: dict[str, str] | None = None):
        self.mapping: dict[str, str] = dict(mapping or {})

    @classmethod
    def from_file(cls, path: str | Path = DEMONYMS_PATH) -> DemonymMap:
        """
        Load a demonym table.

        The file is tab-separated with two header rows. Each row holds the
        country name, then comma-separated adjectivals, then any number of
        columns of comma-separated demonyms. Entries that are not a single word
        are skipped.
        """
        mapping: dict[str, str] = {}
        with open(path, encoding="utf-8") as f:
            rows = f.read().splitlines()[2:]

        for row in rows:
            columns = row.split("\t")
            if len(columns) < 2 or not columns[0].strip():
                continue
            country = columns[0].strip()
            for column in columns[1:]:
                for demonym in column.split(","):
                    demonym = demonym.strip()
                    if not demonym:
                        continue
                    # replace_all swaps single words only
                    if not _WORD.fullmatch(demonym):
                        logger.warning("Skipping multi-word demonym %r for %s", demonym, country)
                        continue
                    mapping[demonym] = country

        logger.info("Loaded %d demonyms from %s", len(mapping), path)
        return cls(mapping)

    def __len__(self) -> int:
        return len(self.mapping)

    def lookup(self, word: str) -> str | None:
        return self.mapping.get(word)

    def replace_all(self, text: str) -> str:
        """Swap every whole-word demonym in text for its country name."""
        found = 0

        def _substitute(match: re.Match[str]) -> str:
            nonlocal found
            word = match.group(0)
            country = self.mapping.get(word)
            if country is None:
                return word
            found += 1
            logger.debug("    substituting demonym: %s -> %s", word, country)
            return country

        cleaned = _WORD.sub(_substitute, text)
        logger.debug("  Replaced %d demonyms", found)
        return cleaned
