"""
Country and ADM1 reference tables.

Each table maps a code (ISO country code, or "{country}.{adm1}") to the
GeoRecord GeoNames uses to represent that country or state. Tables are read
from the GeoNames ``countryInfo.txt`` and ``admin1CodesASCII.txt`` files and
loaded lazily on first access; loading happens once per table even when
several threads ask at the same time.
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path

from resolve_article_locations.gazetteer import Gazetteer, UnknownGeoNameIdError
from resolve_article_locations.models import GeoRecord

logger = logging.getLogger(__name__)

DATA_DIR = Path(__file__).parent / "data"
ADMIN1_CODES_PATH = DATA_DIR / "admin1CodesASCII.txt"
COUNTRY_INFO_PATH = DATA_DIR / "countryInfo.txt"


class GeoNameLookup:
    """Code -> GeoRecord table parsed from a tab-separated GeoNames file."""

    label = "records"
    key_column = 0
    name_column = 1
    id_column = 2

    def __init__(self, path: str | Path, gazetteer: Gazetteer):
        self.path = Path(path)
        self._gazetteer = gazetteer
        self._table: dict[str, GeoRecord] | None = None
        self._lock = threading.Lock()

    def _records(self) -> dict[str, GeoRecord]:
        table = self._table
        if table is None:
            with self._lock:
                if self._table is None:
                    self._table = self._parse()
                table = self._table
        return table

    def _parse(self) -> dict[str, GeoRecord]:
        if not self.path.exists():
            logger.error("Reference file not found: %s (%s table is empty)", self.path, self.label)
            return {}

        table: dict[str, GeoRecord] = {}
        with open(self.path, encoding="utf-8") as f:
            for line_number, line in enumerate(f, start=1):
                line = line.strip()
                if not line or line.startswith("#"):
                    continue
                columns = line.split("\t")
                if len(columns) <= max(self.key_column, self.name_column, self.id_column):
                    logger.error("Skipping short row %d in %s", line_number, self.path)
                    continue

                key = columns[self.key_column]
                name = columns[self.name_column]
                try:
                    geoname_id = int(columns[self.id_column])
                except ValueError:
                    logger.error(
                        "Bad GeoName id %r for %s on row %d of %s",
                        columns[self.id_column],
                        name,
                        line_number,
                        self.path,
                    )
                    continue

                try:
                    table[key] = self._gazetteer.get_by_id(geoname_id)
                except UnknownGeoNameIdError:
                    logger.error("Unknown GeoName id %d for %s", geoname_id, name)

        logger.info("Loaded %d %s from %s", len(table), self.label, self.path)
        return table

    def lookup(self, key: str) -> GeoRecord | None:
        record = self._records().get(key)
        logger.debug("Found %r: %s", key, record)
        return record

    def is_valid(self, key: str) -> bool:
        return key in self._records()

    def keys(self) -> list[str]:
        return list(self._records())

    def __len__(self) -> int:
        return len(self._records())


class Admin1Lookup(GeoNameLookup):
    """Country code + ADM1 code -> representative GeoRecord of the state."""

    label = "admin1 regions"
    key_column = 0
    name_column = 1
    id_column = 3

    @staticmethod
    def get_key(country_code: str, admin1_code: str) -> str:
        return f"{country_code}.{admin1_code}"

    def get(self, country_code: str, admin1_code: str) -> GeoRecord | None:
        return self.lookup(self.get_key(country_code, admin1_code))


class CountryLookup(GeoNameLookup):
    """ISO 3166 alpha-2 country code -> representative GeoRecord of the country."""

    label = "countries"
    key_column = 0
    name_column = 4
    id_column = 16


class ReferenceTables:
    """
    Shared handle to both reference tables.

    Build one at start-up and pass it to whatever needs country or state
    records. Nothing is read from disk until a table is first used.
    """

    def __init__(
        self,
        gazetteer: Gazetteer,
        admin1_codes_path: str | Path = ADMIN1_CODES_PATH,
        country_info_path: str | Path = COUNTRY_INFO_PATH,
    ):
        self.admin1 = Admin1Lookup(admin1_codes_path, gazetteer)
        self.countries = CountryLookup(country_info_path, gazetteer)

    @classmethod
    def from_config(cls, config, gazetteer: Gazetteer) -> ReferenceTables:
        return cls(
            gazetteer,
            admin1_codes_path=config.admin1_codes_path or ADMIN1_CODES_PATH,
            country_info_path=config.country_info_path or COUNTRY_INFO_PATH,
        )
