"""Gazetteer clients: query place names, fetch places by GeoName id."""

from __future__ import annotations

import csv
import logging
from pathlib import Path
from typing import Any, Iterable, Protocol

import requests
from geopy.exc import GeocoderServiceError, GeocoderTimedOut
from geopy.geocoders import GeoNames

from resolve_article_locations.models import FeatureClass, GeoRecord

logger = logging.getLogger(__name__)

GEONAMES_GET_URL = "http://api.geonames.org/getJSON"
USER_AGENT = "resolve-article-locations/1.0"


class UnknownGeoNameIdError(LookupError):
    """No gazetteer record exists for a GeoName id."""

    def __init__(self, geoname_id: int):
        super().__init__(f"Unknown GeoName id {geoname_id}")
        self.geoname_id = geoname_id


class Gazetteer(Protocol):
    def query_candidates(
        self, mention_text: str, max_results: int, fuzzy: bool = False
    ) -> list[GeoRecord]:
        """Return up to max_results records for a name, best first."""
        ...

    def get_by_id(self, geoname_id: int) -> GeoRecord:
        """Return the record for an id or raise UnknownGeoNameIdError."""
        ...


def _none_if_blank(value: Any) -> str | None:
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def _record_from_geonames_json(row: dict[str, Any]) -> GeoRecord:
    """Build a GeoRecord from a GeoNames web-service JSON row."""
    geoname_id = int(row["geonameId"])
    country_code = _none_if_blank(row.get("countryCode"))
    admin1_code = _none_if_blank(row.get("adminCode1")) if country_code else None
    feature_code = _none_if_blank(row.get("fcode"))

    parent_id = None
    for key in ("adminId1", "countryId"):
        candidate = row.get(key)
        if candidate and int(candidate) != geoname_id:
            parent_id = int(candidate)
            break

    return GeoRecord(
        geoname_id=geoname_id,
        name=row.get("name") or row.get("toponymName") or "",
        latitude=float(row.get("lat") or 0.0),
        longitude=float(row.get("lng") or 0.0),
        population=int(row.get("population") or 0),
        feature_class=FeatureClass.from_geonames(row.get("fcl"), feature_code),
        country_code=country_code,
        admin1_code=admin1_code,
        parent_id=parent_id,
        feature_code=feature_code,
    )


def _record_from_dump_row(row: list[str]) -> GeoRecord:
    """Build a GeoRecord from one GeoNames dump line (allCountries.txt layout)."""
    country_code = _none_if_blank(row[8])
    feature_code = _none_if_blank(row[7])
    return GeoRecord(
        geoname_id=int(row[0]),
        name=row[1],
        latitude=float(row[4]),
        longitude=float(row[5]),
        population=int(row[14] or 0),
        feature_class=FeatureClass.from_geonames(row[6], feature_code),
        country_code=country_code,
        admin1_code=_none_if_blank(row[10]) if country_code else None,
        feature_code=feature_code,
    )


class InMemoryGazetteer:
    """
    Gazetteer over a list of records held in memory.

    Names, ASCII names and alternate names are indexed case-insensitively.
    Results are ranked by population (descending), then by id.
    """

    def __init__(
        self,
        records: Iterable[GeoRecord],
        alternate_names: dict[int, list[str]] | None = None,
    ):
        self._by_id: dict[int, GeoRecord] = {}
        self._by_name: dict[str, list[GeoRecord]] = {}

        alternate_names = alternate_names or {}
        for record in records:
            self._by_id[record.geoname_id] = record
            names = [record.name] + alternate_names.get(record.geoname_id, [])
            for name in dict.fromkeys(n.strip().lower() for n in names if n and n.strip()):
                self._by_name.setdefault(name, []).append(record)

        for bucket in self._by_name.values():
            bucket.sort(key=_rank_key)

        logger.info(
            "Indexed %d gazetteer records under %d names",
            len(self._by_id),
            len(self._by_name),
        )

    @classmethod
    def from_geonames_dump(cls, path: str | Path) -> InMemoryGazetteer:
        """
        Load a GeoNames dump file (allCountries.txt / cities15000.txt layout).

        Malformed rows are logged and skipped.
        """
        records: list[GeoRecord] = []
        alternate_names: dict[int, list[str]] = {}
        skipped = 0

        with open(path, encoding="utf-8", newline="") as f:
            reader = csv.reader(f, delimiter="\t", quoting=csv.QUOTE_NONE)
            for line_number, row in enumerate(reader, start=1):
                if not row or row[0].startswith("#"):
                    continue
                if len(row) < 15:
                    logger.error("Skipping short gazetteer row %d in %s", line_number, path)
                    skipped += 1
                    continue
                try:
                    record = _record_from_dump_row(row)
                except ValueError as exc:
                    logger.error("Skipping gazetteer row %d in %s: %s", line_number, path, exc)
                    skipped += 1
                    continue
                records.append(record)
                names = [row[2]] + (row[3].split(",") if row[3] else [])
                alternate_names[record.geoname_id] = [n for n in names if n]

        logger.info("Loaded %d gazetteer records from %s (%d skipped)", len(records), path, skipped)
        return cls(records, alternate_names)

    def __len__(self) -> int:
        return len(self._by_id)

    def query_candidates(
        self, mention_text: str, max_results: int, fuzzy: bool = False
    ) -> list[GeoRecord]:
        key = mention_text.strip().lower()
        if not key or max_results < 1:
            return []

        results = list(self._by_name.get(key, []))
        if fuzzy:
            prefix_hits = sorted(
                (
                    record
                    for name, bucket in self._by_name.items()
                    if name != key and name.startswith(key)
                    for record in bucket
                ),
                key=_rank_key,
            )
            results.extend(prefix_hits)

        seen: set[int] = set()
        unique: list[GeoRecord] = []
        for record in results:
            if record.geoname_id in seen:
                continue
            seen.add(record.geoname_id)
            unique.append(record)
        return unique[:max_results]

    def get_by_id(self, geoname_id: int) -> GeoRecord:
        try:
            return self._by_id[geoname_id]
        except KeyError:
            raise UnknownGeoNameIdError(geoname_id) from None


def _rank_key(record: GeoRecord) -> tuple[int, int]:
    return (-record.population, record.geoname_id)


class GeoNamesGazetteer:
    """
    Gazetteer backed by the GeoNames web service.

    Name search goes through geopy's GeoNames geocoder; lookups by id use the
    getJSON endpoint. Transport failures during search are logged and turned
    into an empty candidate list.
    """

    def __init__(self, username: str, timeout: int = 5, session: requests.Session | None = None):
        if not username:
            raise ValueError("GeoNames requires a username (set GEONAMES_USERNAME)")
        self.username = username
        self.timeout = timeout
        self._geocoder = GeoNames(username=username, timeout=timeout, user_agent=USER_AGENT)
        self._session = session or requests.Session()

    def query_candidates(
        self, mention_text: str, max_results: int, fuzzy: bool = False
    ) -> list[GeoRecord]:
        # GeoNames full-text search is already tolerant; fuzzy needs no extra handling.
        if not mention_text or not mention_text.strip() or max_results < 1:
            return []
        try:
            locations = self._geocoder.geocode(mention_text.strip(), exactly_one=False)
        except GeocoderTimedOut:
            logger.warning("GeoNames timeout resolving: %s", mention_text)
            return []
        except GeocoderServiceError as e:
            logger.warning("GeoNames service error resolving %s: %s", mention_text, e)
            return []

        records: list[GeoRecord] = []
        for location in (locations or [])[:max_results]:
            try:
                records.append(_record_from_geonames_json(location.raw))
            except (KeyError, TypeError, ValueError) as e:
                logger.warning("Skipping malformed GeoNames row for %s: %s", mention_text, e)
        return records

    def get_by_id(self, geoname_id: int) -> GeoRecord:
        try:
            response = self._session.get(
                GEONAMES_GET_URL,
                params={"geonameId": geoname_id, "username": self.username},
                timeout=self.timeout,
                headers={"User-Agent": USER_AGENT},
            )
            response.raise_for_status()
            row = response.json()
        except (requests.RequestException, ValueError) as e:
            logger.warning("GeoNames lookup failed for %d: %s", geoname_id, e)
            raise UnknownGeoNameIdError(geoname_id) from e

        if "geonameId" not in row:
            status = row.get("status", {}).get("message", "no record")
            logger.debug("GeoNames has no record %d: %s", geoname_id, status)
            raise UnknownGeoNameIdError(geoname_id)
        try:
            return _record_from_geonames_json(row)
        except (KeyError, TypeError, ValueError) as e:
            raise UnknownGeoNameIdError(geoname_id) from e
