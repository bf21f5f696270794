"""Data models for resolve_article_locations pipeline stage."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

COUNTRY_ADMIN1_CODE = "00"


class FeatureClass(Enum):
    """Coarse gazetteer categorization of a place record."""

    COUNTRY = "country"
    ADMIN_REGION = "admin_region"
    POPULATED_PLACE = "populated_place"
    TERRAIN = "terrain"
    OTHER = "other"

    @classmethod
    def from_geonames(cls, feature_class: str | None, feature_code: str | None = None) -> FeatureClass:
        """
        Map a GeoNames one-letter feature class to a FeatureClass.

        Args:
            feature_class: GeoNames class letter (A, P, H, T, L, S, U, V, R)
            feature_code: GeoNames feature code (e.g. "PCLI", "ADM1", "PPLC")

        Returns:
            FeatureClass, OTHER when the letter is missing or unknown
        """
        letter = (feature_class or "").strip().upper()
        code = (feature_code or "").strip().upper()
        if letter == "A":
            if code.startswith("PCL"):
                return cls.COUNTRY
            return cls.ADMIN_REGION
        if letter == "P":
            return cls.POPULATED_PLACE
        if letter in ("H", "T", "L", "U", "V"):
            return cls.TERRAIN
        return cls.OTHER


@dataclass(frozen=True)
class GeoRecord:
    """One gazetteer place."""

    geoname_id: int
    name: str
    latitude: float
    longitude: float
    population: int = 0
    feature_class: FeatureClass = FeatureClass.OTHER
    country_code: str | None = None
    admin1_code: str | None = None
    parent_id: int | None = None
    feature_code: str | None = None

    def __post_init__(self) -> None:
        if self.population < 0:
            raise ValueError(f"population must be >= 0, got {self.population}")
        if self.admin1_code and not self.country_code:
            raise ValueError(
                f"GeoRecord {self.geoname_id} has admin1 code {self.admin1_code!r} "
                "but no country code"
            )

    @property
    def admin1_key(self) -> str | None:
        """Reference-table key "{country}.{adm1}", or None without both codes."""
        if not self.country_code or not self.admin1_code:
            return None
        return f"{self.country_code}.{self.admin1_code}"


@dataclass(frozen=True)
class LocationOccurrence:
    """A raw location mention found by an extractor."""

    text: str
    position: int  # character offset in the source document
    sentence_id: str | None = None


@dataclass(frozen=True)
class Candidate:
    """A mention bound to one possible gazetteer record.

    ``record`` is None for the placeholder candidate of a mention the
    gazetteer had nothing for.
    """

    record: GeoRecord | None
    occurrence: LocationOccurrence

    @property
    def is_placeholder(self) -> bool:
        return self.record is None


@dataclass(frozen=True)
class CandidateList:
    """All candidates for one mention, in gazetteer-rank order."""

    occurrence: LocationOccurrence
    candidates: tuple[Candidate, ...]

    def __post_init__(self) -> None:
        if not self.candidates:
            raise ValueError("CandidateList must hold at least one candidate")

    @classmethod
    def placeholder(cls, occurrence: LocationOccurrence) -> CandidateList:
        return cls(occurrence=occurrence, candidates=(Candidate(None, occurrence),))

    @property
    def top(self) -> Candidate:
        return self.candidates[0]

    @property
    def has_records(self) -> bool:
        return any(not c.is_placeholder for c in self.candidates)


@dataclass(frozen=True)
class ResolvedLocation:
    """The place chosen for one mention."""

    record: GeoRecord
    occurrence: LocationOccurrence
    exact_match: bool
