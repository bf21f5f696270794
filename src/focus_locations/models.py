"""Data models for document focus selection."""

from __future__ import annotations

from dataclasses import dataclass, field

from resolve_article_locations.models import GeoRecord


@dataclass(frozen=True)
class FocusLocation:
    """A place the document is about, with its mention count."""

    record: GeoRecord
    score: int


@dataclass(frozen=True)
class FocusResult:
    countries: list[FocusLocation] = field(default_factory=list)
    states: list[FocusLocation] = field(default_factory=list)
    cities: list[FocusLocation] = field(default_factory=list)

    @property
    def primary_country(self) -> FocusLocation | None:
        return self.countries[0] if self.countries else None

    @property
    def primary_state(self) -> FocusLocation | None:
        return self.states[0] if self.states else None

    @property
    def primary_city(self) -> FocusLocation | None:
        return self.cities[0] if self.cities else None
