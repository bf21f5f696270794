"""YAML configuration for location resolution."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from common.config import ConfigSingleton, find_config_path, load_yaml
from resolve_article_locations.candidates import MAX_HIT_DEPTH
from resolve_article_locations.passes import MEGA_CITY_POPULATION
from resolve_article_locations.reference_tables import (
    ADMIN1_CODES_PATH,
    COUNTRY_INFO_PATH,
    DATA_DIR,
)

# Load .env file if it exists
load_dotenv()

CONFIG_DIR = Path(__file__).parent / "configs"
SAMPLE_GAZETTEER_PATH = DATA_DIR / "sample_gazetteer.txt"

GAZETTEERS = ("local", "geonames")


@dataclass
class ResolverConfig:
    """Configuration for extracting, resolving and focusing article locations."""

    gazetteer: str = "local"  # "local" or "geonames"
    gazetteer_path: str = str(SAMPLE_GAZETTEER_PATH)
    geonames_username: str = ""
    max_hit_depth: int = MAX_HIT_DEPTH
    fuzzy: bool = False
    mega_city_population: int = MEGA_CITY_POPULATION
    fallback_to_population: bool = False
    spacy_model: str = "en_core_web_sm"
    replace_demonyms: bool = True
    admin1_codes_path: str = str(ADMIN1_CODES_PATH)
    country_info_path: str = str(COUNTRY_INFO_PATH)
    output_dir: str = "output"

    def __post_init__(self) -> None:
        if self.gazetteer not in GAZETTEERS:
            raise ValueError(
                f"Invalid gazetteer: {self.gazetteer}. Must be one of {list(GAZETTEERS)}"
            )

        if self.gazetteer == "local" and not self.gazetteer_path:
            raise ValueError("Local gazetteer requires gazetteer_path")

        if self.gazetteer == "geonames" and not self.geonames_username:
            raise ValueError("GeoNames gazetteer requires GEONAMES_USERNAME environment variable")

        if self.max_hit_depth < 1:
            raise ValueError(f"max_hit_depth must be >= 1, got {self.max_hit_depth}")

        if self.mega_city_population < 0:
            raise ValueError(
                f"mega_city_population must be >= 0, got {self.mega_city_population}"
            )

        if not self.spacy_model:
            raise ValueError("spacy_model must not be empty")


def load_config(name: str | None = None) -> ResolverConfig:
    """Load resolver config by name (e.g. 'test' or 'default') or path.

    Args:
        name: Config name without extension, a path to a YAML file, or None
            to use RESOLVER_CONFIG / "default"

    Returns:
        ResolverConfig instance
    """
    config_path = find_config_path(name, CONFIG_DIR, env_var="RESOLVER_CONFIG")
    data = load_yaml(config_path)

    gazetteer_data = data.get("gazetteer", {}) or {}
    if isinstance(gazetteer_data, str):
        gazetteer_data = {"backend": gazetteer_data}

    disambiguation = data.get("disambiguation", {}) or {}
    reference = data.get("reference_tables", {}) or {}

    return ResolverConfig(
        gazetteer=gazetteer_data.get("backend", "local"),
        gazetteer_path=gazetteer_data.get("path") or str(SAMPLE_GAZETTEER_PATH),
        geonames_username=os.getenv("GEONAMES_USERNAME", gazetteer_data.get("username", "")),
        max_hit_depth=disambiguation.get("max_hit_depth", MAX_HIT_DEPTH),
        fuzzy=disambiguation.get("fuzzy", False),
        mega_city_population=disambiguation.get("mega_city_population", MEGA_CITY_POPULATION),
        fallback_to_population=disambiguation.get("fallback_to_population", False),
        spacy_model=data.get("spacy_model", "en_core_web_sm"),
        replace_demonyms=data.get("replace_demonyms", True),
        admin1_codes_path=reference.get("admin1_codes_path") or str(ADMIN1_CODES_PATH),
        country_info_path=reference.get("country_info_path") or str(COUNTRY_INFO_PATH),
        output_dir=data.get("output_dir", "output"),
    )


_manager: ConfigSingleton[ResolverConfig] = ConfigSingleton(load_config)
get_config = _manager.get
set_config = _manager.set
reset_config = _manager.reset
