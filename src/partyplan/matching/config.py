"""Configuration for the matching engine and its catalog source."""

import os
import tomllib
from pathlib import Path

from loguru import logger
from pydantic import BaseModel, Field


class EngineConfig(BaseModel):
    """Score weights and thresholds used by the selector and replacement ranking.

    The defaults reproduce the reference behaviour; they are empirically chosen
    and can be tuned under ``[engine]`` in the config file.
    """

    budget_tolerance: float = Field(
        1.3, description="Multiplier on a category budget a price may reach."
    )

    # availability / location adjustments
    availability_confirmed: float = 25.0
    availability_uncertain: float = 10.0
    availability_penalty: float = -30.0
    location_confirmed: float = 15.0
    location_uncertain: float = 5.0
    location_penalty: float = -20.0

    # theme affinity
    base_score: float = 50.0
    theme_match: float = 50.0
    service_theme_match: float = 30.0
    name_match: float = 20.0
    description_match: float = 10.0
    no_theme_untagged: float = 30.0
    no_theme_general: float = 40.0
    rating_weight: float = 2.0
    soft_play_bonus: float = 10.0

    # replacement ranking
    replacement_rating_weight: float = 10.0
    replacement_max_savings: float = 20.0
    replacement_same_price: float = 10.0
    replacement_theme_match: float = 25.0
    replacement_max_reviews: float = 15.0
    replacement_premium: float = 15.0
    replacement_faster_response: float = 10.0
    replacement_baseline: float = 10.0
    replacement_rating_margin: float = Field(
        0.3, description="Rating lead required for a 'better_reviews' reason."
    )
    replacement_default_rating: float = 4.0
    replacement_default_response_hours: float = 24.0
    replacement_shortlist: int = 5


class CatalogConfig(BaseModel):
    """Where the supplier catalog is read from."""

    file: str | None = Field(None, description="Path to a JSON supplier catalog.")
    url: str | None = Field(None, description="HTTP endpoint serving the catalog.")


def get_config_dir() -> Path:
    return Path.home() / ".partyplan"


def get_config_file() -> Path:
    return get_config_dir() / "config.toml"


def _read_config_file() -> dict:
    config_file = get_config_file()
    if not config_file.exists():
        return {}
    try:
        with open(config_file, "rb") as f:
            data = tomllib.load(f)
        logger.debug(f"Loaded config from {config_file}")
        return data
    except Exception as e:
        logger.warning(f"Failed to load config file: {e}")
        return {}


def load_engine_config() -> EngineConfig:
    """Load engine weights from ``[engine]`` in ``~/.partyplan/config.toml``.

    Unknown or invalid entries fall back to the defaults with a warning.
    """
    section = _read_config_file().get("engine", {})
    if not section:
        return EngineConfig()
    try:
        return EngineConfig(**section)
    except ValueError as e:
        logger.warning(f"Invalid [engine] configuration, using defaults: {e}")
        return EngineConfig()


def load_catalog_config() -> CatalogConfig:
    """Load the catalog source.

    Precedence order:
    1. ``PARTYPLAN_CATALOG_FILE`` / ``PARTYPLAN_CATALOG_URL`` environment variables
    2. ``~/.partyplan/config.toml`` → ``[catalog]``
    """
    file = os.getenv("PARTYPLAN_CATALOG_FILE")
    url = os.getenv("PARTYPLAN_CATALOG_URL")

    section = _read_config_file().get("catalog", {})
    if not file:
        file = section.get("file")
    if not url:
        url = section.get("url")

    return CatalogConfig(file=file, url=url)


def create_default_config() -> None:
    """Create a default configuration file with example settings."""
    config_file = get_config_file()

    if config_file.exists():
        logger.warning(f"Config file already exists at {config_file}")
        return

    default_content = """# partyplan configuration

[catalog]
# JSON supplier catalog (can also be set via PARTYPLAN_CATALOG_FILE)
# file = "~/party/catalog.json"
# or an HTTP endpoint returning the same JSON (PARTYPLAN_CATALOG_URL)
# url = "https://example.com/suppliers.json"

[engine]
# Price may exceed a category's budget share by this factor
budget_tolerance = 1.3
availability_confirmed = 25
availability_uncertain = 10
availability_penalty = -30
location_confirmed = 15
location_uncertain = 5
location_penalty = -20
"""

    get_config_dir().mkdir(parents=True, exist_ok=True)
    config_file.write_text(default_content)
    logger.info(f"Created default config file at {config_file}")
