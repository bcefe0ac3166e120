from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(env_file=".env", env_prefix="MTGTRACKER_")

    app_name: str = "MTG Collection Tracker"
    log_level: str = "INFO"

    scryfall_api_url: str = "https://api.scryfall.com"
    user_agent: str = "MTGCollectionTracker/1.0"
    request_timeout: float = 30.0

    # Scryfall asks for 50-100ms between requests (10 requests per second)
    rate_limit_delay: float = 0.1

    set_page_size: int = 175
    search_page_size: int = 20

    # Reference currency for prices; the foil price lives under "<currency>_foil"
    price_currency: str = "eur"

    collection_path: Path = Path("data/collection.json")

    # Set codes hidden from the set list regardless of what the catalog reports
    excluded_set_codes: frozenset[str] = frozenset({"tla", "mar", "spm", "fca", "fic", "fin"})


settings = Settings()


# =============================================================================
# CATALOG CONSTANTS
# =============================================================================

SCRYFALL_CARD_URL = "https://scryfall.com/card"

# Shown when neither the print nor any of its faces carries an image
PLACEHOLDER_IMAGE_NORMAL = (
    "https://cards.scryfall.io/normal/front/0/0/00aec4fb-36e4-406b-85e5-398b2b7b9f7d.jpg"
)
PLACEHOLDER_IMAGE_SMALL = (
    "https://cards.scryfall.io/small/front/0/0/00aec4fb-36e4-406b-85e5-398b2b7b9f7d.jpg"
)

COLORLESS = "C"
