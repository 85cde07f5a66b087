from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
from typing import Optional

class Settings(BaseSettings):
    PROJECT_NAME: str = "Wanderlust"
    VERSION: str = "0.1.0"
    BRIEF_DESCRIPTION: str = "Discovers points of interest around the user and narrates the next place worth walking to."

    ENV: str = Field("development", description="Application environment (e.g., production, development)")
    LOG_LEVEL: str = Field("INFO", description="Root log level")

    # --- Geospatial provider (Overpass) ---
    OVERPASS_API_URL: str = Field(
        "https://overpass-api.de/api/interpreter",
        description="Overpass API interpreter endpoint"
    )
    OVERPASS_TIMEOUT: float = 25.0 # seconds
    HTTP_USER_AGENT: str = "Wanderlust/0.1 (+https://github.com/wanderlust)"

    # --- Discovery radius (meters) ---
    DISCOVERY_INITIAL_RADIUS_M: int = 500
    DISCOVERY_RADIUS_STEP_M: int = 900
    DISCOVERY_MAX_RADIUS_M: int = 5000
    MAX_DISCOVERED_POIS: int = 30

    # Check the raw amenity subtype against the allow-list; False keeps the
    # legacy comparison against the derived category name.
    STRICT_AMENITY_FILTER: bool = Field(True, description="Filter amenities by their raw subtype")

    # --- Reasoning service (any OpenAI-compatible endpoint) ---
    REASONING_API_KEY: Optional[str] = Field(None, description="API key for the reasoning service")
    REASONING_BASE_URL: Optional[str] = Field(
        "https://generativelanguage.googleapis.com/v1beta/openai/",
        description="OpenAI-compatible base URL; None uses the OpenAI default"
    )
    REASONING_MODEL: str = "gemini-2.0-flash-001"
    REASONING_TIMEOUT: float = 20.0 # seconds
    REASONING_TEMPERATURE: float = 0.7

    # --- Encyclopedia lookup ---
    WIKIPEDIA_API_URL: str = "https://en.wikipedia.org/w/api.php"
    WIKIPEDIA_SEARCH_RADIUS_M: int = 500
    WIKIPEDIA_TIMEOUT: float = 8.0 # seconds

    # --- Narrative ---
    NARRATOR_NAME: str = "Wanderlust Assistant"
    NARRATIVE_STYLE: Optional[str] = Field(
        None,
        description="Extra instructions appended to the story prompt (language, dialect, persona)"
    )

    # Pydantic configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore"
    )

settings = Settings()
