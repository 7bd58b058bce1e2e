from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(env_file=".env", env_prefix="RANDFLIX_")

    app_name: str = "Randflix"
    debug: bool = False

    # Resolved once at startup by randflix.storage.registry
    storage_kind: str = "memory"

    # MongoDB storage (may embed credentials, never log it)
    mongo_uri: str = "mongodb://localhost:27017"
    mongo_database: str = "randflix"
    mongo_collection: str = "titles"
    mongo_operation_timeout: float = 10.0

    cors_allowed_origins: list[str] = ["*"]
    cors_allowed_headers: list[str] = ["Content-Type"]
    cors_allowed_methods: list[str] = ["GET", "OPTIONS"]


settings = Settings()


# =============================================================================
# LISTING AND RANDOM PICK DEFAULTS
# =============================================================================

DEFAULT_LIST_PAGE_SIZE = 100

# Page sizes above this are clamped before reaching storage
MAX_LIST_PAGE_SIZE = 1000

DEFAULT_SCORE_KIND = "metacritic"
