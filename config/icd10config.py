# config/icd10config.py
"""
ICD-10 Resolver Configuration
Controls local search fallbacks and the WHO ICD API integration.
"""
from pydantic import Field
from pydantic_settings import BaseSettings


class Icd10Settings(BaseSettings):
    """Configuration for ICD-10 code search and lookup"""

    # ============================================================================
    # WHO ICD API (OAuth2 client credentials)
    # ============================================================================
    ICD10_CLIENT_ID: str = Field(default="", env="ICD10_CLIENT_ID")
    ICD10_CLIENT_SECRET: str = Field(default="", env="ICD10_CLIENT_SECRET")
    WHO_API_BASE: str = "https://id.who.int/icd/release/10/2019"
    WHO_TOKEN_ENDPOINT: str = "https://icdaccessmanagement.who.int/connect/token"
    WHO_SEARCH_URL: str = "https://id.who.int/icd/release/11/2024-01/mms/search"
    WHO_TOKEN_SCOPE: str = "icdapi_access"
    HTTP_TIMEOUT_SECONDS: float = 10.0

    # ── Token lifecycle ──
    TOKEN_REFRESH_MARGIN_SECONDS: int = 300   # Refresh 5 minutes before expiry
    TOKEN_REFRESH_INTERVAL_MINUTES: int = 60  # Background refresh cadence

    # ============================================================================
    # SEARCH SETTINGS
    # ============================================================================
    MIN_QUERY_LENGTH: int = 2
    DEFAULT_SEARCH_LIMIT: int = 15
    MAX_SEARCH_LIMIT: int = 50
    MIN_LOCAL_RESULTS: int = 1               # Below this, fallbacks kick in
    ENABLE_FUZZY_SEARCH: bool = True         # Needs the pg_trgm extension
    FUZZY_SIMILARITY_THRESHOLD: float = 0.2
    ENABLE_EXTERNAL_SEARCH: bool = False     # Query WHO when local search comes up short

    class Config:
        env_file = ".env"
        extra = "ignore"

    @property
    def has_credentials(self) -> bool:
        return bool(self.ICD10_CLIENT_ID and self.ICD10_CLIENT_SECRET)


icd10_settings = Icd10Settings()
