# config/config_schemas.py
"""
Runtime Configuration Schemas for the ICD-10 resolver
Used by: /icd10/config

Design: In-memory configuration (no database persistence)
- GET /config → returns current settings
- POST /config → updates settings in-memory (partial updates supported)
- Settings reset to file defaults on application restart
"""
from typing import Optional

from pydantic import BaseModel, Field


# ============================================================================
# ICD-10 RESOLVER CONFIGURATION
# ============================================================================
class Icd10ConfigRequest(BaseModel):
    """
    Request to update ICD-10 resolver configuration.
    All fields are optional. Send only what you want to change.
    """

    # ── Search Behaviour ──
    min_query_length: Optional[int] = Field(
        None, ge=1, le=10, description="Queries shorter than this return the most used codes"
    )
    default_search_limit: Optional[int] = Field(
        None, ge=1, le=50, description="Results returned when the caller gives no limit"
    )
    min_local_results: Optional[int] = Field(
        None,
        ge=1,
        le=50,
        description="Local matches needed before the fallback strategies are skipped",
    )

    # ── Fallback Strategies ──
    enable_fuzzy_search: Optional[bool] = Field(
        None, description="Use pg_trgm similarity when the extension is installed"
    )
    fuzzy_similarity_threshold: Optional[float] = Field(
        None, ge=0.0, le=1.0, description="Minimum trigram similarity (0.0-1.0)"
    )
    enable_external_search: Optional[bool] = Field(
        None, description="Query the WHO ICD API when local search comes up short"
    )


class Icd10ConfigResponse(BaseModel):
    """Current ICD-10 resolver configuration (complete state)."""

    # Search
    min_query_length: int
    default_search_limit: int
    max_search_limit: int
    min_local_results: int

    # Fallbacks
    enable_fuzzy_search: bool
    fuzzy_similarity_threshold: float
    fuzzy_search_available: Optional[bool]  # Computed: pg_trgm extension check result
    enable_external_search: bool

    # WHO API (read-only)
    who_api_base: str
    who_credentials_configured: bool
