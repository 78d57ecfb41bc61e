# app/icd10system/who_client.py
"""
WHO ICD API Client
Client-credentials OAuth2 against icdaccessmanagement.who.int, token cached
in memory and refreshed a few minutes before it expires.

Every public lookup swallows network/auth failures: callers get None or []
and the failure is logged.
"""
import asyncio
import logging
import re
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

import httpx

from app.helpers.time import utcnow
from app.icd10system.code_format import validate_code_format
from config.icd10config import icd10_settings

logger = logging.getLogger(__name__)

HIGHLIGHT_TAGS = re.compile(r"</?em[^>]*>")


class WhoApiError(Exception):
    """Authentication or transport failure talking to the WHO ICD API."""


def _text_value(value: Any) -> str:
    # WHO returns either {"@language": "en", "@value": "..."} or a plain string
    if isinstance(value, dict):
        value = value.get("@value", "")
    return HIGHLIGHT_TAGS.sub("", value or "").strip()


class WhoIcdClient:
    """Thin async wrapper over the WHO ICD API"""

    def __init__(self, transport: Optional[httpx.AsyncBaseTransport] = None):
        self._transport = transport
        self._token: Optional[str] = None
        self._token_expires_at: Optional[datetime] = None

    def _http(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=icd10_settings.HTTP_TIMEOUT_SECONDS,
            transport=self._transport,
        )

    @property
    def has_token(self) -> bool:
        return self._token is not None

    def token_is_valid(self) -> bool:
        return bool(
            self._token
            and self._token_expires_at
            and utcnow() < self._token_expires_at
        )

    # ============================================================================
    # AUTHENTICATION
    # ============================================================================
    async def authenticate(self) -> str:
        if not icd10_settings.has_credentials:
            raise WhoApiError(
                "ICD-10 API credentials not configured. "
                "Set ICD10_CLIENT_ID and ICD10_CLIENT_SECRET."
            )

        try:
            async with self._http() as client:
                response = await client.post(
                    icd10_settings.WHO_TOKEN_ENDPOINT,
                    data={
                        "grant_type": "client_credentials",
                        "client_id": icd10_settings.ICD10_CLIENT_ID,
                        "client_secret": icd10_settings.ICD10_CLIENT_SECRET,
                        "scope": icd10_settings.WHO_TOKEN_SCOPE,
                    },
                )
        except httpx.HTTPError as e:
            raise WhoApiError(f"Token request failed: {e}") from e

        if response.status_code != 200:
            raise WhoApiError(f"Authentication failed: {response.status_code}")

        try:
            data = response.json()
            token = data["access_token"]
            expires_in = int(data.get("expires_in", 3600))
        except (ValueError, KeyError) as e:
            raise WhoApiError(f"Malformed token response: {e}") from e

        self._token = token
        self._token_expires_at = utcnow() + timedelta(
            seconds=max(expires_in - icd10_settings.TOKEN_REFRESH_MARGIN_SECONDS, 0)
        )
        logger.info("✅ WHO ICD-10 API authenticated")
        return self._token

    async def ensure_authenticated(self) -> str:
        if self.token_is_valid():
            return self._token
        return await self.authenticate()

    def _headers(self, token: str) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {token}",
            "Accept": "application/json",
            "API-Version": "v2",
            "Accept-Language": "en",
        }

    # ============================================================================
    # LOOKUPS
    # ============================================================================
    async def fetch_code(self, code: str) -> Optional[Dict[str, str]]:
        """Fetch one ICD-10 entity by code. Returns None on any failure."""
        url = f"{icd10_settings.WHO_API_BASE}/{code}"
        try:
            token = await self.ensure_authenticated()
            logger.info(f"🌐 Fetching code {code} from WHO API: {url}")
            async with self._http() as client:
                response = await client.get(url, headers=self._headers(token))

            if response.status_code != 200:
                logger.warning(f"⚠️ WHO API returned {response.status_code} for code {code}")
                return None

            data = response.json()
        except (WhoApiError, httpx.HTTPError, ValueError) as e:
            logger.error(f"❌ Failed to fetch code {code} from WHO API: {e}")
            return None

        title = _text_value(data.get("title"))
        definition = _text_value(data.get("definition"))
        if not title:
            logger.warning(f"⚠️ WHO API returned no title for code {code}")
            return None

        return {
            "code": code,
            "short_description": title[:200],
            "long_description": definition or title,
        }

    async def search(self, query: str, limit: int) -> List[Dict[str, Any]]:
        """Free-text search. Only entries carrying a valid ICD-10 code are kept."""
        try:
            token = await self.ensure_authenticated()
            async with self._http() as client:
                response = await client.get(
                    icd10_settings.WHO_SEARCH_URL,
                    params={"q": query, "useFlexisearch": "true", "flatResults": "true"},
                    headers=self._headers(token),
                )

            if response.status_code != 200:
                logger.warning(f"⚠️ WHO search returned {response.status_code} for '{query}'")
                return []

            entities = response.json().get("destinationEntities") or []
        except (WhoApiError, httpx.HTTPError, ValueError) as e:
            logger.error(f"❌ WHO search failed for '{query}': {e}")
            return []

        results = []
        seen = set()
        for entity in entities:
            code = (entity.get("theCode") or entity.get("code") or "").strip().upper()
            title = _text_value(entity.get("title"))
            if not title or not validate_code_format(code) or code in seen:
                continue
            seen.add(code)
            results.append({
                "code": code,
                "short_description": title[:200],
                "long_description": title,
            })
            if len(results) >= limit:
                break

        logger.info(f"🌐 WHO search '{query}' returned {len(results)} usable codes")
        return results

    async def refresh_token(self) -> None:
        """Re-authenticate if a token was obtained before. Failures are logged."""
        if not self._token:
            return
        logger.info("🔄 Refreshing WHO API token...")
        try:
            await self.authenticate()
        except WhoApiError as e:
            logger.error(f"❌ Token refresh failed: {e}")


async def token_refresh_loop(client: WhoIcdClient) -> None:
    """Background task: refresh the WHO token on a fixed schedule."""
    interval = icd10_settings.TOKEN_REFRESH_INTERVAL_MINUTES * 60
    while True:
        await asyncio.sleep(interval)
        await client.refresh_token()
