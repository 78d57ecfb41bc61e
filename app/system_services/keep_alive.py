# app/system_services/keep_alive.py
import asyncio
import logging
from typing import Optional

import httpx

from config.appconfig import settings

logger = logging.getLogger(__name__)


async def ping(url: str, transport: Optional[httpx.AsyncBaseTransport] = None) -> bool:
    """Single GET against the service URL. Failures are logged, never raised."""
    try:
        async with httpx.AsyncClient(
            timeout=settings.KEEP_ALIVE_TIMEOUT_SECONDS, transport=transport
        ) as client:
            response = await client.get(url)
        logger.info(f"✅ Ping successful - Status: {response.status_code}")
        return response.status_code < 500
    except httpx.HTTPError as e:
        logger.error(f"❌ Ping failed: {e or type(e).__name__}")
        return False


def keep_alive_enabled() -> bool:
    return settings.is_production and bool(settings.KEEP_ALIVE_URL)


async def keep_alive_loop() -> None:
    """Ping immediately, then every KEEP_ALIVE_INTERVAL_SECONDS until cancelled."""
    logger.info(f"🚀 Starting keep-alive pings every {settings.KEEP_ALIVE_INTERVAL_SECONDS // 60} minutes")
    try:
        while True:
            await ping(settings.KEEP_ALIVE_URL)
            await asyncio.sleep(settings.KEEP_ALIVE_INTERVAL_SECONDS)
    except asyncio.CancelledError:
        logger.info("🛑 Keep-alive pings stopped")
        raise
