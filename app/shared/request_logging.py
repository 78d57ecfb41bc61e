# app/shared/request_logging.py
import logging
import time

from fastapi import Request

logger = logging.getLogger("http")


async def log_requests(request: Request, call_next):
    """Log every request with its status and latency (bodies are never logged)."""
    start = time.perf_counter()
    method, path = request.method, request.url.path
    user_agent = request.headers.get("user-agent", "")
    logger.info(f"➡️  {method} {path} - {user_agent}")

    try:
        response = await call_next(request)
    except Exception as e:
        elapsed = (time.perf_counter() - start) * 1000
        logger.error(f"❌ {method} {path} 500 - {elapsed:.0f}ms - {e}")
        raise

    elapsed = (time.perf_counter() - start) * 1000
    logger.info(f"⬅️  {method} {path} {response.status_code} - {elapsed:.0f}ms")
    return response
