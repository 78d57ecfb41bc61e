# app/icd10system/icd10_service.py
"""
ICD-10 Resolver
Local cache first, fallback strategies second, WHO ICD API last.

Search flow:
1. Query shorter than MIN_QUERY_LENGTH → most used codes
2. Substring match on code / descriptions / search terms
3. Fewer than MIN_LOCAL_RESULTS → trigram similarity, then all-words,
   then any-word matching
4. Still short and ENABLE_EXTERNAL_SEARCH → WHO search, results cached
   in the background
"""
import asyncio
import logging
from typing import Any, Dict, Iterable, List, Optional, Set, Tuple

from sqlalchemy import String, and_, case, cast, func, or_, select, text, update
from sqlalchemy.exc import DBAPIError, IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.database.connection import AsyncSessionLocal
from app.helpers.time import utcnow
from app.icd10system.code_format import normalize_code, validate_code_format
from app.icd10system.seed_codes import CHAPTERS, COMMON_ICD10_CODES
from app.icd10system.who_client import WhoIcdClient
from app.system_models.icd10_model.icd10_model import Icd10Code
from config.icd10config import icd10_settings

logger = logging.getLogger(__name__)

__all__ = ["Icd10Service", "icd10_service", "validate_code_format"]


class Icd10Service:
    """Search and lookup over the local ICD-10 cache"""

    def __init__(self, who_client: Optional[WhoIcdClient] = None, session_factory=None):
        self.who_client = who_client or WhoIcdClient()
        # Sessions for background cache writes (outlive the request session)
        self.session_factory = session_factory or AsyncSessionLocal
        self.pg_trgm_available: Optional[bool] = None
        self._background_tasks: Set[asyncio.Task] = set()

    # ============================================================================
    # TRIGRAM EXTENSION CHECK
    # ============================================================================
    async def check_pg_trgm(self, db: AsyncSession) -> bool:
        if db.get_bind().dialect.name != "postgresql":
            self.pg_trgm_available = False
            logger.info("ℹ️ Non-PostgreSQL database, fuzzy search disabled")
            return False

        try:
            async with db.begin_nested():
                row = (await db.execute(
                    text("SELECT 1 FROM pg_extension WHERE extname = 'pg_trgm'")
                )).first()
            self.pg_trgm_available = row is not None
        except DBAPIError as e:
            logger.warning(f"⚠️ pg_trgm extension check failed: {e}")
            self.pg_trgm_available = False

        if self.pg_trgm_available:
            logger.info("✅ pg_trgm extension is available")
        else:
            logger.warning("⚠️ pg_trgm extension is not available. Fuzzy search will be disabled.")
            logger.warning("💡 To enable fuzzy search, run: CREATE EXTENSION IF NOT EXISTS pg_trgm;")
        return self.pg_trgm_available

    # ============================================================================
    # MAIN SEARCH
    # ============================================================================
    async def search_codes(self, db: AsyncSession, query: Optional[str], limit: Optional[int] = None) -> List[Icd10Code]:
        limit = max(1, min(limit or icd10_settings.DEFAULT_SEARCH_LIMIT, icd10_settings.MAX_SEARCH_LIMIT))

        if not query or len(query.strip()) < icd10_settings.MIN_QUERY_LENGTH:
            return await self.get_most_used_codes(db, limit)

        normalized = query.strip().lower()

        logger.info(f"🔍 Searching local cache for: '{normalized}'")
        results = await self._search_local(db, normalized, limit)
        if len(results) >= icd10_settings.MIN_LOCAL_RESULTS:
            logger.info(f"✅ Found {len(results)} results in local cache")
            return results

        logger.info(f"🔎 {len(results)} local results, trying fallback strategies...")
        results = _merge(results, await self._fallback_search(db, normalized, limit), limit)

        if len(results) < icd10_settings.MIN_LOCAL_RESULTS and icd10_settings.ENABLE_EXTERNAL_SEARCH:
            external = await self._search_external(normalized, limit, {r.code for r in results})
            results = _merge(results, external, limit)

        if not results:
            logger.info(f"ℹ️ No results found for: '{normalized}'")
        return results

    async def _search_local(self, db: AsyncSession, query: str, limit: int) -> List[Icd10Code]:
        stmt = (
            select(Icd10Code)
            .where(
                Icd10Code.is_active.is_(True),
                or_(
                    func.lower(Icd10Code.code, type_=String).contains(query, autoescape=True),
                    func.lower(Icd10Code.short_description, type_=String).contains(query, autoescape=True),
                    func.lower(Icd10Code.long_description, type_=String).contains(query, autoescape=True),
                    func.lower(cast(Icd10Code.search_terms, String), type_=String).contains(query, autoescape=True),
                ),
            )
            # Exact code match first
            .order_by(
                case((func.lower(Icd10Code.code) == query, 0), else_=1),
                Icd10Code.usage_count.desc(),
                Icd10Code.last_used_at.desc().nulls_last(),
                Icd10Code.code.asc(),
            )
            .limit(limit)
        )
        return list((await db.execute(stmt)).scalars().all())

    async def _fallback_search(self, db: AsyncSession, query: str, limit: int) -> List[Icd10Code]:
        if icd10_settings.ENABLE_FUZZY_SEARCH:
            if self.pg_trgm_available is None:
                await self.check_pg_trgm(db)
            if self.pg_trgm_available:
                # Savepoint keeps rows already loaded by this session intact on failure
                try:
                    async with db.begin_nested():
                        results = await self._fuzzy_search(db, query, limit)
                    if results:
                        logger.info(f"✅ Found {len(results)} results with trigram search")
                        return results
                except DBAPIError as e:
                    logger.error(f"❌ Fuzzy search failed, disabling it: {e}")
                    self.pg_trgm_available = False

        words = [w for w in query.split() if len(w) > 2]
        if not words:
            return []

        results = await self._word_search(db, words, limit, match_all=True)
        if results:
            logger.info(f"✅ Found {len(results)} results matching all words")
            return results

        results = await self._word_search(db, words, limit, match_all=False)
        if results:
            logger.info(f"✅ Found {len(results)} results matching any word")
        return results

    async def _fuzzy_search(self, db: AsyncSession, query: str, limit: int) -> List[Icd10Code]:
        similarity = func.similarity(Icd10Code.short_description, query)
        stmt = (
            select(Icd10Code)
            .where(
                Icd10Code.is_active.is_(True),
                similarity > icd10_settings.FUZZY_SIMILARITY_THRESHOLD,
            )
            .order_by(similarity.desc())
            .limit(limit)
        )
        return list((await db.execute(stmt)).scalars().all())

    async def _word_search(self, db: AsyncSession, words: List[str], limit: int, match_all: bool) -> List[Icd10Code]:
        conditions = [
            or_(
                func.lower(Icd10Code.short_description, type_=String).contains(word, autoescape=True),
                func.lower(Icd10Code.long_description, type_=String).contains(word, autoescape=True),
            )
            for word in words
        ]
        combined = and_(*conditions) if match_all else or_(*conditions)
        stmt = (
            select(Icd10Code)
            .where(Icd10Code.is_active.is_(True), combined)
            .order_by(Icd10Code.usage_count.desc(), Icd10Code.code.asc())
            .limit(limit)
        )
        return list((await db.execute(stmt)).scalars().all())

    # ============================================================================
    # WHO SEARCH + BACKGROUND CACHING
    # ============================================================================
    async def _search_external(self, query: str, limit: int, known_codes: Set[str]) -> List[Icd10Code]:
        records = [
            r for r in await self.who_client.search(query, limit)
            if r["code"] not in known_codes
        ]
        if not records:
            return []

        task = asyncio.create_task(self._cache_codes(records))
        self._background_tasks.add(task)
        task.add_done_callback(self._background_tasks.discard)

        return [_transient_code(r) for r in records]

    async def _cache_codes(self, records: Iterable[Dict[str, Any]]) -> int:
        """Persist WHO results that are not cached yet. Errors are logged only."""
        saved = 0
        try:
            async with self.session_factory() as session:
                for record in records:
                    exists = await session.scalar(
                        select(Icd10Code.id).where(Icd10Code.code == record["code"])
                    )
                    if exists:
                        continue
                    session.add(_transient_code(record))
                    saved += 1
                await session.commit()
        except SQLAlchemyError as e:
            logger.error(f"❌ Failed to cache WHO search results: {e}")
            return 0

        if saved:
            logger.info(f"💾 Cached {saved} codes from WHO search")
        return saved

    # ============================================================================
    # LOOKUPS
    # ============================================================================
    async def get_most_used_codes(self, db: AsyncSession, limit: int = 20) -> List[Icd10Code]:
        stmt = (
            select(Icd10Code)
            .where(Icd10Code.is_active.is_(True), Icd10Code.billable.is_(True))
            .order_by(
                Icd10Code.usage_count.desc(),
                Icd10Code.last_used_at.desc().nulls_last(),
                Icd10Code.code.asc(),
            )
            .limit(limit)
        )
        return list((await db.execute(stmt)).scalars().all())

    async def get_codes_by_chapter(self, db: AsyncSession, chapter_code: str, limit: int = 50) -> List[Icd10Code]:
        stmt = (
            select(Icd10Code)
            .where(Icd10Code.chapter_code == chapter_code, Icd10Code.is_active.is_(True))
            .order_by(Icd10Code.code.asc())
            .limit(limit)
        )
        return list((await db.execute(stmt)).scalars().all())

    async def get_code_details(self, db: AsyncSession, code: str) -> Optional[Icd10Code]:
        """Exact lookup. Local hits count as usage; misses go to the WHO API."""
        normalized = normalize_code(code)

        entity = await self._get_by_code(db, normalized)
        if entity:
            await self.increment_usage(db, normalized)
            await db.refresh(entity)
            return entity

        data = await self.who_client.fetch_code(normalized)
        if not data:
            return None

        entity = _transient_code(data)
        db.add(entity)
        try:
            await db.commit()
        except IntegrityError:
            # Cached concurrently by another request
            await db.rollback()
            return await self._get_by_code(db, normalized)

        await db.refresh(entity)
        logger.info(f"✅ Fetched and cached code: {normalized}")
        return entity

    async def _get_by_code(self, db: AsyncSession, code: str) -> Optional[Icd10Code]:
        result = await db.execute(select(Icd10Code).where(Icd10Code.code == code))
        return result.scalars().first()

    async def increment_usage(self, db: AsyncSession, code: str) -> None:
        try:
            await db.execute(
                update(Icd10Code)
                .where(Icd10Code.code == code)
                .values(usage_count=Icd10Code.usage_count + 1, last_used_at=utcnow())
            )
            await db.commit()
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error(f"❌ Failed to increment usage for {code}: {e}")

    # ============================================================================
    # SEEDING
    # ============================================================================
    async def seed_common_codes(self, db: AsyncSession) -> Tuple[int, int]:
        logger.info("🌱 Seeding common ICD-10 codes...")
        existing = set(
            (await db.execute(
                select(Icd10Code.code).where(
                    Icd10Code.code.in_([c["code"] for c in COMMON_ICD10_CODES])
                )
            )).scalars().all()
        )

        seeded = 0
        for item in COMMON_ICD10_CODES:
            if item["code"] in existing:
                continue
            db.add(Icd10Code(
                code=item["code"],
                short_description=item["short_description"],
                long_description=item["short_description"],
                chapter_code=item["chapter_code"],
                chapter_name=CHAPTERS.get(item["chapter_code"]),
                billable=True,
                is_active=True,
                usage_count=0,
                search_terms=item.get("search_terms") or [item["short_description"].lower()],
            ))
            seeded += 1

        await db.commit()
        skipped = len(COMMON_ICD10_CODES) - seeded
        logger.info(f"✅ Seeding complete: {seeded} new codes, {skipped} skipped")
        return seeded, skipped


def _transient_code(record: Dict[str, Any]) -> Icd10Code:
    return Icd10Code(
        code=record["code"],
        short_description=record["short_description"],
        long_description=record.get("long_description"),
        chapter_code=record.get("chapter_code"),
        billable=True,
        is_active=True,
        usage_count=0,
        search_terms=[],
    )


def _merge(first: List[Icd10Code], second: List[Icd10Code], limit: int) -> List[Icd10Code]:
    seen = {c.code for c in first}
    merged = list(first)
    for item in second:
        if item.code not in seen:
            seen.add(item.code)
            merged.append(item)
    return merged[:limit]


icd10_service = Icd10Service()
