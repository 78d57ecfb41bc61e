# app/shared/pagination.py
import math
from typing import Any, Dict, Sequence, Tuple

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession


def build_meta(total: int, page: int, limit: int) -> Dict[str, Any]:
    """Pagination metadata in the shape list endpoints return."""
    total_pages = math.ceil(total / limit) if limit else 0
    return {
        "total": total,
        "page": page,
        "limit": limit,
        "total_pages": total_pages,
        "has_next_page": page < total_pages,
        "has_previous_page": page > 1,
    }


async def paginate(
    db: AsyncSession, stmt: Select, page: int, limit: int
) -> Tuple[Sequence[Any], Dict[str, Any]]:
    """Run `stmt` for one page and count the full result set."""
    count_stmt = select(func.count()).select_from(stmt.order_by(None).subquery())
    total = (await db.execute(count_stmt)).scalar_one()

    result = await db.execute(stmt.offset((page - 1) * limit).limit(limit))
    items = result.scalars().unique().all()
    return items, build_meta(total, page, limit)
