"""Sorting and counting helpers for list endpoints."""

from typing import Any

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession


def order_clause(model: Any, sort: str):
    """Translate `field` / `-field` into an ORDER BY clause on `model`."""
    column = getattr(model, sort.lstrip("-"))
    return column.desc() if sort.startswith("-") else column.asc()


async def count_rows(db: AsyncSession, model: Any, *clauses) -> int:
    result = await db.execute(select(func.count()).select_from(model).where(*clauses))
    return result.scalar_one()
