"""Helpers shared by the storage classes."""

import math
from typing import Any, TypeVar

import pydantic
from pydantic import BaseModel
from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.storage.errors import ValidationError

SchemaT = TypeVar("SchemaT", bound=BaseModel)


def initials(name: str) -> str:
    """Two-letter avatar initials for a display name.

    Uses the first letter of the first two words, or the first two
    characters of a single-word name.
    """
    words = name.split()
    if len(words) > 1:
        return (words[0][0] + words[1][0]).upper()
    return name.strip()[:2].upper()


def page_offset(page: int, page_size: int) -> int:
    """Convert a 1-based page number into a row offset."""
    return max(page - 1, 0) * page_size


def percentage(numerator: float | int | None, denominator: float | int | None) -> int:
    """Percentage rounded half up, 0 when the denominator is empty."""
    if not denominator:
        return 0
    return math.floor((numerator or 0) / denominator * 100 + 0.5)


async def count_rows(session: AsyncSession, stmt: Select[Any]) -> int:
    """Count rows produced by ``stmt``."""
    count_stmt = select(func.count()).select_from(stmt.order_by(None).subquery())
    result = await session.execute(count_stmt)
    return int(result.scalar() or 0)


def validate(schema: type[SchemaT], data: SchemaT | dict[str, Any]) -> SchemaT:
    """Coerce ``data`` into ``schema``, raising a field-level ValidationError.

    Already-validated models pass through untouched.
    """
    if isinstance(data, schema):
        return data
    try:
        return schema.model_validate(data)
    except pydantic.ValidationError as exc:
        raise ValidationError(field_errors(exc.errors())) from exc


def field_errors(errors: Any) -> dict[str, list[str]]:
    """Group pydantic error dicts by dotted field location."""
    grouped: dict[str, list[str]] = {}
    for error in errors:
        loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        field = ".".join(loc) or "__root__"
        grouped.setdefault(field, []).append(error.get("msg", "Invalid value"))
    return grouped
