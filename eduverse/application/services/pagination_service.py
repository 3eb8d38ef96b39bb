from math import ceil
from typing import Any

from sqlalchemy import and_, func, or_, select
from sqlalchemy.orm import Session
from sqlalchemy.sql import Select

from eduverse.interfaces.api.v1.schemas.pagination import PaginationMeta


def normalize_search(raw: str | None) -> str | None:
    if raw is None:
        return None
    collapsed = " ".join(raw.split())
    return collapsed or None


def apply_search_filter(query: Select, search: str | None, search_columns: list[Any]) -> Select:
    """Every whitespace-separated term must match at least one of ``search_columns``.

    "emma wilson" therefore finds a user whose name holds both words, and
    "emma example.com" one whose name and email each hold a term.
    """
    terms = normalize_search(search)
    if terms is None or not search_columns:
        return query
    term_conditions = [or_(*(column.ilike(f"%{term}%") for column in search_columns)) for term in terms.split(" ")]
    return query.where(and_(*term_conditions))


def count_rows(db: Session, query: Select) -> int:
    return db.execute(select(func.count()).select_from(query.order_by(None).subquery())).scalar_one()


def build_page_meta(*, offset: int, limit: int, total: int, filtered_total: int) -> PaginationMeta:
    return PaginationMeta(
        offset=offset,
        limit=limit,
        total=total,
        filtered_total=filtered_total,
        total_pages=ceil(total / limit) if total > 0 else 0,
        filtered_total_pages=ceil(filtered_total / limit) if filtered_total > 0 else 0,
        current_page=(offset // limit) + 1 if filtered_total > 0 else 0,
        has_next=(offset + limit) < filtered_total,
        has_prev=offset > 0,
    )


def paginate_scalars(
    db: Session,
    base_query: Select,
    *,
    offset: int,
    limit: int,
    search: str | None,
    search_columns: list[Any],
) -> tuple[list[Any], PaginationMeta]:
    filtered_query = apply_search_filter(base_query, search, search_columns)
    items = list(db.execute(filtered_query.offset(offset).limit(limit)).scalars().all())
    meta = build_page_meta(
        offset=offset,
        limit=limit,
        total=count_rows(db, base_query),
        filtered_total=count_rows(db, filtered_query),
    )
    return items, meta
