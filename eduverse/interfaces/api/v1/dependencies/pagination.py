from fastapi import HTTPException, Query, status

from eduverse.application.services.pagination_service import normalize_search
from eduverse.config import settings
from eduverse.interfaces.api.v1.schemas.pagination import PaginationParams


def get_pagination_params(
    offset: int = Query(default=0, ge=0),
    limit: int | None = Query(default=None, ge=1),
    search: str | None = Query(default=None, description="Whitespace-separated terms matched against name or email"),
) -> PaginationParams:
    page_size = limit if limit is not None else settings.default_page_size
    if page_size > settings.max_page_size:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"limit cannot exceed {settings.max_page_size}",
        )
    return PaginationParams(offset=offset, limit=page_size, search=normalize_search(search))
