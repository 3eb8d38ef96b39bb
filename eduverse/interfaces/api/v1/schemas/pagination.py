from pydantic import BaseModel

from eduverse.interfaces.api.v1.schemas.base import CamelModel


class PaginationParams(BaseModel):
    offset: int = 0
    limit: int = 20
    search: str | None = None


class PaginationMeta(CamelModel):
    offset: int
    limit: int
    total: int
    filtered_total: int
    total_pages: int
    filtered_total_pages: int
    current_page: int
    has_next: bool
    has_prev: bool
