from datetime import datetime

from pydantic import ConfigDict

from eduverse.interfaces.api.v1.schemas.base import CamelModel


class NoticeCreate(CamelModel):
    title: str | None = None
    content: str | None = None
    category: str | None = None
    audience: str | None = None
    priority: str | None = None
    is_pinned: bool = False


class NoticeUpdate(CamelModel):
    title: str | None = None
    content: str | None = None
    category: str | None = None
    audience: str | None = None
    priority: str | None = None
    is_pinned: bool | None = None


class NoticeAuthorRef(CamelModel):
    id: int
    name: str
    avatar: str | None = None


class NoticeResponse(CamelModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    content: str
    category: str
    audience: str
    priority: str
    is_pinned: bool
    author_id: int
    created_at: datetime
    updated_at: datetime
    author: NoticeAuthorRef


class MessageResponse(CamelModel):
    message: str
