from datetime import datetime

from pydantic import ConfigDict, EmailStr, Field

from eduverse.interfaces.api.v1.schemas.base import CamelModel
from eduverse.interfaces.api.v1.schemas.pagination import PaginationMeta


class UserCreate(CamelModel):
    name: str
    email: EmailStr
    password: str
    role: str
    class_id: int | None = None


class UserUpdate(CamelModel):
    name: str | None = None
    email: EmailStr | None = None
    role: str | None = None
    status: str | None = None
    avatar: str | None = None


class UserResponse(CamelModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: EmailStr
    role: str
    status: str
    avatar: str | None = None
    created_at: datetime
    class_ids: list[int] = Field(default_factory=list)


class UserListResponse(CamelModel):
    items: list[UserResponse]
    pagination: PaginationMeta
