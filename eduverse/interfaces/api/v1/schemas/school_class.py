from datetime import datetime

from pydantic import ConfigDict

from eduverse.interfaces.api.v1.schemas.base import CamelModel


class SchoolClassCreate(CamelModel):
    name: str
    description: str | None = None
    teacher_id: int | None = None


class SchoolClassResponse(CamelModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: str | None = None
    teacher_id: int | None = None
    student_count: int = 0
    created_at: datetime
