from sqlalchemy import func, select
from sqlalchemy.orm import Session

from eduverse.application.errors import ConflictError, ValidationError
from eduverse.domain.roles import UserRole
from eduverse.infrastructure.db.models import SchoolClass, StudentClassEnrollment, User
from eduverse.interfaces.api.v1.schemas.school_class import SchoolClassCreate


def serialize_class(school_class: SchoolClass, student_count: int = 0) -> dict:
    return {
        "id": school_class.id,
        "name": school_class.name,
        "description": school_class.description,
        "teacher_id": school_class.teacher_id,
        "student_count": student_count,
        "created_at": school_class.created_at,
    }


def list_classes_with_counts(db: Session) -> list[tuple[SchoolClass, int]]:
    student_count = (
        select(func.count(StudentClassEnrollment.id))
        .where(StudentClassEnrollment.class_id == SchoolClass.id)
        .correlate(SchoolClass)
        .scalar_subquery()
    )
    rows = db.execute(select(SchoolClass, student_count).order_by(SchoolClass.name)).all()
    return [(school_class, count) for school_class, count in rows]


def create_class(db: Session, payload: SchoolClassCreate) -> SchoolClass:
    name = payload.name.strip()
    if not name:
        raise ValidationError("Class name is required.")
    if db.execute(select(SchoolClass).where(SchoolClass.name == name)).scalar_one_or_none() is not None:
        raise ConflictError("Class already exists")
    if payload.teacher_id is not None:
        teacher = db.get(User, payload.teacher_id)
        if teacher is None or teacher.deleted_at is not None or teacher.role != UserRole.teacher.value:
            raise ValidationError("teacherId must reference an active teacher.")

    school_class = SchoolClass(name=name, description=payload.description, teacher_id=payload.teacher_id)
    db.add(school_class)
    db.commit()
    db.refresh(school_class)
    return school_class
