from datetime import datetime, timezone
from urllib.parse import quote

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload
from sqlalchemy.sql import Select

from eduverse.application.errors import AuthorizationError, ConflictError, NotFoundError, ValidationError
from eduverse.application.services.security_service import hash_password
from eduverse.domain.roles import UserRole
from eduverse.domain.user_status import UserStatus
from eduverse.infrastructure.db.models import SchoolClass, StudentClassEnrollment, User
from eduverse.infrastructure.logging import get_logger
from eduverse.interfaces.api.v1.schemas.user import UserCreate, UserUpdate

logger = get_logger(__name__)

VALID_ROLES = {role.value for role in UserRole}


def default_avatar_url(name: str) -> str:
    return f"https://ui-avatars.com/api/?name={quote(name)}&background=random&color=fff"


def split_csv(value: str | None) -> list[str]:
    if not value:
        return []
    return [part.strip() for part in value.split(",") if part.strip()]


def get_user_by_id(db: Session, user_id: int) -> User | None:
    return db.execute(
        select(User).where(User.id == user_id, User.deleted_at.is_(None)).options(selectinload(User.enrollments))
    ).scalar_one_or_none()


def get_user_by_email(db: Session, email: str) -> User | None:
    return db.execute(select(User).where(User.email == email.lower())).scalar_one_or_none()


def get_active_student(db: Session, *, student_id: int) -> User:
    student = db.execute(
        select(User).where(
            User.id == student_id,
            User.role == UserRole.student.value,
            User.status == UserStatus.active.value,
            User.deleted_at.is_(None),
        )
    ).scalar_one_or_none()
    if student is None:
        raise NotFoundError("Student not found")
    return student


def build_users_query(
    *,
    roles: str | None = None,
    exclude_roles: str | None = None,
    class_id: int | None = None,
) -> Select:
    query = select(User).where(User.deleted_at.is_(None)).options(selectinload(User.enrollments)).order_by(User.id)

    included = [] if roles == "all" else split_csv(roles)
    if included:
        query = query.where(User.role.in_(included))
    excluded = split_csv(exclude_roles)
    if excluded:
        query = query.where(User.role.not_in(excluded))
    if class_id is not None:
        query = query.where(
            User.id.in_(select(StudentClassEnrollment.student_id).where(StudentClassEnrollment.class_id == class_id))
        )
    return query


def create_user(db: Session, payload: UserCreate) -> User:
    if payload.role not in VALID_ROLES:
        raise ValidationError("Invalid user role specified.")
    email = payload.email.lower()
    if get_user_by_email(db=db, email=email) is not None:
        raise ConflictError("User already exists")

    user = User(
        name=payload.name,
        email=email,
        hashed_password=hash_password(payload.password),
        role=payload.role,
        status=UserStatus.active.value,
        avatar=default_avatar_url(payload.name),
    )
    if payload.role == UserRole.student.value and payload.class_id is not None:
        school_class = db.get(SchoolClass, payload.class_id)
        if school_class is None:
            raise NotFoundError("Class not found")
        user.enrollments.append(StudentClassEnrollment(class_id=school_class.id))

    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("user_created", user_id=user.id, role=user.role)
    return user


def update_user(db: Session, *, caller: User, user: User, payload: UserUpdate) -> User:
    is_admin = caller.role == UserRole.admin.value
    if not is_admin and caller.id != user.id:
        raise AuthorizationError("Forbidden: You are not authorized to update this user")

    if payload.email is not None and payload.email.lower() != user.email:
        if get_user_by_email(db=db, email=payload.email) is not None:
            raise ConflictError("User already exists")
        user.email = payload.email.lower()
    if payload.name is not None:
        user.name = payload.name
    if payload.avatar is not None:
        user.avatar = payload.avatar
    if payload.status is not None:
        if payload.status not in {status.value for status in UserStatus}:
            raise ValidationError("Invalid user status specified.")
        user.status = payload.status
    # Role changes from non-admins are ignored, as are unknown roles.
    if is_admin and payload.role in VALID_ROLES:
        user.role = payload.role

    db.commit()
    db.refresh(user)
    return user


def delete_user(db: Session, user: User) -> None:
    user.deleted_at = datetime.now(timezone.utc)
    user.status = UserStatus.inactive.value
    db.commit()
    logger.info("user_deleted", user_id=user.id)


def serialize_user_response(user: User) -> dict:
    return {
        "id": user.id,
        "name": user.name,
        "email": user.email,
        "role": user.role,
        "status": user.status,
        "avatar": user.avatar,
        "created_at": user.created_at,
        "class_ids": sorted(enrollment.class_id for enrollment in user.enrollments),
    }
