from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from eduverse.application.errors import AuthorizationError, NotFoundError, ValidationError
from eduverse.domain.notice_enums import NoticeAudience, NoticePriority
from eduverse.domain.roles import UserRole, capabilities_for
from eduverse.infrastructure.db.models import Notice, User
from eduverse.infrastructure.logging import get_logger
from eduverse.interfaces.api.v1.schemas.notice import NoticeCreate, NoticeUpdate

logger = get_logger(__name__)

DEFAULT_CATEGORY = "General"


def serialize_notice(notice: Notice) -> dict:
    return {
        "id": notice.id,
        "title": notice.title,
        "content": notice.content,
        "category": notice.category,
        "audience": notice.audience,
        "priority": notice.priority,
        "is_pinned": notice.is_pinned,
        "author_id": notice.author_id,
        "created_at": notice.created_at,
        "updated_at": notice.updated_at,
        "author": {"id": notice.author.id, "name": notice.author.name, "avatar": notice.author.avatar},
    }


def _parse_audience(value: str) -> str:
    try:
        return NoticeAudience(value).value
    except ValueError as exc:
        allowed = ", ".join(audience.value for audience in NoticeAudience)
        raise ValidationError(f"Invalid audience. Use one of: {allowed}.") from exc


def _parse_priority(value: str) -> str:
    try:
        return NoticePriority(value).value
    except ValueError as exc:
        allowed = ", ".join(priority.value for priority in NoticePriority)
        raise ValidationError(f"Invalid priority. Use one of: {allowed}.") from exc


def create_notice(db: Session, *, author: User, payload: NoticeCreate) -> Notice:
    required = (payload.title, payload.content, payload.audience, payload.priority)
    if any(value is None or not value.strip() for value in required):
        raise ValidationError("Please provide all required fields: title, content, audience, priority.")

    notice = Notice(
        title=payload.title.strip(),
        content=payload.content,
        category=(payload.category or DEFAULT_CATEGORY).strip() or DEFAULT_CATEGORY,
        audience=_parse_audience(payload.audience),
        priority=_parse_priority(payload.priority),
        is_pinned=payload.is_pinned,
        author_id=author.id,
    )
    db.add(notice)
    db.commit()
    db.refresh(notice)
    logger.info("notice_created", notice_id=notice.id, author_id=author.id, audience=notice.audience)
    return notice


def list_visible_notices(db: Session, *, caller: User) -> list[Notice]:
    audiences = [audience.value for audience in capabilities_for(caller.role).notice_audiences]
    if not audiences:
        return []
    return list(
        db.execute(
            select(Notice)
            .where(Notice.audience.in_(audiences))
            .options(selectinload(Notice.author))
            .order_by(Notice.is_pinned.desc(), Notice.created_at.desc(), Notice.id.desc())
        )
        .scalars()
        .all()
    )


def get_notice_for_change(db: Session, *, caller: User, notice_id: int, action: str) -> Notice:
    notice = db.get(Notice, notice_id)
    if notice is None:
        raise NotFoundError("Notice not found")
    if notice.author_id != caller.id and caller.role != UserRole.admin.value:
        raise AuthorizationError(f"Not authorized to {action} this notice")
    return notice


def update_notice(db: Session, *, caller: User, notice_id: int, payload: NoticeUpdate) -> Notice:
    notice = get_notice_for_change(db, caller=caller, notice_id=notice_id, action="update")
    changes = payload.model_dump(exclude_unset=True, exclude_none=True)
    for text_field in ("title", "content", "category"):
        if text_field in changes:
            if not changes[text_field].strip():
                raise ValidationError(f"Notice {text_field} cannot be empty.")
            setattr(notice, text_field, changes[text_field])
    if "audience" in changes:
        notice.audience = _parse_audience(changes["audience"])
    if "priority" in changes:
        notice.priority = _parse_priority(changes["priority"])
    if "is_pinned" in changes:
        notice.is_pinned = changes["is_pinned"]

    db.commit()
    db.refresh(notice)
    logger.info("notice_updated", notice_id=notice.id, editor_id=caller.id, fields=sorted(changes))
    return notice


def delete_notice(db: Session, *, caller: User, notice_id: int) -> None:
    notice = get_notice_for_change(db, caller=caller, notice_id=notice_id, action="delete")
    db.delete(notice)
    db.commit()
    logger.info("notice_deleted", notice_id=notice_id, editor_id=caller.id)
