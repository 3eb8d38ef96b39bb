from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from eduverse.application.services.notice_service import (
    create_notice,
    delete_notice,
    list_visible_notices,
    serialize_notice,
    update_notice,
)
from eduverse.infrastructure.db.models import User
from eduverse.infrastructure.db.session import get_db
from eduverse.interfaces.api.v1.dependencies.auth import require_authenticated, require_capability
from eduverse.interfaces.api.v1.schemas.notice import MessageResponse, NoticeCreate, NoticeResponse, NoticeUpdate

router = APIRouter(prefix="/notices", tags=["notices"])


@router.post(
    "",
    response_model=NoticeResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create notice",
    responses={400: {"description": "Missing or invalid field"}, 403: {"description": "Insufficient permissions"}},
)
def create_notice_endpoint(
    payload: NoticeCreate,
    current_user: User = Depends(require_capability("manages_notices")),
    db: Session = Depends(get_db),
):
    notice = create_notice(db=db, author=current_user, payload=payload)
    return serialize_notice(notice)


@router.get(
    "",
    response_model=list[NoticeResponse],
    summary="List notices",
    description="Notices addressed to the caller's audience tiers, pinned first, then newest first.",
)
def get_notices(current_user: User = Depends(require_authenticated), db: Session = Depends(get_db)):
    return [serialize_notice(notice) for notice in list_visible_notices(db=db, caller=current_user)]


@router.put(
    "/{notice_id}",
    response_model=NoticeResponse,
    summary="Update notice",
    description="Only the author or an admin may update a notice.",
    responses={403: {"description": "Not the author"}, 404: {"description": "Notice not found"}},
)
def update_notice_endpoint(
    notice_id: int,
    payload: NoticeUpdate,
    current_user: User = Depends(require_capability("manages_notices")),
    db: Session = Depends(get_db),
):
    notice = update_notice(db=db, caller=current_user, notice_id=notice_id, payload=payload)
    return serialize_notice(notice)


@router.delete(
    "/{notice_id}",
    response_model=MessageResponse,
    summary="Delete notice",
    description="Only the author or an admin may delete a notice.",
    responses={403: {"description": "Not the author"}, 404: {"description": "Notice not found"}},
)
def delete_notice_endpoint(
    notice_id: int,
    current_user: User = Depends(require_capability("manages_notices")),
    db: Session = Depends(get_db),
):
    delete_notice(db=db, caller=current_user, notice_id=notice_id)
    return {"message": "Notice deleted"}
