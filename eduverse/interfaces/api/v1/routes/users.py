from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from eduverse.application.services.pagination_service import paginate_scalars
from eduverse.application.services.user_service import (
    build_users_query,
    create_user,
    delete_user,
    get_user_by_id,
    serialize_user_response,
    update_user,
)
from eduverse.domain.roles import UserRole
from eduverse.infrastructure.db.models import User
from eduverse.infrastructure.db.session import get_db
from eduverse.interfaces.api.v1.dependencies.auth import (
    require_authenticated,
    require_capability,
    require_self_or_roles,
)
from eduverse.interfaces.api.v1.dependencies.pagination import get_pagination_params
from eduverse.interfaces.api.v1.schemas.notice import MessageResponse
from eduverse.interfaces.api.v1.schemas.pagination import PaginationParams
from eduverse.interfaces.api.v1.schemas.user import UserCreate, UserListResponse, UserResponse, UserUpdate

router = APIRouter(prefix="/users", tags=["users"])


@router.get(
    "",
    response_model=UserListResponse,
    dependencies=[Depends(require_capability("lists_users"))],
    summary="List users",
    description=(
        "Paginated users. `role` and `excludeRoles` take comma-separated role names (`role=all` disables the "
        "filter), `classId` keeps students enrolled in that class, `search` matches name or email."
    ),
)
def get_users(
    role: str | None = Query(default=None),
    exclude_roles: str | None = Query(default=None, alias="excludeRoles"),
    class_id: int | None = Query(default=None, alias="classId"),
    pagination: PaginationParams = Depends(get_pagination_params),
    db: Session = Depends(get_db),
):
    base_query = build_users_query(roles=role, exclude_roles=exclude_roles, class_id=class_id)
    users, meta = paginate_scalars(
        db=db,
        base_query=base_query,
        offset=pagination.offset,
        limit=pagination.limit,
        search=pagination.search,
        search_columns=[User.name, User.email],
    )
    return {"items": [serialize_user_response(user) for user in users], "pagination": meta}


@router.post(
    "",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_capability("manages_users"))],
)
def create_user_endpoint(payload: UserCreate, db: Session = Depends(get_db)):
    user = create_user(db=db, payload=payload)
    return serialize_user_response(user)


@router.get("/me", response_model=UserResponse)
def get_me(current_user: User = Depends(require_authenticated)):
    return serialize_user_response(current_user)


@router.get(
    "/{user_id}",
    response_model=UserResponse,
    dependencies=[Depends(require_self_or_roles("user_id", [UserRole.admin]))],
)
def get_user(user_id: int, db: Session = Depends(get_db)):
    user = get_user_by_id(db=db, user_id=user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return serialize_user_response(user)


@router.put("/{user_id}", response_model=UserResponse)
def update_user_endpoint(
    user_id: int,
    payload: UserUpdate,
    current_user: User = Depends(require_self_or_roles("user_id", [UserRole.admin])),
    db: Session = Depends(get_db),
):
    user = get_user_by_id(db=db, user_id=user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    updated = update_user(db=db, caller=current_user, user=user, payload=payload)
    return serialize_user_response(updated)


@router.delete(
    "/{user_id}",
    response_model=MessageResponse,
    dependencies=[Depends(require_capability("manages_users"))],
)
def delete_user_endpoint(user_id: int, db: Session = Depends(get_db)):
    user = get_user_by_id(db=db, user_id=user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    delete_user(db=db, user=user)
    return {"message": "User deleted successfully"}
