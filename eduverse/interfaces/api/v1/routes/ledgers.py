from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from eduverse.application.errors import AuthorizationError
from eduverse.application.services.ledger_service import get_student_ledger, list_student_ledgers
from eduverse.domain.roles import RoleCapabilities
from eduverse.infrastructure.db.models import User
from eduverse.infrastructure.db.session import get_db
from eduverse.interfaces.api.v1.dependencies.auth import (
    get_current_capabilities,
    require_authenticated,
    require_capability,
)
from eduverse.interfaces.api.v1.schemas.ledger import LedgerResponse, StudentLedgerResponse

router = APIRouter(tags=["ledgers"])


@router.get(
    "/students/{student_id}/ledger",
    response_model=LedgerResponse,
    summary="Get student fee ledger",
    description="Totals, balance and fee status derived from the student's invoices and payments.",
    responses={
        401: {"description": "Unauthorized"},
        403: {"description": "Not allowed to read this ledger"},
        404: {"description": "Student not found"},
    },
)
def get_ledger(
    student_id: int,
    current_user: User = Depends(require_authenticated),
    capabilities: RoleCapabilities = Depends(get_current_capabilities),
    db: Session = Depends(get_db),
):
    own_ledger = capabilities.sees_own_invoices and current_user.id == student_id
    if not capabilities.sees_all_invoices and not own_ledger:
        raise AuthorizationError("Not authorized to view this ledger")
    return get_student_ledger(db=db, student_id=student_id)


@router.get(
    "/ledgers",
    response_model=list[StudentLedgerResponse],
    dependencies=[Depends(require_capability("sees_all_invoices"))],
    summary="List student ledgers",
    description=(
        "Fee overview for every active student. Filter by `status` (case-insensitive, e.g. `overdue`) "
        "and `search` over student name or email."
    ),
    responses={401: {"description": "Unauthorized"}, 403: {"description": "Insufficient permissions"}},
)
def get_ledgers(
    status: str | None = Query(default=None),
    search: str | None = Query(default=None),
    db: Session = Depends(get_db),
):
    return list_student_ledgers(db=db, status=status, search=search)
