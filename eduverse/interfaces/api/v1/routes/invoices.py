from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from eduverse.application.services.invoice_service import create_invoice, list_visible_invoices, serialize_invoice
from eduverse.infrastructure.db.models import User
from eduverse.infrastructure.db.session import get_db
from eduverse.interfaces.api.v1.dependencies.auth import require_authenticated, require_capability
from eduverse.interfaces.api.v1.schemas.invoice import InvoiceCreate, InvoiceResponse

router = APIRouter(prefix="/invoices", tags=["invoices"])


@router.post(
    "",
    response_model=InvoiceResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create invoice",
    description=(
        "Finance staff (admin, accountant) issue a fee invoice to a student. "
        "`amount` accepts a string or number and must be positive; `dueDate` uses `YYYY-MM-DD`."
    ),
    responses={
        400: {"description": "Missing field, bad amount or bad due date"},
        401: {"description": "Unauthorized"},
        403: {"description": "Insufficient permissions"},
        404: {"description": "Student not found"},
    },
)
def create_invoice_endpoint(
    payload: InvoiceCreate,
    _: User = Depends(require_capability("manages_finance")),
    db: Session = Depends(get_db),
):
    invoice = create_invoice(db=db, payload=payload)
    return serialize_invoice(invoice)


@router.get(
    "",
    response_model=list[InvoiceResponse],
    summary="List invoices",
    description=(
        "Return invoices newest first with student name and payments. Students always receive their own "
        "invoices; finance staff may filter by `studentId`."
    ),
    responses={401: {"description": "Unauthorized"}, 403: {"description": "Role cannot view invoices"}},
)
def get_invoices(
    student_id: int | None = Query(default=None, alias="studentId"),
    current_user: User = Depends(require_authenticated),
    db: Session = Depends(get_db),
):
    invoices = list_visible_invoices(db=db, caller=current_user, student_id=student_id)
    return [serialize_invoice(invoice) for invoice in invoices]
