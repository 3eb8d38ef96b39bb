from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from eduverse.application.errors import ValidationError
from eduverse.application.services.payment_lock_service import payment_creation_lock
from eduverse.application.services.payment_service import (
    get_payment_by_id,
    record_invoice_payment,
    record_student_payment,
    serialize_payment_response,
)
from eduverse.domain.roles import capabilities_for
from eduverse.infrastructure.db.models import User
from eduverse.infrastructure.db.session import get_db
from eduverse.interfaces.api.v1.dependencies.auth import require_authenticated, require_capability
from eduverse.interfaces.api.v1.schemas.payment import PaymentCreate, PaymentResponse, StudentPaymentCreate

router = APIRouter(tags=["payments"])


@router.post(
    "/payments",
    response_model=PaymentResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Record payment",
    description=(
        "Finance staff record a payment against `invoiceId`, or against the student's first unpaid invoice "
        "when `studentId` is sent instead. Submissions are serialized with a short Redis lock."
    ),
    responses={
        400: {"description": "Payment validation error"},
        401: {"description": "Unauthorized"},
        403: {"description": "Insufficient permissions"},
        404: {"description": "Invoice or student not found"},
        409: {"description": "Nothing outstanding, or a payment is already in progress"},
    },
)
def create_payment_endpoint(
    payload: PaymentCreate,
    _: User = Depends(require_capability("manages_finance")),
    db: Session = Depends(get_db),
):
    if (payload.invoice_id is None) == (payload.student_id is None):
        raise ValidationError("Provide exactly one of invoiceId or studentId.")
    if payload.invoice_id is not None:
        with payment_creation_lock(scope="invoice", resource_id=payload.invoice_id):
            payment = record_invoice_payment(
                db=db,
                invoice_id=payload.invoice_id,
                amount=payload.amount_paid,
                payment_method=payload.payment_method,
                transaction_id=payload.transaction_id,
                notes=payload.notes,
            )
    else:
        with payment_creation_lock(scope="student", resource_id=payload.student_id):
            payment = record_student_payment(
                db=db,
                student_id=payload.student_id,
                amount=payload.amount_paid,
                payment_method=payload.payment_method,
                transaction_id=payload.transaction_id,
                notes=payload.notes,
            )
    return serialize_payment_response(payment)


@router.post(
    "/students/{student_id}/payments",
    response_model=PaymentResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Record payment for student",
    description="Apply a tendered amount to the student's first invoice that is not fully paid.",
    responses={
        400: {"description": "Payment validation error"},
        403: {"description": "Insufficient permissions"},
        404: {"description": "Student not found"},
        409: {"description": "No outstanding invoice for this student"},
    },
)
def create_student_payment_endpoint(
    student_id: int,
    payload: StudentPaymentCreate,
    _: User = Depends(require_capability("manages_finance")),
    db: Session = Depends(get_db),
):
    with payment_creation_lock(scope="student", resource_id=student_id):
        payment = record_student_payment(
            db=db,
            student_id=student_id,
            amount=payload.amount,
            payment_method=payload.payment_method,
            transaction_id=payload.transaction_id,
            notes=payload.notes,
        )
    return serialize_payment_response(payment)


@router.get(
    "/payments/{payment_id}",
    response_model=PaymentResponse,
    summary="Get payment detail",
    description="Return one payment when visible to the caller: finance staff see all, students their own.",
    responses={401: {"description": "Unauthorized"}, 404: {"description": "Payment not found"}},
)
def get_payment_detail(
    payment_id: int,
    current_user: User = Depends(require_authenticated),
    db: Session = Depends(get_db),
):
    payment = get_payment_by_id(db=db, payment_id=payment_id)
    capabilities = capabilities_for(current_user.role)
    visible = payment is not None and (
        capabilities.sees_all_invoices
        or (capabilities.sees_own_invoices and payment.invoice.student_id == current_user.id)
    )
    if not visible:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Payment not found")
    return serialize_payment_response(payment)
