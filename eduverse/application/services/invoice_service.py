from datetime import date, datetime

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload
from sqlalchemy.sql import Select

from eduverse.application.errors import AuthorizationError, ValidationError
from eduverse.application.money import parse_positive_amount
from eduverse.application.services.ledger_service import invalidate_student_ledger_cache
from eduverse.application.services.user_service import get_active_student
from eduverse.domain.invoice_status import InvoiceStatus
from eduverse.domain.roles import capabilities_for
from eduverse.infrastructure.db.models import Invoice, User
from eduverse.infrastructure.logging import get_logger
from eduverse.interfaces.api.v1.schemas.invoice import InvoiceCreate

logger = get_logger(__name__)

MISSING_FIELDS_MESSAGE = "Please provide all required fields: studentId, description, amount, and dueDate."
INVALID_AMOUNT_MESSAGE = "Invalid amount provided. Must be a positive number."
INVALID_DUE_DATE_MESSAGE = "Invalid dueDate format provided. Use YYYY-MM-DD format."


def serialize_payment_summary(payment) -> dict:
    return {
        "id": payment.id,
        "invoice_id": payment.invoice_id,
        "amount_paid": payment.amount_paid,
        "payment_method": payment.payment_method,
        "transaction_id": payment.transaction_id,
        "notes": payment.notes,
        "created_at": payment.created_at,
    }


def serialize_invoice(invoice: Invoice) -> dict:
    return {
        "id": invoice.id,
        "student_id": invoice.student_id,
        "description": invoice.description,
        "amount": invoice.amount,
        "due_date": invoice.due_date,
        "status": invoice.status,
        "created_at": invoice.created_at,
        "updated_at": invoice.updated_at,
        "student": {
            "id": invoice.student.id,
            "name": invoice.student.name,
            "email": invoice.student.email,
        },
        "payments": [serialize_payment_summary(payment) for payment in invoice.payments],
    }


def _is_blank(value) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def parse_due_date(raw: str | int | float) -> date:
    if not isinstance(raw, str):
        raise ValidationError(INVALID_DUE_DATE_MESSAGE)
    text = raw.strip()
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(text).date()
    except ValueError as exc:
        raise ValidationError(INVALID_DUE_DATE_MESSAGE) from exc


def parse_student_id(raw: bool | int | str) -> int:
    if isinstance(raw, bool):
        raise ValidationError("Invalid studentId provided.")
    try:
        return int(raw)
    except (TypeError, ValueError) as exc:
        raise ValidationError("Invalid studentId provided.") from exc


def create_invoice(db: Session, *, payload: InvoiceCreate) -> Invoice:
    if any(_is_blank(value) for value in (payload.student_id, payload.description, payload.amount, payload.due_date)):
        raise ValidationError(MISSING_FIELDS_MESSAGE)

    student_id = parse_student_id(payload.student_id)
    amount = parse_positive_amount(payload.amount, error_message=INVALID_AMOUNT_MESSAGE)
    due_date = parse_due_date(payload.due_date)
    get_active_student(db, student_id=student_id)

    invoice = Invoice(
        student_id=student_id,
        description=payload.description.strip(),
        amount=amount,
        due_date=due_date,
        status=InvoiceStatus.pending,
    )
    db.add(invoice)
    db.commit()
    db.refresh(invoice)
    invalidate_student_ledger_cache(student_id=student_id)
    logger.info(
        "invoice_created",
        invoice_id=invoice.id,
        student_id=student_id,
        amount=str(amount),
        due_date=str(due_date),
    )
    return invoice


def build_visible_invoices_query(*, caller: User, student_id: int | None = None) -> Select:
    """Invoices the caller may read, newest first.

    Students are pinned to their own invoices whatever ``student_id`` says.
    """
    capabilities = capabilities_for(caller.role)
    query = (
        select(Invoice)
        .options(selectinload(Invoice.student), selectinload(Invoice.payments))
        .order_by(Invoice.created_at.desc(), Invoice.id.desc())
    )
    if capabilities.sees_all_invoices:
        if student_id is not None:
            query = query.where(Invoice.student_id == student_id)
        return query
    if capabilities.sees_own_invoices:
        return query.where(Invoice.student_id == caller.id)
    raise AuthorizationError("Not authorized to view invoices")


def list_visible_invoices(db: Session, *, caller: User, student_id: int | None = None) -> list[Invoice]:
    query = build_visible_invoices_query(caller=caller, student_id=student_id)
    return list(db.execute(query).scalars().all())
