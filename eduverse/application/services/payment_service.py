from decimal import Decimal

from sqlalchemy import func, select
from sqlalchemy.orm import Session, selectinload

from eduverse.application.errors import NoOutstandingInvoiceError, NotFoundError, ValidationError
from eduverse.application.money import parse_positive_amount, quantize_money
from eduverse.application.services.ledger_service import invalidate_student_ledger_cache, invoice_status_for
from eduverse.application.services.user_service import get_active_student
from eduverse.domain.invoice_status import InvoiceStatus
from eduverse.domain.payment_method import PaymentMethod
from eduverse.infrastructure.db.models import Invoice, Payment
from eduverse.infrastructure.logging import get_logger

logger = get_logger(__name__)

INVALID_PAYMENT_AMOUNT_MESSAGE = "Please enter a valid amount."


def serialize_payment_response(payment: Payment) -> dict:
    return {
        "id": payment.id,
        "invoice_id": payment.invoice_id,
        "amount_paid": payment.amount_paid,
        "payment_method": payment.payment_method,
        "transaction_id": payment.transaction_id,
        "notes": payment.notes,
        "created_at": payment.created_at,
        "updated_at": payment.updated_at,
        "invoice": {
            "id": payment.invoice.id,
            "student_id": payment.invoice.student_id,
            "description": payment.invoice.description,
            "status": payment.invoice.status,
        },
    }


def parse_payment_method(raw: str | None) -> PaymentMethod:
    allowed = ", ".join(method.value for method in PaymentMethod)
    if raw is None:
        raise ValidationError(f"Payment method is required. Use one of: {allowed}.")
    try:
        return PaymentMethod(raw.strip())
    except ValueError as exc:
        raise ValidationError(f"Invalid payment method. Use one of: {allowed}.") from exc


def _optional_text(value: str | None) -> str | None:
    if value is None:
        return None
    stripped = value.strip()
    return stripped or None


def get_paid_total(db: Session, *, invoice_id: int) -> Decimal:
    paid = db.execute(
        select(func.coalesce(func.sum(Payment.amount_paid), 0)).where(Payment.invoice_id == invoice_id)
    ).scalar_one()
    return quantize_money(paid)


def select_first_unpaid_invoice(db: Session, *, student_id: int) -> Invoice | None:
    """Lock and return the first not-fully-paid invoice in listing order (newest first)."""
    return (
        db.execute(
            select(Invoice)
            .where(Invoice.student_id == student_id, Invoice.status != InvoiceStatus.paid)
            .order_by(Invoice.created_at.desc(), Invoice.id.desc())
            .limit(1)
            .with_for_update()
        )
        .scalars()
        .first()
    )


def _append_payment(
    db: Session,
    *,
    invoice: Invoice,
    amount_raw: str | int | float | None,
    payment_method_raw: str | None,
    transaction_id: str | None,
    notes: str | None,
) -> Payment:
    amount_paid = parse_positive_amount(amount_raw, error_message=INVALID_PAYMENT_AMOUNT_MESSAGE)
    payment_method = parse_payment_method(payment_method_raw)

    paid_total = get_paid_total(db, invoice_id=invoice.id)
    outstanding = quantize_money(invoice.amount) - paid_total
    if amount_paid > outstanding:
        logger.warning(
            "payment_recording_rejected_exceeds_outstanding",
            invoice_id=invoice.id,
            amount=str(amount_paid),
            outstanding=str(outstanding),
        )
        raise ValidationError(f"Payment exceeds the outstanding amount of {outstanding} for this invoice.")

    payment = Payment(
        invoice_id=invoice.id,
        amount_paid=amount_paid,
        payment_method=payment_method.value,
        transaction_id=_optional_text(transaction_id),
        notes=_optional_text(notes),
    )
    db.add(payment)
    db.flush()
    invoice.status = invoice_status_for(quantize_money(invoice.amount), paid_total + amount_paid)
    db.commit()
    db.refresh(payment)
    invalidate_student_ledger_cache(student_id=invoice.student_id)
    logger.info(
        "payment_recording_completed",
        invoice_id=invoice.id,
        student_id=invoice.student_id,
        payment_id=payment.id,
        amount=str(amount_paid),
        invoice_status=invoice.status.value,
    )
    return payment


def record_student_payment(
    db: Session,
    *,
    student_id: int,
    amount: str | int | float | None,
    payment_method: str | None,
    transaction_id: str | None = None,
    notes: str | None = None,
) -> Payment:
    """Apply a tendered payment to the student's first unpaid invoice.

    Selection and append share one transaction; the chosen invoice row stays locked
    until commit so concurrent submissions cannot both pick it.
    """
    logger.info("payment_recording_started", student_id=student_id, amount=str(amount))
    get_active_student(db, student_id=student_id)
    invoice = select_first_unpaid_invoice(db, student_id=student_id)
    if invoice is None:
        logger.warning("payment_recording_rejected_no_outstanding_invoice", student_id=student_id)
        raise NoOutstandingInvoiceError("No outstanding invoices found for this student.")
    return _append_payment(
        db,
        invoice=invoice,
        amount_raw=amount,
        payment_method_raw=payment_method,
        transaction_id=transaction_id,
        notes=notes,
    )


def record_invoice_payment(
    db: Session,
    *,
    invoice_id: int,
    amount: str | int | float | None,
    payment_method: str | None,
    transaction_id: str | None = None,
    notes: str | None = None,
) -> Payment:
    logger.info("payment_recording_started", invoice_id=invoice_id, amount=str(amount))
    invoice = db.execute(select(Invoice).where(Invoice.id == invoice_id).with_for_update()).scalar_one_or_none()
    if invoice is None:
        raise NotFoundError("Invoice not found")
    if invoice.status == InvoiceStatus.paid:
        logger.warning("payment_recording_rejected_invoice_paid", invoice_id=invoice_id)
        raise NoOutstandingInvoiceError("Invoice is already paid.")
    return _append_payment(
        db,
        invoice=invoice,
        amount_raw=amount,
        payment_method_raw=payment_method,
        transaction_id=transaction_id,
        notes=notes,
    )


def get_payment_by_id(db: Session, *, payment_id: int) -> Payment | None:
    return db.execute(
        select(Payment).where(Payment.id == payment_id).options(selectinload(Payment.invoice))
    ).scalar_one_or_none()
