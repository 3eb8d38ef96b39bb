from collections.abc import Iterable
from datetime import date, datetime, timezone
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from eduverse.application.money import ZERO, quantize_money
from eduverse.application.services.pagination_service import apply_search_filter
from eduverse.application.services.user_service import get_active_student
from eduverse.config import settings
from eduverse.domain.invoice_status import InvoiceStatus
from eduverse.domain.ledger_status import LedgerStatus
from eduverse.domain.roles import UserRole
from eduverse.domain.user_status import UserStatus
from eduverse.infrastructure.cache.cache_service import delete_key, get_json, set_json
from eduverse.infrastructure.db.models import Invoice, User


def current_date() -> date:
    return datetime.now(timezone.utc).date()


def invoice_status_for(amount: Decimal, paid_total: Decimal) -> InvoiceStatus:
    if paid_total >= amount:
        return InvoiceStatus.paid
    if paid_total > ZERO:
        return InvoiceStatus.partial
    return InvoiceStatus.pending


def invoice_paid_total(invoice: Invoice) -> Decimal:
    return quantize_money(sum((payment.amount_paid for payment in invoice.payments), ZERO))


def has_overdue_invoice(invoices: Iterable[Invoice], *, today: date) -> bool:
    """True when an invoice still owing money is past its due date."""
    return any(
        invoice.due_date < today
        and invoice_status_for(quantize_money(invoice.amount), invoice_paid_total(invoice)) != InvoiceStatus.paid
        for invoice in invoices
    )


def derive_ledger_status(
    invoices: list[Invoice],
    *,
    total_due: Decimal,
    total_paid: Decimal,
    balance: Decimal,
    today: date,
) -> LedgerStatus:
    if balance > ZERO:
        if has_overdue_invoice(invoices, today=today):
            return LedgerStatus.overdue
        if total_paid > ZERO:
            return LedgerStatus.partial
        return LedgerStatus.pending
    if total_due > ZERO:
        return LedgerStatus.paid
    return LedgerStatus.no_dues


def compute_ledger(invoices: Iterable[Invoice], *, today: date | None = None) -> dict:
    """Reduce a student's invoices and their payments to totals and a fee status.

    Pure: reads only the given objects. ``today`` is the reference date for overdue
    detection and defaults to the current UTC date.
    """
    reference_date = today or current_date()
    invoice_list = list(invoices)
    total_due = quantize_money(sum((invoice.amount for invoice in invoice_list), ZERO))
    total_paid = sum((invoice_paid_total(invoice) for invoice in invoice_list), ZERO)
    balance = total_due - total_paid
    return {
        "total_due": total_due,
        "total_paid": total_paid,
        "balance": balance,
        "status": derive_ledger_status(
            invoice_list,
            total_due=total_due,
            total_paid=total_paid,
            balance=balance,
            today=reference_date,
        ),
    }


def student_ledger_cache_key(*, student_id: int, on_date: date) -> str:
    return f"student_ledger:{student_id}:{on_date.isoformat()}"


def invalidate_student_ledger_cache(*, student_id: int) -> None:
    delete_key(student_ledger_cache_key(student_id=student_id, on_date=current_date()))


def _ledger_from_cache(cached: dict) -> dict:
    return {
        "total_due": quantize_money(cached["total_due"]),
        "total_paid": quantize_money(cached["total_paid"]),
        "balance": quantize_money(cached["balance"]),
        "status": LedgerStatus(cached["status"]),
    }


def list_student_invoices_with_payments(db: Session, *, student_id: int) -> list[Invoice]:
    return list(
        db.execute(
            select(Invoice)
            .where(Invoice.student_id == student_id)
            .options(selectinload(Invoice.payments))
            .order_by(Invoice.created_at.desc(), Invoice.id.desc())
        )
        .scalars()
        .all()
    )


def get_student_ledger(db: Session, *, student_id: int, today: date | None = None) -> dict:
    get_active_student(db, student_id=student_id)
    reference_date = today or current_date()
    cache_key = student_ledger_cache_key(student_id=student_id, on_date=reference_date)
    cached = get_json(cache_key)
    if cached is not None:
        return _ledger_from_cache(cached)

    ledger = compute_ledger(list_student_invoices_with_payments(db, student_id=student_id), today=reference_date)
    set_json(
        cache_key,
        {
            "total_due": str(ledger["total_due"]),
            "total_paid": str(ledger["total_paid"]),
            "balance": str(ledger["balance"]),
            "status": ledger["status"].value,
        },
        settings.ledger_cache_ttl_seconds,
    )
    return ledger


def list_student_ledgers(
    db: Session,
    *,
    status: str | None = None,
    search: str | None = None,
    today: date | None = None,
) -> list[dict]:
    reference_date = today or current_date()
    query = (
        select(User)
        .where(
            User.role == UserRole.student.value,
            User.status == UserStatus.active.value,
            User.deleted_at.is_(None),
        )
        .options(selectinload(User.invoices).selectinload(Invoice.payments))
        .order_by(User.name, User.id)
    )
    query = apply_search_filter(query, search, [User.name, User.email])

    wanted_status = status.strip().lower() if status else None
    rows = []
    for student in db.execute(query).scalars().all():
        ledger = compute_ledger(student.invoices, today=reference_date)
        if wanted_status and ledger["status"].value.lower() != wanted_status:
            continue
        rows.append({"student": student, **ledger})
    return rows
