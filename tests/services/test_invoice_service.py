from datetime import date, timedelta
from decimal import Decimal

import pytest

from eduverse.application.errors import AuthorizationError, NotFoundError, ValidationError
from eduverse.application.services.invoice_service import (
    create_invoice,
    list_visible_invoices,
    parse_due_date,
    serialize_invoice,
)
from eduverse.domain.invoice_status import InvoiceStatus
from eduverse.interfaces.api.v1.schemas.invoice import InvoiceCreate
from tests.helpers.factories import at, create_invoice as factory_create_invoice
from tests.helpers.factories import create_payment

DUE = date(2026, 6, 30)


def _payload(student_id, **overrides) -> InvoiceCreate:
    values = {"studentId": student_id, "description": "Monthly Tuition", "amount": "500.00", "dueDate": "2026-06-30"}
    values.update(overrides)
    return InvoiceCreate(**values)


def test_create_invoice_persists_pending_invoice(db_session, seeded_users):
    """
    Validate invoice creation success path.

    1. Build a payload with string student id and numeric amount.
    2. Call create_invoice once.
    3. Validate amount and due date are parsed.
    4. Validate the invoice starts pending with no payments.
    """
    invoice = create_invoice(
        db_session, payload=_payload(str(seeded_users["student"].id), amount=120.5, description="  Lab Fee ")
    )
    assert invoice.student_id == seeded_users["student"].id
    assert invoice.description == "Lab Fee"
    assert invoice.amount == Decimal("120.50")
    assert invoice.due_date == DUE
    assert invoice.status == InvoiceStatus.pending
    assert invoice.payments == []


@pytest.mark.parametrize(
    ("overrides", "message"),
    [
        ({"amount": "-5"}, "Invalid amount provided. Must be a positive number."),
        ({"amount": "0"}, "Invalid amount provided. Must be a positive number."),
        ({"amount": "ten"}, "Invalid amount provided. Must be a positive number."),
        ({"dueDate": "not-a-date"}, "Invalid dueDate format provided. Use YYYY-MM-DD format."),
        ({"description": "   "}, "Please provide all required fields: studentId, description, amount, and dueDate."),
        ({"amount": None}, "Please provide all required fields: studentId, description, amount, and dueDate."),
        ({"studentId": "abc"}, "Invalid studentId provided."),
        ({"studentId": True}, "Invalid studentId provided."),
        ({"amount": "1e30"}, "Invalid amount provided. Must be a positive number."),
        ({"amount": "100000000"}, "Invalid amount provided. Must be a positive number."),
        ({"amount": True}, "Invalid amount provided. Must be a positive number."),
        ({"dueDate": 20260630}, "Invalid dueDate format provided. Use YYYY-MM-DD format."),
    ],
)
def test_create_invoice_rejects_invalid_payloads(db_session, seeded_users, overrides, message):
    """
    Validate invoice creation input validation.

    1. Build a payload with one invalid or missing field.
    2. Call create_invoice once.
    3. Validate ValidationError is raised.
    4. Validate the human-readable message matches the failing field.
    """
    with pytest.raises(ValidationError) as exc:
        create_invoice(db_session, payload=_payload(seeded_users["student"].id, **overrides))
    assert str(exc.value) == message


def test_create_invoice_requires_existing_student(db_session, seeded_users):
    """
    Validate invoice creation targets students only.

    1. Build a payload for a teacher id.
    2. Build a payload for an unknown id.
    3. Call create_invoice for both.
    4. Validate NotFoundError is raised each time.
    """
    with pytest.raises(NotFoundError):
        create_invoice(db_session, payload=_payload(seeded_users["teacher"].id))
    with pytest.raises(NotFoundError):
        create_invoice(db_session, payload=_payload(999999))


def test_parse_due_date_accepts_date_and_datetime_strings():
    """
    Validate due date parsing formats.

    1. Parse a plain calendar date.
    2. Parse an ISO datetime string.
    3. Validate both resolve to the same date.
    4. Validate garbage input raises ValidationError.
    """
    assert parse_due_date("2026-06-30") == DUE
    assert parse_due_date("2026-06-30T10:15:00") == DUE
    with pytest.raises(ValidationError):
        parse_due_date("30/06/2026")


def test_list_visible_invoices_scopes_by_role(db_session, seeded_users):
    """
    Validate invoice listing authorization scope.

    1. Seed invoices for two students with distinct creation times.
    2. List as accountant with and without a student filter.
    3. List as student while asking for another student's invoices.
    4. Validate teacher listing is rejected.
    """
    student = seeded_users["student"]
    other = seeded_users["other_student"]
    first = factory_create_invoice(db_session, student_id=student.id, amount="10.00", due_date=DUE, created_at=at(2026, 1, 1))
    second = factory_create_invoice(db_session, student_id=other.id, amount="20.00", due_date=DUE, created_at=at(2026, 2, 1))
    third = factory_create_invoice(db_session, student_id=student.id, amount="30.00", due_date=DUE, created_at=at(2026, 3, 1))

    everything = list_visible_invoices(db_session, caller=seeded_users["accountant"])
    assert [invoice.id for invoice in everything] == [third.id, second.id, first.id]

    filtered = list_visible_invoices(db_session, caller=seeded_users["admin"], student_id=other.id)
    assert [invoice.id for invoice in filtered] == [second.id]

    own = list_visible_invoices(db_session, caller=student, student_id=other.id)
    assert [invoice.id for invoice in own] == [third.id, first.id]

    with pytest.raises(AuthorizationError):
        list_visible_invoices(db_session, caller=seeded_users["teacher"])


def test_serialize_invoice_embeds_student_and_payments(db_session, seeded_users):
    """
    Validate invoice serialization payload.

    1. Seed one invoice and one payment.
    2. Load the invoice through the listing query.
    3. Serialize it once.
    4. Validate nested student name and payment amounts.
    """
    invoice = factory_create_invoice(
        db_session, student_id=seeded_users["student"].id, amount="100.00", due_date=DUE - timedelta(days=1)
    )
    create_payment(db_session, invoice=invoice, amount_paid="40.00")
    listed = list_visible_invoices(db_session, caller=seeded_users["admin"])
    payload = serialize_invoice(listed[0])
    assert payload["student"]["name"] == "Emma Wilson"
    assert [payment["amount_paid"] for payment in payload["payments"]] == [Decimal("40.00")]
    assert payload["status"] == InvoiceStatus.partial
