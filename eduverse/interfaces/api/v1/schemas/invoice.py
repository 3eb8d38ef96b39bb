from datetime import date, datetime
from decimal import Decimal

from pydantic import ConfigDict

from eduverse.domain.invoice_status import InvoiceStatus
from eduverse.interfaces.api.v1.schemas.base import CamelModel


class InvoiceCreate(CamelModel):
    # Loosely typed so parsing failures surface as 400s from the service layer; bool is listed
    # so JSON true reaches the service instead of being coerced to 1.
    student_id: bool | int | str | None = None
    description: str | None = None
    amount: bool | str | int | float | None = None
    due_date: str | int | float | None = None


class InvoiceStudentRef(CamelModel):
    id: int
    name: str
    email: str


class InvoicePaymentResponse(CamelModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    invoice_id: int
    amount_paid: Decimal
    payment_method: str
    transaction_id: str | None = None
    notes: str | None = None
    created_at: datetime


class InvoiceResponse(CamelModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    student_id: int
    description: str
    amount: Decimal
    due_date: date
    status: InvoiceStatus
    created_at: datetime
    updated_at: datetime
    student: InvoiceStudentRef
    payments: list[InvoicePaymentResponse]
