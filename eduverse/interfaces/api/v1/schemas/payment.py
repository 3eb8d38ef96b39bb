from datetime import datetime
from decimal import Decimal

from pydantic import ConfigDict

from eduverse.domain.invoice_status import InvoiceStatus
from eduverse.interfaces.api.v1.schemas.base import CamelModel


class PaymentCreate(CamelModel):
    invoice_id: int | None = None
    student_id: int | None = None
    amount_paid: bool | str | int | float | None = None
    payment_method: str | None = None
    transaction_id: str | None = None
    notes: str | None = None


class StudentPaymentCreate(CamelModel):
    amount: bool | str | int | float | None = None
    payment_method: str | None = None
    transaction_id: str | None = None
    notes: str | None = None


class PaymentInvoiceRef(CamelModel):
    id: int
    student_id: int
    description: str
    status: InvoiceStatus


class PaymentResponse(CamelModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    invoice_id: int
    amount_paid: Decimal
    payment_method: str
    transaction_id: str | None = None
    notes: str | None = None
    created_at: datetime
    updated_at: datetime
    invoice: PaymentInvoiceRef
