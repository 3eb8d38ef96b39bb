from enum import Enum


class InvoiceStatus(str, Enum):
    pending = "pending"
    partial = "partial"
    paid = "paid"
