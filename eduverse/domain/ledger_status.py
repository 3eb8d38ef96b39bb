from enum import Enum


class LedgerStatus(str, Enum):
    no_dues = "No Dues"
    paid = "Paid"
    pending = "Pending"
    partial = "Partial"
    overdue = "Overdue"
