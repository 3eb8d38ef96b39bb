from decimal import Decimal

from pydantic import ConfigDict

from eduverse.domain.ledger_status import LedgerStatus
from eduverse.interfaces.api.v1.schemas.base import CamelModel


class LedgerResponse(CamelModel):
    total_due: Decimal
    total_paid: Decimal
    balance: Decimal
    status: LedgerStatus


class LedgerStudentRef(CamelModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    avatar: str | None = None


class StudentLedgerResponse(LedgerResponse):
    student: LedgerStudentRef
