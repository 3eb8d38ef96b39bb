from enum import Enum


class PaymentMethod(str, Enum):
    credit_card = "Credit Card"
    bank_transfer = "Bank Transfer"
    cash = "Cash"
