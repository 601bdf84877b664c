"""
Transaction Models

A Transaction is a single income or expense event owned by one user and
stored under users/{userId}/transactions/{id}.
"""

from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import Field, field_validator

from foco_finance.models.base import Document, new_id, validate_iso_date


class TransactionType(str, Enum):
    """Direction of a cash-flow event."""
    INCOME = "INCOME"
    EXPENSE = "EXPENSE"


# Suggested labels; category is free-form, these only feed the form
TRANSACTION_CATEGORIES = [
    "Alimentação",
    "Transporte",
    "Lazer",
    "Educação",
    "Saúde",
    "Moradia",
    "Salário",
    "Salário PJ",
    "Outros",
]

DEFAULT_CATEGORY = "Alimentação"
CONTRACTOR_SALARY_CATEGORY = "Salário PJ"
SHARED_DEBT_CATEGORY = "Dívida Compartilhada"


class Transaction(Document):
    """
    One income/expense event.

    `value` is never negative; the sign lives in `type`.
    """

    id: str = Field(
        default_factory=new_id,
        min_length=1,
        description="Opaque unique identifier"
    )
    date: str = Field(
        ...,
        description="Calendar date, YYYY-MM-DD"
    )
    type: TransactionType = Field(
        ...,
        description="INCOME or EXPENSE"
    )
    value: Decimal = Field(
        ...,
        ge=0,
        description="Amount in BRL"
    )
    category: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="Free-form label, usually one of TRANSACTION_CATEGORIES"
    )
    note: Optional[str] = Field(
        default=None,
        max_length=500,
    )
    person: Optional[str] = Field(
        default=None,
        max_length=100,
        description="Who the transaction was with, if anyone"
    )
    is_pj_salary: bool = Field(
        default=False,
        description="Value was produced by the contractor net-pay calculator"
    )

    @field_validator("date")
    @classmethod
    def validate_date(cls, v: str) -> str:
        return validate_iso_date(v)

    @property
    def month(self) -> str:
        return self.date[:7]

    @property
    def signed_value(self) -> Decimal:
        return self.value if self.type == TransactionType.INCOME else -self.value
