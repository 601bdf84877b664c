"""
Contractor (PJ) Net-Pay Calculator

    net = max(0, gross - gross * 6% - 167 - 270)

6% is the flat tax on gross revenue, 167 the mandatory INSS contribution
and 270 the bookkeeping fee. The result is rounded to cents and is never
negative.
"""

from decimal import Decimal
from typing import Optional, Union

from pydantic import BaseModel

from foco_finance.formatting import round_currency, today_iso
from foco_finance.models.transaction import (
    CONTRACTOR_SALARY_CATEGORY,
    Transaction,
    TransactionType,
)


TAX_RATE = Decimal("0.06")
INSS_CONTRIBUTION = Decimal("167")
ACCOUNTING_FEE = Decimal("270")


class ContractorNetPay(BaseModel):
    """Breakdown of one calculation."""

    gross: Decimal
    tax: Decimal
    inss: Decimal
    accounting: Decimal
    net: Decimal

    @property
    def note(self) -> str:
        return (
            f"PJ: bruto atual R$ {self.gross:.2f} - (6% impostos) "
            f"- {INSS_CONTRIBUTION} INSS - {ACCOUNTING_FEE} contabilidade"
        )


def calculate_net_pay(gross: Union[Decimal, int, float, str]) -> ContractorNetPay:
    """Deterministic; a negative gross is treated as zero."""
    gross = max(Decimal("0"), Decimal(str(gross)))
    tax = gross * TAX_RATE
    net = max(Decimal("0"), gross - tax - INSS_CONTRIBUTION - ACCOUNTING_FEE)
    return ContractorNetPay(
        gross=round_currency(gross),
        tax=round_currency(tax),
        inss=INSS_CONTRIBUTION,
        accounting=ACCOUNTING_FEE,
        net=round_currency(net),
    )


def prefill_contractor_transaction(
    gross: Union[Decimal, int, float, str],
    base: Optional[Transaction] = None,
    date: Optional[str] = None,
) -> Transaction:
    """
    Transaction carrying the net pay, ready for the user to review and save.

    Keeps id and date of `base` when editing an existing transaction.
    """
    result = calculate_net_pay(gross)
    fields = {
        "type": TransactionType.INCOME,
        "value": result.net,
        "category": CONTRACTOR_SALARY_CATEGORY,
        "note": result.note,
        "is_pj_salary": True,
    }
    if base is not None:
        return base.model_copy(update=fields)
    return Transaction(date=date or today_iso(), **fields)
