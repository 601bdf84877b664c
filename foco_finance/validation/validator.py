"""
Form Validation

Raw form input is checked here before any model is built or any storage
call is made. Problems are collected (not raised one by one) so the form
can show every issue at once, next to its field.

IMPORTANT: Validation NEVER silently fixes input. A negative amount is an
error, not something to take the absolute value of.
"""

from decimal import Decimal
from typing import Optional

from foco_finance.accounting.ledger_engine import new_entry
from foco_finance.formatting import check_month, parse_amount
from foco_finance.models.base import validate_iso_date
from foco_finance.models.ledger import LedgerEntry, Party
from foco_finance.models.transaction import Transaction, TransactionType
from foco_finance.models.validation import ValidationIssue, ValidationResult


NEGATIVE_AMOUNT_MESSAGE = "O valor não pode ser negativo."


class ValidationFailedError(ValueError):
    """Form input rejected before reaching storage."""

    def __init__(self, result: ValidationResult):
        super().__init__(result.first_message() or "Invalid input")
        self.result = result


def _check_amount(
    text: str,
    field: str,
    issues: list[ValidationIssue],
) -> Optional[Decimal]:
    try:
        amount = parse_amount(text)
    except ValueError:
        issues.append(ValidationIssue(
            field=field,
            issue_type="invalid_format",
            message="Informe um valor numérico.",
        ))
        return None
    if amount < 0:
        issues.append(ValidationIssue(
            field=field,
            issue_type="negative_value",
            message=NEGATIVE_AMOUNT_MESSAGE,
        ))
        return None
    return amount


def _check_date(text: str, issues: list[ValidationIssue]) -> Optional[str]:
    if not text or not text.strip():
        issues.append(ValidationIssue(
            field="date",
            issue_type="missing",
            message="Informe a data.",
        ))
        return None
    try:
        return validate_iso_date(text.strip())
    except ValueError:
        issues.append(ValidationIssue(
            field="date",
            issue_type="invalid_format",
            message="Data inválida (use AAAA-MM-DD).",
        ))
        return None


def _check_required(text: Optional[str], field: str, message: str, issues: list[ValidationIssue]) -> str:
    value = (text or "").strip()
    if not value:
        issues.append(ValidationIssue(field=field, issue_type="missing", message=message))
    return value


class TransactionValidator:
    """Validates the transaction form and builds the Transaction."""

    def validate(
        self,
        date: str,
        type: str,
        value: str,
        category: str,
    ) -> ValidationResult:
        issues: list[ValidationIssue] = []
        _check_date(date, issues)
        if type not in {t.value for t in TransactionType}:
            issues.append(ValidationIssue(
                field="type",
                issue_type="invalid_value",
                message="Escolha entrada ou saída.",
            ))
        _check_amount(value, "value", issues)
        _check_required(category, "category", "Escolha uma categoria.", issues)
        return ValidationResult(issues=issues)

    def build(
        self,
        date: str,
        type: str,
        value: str,
        category: str,
        note: Optional[str] = None,
        person: Optional[str] = None,
        is_pj_salary: bool = False,
        transaction_id: Optional[str] = None,
    ) -> Transaction:
        """
        Raises:
            ValidationFailedError: If any field is invalid
        """
        result = self.validate(date, type, value, category)
        if result.has_errors:
            raise ValidationFailedError(result)
        fields = dict(
            date=date.strip(),
            type=TransactionType(type),
            value=parse_amount(value),
            category=category.strip(),
            note=(note or "").strip() or None,
            person=(person or "").strip() or None,
            is_pj_salary=is_pj_salary,
        )
        if transaction_id:
            fields["id"] = transaction_id
        return Transaction(**fields)


class LedgerEntryValidator:
    """Validates the shared-expense entry form and builds the LedgerEntry."""

    def validate(
        self,
        amount: str,
        paid_by: str,
        description: str,
        date: str,
    ) -> ValidationResult:
        issues: list[ValidationIssue] = []
        _check_amount(amount, "amount", issues)
        if paid_by not in {p.value for p in Party}:
            issues.append(ValidationIssue(
                field="paid_by",
                issue_type="invalid_value",
                message="Informe quem pagou.",
            ))
        _check_required(description, "description", "Informe uma descrição.", issues)
        _check_date(date, issues)
        return ValidationResult(issues=issues)

    def build(
        self,
        amount: str,
        paid_by: str,
        description: str,
        date: str,
        entry_id: Optional[str] = None,
    ) -> LedgerEntry:
        """
        Raises:
            ValidationFailedError: If any field is invalid
        """
        result = self.validate(amount, paid_by, description, date)
        if result.has_errors:
            raise ValidationFailedError(result)
        entry = new_entry(
            amount=parse_amount(amount),
            paid_by=Party(paid_by),
            description=description.strip(),
            date=date.strip(),
        )
        if entry_id:
            entry = entry.model_copy(update={"id": entry_id})
        return entry


class LedgerValidator:
    """Title and friend name are both required to open a ledger."""

    def validate(self, title: str, friend_name: str) -> ValidationResult:
        issues: list[ValidationIssue] = []
        _check_required(title, "title", "Informe o nome do registro.", issues)
        _check_required(friend_name, "friend_name", "Informe o nome do amigo.", issues)
        return ValidationResult(issues=issues)

    def check(self, title: str, friend_name: str) -> None:
        result = self.validate(title, friend_name)
        if result.has_errors:
            raise ValidationFailedError(result)



class MonthValidator:
    """Months travel as YYYY-MM; anything else never reaches the engine."""

    def validate(self, month: Optional[str]) -> ValidationResult:
        issues: list[ValidationIssue] = []
        try:
            check_month(month)
        except ValueError:
            issues.append(ValidationIssue(
                field="month",
                issue_type="invalid_format",
                message="Mês inválido (use AAAA-MM).",
            ))
        return ValidationResult(issues=issues)

    def check(self, month: Optional[str]) -> str:
        result = self.validate(month)
        if result.has_errors:
            raise ValidationFailedError(result)
        return month
