"""Field-level validation rules for transaction records.

Each rule is a pure predicate so a caller can highlight the specific field
that fails. ``is_valid`` is the conjunction of the rules and never raises.
"""

from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from typing import TYPE_CHECKING, Optional

from accountshelper.domain.enums import (
    Category,
    Currency,
    DebitCredit,
    Payer,
    ReconcilableAccount,
)

if TYPE_CHECKING:
    from accountshelper.domain.entities import TransactionRecord

# Rates at or above this for JPY are taken as a per-100-yen quoting mistake.
MAX_JPY_EXCHANGE_RATE = 300


class ValidationIssue(Enum):
    """Reason a record failed validation, one per field rule."""

    AMOUNT_ZERO = "amount must be non-zero"
    CATEGORY_UNKNOWN = "category must be set"
    CURRENCY_UNKNOWN = "currency must be set"
    EXCHANGE_RATE_INVALID = "exchange rate must be non-zero (and below 300 for JPY)"
    DEBIT_CREDIT_UNKNOWN = "debit/credit must be set"
    PAYEE_EMPTY = "payee must be non-empty"
    PAYER_UNKNOWN = "payer must be set"
    ACCOUNT_UNKNOWN = "account must be set"
    SPLIT_CATEGORY_UNKNOWN = "split category must be set for a split transaction"
    SPLIT_REMAINDER_CATEGORY_UNKNOWN = (
        "split remainder category must be set for a split transaction"
    )
    DATE_IN_FUTURE = "transaction date must not be in the future"


def is_amount_valid(record: TransactionRecord) -> bool:
    return record.amount != 0


def is_category_valid(record: TransactionRecord) -> bool:
    return record.category is not Category.unknown


def is_currency_valid(record: TransactionRecord) -> bool:
    return record.currency is not Currency.unknown


def is_exchange_rate_valid(record: TransactionRecord) -> bool:
    """GBP is always rate 1 and exempt; JPY rates must also stay below 300."""
    if record.currency is Currency.GBP:
        return True
    if record.exchange_rate == 0:
        return False
    if record.currency is Currency.JPY:
        return record.exchange_rate < MAX_JPY_EXCHANGE_RATE
    return True


def is_debit_credit_valid(record: TransactionRecord) -> bool:
    return record.debit_credit is not DebitCredit.unknown


def is_payee_valid(record: TransactionRecord) -> bool:
    return bool(record.payee)


def is_payer_valid(record: TransactionRecord) -> bool:
    return record.payer is not Payer.unknown


def is_account_valid(record: TransactionRecord) -> bool:
    return record.account is not ReconcilableAccount.unknown


def is_split_amount_valid(record: TransactionRecord) -> bool:
    """Split is non-zero and smaller than the whole amount.

    Not part of ``is_valid``; offered for editors that want to flag it.
    """
    return record.split_amount != 0 and record.split_amount < record.amount


def is_split_category_valid(record: TransactionRecord) -> bool:
    return record.split_category is not Category.unknown


def is_split_remainder_category_valid(record: TransactionRecord) -> bool:
    return record.split_remainder_category is not Category.unknown


def is_transaction_date_valid(
    record: TransactionRecord, now: Optional[date] = None
) -> bool:
    """The date may be today (inclusive) or earlier. A missing date counts as now."""
    txn_date = record.transaction_date
    if txn_date is None:
        return True
    if isinstance(txn_date, datetime):
        reference = now if isinstance(now, datetime) else datetime.now(txn_date.tzinfo)
        return txn_date <= reference
    if isinstance(now, datetime):
        now = now.date()
    return txn_date <= (now or date.today())


def validation_issues(
    record: TransactionRecord, now: Optional[date] = None
) -> list[ValidationIssue]:
    """Return every failed rule for a record, in field order.

    Args:
        record: Transaction record to check
        now: Evaluation time for the date rule (defaults to today)

    Returns:
        List of issues; empty when the record is valid
    """
    checks = [
        (is_amount_valid(record), ValidationIssue.AMOUNT_ZERO),
        (is_category_valid(record), ValidationIssue.CATEGORY_UNKNOWN),
        (is_currency_valid(record), ValidationIssue.CURRENCY_UNKNOWN),
        (is_exchange_rate_valid(record), ValidationIssue.EXCHANGE_RATE_INVALID),
        (is_debit_credit_valid(record), ValidationIssue.DEBIT_CREDIT_UNKNOWN),
        (is_payee_valid(record), ValidationIssue.PAYEE_EMPTY),
        (is_payer_valid(record), ValidationIssue.PAYER_UNKNOWN),
        (is_account_valid(record), ValidationIssue.ACCOUNT_UNKNOWN),
    ]
    if record.split_amount != 0:
        checks.append(
            (is_split_category_valid(record), ValidationIssue.SPLIT_CATEGORY_UNKNOWN)
        )
        checks.append(
            (
                is_split_remainder_category_valid(record),
                ValidationIssue.SPLIT_REMAINDER_CATEGORY_UNKNOWN,
            )
        )
    checks.append(
        (is_transaction_date_valid(record, now=now), ValidationIssue.DATE_IN_FUTURE)
    )
    return [issue for passed, issue in checks if not passed]


def is_valid(record: TransactionRecord, now: Optional[date] = None) -> bool:
    """True if and only if every applicable rule passes."""
    return not validation_issues(record, now=now)
