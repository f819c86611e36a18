"""Domain model entities for accountshelper.

These are pure data classes representing business concepts, independent of
database schema. Amounts are Decimals in major units; the persistence layer
converts them to integer minor units.
"""

import calendar
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from accountshelper.domain.enums import (
    Category,
    Currency,
    DebitCredit,
    Payer,
    ReconcilableAccount,
)
from accountshelper.domain import validation
from accountshelper.domain.errors import ValidationError
from accountshelper.utils.amounts import RoundingMode, round_to_scale

# Statement dates before this mark an opening-balance reconciliation.
OPENING_BALANCE_SENTINEL = date(1, 1, 2)


@dataclass(frozen=True)
class TransactionRecord:
    """Transaction domain entity.

    Sign convention: debits (money going out) are positive, credits negative.
    ``exchange_rate`` multiplies ``amount`` into GBP, and ``commission`` is a
    GBP fee added after conversion.
    """

    id: Optional[int]
    amount: Decimal
    currency: Currency = Currency.GBP
    exchange_rate: Decimal = Decimal("1")
    commission: Decimal = Decimal("0")
    category: Category = Category.unknown
    split_category: Category = Category.unknown
    split_amount: Decimal = Decimal("0")
    account: ReconcilableAccount = ReconcilableAccount.unknown
    payer: Payer = Payer.unknown
    payee: Optional[str] = None
    debit_credit: DebitCredit = DebitCredit.unknown
    transaction_date: Optional[date] = None
    explanation: Optional[str] = None
    reference: Optional[str] = None
    extended_details: Optional[str] = None
    address: Optional[str] = None
    account_number: Optional[str] = None
    closed: bool = False
    remainder_category: Optional[Category] = None
    timestamp: Optional[datetime] = None

    @property
    def is_split(self) -> bool:
        return self.split_amount != 0

    @property
    def split_remainder_amount(self) -> Decimal:
        return self.amount - self.split_amount

    @property
    def split_remainder_category(self) -> Category:
        if self.remainder_category is None:
            return self.category
        return self.remainder_category

    @property
    def amount_in_base_currency(self) -> Decimal:
        """Amount converted to GBP, without commission."""
        return self.amount * self.exchange_rate

    @property
    def split_amount_in_base_currency(self) -> Decimal:
        """Split portion in GBP. Commission always follows the split side."""
        return self.split_amount * self.exchange_rate + self.commission

    @property
    def split_remainder_amount_in_base_currency(self) -> Decimal:
        return self.split_remainder_amount * self.exchange_rate

    @property
    def total_in_base_currency(self) -> Decimal:
        """GBP total including commission, rounded half away from zero."""
        return round_to_scale(
            self.amount * self.exchange_rate + self.commission,
            2,
            RoundingMode.HALF_UP,
        )

    # Validation is delegated so each rule can be queried on its own.

    def is_amount_valid(self) -> bool:
        return validation.is_amount_valid(self)

    def is_category_valid(self) -> bool:
        return validation.is_category_valid(self)

    def is_currency_valid(self) -> bool:
        return validation.is_currency_valid(self)

    def is_exchange_rate_valid(self) -> bool:
        return validation.is_exchange_rate_valid(self)

    def is_debit_credit_valid(self) -> bool:
        return validation.is_debit_credit_valid(self)

    def is_payee_valid(self) -> bool:
        return validation.is_payee_valid(self)

    def is_payer_valid(self) -> bool:
        return validation.is_payer_valid(self)

    def is_account_valid(self) -> bool:
        return validation.is_account_valid(self)

    def is_split_amount_valid(self) -> bool:
        return validation.is_split_amount_valid(self)

    def is_split_category_valid(self) -> bool:
        return validation.is_split_category_valid(self)

    def is_split_remainder_category_valid(self) -> bool:
        return validation.is_split_remainder_category_valid(self)

    def is_transaction_date_valid(self, now: Optional[date] = None) -> bool:
        return validation.is_transaction_date_valid(self, now=now)

    def is_valid(self, now: Optional[date] = None) -> bool:
        return validation.is_valid(self, now=now)


@dataclass(frozen=True)
class CategoryMapping:
    """Learned payee text to category mapping."""

    id: int
    normalized_key: str
    category: Category
    usage_count: int


@dataclass(frozen=True)
class AccountingPeriod:
    """A (year, month) accounting period. Year <= 1 means opening balances."""

    year: int
    month: int

    @classmethod
    def parse(cls, text: str) -> "AccountingPeriod":
        """Parse "YYYY-MM" (or "opening") into a period."""
        value = text.strip().lower()
        if value == "opening":
            return cls(year=1, month=1)
        try:
            year_str, month_str = value.split("-", 1)
            year, month = int(year_str), int(month_str)
        except ValueError:
            raise ValidationError(f"Could not parse period '{text}', expected YYYY-MM")
        if not 1 <= month <= 12:
            raise ValidationError(f"Month must be between 1 and 12, got {month}")
        return cls(year=year, month=month)

    @classmethod
    def containing(cls, day: date) -> "AccountingPeriod":
        return cls(year=day.year, month=day.month)

    @property
    def is_opening_balance(self) -> bool:
        return self.year <= 1

    @property
    def short_description(self) -> str:
        return f"{self.month}/{self.year}"

    @property
    def display_string(self) -> str:
        """E.g. "September 2025", or "Opening Balances" for year <= 1."""
        if self.is_opening_balance:
            return "Opening Balances"
        month = min(max(self.month, 1), 12)
        return f"{calendar.month_name[month]} {self.year}"

    def __str__(self) -> str:
        return self.display_string


@dataclass(frozen=True)
class Reconciliation:
    """Statement figure for one account and accounting period."""

    id: int
    account: ReconcilableAccount
    period: AccountingPeriod
    statement_date: date
    statement_ending_balance: Decimal
    currency: Currency
    closed: bool = False

    @property
    def period_key(self) -> str:
        return make_period_key(self.period, self.account)

    @property
    def is_opening_balance(self) -> bool:
        return self.statement_date < OPENING_BALANCE_SENTINEL


def make_period_key(period: AccountingPeriod, account: ReconcilableAccount) -> str:
    """Build the "YYYY-MM-CODE" key that identifies a reconciliation."""
    return f"{period.year}-{period.month:02d}-{account.code}"
