"""Balance aggregation and statement reconciliation.

Sign convention: debits (money going out) are positive and credits negative,
so an account's ending balance is its starting balance minus the net total.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal
from typing import Optional

from accountshelper.database.base import Database
from accountshelper.domain.entities import (
    AccountingPeriod,
    Reconciliation,
    TransactionRecord,
    make_period_key,
)
from accountshelper.domain.enums import Category, Currency, ReconcilableAccount
from accountshelper.domain.errors import (
    ConflictError,
    DependencyError,
    NotFoundError,
    reconciliation_cannot_close,
    reconciliation_delete_blocked,
    reconciliation_not_found,
)

logger = logging.getLogger(__name__)

ZERO = Decimal("0")
BASELINE_STATEMENT_DATE = date(1, 1, 1)


@dataclass(frozen=True)
class BalanceSummary:
    """Credits, debits and balances for a set of transactions."""

    start_balance: Decimal
    total_credits: Decimal
    total_debits: Decimal
    net_total: Decimal
    ending_balance: Decimal

    def gap(self, statement_balance: Decimal) -> Decimal:
        """Statement figure minus computed ending balance."""
        return reconciliation_gap(statement_balance, self.ending_balance)

    def is_balanced(self, statement_balance: Decimal) -> bool:
        return self.gap(statement_balance) == 0


def reconciliation_gap(
    statement_ending_balance: Decimal, computed_ending_balance: Decimal
) -> Decimal:
    """Return the out-of-balance amount against a statement."""
    return Decimal(statement_ending_balance) - Decimal(computed_ending_balance)


def summarize_amounts(amounts: Iterable[Decimal], starting_balance: Decimal = ZERO) -> BalanceSummary:
    """Summarize signed amounts from a starting balance.

    Negative amounts are credits, positive amounts debits; zero contributes
    to neither.
    """
    total_credits = ZERO
    total_debits = ZERO
    for amount in amounts:
        if amount < 0:
            total_credits += amount
        elif amount > 0:
            total_debits += amount

    start = Decimal(starting_balance)
    net_total = total_credits + total_debits
    return BalanceSummary(
        start_balance=start,
        total_credits=total_credits,
        total_debits=total_debits,
        net_total=net_total,
        ending_balance=start - net_total,
    )


def summarize(
    transactions: Iterable[TransactionRecord],
    starting_balance: Decimal = ZERO,
    in_base_currency: bool = False,
) -> BalanceSummary:
    """Summarize transactions from a starting balance.

    Args:
        transactions: Transactions to aggregate
        starting_balance: Balance carried into the period
        in_base_currency: Sum GBP totals (converted, commission added, rounded)
            instead of raw amounts

    Returns:
        BalanceSummary with credits, debits, net total and ending balance
    """
    if in_base_currency:
        amounts = (txn.total_in_base_currency for txn in transactions)
    else:
        amounts = (txn.amount for txn in transactions)
    return summarize_amounts(amounts, starting_balance)


def _empty_breakdown() -> dict[Category, Decimal]:
    return {category: ZERO for category in Category}


def category_breakdown(transactions: Iterable[TransactionRecord]) -> dict[Category, Decimal]:
    """Sum raw amounts by main category.

    Every category is present in the result, zero when nothing falls into it.
    """
    totals = _empty_breakdown()
    for txn in transactions:
        totals[txn.category] += txn.amount
    return totals


def category_breakdown_including_splits(
    transactions: Iterable[TransactionRecord],
) -> dict[Category, Decimal]:
    """Sum GBP amounts by category, dividing split transactions.

    The split category receives the split amount plus the whole commission;
    the remainder category receives the rest without commission.
    """
    totals = _empty_breakdown()
    for txn in transactions:
        totals[txn.split_category] += txn.split_amount_in_base_currency
        totals[txn.split_remainder_category] += txn.split_remainder_amount_in_base_currency
    return totals


class ReconciliationService:
    """Service for reconciling accounts against statements."""

    def __init__(self, db: Database):
        """Initialize reconciliation service.

        Args:
            db: Database instance
        """
        self.db = db

    def get_reconciliation(self, reconciliation_id: int) -> Optional[Reconciliation]:
        """Get reconciliation by ID."""
        return self.db.get_reconciliation(reconciliation_id)

    def require_reconciliation(self, reconciliation_id: int) -> Reconciliation:
        """Get reconciliation by ID or raise NotFoundError."""
        rec = self.db.get_reconciliation(reconciliation_id)
        if rec is None:
            raise NotFoundError(reconciliation_not_found(reconciliation_id))
        return rec

    def list_reconciliations(
        self,
        period: Optional[AccountingPeriod] = None,
        account: Optional[ReconcilableAccount] = None,
    ) -> list[Reconciliation]:
        """List reconciliations, optionally for one period and/or account."""
        return self.db.list_reconciliations(period=period, account=account)

    def ensure_baseline(self, account: ReconcilableAccount) -> Reconciliation:
        """Return the account's first reconciliation, creating an opening baseline if none exists."""
        existing = self.db.list_reconciliations(account=account)
        if existing:
            return existing[0]
        rec_id = self.db.create_reconciliation(
            account=account,
            period=AccountingPeriod(year=1, month=1),
            statement_date=BASELINE_STATEMENT_DATE,
            ending_balance=ZERO,
            currency=account.currency,
        )
        logger.debug("Created opening baseline for %s", account.code)
        return self.require_reconciliation(rec_id)

    def create_reconciliation(
        self,
        account: ReconcilableAccount,
        period: AccountingPeriod,
        statement_date: date,
        ending_balance: Decimal,
    ) -> Reconciliation:
        """Create a reconciliation for an account and period.

        Returns the existing one when the period is already recorded. The
        currency always follows the account.
        """
        self.ensure_baseline(account)
        existing = self.db.get_reconciliation_for_period(period, account)
        if existing is not None:
            return existing
        rec_id = self.db.create_reconciliation(
            account=account,
            period=period,
            statement_date=statement_date,
            ending_balance=ending_balance,
            currency=account.currency,
        )
        logger.debug("Created reconciliation %s", make_period_key(period, account))
        return self.require_reconciliation(rec_id)

    def previous_reconciliation(self, rec: Reconciliation) -> Optional[Reconciliation]:
        return self.db.get_previous_reconciliation(rec.account, rec.statement_date)

    def previous_ending_balance(self, rec: Reconciliation) -> Decimal:
        previous = self.previous_reconciliation(rec)
        return previous.statement_ending_balance if previous is not None else ZERO

    def transaction_window(self, rec: Reconciliation) -> tuple[date, date]:
        """Dates covered: the day after the previous statement up to this statement."""
        previous = self.previous_reconciliation(rec)
        if previous is None:
            return rec.statement_date, rec.statement_date
        return previous.statement_date + timedelta(days=1), rec.statement_date

    def transactions_for(self, rec: Reconciliation) -> list[TransactionRecord]:
        """Transactions on the account inside the reconciliation's window, oldest first."""
        start, end = self.transaction_window(rec)
        return self.db.list_transactions(start_date=start, end_date=end, account=rec.account)

    def summary(self, rec: Reconciliation) -> BalanceSummary:
        """Balance summary for the period, starting from the previous ending balance.

        GBP accounts sum each transaction's GBP total including commission;
        other accounts sum in their own currency.
        """
        return summarize(
            self.transactions_for(rec),
            starting_balance=self.previous_ending_balance(rec),
            in_base_currency=rec.currency is Currency.GBP,
        )

    def reconciliation_gap(self, rec: Reconciliation) -> Decimal:
        """Statement ending balance minus computed ending balance (0 for opening balances)."""
        if rec.is_opening_balance:
            return ZERO
        return self.summary(rec).gap(rec.statement_ending_balance)

    def is_balanced(self, rec: Reconciliation) -> bool:
        return self.reconciliation_gap(rec) == 0

    def all_transactions_valid(self, rec: Reconciliation) -> bool:
        return all(txn.is_valid() for txn in self.transactions_for(rec))

    def is_previous_closed(self, rec: Reconciliation) -> bool:
        previous = self.previous_reconciliation(rec)
        return previous is None or previous.closed

    def close_blockers(self, rec: Reconciliation) -> list[str]:
        """Reasons the period cannot be closed yet; empty when it can."""
        reasons = []
        if not self.is_balanced(rec):
            reasons.append(f"out of balance by {self.reconciliation_gap(rec)}")
        if not self.all_transactions_valid(rec):
            reasons.append("some transactions are invalid")
        if not self.is_previous_closed(rec):
            reasons.append("the previous period is still open")
        return reasons

    def can_close(self, rec: Reconciliation) -> bool:
        return not self.close_blockers(rec)

    def can_reopen(self, rec: Reconciliation) -> bool:
        """A period can be reopened only while no later period is closed."""
        return not self.db.has_later_reconciliation(rec.account, rec.statement_date, closed_only=True)

    def can_delete(self, rec: Reconciliation) -> bool:
        if rec.closed:
            return False
        if self.previous_ending_balance(rec) == 0 and self.db.has_later_reconciliation(
            rec.account, rec.statement_date
        ):
            return False
        return True

    def close(self, reconciliation_id: int) -> Reconciliation:
        """Close a period, marking the reconciliation and its transactions closed.

        Raises:
            NotFoundError: If the reconciliation doesn't exist
            ConflictError: If the period is unbalanced, has invalid transactions,
                or follows an open period
        """
        rec = self.require_reconciliation(reconciliation_id)
        reasons = self.close_blockers(rec)
        if reasons:
            raise ConflictError(reconciliation_cannot_close(rec.period_key, reasons))
        txn_ids = [txn.id for txn in self.transactions_for(rec)]
        self.db.set_reconciliation_closed(rec.id, True, txn_ids)
        logger.debug("Closed %s with %d transactions", rec.period_key, len(txn_ids))
        return self.require_reconciliation(rec.id)

    def reopen(self, reconciliation_id: int) -> Reconciliation:
        """Reopen a closed period and its transactions.

        Raises:
            NotFoundError: If the reconciliation doesn't exist
            ConflictError: If a later period is closed
        """
        rec = self.require_reconciliation(reconciliation_id)
        if not self.can_reopen(rec):
            raise ConflictError(
                f"Cannot reopen reconciliation {rec.period_key}: a later period is closed"
            )
        txn_ids = [txn.id for txn in self.transactions_for(rec)]
        self.db.set_reconciliation_closed(rec.id, False, txn_ids)
        logger.debug("Reopened %s", rec.period_key)
        return self.require_reconciliation(rec.id)

    def delete_reconciliation(self, reconciliation_id: int) -> None:
        """Delete an open reconciliation that no later period depends on.

        Raises:
            NotFoundError: If the reconciliation doesn't exist
            DependencyError: If it is closed or later periods depend on it
        """
        rec = self.require_reconciliation(reconciliation_id)
        if not self.can_delete(rec):
            raise DependencyError(reconciliation_delete_blocked(rec.period_key))
        self.db.delete_reconciliation(rec.id)
