"""Transaction domain service."""

import dataclasses
import logging
from datetime import date, timedelta
from decimal import Decimal
from typing import Any, Optional

from accountshelper.database.base import Database
from accountshelper.domain.category_matcher import CategoryMatcher
from accountshelper.domain.entities import TransactionRecord
from accountshelper.domain.enums import Category, Currency, DebitCredit, Payer, ReconcilableAccount
from accountshelper.domain.errors import ConflictError, NotFoundError, transaction_closed, transaction_not_found

logger = logging.getLogger(__name__)

# Window around an import candidate's date that counts as "the same" transaction.
DUPLICATE_DAYS_BEFORE = 7
DUPLICATE_DAYS_AFTER = 1


def normalized_exchange_rate(currency: Currency, exchange_rate: Optional[Decimal]) -> Decimal:
    """GBP always converts at 1; a missing or zero rate is treated as 1."""
    if currency is Currency.GBP or not exchange_rate:
        return Decimal("1")
    return Decimal(exchange_rate)


class TransactionService:
    """Service for managing transactions."""

    def __init__(self, db: Database):
        """Initialize transaction service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_transaction(
        self,
        amount: Decimal,
        account: ReconcilableAccount,
        transaction_date: Optional[date] = None,
        currency: Currency = Currency.GBP,
        exchange_rate: Optional[Decimal] = None,
        commission: Decimal = Decimal("0"),
        category: Category = Category.unknown,
        split_category: Category = Category.unknown,
        split_amount: Decimal = Decimal("0"),
        payer: Payer = Payer.unknown,
        payee: Optional[str] = None,
        debit_credit: Optional[DebitCredit] = None,
        explanation: Optional[str] = None,
        reference: Optional[str] = None,
        auto_categorize: bool = False,
    ) -> int:
        """Create a transaction.

        Args:
            amount: Signed amount in the transaction currency (debits positive)
            account: Account the transaction belongs to
            transaction_date: Date of the transaction
            currency: Transaction currency
            exchange_rate: Multiplier into GBP; ignored for GBP
            commission: GBP fee added after conversion
            category: Main category
            split_category: Category for the split portion
            split_amount: Split portion in the transaction currency
            payer: Who paid
            payee: Payee text, also used for auto-categorisation
            debit_credit: DR/CR marker; derived from the amount sign if omitted
            explanation: Optional free-text explanation
            reference: Optional statement reference
            auto_categorize: If True and category is unknown, match the payee

        Returns:
            Transaction ID
        """
        amount = Decimal(amount)
        if auto_categorize and category is Category.unknown:
            category = CategoryMatcher(self.db).match_category(payee)

        record = TransactionRecord(
            id=None,
            amount=amount,
            currency=currency,
            exchange_rate=normalized_exchange_rate(currency, exchange_rate),
            commission=Decimal(commission),
            category=category,
            split_category=split_category,
            split_amount=Decimal(split_amount),
            account=account,
            payer=payer,
            payee=payee,
            debit_credit=debit_credit if debit_credit is not None else DebitCredit.for_amount(amount),
            transaction_date=transaction_date,
            explanation=explanation,
            reference=reference,
        )
        transaction_id = self.db.create_transaction(record)
        logger.debug("Created transaction %d on %s", transaction_id, account.code)
        return transaction_id

    def get_transaction(self, transaction_id: int) -> Optional[TransactionRecord]:
        """Get transaction by ID.

        Args:
            transaction_id: Transaction ID

        Returns:
            Transaction record or None if not found
        """
        return self.db.get_transaction(transaction_id)

    def _require_open(self, transaction_id: int) -> TransactionRecord:
        txn = self.db.get_transaction(transaction_id)
        if txn is None:
            raise NotFoundError(transaction_not_found(transaction_id))
        if txn.closed:
            raise ConflictError(transaction_closed(transaction_id))
        return txn

    def list_transactions(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        account: Optional[ReconcilableAccount] = None,
        category: Optional[Category] = None,
    ) -> list[TransactionRecord]:
        """List transactions with filters, oldest first."""
        return self.db.list_transactions(
            start_date=start_date,
            end_date=end_date,
            account=account,
            category=category,
        )

    def list_uncategorized(self) -> list[TransactionRecord]:
        """List transactions whose category is still unknown."""
        return self.db.list_transactions(uncategorized=True)

    def update_category(self, transaction_id: int, category: Category) -> None:
        """Update transaction category.

        Args:
            transaction_id: Transaction ID
            category: New main category

        Raises:
            NotFoundError: If transaction doesn't exist
            ConflictError: If transaction belongs to a closed period
        """
        self._require_open(transaction_id)
        self.db.update_transaction_categories({transaction_id: category})

    def update_transaction(self, transaction_id: int, **changes: Any) -> TransactionRecord:
        """Update transaction fields.

        Keyword arguments are TransactionRecord field names. Changing the
        currency to GBP resets the exchange rate to 1.

        Raises:
            NotFoundError: If transaction doesn't exist
            ConflictError: If transaction belongs to a closed period
            TypeError: If a keyword isn't a transaction field
        """
        txn = self._require_open(transaction_id)
        field_names = {f.name for f in dataclasses.fields(TransactionRecord)} - {"id", "timestamp", "closed"}
        unknown = set(changes) - field_names
        if unknown:
            raise TypeError(f"Unknown transaction fields: {', '.join(sorted(unknown))}")

        if "currency" in changes or "exchange_rate" in changes:
            currency = changes.get("currency", txn.currency)
            changes["exchange_rate"] = normalized_exchange_rate(
                currency, changes.get("exchange_rate", txn.exchange_rate)
            )

        self.db.update_transaction(transaction_id, changes)
        return self.db.get_transaction(transaction_id)

    def delete_transaction(self, transaction_id: int) -> None:
        """Delete a transaction.

        Args:
            transaction_id: Transaction ID to delete

        Raises:
            NotFoundError: If transaction doesn't exist
            ConflictError: If transaction belongs to a closed period
        """
        self._require_open(transaction_id)
        self.db.delete_transaction(transaction_id)

    def find_possible_duplicates(self, candidate: TransactionRecord) -> int:
        """Count stored transactions that look like an import candidate.

        A stored transaction matches when amount, currency and account agree
        and its date falls from a week before to a day after the candidate's.

        Returns:
            Number of matching transactions (0 when the candidate has no date)
        """
        if candidate.transaction_date is None:
            return 0
        return self.db.count_matching_transactions(
            amount=candidate.amount,
            currency=candidate.currency,
            account=candidate.account,
            start_date=candidate.transaction_date - timedelta(days=DUPLICATE_DAYS_BEFORE),
            end_date=candidate.transaction_date + timedelta(days=DUPLICATE_DAYS_AFTER),
        )
