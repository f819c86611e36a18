"""Abstract database interface."""

from abc import ABC, abstractmethod
from typing import Any, Iterable, Optional
from datetime import date
from decimal import Decimal

# Import entities directly to avoid circular import through domain/__init__.py
from accountshelper.domain.entities import (
    AccountingPeriod,
    CategoryMapping,
    Reconciliation,
    TransactionRecord,
)
from accountshelper.domain.enums import Category, Currency, ReconcilableAccount


class Database(ABC):
    """Abstract database interface for accountshelper.

    Every mutating call is an atomic save: it either commits completely or
    rolls back and raises PersistenceError.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # Transaction operations
    @abstractmethod
    def create_transaction(self, record: TransactionRecord) -> int:
        """Store a transaction record (its id is ignored). Returns transaction ID."""
        pass

    @abstractmethod
    def get_transaction(self, transaction_id: int) -> Optional[TransactionRecord]:
        """Get transaction by ID."""
        pass

    @abstractmethod
    def list_transactions(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        account: Optional[ReconcilableAccount] = None,
        category: Optional[Category] = None,
        uncategorized: bool = False,
    ) -> list[TransactionRecord]:
        """List transactions with optional filters, oldest first.

        Args:
            start_date: Optional start date filter (inclusive)
            end_date: Optional end date filter (inclusive)
            account: Optional account filter
            category: Optional main category filter
            uncategorized: If True, only return transactions whose category is unknown
        """
        pass

    @abstractmethod
    def update_transaction(self, transaction_id: int, changes: dict[str, Any]) -> None:
        """Apply field changes (domain field names) to a transaction."""
        pass

    @abstractmethod
    def update_transaction_categories(self, changes: dict[int, Category]) -> None:
        """Set the main category on several transactions in one save."""
        pass

    @abstractmethod
    def delete_transaction(self, transaction_id: int) -> None:
        """Delete a transaction."""
        pass

    @abstractmethod
    def count_matching_transactions(
        self,
        amount: Decimal,
        currency: Currency,
        account: ReconcilableAccount,
        start_date: date,
        end_date: date,
    ) -> int:
        """Count transactions with the same amount, currency and account in a date window."""
        pass

    # Category mapping operations
    @abstractmethod
    def create_category_mapping(
        self, normalized_key: str, category: Category, usage_count: int = 1
    ) -> int:
        """Create a category mapping. Returns mapping ID."""
        pass

    @abstractmethod
    def list_category_mappings(self) -> list[CategoryMapping]:
        """List all category mappings in insertion order."""
        pass

    @abstractmethod
    def find_category_mappings(self, normalized_key: str) -> list[CategoryMapping]:
        """List mappings for an exact normalized key in insertion order."""
        pass

    @abstractmethod
    def update_category_mapping(
        self,
        mapping_id: int,
        category: Optional[Category] = None,
        usage_count: Optional[int] = None,
    ) -> None:
        """Update a mapping's category and/or usage count."""
        pass

    # Reconciliation operations
    @abstractmethod
    def create_reconciliation(
        self,
        account: ReconcilableAccount,
        period: AccountingPeriod,
        statement_date: date,
        ending_balance: Decimal,
        currency: Currency,
    ) -> int:
        """Create a reconciliation. Returns reconciliation ID."""
        pass

    @abstractmethod
    def get_reconciliation(self, reconciliation_id: int) -> Optional[Reconciliation]:
        """Get reconciliation by ID."""
        pass

    @abstractmethod
    def get_reconciliation_for_period(
        self, period: AccountingPeriod, account: ReconcilableAccount
    ) -> Optional[Reconciliation]:
        """Get the reconciliation for an account and period."""
        pass

    @abstractmethod
    def list_reconciliations(
        self,
        period: Optional[AccountingPeriod] = None,
        account: Optional[ReconcilableAccount] = None,
    ) -> list[Reconciliation]:
        """List reconciliations ordered by account then statement date."""
        pass

    @abstractmethod
    def get_previous_reconciliation(
        self, account: ReconcilableAccount, before: date
    ) -> Optional[Reconciliation]:
        """Get the latest reconciliation for an account with statement date before a date."""
        pass

    @abstractmethod
    def has_later_reconciliation(
        self, account: ReconcilableAccount, after: date, closed_only: bool = False
    ) -> bool:
        """Check for a reconciliation with statement date after a date."""
        pass

    @abstractmethod
    def set_reconciliation_closed(
        self, reconciliation_id: int, closed: bool, transaction_ids: Iterable[int]
    ) -> None:
        """Set the closed flag on a reconciliation and its transactions in one save."""
        pass

    @abstractmethod
    def delete_reconciliation(self, reconciliation_id: int) -> None:
        """Delete a reconciliation."""
        pass
