"""Generic SQLAlchemy database implementation."""

import dataclasses
import logging
from contextlib import contextmanager
from typing import Any, Iterable, Iterator, Optional
from datetime import date
from decimal import Decimal
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from accountshelper.database.base import Database
from accountshelper.database.models import (
    CategoryMapping,
    Reconciliation,
    Transaction,
    create_session_factory,
)
from accountshelper.database.mappers import (
    category_mapping_to_domain,
    reconciliation_to_domain,
    transaction_columns,
    transaction_to_domain,
)
from accountshelper.domain.entities import (
    AccountingPeriod,
    CategoryMapping as DomainCategoryMapping,
    Reconciliation as DomainReconciliation,
    TransactionRecord,
    make_period_key,
)
from accountshelper.domain.enums import Category, Currency, ReconcilableAccount
from accountshelper.domain.errors import (
    NotFoundError,
    PersistenceError,
    reconciliation_not_found,
    save_failed,
    transaction_not_found,
)
from accountshelper.utils.amounts import decimal_to_minor_units

logger = logging.getLogger(__name__)


class SQLAlchemyDatabase(Database):
    """SQLAlchemy-based implementation of Database interface."""

    def __init__(self, database_url: str):
        """Initialize SQLAlchemy database.

        Args:
            database_url: SQLAlchemy database URL (e.g., 'sqlite:///path/to.db')
        """
        self.database_url = database_url
        self.session_factory = create_session_factory(database_url)
        self._session: Optional[Session] = None

    def _get_session(self) -> Session:
        """Get current session, creating one if needed."""
        if self._session is None:
            self._session = self.session_factory()
        return self._session

    @contextmanager
    def _saving(self) -> Iterator[Session]:
        """Yield the session and commit.

        Any failure rolls back the uncommitted changes. SQLAlchemy errors are
        re-raised as PersistenceError; anything else propagates unchanged.
        """
        session = self._get_session()
        try:
            yield session
            session.commit()
        except SQLAlchemyError as exc:
            session.rollback()
            logger.warning("Save failed, rolled back uncommitted changes: %s", exc)
            raise PersistenceError(save_failed(exc)) from exc
        except Exception:
            session.rollback()
            raise

    def connect(self) -> None:
        """Connect to the database."""
        # Connection is lazy, so this is a no-op
        pass

    def disconnect(self) -> None:
        """Disconnect from the database."""
        if self._session is not None:
            self._session.close()
            self._session = None

    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        # Schema is created automatically by create_session_factory
        pass

    # Transaction operations
    def _require_transaction(self, session: Session, transaction_id: int) -> Transaction:
        transaction = session.query(Transaction).filter(Transaction.id == transaction_id).first()
        if transaction is None:
            raise NotFoundError(transaction_not_found(transaction_id))
        return transaction

    def create_transaction(self, record: TransactionRecord) -> int:
        """Store a transaction record. Returns transaction ID."""
        with self._saving() as session:
            transaction = Transaction(**transaction_columns(record))
            session.add(transaction)
        return transaction.id

    def get_transaction(self, transaction_id: int) -> Optional[TransactionRecord]:
        """Get transaction by ID."""
        session = self._get_session()
        txn = session.query(Transaction).filter(Transaction.id == transaction_id).first()
        if txn is None:
            return None
        return transaction_to_domain(txn)

    def list_transactions(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        account: Optional[ReconcilableAccount] = None,
        category: Optional[Category] = None,
        uncategorized: bool = False,
    ) -> list[TransactionRecord]:
        """List transactions with optional filters, oldest first."""
        session = self._get_session()
        query = session.query(Transaction)

        if start_date is not None:
            query = query.filter(Transaction.transaction_date >= start_date)
        if end_date is not None:
            query = query.filter(Transaction.transaction_date <= end_date)
        if account is not None:
            query = query.filter(Transaction.account_code == int(account))
        if uncategorized:
            query = query.filter(Transaction.category_code == int(Category.unknown))
        elif category is not None:
            query = query.filter(Transaction.category_code == int(category))

        transactions = query.order_by(Transaction.transaction_date, Transaction.id).all()
        return [transaction_to_domain(txn) for txn in transactions]

    def update_transaction(self, transaction_id: int, changes: dict[str, Any]) -> None:
        """Apply field changes (domain field names) to a transaction."""
        with self._saving() as session:
            transaction = self._require_transaction(session, transaction_id)
            updated = dataclasses.replace(transaction_to_domain(transaction), **changes)
            for column, value in transaction_columns(updated).items():
                setattr(transaction, column, value)

    def update_transaction_categories(self, changes: dict[int, Category]) -> None:
        """Set the main category on several transactions in one save."""
        if not changes:
            return
        with self._saving() as session:
            for transaction_id, category in changes.items():
                transaction = self._require_transaction(session, transaction_id)
                transaction.category_code = int(category)

    def delete_transaction(self, transaction_id: int) -> None:
        """Delete a transaction."""
        with self._saving() as session:
            session.delete(self._require_transaction(session, transaction_id))

    def count_matching_transactions(
        self,
        amount: Decimal,
        currency: Currency,
        account: ReconcilableAccount,
        start_date: date,
        end_date: date,
    ) -> int:
        """Count transactions with the same amount, currency and account in a date window."""
        session = self._get_session()
        return (
            session.query(Transaction)
            .filter(
                Transaction.amount_minor == decimal_to_minor_units(amount),
                Transaction.currency_code == int(currency),
                Transaction.account_code == int(account),
                Transaction.transaction_date >= start_date,
                Transaction.transaction_date <= end_date,
            )
            .count()
        )

    # Category mapping operations
    def create_category_mapping(
        self, normalized_key: str, category: Category, usage_count: int = 1
    ) -> int:
        """Create a category mapping. Returns mapping ID."""
        with self._saving() as session:
            mapping = CategoryMapping(
                input_string=normalized_key,
                category_code=int(category),
                usage_count=usage_count,
            )
            session.add(mapping)
        return mapping.id

    def list_category_mappings(self) -> list[DomainCategoryMapping]:
        """List all category mappings in insertion order."""
        session = self._get_session()
        mappings = session.query(CategoryMapping).order_by(CategoryMapping.id).all()
        return [category_mapping_to_domain(m) for m in mappings]

    def find_category_mappings(self, normalized_key: str) -> list[DomainCategoryMapping]:
        """List mappings for an exact normalized key in insertion order."""
        session = self._get_session()
        mappings = (
            session.query(CategoryMapping)
            .filter(CategoryMapping.input_string == normalized_key)
            .order_by(CategoryMapping.id)
            .all()
        )
        return [category_mapping_to_domain(m) for m in mappings]

    def update_category_mapping(
        self,
        mapping_id: int,
        category: Optional[Category] = None,
        usage_count: Optional[int] = None,
    ) -> None:
        """Update a mapping's category and/or usage count."""
        with self._saving() as session:
            mapping = session.query(CategoryMapping).filter(CategoryMapping.id == mapping_id).first()
            if mapping is None:
                raise NotFoundError(f"Category mapping {mapping_id} not found")
            if category is not None:
                mapping.category_code = int(category)
            if usage_count is not None:
                mapping.usage_count = usage_count

    # Reconciliation operations
    def _require_reconciliation(self, session: Session, reconciliation_id: int) -> Reconciliation:
        rec = session.query(Reconciliation).filter(Reconciliation.id == reconciliation_id).first()
        if rec is None:
            raise NotFoundError(reconciliation_not_found(reconciliation_id))
        return rec

    def create_reconciliation(
        self,
        account: ReconcilableAccount,
        period: AccountingPeriod,
        statement_date: date,
        ending_balance: Decimal,
        currency: Currency,
    ) -> int:
        """Create a reconciliation. Returns reconciliation ID."""
        with self._saving() as session:
            rec = Reconciliation(
                period_year=period.year,
                period_month=period.month,
                account_code=int(account),
                statement_date=statement_date,
                ending_balance_minor=decimal_to_minor_units(ending_balance),
                currency_code=int(currency),
                period_key=make_period_key(period, account),
            )
            session.add(rec)
        return rec.id

    def get_reconciliation(self, reconciliation_id: int) -> Optional[DomainReconciliation]:
        """Get reconciliation by ID."""
        session = self._get_session()
        rec = session.query(Reconciliation).filter(Reconciliation.id == reconciliation_id).first()
        if rec is None:
            return None
        return reconciliation_to_domain(rec)

    def get_reconciliation_for_period(
        self, period: AccountingPeriod, account: ReconcilableAccount
    ) -> Optional[DomainReconciliation]:
        """Get the reconciliation for an account and period."""
        session = self._get_session()
        rec = (
            session.query(Reconciliation)
            .filter(
                Reconciliation.period_year == period.year,
                Reconciliation.period_month == period.month,
                Reconciliation.account_code == int(account),
            )
            .first()
        )
        if rec is None:
            return None
        return reconciliation_to_domain(rec)

    def list_reconciliations(
        self,
        period: Optional[AccountingPeriod] = None,
        account: Optional[ReconcilableAccount] = None,
    ) -> list[DomainReconciliation]:
        """List reconciliations ordered by account then statement date."""
        session = self._get_session()
        query = session.query(Reconciliation)
        if period is not None:
            query = query.filter(
                Reconciliation.period_year == period.year,
                Reconciliation.period_month == period.month,
            )
        if account is not None:
            query = query.filter(Reconciliation.account_code == int(account))
        recs = query.order_by(Reconciliation.account_code, Reconciliation.statement_date).all()
        return [reconciliation_to_domain(rec) for rec in recs]

    def get_previous_reconciliation(
        self, account: ReconcilableAccount, before: date
    ) -> Optional[DomainReconciliation]:
        """Get the latest reconciliation for an account with statement date before a date."""
        session = self._get_session()
        rec = (
            session.query(Reconciliation)
            .filter(
                Reconciliation.account_code == int(account),
                Reconciliation.statement_date < before,
            )
            .order_by(Reconciliation.statement_date.desc())
            .first()
        )
        if rec is None:
            return None
        return reconciliation_to_domain(rec)

    def has_later_reconciliation(
        self, account: ReconcilableAccount, after: date, closed_only: bool = False
    ) -> bool:
        """Check for a reconciliation with statement date after a date."""
        session = self._get_session()
        query = session.query(Reconciliation).filter(
            Reconciliation.account_code == int(account),
            Reconciliation.statement_date > after,
        )
        if closed_only:
            query = query.filter(Reconciliation.closed.is_(True))
        return query.count() > 0

    def set_reconciliation_closed(
        self, reconciliation_id: int, closed: bool, transaction_ids: Iterable[int]
    ) -> None:
        """Set the closed flag on a reconciliation and its transactions in one save."""
        ids = list(transaction_ids)
        with self._saving() as session:
            rec = self._require_reconciliation(session, reconciliation_id)
            rec.closed = closed
            if ids:
                for txn in session.query(Transaction).filter(Transaction.id.in_(ids)).all():
                    txn.closed = closed

    def delete_reconciliation(self, reconciliation_id: int) -> None:
        """Delete a reconciliation."""
        with self._saving() as session:
            session.delete(self._require_reconciliation(session, reconciliation_id))
