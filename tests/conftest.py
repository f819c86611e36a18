"""Shared pytest fixtures for accountshelper tests."""

import tempfile
import os
from datetime import date
from decimal import Decimal

import pytest

from accountshelper.database.factories import create_sqlite_database
from accountshelper.domain.category_matcher import CategoryMatcher
from accountshelper.domain.entities import TransactionRecord
from accountshelper.domain.enums import Category, Currency, DebitCredit, Payer, ReconcilableAccount
from accountshelper.domain.reconciliation import ReconciliationService
from accountshelper.domain.transaction import TransactionService


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    db = create_sqlite_database(database_path=db_path)
    # Store the path for CLI tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def transaction_service(temp_db):
    """Create a TransactionService with a temporary database."""
    return TransactionService(temp_db)


@pytest.fixture
def category_matcher(temp_db):
    """Create a CategoryMatcher with a temporary database."""
    return CategoryMatcher(temp_db)


@pytest.fixture
def reconciliation_service(temp_db):
    """Create a ReconciliationService with a temporary database."""
    return ReconciliationService(temp_db)


@pytest.fixture
def make_record():
    """Build a valid GBP transaction record, overriding any field."""

    def _make(**overrides):
        fields = dict(
            id=None,
            amount=Decimal("10.00"),
            currency=Currency.GBP,
            exchange_rate=Decimal("1"),
            category=Category.FoodHousehold,
            account=ReconcilableAccount.BofSPV,
            payer=Payer.tony,
            payee="Tesco",
            debit_credit=DebitCredit.DR,
            transaction_date=date(2025, 9, 10),
        )
        fields.update(overrides)
        return TransactionRecord(**fields)

    return _make


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
