"""SQLAlchemy models for the accountshelper database.

Money columns hold integer minor units and enum columns hold the enum's
persisted integer code.
"""

from datetime import datetime, UTC
from sqlalchemy import (
    Column,
    Integer,
    String,
    DateTime,
    Date,
    Numeric,
    Boolean,
    UniqueConstraint,
    create_engine,
)
from sqlalchemy.orm import declarative_base, sessionmaker, Session

from accountshelper.domain.enums import Category, Currency, DebitCredit, Payer, ReconcilableAccount

Base = declarative_base()


class Transaction(Base):
    """Transaction model."""

    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True)
    amount_minor = Column(Integer, nullable=False)
    currency_code = Column(Integer, default=int(Currency.GBP), nullable=False)
    exchange_rate = Column(Numeric(18, 8), default=1, nullable=False)
    commission_minor = Column(Integer, default=0, nullable=False)
    category_code = Column(Integer, default=int(Category.unknown), nullable=False, index=True)
    split_category_code = Column(Integer, default=int(Category.unknown), nullable=False)
    split_amount_minor = Column(Integer, default=0, nullable=False)
    remainder_category_code = Column(Integer, nullable=True)
    account_code = Column(Integer, default=int(ReconcilableAccount.unknown), nullable=False, index=True)
    payer_code = Column(Integer, default=int(Payer.unknown), nullable=False)
    payee = Column(String, nullable=True)
    debit_credit_code = Column(Integer, default=int(DebitCredit.unknown), nullable=False)
    transaction_date = Column(Date, nullable=True, index=True)
    explanation = Column(String, nullable=True)
    reference = Column(String, nullable=True)
    extended_details = Column(String, nullable=True)
    address = Column(String, nullable=True)
    account_number = Column(String, nullable=True)
    closed = Column(Boolean, default=False, nullable=False)
    timestamp = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)


class CategoryMapping(Base):
    """Learned payee text to category mapping."""

    __tablename__ = "category_mappings"

    id = Column(Integer, primary_key=True)
    input_string = Column(String, nullable=False, index=True)
    category_code = Column(Integer, nullable=False)
    usage_count = Column(Integer, default=1, nullable=False)

    __table_args__ = (
        UniqueConstraint("input_string", "category_code", name="uq_mapping_input_category"),
    )


class Reconciliation(Base):
    """Statement ending balance for one account and accounting period."""

    __tablename__ = "reconciliations"

    id = Column(Integer, primary_key=True)
    period_year = Column(Integer, nullable=False)
    period_month = Column(Integer, nullable=False)
    account_code = Column(Integer, nullable=False, index=True)
    statement_date = Column(Date, nullable=False)
    ending_balance_minor = Column(Integer, default=0, nullable=False)
    currency_code = Column(Integer, nullable=False)
    closed = Column(Boolean, default=False, nullable=False)
    period_key = Column(String, nullable=False)

    __table_args__ = (
        UniqueConstraint(
            "period_year", "period_month", "account_code", name="uq_reconciliation_period_account"
        ),
    )


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
