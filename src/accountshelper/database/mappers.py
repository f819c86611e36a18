"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer owns the minor-unit and enum-code conversions so the domain only
ever sees Decimals and enum members.
"""

from decimal import Decimal
from typing import Any

from accountshelper.domain import entities as domain
from accountshelper.domain.enums import Category, Currency, DebitCredit, Payer, ReconcilableAccount
from accountshelper.utils.amounts import decimal_to_minor_units, minor_units_to_decimal
from accountshelper.database.models import (
    CategoryMapping as ORMCategoryMapping,
    Reconciliation as ORMReconciliation,
    Transaction as ORMTransaction,
)


def transaction_to_domain(orm_transaction: ORMTransaction) -> domain.TransactionRecord:
    """Convert SQLAlchemy Transaction model to domain TransactionRecord."""
    remainder = orm_transaction.remainder_category_code
    return domain.TransactionRecord(
        id=orm_transaction.id,
        amount=minor_units_to_decimal(orm_transaction.amount_minor),
        currency=Currency.from_code(orm_transaction.currency_code),
        exchange_rate=Decimal(orm_transaction.exchange_rate),
        commission=minor_units_to_decimal(orm_transaction.commission_minor),
        category=Category.from_code(orm_transaction.category_code),
        split_category=Category.from_code(orm_transaction.split_category_code),
        split_amount=minor_units_to_decimal(orm_transaction.split_amount_minor),
        account=ReconcilableAccount.from_code(orm_transaction.account_code),
        payer=Payer.from_code(orm_transaction.payer_code),
        payee=orm_transaction.payee,
        debit_credit=DebitCredit.from_code(orm_transaction.debit_credit_code),
        transaction_date=orm_transaction.transaction_date,
        explanation=orm_transaction.explanation,
        reference=orm_transaction.reference,
        extended_details=orm_transaction.extended_details,
        address=orm_transaction.address,
        account_number=orm_transaction.account_number,
        closed=orm_transaction.closed,
        remainder_category=None if remainder is None else Category.from_code(remainder),
        timestamp=orm_transaction.timestamp,
    )


def transaction_columns(record: domain.TransactionRecord) -> dict[str, Any]:
    """Convert a domain TransactionRecord into ORM column values (without id)."""
    remainder = record.remainder_category
    return {
        "amount_minor": decimal_to_minor_units(record.amount),
        "currency_code": int(record.currency),
        "exchange_rate": record.exchange_rate,
        "commission_minor": decimal_to_minor_units(record.commission),
        "category_code": int(record.category),
        "split_category_code": int(record.split_category),
        "split_amount_minor": decimal_to_minor_units(record.split_amount),
        "remainder_category_code": None if remainder is None else int(remainder),
        "account_code": int(record.account),
        "payer_code": int(record.payer),
        "payee": record.payee,
        "debit_credit_code": int(record.debit_credit),
        "transaction_date": record.transaction_date,
        "explanation": record.explanation,
        "reference": record.reference,
        "extended_details": record.extended_details,
        "address": record.address,
        "account_number": record.account_number,
        "closed": record.closed,
    }


def category_mapping_to_domain(orm_mapping: ORMCategoryMapping) -> domain.CategoryMapping:
    """Convert SQLAlchemy CategoryMapping model to domain CategoryMapping."""
    return domain.CategoryMapping(
        id=orm_mapping.id,
        normalized_key=orm_mapping.input_string,
        category=Category.from_code(orm_mapping.category_code),
        usage_count=orm_mapping.usage_count,
    )


def reconciliation_to_domain(orm_reconciliation: ORMReconciliation) -> domain.Reconciliation:
    """Convert SQLAlchemy Reconciliation model to domain Reconciliation."""
    return domain.Reconciliation(
        id=orm_reconciliation.id,
        account=ReconcilableAccount.from_code(orm_reconciliation.account_code),
        period=domain.AccountingPeriod(
            year=orm_reconciliation.period_year, month=orm_reconciliation.period_month
        ),
        statement_date=orm_reconciliation.statement_date,
        statement_ending_balance=minor_units_to_decimal(orm_reconciliation.ending_balance_minor),
        currency=Currency.from_code(orm_reconciliation.currency_code),
        closed=orm_reconciliation.closed,
    )
