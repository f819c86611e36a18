"""Tests for counter-transaction inference."""

from decimal import Decimal

from accountshelper.domain import counter
from accountshelper.domain.enums import Category, Currency, DebitCredit, ReconcilableAccount


def test_trigger_lookup():
    assert counter.trigger(ReconcilableAccount.BofSPV, Category.VisaPayment) is ReconcilableAccount.VISA
    assert counter.trigger(ReconcilableAccount.BofSPV, Category.ToYenCash) is ReconcilableAccount.CashYEN
    assert counter.trigger(ReconcilableAccount.BofSPV, Category.FoodHousehold) is None
    assert counter.trigger(ReconcilableAccount.VISA, Category.VisaPayment) is None


def test_relationships_work_in_either_direction():
    assert counter.transaction_name(ReconcilableAccount.CashGBP, ReconcilableAccount.BofSPV) == "ATM Withdrawal"
    assert counter.transaction_name(ReconcilableAccount.AMEX, ReconcilableAccount.VISA) is None
    assert counter.suggested_counter(ReconcilableAccount.AMEX) is ReconcilableAccount.BofSPV
    assert counter.suggested_counter(ReconcilableAccount.CashEUR) is None
    assert len(counter.matches_for(ReconcilableAccount.BofSPV)) == 3


def test_build_counter_transaction(make_record):
    record = make_record(
        id=7,
        amount=Decimal("250.00"),
        category=Category.VisaPayment,
        payee="VISA DD",
        debit_credit=DebitCredit.DR,
        commission=Decimal("1.50"),
        closed=True,
    )
    draft = counter.build_counter_transaction(record, ReconcilableAccount.VISA)

    assert draft.id is None
    assert draft.account is ReconcilableAccount.VISA
    assert draft.amount == Decimal("-250.00")
    assert draft.debit_credit is DebitCredit.CR
    assert draft.payee == "VISA Payment"
    assert draft.commission == 0
    assert not draft.closed
    assert draft.transaction_date == record.transaction_date
    assert draft.payer is record.payer
    assert draft.category is Category.VisaPayment


def test_counter_takes_account_currency(make_record):
    record = make_record(amount=Decimal("100"), category=Category.ToYenCash, payee="FX")
    draft = counter.build_counter_transaction(record, ReconcilableAccount.CashYEN)

    assert draft.currency is Currency.JPY
    assert draft.payee == "FX"
