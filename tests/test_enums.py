"""Tests for taxonomies and their persisted codes."""

from decimal import Decimal

from accountshelper.domain.enums import (
    Category,
    Currency,
    DebitCredit,
    Payer,
    ReconcilableAccount,
    ShowCurrencySymbols,
)


def test_unknown_code_is_99_everywhere():
    for enum_cls in (Currency, Category, DebitCredit, Payer, ReconcilableAccount):
        assert int(enum_cls.unknown) == 99


def test_from_code_falls_back_to_unknown():
    assert Currency.from_code(3) is Currency.JPY
    assert Currency.from_code(42) is Currency.unknown
    assert Category.from_code(None) is Category.unknown


def test_persisted_codes_are_stable():
    assert int(Category.FoodHousehold) == 8
    assert int(Category.OpeningBalance) == 28
    assert int(Payer.ACHelper) == 98
    assert int(ReconcilableAccount.BofSPV) == 7


def test_currency_symbols_and_digits():
    assert Currency.GBP.symbol == "£"
    assert Currency.JPY.minor_digits == 0
    assert Currency.unknown.iso_code == "XXX"
    assert Currency.from_string(" usd ") is Currency.USD


def test_category_from_string_is_case_insensitive():
    assert Category.from_string("foodhousehold") is Category.FoodHousehold
    assert Category.from_string("nope") is Category.unknown


def test_payer_aliases():
    assert Payer.from_string("ANTHONY J STANNERS") is Payer.tony
    assert Payer.from_string("Yokko") is Payer.yokko
    assert Payer.from_string("someone") is Payer.unknown
    assert Payer.tony.description == "Tony"


def test_debit_credit_for_amount_and_flip():
    assert DebitCredit.for_amount(Decimal("1")) is DebitCredit.DR
    assert DebitCredit.for_amount(Decimal("-1")) is DebitCredit.CR
    assert DebitCredit.for_amount(Decimal("0")) is DebitCredit.unknown
    assert DebitCredit.DR.flipped() is DebitCredit.CR
    assert DebitCredit.unknown.flipped() is DebitCredit.unknown


def test_account_metadata():
    assert ReconcilableAccount.CashYEN.currency is Currency.JPY
    assert ReconcilableAccount.BofSPV.code == "BOFS_PV"
    assert ReconcilableAccount.from_string("bofs pv") is ReconcilableAccount.BofSPV
    assert ReconcilableAccount.from_string("CASH_GBP") is ReconcilableAccount.CashGBP
    assert ReconcilableAccount.from_string("VISA") is ReconcilableAccount.VISA


def test_show_currency_symbols():
    assert ShowCurrencySymbols.ALWAYS.show(Currency.GBP)
    assert not ShowCurrencySymbols.NEVER.show(Currency.USD)
    assert not ShowCurrencySymbols.WHEN_NOT_GBP.show(Currency.GBP)
    assert ShowCurrencySymbols.WHEN_NOT_GBP.show(Currency.JPY)
