"""Tests for domain entities."""

import dataclasses
from datetime import date
from decimal import Decimal

import pytest

from accountshelper.domain.entities import AccountingPeriod, Reconciliation, make_period_key
from accountshelper.domain.enums import Category, Currency, ReconcilableAccount
from accountshelper.domain.errors import ValidationError


class TestTransactionRecord:
    """Tests for TransactionRecord derived values."""

    def test_records_are_immutable(self, make_record):
        record = make_record()
        with pytest.raises(dataclasses.FrozenInstanceError):
            record.amount = Decimal("1")

    def test_base_currency_amount_multiplies_rate(self, make_record):
        record = make_record(currency=Currency.JPY, amount=Decimal("3000"), exchange_rate=Decimal("0.0052"))
        assert record.amount_in_base_currency == Decimal("15.6")

    def test_total_includes_commission_and_rounds_half_up(self, make_record):
        record = make_record(
            currency=Currency.USD,
            amount=Decimal("10.01"),
            exchange_rate=Decimal("0.5"),
            commission=Decimal("1.00"),
        )
        # 10.01 * 0.5 = 5.005 -> 6.005 -> 6.01
        assert record.total_in_base_currency == Decimal("6.01")

    def test_split_portions(self, make_record):
        record = make_record(
            amount=Decimal("35.50"),
            split_amount=Decimal("14.50"),
            split_category=Category.Maintenance,
            commission=Decimal("0.25"),
        )
        assert record.is_split
        assert record.split_remainder_amount == Decimal("21.00")
        assert record.split_amount_in_base_currency == Decimal("14.75")
        assert record.split_remainder_amount_in_base_currency == Decimal("21.00")

    def test_remainder_category_defaults_to_main_category(self, make_record):
        assert make_record().split_remainder_category is Category.FoodHousehold
        record = make_record(remainder_category=Category.Wine)
        assert record.split_remainder_category is Category.Wine


class TestAccountingPeriod:
    """Tests for AccountingPeriod."""

    def test_display_string(self):
        assert AccountingPeriod(2025, 9).display_string == "September 2025"
        assert str(AccountingPeriod(2025, 9)) == "September 2025"

    def test_opening_balance_display(self):
        period = AccountingPeriod(1, 1)
        assert period.is_opening_balance
        assert period.display_string == "Opening Balances"

    def test_month_is_clamped_for_display(self):
        assert AccountingPeriod(2025, 13).display_string == "December 2025"

    def test_short_description(self):
        assert AccountingPeriod(2025, 9).short_description == "9/2025"

    def test_parse(self):
        assert AccountingPeriod.parse("2025-09") == AccountingPeriod(2025, 9)
        assert AccountingPeriod.parse("opening").is_opening_balance

    @pytest.mark.parametrize("text", ["2025", "2025-13", "sept"])
    def test_parse_rejects_bad_input(self, text):
        with pytest.raises(ValidationError):
            AccountingPeriod.parse(text)

    def test_containing(self):
        assert AccountingPeriod.containing(date(2025, 2, 28)) == AccountingPeriod(2025, 2)


class TestReconciliation:
    """Tests for Reconciliation."""

    def test_period_key(self):
        key = make_period_key(AccountingPeriod(2025, 9), ReconcilableAccount.BofSPV)
        assert key == "2025-09-BOFS_PV"

    def test_opening_balance_detected_from_statement_date(self):
        rec = Reconciliation(
            id=1,
            account=ReconcilableAccount.CashGBP,
            period=AccountingPeriod(1, 1),
            statement_date=date(1, 1, 1),
            statement_ending_balance=Decimal("0"),
            currency=Currency.GBP,
        )
        assert rec.is_opening_balance
        later = dataclasses.replace(rec, statement_date=date(2025, 9, 30))
        assert not later.is_opening_balance


@pytest.mark.parametrize(
    "amount,split",
    [("35.50", "14.50"), ("-10.01", "-3.33"), ("0", "0"), ("1000", "999.99")],
)
def test_split_remainder_plus_split_is_amount(make_record, amount, split):
    record = make_record(amount=Decimal(amount), split_amount=Decimal(split))
    assert record.split_remainder_amount + record.split_amount == record.amount
