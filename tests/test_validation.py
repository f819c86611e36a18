"""Tests for transaction validation rules."""

from datetime import date
from decimal import Decimal

import pytest

from accountshelper.domain import validation
from accountshelper.domain.enums import Category, Currency, DebitCredit, Payer, ReconcilableAccount
from accountshelper.domain.validation import ValidationIssue, validation_issues

NOW = date(2025, 9, 30)


def test_valid_record_has_no_issues(make_record):
    record = make_record()
    assert validation_issues(record, now=NOW) == []
    assert record.is_valid(now=NOW)


@pytest.mark.parametrize(
    "overrides,issue",
    [
        ({"amount": Decimal("0")}, ValidationIssue.AMOUNT_ZERO),
        ({"category": Category.unknown}, ValidationIssue.CATEGORY_UNKNOWN),
        ({"currency": Currency.unknown}, ValidationIssue.CURRENCY_UNKNOWN),
        ({"debit_credit": DebitCredit.unknown}, ValidationIssue.DEBIT_CREDIT_UNKNOWN),
        ({"payee": ""}, ValidationIssue.PAYEE_EMPTY),
        ({"payee": None}, ValidationIssue.PAYEE_EMPTY),
        ({"payer": Payer.unknown}, ValidationIssue.PAYER_UNKNOWN),
        ({"account": ReconcilableAccount.unknown}, ValidationIssue.ACCOUNT_UNKNOWN),
        ({"transaction_date": date(2025, 10, 1)}, ValidationIssue.DATE_IN_FUTURE),
    ],
)
def test_each_rule_reports_its_issue(make_record, overrides, issue):
    record = make_record(**overrides)
    assert validation_issues(record, now=NOW) == [issue]
    assert not record.is_valid(now=NOW)


def test_is_valid_is_conjunction_of_rules(make_record):
    records = [
        make_record(),
        make_record(amount=Decimal("0"), payee=""),
        make_record(currency=Currency.JPY, exchange_rate=Decimal("0")),
        make_record(split_amount=Decimal("2"), split_category=Category.unknown),
    ]
    for record in records:
        expected = all(
            [
                validation.is_amount_valid(record),
                validation.is_category_valid(record),
                validation.is_currency_valid(record),
                validation.is_exchange_rate_valid(record),
                validation.is_debit_credit_valid(record),
                validation.is_payee_valid(record),
                validation.is_payer_valid(record),
                validation.is_account_valid(record),
                not record.is_split or validation.is_split_category_valid(record),
                not record.is_split or validation.is_split_remainder_category_valid(record),
                validation.is_transaction_date_valid(record, now=NOW),
            ]
        )
        assert record.is_valid(now=NOW) == expected


def test_today_is_not_in_the_future(make_record):
    assert make_record(transaction_date=NOW).is_transaction_date_valid(now=NOW)


def test_missing_date_is_valid(make_record):
    assert make_record(transaction_date=None).is_transaction_date_valid(now=NOW)


class TestExchangeRate:
    """Tests for the exchange rate rule."""

    def test_gbp_is_exempt(self, make_record):
        assert make_record(exchange_rate=Decimal("0")).is_exchange_rate_valid()

    def test_zero_rate_invalid_for_foreign_currency(self, make_record):
        assert not make_record(currency=Currency.USD, exchange_rate=Decimal("0")).is_exchange_rate_valid()

    def test_jpy_rate_must_stay_below_300(self, make_record):
        assert make_record(currency=Currency.JPY, exchange_rate=Decimal("299.99")).is_exchange_rate_valid()
        assert not make_record(currency=Currency.JPY, exchange_rate=Decimal("300")).is_exchange_rate_valid()

    def test_other_currencies_have_no_upper_bound(self, make_record):
        assert make_record(currency=Currency.USD, exchange_rate=Decimal("500")).is_exchange_rate_valid()


class TestSplitRules:
    """Tests for split-specific rules."""

    def test_unsplit_record_ignores_split_categories(self, make_record):
        record = make_record(split_category=Category.unknown)
        assert ValidationIssue.SPLIT_CATEGORY_UNKNOWN not in validation_issues(record, now=NOW)

    def test_split_needs_split_category(self, make_record):
        record = make_record(split_amount=Decimal("4"))
        assert validation_issues(record, now=NOW) == [ValidationIssue.SPLIT_CATEGORY_UNKNOWN]

    def test_split_needs_remainder_category(self, make_record):
        record = make_record(
            category=Category.unknown,
            split_amount=Decimal("4"),
            split_category=Category.Wine,
        )
        assert validation_issues(record, now=NOW) == [
            ValidationIssue.CATEGORY_UNKNOWN,
            ValidationIssue.SPLIT_REMAINDER_CATEGORY_UNKNOWN,
        ]

    def test_split_amount_rule_is_separate(self, make_record):
        record = make_record(split_amount=Decimal("20"), split_category=Category.Wine)
        assert not record.is_split_amount_valid()
        assert record.is_valid(now=NOW)
