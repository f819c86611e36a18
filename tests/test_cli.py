"""Tests for CLI commands."""

from datetime import date
from decimal import Decimal

import pytest

from accountshelper.cli.main import cli
from accountshelper.database.factories import create_sqlite_database
from accountshelper.domain.enums import Category, Currency, Payer, ReconcilableAccount


def _invoke(cli_runner, temp_db, *args):
    return cli_runner.invoke(cli, ["--db-path", temp_db.database_path, *args])


def _reload(temp_db):
    """Open a fresh connection so changes made by the CLI are visible."""
    return create_sqlite_database(database_path=temp_db.database_path)


def test_help_does_not_need_database(cli_runner):
    result = cli_runner.invoke(cli, ["--help"])
    assert result.exit_code == 0
    assert "reconcile" in result.output


def test_add_transaction_minimal(cli_runner, temp_db):
    result = _invoke(
        cli_runner, temp_db, "add", "--account", "BofS PV", "--date", "2025-09-01", "--amount", "45.00"
    )

    assert result.exit_code == 0
    assert "Created transaction 1" in result.output
    assert "Amount: £45.00" in result.output


def test_add_transaction_foreign_currency(cli_runner, temp_db):
    result = _invoke(
        cli_runner,
        temp_db,
        "add",
        "--account",
        "CASH_YEN",
        "--date",
        "2025-09-01",
        "--amount",
        "3000",
        "--currency",
        "JPY",
        "--rate",
        "0.0052",
    )

    assert result.exit_code == 0
    assert "¥3,000" in result.output
    assert "In GBP: £15.60" in result.output


def test_add_transaction_unknown_account(cli_runner, temp_db):
    result = _invoke(cli_runner, temp_db, "add", "--account", "Piggy Bank", "--date", "today", "--amount", "1")
    assert result.exit_code == 1
    assert "Unknown account 'Piggy Bank'" in result.output


def test_add_transaction_invalid_amount(cli_runner, temp_db):
    result = _invoke(cli_runner, temp_db, "add", "--account", "VISA", "--date", "today", "--amount", "lots")
    assert result.exit_code == 1
    assert "Invalid amount" in result.output


def test_add_with_auto_categorize(cli_runner, temp_db):
    _invoke(cli_runner, temp_db, "mapping", "teach", "tesco", "FoodHousehold")
    result = _invoke(
        cli_runner,
        temp_db,
        "add",
        "--account",
        "VISA",
        "--date",
        "2025-09-01",
        "--amount",
        "12",
        "--payee",
        "Tesco Extra",
        "--auto-categorize",
    )

    assert result.exit_code == 0
    assert "Category: FoodHousehold" in result.output


def test_add_suggests_counter_transaction(cli_runner, temp_db):
    args = ["add", "--account", "BofS PV", "--date", "2025-09-01", "--amount", "250", "--category", "VisaPayment"]

    result = _invoke(cli_runner, temp_db, *args)
    assert "Suggested counter transaction on VISA" in result.output

    result = _invoke(cli_runner, temp_db, *args, "--with-counter")
    assert result.exit_code == 0
    assert "Created counter transaction" in result.output

    visa = _reload(temp_db).list_transactions(account=ReconcilableAccount.VISA)
    assert [t.amount for t in visa] == [Decimal("-250.00")]
    assert visa[0].payee == "VISA Payment"


def test_add_warns_about_duplicates(cli_runner, temp_db):
    args = ["add", "--account", "AMEX", "--date", "2025-09-01", "--amount", "9.99"]
    _invoke(cli_runner, temp_db, *args)
    result = _invoke(cli_runner, temp_db, *args)
    assert "Warning: 1 similar transaction(s) already recorded" in result.output


def test_list_transactions(cli_runner, temp_db, transaction_service):
    transaction_service.create_transaction(
        amount=Decimal("10"), account=ReconcilableAccount.VISA, transaction_date=date(2025, 9, 1), payee="Boots"
    )

    result = _invoke(cli_runner, temp_db, "list")
    assert result.exit_code == 0
    assert "Found 1 transaction(s)" in result.output
    assert "Boots" in result.output

    result = _invoke(cli_runner, temp_db, "list", "--account", "AMEX")
    assert "No transactions found." in result.output


def test_categorize_multiple(cli_runner, temp_db, transaction_service):
    ids = [
        transaction_service.create_transaction(amount=Decimal(n), account=ReconcilableAccount.VISA)
        for n in ("1", "2")
    ]

    result = _invoke(cli_runner, temp_db, "categorize", str(ids[0]), str(ids[1]), "999", "Travel")

    assert result.exit_code == 1
    assert "Results: 2 succeeded, 1 failed" in result.output
    categories = {t.category for t in _reload(temp_db).list_transactions()}
    assert categories == {Category.Travel}


def test_categorize_unknown_category(cli_runner, temp_db):
    result = _invoke(cli_runner, temp_db, "categorize", "1", "Yachts")
    assert result.exit_code == 1
    assert "Unknown category 'Yachts'" in result.output


def test_validate_reports_issues(cli_runner, temp_db, transaction_service):
    transaction_service.create_transaction(
        amount=Decimal("10"), account=ReconcilableAccount.VISA, transaction_date=date(2025, 9, 1)
    )

    result = _invoke(cli_runner, temp_db, "validate")

    assert result.exit_code == 1
    assert "category must be set" in result.output
    assert "payee must be non-empty" in result.output


def test_mapping_commands(cli_runner, temp_db):
    result = _invoke(cli_runner, temp_db, "mapping", "teach", "Shell", "TransportPetrol")
    assert result.exit_code == 0
    assert "Mapped 'shell' to TransportPetrol" in result.output

    result = _invoke(cli_runner, temp_db, "mapping", "match", "SHELL GARAGE 42")
    assert "-> TransportPetrol" in result.output

    result = _invoke(cli_runner, temp_db, "mapping", "match", "nothing like it")
    assert "No mapping matches" in result.output

    result = _invoke(cli_runner, temp_db, "mapping", "list")
    assert "shell" in result.output
    assert _reload(temp_db).list_category_mappings()[0].usage_count == 1


def test_mapping_reapply(cli_runner, temp_db, transaction_service):
    transaction_service.create_transaction(
        amount=Decimal("30"), account=ReconcilableAccount.VISA, payee="Shell Garage"
    )
    _invoke(cli_runner, temp_db, "mapping", "teach", "shell", "TransportPetrol")

    result = _invoke(cli_runner, temp_db, "mapping", "reapply")
    assert result.exit_code == 0
    assert "Categorized 1 transaction(s)" in result.output


def test_reconcile_workflow(cli_runner, temp_db, transaction_service):
    transaction_service.create_transaction(
        amount=Decimal("-30"),
        account=ReconcilableAccount.AMEX,
        transaction_date=date(2025, 9, 5),
        category=Category.FoodHousehold,
        payee="Refund",
        payer=Payer.tony,
    )

    result = _invoke(
        cli_runner, temp_db, "reconcile", "create", "--account", "AMEX",
        "--statement-date", "2025-09-30", "--balance", "30",
    )
    assert result.exit_code == 0
    assert "AMEX September 2025" in result.output

    recs = _reload(temp_db).list_reconciliations(account=ReconcilableAccount.AMEX)
    baseline, september = recs

    result = _invoke(cli_runner, temp_db, "reconcile", "show", str(september.id))
    assert result.exit_code == 0
    assert "Ending balance:" in result.output
    assert "the previous period is still open" in result.output

    result = _invoke(cli_runner, temp_db, "reconcile", "close", str(september.id))
    assert result.exit_code == 1
    assert "Cannot close reconciliation 2025-09-AMEX" in result.output

    assert _invoke(cli_runner, temp_db, "reconcile", "close", str(baseline.id)).exit_code == 0
    result = _invoke(cli_runner, temp_db, "reconcile", "close", str(september.id))
    assert result.exit_code == 0
    assert "Closed 2025-09-AMEX" in result.output

    result = _invoke(cli_runner, temp_db, "reconcile", "list")
    assert "closed" in result.output

    result = _invoke(cli_runner, temp_db, "reconcile", "reopen", str(baseline.id))
    assert result.exit_code == 1

    result = _invoke(cli_runner, temp_db, "reconcile", "reopen", str(september.id))
    assert result.exit_code == 0


def test_reconcile_close_missing(cli_runner, temp_db):
    result = _invoke(cli_runner, temp_db, "reconcile", "close", "42")
    assert result.exit_code == 1
    assert "Reconciliation 42 not found" in result.output


def test_summary(cli_runner, temp_db, transaction_service):
    transaction_service.create_transaction(
        amount=Decimal("35.50"),
        account=ReconcilableAccount.VISA,
        transaction_date=date(2025, 9, 5),
        category=Category.FoodHousehold,
        split_category=Category.Maintenance,
        split_amount=Decimal("14.50"),
    )

    result = _invoke(cli_runner, temp_db, "summary", "--period", "2025-09")
    assert result.exit_code == 0
    assert "FoodHousehold" in result.output
    assert "£35.50" in result.output
    assert "Maintenance" not in result.output

    result = _invoke(cli_runner, temp_db, "summary", "--period", "2025-09", "--include-splits")
    assert "Maintenance" in result.output
    assert "£14.50" in result.output
    assert "£21.00" in result.output



def test_summary_with_splits_totals_include_commission(cli_runner, temp_db, transaction_service):
    transaction_service.create_transaction(
        amount=Decimal("20"),
        account=ReconcilableAccount.VISA,
        transaction_date=date(2025, 9, 5),
        currency=Currency.USD,
        exchange_rate=Decimal("0.75"),
        commission=Decimal("1"),
        category=Category.FoodHousehold,
    )

    result = _invoke(cli_runner, temp_db, "summary", "--period", "2025-09", "--include-splits")
    assert result.exit_code == 0
    assert "£15.00" in result.output
    debits = next(line for line in result.output.splitlines() if line.startswith("Debits"))
    assert debits.endswith("£16.00")

def test_summary_rejects_mixed_filters(cli_runner, temp_db):
    result = _invoke(cli_runner, temp_db, "summary", "--period", "this-month", "--start-date", "today")
    assert result.exit_code == 1


def test_summary_unknown_period(cli_runner, temp_db):
    result = _invoke(cli_runner, temp_db, "summary", "--period", "fortnight")
    assert result.exit_code == 1
    assert "Error: Unknown period: 'fortnight'" in result.output
