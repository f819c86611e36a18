"""Transaction listing, validation and management commands."""

import click
from accountshelper.domain.enums import Category, Currency
from accountshelper.domain.errors import DomainError
from accountshelper.domain.transaction import TransactionService
from accountshelper.domain.validation import validation_issues
from accountshelper.cli.error_handling import handle_domain_error
from accountshelper.cli.resolution import (
    parse_amount_or_exit,
    parse_date_or_exit,
    resolve_account_or_exit,
    resolve_category_or_exit,
    resolve_currency_or_exit,
    resolve_payer_or_exit,
)
from accountshelper.utils.amounts import format_amount


@click.command("list")
@click.option("--start-date", help="Start date (YYYY-MM-DD or relative like 'last month', 'this year')")
@click.option("--end-date", help="End date (YYYY-MM-DD or relative like 'today', 'this month')")
@click.option("--category", help="Category name")
@click.option("--account", help="Account name or code")
@click.option("--uncategorized", is_flag=True, help="Show only uncategorized transactions")
@click.option("--verbose", "-v", is_flag=True, help="Show all fields for each transaction")
@click.pass_context
def list_transactions(
    ctx,
    start_date: str | None,
    end_date: str | None,
    category: str | None,
    account: str | None,
    uncategorized: bool,
    verbose: bool,
):
    """View transactions with optional filters."""
    db = ctx.obj["db"]
    service = TransactionService(db)

    start = parse_date_or_exit(ctx, start_date, "start date") if start_date else None
    end = parse_date_or_exit(ctx, end_date, "end date") if end_date else None
    txn_account = resolve_account_or_exit(ctx, account) if account else None
    txn_category = resolve_category_or_exit(ctx, category) if category else None
    if uncategorized:
        txn_category = Category.unknown

    transactions = service.list_transactions(
        start_date=start, end_date=end, account=txn_account, category=txn_category
    )

    if not transactions:
        click.echo("No transactions found.")
        return

    click.echo(f"\nFound {len(transactions)} transaction(s):")
    if verbose:
        click.echo("=" * 100)
        for txn in transactions:
            click.echo(f"\nTransaction ID: {txn.id}{' (closed)' if txn.closed else ''}")
            click.echo(f"  Date: {txn.transaction_date}")
            click.echo(f"  Amount: {format_amount(txn.amount, txn.currency)} {txn.debit_credit.description}")
            if txn.currency is not Currency.GBP:
                click.echo(f"  Exchange rate: {txn.exchange_rate}")
                click.echo(f"  In GBP: {format_amount(txn.total_in_base_currency, Currency.GBP)}")
            click.echo(f"  Account: {txn.account.description}")
            click.echo(f"  Category: {txn.category.description}")
            if txn.is_split:
                click.echo(
                    f"  Split: {format_amount(txn.split_amount, txn.currency)} "
                    f"{txn.split_category.description}, remainder "
                    f"{format_amount(txn.split_remainder_amount, txn.currency)} "
                    f"{txn.split_remainder_category.description}"
                )
            click.echo(f"  Payer: {txn.payer.description}")
            if txn.payee:
                click.echo(f"  Payee: {txn.payee}")
            if txn.explanation:
                click.echo(f"  Explanation: {txn.explanation}")
            if txn.reference:
                click.echo(f"  Reference: {txn.reference}")
            click.echo("-" * 100)
    else:
        click.echo("-" * 100)
        click.echo(f"{'ID':<6} {'Date':<12} {'Amount':>14} {'Account':<12} {'Category':<18} {'Payee':<30}")
        click.echo("-" * 100)
        for txn in transactions:
            amount_str = format_amount(txn.amount, txn.currency)
            payee = (txn.payee or "")[:30]
            click.echo(
                f"{txn.id:<6} {str(txn.transaction_date):<12} {amount_str:>14} "
                f"{txn.account.description:<12} {txn.category.description:<18} {payee:<30}"
            )

    total_in_gbp = sum(txn.total_in_base_currency for txn in transactions)
    click.echo("-" * 100)
    click.echo(f"{'TOTAL':<6} {format_amount(total_in_gbp, Currency.GBP)} in GBP | Count: {len(transactions)}")


@click.command("validate")
@click.argument("transaction_ids", nargs=-1, type=int)
@click.pass_context
def validate_transactions(ctx, transaction_ids: tuple[int, ...]):
    """Show field-level problems for transactions.

    With no IDs, every transaction is checked. Exits with status 1 when any
    transaction is invalid.
    """
    db = ctx.obj["db"]
    service = TransactionService(db)

    if transaction_ids:
        transactions = []
        for txn_id in transaction_ids:
            txn = service.get_transaction(txn_id)
            if txn is None:
                click.echo(f"Error: Transaction {txn_id} not found", err=True)
                ctx.exit(1)
            transactions.append(txn)
    else:
        transactions = service.list_transactions()

    invalid = 0
    for txn in transactions:
        issues = validation_issues(txn)
        if not issues:
            continue
        invalid += 1
        click.echo(f"Transaction {txn.id}:")
        for issue in issues:
            click.echo(f"  - {issue.value}")

    if invalid:
        click.echo(f"{invalid} of {len(transactions)} transaction(s) invalid")
        ctx.exit(1)
    click.echo(f"All {len(transactions)} transaction(s) valid")


@click.group()
def transaction_group():
    """Manage transactions."""
    pass


@transaction_group.command("update")
@click.argument("transaction_id", type=int)
@click.option("--account", help="Account name or code")
@click.option("--date", "date_str", help="Transaction date")
@click.option("--amount", help="Signed amount")
@click.option("--currency", help="ISO currency code")
@click.option("--rate", help="Exchange rate into GBP")
@click.option("--category", help="Category name")
@click.option("--payer", help="Who paid")
@click.option("--payee", help="Payee text")
@click.option("--explanation", help="Free-text explanation")
@click.pass_context
def update_transaction(
    ctx,
    transaction_id: int,
    account: str | None,
    date_str: str | None,
    amount: str | None,
    currency: str | None,
    rate: str | None,
    category: str | None,
    payer: str | None,
    payee: str | None,
    explanation: str | None,
) -> None:
    """Update a transaction.

    Updates only the fields that are provided.

    Examples:
        accountshelper transaction update 1 --amount 75.00
        accountshelper transaction update 1 --category Travel --payer Tony
    """
    db = ctx.obj["db"]
    service = TransactionService(db)

    changes = {}
    if account is not None:
        changes["account"] = resolve_account_or_exit(ctx, account)
    if date_str is not None:
        changes["transaction_date"] = parse_date_or_exit(ctx, date_str)
    if amount is not None:
        changes["amount"] = parse_amount_or_exit(ctx, amount)
    if currency is not None:
        changes["currency"] = resolve_currency_or_exit(ctx, currency)
    if rate is not None:
        changes["exchange_rate"] = parse_amount_or_exit(ctx, rate, "exchange rate")
    if category is not None:
        changes["category"] = resolve_category_or_exit(ctx, category)
    if payer is not None:
        changes["payer"] = resolve_payer_or_exit(ctx, payer)
    if payee is not None:
        changes["payee"] = payee
    if explanation is not None:
        changes["explanation"] = explanation

    if not changes:
        click.echo("Nothing to update.")
        return

    try:
        service.update_transaction(transaction_id, **changes)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Updated transaction {transaction_id}")


@transaction_group.command("delete")
@click.argument("transaction_id", type=int)
@click.option("--yes", is_flag=True, help="Skip the confirmation prompt")
@click.pass_context
def delete_transaction(ctx, transaction_id: int, yes: bool) -> None:
    """Delete a transaction."""
    db = ctx.obj["db"]
    service = TransactionService(db)

    if service.get_transaction(transaction_id) is None:
        click.echo(f"Error: Transaction {transaction_id} not found", err=True)
        ctx.exit(1)

    if not yes and not click.confirm(f"Are you sure you want to delete transaction {transaction_id}?"):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_transaction(transaction_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted transaction {transaction_id}")


def register_commands(cli: click.Group) -> None:
    """Register transaction commands with main CLI."""
    cli.add_command(list_transactions)
    cli.add_command(validate_transactions)
    cli.add_command(transaction_group, name="transaction")
